# -*- coding: utf-8 -*-
"""
Per document log likelihood and expected feature counts.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import collections
import logging
import time

import numpy

from .cliquetree import CliqueTree
from .dropout import dropoutPrior
from .empirical import alignLabels

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

DocResult = collections.namedtuple('DocResult', 'doc_index log_prob expected dropout_grad')


def sparseE(features, space, featureMap):
    '''feature -> zero vector sized by the feature's label index'''
    return dict((f, numpy.zeros(space.size(featureMap[f]))) for f in features)


def copyCondensed(table, condensed):
    for key, copies in condensed.items():
        for toCopyInto in copies:
            table[toCopyInto] = table[key].copy()


def startLabel(doc, space):
    '''the label before position 0 the chain is anchored on'''
    if space.window < 2 or not doc.supervised:
        return space.background
    context, labels = alignLabels(doc.labels, len(doc), space.window - 1, space.background)
    return context[-1]


def docLogProb(tree, doc, space):
    '''log P(labels | doc) read off the calibrated clique tree'''
    given, labels = alignLabels(doc.labels, len(doc), space.window - 1, space.background)
    prob = tree.logProbStartPos()
    for i in range(len(doc)):
        label = labels[i]
        prob += tree.condLogProbGivenPrevious(i, label, given)
        if given:
            given = given[1:] + [label]
    return prob


class DocumentEvaluator(object):
    '''Evaluates one document at a time against a fixed weight view.  Holds only
    read-only structure, so one instance serves every worker thread.'''

    def __init__(self, docs, featureIndex, space, featureMap, dropout=False,
                 delta=0.0, dropoutScale=1.0, dropoutApprox=False):
        self.docs = docs
        self.featureIndex = featureIndex
        self.space = space
        self.featureMap = featureMap
        self.dropout = dropout
        self.delta = delta
        self.dropoutScale = dropoutScale
        self.dropoutApprox = dropoutApprox

    def evaluate(self, weights, weightSquare, docIndex, computeValue=True,
                 computeExpectation=True, withDropout=True):
        doc = self.docs[docIndex]
        hashed = self.featureIndex[docIndex]
        space = self.space
        t0 = time.time()
        tree = CliqueTree.calibrate(doc, weights, space, self.featureMap, startLabel(doc, space))

        prob = 0.0
        if computeValue:
            prob += docLogProb(tree, doc, space)

        dropout = self.dropout and withDropout
        approx = dropout and self.dropoutApprox
        computeExpectation = computeExpectation or dropout
        E = sparseE(hashed.active, space, self.featureMap)
        EForADocPos = [] if approx else None
        if computeExpectation:
            for i, feats in enumerate(hashed.positions):
                marg = [tree.marginals(i, j) for j in range(space.window)]
                atI = {} if approx else None
                for f in feats:
                    j = self.featureMap[f]
                    p = marg[j] * doc.node_value(i, f) if j == 0 else marg[j]
                    E[f] += p
                    if approx:
                        atI[f] = p
                if approx:
                    EForADocPos.append(atI)
            copyCondensed(E, hashed.condensed)

        dropoutGrad = None
        if dropout:
            priorValue, dropoutGrad = dropoutPrior(
                tree, doc, hashed, weights, weightSquare, E, space, self.featureMap,
                self.delta, self.dropoutScale, approx, EForADocPos)
            prob -= priorValue

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("doc %d: %d positions, log prob %f, %.3fs",
                         docIndex, len(doc), prob, time.time() - t0)
        return DocResult(docIndex, prob, E, dropoutGrad)
