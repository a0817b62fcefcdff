# -*- coding: utf-8 -*-
"""
Dropout prior: a second order approximation of the effect of dropping every
feature independently with probability delta on the edge marginals of a
document.

For every edge position i >= 1 and edge label k = (y, y'), with
Pt = P(y_{i-1}=y, y_i=y') and USum the summed squared weights of the
parameters that fire for k at i:

    VarU   = 0.5 * delta/(1-delta) * USum
    value += VarU * Pt * (1 - Pt)

and its derivative

    VarU' * Pt * (1-Pt) + VarU * Pt' * (1 - 2*Pt)

where Pt' = Pt * (E[count | y, y'] - E[count]).  The conditional expected
count is the count at i itself plus what the forward table FAlpha (positions
before i, given y) and the backward table FBeta (positions after i, given y')
contribute.  Both tables are built from the neighbour conditionals
P(y_{i-1} | y_i) and P(y_{i+1} | y_i).

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import logging
import time

import numpy

from .cliquetree import logNormalize
from .errors import ConfigurationError, WeightIndexError

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class ZeroTable(object):
    '''sparse table keyed by (position, active feature slot).  A cell that was
    never stored is zero: get() returns None for it and callers skip its term.'''

    def __init__(self):
        self._cells = {}

    def get(self, i, slot):
        return self._cells.get((i, slot))

    def put(self, i, slot, cell):
        self._cells[(i, slot)] = cell

    def __len__(self):
        return len(self._cells)


def neighbourConditionals(tree):
    '''prevGivenCurr[i][y, y'] = P(y_{i-1}=y' | y_i=y)
       nextGivenCurr[i][y, y'] = P(y_{i+1}=y' | y_i=y)   (zero at the last position)'''
    n = tree.n
    K = tree.space.num_classes
    prevGivenCurr = numpy.exp(logNormalize(tree.logedge.transpose(0, 2, 1)))
    nextGivenCurr = numpy.zeros((n, K, K))
    if n > 1:
        nextGivenCurr[:-1] = numpy.exp(logNormalize(tree.logedge[1:]))
    return prevGivenCurr, nextGivenCurr


def forwardTable(positions, active, space, featureMap, prevGivenCurr):
    '''FAlpha[i][f][y, kk]: expected count of parameter kk of feature f over
    positions < i, given y at i-1'''
    n = len(positions)
    K = space.num_classes
    A = space.edge_mask.T  # [y at i-1, y' at i-2]
    FAlpha = ZeroTable()
    for i in range(1, n):
        PA = prevGivenCurr[i - 1] * A
        rowsum = PA.sum(axis=1)
        present = positions[i - 1]
        for fpos, f in enumerate(active):
            prev = FAlpha.get(i - 1, fpos)
            prevFeaturePresent = f in present
            if prev is None and not prevFeaturePresent:
                continue
            j = featureMap[f]
            size = space.size(j)
            cell = PA.dot(prev) if prev is not None else numpy.zeros((K, size))
            if prevFeaturePresent:
                if j == 0:
                    cell[space.node_classes, numpy.arange(size)] += rowsum[space.node_classes]
                else:
                    cell[space.edge_curr, numpy.arange(size)] += PA[space.edge_curr, space.edge_prev]
            FAlpha.put(i, fpos, cell)
    return FAlpha


def backwardTable(positions, active, space, featureMap, nextGivenCurr):
    '''FBeta[i][f][y, kk]: expected count of parameter kk of feature f over
    positions > i, given y at i'''
    n = len(positions)
    K = space.num_classes
    B = space.edge_mask  # [y at i, y' at i+1]
    FBeta = ZeroTable()
    for i in range(n - 2, -1, -1):
        NB = nextGivenCurr[i] * B
        present = positions[i + 1]
        for fpos, f in enumerate(active):
            nxt = FBeta.get(i + 1, fpos)
            nextFeaturePresent = f in present
            if nxt is None and not nextFeaturePresent:
                continue
            j = featureMap[f]
            size = space.size(j)
            cell = NB.dot(nxt) if nxt is not None else numpy.zeros((K, size))
            if nextFeaturePresent:
                if j == 0:
                    cell += NB[:, space.node_classes]
                else:
                    cell[space.edge_prev, numpy.arange(size)] += NB[space.edge_prev, space.edge_curr]
            FBeta.put(i, fpos, cell)
    return FBeta


def dropoutPrior(tree, doc, hashed, weights, weightSquare, expected, space, featureMap,
                 delta, dropoutScale=1.0, approx=False, expectedAtPos=None):
    '''returns (dropoutScale * prior value, gradient table) for one document.
    expected is the document's expected counts (condensed copies included);
    in approx mode expectedAtPos[i] replaces the forward/backward tables.'''
    if not space.has_edges:
        raise ConfigurationError("the dropout prior needs edge cliques (window >= 2)")
    positions, active, condensed = hashed
    n = len(doc)
    K = space.num_classes
    nodeSlots = space.node_slot[space.edge_curr]  # node parameter of y' for every edge label
    if (nodeSlots < 0).any():
        raise ConfigurationError("some edge label ends in a class missing from the node label index")
    t0 = time.time()

    prevGivenCurr, nextGivenCurr = neighbourConditionals(tree)
    FAlpha = FBeta = None
    if not approx:
        FAlpha = forwardTable(positions, active, space, featureMap, prevGivenCurr)
        FBeta = backwardTable(positions, active, space, featureMap, nextGivenCurr)
    t1 = time.time()

    c = delta / (1.0 - delta)
    priorValue = 0.0
    sizes = dict((f, space.size(featureMap[f])) for f in active)
    grad = dict((f, numpy.zeros(sizes[f])) for f in active)
    firstHalf = dict((f, numpy.zeros(sizes[f])) for f in active)

    for i in range(1, n):
        Pt = tree.edgeMarginals(i)
        PtTimesOneMinusPt = Pt * (1.0 - Pt)

        # first half of derivative: VarU' * Pt * (1-Pt)
        nodeSq = numpy.zeros(space.size(0))
        edgeSq = numpy.zeros(space.size(1))
        nodeMass = None
        for j, fs in enumerate(doc.data[i]):
            size = space.size(j)
            for f in fs:
                if f >= len(weights):
                    raise WeightIndexError(f, size - 1, j, 0)
                if len(weights[f]) != size:
                    raise WeightIndexError(f, size - 1, j, len(weights[f]))
                half = firstHalf.get(f)
                if half is None:
                    half = firstHalf[f] = numpy.zeros(size)
                if j == 0:
                    if nodeMass is None:
                        nodeMass = numpy.bincount(nodeSlots, weights=PtTimesOneMinusPt,
                                                  minlength=size)
                    nodeSq += weightSquare[f]
                    half += c * weights[f] * nodeMass
                else:
                    edgeSq += weightSquare[f]
                    half += c * weights[f] * PtTimesOneMinusPt

        USum = nodeSq[nodeSlots] + edgeSq
        VarU = 0.5 * c * USum
        priorValue += numpy.dot(VarU, PtTimesOneMinusPt)

        # second half of derivative: VarU * Pt' * (1 - 2*Pt), summed over the edge labels
        w = VarU * (1.0 - 2.0 * Pt) * Pt
        wsum = w.sum()
        wPrev = numpy.bincount(space.edge_prev, weights=w, minlength=K)
        wCurr = numpy.bincount(space.edge_curr, weights=w, minlength=K)
        present = positions[i]
        atI = expectedAtPos[i] if approx else None
        for fpos, f in enumerate(active):
            j = featureMap[f]
            g = grad[f]
            if f in present:
                if j == 0:
                    g += wCurr[space.node_classes]
                else:
                    g += w
            if approx:
                E = atI.get(f)
                if E is not None:
                    g -= wsum * E
            else:
                alpha = FAlpha.get(i, fpos)
                if alpha is not None:
                    g += wPrev.dot(alpha)
                beta = FBeta.get(i, fpos)
                if beta is not None:
                    g += wCurr.dot(beta)
                g -= wsum * expected[f]

    for key, copies in condensed.items():
        for toCopyInto in copies:
            grad[toCopyInto] = grad[key].copy()

    for key, source in firstHalf.items():
        target = grad.get(key)
        if target is None:
            grad[key] = source
        else:
            target += source

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("dropout: %d positions, %d active features, tables %.3fs, grad %.3fs",
                     n, len(active), t1 - t0, time.time() - t1)
    return dropoutScale * priorValue, grad
