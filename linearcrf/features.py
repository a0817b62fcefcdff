# -*- coding: utf-8 -*-
"""
Per document feature activity: which features fire at each position, the
document's distinct active features, and the condensation map.

Condensation: node features that occur exactly once in a document, at the
same position and with the same magnitude, have identical expected counts and
identical dropout gradients for that document.  Only one representative of
each such group is carried through the expensive computations; its result is
copied to the others afterwards.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import collections
import logging

import numpy

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

NOT_CONDENSABLE = -1

DocFeatureHash = collections.namedtuple('DocFeatureHash', 'positions active condensed')
DocFeatureHash.__doc__ = '''positions  list of sets, features to evaluate at each position
active     sorted int array of the features evaluated anywhere in the document
condensed  dict representative -> list of features condensed into it'''


def docFeatureHash(doc, condense=True):
    positions = []
    occurPos = {}  # feature -> its only node position, or NOT_CONDENSABLE
    for i, pos in enumerate(doc.data):
        aset = set()
        for j, fs in enumerate(pos):
            for f in fs:
                if j == 0:
                    if f in occurPos:
                        occurPos[f] = NOT_CONDENSABLE
                    else:
                        occurPos[f] = i
                else:
                    occurPos[f] = NOT_CONDENSABLE
                aset.add(f)
        positions.append(aset)
    features = set().union(*positions) if positions else set()

    condensed = {}
    if condense:
        represent = {}  # (position, value) -> representative
        for f, i in occurPos.items():
            if i == NOT_CONDENSABLE:
                continue
            key = (i, doc.node_value(i, f))
            rep = represent.get(key)
            if rep is None:
                represent[key] = f
                condensed[f] = []
            else:
                condensed[rep].append(f)
                positions[i].discard(f)
                features.discard(f)
        condensed = dict((rep, fs) for rep, fs in condensed.items() if fs)

    active = numpy.array(sorted(features), dtype=int)
    return DocFeatureHash(positions, active, condensed)


def buildFeatureIndex(docs, condense=True):
    '''one DocFeatureHash per document, in order'''
    index = []
    macroActive = 0; macroCondensed = 0; macroPositions = 0
    for doc in docs:
        h = docFeatureHash(doc, condense)
        nconds = sum(len(fs) for fs in h.condensed.values())
        macroActive += len(h.active) + nconds
        macroCondensed += len(h.active)
        macroPositions += len(doc)
        index.append(h)
    if macroPositions > 0:
        logger.info("Avg. active features per position: %f", macroActive / float(macroPositions))
        logger.info("Avg. condensed features per position: %f", macroCondensed / float(macroPositions))
    logger.info("initializing data feature hash done, %d documents", len(index))
    return index
