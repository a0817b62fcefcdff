# -*- coding: utf-8 -*-
"""
Documents and the encoded corpus reader.

A document is a sequence of positions; position i holds, for every clique
order j, the ids of the features active there (data[i][j]).  Node features
(j == 0) may carry a real valued magnitude, everything else counts 1.0.

Encoded corpus file, one position per line, blank line between documents:

    LABEL N:3,7=0.5,12 E:40,41

LABEL "_" on every line of a document marks it unlabeled.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import codecs
import collections
import logging

import numpy

from .errors import ConfigurationError

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

UNLABELED = "_"


class Document(object):

    def __init__(self, data, labels=None, feature_vals=None):
        data = [tuple(tuple(int(f) for f in fs) for fs in pos) for pos in data]
        self.labels = None if labels is None else tuple(int(y) for y in labels)
        if feature_vals is not None and len(feature_vals) != len(data):
            raise ConfigurationError("feature values cover %d positions, data has %d"
                                     % (len(feature_vals), len(data)))
        # a node feature repeated at a position becomes one feature with the summed value
        weighted = feature_vals is not None
        merged = []; nodeValues = []
        for i, pos in enumerate(data):
            for fs in pos[1:]:
                if len(set(fs)) != len(fs):
                    raise ConfigurationError("position %d: repeated edge feature in %r" % (i, fs))
            vals = {}
            if len(pos) > 0:
                given = feature_vals[i][0] if feature_vals is not None else (1.0,) * len(pos[0])
                if len(given) != len(pos[0]):
                    raise ConfigurationError("position %d: %d node features, %d values"
                                             % (i, len(pos[0]), len(given)))
                for f, v in zip(pos[0], given):
                    vals[f] = vals.get(f, 0.0) + float(v)
                if len(vals) != len(pos[0]):
                    weighted = True
                pos = (tuple(vals),) + pos[1:]
            merged.append(pos)
            nodeValues.append(vals)
        self.data = tuple(merged)
        self.feature_vals = None
        self._node_values = None
        if weighted:
            self.feature_vals = tuple((tuple(vals.values()),) for vals in nodeValues)
            self._node_values = nodeValues

    def __len__(self):
        return len(self.data)

    @property
    def supervised(self):
        return self.labels is not None

    def values(self, i, j):
        '''magnitudes parallel to data[i][j]'''
        if j == 0 and self.feature_vals is not None:
            return self.feature_vals[i][0]
        return (1.0,) * len(self.data[i][j])

    def node_value(self, i, f):
        '''summed magnitude of node feature f at position i'''
        if self._node_values is None:
            return 1.0
        return self._node_values[i].get(f, 1.0)

    def __repr__(self):
        return "Document(len=%d, labeled=%s)" % (len(self.data), self.supervised)


Corpus = collections.namedtuple('Corpus', 'docs unsup_docs classes feature_map window')


def parseFeatures(field, lineno):
    '''"3,7=0.5,12" -> ([3, 7, 12], [1.0, 0.5, 1.0])'''
    fids = []; vals = []
    if len(field) == 0:
        return fids, vals
    for item in field.split(","):
        if "=" in item:
            fid, val = item.split("=", 1)
            vals.append(float(val))
        else:
            fid = item
            vals.append(1.0)
        try:
            fids.append(int(fid))
        except ValueError:
            raise ConfigurationError("line %d: bad feature id %r" % (lineno, fid))
    return fids, vals


def readData(dataFile, background="O", encoding="utf-8"):
    '''read an encoded corpus; returns a Corpus.  The background symbol is
    always class 0, other classes are numbered in order of appearance.'''
    classes = [background]
    obydic = {background: 0}
    nodefs = set(); edgefs = set()
    docs = []; unsup = []
    rows = []
    hasvals = False
    linecnt = 0

    def flush():
        if len(rows) == 0:
            return
        ylabels = [r[0] for r in rows]
        data = [(r[1], r[3]) if r[3] else (r[1],) for r in rows]
        fvals = [(r[2], [1.0] * len(r[3])) if r[3] else (r[2],) for r in rows]
        if all(y == UNLABELED for y in ylabels):
            labels = None
        elif any(y == UNLABELED for y in ylabels):
            raise ConfigurationError("document ending at line %d is partially labeled" % linecnt)
        else:
            labels = []
            for y in ylabels:
                if y not in obydic:
                    obydic[y] = len(classes)
                    classes.append(y)
                labels.append(obydic[y])
        doc = Document(data, labels, fvals if hasvals else None)
        (docs if labels is not None else unsup).append(doc)
        del rows[:]

    with codecs.open(dataFile, 'r', encoding) as fin:
        for line in fin:
            linecnt += 1
            line = line.strip()
            if len(line) == 0:
                flush()
                hasvals = False
                continue
            if line[0] == "#":
                continue
            chunk = line.split()
            node = ([], []); edge = ([], [])
            for field in chunk[1:]:
                if field.startswith("N:"):
                    node = parseFeatures(field[2:], linecnt)
                elif field.startswith("E:"):
                    edge = parseFeatures(field[2:], linecnt)
                else:
                    raise ConfigurationError("line %d: unknown field %r" % (linecnt, field))
            if any(v != 1.0 for v in edge[1]):
                raise ConfigurationError("line %d: only node features take values" % linecnt)
            if any(v != 1.0 for v in node[1]):
                hasvals = True
            nodefs.update(node[0]); edgefs.update(edge[0])
            rows.append((chunk[0], node[0], node[1], edge[0]))
            if linecnt % 10000 == 0:
                logger.info("read %d lines.", linecnt)
    flush()

    both = nodefs & edgefs
    if both:
        raise ConfigurationError("features used as both node and edge features: %s"
                                 % sorted(both)[:10])
    nfeatures = max(nodefs | edgefs) + 1 if (nodefs or edgefs) else 0
    featureMap = numpy.zeros(nfeatures, dtype=int)
    for f in edgefs:
        featureMap[f] = 1
    window = 2 if edgefs else 1
    logger.info("read %d labeled and %d unlabeled documents, %d classes, %d features",
                len(docs), len(unsup), len(classes), nfeatures)
    return Corpus(docs, unsup, classes, featureMap, window)
