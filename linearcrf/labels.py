# -*- coding: utf-8 -*-
"""
Clique label alphabets.

A clique of order j covers j+1 consecutive positions; its labels are tuples of
j+1 class indices, oldest first.  label_indices[j] enumerates the labels a
feature of order j can carry weights for.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import itertools

import numpy

from .errors import ConfigurationError


class CRFLabel(object):
    __slots__ = ('label',)

    def __init__(self, label):
        self.label = tuple(int(y) for y in label)

    def __eq__(self, other):
        return isinstance(other, CRFLabel) and self.label == other.label

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self.label)

    def __len__(self):
        return len(self.label)

    def __getitem__(self, i):
        return self.label[i]

    def __repr__(self):
        return "CRFLabel%r" % (self.label,)


class LabelIndex(object):
    '''append only enumeration of CRFLabels'''

    def __init__(self, labels=()):
        self._labels = []
        self._index = {}
        for label in labels:
            self.add(label)

    @classmethod
    def all_labels(cls, num_classes, order):
        '''every label tuple of a clique of this order, in lexicographic order'''
        return cls(itertools.product(range(num_classes), repeat=order + 1))

    def add(self, label):
        if not isinstance(label, CRFLabel):
            label = CRFLabel(label)
        idx = self._index.get(label)
        if idx is None:
            idx = len(self._labels)
            self._labels.append(label)
            self._index[label] = idx
        return idx

    def index_of(self, label):
        if not isinstance(label, CRFLabel):
            label = CRFLabel(label)
        return self._index.get(label, -1)

    def get(self, idx):
        return self._labels[idx]

    def __len__(self):
        return len(self._labels)

    def __iter__(self):
        return iter(self._labels)

    def __contains__(self, label):
        return self.index_of(label) != -1


class LabelSpace(object):
    '''The label alphabets of every clique order plus the lookup arrays the
    clique tree, the expected counts and the dropout recursion index with.

    node_classes[k]  class of node label k
    node_slot[c]     node label index of class c (-1 if absent)
    edge_prev[k], edge_curr[k]   classes of edge label k
    edge_mask[a, b]  True if (a, b) is an edge label
    '''

    def __init__(self, label_indices, classes, background):
        if len(label_indices) < 1:
            raise ConfigurationError("at least the node label index is required")
        if len(label_indices) > 2:
            raise ConfigurationError(
                "window %d is not supported, only node and edge cliques are" % len(label_indices))
        self.label_indices = list(label_indices)
        self.classes = list(classes)
        self.num_classes = len(self.classes)
        self.window = len(self.label_indices)
        if background not in self.classes:
            raise ConfigurationError("background symbol %r is not a class" % (background,))
        self.background_symbol = background
        self.background = self.classes.index(background)
        K = self.num_classes

        nodes = self.label_indices[0]
        for label in nodes:
            if len(label) != 1 or not 0 <= label[0] < K:
                raise ConfigurationError("bad node label %r" % (label,))
        self.node_classes = numpy.array([label[0] for label in nodes], dtype=int)
        self.node_slot = numpy.full(K, -1, dtype=int)
        self.node_slot[self.node_classes] = numpy.arange(len(nodes))

        self.edge_prev = self.edge_curr = None
        self.edge_mask = numpy.zeros((K, K), dtype=bool)
        if self.window > 1:
            edges = self.label_indices[1]
            for label in edges:
                if len(label) != 2 or not (0 <= label[0] < K and 0 <= label[1] < K):
                    raise ConfigurationError("bad edge label %r" % (label,))
            self.edge_prev = numpy.array([label[0] for label in edges], dtype=int)
            self.edge_curr = numpy.array([label[1] for label in edges], dtype=int)
            self.edge_mask[self.edge_prev, self.edge_curr] = True

    @classmethod
    def full(cls, classes, background, window=2):
        '''every label combination of every order allowed'''
        K = len(classes)
        return cls([LabelIndex.all_labels(K, j) for j in range(window)], classes, background)

    def size(self, order):
        return len(self.label_indices[order])

    @property
    def has_edges(self):
        return self.window > 1
