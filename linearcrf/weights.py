# -*- coding: utf-8 -*-
"""
Flat <-> per feature weight vectors.

The optimiser sees one flat vector; feature f owns the slice
[offsets[f], offsets[f+1]) whose length is the size of the label index of
its clique order feature_map[f].

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import numpy

from .errors import WeightIndexError


class WeightLayout(object):

    def __init__(self, feature_map, space):
        self.feature_map = numpy.asarray(feature_map, dtype=int)
        self.space = space
        sizes = [space.size(j) for j in range(space.window)]
        self.sizes = numpy.array([sizes[j] for j in self.feature_map], dtype=int)
        self.offsets = numpy.zeros(len(self.sizes) + 1, dtype=int)
        numpy.cumsum(self.sizes, out=self.offsets[1:])
        self.domain_dimension = int(self.offsets[-1])
        self._weight_indices = None

    @property
    def num_features(self):
        return len(self.feature_map)

    def to_2d(self, x, wscale=None):
        '''list of per feature weight arrays.  The arrays are copies, x is never
        modified; wscale rescales the copies uniformly.'''
        x = numpy.asarray(x, dtype=float)
        if x.shape != (self.domain_dimension,):
            raise ValueError("weight vector has shape %r, expected (%d,)"
                             % (x.shape, self.domain_dimension))
        if wscale is not None:
            x = x * wscale
        off = self.offsets
        return [x[off[f]:off[f + 1]].copy() for f in range(self.num_features)]

    def to_1d(self, weights):
        if len(weights) == 0:
            return numpy.zeros(0)
        return numpy.concatenate(weights)

    def empty_2d(self):
        return [numpy.zeros(n) for n in self.sizes]

    def weight_indices(self):
        '''weight_indices()[f][k] = index of weights[f][k] in the flat vector'''
        if self._weight_indices is None:
            off = self.offsets
            self._weight_indices = [numpy.arange(off[f], off[f + 1])
                                    for f in range(self.num_features)]
        return self._weight_indices

    def check_slot(self, weights, f, slot):
        '''raise unless weights[f][slot] exists'''
        if f < 0 or f >= len(weights):
            raise WeightIndexError(f, slot, -1, 0)
        if slot < 0 or slot >= len(weights[f]):
            raise WeightIndexError(f, slot, int(self.feature_map[f]), len(weights[f]))
