# -*- coding: utf-8 -*-
"""
Calibrated clique tree of a linear chain: forward/backward in log space over
the per position potential matrices, answering marginal and conditional
queries for one document under one set of weights.

logM[i][yt, yt-1] is the log potential of labels (yt-1, yt) at position i.
The chain is anchored on the background label at position -1, so the edge
clique of position 0 pairs the background label with the first label.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import numpy
from scipy.special import logsumexp

from .errors import ConfigurationError, WeightIndexError


def logdotexp_vec_mat(loga, logM):
    return logsumexp(loga + logM, axis=1)


def logdotexp_mat_vec(logM, logb):
    return logsumexp(logM + logb[:, numpy.newaxis], axis=0)


def logNormalize(v):
    '''log-normalise the last axis; rows that are all -inf become all -inf'''
    z = logsumexp(v, axis=-1, keepdims=True)
    with numpy.errstate(invalid='ignore'):
        out = v - z
    out[numpy.isneginf(z).repeat(v.shape[-1], axis=-1)] = -numpy.inf
    return out


def logMarray(doc, weights, space, featureMap):
    ''' logMlist (n, K, K ) --> (sequence length, Yt, Yt-1), unanchored'''
    K = space.num_classes
    mlist = numpy.zeros((len(doc), K, K))
    for li, pos in enumerate(doc.data):
        fv = mlist[li]
        node = numpy.zeros(K)
        for j, fs in enumerate(pos):
            if j >= space.window:
                raise ConfigurationError("position %d has features of clique order %d, window is %d"
                                         % (li, j, space.window))
            vals = doc.values(li, j)
            for f, v in zip(fs, vals):
                if f >= len(weights):
                    raise WeightIndexError(f, 0, j, 0)
                w = weights[f]
                if len(w) != space.size(j) or featureMap[f] != j:
                    raise WeightIndexError(f, space.size(j) - 1, j, len(w))
                if j == 0:
                    node[space.node_classes] += v * w
                else:
                    fv[space.edge_curr, space.edge_prev] += w
        fv += node[:, numpy.newaxis]
    return mlist


def logAlphas(Mlist, y0):
    logalpha = Mlist[0][:, y0]  # alpha(1)
    logalphas = [logalpha]
    for logM in Mlist[1:]:
        logalpha = logdotexp_vec_mat(logalpha, logM)
        logalphas.append(logalpha)
    return logalphas


def logBetas(Mlist):
    logbeta = numpy.zeros_like(Mlist[-1][:, 0])
    logbetas = [logbeta]
    for logM in Mlist[-1:0:-1]:
        logbeta = logdotexp_mat_vec(logM, logbeta)
        logbetas.append(logbeta)
    return logbetas[::-1]


class CliqueTree(object):

    def __init__(self, doc, logMlist, space, start=None):
        self.space = space
        self.window = space.window
        self.n = len(doc)
        K = space.num_classes
        # the label before position 0: background, or a self-training seed
        y0 = space.background if start is None else start
        self.start = y0
        self.logMlist = logMlist
        self.logalphas = logAlphas(logMlist, y0) if self.n else []
        self.logbetas = logBetas(logMlist) if self.n else []
        self.logZ = logsumexp(self.logalphas[-1]) if self.n else 0.0
        self.logStart = numpy.full(K, -numpy.inf)
        self.logStart[y0] = 0.0

        # node[i][y], edge[i][y_prev, y_curr], log space
        self.lognode = numpy.empty((self.n, K))
        self.logedge = numpy.empty((self.n, K, K))
        for i in range(self.n):
            self.lognode[i] = self.logalphas[i] + self.logbetas[i] - self.logZ
            if i == 0:
                edge = numpy.full((K, K), -numpy.inf)
                edge[y0] = logMlist[0][:, y0] + self.logbetas[0] - self.logZ
            else:
                edge = (logMlist[i] + self.logalphas[i - 1][numpy.newaxis, :]
                        + self.logbetas[i][:, numpy.newaxis] - self.logZ).T
            self.logedge[i] = edge

    @classmethod
    def calibrate(cls, doc, weights, space, featureMap, start=None):
        return cls(doc, logMarray(doc, weights, space, featureMap), space, start)

    def logProbStartPos(self):
        '''log probability of the context label the chain starts in'''
        return self.logStart[self.start] - logsumexp(self.logStart)

    def condLogProbGivenPrevious(self, position, label, given):
        '''log P(label at position | the window of labels before it)'''
        if self.window == 1 or len(given) == 0:
            return self.lognode[position][label]
        prev = given[-1]
        scores = self.logMlist[position][:, prev] + self.logbetas[position]
        return scores[label] - logsumexp(scores)

    def logProb(self, position, label):
        label = tuple(label)
        if len(label) == 1:
            return self.lognode[position][label[0]]
        return self.logedge[position][label[0], label[1]]

    def prob(self, position, label):
        return numpy.exp(self.logProb(position, label))

    def nodeMarginals(self, position):
        '''probabilities of every node label, in node label index order'''
        return numpy.exp(self.lognode[position][self.space.node_classes])

    def edgeMarginals(self, position):
        '''probabilities of every edge label, in edge label index order'''
        return numpy.exp(self.logedge[position][self.space.edge_prev, self.space.edge_curr])

    def marginals(self, position, order):
        if order == 0:
            return self.nodeMarginals(position)
        return self.edgeMarginals(position)
