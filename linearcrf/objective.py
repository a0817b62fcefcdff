# -*- coding: utf-8 -*-
"""
Negative conditional log likelihood of a linear chain CRF and its gradient,
with an optional prior, as a function of the flat weight vector.

    value      = -sum_docs log P(labels | doc) + prior
    derivative = E - Ehat + prior'

E are the model's expected feature counts, Ehat the empirical ones.  The
dropout prior is a per document penalty; auxiliary unlabeled documents only
contribute that penalty, scaled by unsupDropoutScale.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import logging
import time

import numpy

from .empirical import empiricalCounts, empiricalCountsForADoc
from .errors import ConfigurationError, NumericalError
from .expectation import DocumentEvaluator
from .features import buildFeatureIndex
from .labels import LabelSpace
from .prior import DROPOUT_PRIOR, applyPrior, priorType
from .scheduler import DocumentScheduler, mergeSparse
from .weights import WeightLayout

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

SMALL_CONST = 1e-6
DEFAULT_SEED = 2147483647


class CRFLogConditionalObjectiveFunction(object):

    def __init__(self, docs, labelIndices, featureMap, classes, background,
                 prior="QUADRATIC", sigma=1.0, epsilon=0.1, delta=0.0, dropoutScale=1.0,
                 numThreads=1, dropoutApprox=False, unsupDropoutScale=0.0,
                 unsupDocs=None, condense=True, seed=DEFAULT_SEED):
        self.prior = priorType(prior)
        if sigma <= 0:
            raise ConfigurationError("sigma must be positive, got %r" % (sigma,))
        if self.prior == DROPOUT_PRIOR and not 0.0 <= delta < 1.0:
            raise ConfigurationError("dropout delta must be in [0, 1), got %r" % (delta,))
        self.sigma = sigma
        self.epsilon = epsilon
        self.delta = delta
        self.dropoutScale = dropoutScale
        self.dropoutApprox = dropoutApprox
        self.unsupDropoutScale = unsupDropoutScale

        self.space = LabelSpace(labelIndices, classes, background)
        if self.prior == DROPOUT_PRIOR and not self.space.has_edges:
            raise ConfigurationError("the dropout prior needs edge cliques (window >= 2)")
        self.layout = WeightLayout(featureMap, self.space)
        self.featureMap = self.layout.feature_map
        self.window = self.space.window
        self.numClasses = self.space.num_classes

        self.data = list(docs)
        for m, doc in enumerate(self.data):
            if not doc.supervised:
                raise ConfigurationError("document %d has no labels" % m)
        unsupDocs = list(unsupDocs) if unsupDocs is not None else []
        self.unsupDropoutStartIndex = len(self.data)
        self.totalData = self.data + unsupDocs

        logger.info("initializing data feature hash, sup-data size: %d, unsup data size: %d",
                    len(self.data), len(unsupDocs))
        self.featureIndex = buildFeatureIndex(self.totalData, condense)
        self.evaluator = DocumentEvaluator(
            self.totalData, self.featureIndex, self.space, self.featureMap,
            dropout=self.prior == DROPOUT_PRIOR, delta=delta,
            dropoutScale=dropoutScale, dropoutApprox=dropoutApprox)
        self.scheduler = DocumentScheduler(numThreads)

        self.Ehat = empiricalCounts(self.data, self.space, self.layout)
        self.featureGrouping = None
        self.rand = numpy.random.RandomState(seed)
        self.value = None
        self.derivative = None

    def domain_dimension(self):
        return self.layout.domain_dimension

    def data_dimension(self):
        return len(self.data)

    def initial(self):
        return self.rand.random_sample(self.domain_dimension()) + SMALL_CONST

    def to_2d(self, x, wscale=None):
        return self.layout.to_2d(x, wscale)

    def to_1d(self, weights):
        return self.layout.to_1d(weights)

    def weight_indices(self):
        return self.layout.weight_indices()

    def empty_2d(self):
        return self.layout.empty_2d()

    def clique_potential_function(self, x):
        '''the per feature weights the clique tree is built from'''
        return self.to_2d(x)

    def feature_grouping(self):
        if self.featureGrouping is not None:
            return self.featureGrouping
        return [numpy.arange(self.domain_dimension())]

    def set_feature_grouping(self, fg):
        self.featureGrouping = fg

    def _checkProb(self, prob):
        if numpy.isnan(prob):
            raise NumericalError(
                "Got NaN for prob in CRFLogConditionalObjectiveFunction - this may well "
                "indicate numeric underflow due to overly long documents.")

    def calculate(self, x):
        '''value and derivative at x, stored in self.value / self.derivative'''
        t0 = time.time()
        x = numpy.asarray(x, dtype=float)
        weights = self.to_2d(x)
        weightSquare = [w * w for w in weights]
        E = self.empty_2d()
        dropoutPriorGrad = self.empty_2d()
        prob = 0.0
        dropout = self.prior == DROPOUT_PRIOR
        ndocs = len(self.totalData) if dropout else len(self.data)

        def process(docIndex):
            isUnsup = docIndex >= self.unsupDropoutStartIndex
            return self.evaluator.evaluate(weights, weightSquare, docIndex,
                                           computeValue=not isUnsup)

        for result in self.scheduler.run(process, range(ndocs)):
            isUnsup = result.doc_index >= self.unsupDropoutStartIndex
            scale = self.unsupDropoutScale if isUnsup else 1.0
            prob += scale * result.log_prob
            mergeSparse(dropoutPriorGrad, result.dropout_grad, scale)
            if not isUnsup:
                mergeSparse(E, result.expected)

        self._checkProb(prob)

        # because we minimize -L(\theta)
        value = -prob
        derivative = self.to_1d(E) - self.to_1d(self.Ehat)
        if dropout:
            derivative += self.dropoutScale * self.to_1d(dropoutPriorGrad)
        self.value = applyPrior(self.prior, x, value, derivative, self.sigma, self.epsilon, 1.0)
        self.derivative = derivative
        logger.info("calculate: value %f over %d documents, %.3fs", self.value, ndocs, time.time() - t0)
        return self.value

    def value_and_gradient(self, x):
        self.calculate(x)
        return self.value, self.derivative.copy()

    def _batchExpectations(self, weights, batch, computeValue=True):
        '''summed log prob and expected counts of the batch, no dropout term'''
        weightSquare = [w * w for w in weights]
        E = self.empty_2d()
        prob = 0.0

        def process(docIndex):
            return self.evaluator.evaluate(weights, weightSquare, docIndex,
                                           computeValue=computeValue, withDropout=False)

        for result in self.scheduler.run(process, list(batch)):
            prob += result.log_prob
            mergeSparse(E, result.expected)
        return prob, E

    def calculate_stochastic(self, x, v, batch):
        '''batch value and gradient; empirical counts and the prior are scaled by
        the batch's share of the corpus.  v is unused.'''
        x = numpy.asarray(x, dtype=float)
        weights = self.to_2d(x)
        batchScale = len(batch) / float(self.data_dimension())
        prob, E = self._batchExpectations(weights, batch)
        self._checkProb(prob)
        derivative = self.to_1d(E) - batchScale * self.to_1d(self.Ehat)
        self.value = applyPrior(self.prior, x, -prob, derivative, self.sigma, self.epsilon,
                                batchScale)
        self.derivative = derivative
        return self.value

    def calculate_stochastic_gradient(self, x, batch):
        '''expected minus empirical counts of the batch in self.derivative.
        No regularization, that is left to the minimizer.'''
        weights = self.to_2d(x)
        eHat4Update = self.empty_2d()
        for ind in batch:
            empiricalCountsForADoc(eHat4Update, self.data[ind], self.space, self.layout)
        prob, e4Update = self._batchExpectations(weights, batch, computeValue=False)
        self.derivative = self.to_1d(e4Update) - self.to_1d(eHat4Update)
        return self.derivative

    def calculate_stochastic_update(self, x, xscale, batch, gscale):
        '''Moves x (in place) by gscale * (empirical - expected counts) of the
        batch, computed at x * xscale, and returns the batch value there.
        No regularization, that is left to the minimizer.'''
        weights = self.to_2d(x, xscale)
        eHat4Update = self.empty_2d()
        for ind in batch:
            empiricalCountsForADoc(eHat4Update, self.data[ind], self.space, self.layout)
        prob, e4Update = self._batchExpectations(weights, batch)
        self._checkProb(prob)
        self.value = -prob
        x += (self.to_1d(eHat4Update) - self.to_1d(e4Update)) * gscale
        return self.value

    def value_at(self, x, xscale, batch):
        '''batch value at x * xscale, no regularization'''
        weights = self.to_2d(x, xscale)
        prob = 0.0

        def process(docIndex):
            return self.evaluator.evaluate(weights, None, docIndex,
                                           computeExpectation=False, withDropout=False)

        for result in self.scheduler.run(process, list(batch)):
            prob += result.log_prob
        self._checkProb(prob)
        self.value = -prob
        return self.value
