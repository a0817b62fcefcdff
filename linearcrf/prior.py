# -*- coding: utf-8 -*-
"""
Priors (penalties) on the weight vector.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import numpy

from .errors import ConfigurationError

NO_PRIOR = 0
QUADRATIC_PRIOR = 1
# Huber robust regression penalty: L1 except very near 0
HUBER_PRIOR = 2
QUARTIC_PRIOR = 3
DROPOUT_PRIOR = 4

PRIOR_NAMES = {
    "NONE": NO_PRIOR,
    "QUADRATIC": QUADRATIC_PRIOR,
    "HUBER": HUBER_PRIOR,
    "QUARTIC": QUARTIC_PRIOR,
    "DROPOUT": DROPOUT_PRIOR,
}
# group sparsity penalties belong to the optimiser
OPTIMIZER_PRIORS = ("LASSO", "RIDGE", "AE-LASSO", "SG-LASSO", "G-LASSO")


def priorType(name):
    if name is None:
        return QUADRATIC_PRIOR  # default
    if not isinstance(name, str):
        raise ConfigurationError("Unknown prior type: %r" % (name,))
    key = name.upper()
    if key in PRIOR_NAMES:
        return PRIOR_NAMES[key]
    if key in OPTIMIZER_PRIORS:
        return NO_PRIOR
    raise ConfigurationError("Unknown prior type: " + name)


def regularity(theta, prior, sigma=1.0, epsilon=0.1):
    '''penalty value of theta'''
    if prior == QUADRATIC_PRIOR:
        return numpy.dot(theta, theta) / (2.0 * sigma ** 2)
    elif prior == HUBER_PRIOR:
        wabs = numpy.abs(theta)
        small = wabs < epsilon
        return (numpy.sum(theta[small] ** 2) / 2.0 / epsilon
                + numpy.sum(wabs[~small] - epsilon / 2.0)) / sigma ** 2
    elif prior == QUARTIC_PRIOR:
        return numpy.sum(theta ** 4) / (2.0 * sigma ** 4)
    return 0.0


def regularity_deriv(theta, prior, sigma=1.0, epsilon=0.1):
    if prior == QUADRATIC_PRIOR:
        return theta / sigma ** 2
    elif prior == HUBER_PRIOR:
        return numpy.where(numpy.abs(theta) < epsilon,
                           theta / epsilon, numpy.where(theta < 0.0, -1.0, 1.0)) / sigma ** 2
    elif prior == QUARTIC_PRIOR:
        return theta ** 3 / sigma ** 4
    return numpy.zeros_like(theta)


def applyPrior(prior, x, value, derivative, sigma=1.0, epsilon=0.1, scale=1.0):
    '''add scale * penalty to value and derivative (in place); returns the new value.
    The dropout prior is folded in per document, not here.'''
    if prior in (NO_PRIOR, DROPOUT_PRIOR):
        return value
    x = numpy.asarray(x, dtype=float)
    derivative += scale * regularity_deriv(x, prior, sigma, epsilon)
    return value + scale * regularity(x, prior, sigma, epsilon)
