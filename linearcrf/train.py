# -*- coding: utf-8 -*-
"""
Training and derivative checking on an encoded corpus file.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import datetime
import os
import time

import numpy
from scipy import optimize

from .data import readData
from .labels import LabelSpace
from .objective import CRFLogConditionalObjectiveFunction


def buildObjective(corpus, prior="QUADRATIC", sigma=1.0, delta=0.0, dropoutScale=1.0,
                   numThreads=1, dropoutApprox=False, unsupDropoutScale=0.0, condense=True):
    '''objective over the corpus with every label combination in the label indices'''
    space = LabelSpace.full(corpus.classes, corpus.classes[0], corpus.window)
    unsup = corpus.unsup_docs if corpus.unsup_docs else None
    return CRFLogConditionalObjectiveFunction(
        corpus.docs, space.label_indices, corpus.feature_map, corpus.classes, corpus.classes[0],
        prior=prior, sigma=sigma, delta=delta, dropoutScale=dropoutScale,
        numThreads=numThreads, dropoutApprox=dropoutApprox,
        unsupDropoutScale=unsupDropoutScale, unsupDocs=unsup, condense=condense)


def printHeader(corpus, func):
    nodef = int(numpy.sum(corpus.feature_map == 0))
    edgef = int(numpy.sum(corpus.feature_map == 1))
    print("Linear CRF in Python.. ver 0.2 ")
    print("B features:", edgef, "U features:", nodef, "total num:", func.domain_dimension())
    print("training sequence number:", len(corpus.docs), "unlabeled:", len(corpus.unsup_docs))


def train(datafile, background="O", maxiter=15000, factr=1e12, **kwargs):
    '''minimise the objective with L-BFGS; returns (theta, value, info).
    Nothing is written to disk.'''
    start_time = time.time()
    if not os.path.isfile(datafile):
        print("Data file doesn't exist!")
        return None
    corpus = readData(datafile, background)
    if len(corpus.docs) == 0:
        print("No labeled sequences to learn from. ")
        return None
    func = buildObjective(corpus, **kwargs)
    printHeader(corpus, func)
    if func.domain_dimension() == 0:
        print("No Parameters to Learn. ")
        return None
    print("start to learn distribuition. elapsed time:", time.time() - start_time, "seconds. \n ")

    theta = func.initial()
    theta, fobj, info = optimize.fmin_l_bfgs_b(func.value_and_gradient, theta,
                                               factr=factr, maxiter=maxiter)
    print("final value:", fobj, "iterations:", info["nit"], "warnflag:", info["warnflag"])
    print("Training finished in ", time.time() - start_time, "seconds. \n ")
    return theta, fobj, info


def checkCrfDev(datafile, background="O", nparams=None, step=0.0001, **kwargs):
    '''Check if the Derivative calculation is correct.
    Don't call this function with nparams=None if your model has millions of
    features.  Otherwise it will run forever...      '''
    if not os.path.isfile(datafile):
        print("Data file doesn't exist!")
        return None
    corpus = readData(datafile, background)
    func = buildObjective(corpus, **kwargs)
    printHeader(corpus, func)

    theta = func.initial()
    ta, dev = func.value_and_gradient(theta)
    fnum = func.domain_dimension() if nparams is None else min(nparams, func.domain_dimension())
    maxerr = 0.0
    for i in range(fnum):
        theta[i] = theta[i] + step
        tb = func.value_and_gradient(theta)[0]
        theta[i] = theta[i] - step  # reverse to original
        devest = (tb - ta) / step
        maxerr = max(maxerr, abs(devest - dev[i]))
        print("dev:", dev[i], "dev numeric~:", devest, str(datetime.datetime.now())[10:19])
    print("max abs difference:", maxerr)
    return maxerr
