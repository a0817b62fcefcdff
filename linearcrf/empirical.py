# -*- coding: utf-8 -*-
"""
Empirical (observed) feature counts of the labeled corpus.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

import logging

from .errors import ConfigurationError

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def alignLabels(labels, dataLen, contextLen, fill):
    '''Split a label sequence into (context, labels) for a document of dataLen
    positions.  Normally context is contextLen copies of fill.  A sequence
    longer than the data (self-training) is right aligned: its last dataLen
    labels are the document's and the ones right before them seed the context.'''
    labels = list(labels)
    context = [fill] * contextLen
    if len(labels) > dataLen:
        extra = labels[:len(labels) - dataLen]
        labels = labels[len(labels) - dataLen:]
        seed = extra[-contextLen:] if contextLen > 0 else []
        context[contextLen - len(seed):] = seed
    elif len(labels) < dataLen:
        raise ConfigurationError("document has %d positions but only %d labels"
                                 % (dataLen, len(labels)))
    return context, labels


def empiricalCountsForADoc(ehat, doc, space, layout):
    '''add the observed counts of one labeled document into ehat (2d weights shape)'''
    window = space.window
    context, labels = alignLabels(doc.labels, len(doc), window - 1, space.background)
    windowLabels = [space.background] + context
    for i, pos in enumerate(doc.data):
        windowLabels = windowLabels[1:] + [labels[i]]
        for j in range(len(pos)):
            if j >= window:
                raise ConfigurationError("position %d has features of clique order %d, window is %d"
                                         % (i, j, window))
            cliqueLabel = windowLabels[window - 1 - j:]
            labelIndex = space.label_indices[j].index_of(cliqueLabel)
            if labelIndex == -1:
                raise ConfigurationError("label %r of clique order %d is not in its label index"
                                         % (tuple(cliqueLabel), j))
            for f, v in zip(pos[j], doc.values(i, j)):
                layout.check_slot(ehat, f, labelIndex)
                ehat[f][labelIndex] += v
    return ehat


def empiricalCounts(docs, space, layout):
    ehat = layout.empty_2d()
    for doc in docs:
        empiricalCountsForADoc(ehat, doc, space, layout)
    logger.info("empirical counts of %d documents done", len(docs))
    return ehat
