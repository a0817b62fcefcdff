# -*- coding: utf-8 -*-
"""
Linear CRF in Python: the training objective (negative conditional log
likelihood, its gradient and priors, including the dropout prior).

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""

from .cliquetree import CliqueTree
from .data import Corpus, Document, readData
from .errors import ConfigurationError, CRFError, NumericalError, WeightIndexError
from .labels import CRFLabel, LabelIndex, LabelSpace
from .objective import CRFLogConditionalObjectiveFunction
from .prior import (DROPOUT_PRIOR, HUBER_PRIOR, NO_PRIOR, QUADRATIC_PRIOR, QUARTIC_PRIOR,
                    priorType)
from .weights import WeightLayout

__version__ = "0.2.0"
