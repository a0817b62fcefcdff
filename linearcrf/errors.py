# -*- coding: utf-8 -*-
"""
Exceptions raised by the linear CRF objective.

License (BSD)
==============
Copyright (c) 2013, Huang,Zheng.  huang-zheng@sjtu.edu.cn
All rights reserved.

THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

"""


class CRFError(Exception):
    pass


class ConfigurationError(CRFError, ValueError):
    '''unknown prior type, label alphabet mismatch, unsupported window...'''
    pass


class WeightIndexError(CRFError, IndexError):
    '''a feature's weight slice is too short for the label slot being accessed'''

    def __init__(self, feature, slot, order, slice_len):
        self.feature = feature
        self.slot = slot
        self.order = order
        self.slice_len = slice_len
        CRFError.__init__(self,
            "weights[%d][%d] out of bounds: feature %d has clique order %d "
            "and a weight slice of length %d" % (feature, slot, feature, order, slice_len))


class NumericalError(CRFError, ArithmeticError):
    pass
