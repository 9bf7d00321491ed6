################################################################################
#
# Copyright (C) 2019-2022 Advanced Micro Devices, Inc. All rights reserved.
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
################################################################################

from enum import IntEnum
from typing import Any, NamedTuple

import numpy

from .Common import ConfigurationError
from .DataType import DataType
from .Geometry import checkProblemSizes
from .Utils import state


class BufferRole(IntEnum):
    """
    Buffers the driver allocates for every tuning task, by position.
    The direct GEMM kernel reads A and B and reads/writes C; X and Y are unused.
    """
    X = 0
    Y = 1
    A = 2
    B = 3
    C = 4


class TunerArguments:
    """Problem and search arguments for one precision, after defaults and overrides are applied"""

    StateKeys = ["m", "n", "k", "alpha", "beta", "fraction", "numRuns",
                 ("precision", "dataType"), "heuristic", "psoSwarmSize",
                 "psoInfGlobal", "psoInfLocal", "psoInfRandom"]

    def __init__(self, dataType, m, n, k, alpha=None, beta=None, fraction=1.0, numRuns=4, \
            heuristic=0, psoSwarmSize=8, psoInfGlobal=0.1, psoInfLocal=0.3, psoInfRandom=0.6):
        self.dataType = DataType(dataType)
        checkProblemSizes(m, n, k)
        self.m = m
        self.n = n
        self.k = k
        self.alpha = self.defaultScalar() if alpha is None else alpha
        self.beta = self.defaultScalar() if beta is None else beta
        for scalar in (self.alpha, self.beta):
            try:
                self.dataType.realArg(scalar)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(str(e))
        try:
            self.fraction = float(fraction)
            self.numRuns = int(numRuns)
        except (TypeError, ValueError) as e:
            raise ConfigurationError("fraction and numRuns must be numbers: {}".format(e))
        if self.fraction < 1.0:
            raise ConfigurationError("fraction {} must be at least 1.0 (1.0 tests everything)".format(fraction))
        if self.numRuns < 1:
            raise ConfigurationError("numRuns {} must be at least 1".format(numRuns))
        self.heuristic = heuristic
        self.psoSwarmSize = psoSwarmSize
        self.psoInfGlobal = psoInfGlobal
        self.psoInfLocal = psoInfLocal
        self.psoInfRandom = psoInfRandom

    def defaultScalar(self):
        return complex(2.0, 0.5) if self.dataType.isComplex() else 2.0

    def __str__(self):
        return "TunerArguments({}, m={}, n={}, k={}, alpha={}, beta={}, fraction={})" \
                .format(self.dataType.toName(), self.m, self.n, self.k, self.alpha, self.beta, self.fraction)

    def __repr__(self):
        return self.__str__()


class KernelArgument(NamedTuple):
    index: int
    name: str
    value: Any

    def state(self):
        return {"index": self.index, "name": self.name, "value": state(self.value)}


# Kernel argument order; this is the binary interface of XgemmDirectTN
kernelArgumentNames = ("m", "n", "k", "alpha", "beta",
                       "a_buffer", "a_offset", "a_ld",
                       "b_buffer", "b_offset", "b_ld",
                       "c_buffer", "c_offset", "c_ld",
                       "c_do_transpose", "a_conjugate", "b_conjugate")


def getBuffer(buffers, role):
    try:
        return buffers[role]
    except (KeyError, IndexError):
        raise ConfigurationError("No buffer bound for role {}".format(role.name))


def setArguments(args, buffers):
    """
    Sets the kernel's arguments.
    buffers is indexed by BufferRole: a sequence of at least five buffers or a dict.
    Returns the 17 arguments in kernel order.
    """
    values = [
        numpy.int32(args.m),
        numpy.int32(args.n),
        numpy.int32(args.k),
        args.dataType.realArg(args.alpha),
        args.dataType.realArg(args.beta),
        getBuffer(buffers, BufferRole.A),
        numpy.int32(0),         # a_offset
        numpy.int32(args.k),    # a_ld
        getBuffer(buffers, BufferRole.B),
        numpy.int32(0),         # b_offset
        numpy.int32(args.n),    # b_ld
        getBuffer(buffers, BufferRole.C),
        numpy.int32(0),         # c_offset
        numpy.int32(args.n),    # c_ld
        numpy.int32(1),         # c_do_transpose
        numpy.int32(0),         # a_conjugate
        numpy.int32(0),         # b_conjugate
    ]
    return [KernelArgument(i, name, value) for i, (name, value) in enumerate(zip(kernelArgumentNames, values))]
