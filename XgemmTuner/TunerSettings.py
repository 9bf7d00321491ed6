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

from .Arguments import BufferRole, setArguments
from .Common import print2
from .Constraints import getConstraints
from .Geometry import checkProblemSizes, getThreadConfiguration
from .Parameters import getParameterSpace, getTunerDefaults, getVariation
from .SearchStrategy import SearchStrategy
from .Utils import state

kernelName = "XgemmDirectTN"
kernelSources = ("xgemm_direct_part1.opencl",
                 "xgemm_direct_part2.opencl",
                 "xgemm_direct_part3.opencl")


class TunerSettings:
    """
    Everything the search driver needs to tune one (variation, precision) pair.
    Read-only to the driver.
    """

    def __init__(self, variation, args):
        self.variation = getVariation(variation)
        self.args = args
        self.dataType = args.dataType
        self.options = getTunerDefaults(self.variation).options

        # Identification of the kernel
        self.kernelFamily = "xgemm_direct_{}".format(int(self.variation))
        self.kernelName = kernelName
        self.sources = kernelSources

        # Buffer sizes, in elements
        self.sizeA = args.m * args.k
        self.sizeB = args.n * args.k
        self.sizeC = args.m * args.n

        # Inputs and outputs
        self.inputs = (BufferRole.A, BufferRole.B, BufferRole.C)
        self.outputs = (BufferRole.C,)

        self.threadConfiguration = getThreadConfiguration(args.m, args.n)
        self.parameters = getParameterSpace(self.variation)
        self.constraints = getConstraints(self.variation)

        # Describes how to compute the performance metrics
        self.metricAmount = 2 * args.m * args.n * args.k
        self.performanceUnit = "GFLOPS"

        self.strategy = SearchStrategy(args.fraction)
        self.numRuns = args.numRuns

        self.checkConsistency()
        print2("# TunerSettings: {} {} {}".format(self.kernelFamily, self.dataType.toName(), self.strategy))

    def checkConsistency(self):
        """Configuration errors are raised here, before any search work"""
        self.constraints.checkParameters(self.parameters)
        self.threadConfiguration.checkParameters(self.parameters)
        checkProblemSizes(self.args.m, self.args.n, self.args.k, self.parameters["WGD"].candidates)

    def isValid(self, config):
        return self.constraints.isValid(config)

    def geometry(self, config):
        return self.threadConfiguration.computeGeometry(config)

    def arguments(self, config, buffers):
        """Kernel arguments for config; the direct kernel binds the same layout for every configuration"""
        return setArguments(self.args, buffers)

    def performance(self, seconds):
        """Throughput in performanceUnit for a kernel time in seconds"""
        return self.metricAmount / seconds / 1.0e9

    def state(self):
        return {
            "KernelFamily": self.kernelFamily,
            "KernelName": self.kernelName,
            "Sources": list(self.sources),
            "Precision": self.dataType.toPrecision(),
            "Arguments": state(self.args),
            "SizeA": self.sizeA,
            "SizeB": self.sizeB,
            "SizeC": self.sizeC,
            "Inputs": state(list(self.inputs)),
            "Outputs": state(list(self.outputs)),
            "ThreadConfiguration": state(self.threadConfiguration),
            "Parameters": state(self.parameters),
            "Constraints": state(self.constraints),
            "MetricAmount": self.metricAmount,
            "PerformanceUnit": self.performanceUnit,
            "Strategy": state(self.strategy),
            "NumRuns": self.numRuns,
        }

    def __str__(self):
        return "{} ({}, {})".format(self.kernelFamily, self.dataType.toName(), self.strategy)

    def __repr__(self):
        return self.__str__()


def getTunerSettings(variation, args):
    return TunerSettings(variation, args)
