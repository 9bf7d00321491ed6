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

import numpy

from .Common import ConfigurationError, globalParameters, print1, print2
from .Parallel import ParallelMap, CPUThreadCount


def filterConfigurations(constraints, configs):
    return [config for config in configs if constraints.isValid(config)]


def validConfigurations(parameterSpace, constraints):
    """
    All configurations of parameterSpace that pass every constraint, in
    permutation order. Large spaces are split into chunks and filtered
    through ParallelMap when more than one CPU thread is configured.
    """
    constraints.checkParameters(parameterSpace)
    configs = list(parameterSpace.permutations())

    if CPUThreadCount() <= 1:
        chunkSize = max(1, len(configs))
    else:
        chunkSize = max(1, globalParameters["ParallelChunkSize"])
    chunks = [(constraints, configs[i:i+chunkSize]) for i in range(0, len(configs), chunkSize)]

    valid = []
    for chunk in ParallelMap(filterConfigurations, chunks, "Filtering parameter space"):
        valid.extend(chunk)
    print2("# {} of {} configurations satisfy the constraints".format(len(valid), len(configs)))
    return valid


class SearchStrategy:
    """
    Exhaustive: evaluate every valid configuration.
    Sampled(fraction): evaluate a uniformly random 1/fraction of the valid configurations.
    A fraction of 1.0 is exhaustive.
    """

    def __init__(self, fraction=1.0):
        if fraction is None or fraction < 1.0:
            raise ConfigurationError("Sampling fraction {} must be at least 1.0".format(fraction))
        self.fraction = float(fraction)

    @classmethod
    def Exhaustive(cls):
        return cls(1.0)

    @classmethod
    def Sampled(cls, fraction):
        return cls(fraction)

    @property
    def tag(self):
        return "Exhaustive" if self.isExhaustive() else "Sampled"

    def isExhaustive(self):
        return self.fraction == 1.0

    def numSamples(self, total):
        if self.isExhaustive():
            return total
        return min(total, max(1, int(total / self.fraction)))

    def select(self, configs, seed=None):
        """
        Returns the configurations to evaluate. Exhaustive keeps the given order;
        Sampled returns a random subset, in random order, reproducible for a given seed.
        """
        if self.isExhaustive() or len(configs) == 0:
            return list(configs)
        rng = numpy.random.default_rng(seed)
        indices = rng.choice(len(configs), size=self.numSamples(len(configs)), replace=False)
        return [configs[i] for i in indices]

    def state(self):
        return {"Type": self.tag, "Fraction": self.fraction}

    def __eq__(self, other):
        return isinstance(other, SearchStrategy) and self.fraction == other.fraction

    def __hash__(self):
        return hash(self.fraction)

    def __str__(self):
        if self.isExhaustive():
            return "Exhaustive"
        return "Sampled(1/{:g})".format(self.fraction)

    def __repr__(self):
        return self.__str__()


def searchConfigurations(parameterSpace, constraints, strategy, seed=None):
    """Valid configurations, narrowed down by the strategy"""
    valid = validConfigurations(parameterSpace, constraints)
    selected = strategy.select(valid, seed)
    print1("# {}: evaluating {} of {} valid configurations ({} in the space)" \
            .format(strategy, len(selected), len(valid), parameterSpace.totalPermutations()))
    return selected
