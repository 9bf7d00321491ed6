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

from collections import OrderedDict
import itertools
from enum import IntEnum
from typing import NamedTuple, Tuple

from .Common import ConfigurationError, print2


class Variation(IntEnum):
    """
    The two ways the direct GEMM kernel is tuned.
    Limited: a small set of tuning parameters, explored exhaustively.
    Expanded: a much larger set of tuning parameters, sampled randomly.
    """
    Limited = 1
    Expanded = 2


class Parameter(NamedTuple):
    name: str
    candidates: Tuple[int, ...]


class TunerDefaults(NamedTuple):
    """Default command-line values for a variation"""
    options: Tuple[str, ...]
    m: int
    n: int
    k: int
    fraction: float
    numRuns: int


# options the driver accepts on its command line for this kernel
tunerOptions = ("m", "n", "k", "alpha", "beta", "fraction",
                "heuristic", "pso_swarm_size",
                "pso_inf_global", "pso_inf_local", "pso_inf_random")

defaultFractions = {
    Variation.Limited: 1.0,   # test all
    Variation.Expanded: 64.0, # sample randomly
}


def getVariation(value):
    """Returns the Variation for 1/2 or a name; anything else is a configuration error"""
    if isinstance(value, Variation):
        return value
    try:
        if isinstance(value, str) and not value.isdigit():
            return Variation[value.capitalize()]
        return Variation(int(value))
    except (KeyError, ValueError):
        raise ConfigurationError("Unknown variation {}; valid variations are {}" \
                .format(value, [v.name for v in Variation]))


def getTunerDefaults(variation):
    variation = getVariation(variation)
    return TunerDefaults(options=tunerOptions, m=256, n=256, k=256,
                         fraction=defaultFractions[variation], numRuns=4)


class ParameterSpace:
    """Ordered, immutable collection of tuning parameters and their candidate values"""

    def __init__(self, parameters):
        self._parameters = OrderedDict()
        for name, candidates in parameters:
            if name in self._parameters:
                raise ConfigurationError("Duplicate tuning parameter \"{}\"".format(name))
            candidates = tuple(candidates)
            if len(candidates) == 0:
                raise ConfigurationError("You must specify value(s) for parameter \"{}\"".format(name))
            if any(not isinstance(c, int) or c < 0 for c in candidates):
                raise ConfigurationError("Parameter \"{}\" has invalid values {}".format(name, candidates))
            self._parameters[name] = Parameter(name, candidates)

    @property
    def names(self):
        return tuple(self._parameters.keys())

    def totalPermutations(self):
        totalPermutations = 1
        for parameter in self._parameters.values():
            totalPermutations *= len(parameter.candidates)
        return totalPermutations

    def permutation(self, index):
        """
        Returns the configuration at position index of the cartesian product.
        The first parameter varies fastest.
        """
        if index < 0 or index >= self.totalPermutations():
            raise IndexError(index)
        permutation = {}
        pIdx = index
        for name, parameter in self._parameters.items():
            permutation[name] = parameter.candidates[pIdx % len(parameter.candidates)]
            pIdx //= len(parameter.candidates)
        return permutation

    def permutations(self):
        """Yields every configuration in permutation() order"""
        names = list(self._parameters.keys())
        reversedCandidates = [self._parameters[n].candidates for n in reversed(names)]
        for values in itertools.product(*reversedCandidates):
            yield dict(zip(names, reversed(values)))

    def __contains__(self, name):
        return name in self._parameters

    def __getitem__(self, name):
        return self._parameters[name]

    def __iter__(self):
        return iter(self._parameters.values())

    def __len__(self):
        return len(self._parameters)

    def state(self):
        return dict([(p.name, list(p.candidates)) for p in self])

    def __str__(self):
        return "ParameterSpace({} parameters, {} permutations)" \
                .format(len(self), self.totalPermutations())

    def __repr__(self):
        return self.__str__()


def getParameterSpace(variation):
    variation = getVariation(variation)
    if variation == Variation.Limited:
        # limited subset of tuning parameters - but explorable exhaustively
        parameters = [
            ("WGD", [8, 16, 32]),
            ("MDIMCD", [8, 16, 32]),
            ("NDIMCD", [8, 16, 32]),
            ("MDIMAD", [8, 16, 32]),
            ("NDIMBD", [8, 16, 32]),
            ("KWID", [2]),
            ("VWMD", [1, 2, 4, 8]),
            ("VWND", [1, 2, 4, 8]),
            ("PADA", [1]),
            ("PADB", [1]),
        ]
    else:
        # a lot more tuning parameters - has to be sampled randomly, too much to test all
        parameters = [
            ("WGD", [8, 16, 32, 64]),
            ("MDIMCD", [8, 16, 32]),
            ("NDIMCD", [8, 16, 32]),
            ("MDIMAD", [8, 16, 32]),
            ("NDIMBD", [8, 16, 32]),
            ("KWID", [2, 8, 16]),
            ("VWMD", [1, 2, 4, 8]),
            ("VWND", [1, 2, 4, 8]),
            ("PADA", [0, 1]),
            ("PADB", [0, 1]),
        ]
    space = ParameterSpace(parameters)
    print2("# {} variation: {}".format(variation.name, space))
    return space
