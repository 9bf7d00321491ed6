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

import pytest

from XgemmTuner import Common
from XgemmTuner.Common import ConfigurationError
from XgemmTuner.Constraints import getConstraints
from XgemmTuner.Parameters import Variation, getParameterSpace
from XgemmTuner.SearchStrategy import SearchStrategy, searchConfigurations, validConfigurations

def test_strategy_kinds():
    assert SearchStrategy.Exhaustive().isExhaustive()
    assert SearchStrategy.Exhaustive() == SearchStrategy(1.0)
    assert not SearchStrategy.Sampled(64.0).isExhaustive()
    assert SearchStrategy.Sampled(64.0).tag == "Sampled"
    assert str(SearchStrategy.Sampled(64.0)) == "Sampled(1/64)"

    with pytest.raises(ConfigurationError):
        SearchStrategy(0.5)
    with pytest.raises(ConfigurationError):
        SearchStrategy(None)

def test_numSamples():
    assert SearchStrategy.Exhaustive().numSamples(3888) == 3888
    assert SearchStrategy.Sampled(64.0).numSamples(6400) == 100
    assert SearchStrategy.Sampled(64.0).numSamples(10) == 1
    assert SearchStrategy.Sampled(2.0).numSamples(0) == 0

def test_select():
    configs = [{"WGD": i} for i in range(1000)]

    assert SearchStrategy.Exhaustive().select(configs) == configs

    strategy = SearchStrategy.Sampled(10.0)
    first = strategy.select(configs, seed=7)
    second = strategy.select(configs, seed=7)
    assert first == second
    assert len(first) == 100
    assert len(set(c["WGD"] for c in first)) == 100
    for c in first:
        assert c in configs

    assert strategy.select([], seed=7) == []

def test_sampled_expanded_space():
    space = getParameterSpace(Variation.Expanded)
    constraints = getConstraints(Variation.Expanded)
    valid = validConfigurations(space, constraints)

    selected = searchConfigurations(space, constraints, SearchStrategy.Sampled(64.0), seed=0)
    assert len(selected) == max(1, len(valid) // 64)
    for config in selected:
        assert constraints.isValid(config)

def test_parallel_matches_sequential():
    space = getParameterSpace(Variation.Expanded)
    constraints = getConstraints(Variation.Expanded)
    sequential = validConfigurations(space, constraints)

    Common.globalParameters["CpuThreads"] = 2
    Common.globalParameters["ParallelChunkSize"] = 10000
    parallel = validConfigurations(space, constraints)

    assert parallel == sequential
