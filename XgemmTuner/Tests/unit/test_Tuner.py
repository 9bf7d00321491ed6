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

import os

import pytest
import yaml

from XgemmTuner import Common
from XgemmTuner.Arguments import BufferRole
from XgemmTuner.Common import ConfigurationError
from XgemmTuner.DataType import DataType
from XgemmTuner.LibraryIO import parsePlanFile
from XgemmTuner.Parameters import Variation
from XgemmTuner.PlanDriver import PlanDriver
from XgemmTuner.Tuner import XgemmTuner, getPrecision, startVariations, tuneVariation

@pytest.mark.parametrize("precision,name", [
    (16, "half"), ("32", "single"), (64, "double"), ("3232", "complexSingle"), (6464, "complexDouble"),
    ("S", "single"), ("complexDouble", "complexDouble"),
])
def test_getPrecision(precision, name):
    assert getPrecision(precision).toName() == name

@pytest.mark.parametrize("precision", [8, "128", "int8", "Q", None, 3264])
def test_unsupported_precision(precision):
    with pytest.raises(ConfigurationError):
        getPrecision(precision)

def test_unsupported_precision_before_tuning(recordingDriver):
    with pytest.raises(ConfigurationError):
        startVariations(128, recordingDriver)
    assert recordingDriver.calls == []

def test_variations_in_order(recordingDriver):
    result = startVariations(32, recordingDriver)

    assert result == ["xgemm_direct_1", "xgemm_direct_2"]
    limited, expanded = recordingDriver.calls
    assert limited.variation == Variation.Limited
    assert expanded.variation == Variation.Expanded
    assert limited.kernelFamily != expanded.kernelFamily
    assert limited.kernelName == expanded.kernelName == "XgemmDirectTN"
    assert limited.strategy.isExhaustive()
    assert not expanded.strategy.isExhaustive()
    assert expanded.strategy.fraction == 64.0

def test_settings(recordingDriver):
    tuneVariation(Variation.Limited, 32, recordingDriver)
    settings = recordingDriver.calls[0]

    assert settings.sizeA == 256 * 256
    assert settings.sizeC == 256 * 256
    assert settings.metricAmount == 2 * 256 * 256 * 256
    assert settings.performanceUnit == "GFLOPS"
    assert settings.performance(1.0e-3) == pytest.approx(2 * 256**3 / 1.0e-3 / 1.0e9)
    assert settings.inputs == (BufferRole.A, BufferRole.B, BufferRole.C)
    assert settings.outputs == (BufferRole.C,)
    assert settings.numRuns == 4

    config = {"WGD": 32, "MDIMCD": 16, "NDIMCD": 16, "MDIMAD": 16, "NDIMBD": 16,
              "KWID": 2, "VWMD": 2, "VWND": 2, "PADA": 1, "PADB": 1}
    assert settings.isValid(config)
    assert settings.geometry(config).globalSize == (128, 128)
    assert len(settings.arguments(config, ["x", "y", "a", "b", "c"])) == 17

def test_double_complex_matches_single(recordingDriver):
    startVariations(32, recordingDriver)
    startVariations(6464, recordingDriver)
    single = recordingDriver.calls[:2]
    complexDouble = recordingDriver.calls[2:]

    for s, z in zip(single, complexDouble):
        assert s.parameters.names == z.parameters.names
        assert s.parameters.state() == z.parameters.state()
        assert list(s.constraints) == list(z.constraints)
        assert s.kernelFamily == z.kernelFamily
        assert s.dataType == DataType("single")
        assert z.dataType == DataType("complexDouble")
        assert type(s.arguments({}, ["x", "y", "a", "b", "c"])[3].value) != \
               type(z.arguments({}, ["x", "y", "a", "b", "c"])[3].value)

def test_overrides(recordingDriver):
    startVariations("64", recordingDriver, {"m": 512, "fraction": 8.0, "alpha": [1.0, 0.0]})
    for settings in recordingDriver.calls:
        assert settings.args.m == 512
        assert settings.args.n == 256
        assert settings.strategy.fraction == 8.0
        assert settings.args.alpha == complex(1.0, 0.0)

def test_bad_overrides(recordingDriver):
    with pytest.raises(ConfigurationError):
        tuneVariation(1, 32, recordingDriver, {"mm": 512})
    with pytest.raises(ConfigurationError):
        # 200 is not a multiple of the 16 and 32 tiles
        tuneVariation(1, 32, recordingDriver, {"m": 200})
    with pytest.raises(ConfigurationError):
        tuneVariation(2, 32, recordingDriver, {"fraction": 0.25})
    assert recordingDriver.calls == []

def test_cli_writes_plans(tmp_path):
    XgemmTuner(["--output-path", str(tmp_path), "--precision", "64", \
        "--global-parameters", "PrintLevel=0", "MaxPlanEntries=2"])

    names = sorted(os.listdir(str(tmp_path)))
    assert names == ["xgemm_direct_1_D.yaml", "xgemm_direct_2_D.yaml"]

    limited = parsePlanFile(str(tmp_path / "xgemm_direct_1_D.yaml"))
    assert limited["Settings"]["KernelFamily"] == "xgemm_direct_1"
    assert limited["Settings"]["Strategy"] == {"Type": "Exhaustive", "Fraction": 1.0}
    assert limited["TotalConfigurations"] == 3888
    assert limited["SelectedConfigurations"] == 46
    assert len(limited["Candidates"]) == 2

    candidate = limited["Candidates"][0]
    assert len(candidate["Arguments"]) == 17
    assert candidate["Arguments"][5]["value"] == "buffer A[65536]"
    assert candidate["Arguments"][14] == {"index": 14, "name": "c_do_transpose", "value": 1}
    wgd = candidate["Parameters"]["WGD"]
    assert candidate["Geometry"]["GlobalSize"] == [256 * candidate["Parameters"]["MDIMCD"] // wgd,
                                                   256 * candidate["Parameters"]["NDIMCD"] // wgd]

    expanded = parsePlanFile(str(tmp_path / "xgemm_direct_2_D.yaml"))
    assert expanded["Settings"]["Strategy"]["Type"] == "Sampled"
    assert 0 < expanded["SelectedConfigurations"] < expanded["TotalConfigurations"] // 64

def test_cli_msgpack(tmp_path):
    XgemmTuner(["--output-path", str(tmp_path), "--precision", "3232", "--plan-format", "msgpack", \
        "--fraction", "16", "--global-parameters", "PrintLevel=0"])

    names = sorted(os.listdir(str(tmp_path)))
    assert names == ["xgemm_direct_1_C.dat", "xgemm_direct_2_C.dat"]
    plan = parsePlanFile(str(tmp_path / "xgemm_direct_1_C.dat"))
    assert plan["Settings"]["Precision"] == 3232
    assert plan["Settings"]["Strategy"]["Fraction"] == 16.0
    assert plan["Settings"]["Arguments"]["alpha"] == [2.0, 0.5]

def test_cli_config(tmp_path, recordingDriver):
    config = {"GlobalParameters": {"PrintLevel": 0, "MaxPlanEntries": 1},
              "TunerArguments": {"m": 128, "n": 128, "k": 64, "fraction": 2.0, "alpha": [1.0, 0.5]}}
    configPath = tmp_path / "config.yaml"
    with open(str(configPath), "w") as f:
        yaml.safe_dump(config, f)

    XgemmTuner(["--config", str(configPath), "--precision", "3232", "-k", "32"], driver=recordingDriver)

    assert Common.globalParameters["MaxPlanEntries"] == 1
    assert len(recordingDriver.calls) == 2
    for settings in recordingDriver.calls:
        assert (settings.args.m, settings.args.n, settings.args.k) == (128, 128, 32)
        assert settings.strategy.fraction == 2.0
        assert settings.args.alpha == complex(1.0, 0.5)
        assert settings.dataType.isSingleComplex()

def test_cli_errors(tmp_path, recordingDriver):
    with pytest.raises(SystemExit):
        XgemmTuner(["--precision", "8", "--global-parameters", "PrintLevel=0"], driver=recordingDriver)
    with pytest.raises(SystemExit):
        XgemmTuner(["--global-parameters", "NoSuchParameter=1"], driver=recordingDriver)

    configPath = tmp_path / "config.yaml"
    with open(str(configPath), "w") as f:
        yaml.safe_dump({"TunerArguments": {"numRuns": 0}}, f)
    with pytest.raises(SystemExit):
        XgemmTuner(["--config", str(configPath)], driver=recordingDriver)
    assert recordingDriver.calls == []

@pytest.mark.parametrize("arguments", [{"fraction": "eight"}, {"numRuns": "many"}, {"fraction": [1, 2]}])
def test_cli_non_numeric_arguments(tmp_path, recordingDriver, arguments):
    configPath = tmp_path / "config.yaml"
    with open(str(configPath), "w") as f:
        yaml.safe_dump({"TunerArguments": arguments}, f)
    with pytest.raises(SystemExit):
        XgemmTuner(["--config", str(configPath), "--global-parameters", "PrintLevel=0"], driver=recordingDriver)
    assert recordingDriver.calls == []

def test_plans_per_precision():
    Common.globalParameters["PrintLevel"] = 0
    Common.globalParameters["MaxPlanEntries"] = 1
    driver = PlanDriver()
    startVariations(32, driver)
    startVariations(3232, driver)

    assert sorted(driver.plans) == [("xgemm_direct_1", "C"), ("xgemm_direct_1", "S"),
                                    ("xgemm_direct_2", "C"), ("xgemm_direct_2", "S")]
    assert driver.plans[("xgemm_direct_1", "S")]["SelectedConfigurations"] == 46
    assert driver.plans[("xgemm_direct_1", "C")]["Candidates"][0]["Arguments"][3]["value"] == [2.0, 0.5]
