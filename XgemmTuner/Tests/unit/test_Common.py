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

import XgemmTuner.Common as Common
from XgemmTuner.DataType import DataType

def test_assignGlobalParameters(useGlobalParameters):
    with useGlobalParameters(PrintLevel=0, MaxPlanEntries=8):
        assert Common.globalParameters["PrintLevel"] == 0
        assert Common.globalParameters["MaxPlanEntries"] == 8
    assert Common.globalParameters["PrintLevel"] == 1
    assert Common.globalParameters["MaxPlanEntries"] == 64

def test_assign_rejects_unknown():
    with pytest.raises(Common.ConfigurationError):
        Common.assignGlobalParameters({"NoSuchParameter": 1})
    with pytest.raises(Common.ConfigurationError):
        Common.assignGlobalParameters({"PlanFormat": "json"})
    with pytest.raises(Common.ConfigurationError):
        Common.assignGlobalParameters({"MinimumRequiredVersion": "99.0.0"})

def test_versionIsCompatible():
    assert Common.versionIsCompatible(Common.__version__)
    assert Common.versionIsCompatible("1.0.0")
    assert not Common.versionIsCompatible("2.0.0")
    assert not Common.versionIsCompatible("1.99.0")

def test_print_levels(capsys):
    Common.globalParameters["PrintLevel"] = 1
    Common.print1("one")
    Common.print2("two")
    out = capsys.readouterr().out
    assert "one" in out
    assert "two" not in out

    with pytest.raises(SystemExit):
        Common.printExit("bad")
    assert "XgemmTuner::FATAL: bad" in capsys.readouterr().out

@pytest.mark.parametrize("name,precision,isComplex", [
    ("half", 16, False), ("single", 32, False), ("double", 64, False),
    ("complexSingle", 3232, True), ("complexDouble", 6464, True),
])
def test_datatypes(name, precision, isComplex):
    dataType = DataType(name)
    assert dataType.toPrecision() == precision
    assert DataType.fromPrecision(precision) == dataType
    assert dataType.isComplex() == isComplex
    assert DataType(dataType.toChar()) == dataType

def test_datatype_lookup():
    assert len(DataType.properties) == 5
    with pytest.raises(KeyError):
        DataType("int8")
    with pytest.raises(KeyError):
        DataType.fromPrecision(8)
    assert DataType("half").realArg(1.5).dtype.name == "float32"
    assert DataType("half").storageType().__name__ == "float16"
