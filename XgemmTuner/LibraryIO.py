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

from .Common import ConfigurationError, printWarning, versionIsCompatible
from . import __version__

import msgpack
import yaml

try:
    from yaml import CSafeLoader as yamlLoader
except ImportError:
    from yaml import SafeLoader as yamlLoader


###################
# Writing functions
###################
def write(filename_noExt, data, format="yaml"):
    """Writes data to file with specified format; extension is appended based on format. Returns the file name."""
    if format == "yaml":
        filename = filename_noExt + ".yaml"
        writeYAML(filename, data)
    elif format == "msgpack":
        filename = filename_noExt + ".dat"
        writeMsgPack(filename, data)
    else:
        raise ConfigurationError("Unrecognized format {}".format(format))
    return filename


def writeYAML(filename, data, **kwargs):
    """Writes data to file in YAML format."""
    # set default kwags for yaml dump
    if "explicit_start" not in kwargs:
        kwargs["explicit_start"] = True
    if "explicit_end" not in kwargs:
        kwargs["explicit_end"] = True
    if "default_flow_style" not in kwargs:
        kwargs["default_flow_style"] = None
    if "sort_keys" not in kwargs:
        kwargs["sort_keys"] = False

    with open(filename, "w") as f:
        yaml.safe_dump(data, f, **kwargs)


def writeMsgPack(filename, data):
    """Writes data to file in Message Pack format."""
    with open(filename, "wb") as f:
        msgpack.pack(data, f)


def writePlan(filename_noExt, settingsState, plan, format="yaml"):
    """Writes a tuning plan: the driver settings plus the selected candidate configurations."""
    data = {"MinimumRequiredVersion": __version__,
            "Settings": settingsState}
    data.update(plan)
    return write(filename_noExt, data, format)


###############################
# Reading and parsing functions
###############################
def readYAML(filename):
    """Reads and returns YAML data from file."""
    with open(filename, "r") as f:
        data = yaml.load(f, yamlLoader)
    return data


def readMsgPack(filename):
    """Reads and returns Message Pack data from file."""
    with open(filename, "rb") as f:
        data = msgpack.unpack(f, strict_map_key=False)
    return data


def readConfig(filename):
    """Reads a tuning config; an empty file is an empty config."""
    config = readYAML(filename)
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigurationError("Config file {} must contain a mapping, not {}" \
                .format(filename, type(config).__name__))
    for section in ("GlobalParameters", "TunerArguments"):
        if section in config and config[section] is not None and not isinstance(config[section], dict):
            raise ConfigurationError("{} in {} must be a mapping".format(section, filename))
    return config


def parsePlanFile(filename):
    """Reads a plan written by writePlan, in either format."""
    data = readMsgPack(filename) if filename.endswith(".dat") else readYAML(filename)
    return parsePlanData(data, filename)


def parsePlanData(data, srcFile="?"):
    for key in ("MinimumRequiredVersion", "Settings", "Candidates"):
        if key not in data:
            raise ConfigurationError("Plan file {} is missing required field {}".format(srcFile, key))

    versionString = data["MinimumRequiredVersion"]
    if not versionIsCompatible(versionString):
        printWarning("Version = {} in plan file {} does not match XgemmTuner version = {}" \
                .format(versionString, srcFile, __version__) )
    return data
