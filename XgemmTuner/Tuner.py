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

if __name__ == "__main__":
    print("This file can no longer be run as a script.  Run the 'XgemmTuner' command instead.")
    exit(1)

import os
import sys
import argparse

import yaml

from .Arguments import TunerArguments
from .Common import globalParameters, print1, printExit, ensurePath, \
    assignGlobalParameters, restoreDefaultGlobalParameters, ConfigurationError, HR
from .DataType import DataType
from .Parameters import Variation, getTunerDefaults, getVariation
from .PlanDriver import PlanDriver
from .TunerSettings import getTunerSettings
from . import LibraryIO
from . import __version__

# keys accepted in the TunerArguments section of a config and as overrides
validArgumentKeys = ("m", "n", "k", "alpha", "beta", "fraction", "numRuns", "heuristic",
                     "psoSwarmSize", "psoInfGlobal", "psoInfLocal", "psoInfRandom")

################################################################################
# Precision Dispatch
# 16 half, 32 single, 64 double, 3232 complex single, 6464 complex double;
# DataType names and chars (S, D, C, Z, H) are accepted too
################################################################################
def getPrecision(precision):
  if isinstance(precision, DataType):
    return precision
  try:
    if isinstance(precision, str) and not precision.isdigit():
      return DataType(precision)
    return DataType.fromPrecision(int(precision))
  except (KeyError, ValueError, TypeError):
    raise ConfigurationError("Unsupported precision %s; supported precisions are %s" \
        % (precision, [p["precision"] for p in DataType.properties]))

def scalarFromConfig(value):
  """Scalars from YAML: a number or a [real, imag] pair"""
  if isinstance(value, (list, tuple)):
    if len(value) != 2:
      raise ConfigurationError("Complex scalar %s must be [real, imag]" % (value,))
    return complex(value[0], value[1])
  return value

def getTunerArguments(variation, dataType, arguments=None):
  """Defaults of the variation, overridden by arguments (a dict of validArgumentKeys)"""
  arguments = {} if arguments is None else arguments
  for key in arguments:
    if key not in validArgumentKeys:
      raise ConfigurationError("Unknown tuner argument \"%s\"; valid arguments are %s" \
          % (key, list(validArgumentKeys)))

  defaults = getTunerDefaults(variation)
  values = {"m": defaults.m, "n": defaults.n, "k": defaults.k,
            "fraction": defaults.fraction, "numRuns": defaults.numRuns}
  for key, value in arguments.items():
    if value is not None:
      values[key] = scalarFromConfig(value) if key in ("alpha", "beta") else value
  return TunerArguments(dataType, **values)

################################################################################
# Tune one variation
# builds the settings for (variation, precision) and hands them to the driver;
# configuration errors are raised before the driver is called
################################################################################
def tuneVariation(variation, precision, driver, arguments=None):
  variation = getVariation(variation)
  dataType = getPrecision(precision)
  args = getTunerArguments(variation, dataType, arguments)
  settings = getTunerSettings(variation, args)
  print1("# Tuning %s for precision %u" % (settings.kernelFamily, dataType.toPrecision()))
  return driver(settings)

def startVariations(precision, driver, arguments=None):
  """The limited variation first, then the expanded one"""
  dataType = getPrecision(precision)
  return [tuneVariation(variation, dataType, driver, arguments) for variation in Variation]

################################################################################
# Command line
################################################################################
def addCommonArguments(argParser):
  """
  Add a common set of arguments to `argParser`.

  Used by the main XgemmTuner script and the unit tests.
  """
  def splitExtraParameters(par):
    """
    Allows the --global-parameters option to specify any parameters from the command line.
    """
    (key, value) = par.split("=", 1)
    value = yaml.safe_load(value)
    return (key, value)

  argParser.add_argument("-v", "--verbose", action="store_true", \
      help="set PrintLevel=2")
  argParser.add_argument("--plan-format", dest="PlanFormat", choices=["yaml", "msgpack"], \
      action="store", default=None, help="select which plan file format to use")
  argParser.add_argument("--print-rejections", dest="printRejections", action="store_true", \
      help="print the constraint that prunes each configuration")
  argParser.add_argument("--global-parameters", nargs="+", type=splitExtraParameters, default=[])

def addTunerArguments(argParser):
  def parseScalar(s):
    try:
      return float(s)
    except ValueError:
      return complex(s)

  argParser.add_argument("--precision", default="32", \
      help="16, 32, 64, 3232 or 6464")
  argParser.add_argument("-m", dest="m", type=int, default=None)
  argParser.add_argument("-n", dest="n", type=int, default=None)
  argParser.add_argument("-k", dest="k", type=int, default=None)
  argParser.add_argument("--alpha", dest="alpha", type=parseScalar, default=None)
  argParser.add_argument("--beta", dest="beta", type=parseScalar, default=None)
  argParser.add_argument("--fraction", dest="fraction", type=float, default=None, \
      help="evaluate 1/fraction of the valid configurations; 1.0 tests all")
  argParser.add_argument("--num-runs", dest="numRuns", type=int, default=None)
  argParser.add_argument("--heuristic", dest="heuristic", type=int, default=None, \
      help="search heuristic for the driver: 0=full/random, 1=annealing, 2=PSO")
  argParser.add_argument("--pso-swarm-size", dest="psoSwarmSize", type=int, default=None)
  argParser.add_argument("--pso-inf-global", dest="psoInfGlobal", type=float, default=None)
  argParser.add_argument("--pso-inf-local", dest="psoInfLocal", type=float, default=None)
  argParser.add_argument("--pso-inf-random", dest="psoInfRandom", type=float, default=None)

def argUpdatedGlobalParameters(args):
  """
  Returns a dictionary with `globalParameters` keys that should be updated based on `args`.
  """
  rv = {}
  # override config with command-line options
  if args.verbose:
    print1("# Command-line override: PrintLevel")
    rv["PrintLevel"] = 2
  if args.PlanFormat:
    print1("# Command-line override: PlanFormat")
    rv["PlanFormat"] = args.PlanFormat
  if args.printRejections:
    rv["PrintSolutionRejectionReason"] = True

  for key, value in args.global_parameters:
    rv[key] = value

  return rv

def argUpdatedTunerArguments(config, args):
  """TunerArguments from the config file, overridden by the command line"""
  rv = dict(config.get("TunerArguments") or {})
  for key in validArgumentKeys:
    value = getattr(args, key)
    if value is not None:
      rv[key] = value
  return rv

################################################################################
# XgemmTuner
# - below entry points call here
################################################################################
def XgemmTuner(userArgs, driver=None):
  # 1st half of splash
  print1("")
  print1(HR)
  print1("#")
  print1("#  XgemmTuner v%s" % (__version__) )

  # setup argument parser
  argParser = argparse.ArgumentParser()
  argParser.add_argument("--config", dest="config_file", type=os.path.realpath, default=None, \
      help="tuning config.yaml file")
  argParser.add_argument("--output-path", dest="output_path", default=None, \
      help="path where plan files are written")
  argParser.add_argument("--version", action="version", \
      version="%(prog)s {version}".format(version=__version__))
  addCommonArguments(argParser)
  addTunerArguments(argParser)

  # parse arguments
  args = argParser.parse_args(userArgs)

  # 2nd half of splash
  print1("#  Config: %s" % (args.config_file) )
  print1("#")
  print1(HR)
  print1("")

  print1("# Restoring default globalParameters")
  restoreDefaultGlobalParameters()

  try:
    # read config
    config = LibraryIO.readConfig(args.config_file) if args.config_file else {}
    globalParameters["ConfigPath"] = args.config_file

    # assign global parameters
    assignGlobalParameters(config.get("GlobalParameters") or {})
    overrideParameters = argUpdatedGlobalParameters(args)
    assignGlobalParameters(overrideParameters)

    if args.output_path:
      globalParameters["WorkingPath"] = ensurePath(os.path.abspath(args.output_path))

    if driver is None:
      driver = PlanDriver(globalParameters["WorkingPath"] if args.output_path else None)

    return startVariations(args.precision, driver, argUpdatedTunerArguments(config, args))
  except ConfigurationError as e:
    printExit(str(e))

# installed "XgemmTuner" command
def main():
    XgemmTuner(sys.argv[1:])
