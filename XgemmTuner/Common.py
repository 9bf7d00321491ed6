################################################################################
#
# Copyright (C) 2016-2023 Advanced Micro Devices, Inc. All rights reserved.
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

from . import __version__
from collections import OrderedDict
from copy import deepcopy

import os.path
import sys

# print level
# 0 - user wants no printing
# 1 - user wants limited prints
# 2 - user wants full prints

################################################################################
# Errors
################################################################################
class ConfigurationError(RuntimeError):
  """
  A tuning task that cannot be set up: unsupported precision, a constraint over
  an undeclared parameter, bad problem sizes and so on. Raised before any
  search work begins.
  """
  pass

class GeometryError(ConfigurationError):
  """Thread geometry that does not come out in whole workgroups."""
  pass

################################################################################
# Global Parameters
################################################################################
globalParameters = OrderedDict()

########################################
# common
########################################
globalParameters["MinimumRequiredVersion"] = "1.0.0" # which version of the tuner is required to handle all the features required by this configuration file
globalParameters["PrintLevel"] = 1                # how much info to print. 0=none, 1=standard, 2=verbose
globalParameters["PrintSolutionRejectionReason"] = False  # when a configuration is pruned by a constraint, print which one
globalParameters["ShowProgressBar"] = True        # show a progress bar while filtering large parameter spaces
globalParameters["CpuThreads"] = 1                # threads used to filter the space. N=min(nproc,N). Setting CpuThreads < 1 (ie: 0 or -1) will use max threads (nproc)
globalParameters["ParallelChunkSize"] = 4096      # configurations per task when filtering in parallel

########################################
# search
########################################
globalParameters["RandomSeed"] = 0                # seed for the sampled search strategy; None draws a fresh seed every run
globalParameters["MaxPlanEntries"] = 64           # candidate configurations written to a plan file; -1 writes all of them

########################################
# output
########################################
globalParameters["PlanFormat"] = "yaml"           # plan file backend (either yaml or msgpack)
globalParameters["WorkingPath"] = os.getcwd()     # path where plan files are written
globalParameters["ConfigPath"] = None

# Save a copy - since pytest doesn't re-run this initialization code and YAML files can override global settings - odd things can happen
defaultGlobalParameters = deepcopy(globalParameters)

################################################################################
# Print Debug
################################################################################
def print1(message):
  if globalParameters["PrintLevel"] >= 1:
    print(message)
    sys.stdout.flush()
def print2(message):
  if globalParameters["PrintLevel"] >= 2:
    print(message)
    sys.stdout.flush()

def printWarning(message):
  print("XgemmTuner::WARNING: %s" % message)
  sys.stdout.flush()
def printExit(message):
  print("XgemmTuner::FATAL: %s" % message)
  sys.stdout.flush()
  sys.exit(-1)

HR = "################################################################################"

def restoreDefaultGlobalParameters():
  """
  Restores `globalParameters` back to defaults.
  """
  global globalParameters
  global defaultGlobalParameters
  # Can't just assign globalParameters = deepcopy(defaultGlobalParameters) because that would
  # result in dangling references in modules that imported it by name.
  globalParameters.clear()
  for key, value in deepcopy(defaultGlobalParameters).items():
    globalParameters[key] = value

################################################################################
################################################################################
def assignGlobalParameters( config ):
  """
  Assign Global Parameters
  Each global parameter has a default parameter, and the user
  can override them, overriding happens here
  """

  global globalParameters

  # Minimum Required Version
  if "MinimumRequiredVersion" in config:
    if not versionIsCompatible(config["MinimumRequiredVersion"]):
      raise ConfigurationError("Config file requires version=%s is not compatible with current XgemmTuner version=%s" \
          % (config["MinimumRequiredVersion"], __version__) )

  for key in config:
    if key not in globalParameters:
      raise ConfigurationError("Unknown global parameter \"%s\"" % key)

  # User-specified global parameters
  print2("GlobalParameters:")
  for key in globalParameters:
    defaultValue = globalParameters[key]
    if key in config:
      configValue = config[key]
      if configValue == defaultValue:
        print2(" %24s: %8s (same)" % (key, configValue))
      else:
        print2(" %24s: %8s (overridden)" % (key, configValue))
    else:
      print2(" %24s: %8s (unspecified)" % (key, defaultValue))

  for key in config:
    globalParameters[key] = deepcopy(config[key])

  if globalParameters["PlanFormat"] not in ("yaml", "msgpack"):
    raise ConfigurationError("PlanFormat must be yaml or msgpack, not %s" % globalParameters["PlanFormat"])

################################################################################
# Ensure Path
# create the directory plan files are written to
################################################################################
def ensurePath(path):
  try:
    os.makedirs(path)
  except FileExistsError:
    pass
  except OSError:
    printExit("Failed to create directory \"%s\" " % (path) )
  return path

################################################################################
# Is query version compatible with current version
# a yaml file is compatible if
# tuner.major == yaml.major and tuner.minor.step >= yaml.minor.step
################################################################################
def versionIsCompatible(queryVersionString):
  (qMajor, qMinor, qStep) = queryVersionString.split(".")
  (tMajor, tMinor, tStep) = __version__.split(".")

  # major version must match exactly
  if qMajor != tMajor:
    return False

  # minor.patch version must be >=
  if int(qMinor) > int(tMinor):
    return False
  if qMinor == tMinor:
    if int(qStep) > int(tStep):
      return False
  return True
