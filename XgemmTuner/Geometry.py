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

from .Common import ConfigurationError, GeometryError

from typing import NamedTuple, Tuple

################################################################################
# Problem sizes
# sizes must be positive and m, n must tile evenly by every candidate tile
# size, so that geometry derivation never sees a partial workgroup
################################################################################
def checkProblemSizes(m, n, k, tileSizes=()):
  for name, value in (("m", m), ("n", n), ("k", k)):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
      raise ConfigurationError("Problem size %s=%s must be a positive integer" % (name, value))
  for tileSize in tileSizes:
    for name, value in (("m", m), ("n", n)):
      if value % tileSize != 0:
        raise ConfigurationError("Problem size %s=%u is not a multiple of tile size WGD=%u" % (name, value, tileSize))


class GeometrySpec(NamedTuple):
  globalSize: Tuple[int, int]
  localSize: Tuple[int, int]
  globalSizeRef: Tuple[int, int]
  localSizeRef: Tuple[int, int]

  def state(self):
    return {"GlobalSize": list(self.globalSize), "LocalSize": list(self.localSize),
            "GlobalSizeRef": list(self.globalSizeRef), "LocalSizeRef": list(self.localSizeRef)}


class ThreadConfiguration:
  """
  Base thread configuration of the tuned kernel plus the parameter-driven
  transforms applied to it. Each transform entry is a pair of parameter
  names, one per dimension. Transforms run in this order:
    mulLocal:  local  *= (p0, p1)
    mulGlobal: global *= (p0, p1)
    divGlobal: global /= (p0, p1)
  The reference kernel geometry (globalSizeRef, localSizeRef) is not transformed.
  """

  def __init__(self, globalSize, localSize, localSizeRef, \
      mulLocal=(), mulGlobal=(), divGlobal=()):
    self.globalSize = tuple(globalSize)
    self.localSize = tuple(localSize)
    self.globalSizeRef = tuple(globalSize)
    self.localSizeRef = tuple(localSizeRef)
    self.mulLocal = [tuple(p) for p in mulLocal]
    self.mulGlobal = [tuple(p) for p in mulGlobal]
    self.divGlobal = [tuple(p) for p in divGlobal]

  def parameterNames(self):
    names = []
    for pair in self.mulLocal + self.mulGlobal + self.divGlobal:
      for name in pair:
        if name not in names:
          names.append(name)
    return names

  def checkParameters(self, parameterSpace):
    for name in self.parameterNames():
      if name not in parameterSpace:
        raise ConfigurationError("Thread configuration references undeclared parameter \"%s\"" % name)

  def computeGeometry(self, config):
    """Global and local sizes for one resolved configuration"""
    localSize = list(self.localSize)
    globalSize = list(self.globalSize)

    for pair in self.mulLocal:
      for dim, name in enumerate(pair):
        localSize[dim] *= config[name]

    for pair in self.mulGlobal:
      for dim, name in enumerate(pair):
        globalSize[dim] *= config[name]

    for pair in self.divGlobal:
      for dim, name in enumerate(pair):
        divisor = config[name]
        if divisor == 0 or globalSize[dim] % divisor != 0:
          raise GeometryError("global size %u in dimension %u is not divisible by %s=%u" \
              % (globalSize[dim], dim, name, divisor))
        globalSize[dim] //= divisor

    for dim in range(len(globalSize)):
      if globalSize[dim] == 0 or localSize[dim] == 0 or globalSize[dim] % localSize[dim] != 0:
        raise GeometryError("global size %u in dimension %u is not a whole number of workgroups of %u" \
            % (globalSize[dim], dim, localSize[dim]))

    return GeometrySpec(tuple(globalSize), tuple(localSize), self.globalSizeRef, self.localSizeRef)

  def state(self):
    return {"GlobalSize": list(self.globalSize), "LocalSize": list(self.localSize),
            "LocalSizeRef": list(self.localSizeRef),
            "MulLocal": [list(p) for p in self.mulLocal],
            "MulGlobal": [list(p) for p in self.mulGlobal],
            "DivGlobal": [list(p) for p in self.divGlobal]}


def getThreadConfiguration(m, n):
  checkProblemSizes(m, n, 1)
  # Sets the base thread configuration, then transforms it based on the parameters
  return ThreadConfiguration(globalSize=(m, n), localSize=(1, 1), localSizeRef=(8, 8), \
      mulLocal=[("MDIMCD", "NDIMCD")], \
      mulGlobal=[("MDIMCD", "NDIMCD")], \
      divGlobal=[("WGD", "WGD")])


def computeGeometry(m, n, config):
  return getThreadConfiguration(m, n).computeGeometry(config)
