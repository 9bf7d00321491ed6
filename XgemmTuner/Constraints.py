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

import sys

from .Common import ConfigurationError, globalParameters, print2
from .Parameters import Variation, getVariation
from .Utils import hash_objs, state


def isMultiple(a, b):
    """True iff a is an integer multiple of b; nothing is a multiple of 0"""
    if b == 0:
        return False
    return (a // b) * b == a


########################################
# Print a reject message :
def reject(constraint, config):
    if globalParameters["PrintSolutionRejectionReason"]:
        sys.stdout.write("\nreject: ")
        print("{} failed for {}".format(constraint, \
                ", ".join("{}={}".format(n, config[n]) for n in constraint.operands)))


class Constraint:
    """
    A validity rule over an ordered list of tuning parameter names.

    The tag selects the rule, the operands name the parameters it reads, in order:
      MultipleOf         (a, b)       a is a multiple of b
      MultipleOfProduct  (a, b, c)    a is a multiple of b*c
      MultipleOfRatio    (a, b, c, d) a is a multiple of (b*c)/d, integer division
      Equal              (a, b)       a == b
    """

    Arity = {
        'MultipleOf': 2,
        'MultipleOfProduct': 3,
        'MultipleOfRatio': 4,
        'Equal': 2,
    }

    def __init__(self, tag, operands):
        if tag not in Constraint.Arity:
            raise ConfigurationError("Unknown constraint kind {}; valid kinds are {}" \
                    .format(tag, sorted(Constraint.Arity.keys())))
        operands = tuple(operands)
        if len(operands) != Constraint.Arity[tag]:
            raise ConfigurationError("{} takes {} parameters, got {}" \
                    .format(tag, Constraint.Arity[tag], list(operands)))
        self._tag = tag
        self._operands = operands

    @classmethod
    def MultipleOf(cls, a, b):
        return cls('MultipleOf', (a, b))

    @classmethod
    def MultipleOfProduct(cls, a, b, c):
        return cls('MultipleOfProduct', (a, b, c))

    @classmethod
    def MultipleOfRatio(cls, a, b, c, d):
        return cls('MultipleOfRatio', (a, b, c, d))

    @classmethod
    def Equal(cls, a, b):
        return cls('Equal', (a, b))

    @property
    def tag(self):      return self._tag
    @property
    def operands(self): return self._operands
    @property
    def arity(self):    return Constraint.Arity[self._tag]

    def __call__(self, config):
        v = [config[name] for name in self._operands]
        if self._tag == 'MultipleOf':
            return isMultiple(v[0], v[1])
        if self._tag == 'MultipleOfProduct':
            return isMultiple(v[0], v[1]*v[2])
        if self._tag == 'MultipleOfRatio':
            if v[3] == 0:
                return False
            return isMultiple(v[0], (v[1]*v[2]) // v[3])
        return v[0] == v[1]

    def state(self):
        return {'type': self.tag, 'operands': state(list(self.operands))}

    def __eq__(self, other):
        return self.__class__ == other.__class__ and \
               self.tag      == other.tag      and \
               self.operands == other.operands

    def __hash__(self):
        return hash_objs(self.tag, self.operands)

    def __str__(self):
        return "{}({})".format(self.tag, ", ".join(self.operands))

    def __repr__(self):
        return self.__str__()


class ConstraintSet:
    """Ordered constraints; a configuration is valid iff every one of them holds"""

    def __init__(self, constraints=None):
        self.constraints = list(constraints) if constraints is not None else []

    def append(self, constraint):
        self.constraints.append(constraint)

    def checkParameters(self, parameterSpace):
        """Every operand must be a declared tuning parameter"""
        for constraint in self.constraints:
            for name in constraint.operands:
                if name not in parameterSpace:
                    raise ConfigurationError("Constraint {} references undeclared parameter \"{}\"" \
                            .format(constraint, name))

    def firstFailure(self, config):
        for constraint in self.constraints:
            if not constraint(config):
                return constraint
        return None

    def isValid(self, config):
        failed = self.firstFailure(config)
        if failed is not None:
            reject(failed, config)
            return False
        return True

    def __iter__(self):
        return iter(self.constraints)

    def __len__(self):
        return len(self.constraints)

    def __getitem__(self, key):
        return self.constraints[key]

    def state(self):
        return [c.state() for c in self.constraints]

    def __str__(self):
        return "ConstraintSet:\n" + "".join("  {}\n".format(c) for c in self.constraints)


def getConstraints(variation):
    variation = getVariation(variation)
    constraints = ConstraintSet()
    # Requirement for unrolling the WGD loop
    constraints.append(Constraint.MultipleOf("WGD", "KWID"))
    # Required for integer MWID and NWID
    constraints.append(Constraint.MultipleOfProduct("WGD", "MDIMCD", "VWMD"))
    constraints.append(Constraint.MultipleOfProduct("WGD", "NDIMCD", "VWND"))
    # Required for integer MWIAD and NWIBD
    constraints.append(Constraint.MultipleOfProduct("WGD", "MDIMAD", "VWMD"))
    constraints.append(Constraint.MultipleOfProduct("WGD", "NDIMBD", "VWND"))
    # WGD has to be a multiple of KDIMAD = ((MDIMCD*NDIMCD)/(MDIMAD)) and KDIMBD = (...)
    constraints.append(Constraint.MultipleOfRatio("WGD", "MDIMCD", "NDIMCD", "MDIMAD"))
    constraints.append(Constraint.MultipleOfRatio("WGD", "MDIMCD", "NDIMCD", "NDIMBD"))

    # Extra constraints for the limited variation to cut the set of options significantly
    if variation == Variation.Limited:
        constraints.append(Constraint.Equal("MDIMCD", "MDIMAD"))
        constraints.append(Constraint.Equal("NDIMCD", "NDIMBD"))

    print2("# {} variation: {} constraints".format(variation.name, len(constraints)))
    return constraints
