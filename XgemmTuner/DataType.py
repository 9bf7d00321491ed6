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

import functools

import numpy

@functools.total_ordering
class DataType:
    """
    Precisions the direct GEMM kernel can be tuned for, one row per precision.
    'precision' is the number used on the command line (16, 32, 64, 3232, 6464).
    'storage' is the numpy type of the matrix buffers; 'scalar' is the numpy type the
    kernel receives alpha and beta in. Half precision kernels take 32-bit float scalars.
    """

    properties = [
        {'char': 'H', 'name': 'half',          'enum': 'Half',          'precision': 16,
         'storage': numpy.float16,   'scalar': numpy.float32,   'isComplex': False},
        {'char': 'S', 'name': 'single',        'enum': 'Float',         'precision': 32,
         'storage': numpy.float32,   'scalar': numpy.float32,   'isComplex': False},
        {'char': 'D', 'name': 'double',        'enum': 'Double',        'precision': 64,
         'storage': numpy.float64,   'scalar': numpy.float64,   'isComplex': False},
        {'char': 'C', 'name': 'complexSingle', 'enum': 'ComplexFloat',  'precision': 3232,
         'storage': numpy.complex64, 'scalar': numpy.complex64, 'isComplex': True},
        {'char': 'Z', 'name': 'complexDouble', 'enum': 'ComplexDouble', 'precision': 6464,
         'storage': numpy.complex128, 'scalar': numpy.complex128, 'isComplex': True},
    ]
    lookup = {}

    def __init__(self, value):
        if isinstance(value, int):
            self.value = value
        elif isinstance(value, str):
            self.value = DataType.lookup[value.lower()]
        elif isinstance(value, DataType):
            self.value = value.value
        else:
            raise RuntimeError("initializing DataType to {0} {1}".format(str(type(value)), str(value)))

        self.properties = DataType.properties[self.value]

    @classmethod
    def fromPrecision(cls, precision):
        for i, e in enumerate(cls.properties):
            if e['precision'] == precision:
                return cls(i)
        raise KeyError(precision)

    def toChar(self):
        return self.properties['char']
    def toName(self):
        return self.properties['name']
    def toEnum(self):
        return self.properties['enum']
    def toPrecision(self):
        return self.properties['precision']

    def isReal(self):
        return not self.isComplex()
    def isComplex(self):
        return self.properties['isComplex']
    def isSingleComplex(self):
        return self.value == DataType.complexSingle

    def storageType(self):
        return self.properties['storage']

    def realArg(self, value):
        """
        Converts a host-side alpha or beta into the scalar the kernel is compiled to receive.
        Real precisions drop an imaginary part of zero; a non-zero one cannot be represented.
        """
        if self.isReal() and numpy.iscomplexobj(value):
            if numpy.imag(value) != 0:
                raise ValueError("complex scalar {} for real precision {}".format(value, self.toName()))
            value = numpy.real(value)
        return self.properties['scalar'](value)

    def state(self): return self.toEnum()

    def __str__(self):
        return self.toChar()
    def __repr__(self):
        return self.__str__()

    def __hash__(self):
        return hash(self.value)

    def __eq__(self, other):
        if not isinstance(other, DataType):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other):
        if not isinstance(other, DataType):
            return NotImplemented
        return self.value < other.value

def populateLookupTable(properties, lookup):
    """Row number of each precision by name, char and enum; names also become class attributes"""
    for i, e in enumerate(properties):
        setattr(DataType, e['name'], i)
        for k in ['name', 'char', 'enum']:
            lookupKey = e[k].lower()
            if lookupKey in lookup and lookup[lookupKey] != i:
                raise RuntimeError("Duplicate key {1} in property '{0}'".format(k, lookupKey))
            lookup[lookupKey] = i

populateLookupTable(DataType.properties, DataType.lookup)
