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

from enum import Enum

import numpy
from tqdm import tqdm

from .Common import globalParameters

def progress(obj, **kwargs):
    """Wraps obj in a tqdm progress bar unless progress bars are off or nothing is printed"""
    disable = not globalParameters["ShowProgressBar"] or globalParameters["PrintLevel"] < 1
    return tqdm(obj, disable=disable, **kwargs)

def state(obj):
    if hasattr(obj, 'state'):
        return obj.state()

    if hasattr(obj.__class__, 'StateKeys'):
        rv = {}
        for key in obj.__class__.StateKeys:
            attr = key
            if isinstance(key, tuple):
                (key, attr) = key
            rv[key] = state(getattr(obj, attr))
        return rv

    if isinstance(obj, Enum):
        return obj.name

    if isinstance(obj, dict):
        return dict([(k, state(v)) for k,v in list(obj.items())])

    if isinstance(obj, numpy.generic):
        return state(obj.item())

    if any([isinstance(obj, cls) for cls in [str, int, float]]):
        return obj

    if isinstance(obj, complex):
        return [obj.real, obj.imag]

    try:
        obj = [state(i) for i in obj]
        return obj
    except TypeError:
        pass

    return obj

def hash_objs(*objs, **kwargs):
    return hash(tuple(objs))
