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

import numpy

from .Arguments import BufferRole
from .Common import globalParameters, print1, print2
from . import LibraryIO
from .SearchStrategy import searchConfigurations
from .Utils import state


def createBuffers(settings):
    """Host buffers for every role, the way the driver lays them out; unused roles get one element"""
    sizes = {BufferRole.A: settings.sizeA, BufferRole.B: settings.sizeB, BufferRole.C: settings.sizeC}
    dtype = settings.dataType.storageType()
    return dict([(role, numpy.zeros(sizes.get(role, 1), dtype=dtype)) for role in BufferRole])


def describeArgument(argument, buffers):
    for role, buf in buffers.items():
        if argument.value is buf:
            return {"index": argument.index, "name": argument.name,
                    "value": "buffer {}[{}]".format(role.name, buf.size)}
    return state(argument)


class PlanDriver:
    """
    Reference driver: resolves the search for each tuning task without
    executing anything. For every task it applies the search strategy,
    computes geometry and kernel arguments for each selected candidate and
    keeps the result as a plan, optionally written to disk.
    """

    def __init__(self, outputPath=None, seed=None):
        self.outputPath = outputPath
        self.seed = globalParameters["RandomSeed"] if seed is None else seed
        self.plans = {}

    def __call__(self, settings):
        print1("# Planning {}".format(settings))
        selected = searchConfigurations(settings.parameters, settings.constraints, \
                settings.strategy, self.seed)

        buffers = createBuffers(settings)
        maxEntries = globalParameters["MaxPlanEntries"]
        candidates = []
        for config in selected:
            # geometry is resolved for every selected candidate; only the first MaxPlanEntries are kept
            geometry = settings.geometry(config)
            if maxEntries >= 0 and len(candidates) >= maxEntries:
                continue
            candidates.append({
                "Parameters": dict(config),
                "Geometry": state(geometry),
                "Arguments": [describeArgument(a, buffers) for a in settings.arguments(config, buffers)],
            })

        plan = {
            "TotalConfigurations": settings.parameters.totalPermutations(),
            "SelectedConfigurations": len(selected),
            "Candidates": candidates,
        }
        self.plans[(settings.kernelFamily, settings.dataType.toChar())] = plan

        if self.outputPath is not None:
            filename = os.path.join(self.outputPath, "{}_{}".format(settings.kernelFamily, settings.dataType.toChar()))
            filename = LibraryIO.writePlan(filename, state(settings), plan, globalParameters["PlanFormat"])
            print2("# Wrote {}".format(filename))
        return plan
