import pytest
import os
import sys

testdir = os.path.dirname(__file__)
moddir = os.path.dirname(testdir)
rootdir = os.path.dirname(moddir)
sys.path.append(rootdir)

def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests")

def pytest_collection_modifyitems(items):
    """
    Adds a mark for the root directory name to each test.
    """
    for item in items:
        relpath = os.path.relpath(str(item.fspath), testdir)
        components = relpath.split(os.path.sep)
        if len(components) > 1 and len(components[0]) > 0:
            item.add_marker(getattr(pytest.mark, components[0]))

@pytest.fixture(autouse=True)
def restoreGlobalParameters():
    from XgemmTuner import Common
    yield
    Common.restoreDefaultGlobalParameters()

@pytest.fixture
def useGlobalParameters():
    from XgemmTuner import Common

    class gpUpdater:
        def __init__(self, **params):
            self.additionalParams = params

        def __enter__(self):
            Common.restoreDefaultGlobalParameters()
            Common.assignGlobalParameters(self.additionalParams)

        def __exit__(self, exc_type, exc_value, traceback):
            Common.restoreDefaultGlobalParameters()

    return gpUpdater

@pytest.fixture
def recordingDriver():
    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, settings):
            self.calls.append(settings)
            return settings.kernelFamily

    return Recorder()
