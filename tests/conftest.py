import os
import sys

import numpy as np
import pytest

# Ensure the repository root is in sys.path for imports
root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if root not in sys.path:
    sys.path.insert(0, root)

from ripplelab.fdtd2d import RippleTank, WaveField


@pytest.fixture
def field():
    return WaveField(width=64, height=48, cell_scale=2.0)


@pytest.fixture
def tank(field):
    return RippleTank(field=field)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
