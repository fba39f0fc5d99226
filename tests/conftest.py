# gpcov/tests/conftest.py
#
# Copyright (c) 2023, 2024, Giacomo Petrillo
#
# This file is part of gpcov.
#
# gpcov is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# gpcov is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with gpcov.  If not, see <http://www.gnu.org/licenses/>.

import pytest
import numpy as np

import gpcov as gpc

@pytest.fixture
def rng(request):
    """ A random generator with a deterministic per-test seed """
    nodeid = request.node.nodeid
    seed = np.array([nodeid], np.bytes_).view(np.uint8)
    return np.random.default_rng(seed)

@pytest.fixture(autouse=True)
def clean_log():
    """ Empty the evaluation log and restore the verbosity after each test,
    otherwise the log carries over lines from previous tests. """
    gpc.clearlog()
    yield
    gpc.set_verbosity(0)
    gpc.clearlog()
