# gpcov/__init__.py
#
# Copyright (c) 2022, 2023, 2024, Giacomo Petrillo
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

"""
Algebra of covariance functions for Gaussian processes, with evaluation on
sequences of inputs that exploits the structure of the covariance matrix.
"""

__version__ = '0.1.0'

# this first because it modifies global state
from . import _patch_jax

from ._inputs import (
    StepRange,
    ColVecs,
    ALL,
)
from ._linalg import (
    StructuredMatrix,
    Fill,
    Zeros,
    Diagonal,
    Toeplitz,
    SymToeplitz,
    dense,
    sqeuclidean_pairwise,
    sqeuclidean_colwise,
)
from ._Kernel import (
    CrossKernel,
    Kernel,
    CrossStationaryKernel,
    StationaryKernel,
    CompositeCrossKernel,
    CompositeKernel,
    FiniteKernel,
    LhsFiniteCrossKernel,
    RhsFiniteCrossKernel,
    FiniteCrossKernel,
    FiniteZeroKernel,
    FiniteZeroCrossKernel,
    LhsFiniteZeroCrossKernel,
    RhsFiniteZeroCrossKernel,
    crosskernel,
    kernel,
    crossstationarykernel,
    stationarykernel,
    map,
    pairwise,
    pw,
    isstationary,
    finite,
    lhsfinite,
    rhsfinite,
    zero,
    asmatrix,
    add,
    mul,
    ShapeMismatchError,
    UnsupportedIndexingError,
    InfiniteSizeError,
)
from ._kernels import * # safe, _kernels/__init__.py only imports kernels
from ._log import set_verbosity, getlog, clearlog
