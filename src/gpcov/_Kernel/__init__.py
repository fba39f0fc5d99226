# gpcov/_Kernel/__init__.py
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

from ._errors import (ShapeMismatchError, UnsupportedIndexingError,
    InfiniteSizeError)
from ._eval import map, pairwise, pw
from ._crosskernel import CrossKernel
from ._kernel import Kernel
from ._stationary import (CrossStationaryKernel, StationaryKernel,
    isstationary, Zero, Constant)
from ._finite import (FiniteKernel, LhsFiniteCrossKernel,
    RhsFiniteCrossKernel, FiniteCrossKernel, FiniteZeroKernel,
    FiniteZeroCrossKernel, LhsFiniteZeroCrossKernel, RhsFiniteZeroCrossKernel,
    finite, lhsfinite, rhsfinite, zero, asmatrix)
from ._alg import CompositeCrossKernel, CompositeKernel, add, mul
from ._decorators import (crosskernel, kernel, crossstationarykernel,
    stationarykernel)
