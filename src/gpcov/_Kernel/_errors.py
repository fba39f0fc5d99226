# gpcov/_Kernel/_errors.py
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

class ShapeMismatchError(ValueError):
    """ Kernels of different sizes combined, or inputs of different lengths
    evaluated pointwise """

class UnsupportedIndexingError(ValueError):
    """ The indices of a kernel axis can not be enumerated """

class InfiniteSizeError(ValueError):
    """ A matrix is requested for a kernel with an unbounded axis """
