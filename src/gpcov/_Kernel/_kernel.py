# gpcov/_Kernel/_kernel.py
#
# Copyright (c) 2020, 2022, 2023, 2024, Giacomo Petrillo
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

from . import _crosskernel

class Kernel(_crosskernel.CrossKernel):
    r"""

    Subclass of `CrossKernel` to represent the kernel of a single function:

    .. math::
        \mathrm{kernel}(x, y) = \mathrm{Cov}[f(x), f(y)].

    The kernel is symmetric, and ``obj(x)`` is a shortcut for ``obj(x, x)``.
    The two axes have the same size.

    """

    def __call__(self, x, y=None):
        if y is None:
            return self._unary(x)
        return self._binary(x, y)
