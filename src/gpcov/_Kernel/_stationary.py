# gpcov/_Kernel/_stationary.py
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

import functools

from jax import numpy as jnp

from .. import _jaxext
from .._inputs import StepRange
from .._linalg import Fill, Zeros, Toeplitz, SymToeplitz

from . import _crosskernel
from . import _kernel
from . import _eval

class CrossStationaryKernel(_crosskernel.CrossKernel):
    """

    Subclass of `CrossKernel` for stationary kernels.

    A stationary kernel depends only on the difference between its two
    arguments. On `StepRange` inputs with the same step the covariance
    matrix is Toeplitz.

    Parameters
    ----------
    core : callable
        A function taking one positional argument, computed from the two
        inputs as specified by `input`, and optional keyword arguments.
    input : {'abs', 'sq', 'raw'}, default 'abs'
        If ``'abs'``, `core` is passed the euclidean distance between the
        arguments. If ``'sq'``, the squared distance. If ``'raw'``, `core` is
        passed the two arguments as they are, like `CrossKernel`, and it is
        responsible of depending only on their difference.
    **kw
        Additional keyword arguments are passed to the `CrossKernel`
        constructor.

    """

    def __new__(cls, core, *, input='abs', **kw):
        return super().__new__(cls, _statcore(core, input), **kw)

    @classmethod
    def isstationary(cls):
        return True

class StationaryKernel(CrossStationaryKernel, _kernel.Kernel):
    pass

def isstationary(k):
    """ Check if a kernel is stationary """
    return k.isstationary()

@functools.lru_cache(maxsize=None)
def _statcore(core, input):
    # cached to give the same function to jax.jit at each instantiation

    if input == 'raw':
        return core
    elif input == 'abs':
        def dist(x, y):
            if max(x.shape[-1], y.shape[-1]) == 1:
                return jnp.abs(x - y)[..., 0]
            return jnp.sqrt(jnp.sum((x - y) ** 2, axis=-1))
    elif input == 'sq':
        dist = lambda x, y: jnp.sum((x - y) ** 2, axis=-1)
    else:
        raise KeyError(input)

    @functools.wraps(core)
    def newcore(x, y, **kw):
        return core(dist(x, y), **kw)

    return newcore

def _samestep(x, y):
    if len(x) <= 1 or len(y) <= 1:
        return True
    return _jaxext.array_equal(x.step, y.step)

@CrossStationaryKernel.register_pairwise(StepRange, StepRange)
def _pairwise_steprange(self, x, y):
    if len(x) == 0 or len(y) == 0 or not _samestep(x, y):
        return _eval.generic(self, 'pairwise', (x, y))
    col = _eval.map(self, x, Fill(y[0], len(x)))
    row = _eval.map(self, Fill(x[0], len(y)), y)
    return Toeplitz(col, row)

@StationaryKernel.register_pairwise(StepRange)
def _pairwise_steprange_sym(self, x):
    if len(x) == 0:
        return _eval.generic(self, 'pairwise', (x,))
    return SymToeplitz(_eval.map(self, x, Fill(x[0], len(x))))

@CrossStationaryKernel.register_map(StepRange, StepRange)
def _map_steprange(self, x, y):
    if len(x) == 0 or not _samestep(x, y):
        return _eval.generic(self, 'map', (x, y))
    return Fill(self._binary(x[0], y[0]), len(x))

@CrossStationaryKernel.register_map(object)
def _map_diagonal(self, x):
    if len(x) == 0:
        return _eval.generic(self, 'map', (x,))
    return Fill(self._unary(x[0]), len(x))

def _zero(x, y):
    return jnp.zeros(jnp.broadcast_shapes(x.shape, y.shape)[:-1])

class Zero(StationaryKernel):
    """
    Represents a kernel that unconditionally yields zero.

    It is absorbed by the kernel algebra: ``k + Zero()`` is ``k`` and
    ``k * Zero()`` is a zero kernel.
    """

    def __new__(cls):
        return super().__new__(cls, _zero, input='raw')

    def iszero(self):
        return True

@Zero.register_map(object)
def _map_zero_diagonal(self, x):
    return Zeros(len(x))

@Zero.register_map(object, object)
def _map_zero(self, x, y):
    return Zeros(len(x))

@Zero.register_pairwise(object)
def _pairwise_zero_sym(self, x):
    return Zeros((len(x), len(x)))

@Zero.register_pairwise(object, object)
def _pairwise_zero(self, x, y):
    return Zeros((len(x), len(y)))

def _constant(x, y, c):
    return c * jnp.ones(jnp.broadcast_shapes(x.shape, y.shape)[:-1])

class Constant(StationaryKernel):
    """
    Constant kernel ``k(x, y) = c``.

    Parameters
    ----------
    c : scalar, default 1
        The value of the kernel.
    """

    def __new__(cls, c=1.0):
        return super().__new__(cls, _constant, input='raw', c=c)

@Constant.register_map(object)
def _map_constant_diagonal(self, x):
    return Fill(self.initkw['c'], len(x))

@Constant.register_map(object, object)
def _map_constant(self, x, y):
    return Fill(self.initkw['c'], len(x))

@Constant.register_pairwise(object)
def _pairwise_constant_sym(self, x):
    return Fill(self.initkw['c'], (len(x), len(x)))

@Constant.register_pairwise(object, object)
def _pairwise_constant(self, x, y):
    return Fill(self.initkw['c'], (len(x), len(y)))
