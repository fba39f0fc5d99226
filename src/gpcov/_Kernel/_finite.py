# gpcov/_Kernel/_finite.py
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

""" Kernels restricted to finite sequences of inputs """

import math

from jax import numpy as jnp

from .. import _inputs
from .._inputs import ALL
from .._linalg import Zeros

from . import _crosskernel
from . import _kernel
from . import _stationary
from . import _errors
from . import _eval

class LhsFiniteCrossKernel(_crosskernel.CrossKernel):
    """

    Kernel whose first argument is an index into a captured sequence:
    ``obj(p, y) = kernel(x[p], y)``.

    Parameters
    ----------
    kernel : CrossKernel
        The wrapped kernel.
    x : sequence
        The captured sequence.

    """

    def __new__(cls, kernel, x):
        return super().__new__(cls, kernel=kernel, x=x)

    @property
    def kernel(self):
        return self._initkw['kernel']

    @property
    def x(self):
        return self._initkw['x']

    def _sizes(self):
        return len(self.x), self.kernel.size(1)

    def _binary(self, p, y):
        return self.kernel._binary(self.x[p], y)

class RhsFiniteCrossKernel(_crosskernel.CrossKernel):
    """

    Kernel whose second argument is an index into a captured sequence:
    ``obj(x, q) = kernel(x, y[q])``.

    Parameters
    ----------
    kernel : CrossKernel
        The wrapped kernel.
    y : sequence
        The captured sequence.

    """

    def __new__(cls, kernel, y):
        return super().__new__(cls, kernel=kernel, y=y)

    @property
    def kernel(self):
        return self._initkw['kernel']

    @property
    def y(self):
        return self._initkw['y']

    def _sizes(self):
        return self.kernel.size(0), len(self.y)

    def _binary(self, x, q):
        return self.kernel._binary(x, self.y[q])

class FiniteCrossKernel(_crosskernel.CrossKernel):
    """

    Kernel whose two arguments are indices into two captured sequences:
    ``obj(p, q) = kernel(x[p], y[q])``.

    Parameters
    ----------
    kernel : CrossKernel
        The wrapped kernel.
    x, y : sequence
        The captured sequences.

    """

    def __new__(cls, kernel, x, y):
        return super().__new__(cls, kernel=kernel, x=x, y=y)

    @property
    def kernel(self):
        return self._initkw['kernel']

    @property
    def x(self):
        return self._initkw['x']

    @property
    def y(self):
        return self._initkw['y']

    def _sizes(self):
        return len(self.x), len(self.y)

    def _binary(self, p, q):
        return self.kernel._binary(self.x[p], self.y[q])

class FiniteKernel(_kernel.Kernel):
    """

    Symmetric kernel whose arguments are indices into a captured sequence:
    ``obj(p, q) = kernel(x[p], x[q])``.

    Parameters
    ----------
    kernel : Kernel
        The wrapped kernel.
    x : sequence
        The captured sequence.

    """

    def __new__(cls, kernel, x):
        if not isinstance(kernel, _kernel.Kernel):
            raise TypeError(f'FiniteKernel needs a Kernel, got '
                f'{kernel.__class__.__name__}')
        return super().__new__(cls, kernel=kernel, x=x)

    @property
    def kernel(self):
        return self._initkw['kernel']

    @property
    def x(self):
        return self._initkw['x']

    def _sizes(self):
        n = len(self.x)
        return n, n

    def _binary(self, p, q):
        return self.kernel._binary(self.x[p], self.x[q])

    def _unary(self, p):
        return self.kernel._unary(self.x[p])

def _same(p, q):
    return p is q or _inputs.isall(p) and _inputs.isall(q)

# the wrappers delegate once to the wrapped kernel with the selected part of
# the captured sequences, so its fastest path applies

@LhsFiniteCrossKernel.register_map(object, object)
def _map_lhs(self, p, y):
    return _eval.map(self.kernel, _inputs.take(self.x, p), y)

@LhsFiniteCrossKernel.register_pairwise(object, object)
def _pairwise_lhs(self, p, y):
    return _eval.pairwise(self.kernel, _inputs.take(self.x, p), y)

@RhsFiniteCrossKernel.register_map(object, object)
def _map_rhs(self, x, q):
    return _eval.map(self.kernel, x, _inputs.take(self.y, q))

@RhsFiniteCrossKernel.register_pairwise(object, object)
def _pairwise_rhs(self, x, q):
    return _eval.pairwise(self.kernel, x, _inputs.take(self.y, q))

@FiniteCrossKernel.register_map(object, object)
def _map_cross(self, p, q):
    x = _inputs.take(self.x, p)
    y = _inputs.take(self.y, q)
    return _eval.map(self.kernel, x, y)

@FiniteCrossKernel.register_pairwise(object, object)
def _pairwise_cross(self, p, q):
    x = _inputs.take(self.x, p)
    y = _inputs.take(self.y, q)
    return _eval.pairwise(self.kernel, x, y)

@FiniteKernel.register_map(object)
def _map_finite_diagonal(self, p):
    return _eval.map(self.kernel, _inputs.take(self.x, p))

@FiniteKernel.register_map(object, object)
def _map_finite(self, p, q):
    if _same(p, q):
        return _eval.map(self.kernel, _inputs.take(self.x, p))
    x = _inputs.take(self.x, p)
    y = _inputs.take(self.x, q)
    return _eval.map(self.kernel, x, y)

@FiniteKernel.register_pairwise(object)
def _pairwise_finite_sym(self, p):
    return _eval.pairwise(self.kernel, _inputs.take(self.x, p))

@FiniteKernel.register_pairwise(object, object)
def _pairwise_finite(self, p, q):
    if _same(p, q):
        return _eval.pairwise(self.kernel, _inputs.take(self.x, p))
    x = _inputs.take(self.x, p)
    y = _inputs.take(self.x, q)
    return _eval.pairwise(self.kernel, x, y)

class _ZeroWrapper(_crosskernel.CrossKernel):
    """ common base of the zero kernels with finite axes, which only keep
    track of their sizes """

    def __new__(cls, shape):
        return super().__new__(cls, shape=tuple(shape))

    def _sizes(self):
        return self._initkw['shape']

    def iszero(self):
        return True

    def _binary(self, x, y):
        return jnp.zeros(())

    def _length(self, dim, arg):
        if _inputs.isall(arg):
            n = self.size(dim)
            if math.isinf(n):
                raise _errors.UnsupportedIndexingError(f'can not select all '
                    f'the elements of infinite axis {dim}')
            return n
        if isinstance(arg, slice):
            return len(range(self.size(dim))[arg])
        return len(arg)

@_ZeroWrapper.register_map(object)
def _map_zerowrapper_diagonal(self, p):
    return Zeros(self._length(0, p))

@_ZeroWrapper.register_map(object, object)
def _map_zerowrapper(self, p, q):
    return Zeros(self._length(0, p))

@_ZeroWrapper.register_pairwise(object, object)
def _pairwise_zerowrapper(self, p, q):
    return Zeros((self._length(0, p), self._length(1, q)))

class FiniteZeroCrossKernel(_ZeroWrapper):
    """ Zero kernel with finite axes of the lengths of `x` and `y` """

    def __new__(cls, x, y):
        return super().__new__(cls, (len(x), len(y)))

class LhsFiniteZeroCrossKernel(_ZeroWrapper):
    """ Zero kernel with a finite first axis of the length of `x` """

    def __new__(cls, x):
        return super().__new__(cls, (len(x), math.inf))

class RhsFiniteZeroCrossKernel(_ZeroWrapper):
    """ Zero kernel with a finite second axis of the length of `y` """

    def __new__(cls, y):
        return super().__new__(cls, (math.inf, len(y)))

class FiniteZeroKernel(_ZeroWrapper, _kernel.Kernel):
    """ Symmetric zero kernel with two finite axes of the length of `x` """

    def __new__(cls, x):
        n = len(x)
        return super().__new__(cls, (n, n))

@FiniteZeroKernel.register_pairwise(object)
def _pairwise_zerowrapper_sym(self, p):
    n = self._length(0, p)
    return Zeros((n, n))

def _split(k):
    """ decompose a kernel into the underlying kernel (None for zero
    kernels) and the sequences captured on the two axes (None if not
    captured) """
    if isinstance(k, _stationary.Zero):
        return None, None, None
    if isinstance(k, _ZeroWrapper):
        n0, n1 = k.size()
        if isinstance(k, FiniteZeroKernel):
            x = range(n0)
            return None, x, x
        x = None if math.isinf(n0) else range(n0)
        y = None if math.isinf(n1) else range(n1)
        return None, x, y
    if isinstance(k, FiniteKernel):
        return k.kernel, k.x, k.x
    if isinstance(k, FiniteCrossKernel):
        return k.kernel, k.x, k.y
    if isinstance(k, LhsFiniteCrossKernel):
        return k.kernel, k.x, None
    if isinstance(k, RhsFiniteCrossKernel):
        return k.kernel, None, k.y
    return k, None, None

def _build(kernel, x, y, symmetric):
    if kernel is None:
        if x is None and y is None:
            return _stationary.Zero()
        elif y is None:
            return LhsFiniteZeroCrossKernel(x)
        elif x is None:
            return RhsFiniteZeroCrossKernel(y)
        elif x is y:
            return FiniteZeroKernel(x)
        else:
            return FiniteZeroCrossKernel(x, y)
    if x is None and y is None:
        return kernel
    elif y is None:
        return LhsFiniteCrossKernel(kernel, x)
    elif x is None:
        return RhsFiniteCrossKernel(kernel, y)
    elif symmetric:
        return FiniteKernel(kernel, x)
    else:
        return FiniteCrossKernel(kernel, x, y)

def finite(k, x, y=None):
    """

    Restrict a kernel to finite sequences of inputs.

    Parameters
    ----------
    k : CrossKernel
        The kernel.
    x : sequence
        The inputs on the first axis, and on the second if `y` is not
        specified.
    y : sequence, optional
        The inputs on the second axis.

    Returns
    -------
    f : CrossKernel
        A kernel which takes indices of `x` and `y` in place of the inputs:
        `FiniteKernel` if `k` is a `Kernel` and `y` is not specified,
        `FiniteCrossKernel` otherwise. If `k` is already restricted, the
        previous restriction is replaced. If `k` is zero, the result is a
        zero kernel.

    """
    kernel, _, _ = _split(k)
    if y is None:
        symmetric = kernel is None or isinstance(kernel, _kernel.Kernel)
        return _build(kernel, x, x, symmetric)
    return _build(kernel, x, y, False)

def lhsfinite(k, x):
    """
    Restrict the first axis of a kernel to the sequence `x`, see `finite`.
    """
    kernel, _, y = _split(k)
    return _build(kernel, x, y, False)

def rhsfinite(k, y):
    """
    Restrict the second axis of a kernel to the sequence `y`, see `finite`.
    """
    kernel, x, _ = _split(k)
    return _build(kernel, x, y, False)

def zero(k):
    """ The zero kernel with the same sizes of `k` """
    n0, n1 = k.size()
    if math.isinf(n0) and math.isinf(n1):
        return _stationary.Zero()
    elif math.isinf(n0):
        return RhsFiniteZeroCrossKernel(range(n1))
    elif math.isinf(n1):
        return LhsFiniteZeroCrossKernel(range(n0))
    elif isinstance(k, _kernel.Kernel):
        return FiniteZeroKernel(range(n0))
    else:
        return FiniteZeroCrossKernel(range(n0), range(n1))

def asmatrix(k):
    """

    The covariance matrix represented by a kernel with finite axes.

    Parameters
    ----------
    k : CrossKernel
        A kernel with finite sizes, e.g., produced by `finite` or
        `Empirical`.

    Returns
    -------
    m : 2d array or StructuredMatrix
        ``pairwise(k, ALL)`` or ``pairwise(k, ALL, ALL)``.

    Raises
    ------
    InfiniteSizeError :
        An axis of the kernel is infinite.

    """
    n0, n1 = k.size()
    if math.isinf(n0) or math.isinf(n1):
        raise _errors.InfiniteSizeError(f'{k.__class__.__name__} has sizes '
            f'{(n0, n1)}')
    if isinstance(k, _kernel.Kernel):
        return _eval.pairwise(k, ALL)
    return _eval.pairwise(k, ALL, ALL)
