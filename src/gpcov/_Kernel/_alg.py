# gpcov/_Kernel/_alg.py
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

""" sum and product of kernels """

import math
import numbers
import operator

import numpy
from jax import numpy as jnp

from .._linalg import _structured

from . import _errors
from . import _eval
from . import _finite
from ._crosskernel import CrossKernel
from ._kernel import Kernel
from ._stationary import Constant

class CompositeCrossKernel(CrossKernel):
    """

    Sum or product of two kernels, evaluated by combining the evaluations of
    the operands.

    Structured results of the operands are combined keeping the structure
    when possible, e.g., the sum of two Toeplitz matrices is Toeplitz.

    Parameters
    ----------
    op : {operator.add, operator.mul}
        The operation.
    k1, k2 : CrossKernel
        The operands, with the same sizes.

    """

    def __new__(cls, op, k1, k2):
        if op not in _structops:
            raise KeyError(op)
        return super().__new__(cls, op=op, k1=k1, k2=k2)

    @property
    def op(self):
        return self._initkw['op']

    @property
    def k1(self):
        return self._initkw['k1']

    @property
    def k2(self):
        return self._initkw['k2']

    def _sizes(self):
        return self.k1.size()

    def _binary(self, x, y):
        return self.op(self.k1._binary(x, y), self.k2._binary(x, y))

    def _unary(self, x):
        return self.op(self.k1._unary(x), self.k2._unary(x))

    def __repr__(self):
        sym = '+' if self.op is operator.add else '*'
        return f'({self.k1!r} {sym} {self.k2!r})'

class CompositeKernel(CompositeCrossKernel, Kernel):
    pass

_structops = {
    operator.add: _structured.add,
    operator.mul: _structured.mul,
}

def _combine(self, evaluate, args):
    r1 = evaluate(self.k1, *args)
    r2 = evaluate(self.k2, *args)
    return _structops[self.op](r1, r2)

@CompositeCrossKernel.register_map(object)
def _map_composite_diagonal(self, x):
    return _combine(self, _eval.map, (x,))

@CompositeCrossKernel.register_map(object, object)
def _map_composite(self, x, y):
    return _combine(self, _eval.map, (x, y))

@CompositeKernel.register_pairwise(object)
def _pairwise_composite_sym(self, x):
    return _combine(self, _eval.pairwise, (x,))

@CompositeCrossKernel.register_pairwise(object, object)
def _pairwise_composite(self, x, y):
    return _combine(self, _eval.pairwise, (x, y))

def _checksizes(k1, k2):
    if k1.size() != k2.size():
        raise _errors.ShapeMismatchError(f'can not combine kernels with '
            f'sizes {k1.size()} and {k2.size()}')

def _composite(op, k1, k2):
    if isinstance(k1, Kernel) and isinstance(k2, Kernel):
        return CompositeKernel(op, k1, k2)
    return CompositeCrossKernel(op, k1, k2)

def add(k1, k2):
    """

    Sum of two kernels.

    Parameters
    ----------
    k1, k2 : CrossKernel
        The operands, with the same sizes.

    Returns
    -------
    k : CrossKernel
        If one of the operands is zero, the other one, else a
        `CompositeKernel` if both operands are `Kernel`, else a
        `CompositeCrossKernel`.

    Raises
    ------
    ShapeMismatchError :
        The sizes of the kernels are different.

    """
    _checksizes(k1, k2)
    if k1.iszero():
        return k2
    if k2.iszero():
        return k1
    return _composite(operator.add, k1, k2)

def mul(k1, k2):
    """

    Elementwise product of two kernels.

    If one of the operands is zero, return a zero kernel with the same
    sizes without evaluating the other, see `add`.

    """
    _checksizes(k1, k2)
    if k1.iszero() or k2.iszero():
        return _finite.zero(k1)
    return _composite(operator.mul, k1, k2)

def is_numerical_scalar(x):
    return (
        isinstance(x, numbers.Real) or
        (isinstance(x, (numpy.ndarray, jnp.ndarray)) and x.ndim == 0)
    )
    # do not use jnp.isscalar because it returns False for strongly
    # typed 0-dim arrays

def constant_like(c, k):
    """ `Constant` kernel with value `c` and the same sizes of `k` """
    const = Constant(c)
    n0, n1 = k.size()
    x = None if math.isinf(n0) else range(n0)
    y = None if math.isinf(n1) else range(n1)
    if x is not None and y is not None:
        if isinstance(k, Kernel) and n0 == n1:
            return _finite.finite(const, x)
        return _finite.finite(const, x, y)
    if x is not None:
        return _finite.lhsfinite(const, x)
    if y is not None:
        return _finite.rhsfinite(const, y)
    return const

def binary(op, a, b):
    """ implementation of the binary operators of `CrossKernel`, with scalar
    operands promoted to `Constant` """
    if not isinstance(a, CrossKernel):
        if not is_numerical_scalar(a):
            return NotImplemented
        a = constant_like(a, b)
    if not isinstance(b, CrossKernel):
        if not is_numerical_scalar(b):
            return NotImplemented
        b = constant_like(b, a)
    return {operator.add: add, operator.mul: mul}[op](a, b)
