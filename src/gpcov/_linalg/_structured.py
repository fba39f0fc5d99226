# gpcov/_linalg/_structured.py
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

""" Lazy matrices with structure returned by the kernel evaluation """

import abc
import numbers
import operator

import numpy
from jax import numpy as jnp
from scipy import linalg

from .. import _jaxext

def dense(m):
    """ Convert a structured or array-like matrix to a jax array """
    if isinstance(m, StructuredMatrix):
        return m.todense()
    return jnp.asarray(m)

def _isint(key):
    return isinstance(key, (numbers.Integral, numpy.integer))

class StructuredMatrix(abc.ABC):
    """
    Base class of lazy matrices. Subclasses define `shape`, `dtype` and
    `todense`, and override the other methods where the structure allows to
    be faster.
    """

    # make numpy defer binary operators to our reflected methods
    __array_ufunc__ = None

    @property
    @abc.abstractmethod
    def shape(self):
        pass

    @property
    @abc.abstractmethod
    def dtype(self):
        pass

    @abc.abstractmethod
    def todense(self):
        """ Return a jax array with the matrix """
        pass

    @property
    def ndim(self):
        return len(self.shape)

    @property
    def size(self):
        return int(numpy.prod(self.shape))

    def __len__(self):
        return self.shape[0]

    def __getitem__(self, key):
        return self.todense()[key]

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def __array__(self, dtype=None, copy=None):
        return numpy.asarray(self.todense(), dtype)

    def diagonal(self):
        return jnp.diagonal(self.todense())

    @property
    def T(self):
        return self.todense().T

    def __matmul__(self, other):
        return self.todense() @ dense(other)

    def __rmatmul__(self, other):
        return dense(other) @ self.todense()

    def __add__(self, other):
        return add(self, other)

    def __radd__(self, other):
        return add(other, self)

    def __mul__(self, other):
        return mul(self, other)

    def __rmul__(self, other):
        return mul(other, self)

    def __repr__(self):
        return f'{self.__class__.__name__}(shape={self.shape})'

class Fill(StructuredMatrix):
    """

    Array with all the elements equal.

    A 1d `Fill` can also be used as an input sequence, e.g., to evaluate a
    kernel against a fixed point.

    Parameters
    ----------
    value : scalar
        The value of the elements.
    shape : int or tuple of int
        The shape of the array.

    """

    def __init__(self, value, shape):
        if _isint(shape):
            shape = (shape,)
        self._shape = tuple(operator.index(s) for s in shape)
        if any(s < 0 for s in self._shape):
            raise ValueError(f'negative dimensions in shape {self._shape}')
        self._value = jnp.asarray(value)
        if self._value.ndim:
            raise ValueError('Fill value must be a scalar')

    @property
    def value(self):
        return self._value

    @property
    def shape(self):
        return self._shape

    @property
    def dtype(self):
        return self._value.dtype

    def _new(self, value, shape):
        return Fill(value, shape)

    def todense(self):
        return jnp.full(self._shape, self._value)

    def __getitem__(self, key):
        if isinstance(key, range):
            key = numpy.asarray(key, int)
        # index a zero-stride dummy to check bounds and compute the shape
        dummy = numpy.broadcast_to(numpy.zeros((), bool), self._shape)
        shape = dummy[key].shape
        if shape:
            return self._new(self._value, shape)
        return self._value

    def __iter__(self):
        if len(self._shape) == 1:
            for _ in range(self._shape[0]):
                yield self._value
        else:
            yield from super().__iter__()

    def diagonal(self):
        return self._new(self._value, min(self._shape[-2:]))

    @property
    def T(self):
        return self._new(self._value, self._shape[::-1])

    def __matmul__(self, other):
        other = dense(other)
        # every row of the product is the same
        row = self._value * jnp.sum(other, axis=0)
        return jnp.broadcast_to(row, self._shape[:-1] + other.shape[1:])

    def __repr__(self):
        return f'{self.__class__.__name__}({self._value!r}, {self._shape})'

class Zeros(Fill):
    """ Array of zeros. """

    def __init__(self, shape, dtype=float):
        super().__init__(jnp.zeros((), dtype), shape)

    def _new(self, value, shape):
        return Zeros(shape, self.dtype)

    def __matmul__(self, other):
        other = dense(other)
        shape = self._shape[:-1] + other.shape[1:]
        return jnp.zeros(shape, jnp.result_type(self.dtype, other.dtype))

    def __repr__(self):
        return f'Zeros({self._shape})'

class Diagonal(StructuredMatrix):
    """

    Diagonal matrix.

    Parameters
    ----------
    diag : 1d array or Fill
        The diagonal.

    """

    def __init__(self, diag):
        if getattr(diag, 'ndim', 1) != 1:
            raise ValueError('the diagonal must be 1d')
        self._diag = diag if isinstance(diag, Fill) else jnp.asarray(diag)

    @property
    def shape(self):
        n = len(self._diag)
        return n, n

    @property
    def dtype(self):
        return self._diag.dtype

    def diagonal(self):
        return self._diag

    def todense(self):
        return jnp.diag(dense(self._diag))

    def __getitem__(self, key):
        if isinstance(key, tuple) and len(key) == 2 and all(map(_isint, key)):
            n = self.shape[0]
            i, j = (_checkindex(k, n) for k in key)
            return self._diag[i] if i == j else jnp.zeros((), self.dtype)
        return super().__getitem__(key)

    @property
    def T(self):
        return self

    def __matmul__(self, other):
        other = dense(other)
        d = dense(self._diag)
        return d[:, None] * other if other.ndim > 1 else d * other

class Toeplitz(StructuredMatrix):
    """

    Matrix with constant diagonals, ``T[i, j] = col[i - j]`` if ``i >= j``
    else ``row[j - i]``.

    Parameters
    ----------
    col : 1d array
        The first column.
    row : 1d array
        The first row. ``row[0]`` is ignored in favor of ``col[0]``.

    """

    def __init__(self, col, row):
        self._col = dense(col)
        self._row = dense(row)
        if self._col.ndim != 1 or self._row.ndim != 1:
            raise ValueError('col and row must be 1d')

    @property
    def col(self):
        return self._col

    @property
    def row(self):
        return self._row

    @property
    def shape(self):
        return len(self._col), len(self._row)

    @property
    def dtype(self):
        return jnp.result_type(self._col.dtype, self._row.dtype)

    def todense(self):
        n, m = self.shape
        if n == 0 or m == 0:
            return jnp.zeros((n, m), self.dtype)
        d = jnp.arange(n)[:, None] - jnp.arange(m)[None, :]
        lower = self._col[jnp.clip(d, 0, n - 1)]
        upper = self._row[jnp.clip(-d, 0, m - 1)]
        return jnp.where(d >= 0, lower, upper)

    def __getitem__(self, key):
        if isinstance(key, tuple) and len(key) == 2 and all(map(_isint, key)):
            n, m = self.shape
            i = _checkindex(key[0], n)
            j = _checkindex(key[1], m)
            return self._col[i - j] if i >= j else self._row[j - i]
        return super().__getitem__(key)

    def diagonal(self):
        n, m = self.shape
        if min(n, m) == 0:
            return Fill(jnp.zeros((), self.dtype), 0)
        return Fill(self._col[0], min(n, m))

    @property
    def T(self):
        return Toeplitz(self._row, self._col)

    def __matmul__(self, other):
        other = dense(other)
        n, m = self.shape
        if n == 0 or m == 0 or not _jaxext.is_concrete(self._col, self._row, other):
            return self.todense() @ other
        out = linalg.matmul_toeplitz((numpy.asarray(self._col), numpy.asarray(self._row)),
            numpy.asarray(other))
        return jnp.asarray(out)

class SymToeplitz(Toeplitz):
    """

    Symmetric Toeplitz matrix.

    Parameters
    ----------
    row : 1d array
        The first row, which is also the first column.

    """

    def __init__(self, row):
        super().__init__(row, row)

    @property
    def T(self):
        return self

def _checkindex(i, n):
    i = operator.index(i)
    if not -n <= i < n:
        raise IndexError(f'index {i} out of range for size {n}')
    return i + n if i < 0 else i

def _shapecheck(a, b):
    if a.shape != b.shape:
        raise ValueError(f'shape mismatch {a.shape} vs. {b.shape}')

def _sym(a):
    return isinstance(a, SymToeplitz)

def add(a, b):
    """
    Sum of two matrices or vectors, keeping the structure when the result
    has the same structure of the operands.
    """
    if not isinstance(a, StructuredMatrix) and not isinstance(b, StructuredMatrix):
        return dense(a) + dense(b)
    a = a if isinstance(a, StructuredMatrix) else dense(a)
    b = b if isinstance(b, StructuredMatrix) else dense(b)
    _shapecheck(a, b)
    if isinstance(a, Zeros):
        return b
    if isinstance(b, Zeros):
        return a
    if isinstance(a, Fill) and isinstance(b, Fill):
        return Fill(a.value + b.value, a.shape)
    if isinstance(a, Diagonal) and isinstance(b, Diagonal):
        return Diagonal(add(a.diagonal(), b.diagonal()))
    if isinstance(a, Toeplitz) and isinstance(b, Toeplitz):
        if _sym(a) and _sym(b):
            return SymToeplitz(a.row + b.row)
        return Toeplitz(a.col + b.col, a.row + b.row)
    if a.ndim == 2:
        if isinstance(a, Fill) and isinstance(b, Toeplitz):
            a, b = b, a
        if isinstance(a, Toeplitz) and isinstance(b, Fill):
            if _sym(a):
                return SymToeplitz(a.row + b.value)
            return Toeplitz(a.col + b.value, a.row + b.value)
    return dense(a) + dense(b)

def mul(a, b):
    """
    Elementwise product of two matrices or vectors, keeping the structure
    when the result has the same structure of the operands.
    """
    if not isinstance(a, StructuredMatrix) and not isinstance(b, StructuredMatrix):
        return dense(a) * dense(b)
    a = a if isinstance(a, StructuredMatrix) else dense(a)
    b = b if isinstance(b, StructuredMatrix) else dense(b)
    _shapecheck(a, b)
    if isinstance(a, Zeros):
        return a
    if isinstance(b, Zeros):
        return b
    if isinstance(a, Fill) and isinstance(b, Fill):
        return Fill(a.value * b.value, a.shape)
    if isinstance(b, Diagonal):
        a, b = b, a
    if isinstance(a, Diagonal):
        return Diagonal(mul(a.diagonal(), _diagonal(b)))
    if isinstance(a, Toeplitz) and isinstance(b, Toeplitz):
        if _sym(a) and _sym(b):
            return SymToeplitz(a.row * b.row)
        return Toeplitz(a.col * b.col, a.row * b.row)
    if a.ndim == 2:
        if isinstance(a, Fill) and isinstance(b, Toeplitz):
            a, b = b, a
        if isinstance(a, Toeplitz) and isinstance(b, Fill):
            if _sym(a):
                return SymToeplitz(a.row * b.value)
            return Toeplitz(a.col * b.value, a.row * b.value)
    return dense(a) * dense(b)

def _diagonal(m):
    if isinstance(m, StructuredMatrix):
        return m.diagonal()
    return jnp.diagonal(m)
