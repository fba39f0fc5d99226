# gpcov/_inputs.py
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

""" Input sequences passed to `map` and `pairwise` """

import numbers
import operator

import numpy
import jax
from jax import numpy as jnp

from . import _jaxext
from ._linalg import _structured

ALL = slice(None)
""" Index marker meaning "all the elements captured by a finite kernel" """

def isall(idx):
    return isinstance(idx, slice) and idx == ALL

def _checkindex(i, n):
    i = operator.index(i)
    if not -n <= i < n:
        raise IndexError(f'index {i} out of range for length {n}')
    return i + n if i < 0 else i

def _intindices(key, n):
    """ convert an integer index array to a numpy array with positive
    indices, checking bounds """
    idx = numpy.asarray(key)
    if not numpy.issubdtype(idx.dtype, numpy.integer):
        if idx.size == 0:
            idx = idx.astype(int)
        else:
            raise TypeError(f'indices must be integers, got dtype {idx.dtype}')
    if numpy.any((idx < -n) | (idx >= n)):
        raise IndexError(f'index out of range for length {n}')
    return numpy.where(idx < 0, idx + n, idx)

class StepRange:
    """

    Regularly spaced sequence ``start + step * i`` for ``i`` in
    ``range(length)``.

    Stationary kernels evaluated on `StepRange` inputs return Toeplitz
    matrices instead of dense ones.

    Parameters
    ----------
    start, step : scalar
        The first element and the spacing. May be jax tracers.
    length : int
        The number of elements.

    Notes
    -----
    Indexing with an integer returns a scalar, indexing with a slice or a
    `range` returns another `StepRange`, indexing with an integer array
    returns a jax array.

    """

    __slots__ = '_start', '_step', '_length'

    def __init__(self, start, step, length):
        length = operator.index(length)
        if length < 0:
            raise ValueError(f'negative length {length}')
        self._start = start
        self._step = step
        self._length = length

    @property
    def start(self):
        return self._start

    @property
    def step(self):
        return self._step

    @property
    def length(self):
        return self._length

    def __len__(self):
        return self._length

    def __getitem__(self, key):
        n = self._length
        if isinstance(key, slice):
            r = range(n)[key]
            return StepRange(self._start + r.start * self._step,
                self._step * r.step, len(r))
        elif isinstance(key, range):
            if len(key) == 0:
                return StepRange(self._start, self._step, 0)
            for i in key[0], key[-1]:
                if not 0 <= i < n:
                    raise IndexError(f'index {i} out of range for length {n}')
            return StepRange(self._start + key[0] * self._step,
                self._step * key.step, len(key))
        elif isinstance(key, (numbers.Integral, numpy.integer)) or (
            getattr(key, 'ndim', None) == 0 and _jaxext.isnumeric(key)):
            i = _checkindex(key, n)
            return self._start + i * self._step
        else:
            idx = _intindices(key, n)
            return self._start + jnp.asarray(idx) * self._step

    def __iter__(self):
        for i in range(self._length):
            yield self._start + i * self._step

    def collect(self):
        """ Return the elements as a jax array """
        return self._start + self._step * jnp.arange(self._length)

    def __array__(self, dtype=None, copy=None):
        return numpy.asarray(self.collect(), dtype)

    def __eq__(self, other):
        if not isinstance(other, StepRange):
            return NotImplemented
        if self._length != other._length:
            return False
        if self._length == 0:
            return True
        if not _jaxext.array_equal(self._start, other._start):
            return False
        return self._length == 1 or _jaxext.array_equal(self._step, other._step)

    def __hash__(self):
        return hash((StepRange, self._length))

    def __repr__(self):
        return f'StepRange({self._start!r}, {self._step!r}, {self._length})'

class ColVecs:
    """

    Sequence of vector observations stored as the columns of a matrix.

    Parameters
    ----------
    X : (D, N) array
        The i-th element of the sequence is ``X[:, i]``.

    """

    __slots__ = '_X',

    def __init__(self, X):
        X = jnp.asarray(X)
        if X.ndim != 2:
            raise ValueError(f'ColVecs needs a 2d array, got shape {X.shape}')
        self._X = X

    @property
    def X(self):
        return self._X

    @property
    def dim(self):
        """ The dimensionality D of each observation """
        return self._X.shape[0]

    def __len__(self):
        return self._X.shape[1]

    def __getitem__(self, key):
        n = len(self)
        if isinstance(key, slice):
            return ColVecs(self._X[:, key])
        elif isinstance(key, (numbers.Integral, numpy.integer)):
            return self._X[:, _checkindex(key, n)]
        else:
            if isinstance(key, range):
                key = list(key)
            idx = _intindices(key, n)
            return ColVecs(self._X[:, idx])

    def __iter__(self):
        for i in range(len(self)):
            yield self._X[:, i]

    def __eq__(self, other):
        if not isinstance(other, ColVecs):
            return NotImplemented
        return _jaxext.array_equal(self._X, other._X)

    def __hash__(self):
        return hash((ColVecs, self._X.shape))

    def __repr__(self):
        return f'ColVecs({self._X!r})'

def isscalarseq(x):
    """ Check if `x` is a 1d sequence of numbers """
    if isinstance(x, StepRange):
        return True
    if isinstance(x, _structured.Fill):
        return x.ndim == 1
    if isinstance(x, (numpy.ndarray, jax.Array)):
        return x.ndim == 1 and _jaxext.isnumeric(x)
    if isinstance(x, range):
        return True
    if isinstance(x, (list, tuple)):
        return all(
            isinstance(e, numbers.Number)
            or getattr(e, 'ndim', None) == 0 and _jaxext.isnumeric(e)
            for e in x
        )
    return False

def asarray(x):
    """ Convert a sequence of scalars to a jax array """
    if isinstance(x, StepRange):
        return x.collect()
    if isinstance(x, _structured.Fill):
        return x.todense()
    if isinstance(x, (list, tuple, range)):
        return jnp.asarray(list(x)) if len(x) else jnp.zeros(0)
    return jnp.asarray(x)

def take(x, idx):
    """
    Select elements of a sequence.

    Parameters
    ----------
    x : sequence
        An input sequence.
    idx : slice, range or array of int
        The indices. `ALL` returns `x` itself.

    Returns
    -------
    y : sequence
        ``StepRange``, ``ColVecs`` and ``Fill`` keep their type, lists stay
        lists, arrays stay arrays.
    """
    if isall(idx):
        return x
    if isinstance(x, (StepRange, ColVecs, _structured.Fill)):
        return x[idx]
    if isinstance(x, (list, tuple, range)):
        if isinstance(idx, slice):
            return x[idx]
        out = [x[i] for i in _intindices(idx, len(x))]
        return out if not isinstance(x, range) else jnp.asarray(out, int)
    if isinstance(idx, (range, list, tuple)):
        idx = _intindices(idx, len(x))
    return x[idx]
