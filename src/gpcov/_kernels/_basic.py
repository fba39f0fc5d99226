# gpcov/_kernels/_basic.py
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

import numpy
import jax
from jax import numpy as jnp

from .. import _jaxext
from .. import _inputs
from .._inputs import ColVecs, StepRange
from .._linalg import Fill, Diagonal, sqeuclidean_pairwise, sqeuclidean_colwise
from .._Kernel import _eval
from .._Kernel import (kernel, stationarykernel, Kernel, Zero, Constant,
    ShapeMismatchError)

@stationarykernel(input='sq')
def EQ(r2):
    """
    Exponentiated quadratic kernel.

    .. math::
        k(x, y) = \\exp \\left( -\\frac 12 \\|x - y\\|^2 \\right)

    It is smooth and has a strict typical lengthscale, i.e., oscillations are
    strongly suppressed under a certain wavelength, and correlations are
    strongly suppressed over a certain distance.

    Reference: Rasmussen and Williams (2006, p. 83).
    """
    return jnp.exp(-1/2 * r2)

@jax.jit
def _eq_pairwise(X, Y):
    return jnp.exp(-1/2 * sqeuclidean_pairwise(X, Y))

@jax.jit
def _eq_colwise(X, Y):
    return jnp.exp(-1/2 * sqeuclidean_colwise(X, Y))

@EQ.register_pairwise(ColVecs, ColVecs)
def _pairwise_eq_colvecs(self, x, y):
    return _eq_pairwise(x.X, y.X)

@EQ.register_map(ColVecs, ColVecs)
def _map_eq_colvecs(self, x, y):
    return _eq_colwise(x.X, y.X)

def _check_period(p):
    if not p > 0:
        raise ValueError(f'the period must be positive, got {p}')

@stationarykernel(input='abs', check=_check_period)
def Periodic(r, p=1.0):
    r"""
    Periodic kernel.

    .. math::
        k(x, y) = \exp \left(
        -2 \sin^2 \left( \frac {\pi |x - y|} p \right)
        \right)

    A Gaussian kernel over a transformed periodic space. It represents a
    periodic process with period `p`.

    Reference: Rasmussen and Williams (2006, p. 92).
    """
    return jnp.exp(-2 * jnp.sin(jnp.pi * r / p) ** 2)

@stationarykernel(input='abs')
def Exponential(r):
    """
    Exponential kernel.

    .. math::
        k(x, y) = \\exp(-\\|x - y\\|)

    In 1D it is the covariance of the Ornstein-Uhlenbeck process. It is
    continuous but not differentiable.
    """
    return jnp.exp(-r)

@kernel
def Linear(x, y, c=0.0):
    """
    Linear kernel with origin `c`.

    .. math::
        k(x, y) = (x - c) \\cdot (y - c)

    In 1D it is equivalent to fitting with a line passing by `c`.

    Reference: Rasmussen and Williams (2006, p. 89).
    """
    return jnp.sum((x - c) * (y - c), axis=-1)

def _centered_columns(self, x):
    """ the inputs as a (D, N) matrix minus the origin, or None if they are
    not scalars or ColVecs """
    if isinstance(x, ColVecs):
        X = x.X
    elif _inputs.isscalarseq(x):
        X = _inputs.asarray(x)[None, :]
    else:
        return None
    c = jnp.asarray(self.initkw['c'])
    return X - (c[:, None] if c.ndim else c)

@Linear.register_pairwise(object, object)
def _pairwise_linear(self, x, y):
    X = _centered_columns(self, x)
    Y = _centered_columns(self, y)
    if X is None or Y is None:
        return _eval.generic(self, 'pairwise', (x, y))
    return X.T @ Y

@Linear.register_map(object, object)
def _map_linear(self, x, y):
    X = _centered_columns(self, x)
    Y = _centered_columns(self, y)
    if X is None or Y is None:
        return _eval.generic(self, 'map', (x, y))
    return jnp.sum(X * Y, axis=0)

@Linear.register_map(object)
def _map_linear_diagonal(self, x):
    X = _centered_columns(self, x)
    if X is None:
        return _eval.generic(self, 'map', (x,))
    return jnp.sum(X * X, axis=0)

def _check_variance(s2):
    if not s2 >= 0:
        raise ValueError(f'the variance must be non-negative, got {s2}')

@stationarykernel(input='raw', check=_check_variance)
def Noise(x, y, s2=1.0):
    """
    White noise kernel.

    .. math::
        k(x, y) = \\begin{cases}
            s^2 & x = y     \\\\
            0 & x \\neq y
        \\end{cases}

    On the same sequence of distinct inputs, `pairwise` returns a diagonal
    matrix. An element is always equal to itself, even if it is nan, so
    ``k(x)`` is `s2` for any `x`.
    """
    return jnp.where(jnp.all(x == y, axis=-1), s2, 0.)

def _noise_unary(self, x):
    return jnp.asarray(self.initkw['s2'], float)

Noise._unary = _noise_unary

def _provably_distinct(x):
    """ True if the elements of `x` are known to be all different """
    if len(x) <= 1:
        return True
    if isinstance(x, StepRange):
        if not _jaxext.is_concrete(x.start, x.step):
            return False
        # the elements are monotonic, but may repeat if the step is below
        # the resolution of the start
        v = numpy.asarray(x.collect())
        return bool(numpy.all(numpy.diff(v) != 0))
    if isinstance(x, ColVecs):
        if not _jaxext.is_concrete(x.X):
            return False
        cols = numpy.asarray(x.X).T
        return len(numpy.unique(cols, axis=0)) == len(x)
    if _inputs.isscalarseq(x):
        a = _inputs.asarray(x)
        if not _jaxext.is_concrete(a):
            return False
        return numpy.unique(numpy.asarray(a)).size == len(x)
    return False

@Noise.register_pairwise(object)
def _pairwise_noise_sym(self, x):
    return _pairwise_noise(self, x, x)

@Noise.register_pairwise(object, object)
def _pairwise_noise(self, x, y):
    s2 = self.initkw['s2']
    if x is y and _provably_distinct(x):
        return Diagonal(Fill(s2, len(x)))
    if isinstance(x, ColVecs) and isinstance(y, ColVecs):
        eq = jnp.all(x.X[:, :, None] == y.X[:, None, :], axis=0)
    elif _inputs.isscalarseq(x) and _inputs.isscalarseq(y):
        eq = _inputs.asarray(x)[:, None] == _inputs.asarray(y)[None, :]
    else:
        return _eval.generic(self, 'pairwise', (x, y))
    if x is y:
        eq = eq | jnp.eye(len(x), dtype=bool)
    return jnp.where(eq, s2, 0.)

@Noise.register_map(object)
def _map_noise_diagonal(self, x):
    return Fill(self.initkw['s2'], len(x))

@Noise.register_map(object, object)
def _map_noise(self, x, y):
    if x is y:
        return Fill(self.initkw['s2'], len(x))
    return _eval.generic(self, 'map', (x, y))

def _empirical(x, y, cov):
    return cov[x[..., 0], y[..., 0]]

class Empirical(Kernel):
    """

    Kernel defined by an explicit covariance matrix over the indices
    ``0, ..., n - 1``.

    Parameters
    ----------
    cov : (n, n) array
        The covariance matrix, assumed symmetric positive semidefinite.

    Notes
    -----
    ``pairwise(k, ALL)`` and ``asmatrix(k)`` return `cov` itself.

    """

    def __new__(cls, cov):
        cov = jnp.asarray(cov)
        if cov.ndim != 2 or cov.shape[0] != cov.shape[1]:
            raise ValueError(f'cov must be a square matrix, got shape '
                f'{cov.shape}')
        return super().__new__(cls, _empirical, cov=cov)

    @property
    def cov(self):
        return self._initkw['cov']

    def _sizes(self):
        n = len(self.cov)
        return n, n

def _indices(self, idx):
    if isinstance(idx, slice):
        return jnp.arange(self.size(0))[idx]
    return _inputs.asarray(idx)

@Empirical.register_pairwise(object)
def _pairwise_empirical_sym(self, x):
    return _pairwise_empirical(self, x, x)

@Empirical.register_pairwise(object, object)
def _pairwise_empirical(self, x, y):
    if _inputs.isall(x) and _inputs.isall(y):
        return self.cov
    i = _indices(self, x)
    j = _indices(self, y)
    return self.cov[i[:, None], j[None, :]]

@Empirical.register_map(object)
def _map_empirical_diagonal(self, x):
    if _inputs.isall(x):
        return jnp.diagonal(self.cov)
    i = _indices(self, x)
    return self.cov[i, i]

@Empirical.register_map(object, object)
def _map_empirical(self, x, y):
    i = _indices(self, x)
    j = _indices(self, y)
    if len(i) != len(j):
        raise ShapeMismatchError(f'map on index sequences of different '
            f'lengths {len(i)} and {len(j)}')
    return self.cov[i, j]
