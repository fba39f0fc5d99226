# gpcov/_linalg/_distances.py
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

import jax
from jax import numpy as jnp

@jax.jit
def sqeuclidean_pairwise(X, Y):
    """
    Squared euclidean distances between the columns of two matrices.

    Parameters
    ----------
    X : (D, N) array
    Y : (D, M) array

    Returns
    -------
    D : (N, M) array
        ``D[i, j] = ||X[:, i] - Y[:, j]||^2``. Computed by expanding the
        square, negative values due to cancellation are clipped to zero.
    """
    xx = jnp.sum(X * X, axis=0)
    yy = jnp.sum(Y * Y, axis=0)
    d = xx[:, None] + yy[None, :] - 2 * (X.T @ Y)
    return jnp.maximum(d, 0)

@jax.jit
def sqeuclidean_colwise(X, Y):
    """ Squared euclidean distances between corresponding columns """
    return jnp.sum((X - Y) ** 2, axis=0)
