# gpcov/tests/util.py
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

from jax import tree_util
import numpy as np
from jax import numpy as jnp
import pytest
from scipy import linalg

import gpcov as gpc

def jaxtonumpy(x):
    """
    Recursively convert jax arrays and structured matrices in x to numpy
    arrays.
    """
    children, meta = tree_util.tree_flatten(x)
    children = (
        np.array(x) if isinstance(x, (jnp.ndarray, gpc.StructuredMatrix)) else x
        for x in children
    )
    return tree_util.tree_unflatten(meta, children)

def assert_equal(*args):
    """
    Version of assert_equal that works with jax arrays and structured
    matrices
    """
    np.testing.assert_equal(*jaxtonumpy(args))

def assert_allclose(actual, desired, *, rtol=0, atol=0, equal_nan=False, **kw):
    """ change the default arguments of np.testing.assert_allclose, and
    convert structured matrices """
    actual, desired = jaxtonumpy((actual, desired))
    np.testing.assert_allclose(actual, desired, rtol=rtol, atol=atol, equal_nan=equal_nan, **kw)

def assert_close_matrices(actual, desired, *, rtol=0, atol=0, tozero=False):
    """
    Check if two matrices are similar.

    Scalars and vectors are intepreted as 1x1 and Nx1 matrices, but the two
    arrays must have the same shape beforehand.

    The closeness condition is:

        ||actual - desired|| <= atol + rtol * ||desired||,

    where the norm is the matrix 2-norm, i.e., the maximum (in absolute value)
    singular value. The tolerances are 0 by default.

    Parameters
    ----------
    actual, desired : array_like
        The two matrices to be compared. Must be scalars, vectors, or 2d arrays.
    rtol, atol : scalar
        Relative and absolute tolerances for the comparison.
    tozero : bool
        Default False. If True, use the following codition instead:

            ||actual|| <= atol + rtol * ||desired||

    Raises
    ------
    AssertionError :
        If the condition is not satisfied.
    """

    actual = np.asarray(actual)
    desired = np.asarray(desired)
    assert actual.shape == desired.shape
    if actual.size == 0:
        return
    actual = np.atleast_1d(actual)
    desired = np.atleast_1d(desired)

    if tozero:
        diff = actual
        expr = 'actual'
        ref = 'zero'
    else:
        diff = actual - desired
        expr = 'actual - desired'
        ref = 'desired'

    dnorm = linalg.norm(desired, 2)
    adnorm = linalg.norm(diff, 2)
    ratio = adnorm / dnorm if dnorm else np.nan

    msg = f"""\
matrices actual and {ref} are not close in 2-norm
norm(desired) = {dnorm:.2g}
norm({expr}) = {adnorm:.2g}  (atol = {atol:.2g})
ratio = {ratio:.2g}  (rtol = {rtol:.2g})"""

    assert adnorm <= atol + rtol * dnorm, msg

def elementwise_pairwise(k, x, y):
    """ reference pairwise evaluation calling the kernel on each pair """
    return np.array([[k(xp, yq) for yq in y] for xp in x]).reshape(len(x), len(y))

def elementwise_map(k, x, y):
    """ reference map evaluation calling the kernel on each pair """
    return np.array([k(xp, yp) for xp, yp in zip(x, y)]).reshape(len(x))

def cross_kernel_tests(k, x0, x1, x2, *, rtol=1e-12, atol=1e-12):
    """
    Generic consistency checks of a cross kernel.

    Parameters
    ----------
    k : CrossKernel
        The kernel.
    x0, x1 : sequence
        Two inputs with the same length.
    x2 : sequence
        An input with a different length.
    rtol, atol : scalar
        Tolerances for comparing different evaluation paths.
    """
    assert len(x0) == len(x1) != len(x2)

    # pairwise agrees with the elementwise definition
    K01 = gpc.pairwise(k, x0, x1)
    assert K01.shape == (len(x0), len(x1))
    assert_allclose(K01, elementwise_pairwise(k, x0, x1), rtol=rtol, atol=atol)
    K02 = gpc.pairwise(k, x0, x2)
    assert K02.shape == (len(x0), len(x2))
    assert_allclose(K02, elementwise_pairwise(k, x0, x2), rtol=rtol, atol=atol)

    # map is the diagonal of pairwise
    m01 = gpc.map(k, x0, x1)
    assert m01.shape == (len(x0),)
    assert_allclose(m01, elementwise_map(k, x0, x1), rtol=rtol, atol=atol)
    assert_allclose(m01, np.diagonal(np.asarray(K01)), rtol=rtol, atol=atol)

    # map needs inputs with the same length
    with pytest.raises(gpc.ShapeMismatchError):
        gpc.map(k, x0, x2)

    # the methods are shortcuts of the functions
    assert_equal(k.pairwise(x0, x2), K02)
    assert_equal(k.map(x0, x1), m01)

def kernel_tests(k, x0, x1, x2, *, rtol=1e-12, atol=1e-12, psdeps=None):
    """
    Generic consistency checks of a symmetric kernel, in addition to
    `cross_kernel_tests`.
    """
    cross_kernel_tests(k, x0, x1, x2, rtol=rtol, atol=atol)

    # the unary versions are equivalent to the binary ones on the same input
    K00 = np.asarray(gpc.pairwise(k, x0))
    assert_allclose(K00, gpc.pairwise(k, x0, x0), rtol=rtol, atol=atol)
    assert_allclose(gpc.map(k, x0), np.diagonal(K00), rtol=rtol, atol=atol)
    assert_allclose(gpc.map(k, x0), gpc.map(k, x0, x0), rtol=rtol, atol=atol)
    assert_allclose(k(x0[0]), k(x0[0], x0[0]), rtol=rtol, atol=atol)

    # symmetry
    assert_allclose(K00, K00.T, rtol=rtol, atol=atol)
    K01 = gpc.pairwise(k, x0, x1)
    K10 = gpc.pairwise(k, x1, x0)
    assert_allclose(K01, np.asarray(K10).T, rtol=rtol, atol=atol)
    assert_allclose(gpc.map(k, x0, x1), gpc.map(k, x1, x0), rtol=rtol, atol=atol)

    # positive semidefinite
    if psdeps is None:
        psdeps = np.finfo(float).eps
    eigv = linalg.eigvalsh(K00)
    assert np.min(eigv) >= -len(K00) * psdeps * np.max(np.abs(eigv))

def stationary_kernel_tests(k, *, rtol=1e-12, atol=1e-12):
    """
    Checks of the fast paths of a stationary kernel on regularly spaced
    inputs, comparing them with the evaluation on plain arrays.
    """
    assert k.isstationary()
    assert gpc.isstationary(k)

    x = gpc.StepRange(-1.3, 0.4, 11)
    y = gpc.StepRange(0.7, 0.4, 6)
    z = gpc.StepRange(0.1, 0.3, 5)
    ax = np.asarray(x)
    ay = np.asarray(y)
    az = np.asarray(z)

    Kxx = gpc.pairwise(k, x)
    assert isinstance(Kxx, gpc.SymToeplitz)
    assert_allclose(Kxx, gpc.pairwise(k, ax), rtol=rtol, atol=atol)

    Kxy = gpc.pairwise(k, x, y)
    assert isinstance(Kxy, gpc.Toeplitz)
    assert Kxy.shape == (len(x), len(y))
    assert_allclose(Kxy, gpc.pairwise(k, ax, ay), rtol=rtol, atol=atol)

    # different steps are not Toeplitz
    Kxz = gpc.pairwise(k, x, z)
    assert not isinstance(Kxz, gpc.Toeplitz)
    assert_allclose(Kxz, gpc.pairwise(k, ax, az), rtol=rtol, atol=atol)

    # constant difference gives a constant vector
    shifted = x[1:]
    xcut = x[:-1]
    m = gpc.map(k, xcut, shifted)
    assert isinstance(m, gpc.Fill)
    assert_allclose(m, gpc.map(k, np.asarray(xcut), np.asarray(shifted)), rtol=rtol, atol=atol)

    # the variance is the same everywhere
    v = gpc.map(k, ax)
    assert isinstance(v, gpc.Fill)
    assert_allclose(v, elementwise_map(k, ax, ax), rtol=rtol, atol=atol)
    assert gpc.map(k, ax[:0]).shape == (0,)

def block_associativity_tests(k, x1, x2, y, *, rtol=1e-12, atol=1e-12):
    """ Check that evaluating on concatenated scalar inputs is the same as
    stacking the evaluations on the pieces """
    x = np.concatenate([np.asarray(x1), np.asarray(x2)])
    K = gpc.pairwise(k, x, y)
    K1 = gpc.pairwise(k, x1, y)
    K2 = gpc.pairwise(k, x2, y)
    assert_allclose(K, np.concatenate([np.asarray(K1), np.asarray(K2)]), rtol=rtol, atol=atol)
