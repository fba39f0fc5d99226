# gpcov/tests/kernels/test_kernels.py
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

import pytest
import numpy as np
import jax
from jax import numpy as jnp

import gpcov as gpc
from gpcov import _kernels, _Kernel

from .. import util

class Base:
    """
    Base class to test kernels. Each subclass tests one specific kernel.
    """

    @property
    def kercls(self):
        """ Kernel subclass to test """
        clsname = self.__class__.__name__
        assert clsname.startswith('Test')
        cls = getattr(_kernels, clsname[4:])
        if issubclass(cls, gpc.StationaryKernel):
            assert issubclass(self.__class__, Stationary)
        return cls

    def test_public(self):
        assert self.kercls in vars(gpc).values()

    @pytest.fixture
    def kw(self):
        """ Keyword arguments for the constructor """
        return {}

    @pytest.fixture
    def kernel(self, kw):
        """ A kernel instance """
        return self.kercls(**kw)

    @pytest.fixture
    def ranx(self, rng):
        """ A callable generating random scalar inputs, not used directly by
        tests """
        return lambda size: rng.uniform(-5, 5, size=size)

    @pytest.fixture
    def x0(self, ranx):
        return ranx(20)

    @pytest.fixture
    def x1(self, ranx):
        return ranx(20)

    @pytest.fixture
    def x2(self, ranx):
        return ranx(13)

    @pytest.fixture
    def psdeps(self):
        """ Relative tolerance for the smallest eigenvalue to be negative """
        return np.finfo(float).eps

    def test_scalar(self, kernel, x0, x1, x2, psdeps):
        util.kernel_tests(kernel, x0, x1, x2, psdeps=psdeps)

    def test_colvecs(self, kernel, ranx, psdeps):
        x0 = gpc.ColVecs(ranx((3, 10)))
        x1 = gpc.ColVecs(ranx((3, 10)))
        x2 = gpc.ColVecs(ranx((3, 7)))
        util.kernel_tests(kernel, x0, x1, x2, psdeps=psdeps)

    def test_list(self, kernel, x0, x1, x2):
        util.cross_kernel_tests(kernel, list(x0[:5]), list(x1[:5]), list(x2[:3]))

    def test_block_associativity(self, kernel, x0, x1, x2):
        util.block_associativity_tests(kernel, x0, x2, x1)

    def test_jit(self, kernel, x0, x1):
        f = jax.jit(lambda x, y: gpc.dense(gpc.pairwise(kernel, x, y)))
        util.assert_allclose(f(x0, x1), gpc.pairwise(kernel, x0, x1), rtol=1e-12, atol=1e-12)
        g = jax.jit(lambda x, y: gpc.dense(gpc.map(kernel, x, y)))
        util.assert_allclose(g(x0, x1), gpc.map(kernel, x0, x1), rtol=1e-12, atol=1e-12)

    def test_empty(self, kernel, x0):
        assert gpc.pairwise(kernel, x0[:0], x0).shape == (0, len(x0))
        assert gpc.pairwise(kernel, x0, x0[:0]).shape == (len(x0), 0)
        assert gpc.map(kernel, x0[:0], x0[:0]).shape == (0,)

    def test_equal(self, kernel, kw):
        other = self.kercls(**kw)
        assert kernel == other
        assert hash(kernel) == hash(other)
        assert kernel != gpc.Zero() or kernel.iszero()

    def test_not_zero(self, kernel):
        assert not kernel.iszero()
        assert kernel.size() == (np.inf, np.inf)

class Stationary(Base):
    """ Test class for kernels that may be a subclass of StationaryKernel """

    def test_fast_paths(self, kernel):
        util.stationary_kernel_tests(kernel, rtol=1e-11, atol=1e-12)

    def test_constant_variance(self, kernel, x0):
        var = gpc.map(kernel, x0)
        util.assert_allclose(var, var[0] * np.ones(len(x0)))
        util.assert_allclose(var[0], kernel(x0[3], x0[3]), rtol=1e-15)

class Normalized(Stationary):
    """ Test class for correlation functions """

    def test_normalized(self, kernel, x0):
        util.assert_allclose(gpc.map(kernel, x0), 1, rtol=1e-15)
        util.assert_allclose(gpc.map(kernel, x0, x0), 1, rtol=1e-15)

class TestEQ(Normalized):

    def test_steprange(self, kernel):
        x = gpc.StepRange(0., 1., 3)
        K = gpc.pairwise(kernel, x)
        assert isinstance(K, gpc.SymToeplitz)
        util.assert_allclose(K.row, np.exp([0, -1/2, -2]), rtol=1e-15)
        expected = np.exp(-1/2 * np.subtract.outer(np.arange(3.), np.arange(3.)) ** 2)
        util.assert_allclose(K, expected, rtol=1e-15)

    def test_colvecs_registered(self, kernel, ranx):
        x = gpc.ColVecs(ranx((2, 5)))
        gpc.pairwise(kernel, x)
        assert '_pairwise_eq_colvecs' in gpc.getlog()

    def test_bad_args(self):
        with pytest.raises(TypeError):
            gpc.EQ(3)

class TestPeriodic(Normalized):

    @pytest.fixture(params=[dict(), dict(p=2.5)])
    def kw(self, request):
        return request.param

    @pytest.fixture
    def psdeps(self):
        return 1e2 * np.finfo(float).eps

    def test_colvecs(self):
        pytest.skip(reason='not positive semidefinite on vectors')

    def test_period(self, kernel, kw, x0):
        p = kw.get('p', 1.)
        util.assert_allclose(gpc.map(kernel, x0, x0 + p), 1, rtol=1e-12)
        util.assert_allclose(gpc.map(kernel, x0, x0 + p / 2), np.exp(-2), rtol=1e-12)

    def test_positional(self):
        assert gpc.Periodic(2.5) == gpc.Periodic(p=2.5)
        assert gpc.Periodic() == gpc.Periodic(p=1.)

    @pytest.mark.parametrize('p', [0, -1])
    def test_invalid_period(self, p):
        with pytest.raises(ValueError):
            gpc.Periodic(p=p)

    def test_traced_period(self, x0, x1):
        f = jax.jit(lambda p: gpc.dense(gpc.map(gpc.Periodic(p=p), x0, x1)))
        util.assert_allclose(f(2.5), gpc.map(gpc.Periodic(p=2.5), x0, x1), rtol=1e-12)

class TestExponential(Normalized):

    def test_values(self, kernel):
        x = np.array([0., 1., 3.])
        expected = np.exp(-np.abs(np.subtract.outer(x, x)))
        util.assert_allclose(gpc.pairwise(kernel, x), expected, rtol=1e-15)

    def test_norm(self, kernel):
        x = gpc.ColVecs([[0., 3.], [0., 4.]])
        util.assert_allclose(gpc.pairwise(kernel, x)[0, 1], np.exp(-5), rtol=1e-15)

class TestLinear(Base):

    @pytest.fixture(params=[dict(), dict(c=1.5)])
    def kw(self, request):
        return request.param

    def test_values(self):
        K = gpc.pairwise(gpc.Linear(0.0), [1., 2.], [3., 4.])
        util.assert_equal(K, [[3., 4.], [6., 8.]])

    def test_origin(self, kernel, kw, x0, x1):
        c = kw.get('c', 0.)
        util.assert_allclose(gpc.map(kernel, x0, x1), (x0 - c) * (x1 - c), rtol=1e-14)

    def test_vector_origin(self, ranx):
        x = gpc.ColVecs(ranx((2, 6)))
        c = np.array([1., -2.])
        k = gpc.Linear(c=c)
        Xc = np.asarray(x.X) - c[:, None]
        util.assert_allclose(gpc.pairwise(k, x), Xc.T @ Xc, rtol=1e-13, atol=1e-13)
        util.assert_allclose(gpc.map(k, x), np.sum(Xc * Xc, 0), rtol=1e-13)

    def test_not_stationary(self, kernel):
        assert not kernel.isstationary()
        x = gpc.StepRange(0., 1., 4)
        assert not isinstance(gpc.pairwise(kernel, x), gpc.Toeplitz)

class TestNoise(Stationary):

    @pytest.fixture(params=[dict(), dict(s2=2.)])
    def kw(self, request):
        return request.param

    def test_fast_paths(self, kernel, kw):
        s2 = kw.get('s2', 1.)
        K = gpc.pairwise(kernel, gpc.StepRange(0., 0.5, 6))
        assert isinstance(K, gpc.Diagonal)
        util.assert_equal(K, s2 * np.eye(6))
        K = gpc.pairwise(kernel, gpc.StepRange(0., 0.5, 6), gpc.StepRange(0.5, 0.5, 6))
        util.assert_equal(K, s2 * np.eye(6, k=-1))

    def test_diagonal(self):
        x = [0.0, 1.0, 2.0]
        K = gpc.pairwise(gpc.Noise(2.0), x)
        assert isinstance(K, gpc.Diagonal)
        util.assert_equal(K, 2 * np.eye(3))
        v = gpc.map(gpc.Noise(2.0), x)
        assert isinstance(v, gpc.Fill)
        util.assert_equal(v, [2., 2., 2.])

    def test_repeated(self, kernel, kw):
        s2 = kw.get('s2', 1.)
        x = np.array([0., 1., 0.])
        K = gpc.pairwise(kernel, x)
        assert not isinstance(K, gpc.Diagonal)
        util.assert_equal(K, s2 * np.array([[1, 0, 1], [0, 1, 0], [1, 0, 1]]))

    def test_nan(self, kernel, kw):
        s2 = kw.get('s2', 1.)
        x = np.array([np.nan, np.nan, 1.])
        util.assert_equal(np.diagonal(np.asarray(gpc.pairwise(kernel, x))), s2)
        util.assert_equal(gpc.map(kernel, x), s2)

    def test_unary_nan(self, kernel, kw):
        s2 = kw.get('s2', 1.)
        assert kernel(np.nan) == s2
        assert kernel(np.array([np.nan, 1.])) == s2
        assert (kernel + gpc.Constant(1.))(np.nan) == s2 + 1
        assert kernel(np.nan, np.nan) == 0

    def test_step_below_resolution(self, kernel, kw):
        s2 = kw.get('s2', 1.)
        x = gpc.StepRange(1e16, 1., 3)
        v = np.asarray(x)
        assert v[0] == v[1]
        K = gpc.pairwise(kernel, x)
        assert not isinstance(K, gpc.Diagonal)
        expected = s2 * (v[:, None] == v[None, :])
        util.assert_equal(K, expected)

    def test_different_sequences(self, kernel, x0, x1):
        util.assert_equal(gpc.pairwise(kernel, x0, x1), np.zeros((len(x0), len(x1))))

    def test_traced(self, kernel, kw, x0):
        s2 = kw.get('s2', 1.)
        f = jax.jit(lambda x: gpc.dense(gpc.pairwise(kernel, x)))
        util.assert_equal(f(x0), s2 * np.eye(len(x0)))

    def test_invalid_variance(self):
        with pytest.raises(ValueError):
            gpc.Noise(-1.)

class TestZero(Stationary):

    def test_fast_paths(self, kernel):
        x = gpc.StepRange(0., 0.5, 6)
        K = gpc.pairwise(kernel, x, x[:4])
        assert isinstance(K, gpc.Zeros)
        assert K.shape == (6, 4)
        assert isinstance(gpc.map(kernel, x), gpc.Zeros)

    def test_not_zero(self, kernel):
        assert kernel.iszero()

    def test_pointwise(self, kernel):
        assert kernel(1., 2.) == 0

class TestConstant(Stationary):

    @pytest.fixture(params=[dict(), dict(c=3.)])
    def kw(self, request):
        return request.param

    def test_fast_paths(self, kernel, kw):
        c = kw.get('c', 1.)
        x = gpc.StepRange(0., 0.5, 6)
        K = gpc.pairwise(kernel, x, ['a', 'b'])
        assert isinstance(K, gpc.Fill)
        util.assert_equal(K, np.full((6, 2), c))
        v = gpc.map(kernel, x)
        assert isinstance(v, gpc.Fill)
        util.assert_equal(v, np.full(6, c))

class TestEmpirical(Base):

    @pytest.fixture
    def kw(self, rng):
        A = rng.standard_normal((8, 8))
        return dict(cov=A @ A.T)

    @pytest.fixture
    def ranx(self, rng):
        return lambda size: rng.integers(0, 8, size=size)

    @pytest.fixture
    def psdeps(self):
        return 1e2 * np.finfo(float).eps

    def test_colvecs(self):
        pytest.skip(reason='takes integer indices')

    def test_not_zero(self, kernel):
        assert not kernel.iszero()
        assert kernel.size() == (8, 8)
        assert kernel.eachindex(0) == range(8)

    def test_all(self, kernel, kw):
        cov = kw['cov']
        assert gpc.pairwise(kernel, gpc.ALL) is kernel.cov
        assert gpc.asmatrix(kernel) is kernel.cov
        util.assert_equal(gpc.map(kernel, gpc.ALL), np.diag(cov))
        util.assert_equal(gpc.map(kernel, gpc.ALL, gpc.ALL), np.diag(cov))
        util.assert_equal(gpc.pairwise(kernel, slice(2, 5), gpc.ALL), cov[2:5])

    def test_values(self, kernel, kw):
        cov = kw['cov']
        util.assert_equal(gpc.pairwise(kernel, [1, 3], range(2)), cov[[1, 3]][:, :2])
        util.assert_equal(kernel(2, 5), cov[2, 5])

    def test_map_length_mismatch(self, kernel):
        with pytest.raises(gpc.ShapeMismatchError):
            gpc.map(kernel, gpc.ALL, [1, 2])
        with pytest.raises(gpc.ShapeMismatchError):
            gpc.map(kernel, slice(0, 3), slice(0, 4))

    @pytest.mark.parametrize('shape', [(3,), (3, 4), (2, 2, 2)])
    def test_not_square(self, shape):
        with pytest.raises(ValueError):
            gpc.Empirical(np.ones(shape))

def test_all_kernels_tested():
    tested = {
        name[4:] for name, obj in globals().items()
        if name.startswith('Test') and isinstance(obj, type)
    }
    assert tested == set(vars(_kernels)) - {n for n in vars(_kernels) if n.startswith('_')}

def test_kernel_types():
    assert issubclass(gpc.EQ, _Kernel.StationaryKernel)
    assert issubclass(gpc.Linear, _Kernel.Kernel)
    assert not issubclass(gpc.Linear, _Kernel.StationaryKernel)
    assert issubclass(gpc.Empirical, _Kernel.Kernel)
    assert gpc.EQ.__name__ == 'EQ'
    assert 'Exponentiated quadratic' in gpc.EQ.__doc__

def test_decorated_kernel_jit():
    x = jnp.linspace(0, 1, 5)
    K = jax.jit(lambda x: gpc.dense(gpc.pairwise(gpc.EQ(), x)))(x)
    util.assert_allclose(K, gpc.pairwise(gpc.EQ(), x), rtol=1e-15)
