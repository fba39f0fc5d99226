# gpcov/_Kernel/_crosskernel.py
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

import math
import types
import operator
import warnings
import functools

from jax import numpy as jnp

from .. import _jaxext
from .. import _inputs

from . import _errors
from . import _eval

class CrossKernel:
    r"""

    Base class to represent kernels, i.e., covariance functions.

    A kernel is a two-argument function that computes the covariance between
    two functions at some points according to some probability distribution:

    .. math::
        \mathrm{kernel}(x, y) = \mathrm{Cov}[f(x), g(y)].

    `CrossKernel` objects are callable, the signature is ``obj(x, y)`` where
    ``x`` and ``y`` are two single elements of input sequences (scalars, or
    vectors for `ColVecs` inputs). They can be summed and multiplied between
    them and with scalars. They are immutable; all operations return new
    objects.

    To evaluate a kernel on whole sequences, use `map` and `pairwise`, which
    pick the fastest implementation available for the kernel and the inputs.

    Parameters
    ----------
    core : callable, optional
        A function with signature ``core(x, y, **initkw)``, where ``x`` and
        ``y`` are two broadcastable jax arrays whose last axis runs over the
        components of the input elements (of size 1 for scalar inputs). It
        must return the kernel on the broadcasted shape without the last
        axis. If not specified, the subclass must override `_binary`.
    **initkw :
        Parameters of the kernel, passed to `core`. They also define
        equality between kernels of the same class.

    Attributes
    ----------
    initkw : dict
        The `initkw` argument.
    core : callable or None
        The `core` argument partially evaluated on `initkw`.

    Methods
    -------
    map
    pairwise
    size
    eachindex
    iszero
    isstationary
    register_map
    register_pairwise

    See also
    --------
    Kernel

    """

    __slots__ = '_initkw', '_core'
        # only __new__ shall set these attributes

    def __new__(cls, core=None, **initkw):
        self = super().__new__(cls)
        self._initkw = initkw
        self._core = core
        return self

    @property
    def initkw(self):
        return types.MappingProxyType(self._initkw)

    @property
    def core(self):
        if self._core is None:
            return None
        return functools.partial(self._core, **self._initkw)

    def __call__(self, x, y):
        return self._binary(x, y)

    def _binary(self, x, y):
        """ evaluate the kernel on two single elements """
        if self._core is None:
            raise TypeError(f'{self.__class__.__name__} does not define '
                'a pointwise rule')
        x = jnp.atleast_1d(jnp.asarray(x))
        y = jnp.atleast_1d(jnp.asarray(y))
        result = self._core(x, y, **self._initkw)
        assert result.shape == (), result.shape
        return result

    def _unary(self, x):
        """ evaluate the kernel on a single element paired with itself """
        return self._binary(x, x)

    def _sizes(self):
        return math.inf, math.inf

    def size(self, dim=None):
        """
        The number of indices along each axis of the kernel.

        Parameters
        ----------
        dim : {0, 1}, optional
            The axis. If not specified, return both sizes.

        Returns
        -------
        size : int, math.inf, or pair of them
            `math.inf` if the kernel accepts arbitrary inputs along the axis.
        """
        sizes = self._sizes()
        if dim is None:
            return sizes
        if dim not in (0, 1):
            raise ValueError(f'dim must be 0 or 1, got {dim!r}')
        return sizes[dim]

    def eachindex(self, dim):
        """
        The indices along one axis of a finite kernel.

        Raises
        ------
        UnsupportedIndexingError :
            The axis is infinite.
        """
        n = self.size(dim)
        if math.isinf(n):
            raise _errors.UnsupportedIndexingError(f'axis {dim} of '
                f'{self.__class__.__name__} has no finite set of indices')
        return range(n)

    def iszero(self):
        """ True if the kernel is known to be identically zero """
        return False

    @classmethod
    def isstationary(cls):
        """ True if the kernel depends only on the difference of the
        arguments """
        return False

    def map(self, x, y=None):
        """ Shortcut for `gpcov.map` """
        return _eval.map(self, x, y)

    def pairwise(self, x, y=None):
        """ Shortcut for `gpcov.pairwise` """
        return _eval.pairwise(self, x, y)

    def __eq__(self, other):
        if not isinstance(other, CrossKernel):
            return NotImplemented
        if self is other:
            return True
        if type(self) is not type(other):
            return False
        a = self._initkw
        b = other._initkw
        return a.keys() == b.keys() and all(_paramequal(a[k], b[k]) for k in a)

    def __hash__(self):
        return hash(type(self))

    def __repr__(self):
        args = ', '.join(f'{k}={v!r}' for k, v in self._initkw.items())
        return f'{self.__class__.__name__}({args})'

    def __add__(self, other):
        from . import _alg
        return _alg.binary(operator.add, self, other)

    def __radd__(self, other):
        from . import _alg
        return _alg.binary(operator.add, other, self)

    def __mul__(self, other):
        from . import _alg
        return _alg.binary(operator.mul, self, other)

    def __rmul__(self, other):
        from . import _alg
        return _alg.binary(operator.mul, other, self)

    _map_impls = {}
    _pairwise_impls = {}

    def __init_subclass__(cls, **kw):
        super().__init_subclass__(**kw)
        cls._map_impls = {}
        cls._pairwise_impls = {}

    @classmethod
    def _implmro(cls):
        """ Iterator of superclasses with implementation registries """
        for c in cls.mro(): # pragma: no branch
            yield c
            if c is __class__:
                break

    @classmethod
    def _register(cls, table, argtypes):
        if len(argtypes) not in (1, 2):
            raise KeyError(f'implementations take 1 or 2 arguments, '
                f'got {len(argtypes)} types')
        for t in argtypes:
            if not isinstance(t, type):
                raise TypeError(f'{t!r} is not a type')
        registry = vars(cls)[table]
        def decorator(func):
            if argtypes in registry:
                names = ', '.join(t.__name__ for t in argtypes)
                warnings.warn(f'overriding {table[1:-6]} implementation for '
                    f'({names}) in {cls.__name__}')
            registry[argtypes] = func
            return func
        return decorator

    @classmethod
    def register_map(cls, *argtypes):
        """

        Decorator to register a fast implementation of `map` for this class
        and its subclasses.

        Parameters
        ----------
        *argtypes : types
            One type for the unary ``map(k, x)``, two types for the binary
            ``map(k, x, y)``.

        Returns
        -------
        decorator : callable
            Takes a function ``func(self, *args)`` and returns it unchanged
            after registering it.

        Raises
        ------
        KeyError :
            The number of types is not 1 or 2.

        See also
        --------
        register_pairwise

        Notes
        -----
        An existing entry for the same types in the same class is overwritten
        with a warning.

        """
        return cls._register('_map_impls', argtypes)

    @classmethod
    def register_pairwise(cls, *argtypes):
        """
        Decorator to register a fast implementation of `pairwise`, see
        `register_map`.
        """
        return cls._register('_pairwise_impls', argtypes)

    @classmethod
    def _getimpl(cls, table, args):
        """
        Find an implementation for the given arguments.

        The registries are searched following the MRO up to `CrossKernel`,
        and the search stops at the first class with an entry matching the
        arguments. Among the matching entries of that class, the one with the
        types nearest to the types of the arguments wins.

        Returns
        -------
        tcls : type
            The class where the implementation was found.
        impl : callable
            The implementation.

        Raises
        ------
        KeyError :
            No implementation found.
        """
        for c in cls._implmro():
            best = None
            for argtypes, impl in vars(c).get(table, {}).items():
                if len(argtypes) != len(args):
                    continue
                if not all(isinstance(a, t) for a, t in zip(args, argtypes)):
                    continue
                dist = sum(map(_mrodistance, args, argtypes))
                if best is None or dist < best[0]:
                    best = dist, impl
            if best is not None:
                return c, best[1]
        raise KeyError(tuple(type(a).__name__ for a in args))

def _mrodistance(obj, cls):
    mro = type(obj).__mro__
    try:
        return mro.index(cls)
    except ValueError: # virtual subclass
        return len(mro)

def _paramequal(a, b):
    if a is b:
        return True
    if callable(a) or isinstance(a, (_inputs.StepRange, _inputs.ColVecs)):
        return a == b
    if callable(b) or isinstance(b, (_inputs.StepRange, _inputs.ColVecs)):
        return False
    return _jaxext.array_equal(a, b)
