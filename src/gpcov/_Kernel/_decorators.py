# gpcov/_Kernel/_decorators.py
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

import types
import warnings
import inspect

from .. import _jaxext

from . import _crosskernel
from . import _kernel
from . import _stationary

def makekernelsubclass(core, bases, *, check=None, **prekw):

    named_object = getattr(core, 'pyfunc', core) # np.vectorize objects
    name = getattr(named_object, '__name__', 'DecoratedKernel')

    bases = tuple(bases)

    # the leading parameters of the core are the inputs, the others are the
    # parameters of the kernel
    stationary = issubclass(bases[-1], _stationary.CrossStationaryKernel)
    ninputs = 1 if stationary and prekw.get('input', 'abs') != 'raw' else 2
    params = list(inspect.signature(core).parameters.values())[ninputs:]
    signature = inspect.Signature(params)

    def exec_body(ns):

        def __new__(cls, *args, **kw):
            bound = signature.bind(*args, **kw)
            explicit = dict(bound.arguments)
            bound.apply_defaults()

            # defaults < decorator arguments < explicit arguments
            kwargs = dict(bound.arguments)
            kwargs.update(prekw)
            kwargs.update(explicit)
            shared_keys = set(prekw).intersection(explicit)
            if shared_keys:
                warnings.warn(f'overriding init argument(s) '
                    f'{shared_keys} of kernel {name}')

            if check is not None:
                with _jaxext.skipifabstract():
                    check(**{p: kwargs[p] for p in signature.parameters})
            return super(newclass, cls).__new__(cls, core, **kwargs)

        ns['__new__'] = __new__
        ns['__wrapped__'] = named_object
        ns['__doc__'] = named_object.__doc__
        ns['__module__'] = getattr(named_object, '__module__', __name__)
        ns['__signature__'] = signature

    newclass = types.new_class(name, bases, exec_body=exec_body)
    assert issubclass(newclass, _crosskernel.CrossKernel)
    return newclass

def crosskernel(*args, bases=None, **kw):
    """

    Decorator to convert a function to a subclass of `CrossKernel`.

    Parameters
    ----------
    *args :
        Either a function to decorate, or no arguments. The function is used
        as the `core` argument to `CrossKernel`. Its first two parameters
        are the inputs, the following ones are the parameters of the kernel,
        which can be passed positionally or by keyword to the class.
    bases : tuple of types, optional
        The bases of the new class. If not specified, use `CrossKernel`.
    check : callable, optional
        A function called with the parameters of the kernel at
        instantiation. It should raise `ValueError` on invalid values. It is
        skipped if the parameters are traced by jax.
    **kw :
        Additional arguments are passed to the base class constructor.

    Returns
    -------
    class_or_dec : callable or type
        If `args` is empty, a decorator ready to be applied, else the kernel
        class.

    Examples
    --------

    >>> @gpc.crosskernel
    ... def MyKernel(x, y, a=0, b=0):
    ...     return jnp.sum((x - a) * (y - b), axis=-1)

    """
    if bases is None:
        bases = _crosskernel.CrossKernel,
    functional = lambda core: makekernelsubclass(core, bases, **kw)
    if len(args) == 0:
        return functional
    elif len(args) == 1:
        return functional(*args)
    else:
        raise ValueError(len(args))

def kernel(*args, **kw):
    """

    Like `crosskernel` but makes a subclass of `Kernel`.

    Examples
    --------

    >>> @gpc.kernel
    ... def MyKernel(x, y, cippa=1, lippa=42):
    ...     return cippa * jnp.sum(x * y, axis=-1) ** lippa

    """
    return crosskernel(*args, bases=(_kernel.Kernel,), **kw)

def crossstationarykernel(*args, **kw):
    """

    Like `crosskernel` but makes a subclass of `CrossStationaryKernel`. The
    function takes a single input computed according to the `input`
    argument, unless ``input='raw'``.

    """
    return crosskernel(*args, bases=(_stationary.CrossStationaryKernel,), **kw)

def stationarykernel(*args, **kw):
    """

    Like `crosskernel` but makes a subclass of `StationaryKernel`.

    Examples
    --------

    >>> @gpc.stationarykernel(input='abs')
    ... def MyKernel(r, cippa=1, lippa=42):
    ...     return cippa * jnp.exp(-r / lippa)

    """
    return crosskernel(*args, bases=(_stationary.StationaryKernel,), **kw)
