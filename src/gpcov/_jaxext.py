# gpcov/_jaxext.py
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

import numpy
import jax
from jax import numpy as jnp

_tracer_errors = (
    jax.errors.ConcretizationTypeError,
    jax.errors.TracerArrayConversionError,
    jax.errors.TracerBoolConversionError,
)

class skipifabstract:
    """
    Context manager to do checks on concrete values, and skip them silently
    if the values are traced by jax.
    """

    def __enter__(self):
        pass

    def __exit__(self, exc_type, exc_value, tb):
        return exc_type is not None and issubclass(exc_type, _tracer_errors)

def is_concrete(*args):
    """ True if none of the arguments is a jax tracer """
    return not any(isinstance(x, jax.core.Tracer) for x in args)

def array_equal(a, b):
    """
    Exact equality of two parameters, which may be python scalars or arrays.
    Traced values compare equal only if they are the same object.
    """
    if a is b:
        return True
    if not is_concrete(a, b):
        return False
    a = numpy.asarray(a)
    b = numpy.asarray(b)
    return a.shape == b.shape and bool(numpy.all(a == b))

def isnumeric(x):
    """ True if `x` has a numerical or boolean dtype """
    dtype = getattr(x, 'dtype', None)
    return dtype is not None and (
        jnp.issubdtype(dtype, jnp.number) or jnp.issubdtype(dtype, jnp.bool_)
    )
