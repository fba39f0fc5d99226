# gpcov/_Kernel/_eval.py
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

""" Evaluation of kernels on sequences of inputs """

import functools
import warnings

import jax
from jax import numpy as jnp

from .. import _inputs
from .._log import logger

from . import _errors
from . import _kernel

FALLBACK_WARN_PAIRS = 1_000_000
""" Number of elementwise evaluations above which the per-pair fallback
emits a warning """

def map(k, x, y=None):
    """

    Evaluate a kernel elementwise on one or two sequences.

    Parameters
    ----------
    k : CrossKernel
        The kernel.
    x, y : sequence
        The inputs, with the same length. If `y` is not specified, evaluate
        the kernel on the diagonal ``k(x[p], x[p])``.

    Returns
    -------
    v : 1d array or Fill or Zeros
        ``v[p] = k(x[p], y[p])``.

    Raises
    ------
    ShapeMismatchError :
        `x` and `y` have different lengths.

    """
    if y is None:
        args = x,
    else:
        # slices are indices into finite kernels, checked by the wrappers
        sliced = isinstance(x, slice) or isinstance(y, slice)
        if not sliced and len(x) != len(y):
            raise _errors.ShapeMismatchError(f'map on sequences of different '
                f'lengths {len(x)} and {len(y)}')
        args = x, y
    return _evaluate(k, 'map', args)

def pairwise(k, x, y=None):
    """

    Evaluate a kernel on all the pairs of elements of two sequences.

    Parameters
    ----------
    k : CrossKernel
        The kernel.
    x, y : sequence
        The inputs. If `y` is not specified, it is taken equal to `x`.

    Returns
    -------
    m : 2d array or StructuredMatrix
        ``m[p, q] = k(x[p], y[q])``. The result is a structured matrix
        (e.g., `Toeplitz` for stationary kernels on `StepRange` inputs)
        when the kernel and the inputs allow it.

    """
    args = (x,) if y is None else (x, y)
    return _evaluate(k, 'pairwise', args)

pw = pairwise

def _evaluate(k, op, args):
    verbosity = 1 if logger.depth == 0 else 2
    name = k.__class__.__name__
    try:
        tcls, impl = type(k)._getimpl(f'_{op}_impls', args)
    except KeyError:
        pass
    else:
        logger.log(f'{op} {name}: registered {tcls.__name__}.{impl.__name__}',
            verbosity)
        with logger.loglevel:
            return impl(k, *args)
    if op == 'pairwise' and len(args) == 1:
        if not isinstance(k, _kernel.Kernel):
            raise TypeError(f'pairwise with one input on cross kernel {name}, '
                'pass the second input explicitly')
        logger.log(f'pairwise {name}: unary to binary', verbosity)
        x, = args
        with logger.loglevel:
            return _evaluate(k, op, (x, x))
    return generic(k, op, args, verbosity)

def generic(k, op, args, verbosity=2):
    """

    Evaluate a kernel without looking for registered implementations.

    Uses the vectorized core of the kernel if all the inputs are sequences of
    scalars or all are `ColVecs`, otherwise calls the kernel on each pair of
    elements.

    Parameters
    ----------
    k : CrossKernel
        The kernel.
    op : {'map', 'pairwise'}
        The operation.
    args : tuple
        One or two input sequences.
    verbosity : int
        The log level of the message reporting the choice.

    """
    name = k.__class__.__name__
    if len(args) == 1:
        x, = args
        y = x
    else:
        x, y = args
    if k._core is not None:
        elements = _elements(args)
        if elements is not None:
            logger.log(f'{op} {name}: fused', verbosity)
            fused = _fused_map if op == 'map' else _fused_pairwise
            X, Y = elements if len(elements) == 2 else elements * 2
            return fused(k._core, X, Y, k._initkw)
    logger.log(f'{op} {name}: fallback', verbosity)
    if op == 'map':
        return _fallback_map(k, x, None if len(args) == 1 else y)
    else:
        return _fallback_pairwise(k, x, y)

def _elements(args):
    """ the inputs as (N, D) arrays, or None if they can't be vectorized """
    if all(_inputs.isscalarseq(a) for a in args):
        return tuple(_inputs.asarray(a)[:, None] for a in args)
    if all(isinstance(a, _inputs.ColVecs) for a in args):
        if len({a.X.shape[0] for a in args}) > 1:
            raise _errors.ShapeMismatchError('ColVecs with different numbers '
                'of components')
        return tuple(a.X.T for a in args)
    return None

@functools.partial(jax.jit, static_argnums=(0,))
def _fused_map(core, x, y, initkw):
    return core(x, y, **initkw)

@functools.partial(jax.jit, static_argnums=(0,))
def _fused_pairwise(core, x, y, initkw):
    return core(x[:, None, :], y[None, :, :], **initkw)

def _warnpairs(k, npairs):
    if npairs > FALLBACK_WARN_PAIRS:
        warnings.warn(f'evaluating {k.__class__.__name__} one pair at a time '
            f'on {npairs} pairs, register a fast implementation to avoid this')

def _fallback_map(k, x, y):
    n = len(x)
    _warnpairs(k, n)
    if n == 0:
        return jnp.zeros(0)
    if y is None:
        return jnp.stack([k._unary(x[p]) for p in range(n)])
    return jnp.stack([k._binary(x[p], y[p]) for p in range(n)])

def _fallback_pairwise(k, x, y):
    n = len(x)
    m = len(y)
    _warnpairs(k, n * m)
    if n == 0 or m == 0:
        return jnp.zeros((n, m))
    return jnp.stack([
        jnp.stack([k._binary(x[p], y[q]) for q in range(m)])
        for p in range(n)
    ])
