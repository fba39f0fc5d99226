# gpcov/tests/test_log.py
#
# Copyright (c) 2024, Giacomo Petrillo
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

import gpcov as gpc
from gpcov import _log

def test_logger(capsys):
    logger = _log.Logger(target_verbosity=1, maxlines=3)
    logger.log('cippa')
    logger.log('lippa', 2)
    with logger.loglevel:
        assert logger.depth == 1
        logger.log('nested')
    assert logger.depth == 0
    out = capsys.readouterr().out
    assert out == 'cippa\n    nested\n'
    assert logger.getlog() == 'cippa\n    nested'
    assert logger.getlog(2) == 'cippa\nlippa\n    nested'
    logger.log('turlipu')
    assert logger.getlog(2) == 'lippa\n    nested\nturlipu'
    logger.clear()
    assert logger.getlog(2) == ''

def test_verbosity_set():
    logger = _log.Logger()
    logger.log('a', {0, 2})
    logger.log('b', {1})
    assert logger.getlog(0) == 'a'
    assert logger.getlog(1) == 'b'
    logger.verbosity = 2
    assert logger.verbosity == 2
    with pytest.raises(ValueError):
        logger.verbosity = -1

def test_evaluation_log():
    x = gpc.StepRange(0., 1., 5)
    gpc.pairwise(gpc.EQ() + gpc.Noise(), x)
    lines = gpc.getlog().splitlines()
    assert lines[0].startswith('pairwise CompositeKernel: registered')
    assert lines[1] == '    pairwise EQ: registered StationaryKernel._pairwise_steprange_sym'
    assert all(line.startswith('    ') for line in lines[1:])
    assert gpc.getlog(1) == lines[0]
    assert gpc.getlog(0) == ''
    gpc.clearlog()
    assert gpc.getlog() == ''

def test_quiet_by_default(capsys):
    gpc.pairwise(gpc.EQ(), [1., 2.])
    assert capsys.readouterr().out == ''
    assert gpc.getlog() != ''
