# gpcov/_log.py
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

import textwrap
import collections

class Logger:
    """ Class to manage a log. Each line of the log has a verbosity level (an
    integer >= 0) and is printed only if this level is below a threshold. The
    last `maxlines` lines are saved and can be retrieved. """

    def __init__(self, target_verbosity=0, maxlines=1000):
        """ set the threshold used to exclude log lines """
        self._verbosity = target_verbosity
        self._loggedlines = collections.deque(maxlen=maxlines)

    @property
    def verbosity(self):
        return self._verbosity

    @verbosity.setter
    def verbosity(self, level):
        level = int(level)
        if level < 0:
            raise ValueError(f'verbosity must be >= 0, got {level}')
        self._verbosity = level

    @property
    def depth(self):
        """ current nesting level set by `loglevel` """
        return self.loglevel._level

    def _indent(self, text, level=0):
        """ indent a text by provided level or by global current level """
        level = max(0, level)
        prefix = 4 * level * ' '
        return textwrap.indent(text, prefix)

    def _select(self, verbosity, target_verbosity=None):
        if target_verbosity is None:
            target_verbosity = self._verbosity
        if isinstance(verbosity, int):
            return target_verbosity >= verbosity
        else:
            return target_verbosity in verbosity

    def log(self, message, verbosity=1, *, level=0):
        """
        Print and record a message.

        Parameters
        ----------
        message : str
            The message to print. A newline is added unconditionally.
        verbosity : int or set, default 1
            The verbosity level(s) at which the message is printed. If an
            integer, it's printed at all levels >= that integer. If a set, at
            the specified levels.
        level : int, default 0
            The indentation level of the message, added to the current
            nesting level.
        """
        level += self.loglevel._level
        if self._select(verbosity):
            print(self._indent(message, level))
        self._loggedlines.append((message, verbosity, level))

    def getlog(self, target_verbosity=None, *, base_level=0):
        """ return all logged line as a single string """
        return '\n'.join(
            self._indent(message, base_level + level)
            for message, verbosity, level in self._loggedlines
            if self._select(verbosity, target_verbosity)
        )

    def clear(self):
        self._loggedlines.clear()

    class _LogLevel:
        """ shared context manager to indent messages """

        _level = 0

        @classmethod
        def __enter__(cls):
            cls._level += 1

        @classmethod
        def __exit__(cls, *_):
            cls._level -= 1

    loglevel = _LogLevel()

MAX_VERBOSITY = 2

logger = Logger()

def set_verbosity(level):
    """
    Set the verbosity of the evaluation log.

    Parameters
    ----------
    level : int
        0 (default) prints nothing, 1 prints the evaluation path chosen for
        each call to `map` or `pairwise`, 2 also prints the nested calls made
        by composite kernels and finite wrappers. Lines are recorded
        regardless of the verbosity.
    """
    logger.verbosity = level

def getlog(verbosity=None):
    """
    Return the recorded evaluation log as a single string.

    Parameters
    ----------
    verbosity : int, optional
        Include only lines that would be printed at this verbosity. If not
        specified, include all lines.
    """
    if verbosity is None:
        verbosity = MAX_VERBOSITY
    return logger.getlog(verbosity)

def clearlog():
    """ Empty the recorded evaluation log. """
    logger.clear()
