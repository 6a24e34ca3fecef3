"""
magpie.severity
~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import logging

from magpie.exceptions import InvalidArgumentError

__all__ = ('Severity', 'translate_severity')


class Severity(object):
    """
    The severity of an event or breadcrumb.

    >>> Severity.warning() < Severity.error()
    True
    >>> Severity('info') == 'info'
    True
    """

    DEBUG = 'debug'
    INFO = 'info'
    WARNING = 'warning'
    ERROR = 'error'
    FATAL = 'fatal'

    ALLOWED_SEVERITIES = (DEBUG, INFO, WARNING, ERROR, FATAL)

    __slots__ = ('_value',)

    def __init__(self, value=INFO):
        if isinstance(value, Severity):
            value = value._value
        if value not in self.ALLOWED_SEVERITIES:
            raise InvalidArgumentError(
                'The %r value is not a valid severity, expected one of %s.' % (
                    value, ', '.join(self.ALLOWED_SEVERITIES)))
        self._value = value

    @classmethod
    def from_string(cls, value):
        return cls(value)

    @classmethod
    def debug(cls):
        return cls(cls.DEBUG)

    @classmethod
    def info(cls):
        return cls(cls.INFO)

    @classmethod
    def warning(cls):
        return cls(cls.WARNING)

    @classmethod
    def error(cls):
        return cls(cls.ERROR)

    @classmethod
    def fatal(cls):
        return cls(cls.FATAL)

    @property
    def value(self):
        return self._value

    def _rank(self):
        return self.ALLOWED_SEVERITIES.index(self._value)

    def _coerce(self, other):
        if isinstance(other, Severity):
            return other
        if isinstance(other, str) and other in self.ALLOWED_SEVERITIES:
            return Severity(other)
        return None

    def __eq__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._value == other._value

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __lt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._rank() < other._rank()

    def __le__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._rank() <= other._rank()

    def __gt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._rank() > other._rank()

    def __ge__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._rank() >= other._rank()

    def __hash__(self):
        return hash(self._value)

    def __str__(self):
        return self._value

    def __repr__(self):
        return '<Severity: %s>' % (self._value,)


# logging levels, highest first
LOG_LEVELS = (
    (logging.CRITICAL, Severity.FATAL),
    (logging.ERROR, Severity.ERROR),
    (logging.WARNING, Severity.WARNING),
    (logging.INFO, Severity.INFO),
    (logging.DEBUG, Severity.DEBUG),
)


def translate_severity(level, severity_map=None):
    """
    Translates a ``logging`` level number into a :class:`Severity`.

    ``severity_map`` takes precedence over the builtin table. Levels that
    fall between two known levels round down.
    """
    if severity_map and level in severity_map:
        return Severity(severity_map[level])

    for levelno, severity in LOG_LEVELS:
        if level >= levelno:
            return Severity(severity)
    return Severity.debug()
