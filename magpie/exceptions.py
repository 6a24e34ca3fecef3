"""
magpie.exceptions
~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""


class MagpieError(Exception):
    pass


class InvalidArgumentError(MagpieError, ValueError):
    pass


class StackLockedError(MagpieError, RuntimeError):
    """
    Raised when the middleware registry is changed while the same thread
    is executing the stack.
    """


class InvalidStageResultError(MagpieError, TypeError):
    def __init__(self, stage, result):
        self.stage = stage
        self.result = result
        super(InvalidStageResultError, self).__init__(
            'Middleware %r must return an Event or None, got %r instead.' % (
                stage, type(result).__name__))
