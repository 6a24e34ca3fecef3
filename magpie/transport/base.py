"""
magpie.transport.base
~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

__all__ = ('Transport', 'Result', 'ResultStatus', 'NullTransport')


class ResultStatus(object):
    SUCCESS = 'success'
    FAILED = 'failed'
    SKIPPED = 'skipped'


class Result(object):
    """
    The outcome of a transport call.
    """

    def __init__(self, status, event=None):
        self.status = status
        self.event = event

    @property
    def is_success(self):
        return self.status == ResultStatus.SUCCESS

    def __repr__(self):
        return '<Result: %s>' % (self.status,)


class Transport(object):
    """
    All transport implementations need to subclass this class

    You must implement a send method. Timeouts are given in seconds.
    """

    def send(self, event):
        """
        You need to override this to do something with the actual
        event. Usually - this is sending to a server
        """
        raise NotImplementedError

    def flush(self, timeout=None):
        return Result(ResultStatus.SUCCESS)

    def close(self, timeout=None):
        return self.flush(timeout)


class NullTransport(Transport):
    """
    Discards every event.
    """

    def send(self, event):
        return Result(ResultStatus.SKIPPED, event)

    def flush(self, timeout=None):
        return Result(ResultStatus.SKIPPED)

    def close(self, timeout=None):
        return Result(ResultStatus.SKIPPED)
