"""
magpie.transport.spool
~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import logging
import threading

from magpie.transport.base import NullTransport, Result, ResultStatus, Transport

__all__ = ('MemorySpool', 'SpoolTransport')

logger = logging.getLogger('magpie.errors')


class MemorySpool(object):
    """
    Keeps the queued events in memory.
    """

    def __init__(self):
        self.events = []
        self._lock = threading.Lock()

    def queue_event(self, event):
        with self._lock:
            self.events.append(event)
        return True

    def flush_queue(self, transport):
        """
        Sends every queued event through ``transport``. Returns the number of
        events which were sent successfully.
        """
        with self._lock:
            events, self.events = self.events, []

        sent = 0
        for event in events:
            result = transport.send(event)
            if result.status == ResultStatus.FAILED:
                logger.error('Unable to send event %s', event.event_id)
            else:
                sent += 1
        return sent

    def __len__(self):
        return len(self.events)


class SpoolTransport(Transport):
    """
    Queues events in ``spool`` instead of sending them. ``flush`` drains
    the spool into ``transport``.
    """

    def __init__(self, spool=None, transport=None):
        self.spool = spool if spool is not None else MemorySpool()
        self.transport = transport or NullTransport()

    def send(self, event):
        if self.spool.queue_event(event):
            return Result(ResultStatus.SUCCESS, event)
        return Result(ResultStatus.FAILED, event)

    def flush(self, timeout=None):
        self.spool.flush_queue(self.transport)
        return self.transport.flush(timeout)

    def close(self, timeout=None):
        self.flush(timeout)
        return self.transport.close(timeout)
