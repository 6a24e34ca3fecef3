"""
magpie.utils.dates
~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import time

from datetime import datetime, timezone

ISO_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


class SystemClock(object):
    def now(self):
        return time.time()


class FrozenClock(object):
    """
    A clock which always returns the same instant.

    >>> clock = FrozenClock(1500000000.0)
    >>> clock.now()
    1500000000.0
    """

    def __init__(self, timestamp):
        self.timestamp = timestamp

    def now(self):
        return self.timestamp

    def tick(self, seconds=1):
        self.timestamp += seconds


def to_datetime(value):
    return datetime.fromtimestamp(value, timezone.utc)


def to_iso8601(value):
    return to_datetime(value).strftime(ISO_FORMAT)
