"""
magpie.breadcrumbs
~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import threading

from magpie.exceptions import InvalidArgumentError
from magpie.severity import Severity
from magpie.utils.dates import SystemClock

__all__ = ('Breadcrumb', 'Recorder', 'BlackholeRecorder', 'make_recorder')


default_clock = SystemClock()


class Breadcrumb(object):
    """
    A single, immutable record of something that happened before an event.

    Every ``with_*`` method returns a new breadcrumb, or the same one when
    the value did not change.
    """

    TYPE_DEFAULT = 'default'
    TYPE_USER = 'user'
    TYPE_HTTP = 'http'
    TYPE_ERROR = 'error'
    TYPE_NAVIGATION = 'navigation'

    def __init__(self, level, type, category, message=None, metadata=None,
                 timestamp=None, clock=None):
        self._level = Severity(level)
        self._type = type
        self._category = category
        self._message = message
        self._metadata = dict(metadata or {})
        if timestamp is None:
            timestamp = (clock or default_clock).now()
        self._timestamp = timestamp

    @classmethod
    def create(cls, level, type, category, message=None, metadata=None):
        return cls(level, type, category, message, metadata)

    @property
    def level(self):
        return self._level

    @property
    def type(self):
        return self._type

    @property
    def category(self):
        return self._category

    @property
    def message(self):
        return self._message

    @property
    def metadata(self):
        return dict(self._metadata)

    @property
    def timestamp(self):
        return self._timestamp

    def _replace(self, **changes):
        new = object.__new__(type(self))
        new.__dict__.update(self.__dict__)
        for key, value in changes.items():
            setattr(new, '_' + key, value)
        return new

    def with_level(self, level):
        level = Severity(level)
        if level == self._level:
            return self
        return self._replace(level=level)

    def with_type(self, type):
        if type == self._type:
            return self
        return self._replace(type=type)

    def with_category(self, category):
        if category == self._category:
            return self
        return self._replace(category=category)

    def with_message(self, message):
        if message == self._message:
            return self
        return self._replace(message=message)

    def with_timestamp(self, timestamp):
        if timestamp == self._timestamp:
            return self
        return self._replace(timestamp=timestamp)

    def with_metadata(self, name, value):
        if name in self._metadata and self._metadata[name] == value:
            return self
        metadata = dict(self._metadata)
        metadata[name] = value
        return self._replace(metadata=metadata)

    def without_metadata(self, name):
        if name not in self._metadata:
            return self
        metadata = dict(self._metadata)
        del metadata[name]
        return self._replace(metadata=metadata)

    def to_dict(self):
        rv = {
            'type': self._type,
            'category': self._category,
            'level': str(self._level),
            'timestamp': self._timestamp,
        }
        if self._message is not None:
            rv['message'] = self._message
        if self._metadata:
            rv['data'] = dict(self._metadata)
        return rv

    def __repr__(self):
        return '<Breadcrumb: %s %s %r>' % (
            self._level, self._category, self._message)


class Recorder(object):
    """
    A fixed capacity ring buffer of breadcrumbs.

    Once full, recording a breadcrumb evicts the oldest one.
    """

    MAX_ITEMS = 100

    def __init__(self, limit=MAX_ITEMS):
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
            raise InvalidArgumentError(
                'The breadcrumbs limit must be a positive integer, got %r.' % (limit,))
        self.limit = limit
        self._items = [None] * limit
        self._cursor = 0
        self._size = 0
        self.count = 0
        self._lock = threading.Lock()

    def record(self, breadcrumb):
        with self._lock:
            self._items[self._cursor] = breadcrumb
            self._cursor = (self._cursor + 1) % self.limit
            self._size = min(self._size + 1, self.limit)
            self.count += 1

    def fetch(self):
        with self._lock:
            if self._size < self.limit:
                return self._items[:self._size]
            return self._items[self._cursor:] + self._items[:self._cursor]

    def is_empty(self):
        return self.count == 0

    def clear(self):
        with self._lock:
            self._items = [None] * self.limit
            self._cursor = 0
            self._size = 0
            self.count = 0

    def __iter__(self):
        return iter(self.fetch())

    def __len__(self):
        return self._size


class BlackholeRecorder(Recorder):
    def __init__(self, limit=1):
        super(BlackholeRecorder, self).__init__(limit)

    def record(self, breadcrumb):
        pass


def make_recorder(limit=Recorder.MAX_ITEMS):
    if limit == 0:
        return BlackholeRecorder()
    return Recorder(limit)
