"""
magpie.events
~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import uuid

from magpie.conf import defaults
from magpie.severity import Severity
from magpie.utils.dates import SystemClock, to_iso8601

__all__ = ('EventType', 'Event', 'ExceptionMechanism', 'ExceptionDataBag')

default_clock = SystemClock()


class EventType(object):
    DEFAULT = 'default'
    TRANSACTION = 'transaction'
    CHECK_IN = 'check_in'
    METRICS = 'metrics'

    ALL = (DEFAULT, TRANSACTION, CHECK_IN, METRICS)


class ExceptionMechanism(object):
    """
    Describes how an exception was captured.
    """

    TYPE_GENERIC = 'generic'

    def __init__(self, type, handled, data=None):
        self.type = type
        self.handled = bool(handled)
        self.data = dict(data or {})

    def to_dict(self):
        rv = {'type': self.type, 'handled': self.handled}
        if self.data:
            rv['data'] = dict(self.data)
        return rv

    def __repr__(self):
        return '<ExceptionMechanism: %s handled=%r>' % (self.type, self.handled)


class ExceptionDataBag(object):
    """
    A single exception of a chain.
    """

    def __init__(self, type, value, stacktrace=None, mechanism=None):
        self.type = type
        self.value = value
        self.stacktrace = stacktrace
        self.mechanism = mechanism

    def to_dict(self):
        rv = {'type': self.type, 'value': self.value}
        if self.stacktrace is not None and len(self.stacktrace):
            rv['stacktrace'] = self.stacktrace.to_dict()
        if self.mechanism is not None:
            rv['mechanism'] = self.mechanism.to_dict()
        return rv

    def __repr__(self):
        return '<ExceptionDataBag: %s>' % (self.type,)


class Event(object):
    """
    A captured occurrence, enriched in place by the middleware stack and
    handed to the transport once complete.

    >>> event = Event.create_event()
    >>> len(event.event_id)
    32
    """

    def __init__(self, type=EventType.DEFAULT, clock=None):
        self._event_id = uuid.uuid4().hex
        self.type = type
        self.timestamp = to_iso8601((clock or default_clock).now())
        self.level = Severity.error()
        self.message = None
        self.message_params = []
        self.message_formatted = None
        self.logger = None
        self.transaction = None
        self.server_name = None
        self.release = None
        self.environment = None
        self.modules = {}
        self.request = {}
        self.server_os_context = {}
        self.runtime_context = {}
        self.user_context = {}
        self.extra_context = {}
        self.tags_context = {}
        self.fingerprint = []
        self.breadcrumbs = []
        self.exceptions = []
        self.stacktrace = None
        self.sdk_metadata = {}
        self._sdk_identifier = None
        self._sdk_version = None

    @classmethod
    def create_event(cls, clock=None):
        return cls(EventType.DEFAULT, clock=clock)

    @classmethod
    def create_transaction(cls, clock=None):
        return cls(EventType.TRANSACTION, clock=clock)

    @classmethod
    def create_check_in(cls, clock=None):
        return cls(EventType.CHECK_IN, clock=clock)

    @classmethod
    def create_metrics(cls, clock=None):
        return cls(EventType.METRICS, clock=clock)

    @property
    def event_id(self):
        return self._event_id

    @property
    def level(self):
        return self._level

    @level.setter
    def level(self, value):
        if not isinstance(value, Severity):
            value = Severity(value)
        self._level = value

    @property
    def sdk_identifier(self):
        return self._sdk_identifier or defaults.SDK_IDENTIFIER

    def set_sdk_identifier(self, identifier):
        self._sdk_identifier = identifier

    @property
    def sdk_version(self):
        if self._sdk_version:
            return self._sdk_version
        import magpie
        return magpie.VERSION

    def set_sdk_version(self, version):
        self._sdk_version = version

    def to_dict(self):
        """
        Returns the event as primitives, leaving out empty values.
        """
        data = {
            'event_id': self.event_id,
            'timestamp': self.timestamp,
            'level': str(self.level),
            'platform': 'python',
            'sdk': {
                'name': self.sdk_identifier,
                'version': self.sdk_version,
            },
        }
        if self.type != EventType.DEFAULT:
            data['type'] = self.type
        if self.sdk_metadata:
            data['sdk'].update(self.sdk_metadata)

        for key, value in (('logger', self.logger),
                           ('transaction', self.transaction),
                           ('server_name', self.server_name),
                           ('release', self.release),
                           ('environment', self.environment)):
            if value is not None:
                data[key] = value

        for key, value in (('fingerprint', self.fingerprint),
                           ('modules', self.modules),
                           ('extra', self.extra_context),
                           ('tags', self.tags_context),
                           ('user', self.user_context),
                           ('request', self.request)):
            if value:
                data[key] = value

        contexts = {}
        if self.server_os_context:
            contexts['os'] = self.server_os_context
        if self.runtime_context:
            contexts['runtime'] = self.runtime_context
        if contexts:
            data['contexts'] = contexts

        if self.breadcrumbs:
            data['breadcrumbs'] = {
                'values': [b.to_dict() for b in self.breadcrumbs],
            }

        if self.exceptions:
            data['exception'] = {
                'values': [e.to_dict() for e in self.exceptions],
            }

        if self.stacktrace is not None and len(self.stacktrace):
            data['stacktrace'] = self.stacktrace.to_dict()

        if self.message is not None:
            if self.message_params:
                data['message'] = {
                    'message': self.message,
                    'params': self.message_params,
                    'formatted': self.message_formatted,
                }
            else:
                data['message'] = self.message_formatted or self.message

        return data

    def __repr__(self):
        return '<Event: %s %s>' % (self.event_id, self.type)
