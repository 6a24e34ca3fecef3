"""
magpie.base
~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import logging
import random
import sys

from magpie.breadcrumbs import Breadcrumb, make_recorder
from magpie.conf import Options, defaults
from magpie.context import Context, TransactionStack
from magpie.events import Event, EventType
from magpie.exceptions import InvalidArgumentError, InvalidStageResultError
from magpie.integrations.stack import MiddlewareStack
from magpie.severity import Severity, translate_severity
from magpie.stacktrace import StacktraceBuilder
from magpie.transport.base import NullTransport, ResultStatus
from magpie.utils import merge_dicts
from magpie.utils.dates import SystemClock
from magpie.utils.imports import import_string
from magpie.utils.serializer import ReprSerializer, Serializer

__all__ = ('Client', 'DummyClient')

EVENT_CONSTRUCTORS = {
    EventType.DEFAULT: Event.create_event,
    EventType.TRANSACTION: Event.create_transaction,
    EventType.CHECK_IN: Event.create_check_in,
    EventType.METRICS: Event.create_metrics,
}


class ModuleProxyCache(dict):
    def __missing__(self, key):
        handler = import_string(key)

        self[key] = handler

        return handler


class Client(object):
    """
    The magpie client, which turns exceptions, messages and raw payloads into
    events and hands them to a transport.

    >>> from magpie import Client

    >>> client = Client(release='1.0.0', send_default_pii=True)

    >>> # Record an exception
    >>> try:
    >>>     1/0
    >>> except ZeroDivisionError:
    >>>     ident = client.captureException()
    >>>     print("Exception caught; reference is %s" % ident)
    """
    logger = logging.getLogger('magpie')
    error_logger = logging.getLogger('magpie.errors')

    module_cache = ModuleProxyCache()

    def __init__(self, options=None, transport=None, clock=None, **kwargs):
        if options is None:
            options = Options(**kwargs)
        elif kwargs:
            raise InvalidArgumentError(
                'Options cannot be given both as an object and as keywords.')

        self.configure_logging()

        self.options = options
        self.transport = transport or NullTransport()
        self.clock = clock or SystemClock()
        self.severity_map = None

        self.breadcrumbs = make_recorder(options.max_breadcrumbs)
        self.transaction_stack = TransactionStack()
        self._context = Context()

        serializer_options = {
            'mb_detect_order': options.mb_detect_order,
            'string_max_length': options.string_max_length,
            'max_depth': options.max_depth,
        }
        self.serializer = Serializer(
            serialize_all_objects=options.serialize_all_objects,
            **serializer_options)
        self.repr_serializer = ReprSerializer(**serializer_options)
        self.stacktrace_builder = StacktraceBuilder(
            options, serializer=self.serializer,
            repr_serializer=self.repr_serializer)

        self._last_event = None
        self.stack = MiddlewareStack(self.handle_event)
        for stage in self.get_integrations():
            self.add_middleware(stage)

    def configure_logging(self):
        # magpie.errors and its children propagate to this handler
        logger = logging.getLogger('magpie')
        if logger.handlers:
            return
        logger.addHandler(logging.StreamHandler())
        logger.setLevel(logging.INFO)

    def load_stage(self, value):
        if isinstance(value, str):
            value = self.module_cache[value]
        if isinstance(value, type):
            value = value(self)
        return value

    def get_integrations(self):
        """
        Yields the configured integrations followed by the processors.
        Defaults are replaced by a configured integration of the same class.
        """
        configured = [self.load_stage(i) for i in self.options.integrations]
        configured_types = set(type(i) for i in configured)

        if self.options.default_integrations:
            for path in defaults.INTEGRATIONS:
                if self.module_cache[path] in configured_types:
                    continue
                yield self.load_stage(path)

        for integration in configured:
            yield integration

        for processor in self.options.processors:
            yield self.load_stage(processor)

    def handle_event(self, event, request=None, exception=None, payload=None):
        return event

    def add_middleware(self, stage, priority=None):
        if priority is None:
            priority = getattr(stage, 'priority', 0)
        return self.stack.add_middleware(stage, priority)

    def remove_middleware(self, stage):
        return self.stack.remove_middleware(stage)

    def get_integration(self, cls):
        """
        Returns the registered stage which is an instance of ``cls``.

        >>> client.remove_middleware(client.get_integration(ModulesIntegration))
        True
        """
        for stage in self.stack.get_middlewares():
            if isinstance(stage, cls):
                return stage
        return None

    @property
    def context(self):
        """
        The context of the current thread, merged into every event.

        >>> def view_handler(view_func, *args, **kwargs):
        >>>     client.context.merge({'tags': {'key': 'value'}})
        >>>     try:
        >>>         return view_func(*args, **kwargs)
        >>>     finally:
        >>>         client.context.clear()
        """
        return self._context

    def user_context(self, data):
        """
        Update the user context for future events.

        >>> client.user_context({'email': 'foo@example.com'})
        """
        return self.context.merge({
            'user': data,
        })

    def extra_context(self, data, **kwargs):
        """
        Update the extra context for future events.

        >>> client.extra_context({'foo': 'bar'})
        """
        return self.context.merge({
            'extra': data,
        })

    def tags_context(self, data, **kwargs):
        """
        Update the tags context for future events.

        >>> client.tags_context({'version': '1.0'})
        """
        return self.context.merge({
            'tags': data,
        })

    def leave_breadcrumb(self, breadcrumb=None, **kwargs):
        """
        Records a breadcrumb, given either as a :class:`Breadcrumb` or as
        its fields.

        >>> client.leave_breadcrumb(level='info', type='default',
        >>>                         category='auth', message='Logged in')
        """
        if breadcrumb is None:
            kwargs.setdefault('clock', self.clock)
            breadcrumb = Breadcrumb(**kwargs)
        self.breadcrumbs.record(breadcrumb)
        return breadcrumb

    def clear_breadcrumbs(self):
        self.breadcrumbs.clear()

    def register_severity_map(self, mapping):
        self.severity_map = dict(mapping or {})

    def translate_severity(self, level):
        return translate_severity(level, self.severity_map)

    @property
    def last_event(self):
        return self._last_event

    @property
    def last_event_id(self):
        if self._last_event is None:
            return None
        return self._last_event.event_id

    def should_sample(self):
        return random.random() < self.options.sample_rate

    def build_event(self, payload):
        event_type = payload.get('type') or EventType.DEFAULT
        try:
            constructor = EVENT_CONSTRUCTORS[event_type]
        except KeyError:
            raise InvalidArgumentError('Unknown event type %r.' % (event_type,))
        event = constructor(clock=self.clock)

        options = self.options
        event.logger = payload.get('logger') or options.logger

        level = payload.get('level')
        if isinstance(level, int) and not isinstance(level, bool):
            event.level = self.translate_severity(level)
        elif level is not None:
            event.level = level if isinstance(level, Severity) else Severity(level)

        event.server_name = options.server_name
        event.release = options.release
        event.environment = options.environment
        event.transaction = (
            payload.get('transaction') or self.transaction_stack.peek())

        if options.sdk_identifier:
            event.set_sdk_identifier(options.sdk_identifier)
        if options.sdk_version:
            event.set_sdk_version(options.sdk_version)
        return event

    def capture(self, payload=None, **kwargs):
        """
        Captures and processes an event and pipes it off to the transport.

        ``payload`` and ``kwargs`` are merged. Besides the fields read by
        the integrations (``message``, ``tags``, ``extra``, ``user``,
        ``fingerprint``, ``stacktrace``, ``mechanism``...) it understands:

        - ``type``: the kind of event, one of :class:`EventType`
        - ``level``: a :class:`Severity`, its name or a ``logging`` level
        - ``logger``: the name of the logger which created the event
        - ``transaction``: the name of the current transaction
        - ``request``: the WSGI environ of the current request
        - ``exception``: the exception being captured

        Returns the id of the event, or ``None`` if it was dropped.

        >>> client.capture({'message': 'Query took too long'}, level='warning')
        """
        payload = merge_dicts(payload, kwargs)
        request = payload.pop('request', None)
        exception = payload.pop('exception', None)

        if not self.should_sample():
            self.logger.info('Event dropped due to sampling.')
            return None

        event = self.build_event(payload)
        event = self.stack.execute_stack(
            event, request=request, exception=exception, payload=payload)
        if event is None:
            self.logger.info('Event dropped by a middleware.')
            return None

        hook = self.options.get_before_send(event.type)
        if hook is not None:
            result = hook(event)
            if result is not None and not isinstance(result, Event):
                raise InvalidStageResultError(hook, result)
            if result is None:
                self.logger.info('Event %s dropped by before_send.', event.event_id)
                return None
            event = result

        self._last_event = event

        result = self.transport.send(event)
        if result is not None and result.status == ResultStatus.FAILED:
            self.error_logger.error(
                'Unable to send event %s: %s', event.event_id, result.status)

        return event.event_id

    captureEvent = capture

    def captureMessage(self, message, params=(), **payload):
        """
        Creates an event from ``message``.

        >>> client.captureMessage('My event just happened!')
        >>> client.captureMessage('Hello %s', ('world',))
        """
        payload['message'] = message
        payload['message_params'] = params
        return self.capture(payload)

    def captureException(self, exc_info=None, **payload):
        """
        Creates an event from an exception.

        >>> try:
        >>>     1/0
        >>> except ZeroDivisionError as e:
        >>>     client.captureException(e)

        ``exc_info`` is an exception or an ``exc_info`` tuple. If it is not
        provided, or is set to True, then this method will perform the
        ``exc_info = sys.exc_info()`` for you.

        ``payload`` is passed through to ``.capture``.
        """
        if exc_info is None or exc_info is True:
            exc_info = sys.exc_info()

        if isinstance(exc_info, BaseException):
            exception = exc_info
        elif isinstance(exc_info, tuple) and len(exc_info) == 3:
            exception = exc_info[1]
        else:
            raise InvalidArgumentError(
                'Expected an exception or an exc_info tuple, got %r.' % (exc_info,))

        if exception is None:
            self.logger.debug('No exception to capture.')
            return None

        payload['exception'] = exception
        return self.capture(payload)

    def captureLastError(self, **payload):
        """
        Creates an event from the last exception which reached the
        interactive interpreter, if any.
        """
        exception = getattr(sys, 'last_exc', None) or getattr(sys, 'last_value', None)
        if exception is None:
            return None
        return self.captureException(exception, **payload)

    def flush(self, timeout=None):
        """
        Waits up to ``timeout`` seconds for the transport to send the pending
        events.
        """
        return self.transport.flush(timeout)

    def close(self, timeout=None):
        return self.transport.close(timeout)


class DummyClient(Client):
    "Sends messages into an empty void"

    def capture(self, payload=None, **kwargs):
        return None

    captureEvent = capture
