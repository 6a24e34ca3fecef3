"""
magpie.integrations.exceptions
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import logging

from magpie.events import ExceptionDataBag, ExceptionMechanism
from magpie.integrations.base import Integration
from magpie.stacktrace import StacktraceBuilder
from magpie.utils.serializer import Serializer

__all__ = ('ExceptionIntegration', 'iter_exception_chain')

logger = logging.getLogger('magpie')


def iter_exception_chain(exception):
    """
    Yields ``exception`` followed by its causes, most recent first.
    """
    seen = set()
    while exception is not None and id(exception) not in seen:
        seen.add(id(exception))
        yield exception
        if exception.__cause__ is not None:
            exception = exception.__cause__
        elif not exception.__suppress_context__:
            exception = exception.__context__
        else:
            exception = None


def get_exception_type_name(exception):
    cls = type(exception)
    module = cls.__module__
    if module in (None, 'builtins', '__builtin__', 'exceptions'):
        return cls.__qualname__
    return '%s.%s' % (module, cls.__qualname__)


def make_mechanism(value):
    if value is None:
        return ExceptionMechanism(ExceptionMechanism.TYPE_GENERIC, handled=True)
    if isinstance(value, ExceptionMechanism):
        return value
    return ExceptionMechanism(
        value.get('type', ExceptionMechanism.TYPE_GENERIC),
        handled=value.get('handled', True),
        data=value.get('data'))


class ExceptionIntegration(Integration):
    """
    Converts the captured exception and the exceptions it was raised from
    into :class:`magpie.events.ExceptionDataBag` objects, oldest first.
    """

    def __init__(self, client=None):
        super(ExceptionIntegration, self).__init__(client)
        if client is not None:
            self.serializer = client.serializer
            self.builder = client.stacktrace_builder
        else:
            self.serializer = Serializer()
            self.builder = StacktraceBuilder()

    def process(self, event, exception=None, payload=None, **kwargs):
        if exception is None:
            return event

        options = self.options
        if options is not None and options.is_excluded_exception(exception):
            logger.info(
                'Not capturing exception due to filters: %s',
                get_exception_type_name(exception))
            return None

        mechanism = make_mechanism(payload.get('mechanism'))

        bags = []
        for exc in iter_exception_chain(exception):
            if exc.__traceback__ is not None:
                stacktrace = self.builder.from_traceback(exc.__traceback__)
            else:
                stacktrace = None
            bags.append(ExceptionDataBag(
                type=get_exception_type_name(exc),
                value=self.serializer.serialize(str(exc)),
                stacktrace=stacktrace,
                mechanism=mechanism,
            ))
        bags.reverse()

        event.exceptions = bags
        return event
