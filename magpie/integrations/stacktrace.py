"""
magpie.integrations.stacktrace
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from magpie.integrations.base import Integration
from magpie.stacktrace import StacktraceBuilder
from magpie.utils.stacks import get_backtrace, iter_stack_frames

__all__ = ('StacktraceIntegration',)


def is_magpie_frame(record):
    module = record.get('module') or ''
    return module == 'magpie' or module.startswith('magpie.')


class StacktraceIntegration(Integration):
    """
    Attaches the stack of the capture site to events which carry neither
    an exception nor a stacktrace, when ``attach_stacktrace`` is enabled.
    """

    def __init__(self, client=None):
        super(StacktraceIntegration, self).__init__(client)
        if client is not None:
            self.builder = client.stacktrace_builder
        else:
            self.builder = StacktraceBuilder()

    def process(self, event, exception=None, payload=None, **kwargs):
        stacktrace = payload.get('stacktrace')
        if stacktrace is not None:
            event.stacktrace = stacktrace
            return event

        options = self.options
        if not (options and options.attach_stacktrace):
            return event
        if exception is not None or event.exceptions or event.stacktrace is not None:
            return event

        backtrace = get_backtrace(iter_stack_frames())
        while backtrace and is_magpie_frame(backtrace[0]):
            backtrace.pop(0)
        event.stacktrace = self.builder.build_from_backtrace(backtrace)
        return event
