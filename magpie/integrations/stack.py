"""
magpie.integrations.stack
~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import threading

from magpie.events import Event
from magpie.exceptions import (
    InvalidArgumentError, InvalidStageResultError, StackLockedError)

__all__ = ('MiddlewareStack',)


class MiddlewareStack(object):
    """
    An ordered chain of stages which enrich, sanitize or veto an event
    before it reaches ``handler``.

    A stage is any callable with the signature
    ``stage(event, next, request=None, exception=None, payload=None)``.
    It either returns ``next(event, request, exception, payload)`` to hand
    the event over to the following stage, or returns on its own to stop
    the chain. Stages with a higher priority run first, stages sharing a
    priority run in the order they were added.

    >>> stack = MiddlewareStack(lambda event, *args: event)
    >>> stack.add_middleware(my_stage, priority=10)
    True
    >>> stack.execute_stack(Event.create_event())
    <Event: ...>
    """

    def __init__(self, handler):
        if not callable(handler):
            raise InvalidArgumentError(
                'The stack handler must be callable, got %r.' % (handler,))
        self.handler = handler
        self._stages = []
        self._lock = threading.Lock()
        self._local = threading.local()

    @property
    def is_executing(self):
        return getattr(self._local, 'depth', 0) > 0

    def _check_unlocked(self):
        if self.is_executing:
            raise StackLockedError(
                'Middlewares cannot be added or removed while the stack is '
                'being executed.')

    def add_middleware(self, stage, priority=0):
        """
        Registers ``stage``. Returns ``False`` if it was already registered.
        """
        self._check_unlocked()
        if not callable(stage):
            raise InvalidArgumentError(
                'The middleware must be callable, got %r.' % (stage,))
        with self._lock:
            for registered, _ in self._stages:
                if registered is stage:
                    return False
            self._stages.append((stage, priority))
        return True

    def remove_middleware(self, stage):
        self._check_unlocked()
        with self._lock:
            for index, (registered, _) in enumerate(self._stages):
                if registered is stage:
                    del self._stages[index]
                    return True
        return False

    def get_middlewares(self):
        """
        Returns the registered stages in the order they are executed.
        """
        with self._lock:
            snapshot = list(self._stages)
        snapshot.sort(key=lambda item: -item[1])
        return [stage for stage, _ in snapshot]

    def __contains__(self, stage):
        with self._lock:
            return any(registered is stage for registered, _ in self._stages)

    def __len__(self):
        with self._lock:
            return len(self._stages)

    def execute_stack(self, event, request=None, exception=None, payload=None):
        stages = self.get_middlewares()
        handler = self.handler

        def dispatch(index, event, request, exception, payload):
            if index < len(stages):
                stage = stages[index]

                def next(event, request=None, exception=None, payload=None):
                    return dispatch(index + 1, event, request, exception, payload)

                result = stage(event, next, request, exception, payload)
            else:
                stage = handler
                result = handler(event, request, exception, payload)

            if result is not None and not isinstance(result, Event):
                raise InvalidStageResultError(stage, result)
            return result

        # nested executions from within a stage keep the stack locked
        self._local.depth = getattr(self._local, 'depth', 0) + 1
        try:
            return dispatch(0, event, request, exception, payload)
        finally:
            self._local.depth -= 1
