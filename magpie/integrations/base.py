"""
magpie.integrations.base
~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

__all__ = ('Integration',)


class Integration(object):
    """
    A stage of the middleware stack.

    Subclasses implement ``process``, which enriches ``event`` in place and
    returns it, or returns ``None`` to drop it.
    """

    priority = 0

    def __init__(self, client=None):
        self.client = client

    @property
    def options(self):
        if self.client is None:
            return None
        return self.client.options

    def __call__(self, event, next, request=None, exception=None, payload=None):
        event = self.process(event, request=request, exception=exception,
                             payload=payload or {})
        if event is None:
            return None
        return next(event, request, exception, payload)

    def process(self, event, request=None, exception=None, payload=None):
        return event

    def __repr__(self):
        return '<%s>' % (type(self).__name__,)
