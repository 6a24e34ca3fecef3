"""
magpie.integrations.context
~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from magpie.integrations.base import Integration
from magpie.utils import merge_dicts
from magpie.utils.encoding import to_unicode

__all__ = ('ContextIntegration',)


class ContextIntegration(Integration):
    """
    Merges the client options, the context of the current thread and the
    capture payload into the event, in that order of precedence.
    """

    def process(self, event, payload=None, **kwargs):
        client = self.client
        context = client.context.get() if client is not None else {}
        options = self.options

        tags = merge_dicts(
            options.tags if options is not None else None,
            event.tags_context,
            context.get('tags'),
            payload.get('tags'),
        )
        event.tags_context = dict(
            (to_unicode(k), to_unicode(v)) for k, v in tags.items())

        event.user_context = merge_dicts(
            event.user_context, context.get('user'), payload.get('user'))
        event.extra_context = merge_dicts(
            event.extra_context, context.get('extra'), payload.get('extra'))

        fingerprint = payload.get('fingerprint')
        if fingerprint:
            event.fingerprint = [to_unicode(f) for f in fingerprint]
        return event
