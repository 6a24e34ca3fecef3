"""
magpie.integrations.message
~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from collections.abc import Mapping

from magpie.conf import defaults
from magpie.integrations.base import Integration
from magpie.utils.encoding import to_unicode

__all__ = ('MessageIntegration', 'format_message')


def format_message(message, params):
    """
    Interpolates ``params`` into ``message`` with ``%``, falling back to the
    raw message when they do not fit.

    >>> format_message('Test %s', ('foo',))
    'Test foo'
    """
    if not params:
        return message
    if not isinstance(params, Mapping):
        params = tuple(params)
    try:
        return message % params
    except (TypeError, ValueError, KeyError):
        return message


class MessageIntegration(Integration):
    """
    Fills the message of the event from ``payload['message']`` and
    ``payload['message_params']``.
    """

    max_length = defaults.MAX_LENGTH_MESSAGE

    def process(self, event, payload=None, **kwargs):
        message = payload.get('message')
        if message is None:
            return event

        message = to_unicode(message)
        params = payload.get('message_params') or ()
        if isinstance(params, Mapping):
            params = dict(params)
        elif isinstance(params, (str, bytes)):
            params = [params]
        else:
            params = list(params)

        event.message = message[:self.max_length]
        event.message_params = params
        event.message_formatted = to_unicode(
            format_message(message, params))[:self.max_length]
        return event
