"""
magpie.integrations.user
~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from magpie.integrations.base import Integration

__all__ = ('UserIntegration',)


class UserIntegration(Integration):
    """
    Identifies the user by the address the request came from. Only done
    when ``send_default_pii`` is enabled.
    """

    def process(self, event, request=None, **kwargs):
        if not request or not (self.options and self.options.send_default_pii):
            return event

        remote_addr = request.get('REMOTE_ADDR')
        if remote_addr and 'ip_address' not in event.user_context:
            event.user_context['ip_address'] = remote_addr
        return event
