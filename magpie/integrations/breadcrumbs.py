"""
magpie.integrations.breadcrumbs
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from magpie.integrations.base import Integration

__all__ = ('BreadcrumbIntegration',)


class BreadcrumbIntegration(Integration):
    def process(self, event, **kwargs):
        if self.client is None:
            return event
        recorder = self.client.breadcrumbs
        if not recorder.is_empty():
            event.breadcrumbs = recorder.fetch()
        return event
