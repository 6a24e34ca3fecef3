"""
magpie.integrations.modules
~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from magpie.integrations.base import Integration
from magpie.utils import get_installed_modules

__all__ = ('ModulesIntegration',)


class ModulesIntegration(Integration):
    def process(self, event, **kwargs):
        event.modules = get_installed_modules()
        return event
