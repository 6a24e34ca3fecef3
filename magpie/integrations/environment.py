"""
magpie.integrations.environment
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import platform

from magpie.integrations.base import Integration

__all__ = ('EnvironmentIntegration',)


def get_runtime_context():
    return {
        'name': platform.python_implementation(),
        'version': platform.python_version(),
    }


def get_os_context():
    return {
        'name': platform.system(),
        'version': platform.release(),
        'build': platform.version(),
        'kernel_version': ' '.join(platform.uname()),
    }


class EnvironmentIntegration(Integration):
    """
    Describes the interpreter and the operating system. Fields which are
    already set on the event are left alone.
    """

    def process(self, event, **kwargs):
        for key, value in get_runtime_context().items():
            if not event.runtime_context.get(key):
                event.runtime_context[key] = value

        for key, value in get_os_context().items():
            if not event.server_os_context.get(key):
                event.server_os_context[key] = value
        return event
