"""
magpie
~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

__all__ = ('VERSION', 'Client', 'Breadcrumb', 'Event', 'Severity')

VERSION = '1.0.0'

from magpie.base import *  # NOQA
from magpie.breadcrumbs import Breadcrumb  # NOQA
from magpie.events import Event  # NOQA
from magpie.severity import Severity  # NOQA
