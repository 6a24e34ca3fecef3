"""
magpie.transport
~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from magpie.transport.base import *  # NOQA
from magpie.transport.spool import *  # NOQA
from magpie.transport.threaded import *  # NOQA
