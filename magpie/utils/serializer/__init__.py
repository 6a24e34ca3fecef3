"""
magpie.utils.serializer
~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from magpie.utils.serializer.manager import *  # NOQA
from magpie.utils.serializer.base import *  # NOQA
from magpie.utils.serializer.representation import *  # NOQA
