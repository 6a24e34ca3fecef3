"""
magpie.utils.testutils
~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2013 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from unittest import TestCase as BaseTestCase

import magpie

from magpie.transport.spool import MemorySpool, SpoolTransport


class TestCase(BaseTestCase):
    pass


class InMemoryClient(magpie.Client):
    """
    A client which keeps the events it sends in ``events``.
    """

    def __init__(self, options=None, **kwargs):
        self.spool = MemorySpool()
        kwargs.setdefault('transport', SpoolTransport(self.spool))
        super(InMemoryClient, self).__init__(options, **kwargs)

    @property
    def events(self):
        return self.spool.events
