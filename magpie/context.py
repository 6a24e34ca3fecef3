"""
magpie.context
~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from collections.abc import Mapping
from threading import local

__all__ = ('Context', 'TransactionStack')


class Context(local, Mapping):
    """
    Stores the user, tags and extra context of the current thread until
    cleared.

    >>> context = Context()
    >>> context.merge({'tags': {'key': 'value'}})
    >>> try:
    >>>     return view_func(*args, **kwargs)
    >>> finally:
    >>>     context.clear()
    """

    def __init__(self):
        self.data = {}

    def __hash__(self):
        return id(self)

    def __eq__(self, other):
        return self is other

    def __ne__(self, other):
        return not self.__eq__(other)

    def __getitem__(self, key):
        return self.data[key]

    def __iter__(self):
        return iter(self.data)

    def __len__(self):
        return len(self.data)

    def __repr__(self):
        return '<%s: %s>' % (type(self).__name__, self.data)

    def merge(self, data):
        d = self.data
        for key, value in data.items():
            if key in ('user', 'tags', 'extra'):
                d.setdefault(key, {})
                for t_key, t_value in value.items():
                    d[key][t_key] = t_value
            else:
                d[key] = value

    def set(self, data):
        self.data = data

    def get(self):
        return self.data

    def clear(self):
        self.data = {}


class TransactionStack(local):
    """
    The names of the transactions the current thread entered so far, the
    innermost on top. Every thread starts from ``values``.
    """

    def __init__(self, values=None):
        self.stack = list(values or ())

    def __len__(self):
        return len(self.stack)

    def __iter__(self):
        return iter(self.stack)

    def __repr__(self):
        return '<%s: %r>' % (type(self).__name__, self.stack)

    def is_empty(self):
        return not self.stack

    def clear(self):
        self.stack = []

    def peek(self):
        try:
            return self.stack[-1]
        except IndexError:
            return None

    def push(self, *values):
        self.stack.extend(values)
        return len(self.stack)

    def pop(self):
        try:
            return self.stack.pop()
        except IndexError:
            return None
