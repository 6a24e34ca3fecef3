"""
magpie.utils.serializer.base
~~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import datetime
import functools
import inspect
import io
import socket
import types
from collections.abc import Mapping
from uuid import UUID

from magpie.utils.encoding import force_text, to_unicode
from magpie.utils.serializer.manager import register

__all__ = ('BaseSerializer', 'get_type_name', 'describe_callable',
           'SHARED_SERIALIZERS')


def get_type_name(value):
    cls = type(value)
    module = getattr(cls, '__module__', None)
    name = getattr(cls, '__qualname__', cls.__name__)
    if not module or module == 'builtins':
        return name
    return '%s.%s' % (module, name)


def describe_callable(value):
    try:
        signature = inspect.signature(value)
    except (TypeError, ValueError):
        return '{unserializable callable, reflection error}'

    name = getattr(value, '__name__', None)
    if name == '<lambda>':
        prefix = 'Lambda '
    else:
        prefix = 'Callable '
        name = getattr(value, '__qualname__', None) or name or type(value).__name__
        module = getattr(value, '__module__', None)
        if module and module != 'builtins':
            name = '%s.%s' % (module, name)

    params = []
    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            params.append('*' + param.name)
        elif param.kind == param.VAR_KEYWORD:
            params.append('**' + param.name)
        elif param.default is not param.empty:
            params.append('[%s]' % param.name)
        else:
            params.append(param.name)

    return '%s%s [%s]' % (prefix, name, '; '.join(params))


class BaseSerializer(object):
    types = ()
    composite = False

    def __init__(self, manager):
        self.manager = manager

    def can(self, value):
        """
        Given ``value``, return a boolean describing whether this
        serializer can operate on the given type
        """
        return isinstance(value, self.types)

    def serialize(self, value, **kwargs):
        """
        Given ``value``, coerce into a JSON-safe type.
        """
        return value

    def describe(self, value):
        """
        Describes ``value`` without looking at its contents. Used once the
        maximum depth is reached or a cycle is detected.
        """
        return 'Object %s' % (get_type_name(value),)

    def recurse(self, value, max_depth=3, _depth=0, **kwargs):
        """
        Given ``value``, recurse (using the parent serializer) to handle
        coercing of newly defined values.
        """
        return self.manager.transform(
            value, max_depth=max_depth, _depth=_depth + 1, **kwargs)


class NoneSerializer(BaseSerializer):
    types = (type(None),)


class BooleanSerializer(BaseSerializer):
    types = (bool,)

    def serialize(self, value, **kwargs):
        return bool(value)


class IntegerSerializer(BaseSerializer):
    types = (int,)

    def serialize(self, value, **kwargs):
        return int(value)


class FloatSerializer(BaseSerializer):
    types = (float,)

    def serialize(self, value, **kwargs):
        return float(value)


class TextSerializer(BaseSerializer):
    types = (str,)

    def serialize(self, value, **kwargs):
        return self.manager.clip(str(value))


class BytesSerializer(BaseSerializer):
    types = (bytes, bytearray)

    def serialize(self, value, **kwargs):
        return self.manager.clip(force_text(value, self.manager.mb_detect_order))


class UUIDSerializer(BaseSerializer):
    types = (UUID,)

    def serialize(self, value, **kwargs):
        return str(value)


class DateTimeSerializer(BaseSerializer):
    types = (datetime.date, datetime.time)

    def serialize(self, value, **kwargs):
        return value.isoformat()


class DictSerializer(BaseSerializer):
    types = (Mapping,)
    composite = True

    def make_key(self, key):
        if isinstance(key, str):
            return key
        if isinstance(key, (bytes, bytearray)):
            return force_text(key, self.manager.mb_detect_order)
        return to_unicode(key)

    def describe(self, value):
        return 'Array of length %d' % (len(value),)

    def serialize(self, value, **kwargs):
        return dict(
            (self.make_key(k), self.recurse(v, **kwargs))
            for k, v in value.items()
        )


class IterableSerializer(BaseSerializer):
    types = (tuple, list, set, frozenset)
    composite = True

    def describe(self, value):
        return 'Array of length %d' % (len(value),)

    def serialize(self, value, **kwargs):
        if isinstance(value, (set, frozenset)):
            # sets have no order of their own
            value = sorted(value, key=repr)
        return [self.recurse(o, **kwargs) for o in value]


class ResourceSerializer(BaseSerializer):
    types = (io.IOBase, socket.socket)

    def serialize(self, value, **kwargs):
        if isinstance(value, socket.socket):
            return 'Resource socket'
        return 'Resource stream'


class CallableSerializer(BaseSerializer):
    def can(self, value):
        return inspect.isroutine(value) or isinstance(value, functools.partial)

    def serialize(self, value, **kwargs):
        return describe_callable(value)


class ObjectSerializer(BaseSerializer):
    composite = True

    def can(self, value):
        return True

    def serialize(self, value, **kwargs):
        walk = self.manager.serialize_all_objects or \
            isinstance(value, types.SimpleNamespace)
        if not walk or not hasattr(value, '__dict__'):
            return self.describe(value)
        return dict(
            (to_unicode(k), self.recurse(v, **kwargs))
            for k, v in vars(value).items()
        )


# handlers used by every flavor, in lookup order
SHARED_SERIALIZERS = (
    TextSerializer,
    BytesSerializer,
    UUIDSerializer,
    DateTimeSerializer,
    DictSerializer,
    IterableSerializer,
    ResourceSerializer,
    CallableSerializer,
    ObjectSerializer,
)

register(NoneSerializer)
register(BooleanSerializer)
register(IntegerSerializer)
register(FloatSerializer)
for serializer in SHARED_SERIALIZERS:
    register(serializer)
