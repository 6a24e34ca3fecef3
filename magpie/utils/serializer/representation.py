"""
magpie.utils.serializer.representation
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Serializes values as their printable representation. Used for the local
variables of stack frames.

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from magpie.utils.serializer.base import BaseSerializer, SHARED_SERIALIZERS
from magpie.utils.serializer.manager import SerializationManager, Serializer

__all__ = ('repr_manager', 'ReprSerializer')

repr_manager = SerializationManager()


class ReprSerializer(Serializer):
    """
    >>> ReprSerializer().serialize([None, True, 1.0, 2])
    ['null', 'true', '1.0', '2']
    """
    default_manager = repr_manager


class ReprNoneSerializer(BaseSerializer):
    types = (type(None),)

    def serialize(self, value, **kwargs):
        return 'null'


class ReprBooleanSerializer(BaseSerializer):
    types = (bool,)

    def serialize(self, value, **kwargs):
        return 'true' if value else 'false'


class ReprIntegerSerializer(BaseSerializer):
    types = (int,)

    def serialize(self, value, **kwargs):
        return '%d' % (value,)


class ReprFloatSerializer(BaseSerializer):
    types = (float,)

    def serialize(self, value, **kwargs):
        if value.is_integer():
            return '%d.0' % (value,)
        return repr(float(value))


repr_manager.register(ReprNoneSerializer)
repr_manager.register(ReprBooleanSerializer)
repr_manager.register(ReprIntegerSerializer)
repr_manager.register(ReprFloatSerializer)
for serializer in SHARED_SERIALIZERS:
    repr_manager.register(serializer)
