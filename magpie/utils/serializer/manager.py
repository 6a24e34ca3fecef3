"""
magpie.utils.serializer.manager
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""
import logging

from magpie.conf import defaults
from magpie.utils.encoding import to_unicode

__all__ = ('register', 'transform', 'manager', 'SerializationManager',
           'Serializer', 'CLIPPED_MARKER')

logger = logging.getLogger('magpie.errors.serializer')

CLIPPED_MARKER = ' {clipped}'


class SerializationManager(object):
    logger = logger

    def __init__(self):
        self.__registry = []

    @property
    def serializers(self):
        for serializer in self.__registry:
            yield serializer

    def register(self, serializer):
        if serializer not in self.__registry:
            self.__registry.append(serializer)
        return serializer


manager = SerializationManager()
register = manager.register


class Serializer(object):
    """
    Turns arbitrary values into primitives which are safe to put on the
    wire.

    Composite values nested deeper than ``max_depth`` and composite values
    which are already being serialized (cycles) are replaced by a short
    description of their shape.

    >>> Serializer().serialize([[[[1]]]])
    [[['Array of length 1']]]
    """
    logger = logger
    default_manager = manager

    def __init__(self, mb_detect_order=None,
                 string_max_length=defaults.MAX_LENGTH_STRING,
                 serialize_all_objects=False, max_depth=defaults.MAX_DEPTH,
                 manager=None):
        self.manager = manager or self.default_manager
        self.mb_detect_order = tuple(mb_detect_order or ())
        self.string_max_length = string_max_length
        self.serialize_all_objects = serialize_all_objects
        self.max_depth = max_depth
        self.serializers = []
        for serializer in self.manager.serializers:
            self.serializers.append(serializer(self))

    def serialize(self, value, max_depth=None):
        if max_depth is None:
            max_depth = self.max_depth
        return self.transform(value, max_depth=max_depth)

    def transform(self, value, max_depth=defaults.MAX_DEPTH, _depth=0,
                  _context=None):
        """
        Primary function which handles recursively transforming
        values via their serializers
        """
        if _context is None:
            _context = set()

        for serializer in self.serializers:
            if not serializer.can(value):
                continue

            if not serializer.composite:
                try:
                    return serializer.serialize(
                        value, max_depth=max_depth, _depth=_depth,
                        _context=_context)
                except Exception as e:
                    self.logger.exception(e)
                    return serializer.describe(value)

            objid = id(value)
            if _depth >= max_depth or objid in _context:
                return serializer.describe(value)
            _context.add(objid)
            try:
                return serializer.serialize(
                    value, max_depth=max_depth, _depth=_depth,
                    _context=_context)
            except Exception as e:
                self.logger.exception(e)
                return serializer.describe(value)
            finally:
                _context.discard(objid)

        # if all else fails, lets use the repr of the object
        try:
            return self.clip(repr(value))
        except Exception as e:
            self.logger.exception(e)
            return to_unicode(type(value))

    def clip(self, value):
        limit = self.string_max_length
        if limit and len(value) > limit:
            return value[:max(limit - len(CLIPPED_MARKER), 0)] + CLIPPED_MARKER
        return value


def transform(value, manager=manager, max_depth=defaults.MAX_DEPTH, **kwargs):
    serializer = Serializer(manager=manager, max_depth=max_depth, **kwargs)
    return serializer.serialize(value)
