# -*- coding: utf-8 -*-

import datetime
import functools
import io
import logging
import socket
import types
import uuid

import mock

from magpie.utils.encoding import WESTERN_DETECT_ORDER
from magpie.utils.serializer import (
    BaseSerializer, ReprSerializer, SerializationManager, Serializer,
    transform)
from magpie.utils.serializer.base import describe_callable, get_type_name
from magpie.utils.testutils import TestCase


class Point(object):
    def __init__(self, x, y):
        self.x = x
        self.y = y


def sample_function(a, b=1, *args, **kwargs):
    pass


class BrokenSerializer(BaseSerializer):
    types = (Point,)

    def serialize(self, value, **kwargs):
        raise ValueError('broken')


class SerializerTest(TestCase):
    def setUp(self):
        self.serializer = Serializer()

    def test_primitives(self):
        assert self.serializer.serialize(None) is None
        assert self.serializer.serialize(True) is True
        assert self.serializer.serialize(1) == 1
        assert self.serializer.serialize(1.5) == 1.5
        assert self.serializer.serialize('foo') == 'foo'

    def test_bytes(self):
        assert self.serializer.serialize(b'foo') == 'foo'
        assert self.serializer.serialize('äöü'.encode('utf-8')) == 'äöü'

    def test_bytes_fallback_to_replacement(self):
        result = self.serializer.serialize(b'\xff\xfe')
        assert result == '��'

    def test_bytes_detect_order(self):
        serializer = Serializer(mb_detect_order=WESTERN_DETECT_ORDER)
        assert serializer.serialize('é'.encode('utf-8')) == 'é'
        latin = Serializer(mb_detect_order=('latin-1',))
        assert latin.serialize(b'\xe9') == 'é'

    def test_uuid(self):
        value = uuid.UUID('12345678123456781234567812345678')
        assert self.serializer.serialize(value) == '12345678-1234-5678-1234-567812345678'

    def test_dates(self):
        value = datetime.datetime(2017, 7, 14, 2, 40)
        assert self.serializer.serialize(value) == '2017-07-14T02:40:00'
        assert self.serializer.serialize(value.date()) == '2017-07-14'

    def test_dict_keys_become_text(self):
        result = self.serializer.serialize({1: 'a', b'b': 'c', ('x',): 'y'})
        assert result == {'1': 'a', 'b': 'c', "('x',)": 'y'}

    def test_sequences_become_lists(self):
        assert self.serializer.serialize((1, 2)) == [1, 2]
        assert self.serializer.serialize([1, [2]]) == [1, [2]]

    def test_sets_are_sorted(self):
        assert self.serializer.serialize(set([3, 1, 2])) == [1, 2, 3]
        assert self.serializer.serialize(frozenset(['b', 'a'])) == ['a', 'b']

    def test_max_depth(self):
        assert self.serializer.serialize([[[[1]]]]) == [[['Array of length 1']]]

    def test_max_depth_dict(self):
        result = self.serializer.serialize({'a': {'b': {'c': {'d': 1, 'e': 2}}}})
        assert result == {'a': {'b': {'c': 'Array of length 2'}}}

    def test_max_depth_argument(self):
        assert self.serializer.serialize([[1]], max_depth=1) == ['Array of length 1']
        assert Serializer(max_depth=1).serialize([[1]]) == ['Array of length 1']

    def test_clips_long_strings(self):
        result = self.serializer.serialize('x' * 2000)
        assert len(result) == 1024
        assert result.endswith(' {clipped}')
        assert result[:1014] == 'x' * 1014

    def test_does_not_clip_at_limit(self):
        value = 'x' * 1024
        assert self.serializer.serialize(value) == value

    def test_custom_string_limit(self):
        serializer = Serializer(string_max_length=20)
        result = serializer.serialize('y' * 30)
        assert result == 'y' * 10 + ' {clipped}'

    def test_cycle_in_list(self):
        value = [1]
        value.append(value)
        result = self.serializer.serialize(value)
        assert result == [1, 'Array of length 2']

    def test_cycle_in_dict(self):
        value = {'a': 1}
        value['self'] = value
        result = self.serializer.serialize(value)
        assert result == {'a': 1, 'self': 'Array of length 2'}

    def test_shared_reference_is_not_a_cycle(self):
        shared = [1]
        assert self.serializer.serialize([shared, shared]) == [[1], [1]]

    def test_objects_are_described(self):
        result = self.serializer.serialize(Point(1, 2))
        assert result == 'Object tests.serializer.tests.Point'

    def test_builtin_objects_use_bare_name(self):
        assert self.serializer.serialize(object()) == 'Object object'

    def test_serialize_all_objects(self):
        serializer = Serializer(serialize_all_objects=True)
        assert serializer.serialize(Point(1, 2)) == {'x': 1, 'y': 2}

    def test_simple_namespace_is_walked(self):
        value = types.SimpleNamespace(a=1, b='c')
        assert self.serializer.serialize(value) == {'a': 1, 'b': 'c'}

    def test_object_cycle(self):
        serializer = Serializer(serialize_all_objects=True)
        point = Point(1, 2)
        point.y = point
        assert serializer.serialize(point) == {
            'x': 1, 'y': 'Object tests.serializer.tests.Point'}

    def test_streams(self):
        assert self.serializer.serialize(io.BytesIO(b'')) == 'Resource stream'

    def test_sockets(self):
        sock = socket.socket()
        try:
            assert self.serializer.serialize(sock) == 'Resource socket'
        finally:
            sock.close()

    def test_callables(self):
        result = self.serializer.serialize(sample_function)
        assert result == ('Callable tests.serializer.tests.sample_function '
                          '[a; [b]; *args; **kwargs]')

    def test_lambda(self):
        assert self.serializer.serialize(lambda x, y=1: x) == 'Lambda <lambda> [x; [y]]'

    def test_partial(self):
        result = self.serializer.serialize(functools.partial(sample_function, 1))
        assert result.startswith('Callable ')
        assert result.endswith('[[b]; *args; **kwargs]')

    def test_failing_handler_degrades(self):
        manager = SerializationManager()
        manager.register(BrokenSerializer)
        serializer = Serializer(manager=manager)
        with mock.patch.object(Serializer.logger, 'exception') as log:
            result = serializer.serialize(Point(1, 2))
        assert result == 'Object tests.serializer.tests.Point'
        assert log.called

    def test_unknown_value_falls_back_to_repr(self):
        serializer = Serializer(manager=SerializationManager())
        assert serializer.serialize(1) == '1'

    def test_logger_name(self):
        assert Serializer.logger.name == 'magpie.errors.serializer'
        assert isinstance(Serializer.logger, logging.Logger)

    def test_module_transform(self):
        assert transform({'a': (1, 2)}) == {'a': [1, 2]}


class ReprSerializerTest(TestCase):
    def setUp(self):
        self.serializer = ReprSerializer()

    def test_scalars(self):
        assert self.serializer.serialize(None) == 'null'
        assert self.serializer.serialize(True) == 'true'
        assert self.serializer.serialize(False) == 'false'
        assert self.serializer.serialize(42) == '42'

    def test_floats(self):
        assert self.serializer.serialize(1.0) == '1.0'
        assert self.serializer.serialize(-3.0) == '-3.0'
        assert self.serializer.serialize(1.5) == '1.5'

    def test_strings_are_kept(self):
        assert self.serializer.serialize('foo') == 'foo'

    def test_nested(self):
        result = self.serializer.serialize({'a': [None, 1, 2.0]})
        assert result == {'a': ['null', '1', '2.0']}

    def test_shares_the_structural_rules(self):
        assert self.serializer.serialize([[[[1]]]]) == [[['Array of length 1']]]
        assert self.serializer.serialize(Point(1, 2)) == 'Object tests.serializer.tests.Point'


class DescribeTest(TestCase):
    def test_get_type_name(self):
        assert get_type_name(1) == 'int'
        assert get_type_name(Point(1, 2)) == 'tests.serializer.tests.Point'

    def test_describe_builtin(self):
        assert describe_callable(len) == 'Callable len [obj]'

    def test_reflection_error(self):
        assert describe_callable(object()) == '{unserializable callable, reflection error}'
