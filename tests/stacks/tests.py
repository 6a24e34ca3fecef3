# -*- coding: utf-8 -*-

import linecache
import os
import sys
import tempfile

import mock

from magpie.utils.stacks import (
    SourceReader, get_backtrace, get_lines_from_file, is_generated_filename,
    iter_stack_frames, iter_traceback_frames)
from magpie.utils.testutils import TestCase


def write_source(content, mode='w', **kwargs):
    fd, path = tempfile.mkstemp(suffix='.py')
    with os.fdopen(fd, mode, **kwargs) as f:
        f.write(content)
    return path


def get_traceback(func):
    try:
        func()
    except Exception:
        return sys.exc_info()[2]


def raise_error():
    raise ValueError('boom')


def hidden_raise_error():
    __traceback_hide__ = True  # NOQA
    raise_error()


class GetLinesFromFileTest(TestCase):
    def setUp(self):
        self.path = write_source('\n'.join('line %d' % i for i in range(1, 11)) + '\n')

    def tearDown(self):
        os.unlink(self.path)

    def test_context(self):
        pre, line, post = get_lines_from_file(self.path, 5, 2)
        assert pre == ['line 3', 'line 4']
        assert line == 'line 5'
        assert post == ['line 6', 'line 7']

    def test_context_at_edges(self):
        pre, line, post = get_lines_from_file(self.path, 1, 3)
        assert pre == []
        assert line == 'line 1'
        assert post == ['line 2', 'line 3', 'line 4']

        pre, line, post = get_lines_from_file(self.path, 10, 3)
        assert pre == ['line 7', 'line 8', 'line 9']
        assert line == 'line 10'
        assert post == []

    def test_line_out_of_range(self):
        assert get_lines_from_file(self.path, 42, 2) == (None, None, None)
        assert get_lines_from_file(self.path, 0, 2) == (None, None, None)

    def test_missing_file(self):
        assert get_lines_from_file('/does/not/exist.py', 1, 2) == (None, None, None)

    def test_coding_cookie(self):
        path = write_source(
            '# -*- coding: latin-1 -*-\nvalue = "é"\n'.encode('latin-1'), mode='wb')
        try:
            pre, line, post = get_lines_from_file(path, 2, 1)
        finally:
            os.unlink(path)
        assert line == 'value = "é"'

    def test_strips_line_endings(self):
        path = write_source(b'a = 1\r\nb = 2\r\nc = 3\r\n', mode='wb')
        try:
            pre, line, post = get_lines_from_file(path, 2, 1)
        finally:
            os.unlink(path)
        assert pre == ['a = 1']
        assert line == 'b = 2'
        assert post == ['c = 3']

    def test_loader_first(self):
        loader = mock.Mock()
        loader.get_source.return_value = 'foo\nbar\nbaz'
        pre, line, post = get_lines_from_file(
            '/does/not/exist.py', 2, 1, loader=loader, module_name='mod')
        loader.get_source.assert_called_once_with('mod')
        assert (pre, line, post) == (['foo'], 'bar', ['baz'])

    def test_generated_filename_uses_linecache(self):
        name = '<magpie-generated>'
        linecache.cache[name] = (9, None, ['x = 1\n', 'y = 2\n'], name)
        try:
            pre, line, post = get_lines_from_file(name, 2, 1)
        finally:
            del linecache.cache[name]
        assert pre == ['x = 1']
        assert line == 'y = 2'

    def test_generated_filename_never_read_from_disk(self):
        reader = SourceReader()
        with mock.patch('magpie.utils.stacks.open', create=True) as m:
            result = get_lines_from_file('<stdin>', 1, 1, reader=reader)
        assert result == (None, None, None)
        assert not m.called

    def test_custom_reader(self):
        reader = mock.Mock()
        reader.read_lines.return_value = ['one', 'two']
        assert get_lines_from_file('foo.py', 1, 1, reader=reader) == ([], 'one', ['two'])

    def test_reader_failure_is_soft(self):
        reader = mock.Mock()
        reader.read_lines.side_effect = IOError('nope')
        assert get_lines_from_file('foo.py', 1, 1, reader=reader) == (None, None, None)


class GeneratedFilenameTest(TestCase):
    def test_patterns(self):
        assert is_generated_filename('<string>')
        assert is_generated_filename('<stdin>')
        assert is_generated_filename('<doctest foo[0]>')
        assert not is_generated_filename('foo.py')
        assert not is_generated_filename('<foo.py')
        assert not is_generated_filename(None)


class IterFramesTest(TestCase):
    def test_traceback_frames_outermost_first(self):
        tb = get_traceback(raise_error)
        names = [f.f_code.co_name for f, _ in iter_traceback_frames(tb)]
        assert names == ['get_traceback', 'raise_error']

    def test_traceback_hide(self):
        tb = get_traceback(hidden_raise_error)
        names = [f.f_code.co_name for f, _ in iter_traceback_frames(tb)]
        assert 'hidden_raise_error' not in names
        assert names[-1] == 'raise_error'

    def test_stack_frames_innermost_first(self):
        def inner():
            return list(iter_stack_frames())

        frames = inner()
        assert frames[0][0].f_code.co_name == 'inner'
        assert frames[1][0].f_code.co_name == 'test_stack_frames_innermost_first'


class GetBacktraceTest(TestCase):
    def test_records(self):
        tb = get_traceback(raise_error)
        backtrace = get_backtrace(iter_traceback_frames(tb))
        assert len(backtrace) == 2
        record = backtrace[-1]
        assert record['function'] == 'raise_error'
        assert record['file'] == __file__
        assert record['module'] == __name__
        assert record['line'] == raise_error.__code__.co_firstlineno + 1
        assert record['vars'] == {}

    def test_locals(self):
        def func():
            foo = 'bar'  # NOQA
            raise ValueError()

        backtrace = get_backtrace(iter_traceback_frames(get_traceback(func)))
        assert backtrace[-1]['vars'] == {'foo': 'bar'}
