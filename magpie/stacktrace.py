"""
magpie.stacktrace
~~~~~~~~~~~~~~~~~

Turns raw backtraces into :class:`Stacktrace` objects made of
:class:`Frame` objects, outermost frame first.

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from magpie.utils.serializer import ReprSerializer, Serializer
from magpie.utils.stacks import (
    get_backtrace, get_lines_from_file, iter_stack_frames,
    iter_traceback_frames)

__all__ = ('Frame', 'Stacktrace', 'StacktraceBuilder')

INTERNAL_FRAME_FILENAME = '[internal]'
ANONYMOUS_FRAME_FILENAME = '[Anonymous function]'

VENDOR_PATH_MARKERS = ('site-packages', 'dist-packages')


class Frame(object):
    """
    A single frame of a stacktrace.
    """

    def __init__(self, function_name, file, line, abs_path=None, module=None):
        self.function_name = function_name
        self.file = file
        self.line = line
        self.abs_path = abs_path
        self.module = module
        self.pre_context = None
        self.context_line = None
        self.post_context = None
        self.in_app = True
        self.vars = {}

    @property
    def is_internal(self):
        return self.file == INTERNAL_FRAME_FILENAME

    def to_dict(self):
        rv = {
            'filename': self.file,
            'lineno': self.line,
            'in_app': self.in_app,
        }
        if self.function_name is not None:
            rv['function'] = self.function_name
        if self.abs_path is not None:
            rv['abs_path'] = self.abs_path
        if self.module is not None:
            rv['module'] = self.module
        if self.pre_context is not None:
            rv['pre_context'] = list(self.pre_context)
        if self.context_line is not None:
            rv['context_line'] = self.context_line
        if self.post_context is not None:
            rv['post_context'] = list(self.post_context)
        if self.vars:
            rv['vars'] = dict(self.vars)
        return rv

    def __repr__(self):
        return '<Frame: %s:%s in %s>' % (self.file, self.line, self.function_name)


class Stacktrace(object):
    """
    An ordered list of frames, the outermost call first and the frame
    where the error happened last.
    """

    def __init__(self, frames=None):
        self.frames = list(frames or ())

    def get_frame(self, index):
        return self.frames[index]

    def add_frame(self, frame):
        self.frames.insert(0, frame)

    def remove_frame(self, index):
        if not isinstance(index, int) or not -len(self.frames) <= index < len(self.frames):
            raise IndexError('Invalid frame index to remove.')
        del self.frames[index]

    def to_dict(self):
        return {'frames': [f.to_dict() for f in self.frames]}

    def __len__(self):
        return len(self.frames)

    def __iter__(self):
        return iter(self.frames)


def _is_anonymous(function):
    if not function:
        return True
    return (function == '<lambda>' or '<locals>' in function or
            (function.startswith('<') and function.endswith('>')))


def _startswith_module(module, prefixes):
    for prefix in prefixes:
        if module == prefix or module.startswith(prefix + '.'):
            return True
    return False


class StacktraceBuilder(object):
    """
    Builds :class:`Stacktrace` objects.

    A raw backtrace is a list of mappings, innermost frame first, each with
    ``file``, ``line``, ``function`` and optionally ``vars``, ``module`` and
    ``loader``.
    """

    def __init__(self, options=None, serializer=None, repr_serializer=None,
                 reader=None):
        self.options = options
        if options is not None:
            kwargs = {
                'mb_detect_order': options.mb_detect_order,
                'string_max_length': options.string_max_length,
                'max_depth': options.max_depth,
            }
        else:
            kwargs = {}
        self.serializer = serializer or Serializer(**kwargs)
        self.repr_serializer = repr_serializer or ReprSerializer(**kwargs)
        self.reader = reader

    @property
    def context_lines(self):
        if self.options is None:
            return 5
        return self.options.context_lines

    def build_from_backtrace(self, backtrace, file=None, line=None):
        """
        Builds a stacktrace out of an innermost-first raw backtrace. When
        ``file`` is given, a frame for the place the event originated from is
        added last.
        """
        records = list(backtrace)
        if file is not None:
            records.insert(0, {'file': file, 'line': line})

        stacktrace = Stacktrace()
        for record in records:
            stacktrace.add_frame(self.build_frame(record))
        return stacktrace

    def from_traceback(self, tb):
        frames = get_backtrace(iter_traceback_frames(tb))
        frames.reverse()
        return self.build_from_backtrace(frames)

    def from_stack(self, frames=None):
        return self.build_from_backtrace(
            get_backtrace(iter_stack_frames(frames)))

    def build_frame(self, record):
        abs_path = record.get('file')
        function = record.get('function')
        module = record.get('module')

        if not abs_path:
            if _is_anonymous(function):
                filename = ANONYMOUS_FRAME_FILENAME
            else:
                filename = INTERNAL_FRAME_FILENAME
            frame = Frame(function, filename, 0, module=module)
            frame.in_app = False
            return frame

        line = record.get('line') or 0
        frame = Frame(function, self.strip_prefixes(abs_path), line,
                      abs_path=abs_path, module=module)

        if line and self.context_lines:
            pre_context, context_line, post_context = get_lines_from_file(
                abs_path, line, self.context_lines,
                loader=record.get('loader'), module_name=module,
                reader=self.reader)
            if context_line is not None:
                clip = self.serializer.clip
                frame.pre_context = [clip(l) for l in pre_context]
                frame.context_line = clip(context_line)
                frame.post_context = [clip(l) for l in post_context]

        frame.in_app = self.is_in_app(abs_path, module)

        f_vars = record.get('vars')
        if f_vars:
            f_vars = dict((str(k), v) for k, v in f_vars.items())
            frame.vars = self.repr_serializer.serialize(f_vars)
        return frame

    def strip_prefixes(self, path):
        prefixes = self.options.prefixes if self.options is not None else ()
        for prefix in prefixes:
            if prefix and path.startswith(prefix):
                return path[len(prefix):].lstrip('/\\') or path
        return path

    def is_in_app(self, path, module):
        module = module or ''
        if _startswith_module(module, ('magpie',)):
            return False

        if self.options is not None:
            include = self.options.in_app_include
            exclude = self.options.in_app_exclude
        else:
            include = exclude = ()

        if exclude and _startswith_module(module, exclude):
            return False
        if include:
            return _startswith_module(module, include)

        for marker in VENDOR_PATH_MARKERS:
            if marker in path:
                return False
        return True
