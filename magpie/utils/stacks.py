"""
magpie.utils.stacks
~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import inspect
import linecache
import logging
import re

logger = logging.getLogger('magpie')

_coding_re = re.compile(r'coding[:=]\s*([-\w.]+)')

# compile(), exec(), doctest and the interactive console name their code
# objects ``<something>``
_generated_re = re.compile(r'^<[^>]+>$')


def is_generated_filename(filename):
    return bool(filename) and bool(_generated_re.match(filename))


class SourceReader(object):
    """
    Reads the source lines of a module.

    ``read_lines`` raises ``IOError`` (``OSError``) when the source is not
    available.
    """

    def read_lines(self, filename, loader=None, module_name=None):
        source = None
        if loader is not None and hasattr(loader, 'get_source'):
            try:
                source = loader.get_source(module_name)
            except ImportError:
                source = None
            if source is not None:
                return source.splitlines()

        if is_generated_filename(filename):
            lines = linecache.getlines(filename)
            if not lines:
                raise IOError('No source available for %s' % (filename,))
            return [line.rstrip('\r\n') for line in lines]

        with open(filename, 'rb') as f:
            source = f.read().splitlines()

        encoding = 'utf-8'
        for line in source[:2]:
            # File coding may be specified. Match pattern from PEP-263
            # (http://www.python.org/dev/peps/pep-0263/)
            match = _coding_re.search(line.decode('ascii', 'replace'))
            if match:
                encoding = match.group(1)
                break
        try:
            return [sline.decode(encoding, 'replace') for sline in source]
        except LookupError:
            return [sline.decode('utf-8', 'replace') for sline in source]


default_reader = SourceReader()


def get_lines_from_file(filename, lineno, context_lines, loader=None,
                        module_name=None, reader=None):
    """
    Returns context_lines before and after lineno from file.
    Returns (pre_context, context_line, post_context), or
    (None, None, None) when the source cannot be read.

    ``lineno`` is 1-based.
    """
    reader = reader or default_reader
    try:
        source = reader.read_lines(filename, loader=loader, module_name=module_name)
    except (OSError, IOError, UnicodeError) as e:
        logger.debug('Unable to read source of %s: %s', filename, e)
        return None, None, None

    lineno -= 1
    if lineno < 0 or lineno >= len(source):
        # the file may have changed since it was loaded into memory
        return None, None, None

    lower_bound = max(0, lineno - context_lines)
    upper_bound = min(lineno + 1 + context_lines, len(source))

    pre_context = [line.rstrip('\r\n') for line in source[lower_bound:lineno]]
    context_line = source[lineno].rstrip('\r\n')
    post_context = [line.rstrip('\r\n') for line in source[(lineno + 1):upper_bound]]

    return pre_context, context_line, post_context


def _getitem_from_frame(f_locals, key, default=None):
    """
    f_locals is not guaranteed to have .get(), but it will always
    support __getitem__. Even if it doesnt, we return ``default``.
    """
    try:
        return f_locals[key]
    except Exception:
        return default


def to_dict(dictish):
    """
    Given something that closely resembles a dictionary, we attempt
    to coerce it into a propery dictionary.
    """
    if hasattr(dictish, 'keys'):
        m = dictish.keys
    else:
        raise ValueError(dictish)

    return dict((k, dictish[k]) for k in m())


def iter_traceback_frames(tb):
    """
    Given a traceback object, it will iterate over all
    frames that do not contain the ``__traceback_hide__``
    local variable.

    Frames are yielded outermost first, as they are chained.
    """
    while tb:
        # support for __traceback_hide__ which is used by a few libraries
        # to hide internal frames.
        f_locals = getattr(tb.tb_frame, 'f_locals', {})
        if not _getitem_from_frame(f_locals, '__traceback_hide__'):
            yield tb.tb_frame, getattr(tb, 'tb_lineno', None)
        tb = tb.tb_next


def iter_stack_frames(frames=None):
    """
    Given an optional list of frames (defaults to current stack),
    iterates over all frames that do not contain the ``__traceback_hide__``
    local variable.

    Frames are yielded innermost first, as ``inspect.stack()`` returns them.
    """
    if not frames:
        frames = inspect.stack(0)[1:]

    for frame, lineno in ((f[0], f[2]) for f in frames):
        f_locals = getattr(frame, 'f_locals', {})
        if _getitem_from_frame(f_locals, '__traceback_hide__'):
            continue
        yield frame, lineno


def get_backtrace(frames):
    """
    Given ``(frame, lineno)`` pairs, returns the raw backtrace consumed by
    :class:`magpie.stacktrace.StacktraceBuilder`, one dict per frame, in the
    same order.
    """
    backtrace = []
    for frame_info in frames:
        if isinstance(frame_info, (list, tuple)):
            frame, lineno = frame_info
        else:
            frame = frame_info
            lineno = frame_info.f_lineno

        f_globals = getattr(frame, 'f_globals', {})
        f_code = getattr(frame, 'f_code', None)
        if f_code:
            abs_path = f_code.co_filename
            function = f_code.co_name
        else:
            abs_path = None
            function = None

        f_locals = getattr(frame, 'f_locals', None)
        if f_locals is not None and not isinstance(f_locals, dict):
            try:
                f_locals = to_dict(f_locals)
            except Exception:
                f_locals = None

        backtrace.append({
            'file': abs_path,
            'line': lineno,
            'function': function,
            'module': _getitem_from_frame(f_globals, '__name__'),
            'loader': _getitem_from_frame(f_globals, '__loader__'),
            'vars': f_locals,
        })
    return backtrace
