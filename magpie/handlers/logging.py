"""
magpie.handlers.logging
~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import logging
import sys
import traceback

from magpie.base import Client
from magpie.breadcrumbs import Breadcrumb
from magpie.utils.encoding import to_unicode

__all__ = ('MagpieHandler', 'BreadcrumbHandler')

RESERVED = frozenset((
    'stack', 'name', 'module', 'funcName', 'args', 'msg', 'levelno',
    'exc_text', 'exc_info', 'data', 'created', 'levelname', 'msecs',
    'relativeCreated', 'tags', 'message', 'pathname', 'filename', 'lineno',
    'thread', 'threadName', 'process', 'processName', 'stack_info',
    'taskName',
))


def is_magpie_record(record):
    return record.name == 'magpie' or record.name.startswith('magpie.')


def check_client(handler, client):
    if not isinstance(client, Client):
        raise ValueError(
            'The first argument to %s must be a Client instance, got %r instead.' % (
                handler.__class__.__name__,
                client,
            ))
    return client


class MagpieHandler(logging.Handler, object):
    """
    Captures log records as events.

    >>> logging.getLogger().addHandler(MagpieHandler(client, level=logging.ERROR))
    """

    def __init__(self, client, level=logging.NOTSET):
        self.client = check_client(self, client)
        logging.Handler.__init__(self, level=level)

    def emit(self, record):
        try:
            # Beware to python3 bug (see #10805) if exc_info is (None, None, None)
            self.format(record)

            # Avoid typical config issues by overriding loggers behavior
            if is_magpie_record(record):
                print(to_unicode(record.message), file=sys.stderr)
                return

            return self._emit(record)
        except Exception:
            print("Top level magpie exception caught - failed creating log record",
                  file=sys.stderr)
            print(to_unicode(record.msg), file=sys.stderr)
            print(to_unicode(traceback.format_exc()), file=sys.stderr)

    def _emit(self, record):
        extra = getattr(record, 'data', None)
        if not isinstance(extra, dict):
            if extra:
                extra = {'data': extra}
            else:
                extra = {}

        for k, v in vars(record).items():
            if k in RESERVED:
                continue
            if k.startswith('_'):
                continue
            extra[k] = v

        payload = {
            'level': record.levelno,
            'logger': record.name,
            'extra': extra,
        }
        if getattr(record, 'tags', None):
            payload['tags'] = record.tags
        if getattr(record, 'stack', None) is True:
            payload['stacktrace'] = self.client.stacktrace_builder.from_stack()

        # If there's no exception being processed, exc_info may be a 3-tuple of None
        # http://docs.python.org/library/sys.html#sys.exc_info
        if record.exc_info and all(record.exc_info):
            payload['message'] = to_unicode(record.msg)
            payload['message_params'] = record.args
            return self.client.captureException(record.exc_info, **payload)

        return self.client.captureMessage(
            to_unicode(record.msg), record.args or (), **payload)


class BreadcrumbHandler(logging.Handler, object):
    """
    Records every log record as a breadcrumb.
    """

    def __init__(self, client, level=logging.NOTSET):
        self.client = check_client(self, client)
        logging.Handler.__init__(self, level=level)

    def emit(self, record):
        try:
            self.format(record)
            if is_magpie_record(record):
                return

            if record.levelno >= logging.ERROR:
                crumb_type = Breadcrumb.TYPE_ERROR
            else:
                crumb_type = Breadcrumb.TYPE_DEFAULT

            self.client.leave_breadcrumb(Breadcrumb(
                self.client.translate_severity(record.levelno),
                crumb_type,
                record.name,
                message=record.message,
                timestamp=record.created,
            ))
        except Exception:
            self.handleError(record)
