"""
magpie.conf
~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import logging

from magpie.conf import defaults
from magpie.exceptions import InvalidArgumentError
from magpie.utils.encoding import DEFAULT_DETECT_ORDER

__all__ = ('Options', 'setup_logging')

EXCLUDE_LOGGER_DEFAULTS = (
    'magpie',
    'gunicorn',
    'magpie.errors',
)


class Options(object):
    """
    The options understood by :class:`magpie.base.Client`.

    >>> options = Options(sample_rate=0.5, send_default_pii=True)
    >>> options.sample_rate
    0.5
    """

    OPTIONS = (
        'sample_rate',
        'attach_stacktrace',
        'context_lines',
        'max_request_body_size',
        'send_default_pii',
        'ignore_exceptions',
        'mb_detect_order',
        'max_breadcrumbs',
        'max_depth',
        'string_max_length',
        'serialize_all_objects',
        'release',
        'environment',
        'server_name',
        'tags',
        'logger',
        'in_app_include',
        'in_app_exclude',
        'prefixes',
        'default_integrations',
        'integrations',
        'processors',
        'before_send',
        'before_send_transaction',
        'before_send_check_in',
        'before_send_metrics',
        'sdk_identifier',
        'sdk_version',
    )

    def __init__(self, **options):
        unknown = set(options) - set(self.OPTIONS)
        if unknown:
            raise InvalidArgumentError(
                'The option(s) %s do not exist.' % ', '.join(sorted(unknown)))

        o = options

        self.sample_rate = o.get('sample_rate', defaults.SAMPLE_RATE)
        self.attach_stacktrace = bool(o.get('attach_stacktrace', False))
        self.context_lines = o.get('context_lines', defaults.CONTEXT_LINES)
        self.max_request_body_size = o.get(
            'max_request_body_size', defaults.MAX_REQUEST_BODY_SIZE)
        self.send_default_pii = bool(o.get('send_default_pii', False))
        self.ignore_exceptions = tuple(o.get('ignore_exceptions') or ())
        self.mb_detect_order = tuple(
            o.get('mb_detect_order') or DEFAULT_DETECT_ORDER)
        self.max_breadcrumbs = o.get('max_breadcrumbs', defaults.MAX_BREADCRUMBS)
        self.max_depth = o.get('max_depth', defaults.MAX_DEPTH)
        self.string_max_length = o.get(
            'string_max_length', defaults.MAX_LENGTH_STRING)
        self.serialize_all_objects = bool(o.get('serialize_all_objects', False))
        self.release = o.get('release')
        self.environment = o.get('environment')
        self.server_name = o.get('server_name') or defaults.NAME
        self.tags = dict(o.get('tags') or {})
        self.logger = o.get('logger') or defaults.LOGGER
        self.in_app_include = tuple(o.get('in_app_include') or ())
        self.in_app_exclude = tuple(o.get('in_app_exclude') or ())
        self.prefixes = tuple(o.get('prefixes') or ())
        self.default_integrations = bool(o.get('default_integrations', True))
        self.integrations = tuple(o.get('integrations') or ())
        self.processors = o.get('processors')
        if self.processors is None:
            self.processors = defaults.PROCESSORS
        self.before_send = o.get('before_send')
        self.before_send_transaction = o.get('before_send_transaction')
        self.before_send_check_in = o.get('before_send_check_in')
        self.before_send_metrics = o.get('before_send_metrics')
        self.sdk_identifier = o.get('sdk_identifier')
        self.sdk_version = o.get('sdk_version')

        for name in ('before_send', 'before_send_transaction',
                     'before_send_check_in', 'before_send_metrics'):
            hook = getattr(self, name)
            if hook is not None and not callable(hook):
                raise InvalidArgumentError(
                    'The %r option must be callable, got %r.' % (name, hook))

    @property
    def sample_rate(self):
        return self._sample_rate

    @sample_rate.setter
    def sample_rate(self, value):
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise InvalidArgumentError('The sample rate must be a number, got %r.' % (value,))
        if not 0 <= value <= 1:
            raise InvalidArgumentError(
                'The sample rate must be between 0 and 1, got %r.' % (value,))
        self._sample_rate = value

    @property
    def context_lines(self):
        return self._context_lines

    @context_lines.setter
    def context_lines(self, value):
        if not isinstance(value, int) or value < 0:
            raise InvalidArgumentError(
                'The number of context lines must be a non-negative integer, '
                'got %r.' % (value,))
        self._context_lines = value

    @property
    def max_request_body_size(self):
        return self._max_request_body_size

    @max_request_body_size.setter
    def max_request_body_size(self, value):
        if value not in defaults.REQUEST_BODY_SIZES:
            raise InvalidArgumentError(
                'The max request body size must be one of %s, got %r.' % (
                    ', '.join(sorted(defaults.REQUEST_BODY_SIZES)), value))
        self._max_request_body_size = value

    @property
    def max_breadcrumbs(self):
        return self._max_breadcrumbs

    @max_breadcrumbs.setter
    def max_breadcrumbs(self, value):
        if not isinstance(value, int) or value < 0:
            raise InvalidArgumentError(
                'The max breadcrumbs must be a non-negative integer, got %r.' % (value,))
        self._max_breadcrumbs = value

    @property
    def max_depth(self):
        return self._max_depth

    @max_depth.setter
    def max_depth(self, value):
        if value is None:
            value = defaults.MAX_DEPTH
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidArgumentError(
                'The max depth must be a non-negative integer, got %r.' % (value,))
        self._max_depth = value

    @property
    def string_max_length(self):
        return self._string_max_length

    @string_max_length.setter
    def string_max_length(self, value):
        if value is None:
            value = defaults.MAX_LENGTH_STRING
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            raise InvalidArgumentError(
                'The max string length must be a non-negative integer, '
                'got %r.' % (value,))
        self._string_max_length = value

    @property
    def max_request_body_bytes(self):
        return defaults.REQUEST_BODY_SIZES[self._max_request_body_size]

    def get_before_send(self, event_type):
        """
        Returns the ``before_send`` hook matching ``event_type``, if any.
        """
        return getattr(self, _BEFORE_SEND_HOOKS.get(event_type, 'before_send'))

    def is_excluded_exception(self, exception):
        """
        Tells whether ``exception`` is an instance of one of the ignored
        exception classes. Ignored classes can be given as class objects or
        as names, in which case the whole MRO of the exception is checked.
        """
        names = set()
        for cls in type(exception).__mro__:
            names.add(cls.__name__)
            names.add('%s.%s' % (cls.__module__, cls.__qualname__))

        for ignored in self.ignore_exceptions:
            if isinstance(ignored, str):
                if ignored in names:
                    return True
            elif isinstance(exception, ignored):
                return True
        return False


_BEFORE_SEND_HOOKS = {
    'default': 'before_send',
    'transaction': 'before_send_transaction',
    'check_in': 'before_send_check_in',
    'metrics': 'before_send_metrics',
}


def setup_logging(handler, exclude=EXCLUDE_LOGGER_DEFAULTS):
    """
    Configures logging to pipe to magpie.

    - ``exclude`` is a list of loggers that shouldn't go to magpie.

    >>> from magpie.handlers.logging import MagpieHandler
    >>> client = Client(...)
    >>> setup_logging(MagpieHandler(client))

    Returns a boolean based on if logging was configured or not.
    """
    logger = logging.getLogger()
    if handler.__class__ in map(type, logger.handlers):
        return False

    logger.addHandler(handler)

    # Add StreamHandler to magpie's default so you can catch missed exceptions
    for logger_name in exclude:
        logger = logging.getLogger(logger_name)
        logger.propagate = False
        logger.addHandler(logging.StreamHandler())

    return True
