"""
magpie.processors
~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import re

from collections.abc import Mapping

from magpie.exceptions import InvalidArgumentError
from magpie.integrations.base import Integration
from magpie.utils.encoding import to_unicode
from magpie.utils.serializer import Serializer


class Processor(Integration):
    """
    A stage which runs late in the stack and rewrites the data already
    collected on the event.
    """

    priority = -200

    def process(self, event, **kwargs):
        for bag in event.exceptions:
            if bag.stacktrace is not None:
                self.filter_stacktrace(bag.stacktrace)

        if event.stacktrace is not None:
            self.filter_stacktrace(event.stacktrace)

        if event.request:
            self.filter_http(event.request)

        if event.extra_context:
            event.extra_context = self.filter_extra(event.extra_context)

        if event.user_context:
            event.user_context = self.filter_user(event.user_context)

        if event.tags_context:
            event.tags_context = self.filter_tags(event.tags_context)

        if event.breadcrumbs:
            event.breadcrumbs = [
                self.filter_breadcrumb(crumb) for crumb in event.breadcrumbs]

        return event

    def filter_stacktrace(self, stacktrace):
        pass

    def filter_http(self, data):
        pass

    def filter_extra(self, data):
        return data

    def filter_user(self, data):
        return data

    def filter_tags(self, data):
        return data

    def filter_breadcrumb(self, crumb):
        return crumb


class RemovePostDataProcessor(Processor):
    """Removes HTTP post data."""

    def filter_http(self, data):
        data.pop('data', None)


class RemoveStackLocalsProcessor(Processor):
    """Removes local context variables from stacktraces."""

    def filter_stacktrace(self, stacktrace):
        for frame in stacktrace:
            frame.vars = {}


class RemoveStacktraceContextProcessor(Processor):
    """Removes the source lines surrounding each frame."""

    def filter_stacktrace(self, stacktrace):
        for frame in stacktrace:
            frame.pre_context = None
            frame.context_line = None
            frame.post_context = None


class SanitizeDataProcessor(Processor):
    """
    Asterisk out things that look like passwords, credit card numbers,
    and API keys anywhere in the event.
    """

    MASK = '*' * 8
    FIELDS_RE = re.compile(
        r'(authorization|password|passwd|secret|password_confirmation|'
        r'card_number|auth_pw|api_?key|access_token)', re.I)
    VALUES_RE = re.compile(r'^(?:\d[ -]*?){13,19}$')

    def __init__(self, client=None, fields_re=None, values_re=None):
        super(SanitizeDataProcessor, self).__init__(client)
        if isinstance(fields_re, str):
            fields_re = re.compile(fields_re, re.I)
        if isinstance(values_re, str):
            values_re = re.compile(values_re)
        self.fields_re = fields_re or self.FIELDS_RE
        self.values_re = values_re or self.VALUES_RE

    def sanitize(self, key, value):
        if value is None:
            return

        if isinstance(value, bytes):
            text = value.decode('utf-8', 'replace')
        elif isinstance(value, int) and not isinstance(value, bool):
            text = str(value)
        else:
            text = value

        if isinstance(text, str) and self.values_re.match(text):
            return self.MASK

        if not key:  # key can be a NoneType
            return value

        # Just in case we have bytes here, we want to make them into text
        # properly without failing so we can perform our check.
        if isinstance(key, bytes):
            key = key.decode('utf-8', 'replace')
        else:
            key = str(key)

        if self.fields_re.search(key):
            # store mask as a fixed length for security
            return self.MASK
        return value

    def sanitize_data(self, value, key=None, masked=False, _context=None):
        """
        Sanitizes ``value`` recursively. Every leaf found below a key which
        looks sensitive is masked.
        """
        if _context is None:
            _context = set()

        if not masked and key and self.fields_re.search(to_unicode(key)):
            masked = True

        if isinstance(value, (Mapping, list, tuple)):
            objid = id(value)
            if objid in _context:
                return value
            _context.add(objid)
            try:
                if isinstance(value, Mapping):
                    return dict(
                        (k, self.sanitize_data(v, k, masked, _context))
                        for k, v in value.items())
                return [self.sanitize_data(v, None, masked, _context)
                        for v in value]
            finally:
                _context.discard(objid)

        if masked and value is not None:
            return self.MASK
        return self.sanitize(key, value)

    def filter_stacktrace(self, stacktrace):
        for frame in stacktrace:
            if not frame.vars:
                continue
            frame.vars = self.sanitize_data(frame.vars)

    def filter_http(self, data):
        for n in ('data', 'cookies', 'headers', 'env', 'query_string'):
            if n not in data:
                continue

            if isinstance(data[n], str) and '=' in data[n]:
                # at this point we've assumed it's a standard HTTP query
                # or cookie
                if n == 'cookies':
                    delimiter = ';'
                else:
                    delimiter = '&'

                data[n] = self._sanitize_keyvals(data[n], delimiter)
            else:
                data[n] = self.sanitize_data(data[n])
                if n == 'headers' and isinstance(data[n].get('Cookie'), str):
                    data[n]['Cookie'] = self._sanitize_keyvals(
                        data[n]['Cookie'], ';'
                    )

    def filter_extra(self, data):
        return self.sanitize_data(data)

    def filter_user(self, data):
        return self.sanitize_data(data)

    def filter_tags(self, data):
        return self.sanitize_data(data)

    def filter_breadcrumb(self, crumb):
        if not crumb.metadata:
            return crumb
        return crumb._replace(metadata=self.sanitize_data(crumb.metadata))

    def _sanitize_keyvals(self, keyvals, delimiter):
        sanitized_keyvals = []
        for keyval in keyvals.split(delimiter):
            keyval = keyval.split('=')
            if len(keyval) == 2:
                sanitized_keyvals.append((keyval[0], self.sanitize(*keyval)))
            else:
                sanitized_keyvals.append(keyval)

        return delimiter.join('='.join(keyval) for keyval in sanitized_keyvals)


class SanitizeHttpHeadersProcessor(Processor):
    """
    Masks the request headers which carry credentials.
    """

    MASK = SanitizeDataProcessor.MASK
    DEFAULT_HEADERS = (
        'Authorization',
        'Proxy-Authorization',
        'X-Csrf-Token',
        'X-CSRFToken',
        'X-XSRF-TOKEN',
    )

    def __init__(self, client=None, headers=()):
        super(SanitizeHttpHeadersProcessor, self).__init__(client)
        self.headers = frozenset(
            h.lower() for h in self.DEFAULT_HEADERS + tuple(headers))

    def filter_http(self, data):
        headers = data.get('headers')
        if not isinstance(headers, dict):
            return
        for name in headers:
            if str(name).lower() in self.headers:
                headers[name] = self.MASK


class SanitizeCookiesProcessor(Processor):
    """
    Masks request cookies, either all of them, only the ones named in
    ``only``, or all but the ones named in ``exclude``. The raw ``Cookie``
    header is removed.
    """

    MASK = SanitizeDataProcessor.MASK

    def __init__(self, client=None, only=(), exclude=()):
        super(SanitizeCookiesProcessor, self).__init__(client)
        if only and exclude:
            raise InvalidArgumentError(
                'The "only" and "exclude" options cannot be used together.')
        self.only = frozenset(only)
        self.exclude = frozenset(exclude)

    def should_mask(self, name):
        if self.only:
            return name in self.only
        return name not in self.exclude

    def filter_http(self, data):
        cookies = data.get('cookies')
        if isinstance(cookies, dict):
            for name in cookies:
                if self.should_mask(name):
                    cookies[name] = self.MASK

        headers = data.get('headers')
        if isinstance(headers, dict):
            for name in list(headers):
                if str(name).lower() == 'cookie':
                    del headers[name]


class SerializeDataProcessor(Processor):
    """
    Bounds the free-form data of the event by running it through the
    serializer. It runs ahead of the sanitizers so they only see
    serialized values.
    """

    priority = -150

    def __init__(self, client=None, serializer=None):
        super(SerializeDataProcessor, self).__init__(client)
        if serializer is None:
            options = self.options
            if options is not None:
                serializer = Serializer(
                    mb_detect_order=options.mb_detect_order,
                    string_max_length=options.string_max_length,
                    serialize_all_objects=options.serialize_all_objects,
                    max_depth=options.max_depth)
            else:
                serializer = Serializer()
        self.serializer = serializer

    def serialize_fields(self, data):
        return dict(
            (to_unicode(k), self.serializer.serialize(v))
            for k, v in data.items())

    def process(self, event, **kwargs):
        if event.request:
            event.request = self.serialize_fields(event.request)
        if event.user_context:
            event.user_context = self.serialize_fields(event.user_context)
        if event.extra_context:
            event.extra_context = self.serialize_fields(event.extra_context)
        if event.tags_context:
            event.tags_context = dict(
                (to_unicode(k), to_unicode(v))
                for k, v in event.tags_context.items())
        if event.breadcrumbs:
            event.breadcrumbs = [
                crumb._replace(metadata=self.serialize_fields(crumb.metadata))
                if crumb.metadata else crumb
                for crumb in event.breadcrumbs]
        return event
