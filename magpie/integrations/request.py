"""
magpie.integrations.request
~~~~~~~~~~~~~~~~~~~~~~~~~~~

Collects the HTTP request an event happened in from its WSGI environ.

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import json
import logging

from http.cookies import CookieError, SimpleCookie
from urllib.parse import parse_qsl

from magpie.integrations.base import Integration
from magpie.utils.encoding import force_text
from magpie.utils.wsgi import get_current_url, get_environ, get_headers

__all__ = ('RequestIntegration',)

logger = logging.getLogger('magpie')

FILTERED = '[Filtered]'

PII_HEADERS = frozenset(['authorization', 'cookie', 'set-cookie'])


class RequestIntegration(Integration):
    def process(self, event, request=None, **kwargs):
        if not request:
            return event

        options = self.options
        send_default_pii = bool(options and options.send_default_pii)

        data = {
            'url': get_current_url(request, strip_querystring=True),
            'method': request.get('REQUEST_METHOD'),
        }

        query_string = request.get('QUERY_STRING')
        if query_string:
            data['query_string'] = query_string

        headers = dict(get_headers(request))
        if not send_default_pii:
            for name in headers:
                if name.lower() in PII_HEADERS:
                    headers[name] = FILTERED
        if headers:
            data['headers'] = headers

        if send_default_pii:
            cookies = self.get_cookies(request)
            if cookies:
                data['cookies'] = cookies

            env = dict((k, v) for k, v in get_environ(request) if v)
        else:
            env = dict((k, v) for k, v in get_environ(request)
                       if v and k != 'REMOTE_ADDR')
        if env:
            data['env'] = env

        body = self.get_body(request)
        if body is not None:
            data['data'] = body

        event.request = data
        return event

    def get_cookies(self, environ):
        raw = environ.get('HTTP_COOKIE')
        if not raw:
            return {}
        cookie = SimpleCookie()
        try:
            cookie.load(raw)
        except CookieError as e:
            logger.debug('Unable to parse the request cookies: %s', e)
            return {}
        return dict((name, morsel.value) for name, morsel in cookie.items())

    def get_content_length(self, environ):
        try:
            return int(environ.get('CONTENT_LENGTH') or 0)
        except (TypeError, ValueError):
            return 0

    def get_body(self, environ):
        length = self.get_content_length(environ)
        if length <= 0:
            return None

        limit = self.options.max_request_body_bytes if self.options else 0
        if limit is not None and length > limit:
            return None

        stream = environ.get('wsgi.input')
        if stream is None:
            return None
        try:
            raw = stream.read(length)
        except (IOError, OSError) as e:
            logger.debug('Unable to read the request body: %s', e)
            return None

        text = force_text(raw)
        content_type = (environ.get('CONTENT_TYPE') or '').split(';')[0]
        content_type = content_type.strip().lower()

        if content_type == 'application/x-www-form-urlencoded':
            return dict(parse_qsl(text, keep_blank_values=True))
        if content_type == 'application/json' or content_type.endswith('+json'):
            try:
                return json.loads(text)
            except ValueError:
                return text
        return text
