# -*- coding: utf-8 -*-

import pytest

from magpie.breadcrumbs import Breadcrumb
from magpie.events import Event, ExceptionDataBag
from magpie.exceptions import InvalidArgumentError
from magpie.processors import (
    RemovePostDataProcessor, RemoveStackLocalsProcessor,
    RemoveStacktraceContextProcessor, SanitizeCookiesProcessor,
    SanitizeDataProcessor, SanitizeHttpHeadersProcessor, SerializeDataProcessor)
from magpie.stacktrace import Frame, Stacktrace
from magpie.utils.serializer import Serializer
from magpie.utils.testutils import TestCase

VARS = {
    'foo': 'bar',
    'password': 'hello',
    'the_secret': 'hello',
    'a_password_here': 'hello',
    'api_key': 'secret_key',
    'apiKey': 'secret_key',
    'access_token': 'oauth2 access token',
}


def get_http_data():
    """
    Returns a request dict shaped the way the request integration builds it
    """
    return {
        'url': 'http://example.com',
        'method': 'POST',
        'data': {
            'foo': 'bar',
            'password': 'hello',
            'the_secret': 'hello',
            'a_password_here': 'hello',
            'api_key': 'secret_key',
        },
        'query_string': 'foo=bar&password=hello&the_secret=hello'
                        '&a_password_here=hello&api_key=secret_key',
        'cookies': {
            'foo': 'bar',
            'password': 'hello',
            'the_secret': 'hello',
            'a_password_here': 'hello',
            'api_key': 'secret_key',
        },
        'headers': {
            'foo': 'bar',
            'password': 'hello',
            'the_secret': 'hello',
            'a_password_here': 'hello',
            'api_key': 'secret_key',
            'Cookie': 'foo=bar;password=hello;the_secret=hello',
        },
        'env': {
            'foo': 'bar',
            'password': 'hello',
            'the_secret': 'hello',
            'a_password_here': 'hello',
            'api_key': 'secret_key',
        },
    }


def get_stacktrace_event():
    frame = Frame('foo', 'foo.py', 1)
    frame.vars = dict(VARS)
    frame.pre_context = ['a']
    frame.context_line = 'b'
    frame.post_context = ['c']

    event = Event.create_event()
    event.exceptions = [ExceptionDataBag('ValueError', 'foo', Stacktrace([frame]))]
    return event, frame


class SanitizeDataProcessorTest(TestCase):
    def setUp(self):
        self.proc = SanitizeDataProcessor()

    def _check_vars_sanitized(self, vars):
        assert vars['foo'] == 'bar'
        for key in ('password', 'the_secret', 'a_password_here', 'api_key'):
            assert vars[key] == SanitizeDataProcessor.MASK

    def test_stacktrace(self):
        event, frame = get_stacktrace_event()
        self.proc.process(event)
        self._check_vars_sanitized(frame.vars)
        assert frame.vars['apiKey'] == SanitizeDataProcessor.MASK
        assert frame.vars['access_token'] == SanitizeDataProcessor.MASK

    def test_event_stacktrace(self):
        frame = Frame('foo', 'foo.py', 1)
        frame.vars = {'password': 'hello'}
        event = Event.create_event()
        event.stacktrace = Stacktrace([frame])
        self.proc.process(event)
        assert frame.vars == {'password': SanitizeDataProcessor.MASK}

    def test_http(self):
        event = Event.create_event()
        event.request = get_http_data()
        self.proc.process(event)

        http = event.request
        for n in ('data', 'cookies', 'headers', 'env'):
            self._check_vars_sanitized(http[n])

        assert http['query_string'] == (
            'foo=bar&password=%(m)s&the_secret=%(m)s'
            '&a_password_here=%(m)s&api_key=%(m)s' % {'m': SanitizeDataProcessor.MASK})
        assert http['headers']['Cookie'] == (
            'foo=bar;password=%(m)s;the_secret=%(m)s' % {'m': SanitizeDataProcessor.MASK})
        assert http['url'] == 'http://example.com'

    def test_querystring_as_string_with_partials(self):
        event = Event.create_event()
        event.request = {'query_string': 'foo=bar&password&baz=bar'}
        self.proc.process(event)
        assert event.request['query_string'] == 'foo=bar&password&baz=bar'

    def test_cookie_as_string(self):
        event = Event.create_event()
        event.request = {'cookies': 'foo=bar;password=hello;the_secret=hello'}
        self.proc.process(event)
        assert event.request['cookies'] == (
            'foo=bar;password=%(m)s;the_secret=%(m)s' % {'m': SanitizeDataProcessor.MASK})

    def test_extra(self):
        event = Event.create_event()
        event.extra_context = {'foo': 'bar', 'password': 'hello'}
        self.proc.process(event)
        assert event.extra_context == {
            'foo': 'bar', 'password': SanitizeDataProcessor.MASK}

    def test_masks_nested_values(self):
        result = self.proc.sanitize_data({
            'credentials': {'password': {'current': 'a', 'previous': ['b', 'c']}},
            'foo': ['bar', {'secret': 1}],
        })
        mask = SanitizeDataProcessor.MASK
        assert result == {
            'credentials': {'password': {'current': mask, 'previous': [mask, mask]}},
            'foo': ['bar', {'secret': mask}],
        }

    def test_sanitize_is_idempotent(self):
        once = self.proc.sanitize_data(dict(VARS))
        assert self.proc.sanitize_data(once) == once

    def test_sanitize_credit_card(self):
        assert self.proc.sanitize('foo', '4242424242424242') == SanitizeDataProcessor.MASK
        assert self.proc.sanitize('foo', '4242 4242 4242 4242') == SanitizeDataProcessor.MASK
        assert self.proc.sanitize('foo', '424242') == '424242'

    def test_sanitize_credit_card_bytes_and_int(self):
        assert self.proc.sanitize('foo', b'4111111111111111') == SanitizeDataProcessor.MASK
        assert self.proc.sanitize('foo', 4111111111111111) == SanitizeDataProcessor.MASK
        assert self.proc.sanitize('foo', 42) == 42
        assert self.proc.sanitize('foo', True) is True

    def test_user_and_tags(self):
        event = Event.create_event()
        event.user_context = {'id': 1, 'password': 'hello'}
        event.tags_context = {'foo': 'bar', 'api_key': 'abc'}
        self.proc.process(event)
        assert event.user_context == {'id': 1, 'password': SanitizeDataProcessor.MASK}
        assert event.tags_context == {'foo': 'bar', 'api_key': SanitizeDataProcessor.MASK}

    def test_breadcrumbs(self):
        crumb = Breadcrumb('info', 'default', 'auth', metadata={
            'api_key': 'abc', 'foo': 'bar'})
        bare = Breadcrumb('info', 'default', 'auth', message='Logged in')
        event = Event.create_event()
        event.breadcrumbs = [crumb, bare]
        self.proc.process(event)
        assert event.breadcrumbs[0].metadata == {
            'api_key': SanitizeDataProcessor.MASK, 'foo': 'bar'}
        assert event.breadcrumbs[0].category == 'auth'
        assert event.breadcrumbs[1] is bare
        assert crumb.metadata['api_key'] == 'abc'

    def test_sanitize_non_ascii(self):
        assert self.proc.sanitize('__repr__: жа', '42') == '42'
        assert self.proc.sanitize(b'password', 'hello') == SanitizeDataProcessor.MASK

    def test_sanitize_none(self):
        assert self.proc.sanitize('password', None) is None
        assert self.proc.sanitize(None, 'foo') == 'foo'

    def test_custom_patterns(self):
        proc = SanitizeDataProcessor(fields_re='^session', values_re=r'^sk_\w+$')
        assert proc.sanitize('session_id', 'abc') == SanitizeDataProcessor.MASK
        assert proc.sanitize('password', 'abc') == 'abc'
        assert proc.sanitize('foo', 'sk_live_123') == SanitizeDataProcessor.MASK

    def test_recursive_structure(self):
        data = {'foo': 'bar'}
        data['self'] = data
        result = self.proc.sanitize_data(data)
        assert result['foo'] == 'bar'
        assert result['self'] is data


class SanitizeHttpHeadersProcessorTest(TestCase):
    def test_default_headers(self):
        event = Event.create_event()
        event.request = {'headers': {
            'Authorization': 'Basic foo',
            'X-Csrf-Token': 'bar',
            'Accept': 'text/html',
        }}
        SanitizeHttpHeadersProcessor().process(event)
        assert event.request['headers'] == {
            'Authorization': SanitizeDataProcessor.MASK,
            'X-Csrf-Token': SanitizeDataProcessor.MASK,
            'Accept': 'text/html',
        }

    def test_custom_headers(self):
        event = Event.create_event()
        event.request = {'headers': {'X-Api-Token': 'foo', 'Accept': 'text/html'}}
        SanitizeHttpHeadersProcessor(headers=['x-api-token']).process(event)
        assert event.request['headers'] == {
            'X-Api-Token': SanitizeDataProcessor.MASK,
            'Accept': 'text/html',
        }


class SanitizeCookiesProcessorTest(TestCase):
    def get_event(self):
        event = Event.create_event()
        event.request = {
            'cookies': {'sessionid': 'abc', 'theme': 'dark'},
            'headers': {'Cookie': 'sessionid=abc; theme=dark', 'Accept': 'text/html'},
        }
        return event

    def test_masks_all(self):
        event = SanitizeCookiesProcessor().process(self.get_event())
        mask = SanitizeDataProcessor.MASK
        assert event.request['cookies'] == {'sessionid': mask, 'theme': mask}
        assert event.request['headers'] == {'Accept': 'text/html'}

    def test_only(self):
        event = SanitizeCookiesProcessor(only=['sessionid']).process(self.get_event())
        assert event.request['cookies'] == {
            'sessionid': SanitizeDataProcessor.MASK, 'theme': 'dark'}

    def test_exclude(self):
        event = SanitizeCookiesProcessor(exclude=['theme']).process(self.get_event())
        assert event.request['cookies'] == {
            'sessionid': SanitizeDataProcessor.MASK, 'theme': 'dark'}

    def test_only_and_exclude(self):
        with pytest.raises(InvalidArgumentError):
            SanitizeCookiesProcessor(only=['a'], exclude=['b'])


class RemovePostDataProcessorTest(TestCase):
    def test_does_remove_data(self):
        event = Event.create_event()
        event.request = {'data': 'foo', 'url': 'http://example.com'}
        RemovePostDataProcessor().process(event)
        assert event.request == {'url': 'http://example.com'}


class RemoveStackLocalsProcessorTest(TestCase):
    def test_does_remove_data(self):
        event, frame = get_stacktrace_event()
        RemoveStackLocalsProcessor().process(event)
        assert frame.vars == {}
        assert frame.context_line == 'b'


class RemoveStacktraceContextProcessorTest(TestCase):
    def test_does_remove_context(self):
        event, frame = get_stacktrace_event()
        RemoveStacktraceContextProcessor().process(event)
        assert frame.pre_context is None
        assert frame.context_line is None
        assert frame.post_context is None
        assert frame.vars['foo'] == 'bar'


class SerializeDataProcessorTest(TestCase):
    def test_serializes_free_form_data(self):
        event = Event.create_event()
        event.extra_context = {'foo': 'x' * 30, 'nested': {'a': {'b': {'c': 1}}}}
        event.user_context = {'id': 1}
        event.tags_context = {'a': 1}
        event.request = {'data': {'x': object()}}

        proc = SerializeDataProcessor(serializer=Serializer(
            string_max_length=20, max_depth=2))
        proc.process(event)

        assert event.extra_context['foo'] == 'x' * 10 + ' {clipped}'
        assert event.extra_context['nested'] == {'a': {'b': 'Array of length 1'}}
        assert event.user_context == {'id': 1}
        assert event.tags_context == {'a': '1'}
        assert event.request['data']['x'] == 'Object object'

    def test_runs_before_sanitizers(self):
        assert SerializeDataProcessor.priority > SanitizeDataProcessor.priority
        assert SerializeDataProcessor.priority > SanitizeHttpHeadersProcessor.priority
        assert SerializeDataProcessor.priority < 0

    def test_serializes_breadcrumb_metadata(self):
        crumb = Breadcrumb('info', 'default', 'auth', metadata={'raw': b'foo'})
        event = Event.create_event()
        bare = Breadcrumb('info', 'default', 'auth')
        event.breadcrumbs = [crumb, bare]
        SerializeDataProcessor().process(event)
        assert event.breadcrumbs[0].metadata == {'raw': 'foo'}
        assert event.breadcrumbs[1] is bare
        assert crumb.metadata == {'raw': b'foo'}
