from magpie.utils.wsgi import get_current_url, get_environ, get_headers, get_host


def make_environ(**kwargs):
    environ = {
        'REQUEST_METHOD': 'POST',
        'wsgi.url_scheme': 'https',
        'wsgi.input': object(),
        'SERVER_NAME': 'backend.local',
        'SERVER_PORT': '8443',
        'SCRIPT_NAME': '/app',
        'PATH_INFO': '/login form',
        'QUERY_STRING': 'next=/home&token=abc',
        'REMOTE_ADDR': '10.0.0.7',
        'CONTENT_TYPE': 'application/json',
        'CONTENT_LENGTH': '13',
        'HTTP_HOST': 'example.com:443',
        'HTTP_X_FORWARDED_FOR': '203.0.113.9',
        'HTTP_ACCEPT_LANGUAGE': 'en',
    }
    environ.update(kwargs)
    return environ


class TestGetHeaders(object):
    def test_request_headers(self):
        assert dict(get_headers(make_environ())) == {
            'Content-Type': 'application/json',
            'Content-Length': '13',
            'Host': 'example.com:443',
            'X-Forwarded-For': '203.0.113.9',
            'Accept-Language': 'en',
        }

    def test_duplicated_content_headers_are_skipped(self):
        environ = make_environ(
            HTTP_CONTENT_TYPE='text/plain', HTTP_CONTENT_LENGTH='1')
        headers = dict(get_headers(environ))
        assert headers['Content-Type'] == 'application/json'
        assert headers['Content-Length'] == '13'

    def test_non_string_keys_are_skipped(self):
        environ = {('HTTP_ACCEPT',): 'text/html', 'HTTP_ACCEPT': 'text/plain'}
        assert list(get_headers(environ)) == [('Accept', 'text/plain')]


class TestGetEnviron(object):
    def test_whitelist(self):
        assert dict(get_environ(make_environ())) == {
            'REMOTE_ADDR': '10.0.0.7',
            'SERVER_NAME': 'backend.local',
            'SERVER_PORT': '8443',
        }

    def test_missing_keys(self):
        assert list(get_environ({'wsgi.input': None})) == []
        assert list(get_environ({'SERVER_PORT': 80})) == [('SERVER_PORT', 80)]


class TestGetHost(object):
    def test_forwarded_host_wins(self):
        environ = make_environ(HTTP_X_FORWARDED_HOST='proxy.example.com')
        assert get_host(environ) == 'proxy.example.com'

    def test_host_header_drops_default_port(self):
        assert get_host(make_environ()) == 'example.com'
        assert get_host(make_environ(
            **{'wsgi.url_scheme': 'http', 'HTTP_HOST': 'example.com:80'})) == 'example.com'

    def test_server_name_fallback(self):
        environ = make_environ()
        del environ['HTTP_HOST']
        assert get_host(environ) == 'backend.local:8443'

        environ['SERVER_PORT'] = '443'
        assert get_host(environ) == 'backend.local'


class TestGetCurrentUrl(object):
    def test_full_url(self):
        assert get_current_url(make_environ()) == \
            'https://example.com/app/login%20form?next=/home&token=abc'

    def test_without_query_string(self):
        assert get_current_url(make_environ(), strip_querystring=True) == \
            'https://example.com/app/login%20form'

    def test_root_and_host(self):
        environ = make_environ()
        assert get_current_url(environ, root_only=True) == 'https://example.com/app/'
        assert get_current_url(environ, host_only=True) == 'https://example.com/'
