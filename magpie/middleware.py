"""
magpie.middleware
~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

from collections.abc import Iterator

from magpie.events import ExceptionMechanism

__all__ = ('Magpie',)


class ClosingIterator(Iterator):
    """
    An iterator that is implements a ``close`` method as-per
    WSGI recommendation.
    """
    def __init__(self, magpie, iterable, environ):
        self.magpie = magpie
        self.environ = environ
        self.iterable = iter(iterable)

    def __iter__(self):
        return self

    def __next__(self):
        try:
            return next(self.iterable)
        except StopIteration:
            # propagate up the normal StopIteration
            raise
        except Exception:
            # but capture any other exception, then re-raise
            self.magpie.handle_exception(self.environ)
            raise
        except KeyboardInterrupt:
            self.magpie.handle_exception(self.environ)
            raise
        except SystemExit as e:
            if e.code != 0:
                self.magpie.handle_exception(self.environ)
            raise

    def close(self):
        try:
            if hasattr(self.iterable, 'close') and callable(self.iterable.close):
                try:
                    self.iterable.close()
                except Exception:
                    self.magpie.handle_exception(self.environ)
                    raise
                except KeyboardInterrupt:
                    self.magpie.handle_exception(self.environ)
                    raise
                except SystemExit as e:
                    if e.code != 0:
                        self.magpie.handle_exception(self.environ)
                    raise
        finally:
            self.magpie.clear_context()


class Magpie(object):
    """
    A WSGI middleware which will attempt to capture any
    uncaught exceptions and send them to magpie.

    >>> from magpie.base import Client
    >>> application = Magpie(application, Client())
    """
    def __init__(self, application, client=None):
        self.application = application
        if client is None:
            from magpie.base import Client
            client = Client()
        self.client = client

    def __call__(self, environ, start_response):
        path = environ.get('PATH_INFO')
        if path:
            self.client.transaction_stack.push(path)

        try:
            try:
                iterable = self.application(environ, start_response)
            except Exception:
                self.handle_exception(environ)
                raise
            except KeyboardInterrupt:
                self.handle_exception(environ)
                raise
            except SystemExit as e:
                if e.code != 0:
                    self.handle_exception(environ)
                raise
        except BaseException:
            self.clear_context()
            raise

        return ClosingIterator(self, iterable, environ)

    def clear_context(self):
        self.client.context.clear()
        self.client.transaction_stack.clear()

    def handle_exception(self, environ=None):
        return self.client.captureException(
            request=environ,
            mechanism=ExceptionMechanism('wsgi', handled=False),
        )
