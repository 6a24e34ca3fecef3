"""
magpie.transport.threaded
~~~~~~~~~~~~~~~~~~~~~~~~~

:copyright: (c) 2010-2012 by the Sentry Team, see AUTHORS for more details.
:license: BSD, see LICENSE for more details.
"""

import logging
import threading
import time

from queue import Queue

from magpie.transport.base import Result, ResultStatus, Transport

__all__ = ('AsyncWorker', 'ThreadedTransport')

DEFAULT_TIMEOUT = 10

logger = logging.getLogger('magpie.errors')


class AsyncWorker(object):
    _terminator = object()

    def __init__(self, shutdown_timeout=DEFAULT_TIMEOUT):
        self._queue = Queue(-1)
        self._lock = threading.Lock()
        self._thread = None
        self.options = {
            'shutdown_timeout': shutdown_timeout,
        }
        self.start()

    def is_alive(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """
        Starts the task thread.
        """
        with self._lock:
            if not self._thread:
                self._thread = threading.Thread(target=self._target)
                self._thread.daemon = True
                self._thread.start()

    def stop(self, timeout=None):
        """
        Stops the task thread. Synchronous!
        """
        if timeout is None:
            timeout = self.options['shutdown_timeout']
        with self._lock:
            if self._thread:
                self._queue.put_nowait(self._terminator)
                self._thread.join(timeout=timeout)
                self._thread = None

    def flush(self, timeout=None):
        """
        Waits until every queued job ran. Returns ``False`` when ``timeout``
        seconds passed first.
        """
        queue = self._queue
        deadline = None if timeout is None else time.time() + timeout
        with queue.all_tasks_done:
            while queue.unfinished_tasks:
                if deadline is None:
                    queue.all_tasks_done.wait()
                    continue
                remaining = deadline - time.time()
                if remaining <= 0:
                    return False
                queue.all_tasks_done.wait(remaining)
        return True

    def queue(self, callback, *args, **kwargs):
        self._queue.put_nowait((callback, args, kwargs))

    def _target(self):
        while 1:
            record = self._queue.get()
            try:
                if record is self._terminator:
                    break
                callback, args, kwargs = record
                try:
                    callback(*args, **kwargs)
                except Exception:
                    logger.error('Failed processing job', exc_info=True)
            finally:
                self._queue.task_done()

            time.sleep(0)


class ThreadedTransport(Transport):
    """
    Sends events through ``transport`` from a background thread.
    """

    def __init__(self, transport, shutdown_timeout=DEFAULT_TIMEOUT):
        self.transport = transport
        self.shutdown_timeout = shutdown_timeout
        self._worker = None

    def get_worker(self):
        if self._worker is None:
            self._worker = AsyncWorker(shutdown_timeout=self.shutdown_timeout)
        return self._worker

    def send_sync(self, event):
        result = self.transport.send(event)
        if result is not None and result.status == ResultStatus.FAILED:
            logger.error('Unable to send event %s', event.event_id)

    def send(self, event):
        self.get_worker().queue(self.send_sync, event)
        return Result(ResultStatus.SUCCESS, event)

    def flush(self, timeout=None):
        if self._worker is not None and not self._worker.flush(timeout):
            return Result(ResultStatus.FAILED)
        return self.transport.flush(timeout)

    def close(self, timeout=None):
        result = self.flush(timeout)
        if self._worker is not None:
            self._worker.stop(timeout)
            self._worker = None
        self.transport.close(timeout)
        return result
