"""
Deferred values. A deferred result is a `concurrent.futures.Future`, so callers may block
with `result(timeout)`, poll with `done()`, or chain with `add_done_callback()`.
"""
import threading
from concurrent.futures import CancelledError, Future


class FutureValue(Future):
    """ describes a value that may have not yet been computed.
        If an exception is encountered computing the value, it is set."""

    def set_result_or_exception(self, value):
        """sets the result, or the exception if value is an exception."""
        if isinstance(value, BaseException):
            self.set_exception(value)
        else:
            self.set_result(value)


def as_future(value) -> Future:
    """
    Wraps a value in a completed future, unless it already is a future.
    An exception instance gives a failed future.
    """
    if isinstance(value, Future):
        return value
    future = FutureValue()
    future.set_result_or_exception(value)
    return future


def transform(future: Future, fn) -> FutureValue:
    """
    Derives a future whose result is fn applied to the result of the given future.
    Exceptions from the given future, or raised by fn, become the exception of the derived future.
    """
    derived = FutureValue()

    def done(f):
        error = CancelledError() if f.cancelled() else f.exception()
        if error is not None:
            derived.set_exception(error)
            return
        try:
            derived.set_result(fn(f.result()))
        except Exception as e:
            derived.set_exception(e)

    future.add_done_callback(done)
    return derived


def run_in_background(fn, *args, name=None) -> FutureValue:
    """
    Calls fn(*args) on a new daemon thread.
    :return: a future that receives the return value of fn, or the exception it raised.
    """
    future = FutureValue()

    def run():
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn(*args)
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(result)

    thread = threading.Thread(target=run, name=name, daemon=True)
    thread.start()
    return future
