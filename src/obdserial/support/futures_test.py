import threading
import unittest
from concurrent.futures import Future

import timeout_decorator
from hamcrest import assert_that, is_, is_not, instance_of, calling, raises

from obdserial.support.events_test import debug_timeout
from obdserial.support.futures import FutureValue, as_future, run_in_background, transform


class FutureValueTest(unittest.TestCase):

    def test_set_result(self):
        sut = FutureValue()
        sut.set_result_or_exception(3)
        assert_that(sut.result(), is_(3))

    def test_set_exception(self):
        sut = FutureValue()
        error = ValueError("bad")
        sut.set_result_or_exception(error)
        assert_that(sut.exception(), is_(error))


class AsFutureTest(unittest.TestCase):

    def test_future_is_returned_as_is(self):
        future = Future()
        assert_that(as_future(future), is_(future))

    def test_value_is_wrapped(self):
        future = as_future("abc")
        assert_that(future, instance_of(Future))
        assert_that(future.done(), is_(True))
        assert_that(future.result(), is_("abc"))

    def test_none_is_wrapped(self):
        assert_that(as_future(None).result(), is_(None))

    def test_exception_fails_the_future(self):
        error = IOError("no")
        assert_that(as_future(error).exception(), is_(error))


class TransformTest(unittest.TestCase):

    def test_transforms_result(self):
        source = Future()
        derived = transform(source, len)
        source.set_result([1, 2])
        assert_that(derived.result(), is_(2))

    def test_propagates_exception(self):
        source = Future()
        derived = transform(source, len)
        error = OSError("enumeration failed")
        source.set_exception(error)
        assert_that(derived.exception(), is_(error))

    def test_exception_from_function(self):
        derived = transform(as_future(3), len)
        assert_that(calling(derived.result), raises(TypeError))


class RunInBackgroundTest(unittest.TestCase):

    @timeout_decorator.timeout(debug_timeout(2))
    def test_runs_on_another_thread(self):
        caller = threading.current_thread()
        future = run_in_background(threading.current_thread, name="worker")
        thread = future.result()
        assert_that(thread, is_not(caller))
        assert_that(thread.name, is_("worker"))
        assert_that(thread.daemon, is_(True))

    @timeout_decorator.timeout(debug_timeout(2))
    def test_passes_arguments(self):
        assert_that(run_in_background(pow, 2, 5).result(), is_(32))

    @timeout_decorator.timeout(debug_timeout(2))
    def test_exception_is_captured(self):
        def fail():
            raise ValueError("boom")
        future = run_in_background(fail)
        assert_that(calling(future.result), raises(ValueError, "boom"))
