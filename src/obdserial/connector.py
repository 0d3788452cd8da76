"""
Establishes a configured connection to an OBD adapter over a serial port.

`get_connector()` validates the serial settings and returns a connector function. Each call of
the connector is one connection attempt:

- a SerialTransport is created for the port and asked to open
- the first of TransportOpenedEvent / TransportErrorEvent decides the attempt. Later events
  from the same transport are ignored.
- on error, the attempt fails with ConnectionFailedError and the configure step is not run
- on open, the configure step is run with the transport. When it completes, the transport is
  marked ready and becomes the result. When it fails, the transport is closed and the attempt
  fails with the configure step's own exception.

There is no timeout on the open. Callers that need one wait with `future.result(timeout)`.
"""

import logging
from collections.abc import Mapping
from concurrent.futures import CancelledError, Future

from obdserial.errors import ConnectionFailedError, InvalidConfigError
from obdserial.support.events import FirstEventGuard
from obdserial.support.futures import FutureValue, as_future
from obdserial.transport import SerialTransport, TransportErrorEvent, TransportOpenedEvent

logger = logging.getLogger(__name__)

system_name = 'obd-serial-connection'


def validate_config(config):
    """
    Checks the connector configuration, reporting the first problem found.
    :param config: a mapping with `serial_path` and `serial_opts`
    :return: the serial path and serial options
    :raises InvalidConfigError: when the configuration is malformed
    """
    if not isinstance(config, Mapping):
        config = {}
    serial_path = config.get('serial_path')
    if not isinstance(serial_path, str) or not serial_path:
        raise InvalidConfigError("opts.serial_path should be a string provided to %s" % system_name)
    serial_opts = config.get('serial_opts')
    if not isinstance(serial_opts, Mapping):
        raise InvalidConfigError("opts.serial_opts should be an Object provided to %s" % system_name)
    return serial_path, serial_opts


def get_connector(config):
    """
    Creates a connector function bound to one serial port.
    Nothing is opened until the connector is called.

    :param config: a mapping with `serial_path` (the device name) and `serial_opts`
        (keyword arguments for `serial.Serial`)
    :return: a function `connector(configure)` that returns a Future for the ready SerialTransport.
        `configure` is called with the open transport, and should return a Future that completes
        when the adapter has been set up.
    :raises InvalidConfigError: when the configuration is malformed
    """
    serial_path, serial_opts = validate_config(config)
    serial_opts = dict(serial_opts)

    def connector(configure) -> Future:
        attempt = ConnectionAttempt(SerialTransport(serial_path, serial_opts), configure)
        return attempt.start()

    return connector


class ConnectionAttempt:
    """
    One attempt to open and configure a transport. The result future settles exactly once.

    :param transport  an unopened transport
    :param configure  called with the open transport. Returns a Future, or a plain value when the
        configuration completed synchronously.
    """

    def __init__(self, transport, configure):
        self.transport = transport
        self.configure = configure
        self.result = FutureValue()
        self._guard = FirstEventGuard(self._terminal_event, TransportOpenedEvent, TransportErrorEvent)

    def start(self) -> Future:
        transport = self.transport
        transport.events += self._guard
        logger.debug("connecting to %s" % transport.target)
        try:
            transport.open()
        except Exception as e:
            transport.events -= self._guard
            self._fail(ConnectionFailedError(e))
        return self.result

    def _terminal_event(self, event):
        self.transport.events -= self._guard
        if isinstance(event, TransportErrorEvent):
            self._fail(ConnectionFailedError(event.error))
        else:
            self._run_configure()

    def _run_configure(self):
        try:
            pending = self.configure(self.transport)
        except Exception as e:
            self._configure_failed(e)
            return
        as_future(pending).add_done_callback(self._configured)

    def _configured(self, future):
        if future.cancelled():
            self._configure_failed(CancelledError())
            return
        error = future.exception()
        if error is not None:
            self._configure_failed(error)
            return
        transport = self.transport
        transport.ready = True
        logger.info("connection ready on %s" % transport.target)
        self.result.set_result(transport)

    def _configure_failed(self, error):
        logger.warning("configuring %s failed: %s" % (self.transport.target, error))
        try:
            self.transport.close()
        except Exception as e:
            logger.warning("error closing %s: %s" % (self.transport.target, e))
        self.result.set_exception(error)

    def _fail(self, error):
        logger.warning("%s" % error)
        self.result.set_exception(error)
