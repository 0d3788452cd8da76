"""
The transport is the open serial link to the OBD adapter.

Opening is asynchronous: `open()` returns immediately and the transport later fires exactly one of
TransportOpenedEvent or TransportErrorEvent on its `events` source, from a background thread.
Listeners must be registered before calling `open()`.
"""

import logging
from abc import abstractmethod
from io import IOBase

import serial
from serial.tools import list_ports

from obdserial.errors import TransportNotOpenError
from obdserial.support.events import EventSource
from obdserial.support.futures import FutureValue, run_in_background

logger = logging.getLogger(__name__)


class TransportEvent:
    """ base class for transport events. """
    def __init__(self, transport):
        self.transport = transport

    def __str__(self):
        return "%s(%s)" % (type(self).__name__, self.transport)


class TransportOpenedEvent(TransportEvent):
    """ The transport is open and can exchange data. """


class TransportErrorEvent(TransportEvent):
    """ The transport could not be opened. """
    def __init__(self, transport, error):
        super().__init__(transport)
        self.error = error

    def __str__(self):
        return "%s(%s, %s)" % (type(self).__name__, self.transport, self.error)


class TransportClosedEvent(TransportEvent):
    """ The transport was closed. """


class Transport:
    """
    A two-way link to an endpoint, with a file-like input and output.

    `ready` is False until the connection has been opened and configured.
    """

    def __init__(self):
        self.events = EventSource()
        self.ready = False

    @property
    @abstractmethod
    def target(self):
        """ the endpoint this transport links to """
        raise NotImplementedError

    @property
    @abstractmethod
    def input(self) -> IOBase:
        raise NotImplementedError

    @property
    @abstractmethod
    def output(self) -> IOBase:
        raise NotImplementedError

    @property
    @abstractmethod
    def is_open(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def open(self):
        """ starts opening the transport. The outcome is posted to `events`. """
        raise NotImplementedError

    @abstractmethod
    def close(self):
        raise NotImplementedError


class SerialTransport(Transport):
    """
    A transport over a serial port.

    :param path     the serial device, such as /dev/ttyUSB0 or COM3
    :param options  keyword arguments for `serial.Serial`, such as baudrate and timeout.
        The port is always taken from `path`.
    """

    def __init__(self, path, options=None):
        super().__init__()
        self.path = path
        self.options = {k: v for k, v in dict(options or {}).items() if k != 'port'}
        self._serial = None

    def __str__(self):
        return self.path

    @property
    def target(self):
        return self.path

    @property
    def port(self) -> serial.Serial:
        return self._serial

    @property
    def input(self):
        return self._check_open()

    @property
    def output(self):
        return self._check_open()

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.isOpen()

    def open(self) -> FutureValue:
        """
        Opens the serial port on a background thread.
        :return: a future for the opened `serial.Serial`. The same outcome is fired as an event.
        """
        future = run_in_background(self._open_serial, name="open %s" % self.path)
        future.add_done_callback(self._opened)
        return future

    def _open_serial(self):
        # no port given to the constructor, so the port is not opened there
        ser = serial.Serial(**self.options)
        ser.port = self.path
        ser.open()
        return ser

    def _opened(self, future):
        error = future.exception()
        if error is not None:
            logger.warning("error opening serial port %s: %s" % (self.path, error))
            self.events.fire(TransportErrorEvent(self, error))
        else:
            self._serial = future.result()
            logger.info("opened serial port %s" % self.path)
            self.events.fire(TransportOpenedEvent(self))

    def close(self):
        ser = self._serial
        self.ready = False
        if ser is None:
            return
        self._serial = None
        ser.close()
        logger.info("closed serial port %s" % self.path)
        self.events.fire(TransportClosedEvent(self))

    def _check_open(self) -> serial.Serial:
        if not self.is_open:
            raise TransportNotOpenError("serial port %s is not open" % self.path)
        return self._serial

    def write(self, data) -> int:
        return self._check_open().write(data)

    def read(self, size=1) -> bytes:
        return self._check_open().read(size)

    def readline(self) -> bytes:
        return self._check_open().readline()

    def read_until(self, expected=b'\r') -> bytes:
        return self._check_open().read_until(expected)

    @staticmethod
    def list_port_info() -> FutureValue:
        """
        Enumerates the serial ports on a background thread.
        :return: a future for a list of `ListPortInfo`, in the order the OS reports them.
        """
        return run_in_background(lambda: list(list_ports.comports()), name="list serial ports")

    @staticmethod
    def list_ports() -> FutureValue:
        """
        :return: a future for the list of available serial device names.
        """
        return run_in_background(lambda: [p.device for p in list_ports.comports()], name="list serial ports")
