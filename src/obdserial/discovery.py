"""
Enumerates the serial endpoints an OBD adapter may be attached to.

Listing is asynchronous. The result is delivered to a callback, and failures to an optional errback.
Both functions also return the underlying future, so a failure is never lost even without an errback.
"""

import logging
import re
from concurrent.futures import CancelledError

from obdserial.connector import system_name
from obdserial.errors import InvalidConfigError
from obdserial.support.futures import transform
from obdserial.transport import SerialTransport

logger = logging.getLogger(__name__)

# USB-serial bridges found in ELM327 adapters, as (VID, PID)
known_adapter_ids = [
    (0x0403, 0x6001),   # FTDI FT232R
    (0x0403, 0x6015),   # FTDI FT231X
    (0x067B, 0x2303),   # Prolific PL2303
    (0x10C4, 0xEA60),   # Silicon Labs CP210x
    (0x1A86, 0x7523),   # CH340
    (0x1A86, 0x5523),   # CH341
]

adapter_keywords = re.compile(r"elm\s?327|obd|j1850|iso9141|kwp2000|bluetooth|rfcomm|bthenum", re.IGNORECASE)


def _check_callable(fn, name, optional=False):
    if fn is None and optional:
        return
    if not callable(fn):
        raise InvalidConfigError("%s should be a function provided to %s" % (name, system_name))


def _deliver(future, callback, errback, describe):
    def done(f):
        error = CancelledError() if f.cancelled() else f.exception()
        if error is not None:
            if errback is not None:
                errback(error)
            else:
                logger.error("failed to list %s: %s" % (describe, error))
            return
        result = f.result()
        logger.debug("found %s: %s" % (describe, result))
        callback(result)

    future.add_done_callback(done)
    return future


def list_connectors(callback, errback=None):
    """
    Lists the available serial ports.
    :param callback: called once with the list of device names, in the order the OS reports them.
    :param errback: called with the exception when the ports cannot be enumerated.
        When not given, the failure is logged.
    :return: the future for the list of device names.
    """
    _check_callable(callback, 'callback')
    _check_callable(errback, 'errback', optional=True)
    return _deliver(SerialTransport.list_ports(), callback, errback, "serial ports")


def is_recognised_adapter(port) -> bool:
    """
    Determines if a serial port looks like an OBD adapter, from its USB ids or its description.
    :param port: a `ListPortInfo`
    """
    vid = getattr(port, 'vid', None)
    pid = getattr(port, 'pid', None)
    if vid is not None and (vid, pid) in known_adapter_ids:
        return True
    info = "%s %s %s" % (port.device, port.description or "", port.hwid or "")
    return adapter_keywords.search(info) is not None


def recognised_adapter_ports(ports):
    """ the device names of the recognised adapters among the given ports, in order. """
    return [p.device for p in ports if is_recognised_adapter(p)]


def list_adapters(callback, errback=None):
    """
    Lists the serial ports that look like OBD adapters.
    Same contract as `list_connectors`.
    """
    _check_callable(callback, 'callback')
    _check_callable(errback, 'errback', optional=True)
    future = transform(SerialTransport.list_port_info(), recognised_adapter_ports)
    return _deliver(future, callback, errback, "adapters")
