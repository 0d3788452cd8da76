"""

Serial connections to OBD adapters

- Connector: a function bound to one serial port (`get_connector`). Each call opens the port,
  runs a caller-supplied configure step (the adapter handshake) over it, and returns a Future for
  the ready transport.
- Transport: the open serial link (`SerialTransport`). Opening is asynchronous and reported as
  events: TransportOpenedEvent or TransportErrorEvent. The transport's `ready` flag is set once
  the configure step has completed.
- Discovery: lists the available serial ports (`list_connectors`) or just those that look like
  OBD adapters (`list_adapters`), delivering the result to a callback.
- Configuration: connector settings can be loaded from layered ConfigObj files
  (`load_connector_config`) and passed straight to `get_connector`.

Errors:

- InvalidConfigError is raised synchronously by `get_connector` when the settings are malformed.
- Everything that happens after that is reported through the connector's Future:
  ConnectionFailedError when the port cannot be opened, or the configure step's own exception.


## Threading

Opening the port and enumerating ports are blocking calls in pyserial, so each runs on a short-lived
daemon thread. Transport events and future callbacks are delivered on that thread. The configure
step is called from there too, and should hand off any long-running work rather than block it.

"""

from obdserial.config.config import load_connector_config
from obdserial.connector import get_connector
from obdserial.discovery import list_adapters, list_connectors
from obdserial.errors import ConnectionFailedError, ConnectorError, InvalidConfigError, TransportNotOpenError
from obdserial.transport import SerialTransport

__version__ = '0.1.0'

__all__ = [
    'get_connector', 'list_connectors', 'list_adapters', 'load_connector_config', 'SerialTransport',
    'ConnectorError', 'InvalidConfigError', 'ConnectionFailedError', 'TransportNotOpenError',
]
