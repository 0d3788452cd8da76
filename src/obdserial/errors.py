class ConnectorError(Exception):
    """ Indicates an error condition with a connection. """


class InvalidConfigError(ConnectorError, ValueError):
    """ The configuration given to the connector is malformed. Raised synchronously, before any I/O. """


class ConnectionFailedError(ConnectorError):
    """ The transport reported an error while opening the link to the ECU. """

    def __init__(self, cause):
        super().__init__("failed to connect to ecu: %s" % cause)
        self.cause = cause
        self.__cause__ = cause


class TransportNotOpenError(ConnectorError):
    """ Indicates the transport is closed when an open transport is required. """
