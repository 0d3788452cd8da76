import logging
import threading

logger = logging.getLogger(__name__)


class EventSource(object):
    """
    Dispatches events to registered handlers.

    Events may be fired from any thread. Handlers are called on the firing thread,
    in registration order, over a snapshot of the handler list, so a handler may
    remove itself (or others) while an event is being dispatched.
    """

    def __init__(self):
        self._handlers = []
        self._lock = threading.RLock()

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler):
        with self._lock:
            self._handlers.append(handler)
        return self

    def remove(self, handler):
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)
        return self

    def handlers(self):
        with self._lock:
            return tuple(self._handlers)

    def fire(self, *args, **kwargs):
        for handler in self.handlers():
            handler(*args, **kwargs)

    def fire_all(self, events):
        for e in events:
            self.fire(e)


class FirstEventGuard:
    """
    Forwards the first event that is an instance of one of the given types to a handler.
    All later events of those types are dropped. Events of other types are ignored.

    :param handler  called with the first matching event
    :param event_types  the event classes that compete to be first
    """

    def __init__(self, handler, *event_types):
        self.handler = handler
        self.event_types = event_types
        self.first = None
        self._lock = threading.Lock()

    @property
    def fired(self) -> bool:
        return self.first is not None

    def __call__(self, event):
        """
        :return: True if the event was forwarded to the handler.
        """
        if not isinstance(event, self.event_types):
            return False
        with self._lock:
            if self.first is not None:
                logger.debug("ignoring %s, already received %s" % (event, self.first))
                return False
            self.first = event
        self.handler(event)
        return True
