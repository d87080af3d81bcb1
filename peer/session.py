import threading
import logging

logger = logging.getLogger(__name__)


class Session:
    """
    Process-wide state shared by the listener thread and the input loop:
    the resolved configuration and the running flag.
    """

    def __init__(self, config):
        self.config = config
        self._stopped = threading.Event()

    @property
    def running(self):
        return not self._stopped.is_set()

    @property
    def endpoint(self):
        return (self.config.server_ip, self.config.send_port)

    def stop(self):
        if not self._stopped.is_set():
            logger.debug("Session stop requested")
        self._stopped.set()

