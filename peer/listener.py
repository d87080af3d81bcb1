import socket
import threading
import logging

from protocol.errors import ListenerError
from protocol.message import recv_message

logger = logging.getLogger(__name__)


class Listener:
    """
    Accepts inbound connections one at a time and hands each decoded
    message to the renderer. Runs on its own thread until the session stops.
    """

    def __init__(self, session, renderer, host="", backlog=5, poll_interval=0.5):
        self.session = session
        self.renderer = renderer
        self.host = host
        self.port = session.config.listen_port
        self.backlog = backlog
        self.poll_interval = poll_interval
        self.sock = None
        self.bound = threading.Event()
        self.thread = None

    def start(self):
        self.thread = threading.Thread(target=self.listen_for_messages, name="listener", daemon=True)
        self.thread.start()
        return self.thread

    def bind(self):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.host, self.port))
            sock.listen(self.backlog)
        except OSError as e:
            sock.close()
            raise ListenerError(str(e)) from e
        # accept() wakes up periodically so the loop can see the running flag
        sock.settimeout(self.poll_interval)
        self.sock = sock
        self.port = sock.getsockname()[1]
        return sock

    def listen_for_messages(self):
        try:
            self.bind()
        except ListenerError as e:
            logger.error(f"Could not bind listener on port {self.port}: {e}")
            self.renderer.show_system(f"Listener error: {e}")
            return
        self.bound.set()
        logger.debug(f"Listening for incoming messages on port {self.port}")
        try:
            while self.session.running:
                try:
                    conn, addr = self.sock.accept()
                except socket.timeout:
                    continue
                except OSError as e:
                    if not self.session.running:
                        break
                    logger.error(f"Accept failed: {e}")
                    self.renderer.show_system(f"Error receiving message: {e}")
                    continue
                self.handle_connection(conn, addr)
        finally:
            self.sock.close()
            logger.debug(f"Listener on port {self.port} closed")

    def handle_connection(self, conn, addr):
        logger.debug(f"Accepted connection from {addr}")
        try:
            conn.settimeout(None)
            message = recv_message(conn)
        except OSError as e:
            logger.error(f"Error reading from {addr}: {e}")
            self.renderer.show_system(f"Error receiving message: {e}")
            return
        finally:
            conn.close()
        if message:
            self.renderer.show_received(message)

    def stop(self, timeout=None):
        self.session.stop()
        if self.thread is not None:
            self.thread.join(timeout)
