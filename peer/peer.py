from peer.listener import Listener
from peer.sender import send_message
from peer.session import Session
from ui.editor import InputEditor
from ui.keyboard import Keyboard
from ui.renderer import Renderer
import signal
import logging

logger = logging.getLogger(__name__)


class Peer:
    def __init__(self, config, console):
        self.session = Session(config)
        self.username = config.username
        self.endpoint = self.session.endpoint
        self.renderer = Renderer(console, self.username)
        self.editor = InputEditor(self.renderer, self.send, self.username)
        self.listener = Listener(self.session, self.renderer)
        logger.debug(f"Peer '{self.username}' initialized, listening on {config.listen_port}, sending to {self.endpoint}")

    def send(self, body):
        send_message(self.endpoint, self.username, body)

    def install_signal_handler(self):
        # Only flips the running flag; the input loop does the talking.
        def handle_interrupt(signum, frame):
            logger.debug("Interrupt received")
            self.session.stop()

        signal.signal(signal.SIGINT, handle_interrupt)

    def start_service(self):
        logger.debug("Starting listener")
        self.listener.start()

    def run_cli(self, keyboard=None):
        self.renderer.notice("Press Ctrl+C to quit.")
        self.renderer.show_prompt()
        with keyboard or Keyboard() as keys:
            self.editor.run(self.session, keys)
        self.renderer.show_system("Exiting...")

    def shutdown(self, timeout=2.0):
        logger.debug("Shutting down")
        self.listener.stop(timeout)
        self.renderer.clear_line()

    def run(self, keyboard=None):
        self.install_signal_handler()
        self.start_service()
        try:
            self.run_cli(keyboard)
        finally:
            self.shutdown()
