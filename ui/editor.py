import enum
import logging

from protocol.errors import SendError

logger = logging.getLogger(__name__)

COMMIT_KEYS = ("\r", "\n")
ERASE_KEYS = ("\x7f", "\x08")
INTERRUPT_KEY = "\x03"


class EditorState(enum.Enum):
    EMPTY = "empty"
    COMPOSING = "composing"


class InputEditor:
    """
    Line editor driven by raw key events. The buffer is only touched while
    holding the renderer lock, so a redraw from the listener thread always
    sees a buffer that matches what is on screen.
    """

    def __init__(self, renderer, send, username):
        self.renderer = renderer
        self.send = send
        self.username = username
        self.buffer = ""
        renderer.attach(lambda: self.buffer)

    @property
    def state(self):
        return EditorState.COMPOSING if self.buffer else EditorState.EMPTY

    def handle_key(self, key):
        if key in COMMIT_KEYS:
            self.commit()
        elif key in ERASE_KEYS:
            self.erase()
        elif key.isprintable():
            self.insert(key)
        else:
            logger.debug(f"Ignoring control key {key!r}")

    def insert(self, char):
        with self.renderer.locked():
            if self.renderer.echo_char(char):
                self.buffer += char

    def erase(self):
        with self.renderer.locked():
            if self.buffer and self.renderer.erase_char(self.buffer[-1]):
                self.buffer = self.buffer[:-1]

    def commit(self):
        with self.renderer.locked():
            text = self.buffer.strip()
            self.buffer = ""
            self.renderer.show_local(text)
        try:
            if text:
                logger.debug(f"Committing {len(text)} characters")
                self.send(text)
        except SendError as e:
            self.renderer.show_system(f"Send error: {e}")
        finally:
            self.renderer.show_prompt()

    def run(self, session, keyboard, poll_interval=0.1):
        """Main-thread loop: read keys until the session stops."""
        while session.running:
            try:
                key = keyboard.read_key(poll_interval)
                if key is None:
                    continue
                if key == INTERRUPT_KEY:
                    session.stop()
                    continue
                self.handle_key(key)
            except Exception as e:
                logger.exception("Unexpected error in input loop")
                self.renderer.show_system(f"Error: {e}")
