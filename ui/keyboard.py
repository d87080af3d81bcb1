import codecs
import os
import sys
import time
import logging

try:
    import msvcrt
except ImportError:
    msvcrt = None
    import select
    import termios
    import tty

logger = logging.getLogger(__name__)

ESCAPE = "\x1b"


class Keyboard:
    """
    Raw single-key reader over stdin. Use as a context manager: on POSIX the
    terminal is put in cbreak mode (no line buffering, no echo, Ctrl+C still
    delivers SIGINT) and restored on exit.

    Bytes are read straight from the file descriptor so nothing sits in a
    Python-level buffer that select() cannot see.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self._saved = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def __enter__(self):
        if msvcrt is None and self.stream.isatty():
            fd = self.stream.fileno()
            self._saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
            logger.debug("Terminal switched to cbreak mode")
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._saved is not None:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN, self._saved)
            self._saved = None
            logger.debug("Terminal mode restored")
        return False

    def _ready(self, timeout):
        readable, _, _ = select.select([self.stream.fileno()], [], [], timeout)
        return bool(readable)

    def _read_char(self, timeout):
        if not self._ready(timeout):
            return None
        while True:
            data = os.read(self.stream.fileno(), 1)
            if not data:
                # stdin closed; behave like an idle terminal
                time.sleep(timeout)
                return None
            char = self._decoder.decode(data)
            if char:
                return char
            # rest of a multi-byte character should follow at once
            if not self._ready(timeout):
                self._decoder.reset()
                logger.debug("Dropped an incomplete character")
                return None

    def read_key(self, timeout):
        """Return one key, or None if nothing was typed within timeout."""
        if msvcrt is not None:
            return self._read_key_windows(timeout)
        char = self._read_char(timeout)
        if char == ESCAPE:
            # Arrow and function keys arrive as escape sequences; drop them.
            while self._read_char(0) is not None:
                pass
            return None
        return char

    def _read_key_windows(self, timeout):
        deadline = time.monotonic() + timeout
        while not msvcrt.kbhit():
            if time.monotonic() >= deadline:
                return None
            time.sleep(0.01)
        char = msvcrt.getwch()
        if char in ("\x00", "\xe0"):
            msvcrt.getwch()
            return None
        return char
