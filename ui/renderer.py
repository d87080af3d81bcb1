import threading
import logging

from rich.cells import cell_len
from rich.control import Control, ControlType
from rich.text import Text

from protocol.message import format_message, sender_of

logger = logging.getLogger(__name__)

# Colours handed out to remote senders, in allocation order.
PALETTE = (
    "blue",
    "cyan",
    "green",
    "magenta",
    "red",
    "bright_blue",
    "bright_magenta",
    "dark_green",
)
# Reserved, never part of PALETTE.
INPUT_COLOR = "yellow"
SYSTEM_COLOR = "grey70"


class ColorTable:
    """
    First-seen sender names mapped to palette colours. Entries are never
    removed; the palette wraps once every colour has been given out.
    """

    def __init__(self, palette=PALETTE):
        if not palette:
            raise ValueError("palette must not be empty")
        self.palette = tuple(palette)
        self._colors = {}
        self._next = 0
        self._lock = threading.Lock()

    def color_for(self, sender):
        with self._lock:
            color = self._colors.get(sender)
            if color is None:
                color = self.palette[self._next % len(self.palette)]
                self._colors[sender] = color
                self._next += 1
                logger.debug(f"Assigned colour {color} to sender '{sender}'")
            return color

    def senders(self):
        with self._lock:
            return list(self._colors)

    def __contains__(self, sender):
        with self._lock:
            return sender in self._colors

    def __len__(self):
        with self._lock:
            return len(self._colors)


class Renderer:
    """
    Sole owner of the terminal. Every write happens under one lock so a
    message arriving on the listener thread never lands in the middle of
    a keystroke echo. The bottom line is always the prompt plus whatever
    is being typed; new lines are inserted above it.
    """

    def __init__(self, console, username, palette=PALETTE):
        self.console = console
        self.username = username
        self.prompt = f"{username}: "
        self.colors = ColorTable(palette)
        self.lock = threading.RLock()
        self.input_start = 0
        self.cursor_column = 0
        self.prompt_visible = False
        self._buffer_provider = lambda: ""

    def attach(self, buffer_provider):
        """Register the callable that returns the line being typed."""
        self._buffer_provider = buffer_provider

    def locked(self):
        return self.lock

    def _write(self, text, style):
        self.console.print(Text(text, style=style), end="")

    def clear_line(self):
        with self.lock:
            self.console.control(
                Control.move_to_column(0),
                Control((ControlType.ERASE_IN_LINE, 2)),
            )
            self.cursor_column = 0

    def show_prompt(self):
        with self.lock:
            self._write(self.prompt, INPUT_COLOR)
            self.input_start = cell_len(self.prompt)
            self.cursor_column = self.input_start
            self.prompt_visible = True

    def _redraw_input(self):
        # Between a commit and the next prompt there is nothing to restore.
        if not self.prompt_visible:
            return
        self.show_prompt()
        buffer = self._buffer_provider()
        if buffer:
            self._write(buffer, INPUT_COLOR)
            self.cursor_column += cell_len(buffer)

    def _insert_line(self, line, style):
        with self.lock:
            self.clear_line()
            self.console.print(Text(line, style=style))
            self._redraw_input()

    def show_received(self, message):
        color = self.colors.color_for(sender_of(message))
        self._insert_line(message, color)

    def show_system(self, message):
        self._insert_line(message, SYSTEM_COLOR)

    def notice(self, message):
        """System-coloured line for use before the prompt exists."""
        with self.lock:
            self.console.print(Text(message, style=SYSTEM_COLOR))

    def show_local(self, body):
        """Replace the prompt line with the committed message."""
        with self.lock:
            self.clear_line()
            self.console.print(Text(format_message(self.username, body), style=INPUT_COLOR))
            self.prompt_visible = False

    def echo_char(self, char):
        with self.lock:
            if not self.prompt_visible or self.cursor_column < self.input_start:
                return False
            self._write(char, INPUT_COLOR)
            self.cursor_column += cell_len(char)
            return True

    def erase_char(self, char):
        with self.lock:
            if not self.prompt_visible or self.cursor_column <= self.input_start:
                return False
            width = max(cell_len(char), 1)
            self.console.control(Control.move(-width))
            self._write(" " * width, INPUT_COLOR)
            self.console.control(Control.move(-width))
            self.cursor_column -= width
            return True
