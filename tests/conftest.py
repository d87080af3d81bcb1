import io
import socket
import time

import pytest
from rich.console import Console

from config import SessionConfig
from ui.renderer import Renderer


def make_console(color=False):
    return Console(
        file=io.StringIO(),
        width=80,
        force_terminal=color,
        color_system="standard" if color else None,
        highlight=False,
        markup=False,
        emoji=False,
        soft_wrap=True,
    )


def output_of(console):
    return console.file.getvalue()


def wait_for(predicate, timeout=5.0, interval=0.02):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class ScriptedKeyboard:
    """Feeds a fixed list of keys, then calls on_exhausted once."""

    def __init__(self, keys, on_exhausted=None):
        self.keys = list(keys)
        self.on_exhausted = on_exhausted
        self.entered = False
        self.exited = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited = True
        return False

    def read_key(self, timeout):
        if self.keys:
            return self.keys.pop(0)
        if self.on_exhausted is not None:
            self.on_exhausted()
        return None


@pytest.fixture
def console():
    return make_console()


@pytest.fixture
def renderer(console):
    return Renderer(console, "Bob1")


@pytest.fixture
def session_config():
    return SessionConfig("127.0.0.1", free_port(), 0, "Bob1")
