import os
import sys
import time

import pytest

from ui.keyboard import Keyboard

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="pipe-backed stdin is POSIX only")


@pytest.fixture
def pipe():
    read_fd, write_fd = os.pipe()
    reader = os.fdopen(read_fd, "r")
    yield reader, write_fd
    reader.close()
    try:
        os.close(write_fd)
    except OSError:
        pass


def test_reads_single_keys(pipe):
    reader, write_fd = pipe
    os.write(write_fd, b"ab")
    with Keyboard(reader) as keys:
        assert keys.read_key(1) == "a"
        assert keys.read_key(1) == "b"


def test_times_out_without_input(pipe):
    reader, _ = pipe
    with Keyboard(reader) as keys:
        assert keys.read_key(0.05) is None


def test_multibyte_character_is_one_key(pipe):
    reader, write_fd = pipe
    os.write(write_fd, "é".encode("utf-8"))
    keys = Keyboard(reader)
    assert keys.read_key(1) == "é"


def test_escape_sequences_are_dropped(pipe):
    reader, write_fd = pipe
    os.write(write_fd, b"\x1b[A")
    keys = Keyboard(reader)
    assert keys.read_key(1) is None
    os.write(write_fd, b"z")
    assert keys.read_key(1) == "z"


def test_closed_input_reads_as_idle(pipe):
    reader, write_fd = pipe
    os.close(write_fd)
    keys = Keyboard(reader)
    assert keys.read_key(0.01) is None


def test_incomplete_character_is_dropped_without_blocking(pipe):
    reader, write_fd = pipe
    os.write(write_fd, b"\xc3")
    keys = Keyboard(reader)
    started = time.monotonic()
    assert keys.read_key(0.05) is None
    assert time.monotonic() - started < 1
    os.write(write_fd, b"z")
    assert keys.read_key(1) == "z"
