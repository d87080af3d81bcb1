#main.py  ==  terminal P2P chat client
           #↳ resolves config (prompts on first run)
           #↳ listens for inbound messages on its own thread
           #↳ sends each committed line over a fresh connection
           #↳ edits the input line while messages arrive
'''peerchat/
├── main.py                # Entry point to launch the peer
├── config.py              # config.ini loading, saving and first-run prompts
├── peer/
│   ├── __init__.py
│   ├── peer.py            # Peer class: wires listener, editor, renderer
│   ├── session.py         # Shared session state and running flag
│   ├── listener.py        # Inbound listener thread
│   └── sender.py          # One connection per outgoing message
│
├── protocol/
│   ├── __init__.py
│   ├── message.py         # "<sender>: <body>" wire format
│   └── errors.py          # Custom exceptions
│
├── ui/
│   ├── __init__.py
│   ├── renderer.py        # Terminal owner, sender colours
│   ├── editor.py          # Input line state machine
│   └── keyboard.py        # Raw key reader
'''

import argparse
import logging
import sys

from rich.console import Console
from rich.text import Text

from config import CONFIG_FILE, resolve_config
from peer.peer import Peer
from protocol.errors import ConfigError
from ui.renderer import SYSTEM_COLOR

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Peer-to-peer terminal chat")
    parser.add_argument("--config", default=CONFIG_FILE, help="path to the key=value config file")
    parser.add_argument("--log-file", default="peerchat.log", help="where log records are written")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    return parser.parse_args(argv)


def setup_logging(log_file, debug=False):
    # The terminal is the chat surface, so records go to a file only.
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.addHandler(handler)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_file, args.debug)
    console = Console(highlight=False, markup=False, emoji=False, soft_wrap=True)
    try:
        config = resolve_config(console, args.config)
    except ConfigError as e:
        console.print(Text(str(e), style=SYSTEM_COLOR))
        return 1
    except (KeyboardInterrupt, EOFError):
        console.print(Text("\nExiting...", style=SYSTEM_COLOR))
        return 1
    peer = Peer(config, console)
    peer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
