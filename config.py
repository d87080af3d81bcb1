import ipaddress
import os
import logging
from dataclasses import dataclass

from rich.text import Text

from protocol.errors import ConfigError
from ui.renderer import SYSTEM_COLOR

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.ini"
MAX_USERNAME_LENGTH = 16
MIN_PORT = 1
MAX_PORT = 65535


@dataclass(frozen=True)
class SessionConfig:
    server_ip: str = ""
    send_port: int = 0
    listen_port: int = 0
    username: str = ""

    def is_complete(self):
        """All four fields present and the username follows the naming rule."""
        if not (self.server_ip and self.send_port and self.listen_port):
            return False
        return username_error(self.username) is None


def parse_port(value):
    """Port number from text, or 0 when it is not a usable port."""
    try:
        port = int(value.strip())
    except (TypeError, ValueError):
        return 0
    if MIN_PORT <= port <= MAX_PORT:
        return port
    return 0


def is_valid_ip(value):
    try:
        ipaddress.ip_address(value.strip())
    except ValueError:
        return False
    return True


def username_error(value):
    """Reason the username is rejected, or None if it is acceptable."""
    if len(value) > MAX_USERNAME_LENGTH:
        return f"Invalid username! Maximum length is {MAX_USERNAME_LENGTH} characters. Try again."
    if not value.isalnum():
        return "Invalid username! Only letters and digits are allowed. Try again."
    return None


def load_config(path=CONFIG_FILE):
    """
    Read a key=value config file. Returns None when the file does not
    exist; unknown keys and malformed lines are skipped.
    """
    if not os.path.exists(path):
        return None
    values = {}
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            key, sep, value = line.strip().partition("=")
            if sep and "=" not in value:
                values[key] = value
    config = SessionConfig(
        server_ip=values.get("ServerIP", ""),
        send_port=parse_port(values.get("SendPort", "")),
        listen_port=parse_port(values.get("ListenPort", "")),
        username=values.get("Username", ""),
    )
    logger.debug(f"Loaded config from {path}: {config}")
    return config


def save_config(config, path=CONFIG_FILE):
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"ServerIP={config.server_ip}\n")
        f.write(f"SendPort={config.send_port}\n")
        f.write(f"ListenPort={config.listen_port}\n")
        f.write(f"Username={config.username}\n")
    logger.debug(f"Saved config to {path}")


class ConfigPrompter:
    """Interactive first-run questions; every answer is re-asked until valid."""

    def __init__(self, console, ask=None):
        self.console = console
        self.ask = ask or console.input

    def say(self, message):
        self.console.print(Text(message, style=SYSTEM_COLOR))

    def get_valid_username(self):
        while True:
            self.say(f"Enter your username (letters and digits only, max {MAX_USERNAME_LENGTH} characters):")
            value = self.ask()
            error = username_error(value)
            if error is None:
                return value
            self.say(error)

    def get_valid_ip(self):
        while True:
            self.say("Enter the server IP address (127.0.0.1 for same PC):")
            value = self.ask().strip()
            if is_valid_ip(value):
                return value
            self.say("Invalid IP address! Please enter a valid IP address.")

    def get_valid_port(self, prompt):
        while True:
            self.say(prompt)
            port = parse_port(self.ask())
            if port:
                return port
            self.say(f"Invalid port! Please enter a port number between {MIN_PORT} and {MAX_PORT}.")

    def prompt_all(self):
        username = self.get_valid_username()
        server_ip = self.get_valid_ip()
        send_port = self.get_valid_port("Enter the sending port:")
        listen_port = self.get_valid_port("Enter the listening port for incoming messages:")
        return SessionConfig(server_ip, send_port, listen_port, username)


def resolve_config(console, path=CONFIG_FILE, ask=None):
    """
    Load the config, prompting for (and saving) all four fields when the
    file is missing or incomplete. A stored peer address that does not
    parse cannot be recovered from and raises ConfigError.
    """
    prompter = ConfigPrompter(console, ask)
    config = load_config(path)
    if config is None:
        prompter.say("Config file not found, please enter the required details.")
        config = SessionConfig()
    if not config.is_complete():
        logger.info("Config incomplete, prompting for details")
        config = prompter.prompt_all()
        save_config(config, path)
    if not is_valid_ip(config.server_ip):
        logger.error(f"Configured peer address is not an IP: {config.server_ip!r}")
        raise ConfigError("Invalid IP address.")
    return config
