import socket
import logging

from protocol.errors import SendError
from protocol.message import encode

logger = logging.getLogger(__name__)


def send_message(endpoint, username, body):
    """
    Deliver one message over a fresh connection to endpoint (ip, port).
    No timeout and no retry: a hung peer blocks the caller.
    """
    ip, port = endpoint
    data = encode(username, body)
    try:
        sock = socket.create_connection((ip, port))
        try:
            sock.sendall(data)
        finally:
            sock.close()
    except OSError as e:
        logger.error(f"Could not send to {ip}:{port}: {e}")
        raise SendError(endpoint, e) from e
    logger.debug(f"Sent {len(data)} bytes to {ip}:{port}")
