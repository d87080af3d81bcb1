import logging

logger = logging.getLogger(__name__)

# Inbound payloads past this many bytes are dropped, not rejected.
MAX_MESSAGE_SIZE = 1024
ENCODING = "utf-8"


def format_message(username, body):
    return f"{username}: {body}"


def encode(username, body):
    """
    Build the wire payload for one message. The whole connection carries
    exactly this, with no length prefix or delimiter.
    """
    return format_message(username, body).encode(ENCODING)


def decode(data):
    """
    Decode a received payload. A multi-byte character cut in half by
    truncation is replaced rather than raised.
    """
    return data[:MAX_MESSAGE_SIZE].decode(ENCODING, errors="replace")


def sender_of(message):
    return message.split(":", 1)[0]


def recv_message(sock):
    """
    One read of at most MAX_MESSAGE_SIZE bytes. A peer that writes and then
    holds the connection open still gets its message shown.
    """
    data = sock.recv(MAX_MESSAGE_SIZE)
    if len(data) == MAX_MESSAGE_SIZE:
        logger.debug("Inbound payload reached the read limit, remainder discarded")
    return decode(data)
