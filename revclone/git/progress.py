"""
Forwarding of clone progress to an external dispatcher.

dulwich reports remote progress by writing raw sideband bytes to the
`errstream` handed to porcelain.clone. ProgressRelay is such a stream: it
cuts the bytes into lines (git terminates in-place updates with a carriage
return) and sends each one as a LABEL message. Losing the client on the other
end never interrupts the clone.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from dulwich.porcelain import NoneStream

from revclone.exceptions import ClientDisconnected

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(rb"[\r\n]")


class ProgressMessageType(Enum):
    LABEL = "LABEL"


@dataclass(frozen=True)
class ProgressMessage:
    type: ProgressMessageType
    message: str


class ProgressDispatcher(Protocol):
    def send(self, message: ProgressMessage) -> None:
        """Deliver a message; raises ClientDisconnected once the client is gone."""
        ...


class ProgressRelay:
    """Binary stream that turns dulwich progress output into LABEL messages."""

    def __init__(self, dispatcher: ProgressDispatcher):
        self._dispatcher = dispatcher
        self._buffer = b""
        self._connected = True

    @property
    def connected(self) -> bool:
        return self._connected

    def write(self, data: bytes) -> int:
        if not self._connected:
            return len(data)
        self._buffer += data
        *lines, self._buffer = _LINE_BREAK.split(self._buffer)
        for line in lines:
            self._send(line)
        return len(data)

    def flush(self) -> None:
        if self._buffer and self._connected:
            self._send(self._buffer)
        self._buffer = b""

    def _send(self, raw: bytes) -> None:
        label = raw.decode("utf-8", errors="replace").strip()
        if not label or not self._connected:
            return
        try:
            self._dispatcher.send(ProgressMessage(ProgressMessageType.LABEL, label))
        except ClientDisconnected:
            logger.debug("Progress client disconnected, dropping further updates")
            self._connected = False


def progress_stream(dispatcher: Optional[ProgressDispatcher]):
    """
    Get the errstream to hand to dulwich for a clone.

    Args:
        dispatcher: Where progress labels go, or None for no reporting

    Returns:
        A ProgressRelay, or a stream that discards everything
    """
    if dispatcher is None:
        return NoneStream()
    return ProgressRelay(dispatcher)
