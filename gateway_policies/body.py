"""
Body snapshotting for policies that need to read a message body.

mitmproxy messages keep their body in memory, so reading it has no side
effects. Other HTTP objects may expose a read-once `body` stream; those are
drained into a BufferedBody and the stream is replaced with a fresh reader so
downstream consumers still see the full body.
"""

from __future__ import annotations

import io
import logging
from typing import Any
from typing import IO

from mitmproxy import http

from gateway_policies.exceptions import BodyReadError

logger = logging.getLogger(__name__)


class BufferedBody:
    """An owned copy of a message body that hands out independent readers."""

    def __init__(self, data: bytes = b"", text_mode: bool = False):
        self._data = bytes(data)
        # readers hand back str when the drained stream was a text stream
        self.text_mode = text_mode

    @classmethod
    def drain(cls, stream: IO[Any]) -> BufferedBody:
        """
        Read a stream to the end and close it.

        Raises:
            BodyReadError: If the stream cannot be read
        """
        try:
            data = stream.read()
        except (OSError, ValueError) as e:
            raise BodyReadError(f"failed to read body: {e}") from e
        finally:
            close = getattr(stream, "close", None)
            if callable(close):
                close()

        if isinstance(data, str):
            return cls(data.encode("utf-8"), text_mode=True)
        return cls(data or b"")

    @property
    def data(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def reader(self) -> io.BytesIO | io.StringIO:
        """Return a new reader positioned at the start of the body."""
        if self.text_mode:
            return io.StringIO(self.text())
        return io.BytesIO(self._data)

    def text(self, encoding: str = "utf-8") -> str:
        return self._data.decode(encoding, errors="replace")


def _has_stream(obj: Any) -> bool:
    return obj is not None and callable(getattr(obj, "read", None))


def snapshot_body(message: Any) -> str | None:
    """
    Return the body of `message` as text without consuming it.

    Args:
        message: mitmproxy http.Request/Response, or any object with a
            file-like `body` attribute

    Returns:
        Body text, or None if the message has no (buffered) body

    Raises:
        BodyReadError: If a read-once stream fails mid-read. The stream is
            closed and left on the message partly consumed.
    """
    if message is None:
        return None

    if isinstance(message, http.Message):
        if message.raw_content is None:
            # Streamed message, body was never buffered
            logger.debug("Message body is streamed, skipping body snapshot")
            return None
        return message.get_text(strict=False)

    stream = getattr(message, "body", None)
    if not _has_stream(stream):
        return None

    buffered = BufferedBody.drain(stream)
    message.body = buffered.reader()
    return buffered.text()
