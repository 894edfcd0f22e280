"""
Incremental splitting of a chunked byte stream into text lines.

Lines end on ``\\n``, ``\\r\\n`` or a bare ``\\r``. Chunks may cut a line, a
``\\r\\n`` pair or a multi-byte UTF-8 character anywhere; the decoder keeps
the unfinished tail in a carry buffer until the next chunk completes it.
"""

from __future__ import annotations

import logging
from typing import Iterator, Union

from sse_stream._errors import DecodeError

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview]

_NEWLINE_BYTES = b"\r\n"
_BOM = "\ufeff"


class LineDecoder:
    """
    Turns byte chunks into complete, terminator-stripped lines.

    Splitting works on raw bytes: ``\\r`` and ``\\n`` never appear inside a
    multi-byte UTF-8 sequence, so an incomplete character can only sit in
    the unfinished last line, which stays buffered. Each complete line is
    then decoded as strict UTF-8.

    A chunk ending on ``\\r`` is ambiguous (bare ``\\r`` or first half of
    ``\\r\\n``). That byte is held back until more input or ``flush()``
    settles it.

    A single UTF-8 byte order mark at the very start of the stream is
    dropped from the first line; any later U+FEFF is kept as text.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()
        self._trailing_cr = False
        self._first_line = True
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def decode(self, chunk: BytesLike) -> Iterator[str]:
        """
        Feed the next chunk and return the lines it completes.

        The carry buffer is updated immediately; UTF-8 decoding happens as the
        returned iterator is consumed, so lines before an invalid one are
        produced before ``DecodeError`` is raised.

        Args:
            chunk: The next raw bytes of the body, of any size.

        Returns:
            An iterator over the lines completed by this chunk.
        """
        return self._decode_lines(self._split(bytes(chunk)))

    def flush(self) -> Iterator[str]:
        """
        Signal end of stream and return the final line, if any.

        A held ``\\r`` is resolved as a bare terminator, so the buffered text
        before it (possibly empty) becomes the last line.
        """
        if self._closed:
            return iter(())
        self._closed = True

        if not self._buffer and not self._trailing_cr:
            return iter(())

        lines = [bytes(self._buffer)]
        self._buffer = bytearray()
        self._trailing_cr = False
        return self._decode_lines(lines)

    def _split(self, chunk: bytes) -> list[bytes]:
        if self._closed:
            return []

        # Un \r pendiente se antepone al siguiente chunk.
        if self._trailing_cr:
            chunk = b"\r" + chunk
            self._trailing_cr = False
        if chunk.endswith(b"\r"):
            self._trailing_cr = True
            chunk = chunk[:-1]

        if not chunk:
            return []

        trailing_newline = chunk[-1] in _NEWLINE_BYTES
        # bytes.splitlines only splits on \n, \r\n and \r.
        lines = chunk.splitlines()

        if len(lines) == 1 and not trailing_newline:
            self._buffer.extend(lines[0])
            return []

        if self._buffer:
            self._buffer.extend(lines[0])
            lines[0] = bytes(self._buffer)
            self._buffer = bytearray()

        if not trailing_newline:
            self._buffer.extend(lines.pop())

        return lines

    def _decode_lines(self, lines: list[bytes]) -> Iterator[str]:
        for raw in lines:
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                self._closed = True
                self._buffer = bytearray()
                self._trailing_cr = False
                logger.debug("Invalid UTF-8 in event stream line: %s", exc.reason)
                raise DecodeError(
                    message="invalid UTF-8 byte sequence in event stream",
                    line=raw,
                    reason=exc.reason,
                ) from exc

            if self._first_line:
                self._first_line = False
                if line.startswith(_BOM):
                    line = line[len(_BOM):]
            yield line
