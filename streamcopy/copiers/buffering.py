"""
Copy strategies that differ only in how the input is buffered.
Every strategy writes out exactly the bytes it read, in order.
"""

import errno
from typing import Any, BinaryIO, Iterator

from streamcopy.core.copier_interface import Chunk, Copier

DEFAULT_BUFFER_SIZE = 16 * 1024


class ByteCopier(Copier):
    """
    Transfers one byte per read and write call.

    The simplest strategy with the highest per-byte overhead. The standard
    streams stay buffered underneath, so the calls do not hit the system
    one by one.
    """

    def read_chunks(self, reader: BinaryIO) -> Iterator[Chunk]:
        while True:
            byte = self.read_block(reader, 1)
            if not byte:
                return
            yield byte


class BufferedCopier(Copier):
    """
    Reuses one fixed-size buffer across iterations and writes only the part
    of it that each read filled.

    >>> BufferedCopier(buffer_size=4)(b"0123456789")
    b'0123456789'
    """

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self.buffer_size = buffer_size
        self._buffer = bytearray(buffer_size)

    def read_chunks(self, reader: BinaryIO) -> Iterator[Chunk]:
        view = memoryview(self._buffer)
        readinto = getattr(reader, "readinto", None)
        while True:
            if readinto is None:
                data = self.read_block(reader, self.buffer_size)
                if not data:
                    return
                yield data
                continue

            n = readinto(view)
            if n is None:
                raise BlockingIOError(errno.EAGAIN, "input stream would block")
            if n == 0:
                return
            yield view[:n]


class LineCopier(Copier):
    """
    Splits the input at a delimiter and writes one record at a time.

    The delimiter stays attached to its record, so the output is the input.
    A last record without a delimiter is written unchanged.

    >>> LineCopier()(b"a\\nb\\nc")
    b'a\\nb\\nc'
    """

    def __init__(
        self,
        delimiter: bytes = b"\n",
        read_size: int = DEFAULT_BUFFER_SIZE,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        if read_size <= 0:
            raise ValueError(f"read_size must be positive, got {read_size}")
        self.delimiter = bytes(delimiter)
        self.read_size = read_size

    def read_chunks(self, reader: BinaryIO) -> Iterator[Chunk]:
        pending = bytearray()
        while True:
            block = self.read_block(reader, self.read_size)
            if not block:
                break
            # pending holds no complete delimiter, so only its tail can start one
            pos = max(0, len(pending) - len(self.delimiter) + 1)
            pending += block
            start = 0
            while True:
                idx = pending.find(self.delimiter, pos)
                if idx < 0:
                    break
                end = idx + len(self.delimiter)
                yield bytes(pending[start:end])
                start = pos = end
            del pending[:start]

        if pending:
            yield bytes(pending)


class UnbufferedCopier(Copier):
    """
    Writes each read result immediately and flushes it, without holding
    anything back. Asks for the raw standard streams.
    """

    unbuffered = True

    def __init__(self, read_size: int = DEFAULT_BUFFER_SIZE, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        if read_size <= 0:
            raise ValueError(f"read_size must be positive, got {read_size}")
        self.read_size = read_size

    def read_chunks(self, reader: BinaryIO) -> Iterator[Chunk]:
        # read1 returns what is available instead of waiting for a full block
        read = getattr(reader, "read1", None)
        while True:
            if read is None:
                data = self.read_block(reader, self.read_size)
            else:
                data = read(self.read_size)
                if data is None:
                    raise BlockingIOError(errno.EAGAIN, "input stream would block")
            if not data:
                return
            yield data

    def write_chunk(self, writer: BinaryIO, chunk: Chunk) -> None:
        super().write_chunk(writer, chunk)
        writer.flush()
