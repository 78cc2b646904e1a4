import logging
import os
import sys
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Tuple

from streamcopy.core.errors import WriteError

logger = logging.getLogger(__name__)


def _binary(stream: object, unbuffered: bool) -> BinaryIO:
    binary = getattr(stream, "buffer", stream)
    if unbuffered:
        binary = getattr(binary, "raw", binary)
    return binary  # type: ignore[return-value]


def stdin_stream(unbuffered: bool = False) -> BinaryIO:
    """
    Binary layer of standard input.

    The text layer of sys.stdin is skipped because the input is arbitrary
    bytes: no decoding and no newline translation may happen.
    With `unbuffered`, the raw file under the buffer is returned.
    Nothing has been read through the buffer at that point, so no bytes are lost.
    """
    return _binary(sys.stdin, unbuffered)


def stdout_stream(unbuffered: bool = False) -> BinaryIO:
    """
    Binary layer of standard output. See `stdin_stream`.
    """
    return _binary(sys.stdout, unbuffered)


@contextmanager
def standard_streams(unbuffered: bool = False) -> Iterator[Tuple[BinaryIO, BinaryIO]]:
    """
    Yield the binary standard input and output and flush the output on every exit path.

    A failed flush raises `WriteError` when the body finished cleanly.
    When the body is already failing, the flush error is only logged
    so that the original error reaches the caller.
    """
    reader = stdin_stream(unbuffered)
    writer = stdout_stream(unbuffered)
    try:
        yield reader, writer
    except BaseException:
        try:
            writer.flush()
        except (OSError, ValueError) as e:
            logger.debug(f"Flushing stdout failed while handling another error: {e!r}")
        raise
    else:
        try:
            writer.flush()
        except OSError as e:
            raise WriteError(e) from e


def silence_stdout() -> None:
    """
    Point the stdout file descriptor at the null device.

    After a broken pipe the interpreter still flushes sys.stdout on exit,
    which raises again and prints "Exception ignored" to stderr.
    Anything left in the buffer has no reader anymore.
    """
    try:
        fd = sys.stdout.fileno()
    except (OSError, ValueError, AttributeError) as e:
        logger.debug(f"stdout has no file descriptor to redirect: {e!r}")
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, fd)
    finally:
        os.close(devnull)
