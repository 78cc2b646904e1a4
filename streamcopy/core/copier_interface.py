import errno
import io
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, Iterator, Optional, Set, Union

from streamcopy.core.errors import CopyError, ReadError, WriteError
from streamcopy.core.models import CopyStatistics

Chunk = Union[bytes, bytearray, memoryview]


def _is_jsonable(data: Any) -> bool:
    if data is None:
        return True
    elif isinstance(data, (bool, int, float, str)):
        return True
    return False


class Copier(ABC):
    """
    Base class for all copy strategies.

    A strategy only decides how the input is cut into chunks, in
    `read_chunks`. Writing every chunk in order, flushing the output and
    turning I/O failures into `ReadError` / `WriteError` is done here.

    When this class is called, copy the given bytes through the strategy:
    ```python
    assert BufferedCopier()(b"ABC") == b"ABC"
    ```
    """

    # Whether the strategy wants the raw streams under the standard buffers.
    unbuffered: bool = False

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self.name = self.__class__.__name__
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self._statistics = CopyStatistics(name=self.name)

    @abstractmethod
    def read_chunks(self, reader: BinaryIO) -> Iterator[Chunk]:
        """
        Definition of the buffering strategy.

        Yield the chunks read from `reader` until end-of-stream. A chunk is
        written out before the next one is requested, so a strategy may
        yield views into a buffer it reuses.

        Parameters
        ----------
        reader : BinaryIO
            Readable binary stream

        Returns
        -------
        Iterator[Chunk]
            The chunks in the order they were read
        """

    def read_block(self, reader: BinaryIO, size: int) -> bytes:
        """
        Read up to `size` bytes. An empty result is end-of-stream; a raw
        non-blocking stream returning `None` is reported as a failure.
        """
        data = reader.read(size)
        if data is None:
            raise BlockingIOError(errno.EAGAIN, "input stream would block")
        return data

    def write_chunk(self, writer: BinaryIO, chunk: Chunk) -> None:
        """
        Write the whole chunk. Raw streams may accept fewer bytes than
        offered, so the rest is written again until nothing is left.
        """
        view = memoryview(chunk)
        while view:
            written = writer.write(view)
            if written is None:
                raise BlockingIOError(errno.EAGAIN, "output stream would block")
            if written == 0:
                raise OSError(errno.EIO, "output stream accepted no bytes")
            view = view[written:]

    def copy(self, reader: BinaryIO, writer: BinaryIO) -> CopyStatistics:
        """
        Copy everything `reader` yields until end-of-stream into `writer`.

        Raises
        ------
        ReadError
            The input stream failed. Nothing is written after the failure.
        WriteError
            Writing or flushing the output stream failed.

        Returns
        -------
        CopyStatistics
            Statistics of this copy only. They are also added to the
            statistics kept by this copier.
        """
        stats = CopyStatistics(name=self.name)
        start_ns = time.perf_counter_ns()
        chunks = iter(self.read_chunks(reader))
        try:
            while True:
                try:
                    chunk = next(chunks)
                except StopIteration:
                    break
                except OSError as e:
                    raise ReadError(e, stats.output_bytes) from e
                stats.read_num += 1
                stats.input_bytes += len(chunk)

                try:
                    self.write_chunk(writer, chunk)
                except OSError as e:
                    raise WriteError(e, stats.output_bytes) from e
                stats.write_num += 1
                stats.output_bytes += len(chunk)

            try:
                writer.flush()
            except OSError as e:
                raise WriteError(e, stats.output_bytes) from e
        except CopyError:
            stats.errors += 1
            raise
        finally:
            close = getattr(chunks, "close", None)
            if close is not None:
                close()
            stats.cumulative_time_ns += time.perf_counter_ns() - start_ns
            self._statistics.update(stats)
            self.logger.debug(
                f"{self.name}: {stats.input_bytes} bytes in, {stats.output_bytes} bytes out"
                f" ({stats.read_num} reads, {stats.errors} errors)"
            )
        return stats

    def __call__(self, data: bytes) -> bytes:
        reader = io.BytesIO(data)
        writer = io.BytesIO()
        self.copy(reader, writer)
        return writer.getvalue()

    def get_statistics(self) -> CopyStatistics:
        """
        Get the statistics accumulated over every copy done by this copier.
        """
        return self._statistics

    def get_statistics_map(self) -> Dict[str, Any]:
        return self._statistics.to_dict()

    def reset_statistics(self) -> None:
        self._statistics.reset()

    def get_jsonable_vars(self, exclude_keys: Optional[Set[str]] = None) -> Dict[str, Any]:
        """
        Get the member variable of this copier.
        Eligible variables are primitive types; [bool, int, float, str, None],
        and the name of the variable not starts with the underscore; `_`.
        """
        if exclude_keys is None:
            exclude_keys = set()
        return {
            k: v
            for k, v in vars(self).items()
            if (_is_jsonable(v) and (k not in exclude_keys) and (not k.startswith("_")))
        }
