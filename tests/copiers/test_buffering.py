import io
import time

import numpy as np
import pytest

from streamcopy import BufferedCopier, ByteCopier, LineCopier, UnbufferedCopier
from streamcopy.copiers import STRATEGIES


def random_bytes(size: int, seed: int = 0) -> bytes:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=size, dtype=np.uint8).tobytes()


class TrickleReader(io.RawIOBase):
    """Returns at most `step` bytes per read, like a slow pipe."""

    def __init__(self, data: bytes, step: int) -> None:
        self.data = data
        self.step = step
        self.pos = 0

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        n = min(len(b), self.step, len(self.data) - self.pos)
        b[:n] = self.data[self.pos : self.pos + n]
        self.pos += n
        return n


@pytest.mark.parametrize("strategy", list(STRATEGIES))
@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"ABC",
        b"\n",
        b"\n\n",
        b"Line1\nLine2\nLine3",
        b"Line1\r\nLine2\r\n",
        b"no delimiter at all",
        b"\x00\xff\x80\n\xfe",
        "ほうじ茶".encode("Shift-JIS"),
    ],
)
def test_identity(strategy, data):
    copier = STRATEGIES[strategy]()
    assert copier(data) == data


@pytest.mark.parametrize("strategy", list(STRATEGIES))
def test_larger_than_buffer(strategy):
    data = random_bytes(20_000)
    copier = STRATEGIES[strategy]()
    writer = io.BytesIO()
    stats = copier.copy(io.BytesIO(data), writer)

    assert writer.getvalue() == data
    assert stats.input_bytes == stats.output_bytes == 20_000


@pytest.mark.parametrize("strategy", list(STRATEGIES))
def test_repeated_runs_are_identical(strategy):
    data = random_bytes(5_000, seed=1)
    copier = STRATEGIES[strategy]()
    assert copier(data) == copier(data) == data


@pytest.mark.parametrize("strategy", list(STRATEGIES))
def test_partial_reads(strategy):
    data = random_bytes(1_000, seed=2)
    writer = io.BytesIO()
    STRATEGIES[strategy]().copy(TrickleReader(data, step=7), writer)
    assert writer.getvalue() == data


def test_byte_copier_one_byte_per_call():
    stats = ByteCopier().copy(io.BytesIO(b"ABC"), io.BytesIO())
    assert stats.read_num == 3
    assert stats.write_num == 3


def test_buffered_copier_chunks():
    stats = BufferedCopier().copy(io.BytesIO(random_bytes(20_000)), io.BytesIO())
    # 16384 + 3616
    assert stats.read_num == 2


def test_buffered_copier_small_buffer():
    data = random_bytes(1_000, seed=3)
    copier = BufferedCopier(buffer_size=3)
    writer = io.BytesIO()
    stats = copier.copy(io.BytesIO(data), writer)
    assert writer.getvalue() == data
    assert stats.read_num == 334


def test_buffered_copier_reader_without_readinto():
    class ReadOnly:
        def __init__(self, data: bytes) -> None:
            self.inner = io.BytesIO(data)

        def read(self, size: int) -> bytes:
            return self.inner.read(size)

    data = random_bytes(40_000, seed=4)
    writer = io.BytesIO()
    BufferedCopier().copy(ReadOnly(data), writer)  # type: ignore[arg-type]
    assert writer.getvalue() == data


@pytest.mark.parametrize("size", [0, -1])
def test_invalid_sizes(size):
    with pytest.raises(ValueError):
        BufferedCopier(buffer_size=size)
    with pytest.raises(ValueError):
        LineCopier(read_size=size)
    with pytest.raises(ValueError):
        UnbufferedCopier(read_size=size)


def test_line_copier_keeps_delimiters():
    writer = io.BytesIO()
    stats = LineCopier().copy(io.BytesIO(b"Line1\nLine2\n\nLine3"), writer)
    assert writer.getvalue() == b"Line1\nLine2\n\nLine3"
    assert stats.read_num == 4


def test_line_copier_records():
    copier = LineCopier()
    records = list(copier.read_chunks(io.BytesIO(b"a\nbb\n\nccc")))
    assert records == [b"a\n", b"bb\n", b"\n", b"ccc"]


def test_line_copier_without_delimiter_is_one_record():
    records = list(LineCopier().read_chunks(io.BytesIO(b"SingleLine")))
    assert records == [b"SingleLine"]


def test_line_copier_record_spanning_reads():
    records = list(LineCopier(read_size=4).read_chunks(io.BytesIO(b"abcdefghij\nkl\n")))
    assert records == [b"abcdefghij\n", b"kl\n"]


def test_line_copier_multibyte_delimiter_across_reads():
    data = b"one\r\ntwo\r\nthree"
    copier = LineCopier(delimiter=b"\r\n", read_size=4)
    assert list(copier.read_chunks(io.BytesIO(data))) == [b"one\r\n", b"two\r\n", b"three"]
    assert copier(data) == data


def test_line_copier_empty_delimiter():
    with pytest.raises(ValueError):
        LineCopier(delimiter=b"")


def test_unbuffered_copier_flushes_every_chunk():
    class CountingWriter(io.BytesIO):
        flushes = 0

        def flush(self) -> None:
            self.flushes += 1
            super().flush()

    writer = CountingWriter()
    UnbufferedCopier(read_size=4).copy(io.BytesIO(b"0123456789"), writer)
    assert writer.getvalue() == b"0123456789"
    # one per chunk and the final one
    assert writer.flushes == 4


def test_unbuffered_flag():
    assert UnbufferedCopier.unbuffered
    assert not BufferedCopier.unbuffered


def test_line_copier_long_record_is_linear():
    def best_time(data: bytes) -> float:
        timings = []
        for _ in range(3):
            start = time.perf_counter()
            assert LineCopier()(data) == data
            timings.append(time.perf_counter() - start)
        return min(timings)

    small = best_time(b"x" * (4 * 1024 * 1024))
    large = best_time(b"x" * (16 * 1024 * 1024))
    # 4x the input; a rescan of the pending record per read would be about 16x
    assert large / small < 8


def test_line_copier_delimiter_at_read_boundary():
    # every split of the two-byte delimiter across reads
    data = b"ab\r\ncd\r\ne"
    for read_size in range(1, len(data) + 1):
        copier = LineCopier(delimiter=b"\r\n", read_size=read_size)
        records = list(copier.read_chunks(io.BytesIO(data)))
        assert records == [b"ab\r\n", b"cd\r\n", b"e"], read_size
