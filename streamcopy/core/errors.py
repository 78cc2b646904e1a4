from typing import Optional


class CopyError(Exception):
    """
    Base class of the errors that abandon a copy.

    The underlying `OSError` is kept as `__cause__` and in `self.error`.
    """

    action = "copy"

    def __init__(
        self, error: Optional[OSError] = None, copied_bytes: Optional[int] = None
    ) -> None:
        self.error = error
        self.copied_bytes = copied_bytes
        super().__init__(self._message())

    def _message(self) -> str:
        message = f"{self.action} failed"
        if self.copied_bytes is not None:
            message += f" after {self.copied_bytes} bytes"
        if self.error is not None:
            message += f": {self.error}"
        return message


class ReadError(CopyError):
    """Any failure of the input stream other than a clean end-of-stream."""

    action = "read"


class WriteError(CopyError):
    """Any failure while writing to or flushing the output stream."""

    action = "write"
