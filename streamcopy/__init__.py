"""
Copy a byte stream to another, unchanged, with a choice of buffering strategies.
"""

from .copiers import STRATEGIES, get_copier
from .copiers.buffering import BufferedCopier, ByteCopier, LineCopier, UnbufferedCopier
from .core.copier_interface import Copier
from .core.errors import CopyError, ReadError, WriteError
from .core.models import CopyStatistics

__version__ = "0.1.0"

__all__ = [
    "core",
    "copiers",
    "utils",
    "Copier",
    "ByteCopier",
    "BufferedCopier",
    "LineCopier",
    "UnbufferedCopier",
    "CopyStatistics",
    "CopyError",
    "ReadError",
    "WriteError",
    "STRATEGIES",
    "get_copier",
]
