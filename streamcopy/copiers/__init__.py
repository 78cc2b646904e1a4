# flake8: noqa
"""
Copy strategies.

All of them copy standard input to standard output byte for byte; they only differ in buffering.
- `byte` -- `ByteCopier`, one byte per call.
- `buffered` -- `BufferedCopier`, a reused 16 KiB buffer. The default.
- `line` -- `LineCopier`, one delimited record per call, the delimiter included.
- `unbuffered` -- `UnbufferedCopier`, raw streams, every read written and flushed at once.
"""
import inspect
from typing import Any, Dict, Type

from streamcopy.copiers.buffering import (
    BufferedCopier,
    ByteCopier,
    LineCopier,
    UnbufferedCopier,
)
from streamcopy.core.copier_interface import Copier

STRATEGIES: Dict[str, Type[Copier]] = {
    "byte": ByteCopier,
    "buffered": BufferedCopier,
    "line": LineCopier,
    "unbuffered": UnbufferedCopier,
}

DEFAULT_STRATEGY = "buffered"


def get_copier(name: str = DEFAULT_STRATEGY, **kwargs: Any) -> Copier:
    """
    Build the copy strategy registered under `name`.

    Raises:
        KeyError: `name` is not a known strategy.
        TypeError: a keyword argument is not a parameter of the strategy.
    """
    try:
        copier_cls = STRATEGIES[name]
    except KeyError:
        raise KeyError(
            f"Unknown strategy {name!r}. Choose from: {', '.join(STRATEGIES)}"
        ) from None
    params = [
        p.name
        for p in inspect.signature(copier_cls.__init__).parameters.values()
        if p.name != "self" and p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
    ]
    unknown = sorted(set(kwargs) - set(params))
    if unknown:
        raise TypeError(
            f"{copier_cls.__name__} got unexpected arguments: {', '.join(unknown)}."
            f" Accepted: {', '.join(params) or 'none'}"
        )
    return copier_cls(**kwargs)
