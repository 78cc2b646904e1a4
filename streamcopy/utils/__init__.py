# flake8: noqa
"""
Utilities used by the CLI tool.

- `streamcopy.utils.io_streams` -- Acquires the binary layer of the standard streams and makes sure the output is flushed on every exit path.
"""
