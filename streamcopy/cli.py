import argparse
import json
import logging
import signal
import sys
from types import FrameType
from typing import Optional

import streamcopy
from streamcopy.copiers import DEFAULT_STRATEGY, STRATEGIES, get_copier
from streamcopy.core.copier_interface import Copier
from streamcopy.core.errors import CopyError, WriteError
from streamcopy.utils.io_streams import silence_stdout, standard_streams

COPIER: Copier
CLI_ARGS: argparse.Namespace

logger = logging.getLogger("streamcopy.cli")


def finalize() -> bool:
    """
    Dump the statistics if requested. Returns False when the stats file could not be written.
    """
    if not CLI_ARGS.dump_stats:
        return True
    stats = COPIER.get_statistics()
    record = {
        "strategy": CLI_ARGS.strategy,
        "params": COPIER.get_jsonable_vars(exclude_keys={"name"}),
        **stats.get_human_readable_values(),
    }
    try:
        with open(CLI_ARGS.dump_stats, "a") as fp:
            fp.write(json.dumps(record) + "\n")
    except OSError as e:
        logger.debug(f"Dumping statistics to {CLI_ARGS.dump_stats} failed", exc_info=True)
        print(f"streamcopy: cannot write stats: {e}", file=sys.stderr)
        return False
    return True


# Typing of signal handler: https://github.com/python/typing/discussions/1042
def sigint_handler(signum: int, frame: Optional[FrameType]) -> None:
    print(file=sys.stderr)
    finalize()
    sys.exit(130)


def argparser() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="streamcopy",
        description="Copy standard input to standard output, byte for byte.",
    )
    parser.add_argument(
        "--strategy",
        "-s",
        default=DEFAULT_STRATEGY,
        choices=list(STRATEGIES),
        help=f"Buffering strategy used for the copy. Defaults to `{DEFAULT_STRATEGY}`.\
            The output is identical for every strategy.",
    )
    parser.add_argument(
        "--dump-stats",
        default=None,
        metavar="<path to stats.json>",
        help="Dump statistics to file. If the file exists, it will be appended.",
    )
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=streamcopy.__version__,
    )
    args = parser.parse_args()
    return args


def main() -> None:
    global COPIER, CLI_ARGS
    CLI_ARGS = argparser()
    COPIER = get_copier(CLI_ARGS.strategy)
    signal.signal(signal.SIGINT, sigint_handler)

    try:
        with standard_streams(unbuffered=COPIER.unbuffered) as (reader, writer):
            COPIER.copy(reader, writer)
    except CopyError as e:
        logger.debug(f"Copy with {COPIER.name} abandoned", exc_info=True)
        print(f"streamcopy: {e}", file=sys.stderr)
        if isinstance(e, WriteError):
            silence_stdout()
        finalize()
        sys.exit(1)
    if not finalize():
        sys.exit(1)


if __name__ == "__main__":
    main()
