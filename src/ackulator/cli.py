"""
Run programs from the command line.
"""

import argparse
import logging
import sys
import typing

import ackulator
from ackulator.core import data
from ackulator.core import describe
from ackulator.core import errors
from ackulator.core import instance
from ackulator.core import iotools
from ackulator.core import prelude


logger = logging.getLogger(__name__)


def run(
    sources: typing.Iterable[str],
    session: instance.Instance,
) -> int:
    """Execute each program in `sources`, stopping at the first failure.

    Returns
    -------
    int
        The exit status: 0 on success, 1 if a program failed.
    """
    for source in sources:
        try:
            session.execute(source)
        except errors.AckulatorError as err:
            print(f"error: {err}", file=sys.stderr)
            return 1
    return 0


def _print_description(value: data.Data, session: instance.Instance) -> None:
    print(describe.describe(value, session))


def main(argv: typing.Sequence[str]=None) -> int:
    """Evaluate ackulator programs.

    Each FILE runs in the same session, in order. With no files, the program
    is read from standard input. Settings in ackulator.ini provide defaults
    for the lookup policy and for whether to load the standard prelude.
    """
    parser = argparse.ArgumentParser(
        prog='ackulator',
        description=main.__doc__,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        'files',
        help="program files to run (default: standard input)",
        nargs='*',
        metavar='FILE',
    )
    parser.add_argument(
        '--no-prelude',
        help="start without the standard units and constants",
        action='store_true',
    )
    parser.add_argument(
        '--prefer-meta',
        help="resolve shared names to units and classes first",
        action='store_true',
    )
    parser.add_argument(
        '-v',
        '--verbose',
        help="log declarations and failures",
        action='store_true',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f"%(prog)s {ackulator.__version__}",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(name)s: %(levelname)s: %(message)s',
    )
    environment = ackulator.Environment()
    ambiguity = (
        data.Ambiguity.PREFER_META if args.prefer_meta
        else environment.ambiguity
    )
    session = instance.Instance(ambiguity, on_show=_print_description)
    if environment.prelude and not args.no_prelude:
        prelude.load(session)
        logger.debug("Loaded the standard prelude")
    try:
        sources = [iotools.read_source(path) for path in args.files]
    except iotools.NonExistentPathError as err:
        print(f"error: {err}", file=sys.stderr)
        return 2
    if not sources:
        sources = [sys.stdin.read()]
    return run(sources, session)


if __name__ == '__main__':
    sys.exit(main())
