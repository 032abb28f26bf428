# coding: utf-8
"""CLI front end to add lots, basis, and gains to ledger-cli data.


INSTALL
-------
q.v. package README.  The package requires Python v3.7+ and tablib.

CONFIGURE
---------
We look for the config file in ~/.config/lotter/lotter.cfg (q.v. lotter.config).
Command line options override it.

USE
---
Enter trades into a ledger-cli journal, e.g.

    2016-01-01 Bought ABC
        Assets:Crypto          100 ABC @ 0.02 USD
        Equity:Cash

    2017-01-01 Sell some ABC
        Assets:Crypto          -1 ABC @ 1 USD
        Assets:Exchange

Then run the `lot` operation, and pipe the result to ledger-cli:

    lotter -f journal.ledger lot | ledger -f - bal

Trades priced in currencies other than the base can first be converted with
the `base` operation, using prices found in the journal:

    lotter -f journal.ledger base | lotter -f - lot

To share a journal (e.g. a bug report) without revealing account names:

    lotter -f journal.ledger obfuscate --salt <secret>
"""
# stdlib imports
import argparse
import contextlib
from argparse import ArgumentParser, _SubParsersAction
import logging
import sys
from typing import ContextManager, Iterable, List, Optional, TextIO, Tuple

# Local imports
from lotter import CONFIG
from lotter.errors import LotterError, InternalError, ConfigurationError
from lotter import annotate, base, obfuscate, report, scan
from lotter.inventory import Ledger, get_sort


logger = logging.getLogger(__name__)


def open_journal(args: argparse.Namespace) -> ContextManager[TextIO]:
    """Open the journal for a with statement; stdin is left open afterwards."""
    if args.file == "-":
        return contextlib.nullcontext(sys.stdin)
    try:
        return open(args.file, "r")
    except OSError as err:
        raise ConfigurationError(f"failed to open ledger file ({args.file!r}): {err}")


def write_lines(lines: Iterable[str], out: TextIO) -> None:
    for line in lines:
        out.write(line + "\n")


def make_ledger(args: argparse.Namespace) -> Ledger:
    """Validate configuration; create an empty Ledger.

    Raises:
        ConfigurationError: for missing base currency or unknown order.
    """
    if args.order is not None:
        CONFIG["lot"]["order"] = args.order
    if args.prune is not None:
        CONFIG["lot"]["prune"] = str(args.prune)
    return Ledger(
        base=CONFIG.base_currency, sort=get_sort(CONFIG.order), prune=CONFIG.prune
    )


def lot(args: argparse.Namespace) -> None:
    """Add inventory, basis, and gain splits to ledger-cli data.

    Args:
        args: argparse.Namespace instance populated with parsed CLI arguments.
    """
    ledger = make_ledger(args)
    with open_journal(args) as journal:
        write_lines(annotate.annotate(scan.scan(journal), ledger), sys.stdout)

    if args.lots:
        dataset = report.flatten_ledger(ledger)
        with open(args.lots, "w") as csvfile:
            csvfile.write(dataset.csv)


def convert_base(args: argparse.Namespace) -> None:
    """Convert price/cost information to base currency.

    Args:
        args: argparse.Namespace instance populated with parsed CLI arguments.
    """
    currency = CONFIG.base_currency
    begin = scan.parse_date(args.begin) if args.begin else None
    with open_journal(args) as journal:
        write_lines(base.convert(scan.scan(journal), currency, begin), sys.stdout)


def obfuscate_names(args: argparse.Namespace) -> None:
    """Convert account names, concealing potentially sensitive data.

    Args:
        args: argparse.Namespace instance populated with parsed CLI arguments.
    """
    prune = args.prune if args.prune is not None else CONFIG.getint("obfuscate", "prune")
    salt = args.salt if args.salt is not None else CONFIG.get("obfuscate", "salt")
    with open_journal(args) as journal:
        write_lines(obfuscate.obfuscate(scan.scan(journal), prune, salt), sys.stdout)


def make_argparser() -> Tuple[ArgumentParser, _SubParsersAction]:
    """Return subparsers along with the ArgumentParer, so the latter can be extended.
    """
    argparser = ArgumentParser(prog="lotter", description='Add "lots" to ledger-cli data.')
    argparser.add_argument(
        "-f", "--file", default="-", help="file to parse, use '-' for stdin"
    )
    argparser.add_argument(
        "--base", default=None, help="asset used for cost basis and gains"
    )
    argparser.add_argument(
        "--verbose", "-v", action="count", default=0, help="-vv for DEBUG"
    )
    argparser.set_defaults(func=None)
    subparsers = argparser.add_subparsers()

    lot_parser = subparsers.add_parser(
        "lot", help="Add inventory, basis, and gain splits to ledger-cli data"
    )
    lot_parser.add_argument(
        "--order",
        default=None,
        choices=["fifo", "lifo"],
        help="order in which lot inventory is consumed",
    )
    lot_parser.add_argument(
        "--prune",
        type=int,
        default=None,
        help="account name depth of account-specific lots",
    )
    lot_parser.add_argument(
        "--lots", default=None, help="CSV file to write remaining lots to"
    )
    lot_parser.set_defaults(func=lot, operation="lot")

    base_parser = subparsers.add_parser(
        "base", help="Convert price/cost information to base currency"
    )
    base_parser.add_argument(
        "-b", "--begin", default=None, help="Begin date for conversion (included)"
    )
    base_parser.set_defaults(func=convert_base, operation="base")

    obfuscate_parser = subparsers.add_parser(
        "obfuscate", help="Convert account names, concealing sensitive data"
    )
    obfuscate_parser.add_argument(
        "--prune",
        type=int,
        default=None,
        help="account name depth where obfuscation begins",
    )
    obfuscate_parser.add_argument(
        "--salt",
        default=None,
        help="make hashes unique and reproducable only when salt is known",
    )
    obfuscate_parser.set_defaults(func=obfuscate_names, operation="obfuscate")

    return argparser, subparsers


def configure_logging(args: argparse.Namespace) -> None:
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    operation = getattr(args, "operation", "")
    logging.basicConfig(
        level=level, format=f"lotter {operation}: %(message)s", stream=sys.stderr
    )


def run(argparser: ArgumentParser, argv: Optional[List[str]] = None) -> int:
    """Parse args and pass them to the indicated function.

    Args:
        argparser: the ArgumentParser instance returned by make_argparser().
        argv: command line arguments; sys.argv[1:] by default.

    Returns:
        Exit status.
    """
    args = argparser.parse_args(argv)

    if not args.func:
        argparser.print_help()
        return 2

    configure_logging(args)
    if args.base is not None:
        CONFIG["books"]["base_currency"] = args.base

    try:
        args.func(args)
    except InternalError:
        raise
    except LotterError as err:
        logger.error("%s", err)
        return 1
    return 0


def main() -> None:
    argparser, subparsers = make_argparser()
    sys.exit(run(argparser))


if __name__ == "__main__":
    main()
