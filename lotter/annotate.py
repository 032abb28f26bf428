# coding: utf-8
"""The `lot` operation: add inventory, basis, and gain splits to a journal.

Each lot is a ledger-cli "account", named by convention with prefix "Lot",
followed by the qualifier, the date the lot was created, and inventory and
cost information.

A transaction is a purchase when it has a split for a positive amount with
cost information associated with it, e.g. "100 ABC @ 0.02 USD" or
"100 ABC @@ 2 USD".  Similarly it's a sale when the amount is negative and
has a cost associated.  To these transactions we add splits that create lots,
or "consume" inventory (and basis) acquired earlier.
"""

__all__ = ["annotate"]


# stdlib imports
import logging
from typing import Iterable, Iterator


# local imports
from lotter import render
from lotter.errors import LotterError, InternalError
from lotter.inventory.api import Ledger
from lotter.scan import PAYEE_NOT_FOUND, TxLines


logger = logging.getLogger(__name__)


def annotate(blocks: Iterable[TxLines], ledger: Ledger) -> Iterator[str]:
    """Book each transaction to the Ledger; yield output lines.

    Blocks that aren't transactions pass through unchanged.  Every block is
    followed by a blank line.

    Args:
        blocks: journal blocks in file order, e.g. from scan.scan().
        ledger: lot queues, mutated as transactions are booked.

    Raises:
        ParseError, TransactionError: at the first transaction that can't be
            booked; nothing more is processed.
    """
    for txlines in blocks:
        payee, index = txlines.payee()
        if index == PAYEE_NOT_FOUND:
            # not a transaction (maybe a comment)
            yield from txlines.lines
            yield ""
            continue

        logger.info("transaction: %s", payee)
        try:
            booking = ledger.book(txlines.splits, txlines.date)
        except InternalError:
            raise
        except LotterError as err:
            logger.error(
                "failed to process transaction (%r):\n%s\n\t%s",
                payee,
                "\n".join(txlines.lines),
                err,
            )
            raise

        yield from render.render(txlines.lines, index, booking, ledger.precision)
        yield ""
