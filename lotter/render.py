# coding: utf-8
"""Write booked transactions back out in ledger-cli syntax.

Lot inventory, basis and gains are written as virtual splits (account names
in brackets) following the original transaction lines, e.g.

    2017-01-01 Sell some ABC
        Assets:Crypto                              -1 ABC ; @ 1 USD
        Assets:Exchange
        [Lot::2016-01-01:100ABC@0.02USD:1]       1 ABC  ; :SELL: (inventory consumed)
        [Lot::2016-01-01:100ABC@0.02USD:1]   -0.02 USD  ; :SELL: (basis consumed)
        [Lot:Income:long term gain]          -0.98 USD  ; :GAIN:LONGTERM:

Lot inventory and gain are negative numbers, cost basis positive, following
ledger-cli's rules, so lotter's splits net to zero.
"""

__all__ = ["comment_prices", "entry_rows", "gain_rows", "format_rows", "render"]


# stdlib imports
from typing import List, Sequence, Tuple


# local imports
from lotter.amount import Precision
from lotter.inventory.api import Booking
from lotter.inventory.types import LotEntry
from lotter.inventory.gains import Gains


INDENT = "    "

# (account cell, amount cell, comment)
Row = Tuple[str, str, str]


def comment_prices(lines: Sequence[str]) -> List[str]:
    """Comment out the price/cost of splits; lot basis and gains now say it."""
    output = []
    for line in lines:
        price = line.find("@")
        comment = line.find(";")
        if price != -1 and (comment == -1 or comment > price):
            line = line.replace("@", "; @", 1)
        output.append(line)
    return output


def entry_rows(entries: Sequence[LotEntry], precision: Precision) -> List[Row]:
    """Two rows per LotEntry - inventory, then basis."""
    rows = []
    for entry in entries:
        account = f"[{entry.lot.name}]"

        if entry.inventory.sign > 0:
            verbose = f"{entry.annotation} (inventory consumed)"
        else:
            verbose = f"{entry.annotation} (inventory)"
        rows.append((account, precision.format(entry.inventory), verbose))

        if entry.basis.sign == 0:
            # comment out zero basis
            verbose = f"{entry.annotation} (basis unchanged)"
            account = f";{account}"
        elif entry.basis.sign > 0:
            verbose = f"{entry.annotation} (basis)"
        else:
            verbose = f"{entry.annotation} (basis consumed)"
        rows.append((account, precision.format(entry.basis), verbose))
    return rows


def gain_rows(gains: Gains, precision: Precision) -> List[Row]:
    return [
        (f"[{account}]", precision.format(amount), tag)
        for account, amount, tag in gains.splits()
    ]


def format_rows(rows: Sequence[Row]) -> List[str]:
    """Align rows into columns, at least two spaces apart."""
    if not rows:
        return []
    width = max(len(account) for account, _, _ in rows)
    amountwidth = max(len(amount) for _, amount, _ in rows)
    return [
        f"{INDENT}{account:<{width}}  {amount:>{amountwidth}}  ; {comment}"
        for account, amount, comment in rows
    ]


def render(lines: Sequence[str], index: int, booking: Booking, precision: Precision) -> List[str]:
    """Lines of a booked transaction, ready to write.

    Args:
        lines: the transaction's original lines.
        index: index of the payee line within `lines`.
        booking: result of booking the transaction.
        precision: display precision registry.
    """
    rows = entry_rows(booking.entries, precision) + gain_rows(booking.gains, precision)
    return (
        list(lines[: index + 1])
        + comment_prices(lines[index + 1 :])
        + format_rows(rows)
    )
