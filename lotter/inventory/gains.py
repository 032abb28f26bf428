# coding: utf-8
"""Apportion realized gain between short-term and long-term holding periods.

The gain realized by a trade is the sum of its base currency deltas (e.g. cash
received) and the basis of every LotEntry (negative for basis consumed,
positive for basis of new Lots).  Amounts are summed as rendered, i.e. rounded
to display precision, so that the gain splits written out balance the rest of
the transaction.

The gain is divided in proportion to the inventory consumed from Lots held
long-term vs. short-term:

    short term gain = (total gain) * (inventory consumed short term)
                                   / (total inventory consumed)
    long term gain = (total gain) - (short term gain)
"""

__all__ = ["Gains", "apportion", "SHORT_TERM_ACCOUNT", "LONG_TERM_ACCOUNT"]


# stdlib imports
import datetime as _datetime
from fractions import Fraction
from typing import TYPE_CHECKING, List, NamedTuple, Optional, Sequence, Tuple


# local imports
from lotter import utils
from lotter.amount import Amount
from lotter.errors import TransactionError
from .types import LotEntry

# Avoid recursive imports inventory.api <-> inventory.gains
# We only need inventory.api namespace for type annotations.
if TYPE_CHECKING:
    from .api import Ledger, SplitSet


SHORT_TERM_ACCOUNT = "Lot:Income:short term gain"
LONG_TERM_ACCOUNT = "Lot:Income:long term gain"


class Gains(NamedTuple):
    """Gain realized by a transaction.

    Gains are positive, losses negative.  The splits written to the journal
    carry the opposite sign, since ledger-cli income is negative.

    Attributes:
        total: total realized gain.
        short: short-term portion of `total`.
        long: long-term portion of `total`.
        shortinventory: inventory consumed from Lots held short-term
                        (None if the transaction consumed no inventory).
        longinventory: inventory consumed from Lots held long-term.
        shortbasis: rounded basis consumed from Lots held short-term.
        longbasis: rounded basis consumed from Lots held long-term.
    """

    total: Amount
    short: Amount
    long: Amount
    shortinventory: Optional[Amount] = None
    longinventory: Optional[Amount] = None
    shortbasis: Fraction = Fraction(0)
    longbasis: Fraction = Fraction(0)

    @classmethod
    def none(cls, base: str) -> "Gains":
        zero = Amount(base, Fraction(0))
        return cls(total=zero, short=zero, long=zero)

    @property
    def realized(self) -> bool:
        return self.shortinventory is not None

    def splits(self) -> List[Tuple[str, Amount, str]]:
        """(account, amount, tag) for each nonzero gain, signed as income."""
        output = []
        if self.short.sign != 0:
            output.append((SHORT_TERM_ACCOUNT, -self.short, ":GAIN:SHORTTERM:"))
        if self.long.sign != 0:
            output.append((LONG_TERM_ACCOUNT, -self.long, ":GAIN:LONGTERM:"))
        return output


def apportion(
    ledger: "Ledger",
    entries: Sequence[LotEntry],
    date: _datetime.date,
    splitset: Optional["SplitSet"] = None,
) -> Gains:
    """Compute the gain realized by a trade and classify it by holding period.

    Args:
        ledger: supplies base currency and display precision.
        entries: LotEntries produced by booking the trade.
        date: date of the trade; end of holding period for consumed Lots.
        splitset: the trade's splits, whose base currency deltas are proceeds
                  (or payments).

    Returns:
        Gains instance.

    Raises:
        TransactionError: if inventory of more than one asset was consumed.
    """
    base = ledger.base
    precision = ledger.precision

    total = Fraction(0)
    for qualified in (splitset or {}).values():
        for splits in qualified.values():
            for split in splits:
                if split.delta.asset == base:
                    total += precision.round(split.delta)

    shortinventory = longinventory = None
    shortbasis = longbasis = Fraction(0)

    for entry in entries:
        rounded = precision.round(entry.basis)
        total += rounded

        # double-entry; positive inventory indicates inventory consumed
        if not entry.disposal:
            continue

        if shortinventory is None:
            shortinventory = longinventory = entry.inventory.zero()
        if entry.inventory.asset != shortinventory.asset:
            msg = (
                f"trade with mixed inventory "
                f"({shortinventory.asset} and {entry.inventory.asset})"
            )
            raise TransactionError(msg)

        if utils.realize_longterm(entry.lot.date, date):
            longbasis += rounded
            longinventory += entry.inventory
        else:
            shortbasis += rounded
            shortinventory += entry.inventory

    if shortinventory is None:
        return Gains.none(base)._replace(total=Amount(base, total))

    sold = shortinventory.value + longinventory.value
    shortgain = total * shortinventory.value / sold
    longgain = total - shortgain

    return Gains(
        total=Amount(base, total),
        short=Amount(base, shortgain),
        long=Amount(base, longgain),
        shortinventory=shortinventory,
        longinventory=longinventory,
        shortbasis=shortbasis,
        longbasis=longbasis,
    )
