# coding: utf-8
"""Parse transaction postings ("splits") from journal lines.

A split is an indented line holding an account name, optionally followed by
an amount, optionally followed by a unit price ("@ <amount>") or total cost
("@@ <amount>"):

    Assets:Crypto          100 ABC @ 0.02 USD
    Assets:Exchange       -100 ABC @@ 2 USD
    Equity:Cash

Account names may contain single spaces, so the account is separated from
the amount by two or more spaces, or tabs.
"""

__all__ = ["Split", "parse_split", "is_comment"]


# stdlib imports
import re
from typing import NamedTuple, Optional


# local imports
from lotter.amount import Amount, Precision, parse_amount
from lotter.errors import InvalidSplitError


ACCOUNT_SEPARATOR = re.compile(r"\s{2,}|\t+")


class Split(NamedTuple):
    """One leg of a transaction.

    At most one of `unitprice`/`totalcost` is given in the journal; the other
    can be derived from it (cost = price * |delta|).

    Attributes:
        account: account name, e.g. "Assets:Exchange:CoinFace".
        delta: change in account balance; None if left blank in the journal.
        unitprice: per-unit price ("@").
        totalcost: total cost ("@@").
        line: raw journal line.
        comment: text following ";", if any.
    """

    account: str
    delta: Optional[Amount]
    unitprice: Optional[Amount] = None
    totalcost: Optional[Amount] = None
    line: str = ""
    comment: Optional[str] = None

    @property
    def null_amount(self) -> bool:
        return self.delta is None

    @property
    def priced(self) -> bool:
        return self.unitprice is not None or self.totalcost is not None

    def price(self) -> Amount:
        if self.unitprice is not None:
            return self.unitprice
        if self.totalcost is None or self.delta is None or self.delta.value == 0:
            raise InvalidSplitError(f"cannot determine price of split: {self.line!r}")
        return self.totalcost * (1 / abs(self.delta.value))

    def cost(self) -> Amount:
        if self.totalcost is not None:
            return self.totalcost
        if self.unitprice is None or self.delta is None:
            raise InvalidSplitError(f"cannot determine cost of split: {self.line!r}")
        return self.unitprice * abs(self.delta.value)

    def tally(self) -> Amount:
        """Balance change implied by the split.

        The cost (with the sign of the delta) if the split is priced,
        otherwise the delta.
        """
        if self.delta is None:
            raise InvalidSplitError(f"cannot tally null-amount split: {self.line!r}")
        if self.priced:
            cost = self.cost()
            if cost.sign != self.delta.sign:
                cost = -cost
            return cost
        return self.delta

    def inventory(self) -> Amount:
        """Negative of the delta; lot inventory offsets the account's change."""
        if self.delta is None:
            raise InvalidSplitError(f"null-amount split has no inventory: {self.line!r}")
        return -self.delta


def is_comment(line: str) -> bool:
    """True for lines holding nothing but a comment (or whitespace)."""
    stripped = line.strip()
    return not stripped or stripped.startswith(";")


def parse_split(line: str, precision: Optional[Precision] = None) -> Optional[Split]:
    """Parse a posting line.

    Args:
        line: journal line.
        precision: registry to update with decimal places seen in amounts.

    Returns:
        Split instance, or None if the line isn't a posting (comment, blank,
        or not indented).

    Raises:
        ParseError: if an amount in the posting can't be parsed.
    """
    body, sep, comment = line.partition(";")
    trimmed = body.strip()
    if not trimmed or not body[:1].isspace():
        return None

    parts = ACCOUNT_SEPARATOR.split(trimmed, maxsplit=1)
    account = parts[0].strip()
    if len(parts) < 2 or not parts[1].strip():
        return Split(account, None, line=line, comment=comment if sep else None)

    unitprice = totalcost = None
    region = parts[1]
    if "@@" in region:
        region, cost_text = region.split("@@", 1)
        totalcost = parse_amount(cost_text, precision)
    elif "@" in region:
        region, price_text = region.split("@", 1)
        unitprice = parse_amount(price_text, precision)

    return Split(
        account=account,
        delta=parse_amount(region, precision),
        unitprice=unitprice,
        totalcost=totalcost,
        line=line,
        comment=comment if sep else None,
    )
