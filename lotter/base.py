# coding: utf-8
"""The `base` operation: convert price/cost information to the base currency.

This is a pre-processor for the `lot` operation, allowing trades to be
accounted for in terms of the base currency even when they're for other
currencies.

Prices are observed from ledger-cli price directives in the journal, e.g.

    P 2004/06/21 02:17:58 TWCUX 27.76 USD
    P 2004/06/21 USD 0.036 TWCUX

When a split has a cost in a currency other than the base, and a price of that
currency (or else of the split's own asset) in the base is known for the day
of the transaction, the split is rewritten with a cost in the base currency.
The split on the other side of the trade is rewritten to match.

Missing prices aren't fatal.  They're noted in the output, so the price can be
added to the journal and the operation run again.
"""

__all__ = ["PriceHistory", "parse_price", "convert"]


# stdlib imports
import datetime as _datetime
import logging
from fractions import Fraction
from typing import Dict, Iterable, Iterator, List, Optional, Tuple


# local imports
from lotter.amount import Amount, Precision
from lotter.errors import ParseError
from lotter.split import parse_split, is_comment
from lotter.scan import PAYEE_NOT_FOUND, TxLines, parse_date


logger = logging.getLogger(__name__)


class PriceHistory(dict):
    """Mapping of (date, asset) to price of one unit of asset in base currency.

    Args:
        base: currency prices are converted to.
    """

    def __init__(self, base: str, *args, **kwargs) -> None:
        self.base = base
        dict.__init__(self, *args, **kwargs)

    def observe(self, line: str) -> None:
        """Record a price directive, if it relates some asset to the base.

        Raises:
            ParseError: if the directive is malformed.
        """
        observed = parse_price(line, self.base)
        if observed is None:
            logger.info("ignoring non-base price (%r)", line)
            return
        key, price = observed
        if key in self and self[key] != price:
            logger.info(
                "updating price history (was %s, now %s)\n\t%s",
                float(self[key]),
                float(price),
                line,
            )
        self[key] = price


def parse_price(line: str, base: str) -> Optional[Tuple[Tuple[_datetime.date, str], Fraction]]:
    """Parse "P <date> [<time>] <asset> <price> <currency>".

    Returns:
        ((date, asset), price of asset in base), or None if neither side
        of the directive is the base currency.
    """
    fields = line.split(";", 1)[0].split()
    if len(fields) == 5:
        # no time given
        fields.insert(2, "00:00:00")
    if len(fields) != 6 or fields[0] != "P":
        raise ParseError(f"failed to parse historical price ({line!r})")

    if fields[5] == base:
        asset, invert = fields[3], False
    elif fields[3] == base:
        asset, invert = fields[5], True
    else:
        return None

    try:
        date = parse_date(fields[1])
        _datetime.datetime.strptime(fields[2], "%H:%M:%S")
        price = Fraction(fields[4])
    except (ParseError, ValueError, ZeroDivisionError):
        raise ParseError(f"failed to parse historical price ({line!r})")

    if invert:
        if price == 0:
            raise ParseError(f"zero price can't be inverted ({line!r})")
        price = 1 / price
    return (date, asset), price


def convert(
    blocks: Iterable[TxLines],
    base: str,
    begin: Optional[_datetime.date] = None,
    precision: Optional[Precision] = None,
) -> Iterator[str]:
    """Rewrite costs of trades in the base currency; yield output lines.

    Args:
        blocks: journal blocks in file order, e.g. from scan.scan().
        base: currency to convert costs to.
        begin: leave transactions before this date untouched.
        precision: display precision registry.

    Raises:
        ParseError: for malformed splits or price directives.
    """
    precision = precision if precision is not None else Precision()
    history = PriceHistory(base)

    for txlines in blocks:
        for line in txlines.lines:
            if line.startswith("P "):
                history.observe(line)

        _, index = txlines.payee()
        if index == PAYEE_NOT_FOUND or (begin is not None and txlines.date < begin):
            yield from txlines.lines
            yield ""
            continue

        errors = _convert_transaction(txlines, index, history, precision)

        yield from txlines.lines
        for error in errors:
            logger.error("%s", error)
            yield f"    FIXME:lotter base:  {error}"
        yield ""


def _convert_transaction(
    txlines: TxLines, index: int, history: PriceHistory, precision: Precision
) -> List[str]:
    """Rewrite txlines.lines in place; return problems found."""
    base = history.base
    date = txlines.date
    errors: List[str] = []

    # First pass, find conversions to base, keyed by the cost being converted.
    conversion: Dict[str, Amount] = {}
    for line in txlines.lines[index + 1 :]:
        split = parse_split(line, precision)
        if split is None:
            if not is_comment(line):
                raise ParseError(f"failed to parse transaction split: {line!r}")
            continue

        if not split.priced:
            continue
        cost = split.cost()
        if cost.asset == base:
            continue

        price = history.get((date, cost.asset))
        if price is not None:
            conversion[precision.format(abs(cost))] = Amount(base, abs(price * cost.value))
            continue

        # alternately, convert based on delta
        price = history.get((date, split.delta.asset))
        if price is not None:
            conversion[precision.format(abs(cost))] = Amount(
                base, abs(price * split.delta.value)
            )
        else:
            errors.append(
                f"missing price of {cost.asset} or {split.delta.asset} on {date:%Y/%m/%d}"
            )

    if not conversion:
        return errors

    # Second pass, alter splits.
    for n, line in enumerate(txlines.lines[index + 1 :], start=index + 1):
        split = parse_split(line, precision)
        if split is None:
            continue

        if split.priced:
            basis = conversion.get(precision.format(abs(split.cost())))
            if basis is not None:
                # replace existing cost/price with basis, keeping the original
                # as a comment
                txlines.lines[n] = line.replace(
                    "@", f"@@ {precision.format(basis)} ; @", 1
                )
        elif split.delta is not None:
            basis = conversion.get(precision.format(abs(split.delta)))
            if basis is not None and split.delta.sign < 0:
                # the cost paid; "<amount> <asset>" gains a cost in base
                txlines.lines[n] = _add_cost(line, basis, precision)
            elif split.delta.asset != base:
                logger.warning("no conversion to %s for split %r", base, line)

    return errors


def _add_cost(line: str, basis: Amount, precision: Precision) -> str:
    """Append "@@ <basis>" to the amount of a split written without a price."""
    body, sep, comment = line.partition(";")
    amount = " ".join(body.split()[-2:])
    rewritten = body.replace(amount, f"{amount} @@ {precision.format(basis)}", 1)
    return f"{rewritten}{sep}{comment}"
