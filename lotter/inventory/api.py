# coding: utf-8
"""Functions to apply journal transactions to lot inventory.

Besides the fundamental requirement of keeping accurate tallies, the main purpose
of this module is to match acquisitions and disposals of assets in order to
calculate the cost basis consumed, so that inventory.gains can compute the amount
and character of realized gains.

To use this module, create a Ledger instance and call its book() method once for
each transaction in the journal, in journal order, passing in the transaction's
posting lines and date.

Each transaction is either a "trade" or a "move":

    * A trade has at least one split with a price or cost ("@" or "@@").  Priced
      splits with negative amounts consume inventory (realizing gain); priced
      splits with positive amounts create new Lots.  When the cost of a new Lot is
      denominated in an asset other than the base currency, that asset is itself
      disposed of to pay for the new Lot; the basis consumed becomes the new
      Lot's basis ("deferred" gain).

    * A move has no prices, e.g. sending coins from an exchange to a wallet.
      Inventory is taken from the source account's Lots and new Lots are created
      for the destination account, keeping the original date and per-unit basis,
      so the holding period of the asset isn't disturbed.

The functions in this module are impure; they mutate the input Ledger as a side
effect and return the LotEntries describing what changed.
"""

__all__ = [
    "Ledger",
    "Booking",
    "SplitSet",
    "qualify",
    "produce_splits",
    "produce_moves",
    "consume_moves",
    "consume_trades",
    "book",
]


# stdlib imports
from collections import defaultdict
import datetime as _datetime
from fractions import Fraction
import itertools
import logging
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple


# local imports
from lotter.amount import Amount, Precision
from lotter.errors import (
    ParseError,
    TransactionError,
    InsufficientInventoryError,
)
from lotter.split import Split, parse_split, is_comment
from . import gains as _gains
from .functions import open_lot, short_name, lot_name
from .queue import LotQueue
from .sortkeys import SortType, FIFO
from .types import Lot, Disposal, LotEntry


logger = logging.getLogger(__name__)


SplitSet = Dict[str, Dict[str, List[Split]]]
"""Splits of one transaction, keyed by tally asset, then by qualifier."""


class Booking(NamedTuple):
    """Result of booking one transaction to the Ledger.

    Attributes:
        entries: changes to Lots, in the order they were made.
        gains: realized gain, apportioned by holding period.
        trade: True if the transaction was a trade, False for a move.
    """

    entries: List[LotEntry]
    gains: "_gains.Gains"
    trade: bool


class Ledger(defaultdict):
    """Mapping container for lot queues, keyed by asset and then qualifier.

    Besides the queues, a Ledger holds the state that lives for a whole run:
    the base currency, the consumption order, the qualifier prune depth, the
    display precision registry, and the counter handing out Lot weights.

    Args:
        base: currency in which basis and gains are denominated, e.g. "USD".
        sort: sort algorithm for gain recognition, e.g. FIFO.
        prune: number of account name segments that make up a qualifier.
               0 keeps one lot queue per asset; a negative number uses
               the entire account name.
        precision: display precision registry.  A new one by default.
    """

    def __init__(
        self,
        base: str,
        sort: Optional[SortType] = None,
        prune: int = 0,
        precision: Optional[Precision] = None,
    ) -> None:
        defaultdict.__init__(self, dict)
        self.base = base
        self.sort = sort or FIFO
        self.prune = prune
        self.precision = precision if precision is not None else Precision()
        self._weights = itertools.count(1)

    def next_weight(self) -> int:
        return next(self._weights)

    def qualify(self, account: str) -> str:
        return qualify(account, self.prune)

    def queue(self, asset: str, qualifier: str) -> LotQueue:
        """Return the lot queue for (asset, qualifier), creating it if needed."""
        if asset == self.base:
            logger.warning("lot queue of base currency %s requested", asset)
        queues = self[asset]
        if qualifier not in queues:
            queues[qualifier] = LotQueue(sort=self.sort)
        return queues[qualifier]

    def buy(self, lot: Lot, qualifier: str) -> None:
        logger.debug("buying lot %s into %r", lot.name, qualifier)
        self.queue(lot.asset, qualifier).buy(lot)

    def sell(self, qualifier: str, delta: Amount) -> List[Disposal]:
        """Consume inventory from the lot queue for (delta.asset, qualifier).

        Raises:
            TransactionError: if `delta` is in the base currency.
            InsufficientInventoryError: if the lot queue doesn't hold enough.
        """
        if delta.asset == self.base:
            raise TransactionError(f"attempt to sell base asset ({delta})")

        queue = self.queue(delta.asset, qualifier)
        if not queue:
            msg = f"attempt to sell ({-delta}) from empty lot queue ({delta.asset}[{qualifier}])"
            raise InsufficientInventoryError(msg)
        return queue.sell(delta)

    def book(self, lines: Sequence[str], date: _datetime.date) -> Booking:
        """Convenience method to call inventory.api.book()"""
        return book(self, lines, date)


def qualify(account: str, prune: int) -> str:
    """Truncate an account name to the qualifier keying its lot queue.

    With `prune` <= 2, "Assets:BTC:hot" and "Assets:BTC:cold" share a lot
    queue; with `prune` >= 3 they're separate.  Pruning at 0 puts all BTC in
    the same lot queue.
    """
    if prune < 0:
        return account
    segments = account.split(":")
    if len(segments) > prune:
        return ":".join(segments[:prune])
    return account


def produce_splits(ledger: Ledger, lines: Sequence[str]) -> Tuple[SplitSet, bool]:
    """Parse posting lines and organize the splits by asset and qualifier.

    A split left without an amount gets the amount that balances the
    transaction.

    Args:
        ledger: supplies qualifier pruning and display precision.
        lines: posting (and comment) lines of one transaction.

    Returns:
        (splits keyed by tally asset and qualifier,
         True if any split has a price or cost)

    Raises:
        ParseError: if a line is neither a split nor a comment.
        TransactionError: if the null-amount split can't be resolved.
    """
    splitset: SplitSet = {}
    tally: Dict[str, Amount] = {}
    nodelta: Optional[Split] = None
    trade = False

    def add(split: Split) -> None:
        qualifier = ledger.qualify(split.account)
        asset = split.tally().asset
        splitset.setdefault(asset, {}).setdefault(qualifier, []).append(split)

    for line in lines:
        try:
            split = parse_split(line, ledger.precision)
        except ParseError as err:
            raise ParseError(f"{err} in transaction split {line!r}") from err

        if split is None:
            if not is_comment(line):
                raise ParseError(f"failed to parse transaction split: {line!r}")
            continue

        if split.null_amount:
            # process null-amount split after all the others
            if nodelta is not None:
                raise TransactionError("more than one split without amount", line)
            nodelta = split
            continue

        if split.priced:
            trade = True

        amount = split.tally()
        tally[amount.asset] = tally.get(amount.asset, amount.zero()) + amount
        add(split)

    if nodelta is not None:
        unbalanced = [amount for amount in tally.values() if amount.sign != 0]
        if len(unbalanced) > 1:
            assets = ", ".join(amount.asset for amount in unbalanced)
            msg = f"can't infer amount, transaction is unbalanced in {assets}"
            raise TransactionError(msg, nodelta.line)
        if unbalanced:
            nodelta = nodelta._replace(delta=-unbalanced[0])
            logger.debug("calculated amount %s for split %r", nodelta.delta, nodelta.line)
            add(nodelta)

    return splitset, trade


def produce_moves(splitset: SplitSet) -> Dict[str, Dict[str, Amount]]:
    """Net the unpriced deltas of a transaction by asset and qualifier."""
    moves: Dict[str, Dict[str, Amount]] = {}
    for asset, qualified in splitset.items():
        moves[asset] = {}
        for qualifier, splits in qualified.items():
            net = Amount(asset, Fraction(0))
            for split in splits:
                if split.priced:
                    # splits with cost associated are not "moves"
                    continue
                net += split.delta
            moves[asset][qualifier] = net
    return moves


def _sell(ledger: Ledger, qualifier: str, delta: Amount, line: str = None):
    try:
        return ledger.sell(qualifier, delta)
    except InsufficientInventoryError as err:
        raise InsufficientInventoryError(err.msg, line, err.disposals) from err


def consume_moves(ledger: Ledger, moves: Dict[str, Dict[str, Amount]]) -> List[LotEntry]:
    """Move inventory between qualifiers, preserving date and basis of Lots.

    Each move consumes inventory (like a sell) and creates offsetting
    inventory (like a buy).  A first pass consumes inventory from every
    qualifier whose net delta is negative, holding it in a temporary queue.
    A second pass takes from the temporary queue to create Lots for every
    qualifier whose net delta is positive.

    Note:
        Deltas need not offset exactly, e.g. an exchange withdrawal fee may
        shrink what arrives.  Consumed inventory that doesn't arrive anywhere
        simply leaves the Ledger.

    Raises:
        InsufficientInventoryError: if a source lacks inventory, or more
            arrives than was taken.
    """
    entries: List[LotEntry] = []

    for asset, qualified in moves.items():
        if asset == ledger.base:
            # moves of base currency have no effect on lots
            continue

        holding = LotQueue(sort=ledger.sort)

        for qualifier, delta in qualified.items():
            if delta.sign >= 0:
                continue
            disposals = _sell(ledger, qualifier, delta)
            for n, disposal in enumerate(disposals, start=1):
                annotation = (
                    f":MOVE: move {ledger.precision.format(-delta)} "
                    f"from {qualifier} ({n} of {len(disposals)})"
                )
                entries.append(LotEntry(*disposal, annotation=annotation))

                # same date and weight as consumed inventory
                holding.buy(
                    open_lot(
                        "tmp",
                        disposal.lot.date,
                        disposal.lot.weight,
                        disposal.inventory,
                        -disposal.basis,
                    )
                )

        for qualifier, delta in qualified.items():
            if delta.sign <= 0:
                continue
            try:
                disposals = holding.sell(-delta)
            except InsufficientInventoryError as err:
                msg = (
                    f"move of {ledger.precision.format(delta)} to {qualifier} "
                    f"exceeds inventory moved out ({err})"
                )
                raise InsufficientInventoryError(msg, disposals=err.disposals) from err

            for disposal in disposals:
                source = disposal.lot
                price = Amount(disposal.basis.asset, source.price)
                shortname = short_name(disposal.inventory, price, ledger.precision)
                name = lot_name(qualifier, source.date, shortname, source.weight)
                lot = open_lot(
                    name, source.date, source.weight, disposal.inventory, -disposal.basis
                )
                ledger.buy(lot, qualifier)

                annotation = (
                    f":MOVE: move {ledger.precision.format(lot.inventory)} to {qualifier}"
                )
                entries.append(
                    LotEntry(lot, -disposal.inventory, -disposal.basis, annotation)
                )

    return entries


def consume_trades(
    ledger: Ledger, splitset: SplitSet, date: _datetime.date
) -> List[LotEntry]:
    """Sell inventory for priced splits with negative deltas; buy new Lots for
    priced splits with positive deltas.

    Raises:
        TransactionError: if prices are missing or in the wrong currency.
        InsufficientInventoryError: if a sale exceeds the lot queue.
    """
    entries: List[LotEntry] = []

    for qualified in splitset.values():
        for qualifier, splits in qualified.items():
            for split in splits:
                delta = split.delta

                if delta.asset == ledger.base:
                    # sending base currency has no effect on lots
                    if split.priced:
                        raise TransactionError(
                            "trade has price in non-base currency", split.line
                        )
                    continue

                if delta.sign < 0:
                    # The sell side of a trade can omit price, because the
                    # buy side should have it.
                    if not split.priced:
                        continue
                    if split.cost().asset != ledger.base:
                        raise TransactionError(
                            "sell-side priced in non-base currency", split.line
                        )
                    for disposal in _sell(ledger, qualifier, delta, split.line):
                        entries.append(LotEntry(*disposal, annotation=":SELL:"))

                elif delta.sign > 0:
                    entries.extend(_buy(ledger, qualifier, split, date))

                else:
                    raise TransactionError("trade of zero amount", split.line)

    return entries


def _buy(
    ledger: Ledger, qualifier: str, split: Split, date: _datetime.date
) -> List[LotEntry]:
    """Create a Lot for the buy side of a trade."""
    if not split.priced:
        raise TransactionError("apparent trade has no price/cost", split.line)

    precision = ledger.precision
    cost = abs(split.cost())
    logger.debug("creating lot of %s with cost %s", split.delta, cost)

    if cost.sign == 0 and cost.asset != ledger.base:
        raise TransactionError("trade with zero cost in non-base currency", split.line)

    entries: List[LotEntry] = []
    lotdate = date
    annotation = ":BUY:"
    deferred = None

    if cost.asset == ledger.base:
        basis = cost
    else:
        # Deferred gain: existing inventory of the cost asset is consumed
        # to buy the new Lot, and its basis becomes the new Lot's basis.
        disposals = _sell(ledger, qualifier, -cost, split.line)
        basis = disposals[0].basis.zero()
        for disposal in disposals:
            entries.append(LotEntry(*disposal, annotation=":SELL:DEFER:"))
            # Tally basis as rendered, so reported and stored basis agree.
            basis -= Amount(basis.asset, precision.round(disposal.basis))

        # For long-term vs short-term, use the latest date of consumed inventory.
        lotdate = max(disposal.lot.date for disposal in disposals)
        deferred = basis
        annotation = ":BUY:DEFER:"

    weight = ledger.next_weight()
    shortname = short_name(split.delta, split.price(), precision, deferred)
    lot = open_lot(
        lot_name(qualifier, lotdate, shortname, weight),
        lotdate,
        weight,
        split.delta,
        basis,
    )
    ledger.buy(lot, qualifier)

    entries.append(LotEntry(lot, split.inventory(), basis, annotation))
    return entries


def book(ledger: Ledger, lines: Sequence[str], date: _datetime.date) -> Booking:
    """Apply one transaction to the Ledger.

    Args:
        ledger: lot queues to consume from and add to.
        lines: the transaction's posting lines (not including the payee line).
        date: the transaction's date.

    Returns:
        Booking holding the LotEntries and realized Gains.
    """
    splitset, trade = produce_splits(ledger, lines)
    if trade:
        entries = consume_trades(ledger, splitset, date)
        gains = _gains.apportion(ledger, entries, date, splitset)
    else:
        entries = consume_moves(ledger, produce_moves(splitset))
        gains = _gains.Gains.none(ledger.base)
    return Booking(entries=entries, gains=gains, trade=trade)
