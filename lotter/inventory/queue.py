# coding: utf-8
"""Ordered collection of Lots of one asset, consumed FIFO or LIFO.
"""

__all__ = ["LotQueue"]


# stdlib imports
import logging
from typing import List, Iterator, Optional


# local imports
from lotter.amount import Amount
from lotter.errors import (
    AssetMismatchError,
    InsufficientInventoryError,
    InternalError,
    InvalidLotError,
)
from .types import Lot, Disposal
from .sortkeys import SortType, FIFO


logger = logging.getLogger(__name__)


class LotQueue:
    """Lots of a single asset, kept in the order they'll be consumed.

    Note:
        The whole queue is re-sorted on every buy(), which is fine for the
        few hundred Lots of a typical journal.

    Args:
        sort: sort algorithm for gain recognition, e.g. FIFO or LIFO.
        lots: initial Lots; doesn't need to be sorted.
    """

    def __init__(self, sort: Optional[SortType] = None, lots=None) -> None:
        self.sort = sort or FIFO
        self.lots: List[Lot] = []
        for lot in lots or []:
            self.buy(lot)

    def __repr__(self):
        return f"LotQueue({self.lots}, sort={self.sort})"

    def __len__(self) -> int:
        return len(self.lots)

    def __iter__(self) -> Iterator[Lot]:
        return iter(self.lots)

    @property
    def asset(self) -> Optional[str]:
        return self.lots[0].asset if self.lots else None

    def total(self) -> Optional[Amount]:
        """Inventory remaining across all Lots (None if empty)."""
        if not self.lots:
            return None
        total = self.lots[0].inventory.zero()
        for lot in self.lots:
            total += lot.inventory
        return total

    def _check(self, amount: Amount) -> None:
        if amount.sign == 0:
            raise InvalidLotError("attempt to buy/sell zero amount")
        if self.lots and amount.asset != self.asset:
            msg = f"currency mismatch: want {self.asset!r}, got {amount.asset!r}"
            raise AssetMismatchError(msg)

    def buy(self, lot: Lot) -> None:
        """Add a Lot, keeping the queue in order."""
        self._check(lot.inventory)
        self.lots.append(lot)
        self.lots.sort(**self.sort)

    def sell(self, delta: Amount) -> List[Disposal]:
        """Consume inventory and basis from Lots, in queue order.

        Args:
            delta: amount to sell; must be negative.

        Returns:
            Disposal for each Lot consumed (wholly or partially), in order.

        Raises:
            InsufficientInventoryError: if the queue runs out of Lots before
                `delta` is satisfied.  Lots consumed up to that point stay
                consumed; they're available as the exception's `disposals`.
        """
        self._check(delta)
        if delta.sign > 0:
            raise InvalidLotError(f"lot queue sell expects negative amount, got {delta}")
        logger.debug("selling %s from queue of %d lots", delta, len(self))

        disposals: List[Disposal] = []
        remaining = delta
        while remaining.sign != 0:
            if not self.lots:
                msg = f"failed to sell {-remaining} (of {-delta}), no remaining inventory"
                raise InsufficientInventoryError(msg, disposals=disposals)

            lot = self.lots.pop(0)
            after, sold, basis = lot.sell(remaining)
            if sold.sign < 1 or basis.sign > 0:
                raise InternalError(f"insane sale: sold {sold}, basis {basis}")
            logger.debug("sold %s (%s basis) from lot %s", sold, basis, lot.name)

            disposals.append(Disposal(lot=lot, inventory=sold, basis=basis))
            # remaining is negative, sold is positive
            remaining += sold
            if remaining.sign > 0:
                raise InternalError(f"lot queue oversold, remaining {remaining}")

            if after.inventory.sign > 0:
                self.lots.insert(0, after)

        logger.debug("sold %s, %d lots remain", delta, len(self))
        return disposals
