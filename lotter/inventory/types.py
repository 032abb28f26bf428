# coding: utf-8
"""
Data structures for tracking inventory/basis history of assets.

Each Lot tracks the current state of one acquisition of an asset - the
inventory still held, and the inventory/cost it started with.  Lots are
collected in LotQueues, which are the values of a Ledger mapping keyed by
asset and then by qualifier (a possibly truncated account name).

Lots are immutable.  Selling from a Lot returns a newly-created Lot holding
what's left, leaving the old Lot undisturbed, so that a Disposal can keep a
reference to the Lot as it was when inventory was consumed.

A LotEntry is what a transaction did to a Lot, in ledger-cli's double-entry
sign convention:
    * Inventory added to a Lot is negative; inventory consumed is positive.
    * Basis added to a Lot is positive; basis consumed is negative.
"""

__all__ = ["Lot", "Disposal", "LotEntry"]


# stdlib imports
import datetime as _datetime
from fractions import Fraction
from typing import NamedTuple, Tuple


# local imports
from lotter.amount import Amount
from lotter.errors import AssetMismatchError, InvalidLotError


class Lot(NamedTuple):
    """Inventory/basis data container for one acquisition of an asset.

    Use inventory.functions.open_lot() to create Lots; it checks invariants.

    Attributes:
        name: ledger-cli account name of the Lot, e.g.
              "Lot:Assets:2016-01-01:100ABC@0.02USD:1".
        date: start of holding period.
        weight: creation order, breaks ties between Lots of the same date.
        inventory: amount of asset remaining (never negative).
        startinventory: amount of asset the Lot was created with (positive).
        startcost: cost basis the Lot was created with (positive or zero).
        price: per-unit cost basis, i.e. startcost / startinventory.
    """

    name: str
    date: _datetime.date
    weight: int
    inventory: Amount
    startinventory: Amount
    startcost: Amount
    price: Fraction

    @property
    def asset(self) -> str:
        return self.inventory.asset

    def sell(self, delta: Amount) -> Tuple["Lot", Amount, Amount]:
        """Consume up to -delta inventory from the Lot.

        Args:
            delta: amount to sell; must be negative.

        Returns:
            3-tuple of:
                0) Lot holding the inventory that remains.
                1) inventory actually consumed (positive).
                2) basis consumed (negative or zero).

        Raises:
            InvalidLotError: if `delta` isn't negative.
            AssetMismatchError: if `delta` isn't denominated in the Lot's asset.
        """
        if delta.sign > -1:
            raise InvalidLotError(f"lot sell expects negative amount, got {delta}")
        if not delta.compatible(self.inventory):
            raise AssetMismatchError(
                f"can't sell {delta} from lot {self.name} of {self.asset}"
            )

        remaining = self.inventory + delta
        if remaining.sign < 0:
            # Inventory doesn't cover delta; take everything.
            actual = self.inventory
            remaining = remaining.zero()
        else:
            actual = -delta

        basis = Amount(self.startcost.asset, -(self.price * actual.value))
        return self._replace(inventory=remaining), actual, basis


class Disposal(NamedTuple):
    """Inventory consumed from a Lot by LotQueue.sell().

    Attributes:
        lot: the Lot as it was before inventory was consumed.
        inventory: amount consumed (positive).
        basis: basis consumed (negative or zero).
    """

    lot: Lot
    inventory: Amount
    basis: Amount


class LotEntry(NamedTuple):
    """Change to a Lot made by a transaction, ready to be written as splits.

    Attributes:
        lot: Lot affected.
        inventory: positive when consumed, negative when added.
        basis: negative when consumed, positive when added.
        annotation: ledger-cli tags describing the change, e.g. ":SELL:".
    """

    lot: Lot
    inventory: Amount
    basis: Amount
    annotation: str

    @property
    def disposal(self) -> bool:
        return self.inventory.sign > 0
