# coding: utf-8
"""Base functions used by inventory.api to create and name Lots.
"""

__all__ = ["open_lot", "short_name", "lot_name"]


# stdlib imports
import datetime as _datetime
from typing import Optional


# local imports
from lotter.amount import Amount, Precision
from lotter.errors import InvalidLotError
from .types import Lot


def open_lot(
    name: str, date: _datetime.date, weight: int, inventory: Amount, basis: Amount
) -> Lot:
    """Create a Lot, computing its per-unit price.

    Args:
        name: account name of the Lot.
        date: start of holding period.
        weight: creation order tie-break.
        inventory: amount acquired; must be positive.
        basis: total cost of `inventory`; must not be negative.
               Zero is fine (e.g. coins received in a hard fork).

    Raises:
        InvalidLotError: if `inventory` or `basis` are out of range.
    """
    if inventory.sign < 1:
        raise InvalidLotError(f"lot must have positive inventory ({inventory})")
    if basis.sign < 0:
        raise InvalidLotError(f"lot must have non-negative basis ({basis})")

    return Lot(
        name=name,
        date=date,
        weight=weight,
        inventory=inventory.copy(),
        startinventory=inventory.copy(),
        startcost=basis.copy(),
        price=basis.value / inventory.value,
    )


def short_name(
    inventory: Amount,
    price: Amount,
    precision: Precision,
    deferred: Optional[Amount] = None,
) -> str:
    """Lot quantity and price, e.g. "100ABC@0.02USD".

    When the basis came from disposing of another asset, the basis is
    appended, e.g. "5XYZ@0.4ABC@2.1USD".
    """
    name = f"{precision.compact(abs(inventory))}@{precision.compact(price)}"
    if deferred is not None:
        name = f"{name}@{precision.compact(deferred)}"
    return name


def lot_name(
    qualifier: str, date: _datetime.date, shortname: str, weight: int
) -> str:
    """Lot account naming convention.

    "Lot:<qualifier>:<YYYY-MM-DD>:<short name>:<weight>"

    Note:
        The convention is intended to give unique names.  Weight makes sure of
        it, even for purchases on the same day at the same price.
    """
    return f"Lot:{qualifier}:{date:%Y-%m-%d}:{shortname}:{weight}"
