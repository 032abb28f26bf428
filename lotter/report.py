# coding: utf-8
"""Flatten Ledger lot queues into rows for serialization.

Each Lot remaining in the Ledger is "flattened" into an un-nested FlatLot, then
"exported", i.e. its attributes are formatted as strings.  The exported rows
are packed (along with headers naming the columns) into a tablib.Dataset
container that provides serialization, e.g. Dataset.csv.

This module doesn't perform the actual writing; callers handle that by working
with the tablib.Dataset instances returned by these functions.
"""
__all__ = ["FlatLot", "flatten_ledger", "flatten_lot", "export_flatlot"]

# stdlib imports
import datetime as _datetime
from typing import NamedTuple, Tuple

# 3rd party imports
import tablib

# local imports
from lotter.amount import Amount, Precision
from lotter.inventory.api import Ledger
from lotter.inventory.types import Lot


class FlatLot(NamedTuple):
    """Un-nested container for Lot data, suitable for serialization.

    Attributes:
        asset: asset held by the Lot.
        qualifier: key of the lot queue holding the Lot.
        lot: Lot name.
        date: start of holding period.
        units: inventory remaining.
        startunits: inventory the Lot started with.
        cost: basis of the remaining inventory.
        currency: denomination of cost.
        price: per-unit basis.
    """

    asset: str
    qualifier: str
    lot: str
    date: _datetime.date
    units: Amount
    startunits: Amount
    cost: Amount
    currency: str
    price: Amount


def flatten_ledger(ledger: Ledger) -> tablib.Dataset:
    """Pack the Lots remaining in a Ledger into a tablib.Dataset.

    Lots are listed by asset, qualifier, then in the order they'd be consumed.
    """
    data = tablib.Dataset(headers=list(FlatLot._fields))
    for asset, queues in sorted(ledger.items()):
        for qualifier, queue in sorted(queues.items()):
            for lot in queue:
                flatlot = flatten_lot(lot, qualifier)
                data.append(export_flatlot(flatlot, ledger.precision))
    return data


def flatten_lot(lot: Lot, qualifier: str) -> FlatLot:
    currency = lot.startcost.asset
    return FlatLot(
        asset=lot.asset,
        qualifier=qualifier,
        lot=lot.name,
        date=lot.date,
        units=lot.inventory,
        startunits=lot.startinventory,
        cost=Amount(currency, lot.price * lot.inventory.value),
        currency=currency,
        price=Amount(currency, lot.price),
    )


def export_flatlot(flatlot: FlatLot, precision: Precision) -> Tuple:
    """Format FlatLot attributes as strings; amounts without asset codes."""

    def number(amount: Amount) -> str:
        return precision.format(amount).rsplit(" ", 1)[0]

    return (
        flatlot.asset,
        flatlot.qualifier,
        flatlot.lot,
        flatlot.date.isoformat(),
        number(flatlot.units),
        number(flatlot.startunits),
        number(flatlot.cost),
        flatlot.currency,
        number(flatlot.price),
    )
