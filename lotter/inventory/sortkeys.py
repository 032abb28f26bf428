# coding: utf-8
"""
Functions used as keys to sort LotQueues (i.e. lists of Lots).

The first Lot after sorting is the next one consumed.
"""

__all__ = ["SortType", "sort_oldest", "FIFO", "LIFO", "SORTS", "get_sort"]


# stdlib imports
from typing import Tuple, Mapping, Callable, Union


# local imports
from lotter.errors import ConfigurationError
from .types import Lot


SortType = Mapping[str, Union[bool, Callable[[Lot], Tuple]]]


def sort_oldest(lot: Lot) -> Tuple:
    """Sort by holding period, then by creation order.

    Args:
        lot: a Lot instance.

    Returns:
        (Lot.date, Lot.weight)
    """
    return (lot.date, lot.weight)


FIFO = {"key": sort_oldest, "reverse": False}
LIFO = {"key": sort_oldest, "reverse": True}


SORTS = {"fifo": FIFO, "lifo": LIFO}


def get_sort(name: str) -> SortType:
    """Look up a sort algorithm by its configured name ("fifo" or "lifo").

    Raises:
        ConfigurationError: for unknown names.
    """
    try:
        return SORTS[name.lower()]
    except KeyError:
        msg = f"unexpected lot order ({name!r}), may be {' or '.join(SORTS)}"
        raise ConfigurationError(msg)
