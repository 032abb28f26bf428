# coding: utf-8
from .types import Lot, Disposal, LotEntry
from .functions import open_lot, short_name, lot_name
from .queue import LotQueue
from .sortkeys import SortType, sort_oldest, FIFO, LIFO, SORTS, get_sort
from .gains import Gains, apportion
from .api import (
    Ledger,
    Booking,
    SplitSet,
    qualify,
    produce_splits,
    produce_moves,
    consume_moves,
    consume_trades,
    book,
)
