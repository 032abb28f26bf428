# coding: utf-8
"""Add lot inventory, cost basis, and capital gains to ledger-cli journals.
"""
from .config import CONFIG
from .errors import (
    LotterError,
    ParseError,
    ConfigurationError,
    TransactionError,
    InsufficientInventoryError,
    InternalError,
    AssetMismatchError,
    InvalidLotError,
    InvalidSplitError,
)
