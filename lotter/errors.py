# coding: utf-8
"""Exceptions raised by lotter.

User errors (bad journal data, bad configuration) derive from LotterError
directly or via TransactionError; the CLI reports them and exits.

InternalError subclasses signal that lotter's own bookkeeping went wrong.
They aren't caught by the CLI.
"""

__all__ = [
    "LotterError",
    "ParseError",
    "ConfigurationError",
    "TransactionError",
    "InsufficientInventoryError",
    "InternalError",
    "AssetMismatchError",
    "InvalidLotError",
    "InvalidSplitError",
]


class LotterError(Exception):
    """ Base class for Exceptions defined in this package """


class ParseError(LotterError, ValueError):
    """Malformed amount, split, date or price directive."""


class ConfigurationError(LotterError):
    """Unusable configuration (e.g. no base currency)."""


class TransactionError(LotterError):
    """A transaction can't be applied to the ledger.

    Args:
        msg: Error message detailing the problem.
        line: the journal line at fault, if known.

    Attributes:
        msg: Error message detailing the problem.
        line: the journal line at fault, if known.
    """

    def __init__(self, msg: str, line: str = None) -> None:
        self.msg = msg
        self.line = line
        if line is not None:
            msg = f"{msg}: {line.strip()!r}"
        super(TransactionError, self).__init__(msg)


class InsufficientInventoryError(TransactionError):
    """Selling more inventory than a lot queue holds.

    Attributes:
        disposals: lot disposals already made before the shortfall was found.
    """

    def __init__(self, msg: str, line: str = None, disposals=None) -> None:
        self.disposals = list(disposals or [])
        super(InsufficientInventoryError, self).__init__(msg, line)


class InternalError(LotterError, AssertionError):
    """ Base class for violated internal invariants """


class AssetMismatchError(InternalError):
    """Amounts or lots of different assets were combined."""


class InvalidLotError(InternalError):
    """Lot created or sold in violation of its invariants."""


class InvalidSplitError(InternalError):
    """Price or cost requested from a split that has neither."""
