# coding: utf-8
"""Asset amounts with exact rational values.

Like ledger-cli, values are rationals internally, and rounded only for display.
Display precision is learned per asset from the input: the most decimal places
seen in any amount of that asset (ledger-cli's default of 6 is the floor).
The learned precision lives in a Precision registry owned by the caller,
normally the run's inventory.api.Ledger.
"""

__all__ = ["DEFAULT_PRECISION", "Precision", "Amount", "parse_amount"]


# stdlib imports
import re
from fractions import Fraction
from typing import NamedTuple, Optional, Union


# local imports
from lotter import utils
from lotter.errors import ParseError, AssetMismatchError


DEFAULT_PRECISION = 6


# Only plain numbers; ledger-cli also accepts expressions like "(1 USD + 2 USD)".
NUMBER = re.compile(r"^[-+]?(?:\d+/\d+|\d+\.?\d*|\.\d+)$")


class Precision(dict):
    """Mapping of asset code to number of decimal places used for display.

    Precision only ever increases.
    """

    def __missing__(self, asset: str) -> int:
        return DEFAULT_PRECISION

    def observe(self, asset: str, places: int) -> None:
        if places > self[asset]:
            self[asset] = places

    def round(self, amount: "Amount") -> Fraction:
        """The exact value that format() displays."""
        return utils.round_fraction(amount.value, self[amount.asset])

    def format(self, amount: "Amount") -> str:
        """Render e.g. "1.5 BTC"; trailing zeros and decimal point are dropped."""
        text = utils.format_fraction(amount.value, self[amount.asset])
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return f"{text} {amount.asset}"

    def compact(self, amount: "Amount") -> str:
        """Render without the space, e.g. "1.5BTC", for use in lot names."""
        return self.format(amount).replace(" ", "")


class Amount(NamedTuple):
    """Quantity of an asset.

    Amounts are immutable; arithmetic returns new instances.  Arithmetic
    between Amounts of different assets raises AssetMismatchError.

    Attributes:
        asset: asset code, e.g. "BTC" or "USD".
        value: signed quantity.
    """

    asset: str
    value: Fraction

    def __str__(self) -> str:
        return Precision().format(self)

    @property
    def sign(self) -> int:
        return utils.sign(self.value)

    def compatible(self, other: "Amount") -> bool:
        return self.asset == other.asset

    def _check(self, other: "Amount") -> None:
        if not self.compatible(other):
            raise AssetMismatchError(f"asset mismatch: {self} vs {other}")

    def copy(self) -> "Amount":
        return Amount(self.asset, Fraction(self.value))

    def zero(self) -> "Amount":
        return Amount(self.asset, Fraction(0))

    def __neg__(self) -> "Amount":  # type: ignore
        return Amount(self.asset, -self.value)

    def __abs__(self) -> "Amount":
        return Amount(self.asset, abs(self.value))

    def __add__(self, other: "Amount") -> "Amount":  # type: ignore
        self._check(other)
        return Amount(self.asset, self.value + other.value)

    def __sub__(self, other: "Amount") -> "Amount":
        self._check(other)
        return Amount(self.asset, self.value - other.value)

    def __mul__(self, factor: Union[int, Fraction]) -> "Amount":  # type: ignore
        return Amount(self.asset, self.value * factor)

    __rmul__ = __mul__  # type: ignore


def parse_amount(text: str, precision: Optional[Precision] = None) -> Amount:
    """Parse "<number> <asset>", e.g. "100 USD" or "-0.5 BTC".

    Args:
        text: amount as written in the journal.
        precision: if given, registry updated with the decimal places seen.

    Raises:
        ParseError: if the asset is missing or the number isn't a literal.
    """
    parts = text.strip().split(" ")
    if len(parts) < 2:
        msg = f"failed to parse amount ({text!r}), expected amount and asset name"
        raise ParseError(msg)
    number, asset = parts[0], parts[1]

    if not asset or not NUMBER.match(number):
        raise ParseError(f"failed to parse amount ({text!r})")

    if precision is not None and "." in number:
        precision.observe(asset, len(number.split(".", 1)[1]))

    try:
        value = Fraction(number)
    except ZeroDivisionError:
        raise ParseError(f"failed to parse amount ({text!r})")
    return Amount(asset, value)
