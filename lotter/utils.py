"""
Utility functions used by lotter modules
"""
import datetime
from fractions import Fraction
from typing import Union


def sign(x) -> int:
    """Extract the sign of a number (+1, -1, or 0)"""
    return (x != 0) and (1, -1)[x < 0]


def _scaled(number: Union[int, Fraction], places: int) -> int:
    """Integer of `number` * 10**places, rounded half away from zero."""
    n = abs(Fraction(number)) * 10 ** places
    q, r = divmod(n.numerator, n.denominator)
    if 2 * r >= n.denominator:
        q += 1
    return -q if number < 0 else q


def round_fraction(number: Union[int, Fraction], places: int) -> Fraction:
    """Round to the given number of decimal places, halves away from zero.

    The result is still a Fraction, i.e. the exact value that
    format_fraction() renders.
    """
    return Fraction(_scaled(number, places), 10 ** places)


def format_fraction(number: Union[int, Fraction], places: int) -> str:
    """Render a rational number as a decimal string with exactly `places` digits.

    >>> format_fraction(Fraction(2, 3), 4)
    '0.6667'
    >>> format_fraction(Fraction(-1, 2), 0)
    '-1'
    """
    scaled = _scaled(number, places)
    digits = str(abs(scaled)).rjust(places + 1, "0")
    text = digits if places == 0 else f"{digits[:-places]}.{digits[-places:]}"
    return f"-{text}" if scaled < 0 else text


def elapsed_years(
    start: Union[datetime.date, datetime.datetime],
    end: Union[datetime.date, datetime.datetime],
) -> int:
    """Whole calendar years from start to end.

    Elapsed days are NOT used; just compare calendar pages.  The anniversary
    date completes a year.
    """
    years = end.year - start.year
    if (end.month, end.day) < (start.month, start.day):
        years -= 1
    return years


def realize_longterm(
    opendt: Union[datetime.date, datetime.datetime],
    closedt: Union[datetime.date, datetime.datetime],
) -> bool:
    """Returns True if a realization is eligible for long-term capital gains treatment.

    Args:
        opendt: date of the Lot's holding period start.
        closedt: date of the realizing transaction.
    """
    return elapsed_years(opendt, closedt) > 0
