# coding: utf-8
"""Read a ledger-cli journal as a sequence of blank-line separated blocks.

A block is usually a transaction - a "payee" line starting with a date,
followed by indented splits - but may be anything else found in a journal:
comments, price directives ("P ..."), automated transactions, etc.
"""

__all__ = ["PAYEE_NOT_FOUND", "TxLines", "parse_date", "scan"]


# stdlib imports
import datetime as _datetime
from typing import Iterable, Iterator, List, Optional, Tuple


# local imports
from lotter.errors import ParseError


PAYEE_NOT_FOUND = -1


DATE_FORMATS = ("%Y/%m/%d", "%Y-%m-%d")


def parse_date(text: str) -> _datetime.date:
    """Parse the date at the start of a payee line, e.g. "2016/01/01" or "2016-1-1".

    Raises:
        ParseError: if none of the supported formats match.
    """
    for fmt in DATE_FORMATS:
        try:
            return _datetime.datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ParseError(f"{text!r} is not a date")


class TxLines:
    """Lines of one journal block.

    Args:
        lines: the block's lines, without line terminators.

    Attributes:
        lines: the block's lines.  Callers may rewrite them in place.
        date: date of the payee line (None if the block isn't a transaction).
    """

    def __init__(self, lines: List[str]) -> None:
        self.lines = lines
        self.date: Optional[_datetime.date] = None
        self._payee: Optional[int] = None

    def __repr__(self):
        return f"TxLines({self.lines})"

    def __len__(self) -> int:
        return len(self.lines)

    def payee(self) -> Tuple[str, int]:
        """The payee line and its index, or ("", PAYEE_NOT_FOUND)."""
        if self._payee is None:
            self._payee = self._find_payee()
        if self._payee == PAYEE_NOT_FOUND:
            return "", PAYEE_NOT_FOUND
        return self.lines[self._payee], self._payee

    @property
    def splits(self) -> List[str]:
        """Lines following the payee line (empty if not a transaction)."""
        _, index = self.payee()
        if index == PAYEE_NOT_FOUND:
            return []
        return self.lines[index + 1 :]

    def _find_payee(self) -> int:
        # Work up from the bottom: indented lines are splits, and the line
        # immediately preceding them is the payee.
        istx = False
        for index in range(len(self.lines) - 1, -1, -1):
            body = self.lines[index].split(";", 1)[0]
            trimmed = body.lstrip(" \t")
            if trimmed != body:
                if trimmed.strip():
                    istx = True
                continue

            if not istx:
                return PAYEE_NOT_FOUND

            try:
                self.date = parse_date(body.split(" ", 1)[0].strip())
            except ParseError:
                return PAYEE_NOT_FOUND
            return index

        return PAYEE_NOT_FOUND


def scan(stream: Iterable[str]) -> Iterator[TxLines]:
    """Group journal lines into blocks.

    A block ends at a blank line, once it holds at least one line that isn't
    blank or a comment.  Blank lines terminating a block aren't included.

    Args:
        stream: iterable of lines, e.g. an open text file.
    """
    lines: List[str] = []
    nonempty = False
    for line in stream:
        line = line.rstrip("\r\n")
        if not line.strip() and nonempty:
            yield TxLines(lines)
            lines, nonempty = [], False
            continue

        lines.append(line)
        if line.split(";", 1)[0].strip():
            nonempty = True

    if lines:
        yield TxLines(lines)
