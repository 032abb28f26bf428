# coding: utf-8
"""The `obfuscate` operation: conceal potentially sensitive account names.

Each account name segment deeper than `prune` is replaced by a short hash, so
"Assets:Bank:Checking" becomes e.g. "Assets:9c1e2b:04aa7f".  The obfuscated
name has the same number of segments as the original, and a segment always
maps to the same hash, so the `lot` operation can still be run afterwards.

Payees are replaced by a hash too; the original payee line is kept above it
as a comment.
"""

__all__ = ["obfuscate_name", "obfuscate"]


# stdlib imports
import hashlib
from typing import Iterable, Iterator


# local imports
from lotter.split import parse_split
from lotter.scan import PAYEE_NOT_FOUND, TxLines


def _digest(text: str, salt: str, size: int) -> str:
    return hashlib.sha256((text + salt).encode("utf-8")).digest()[:size].hex()


def obfuscate_name(account: str, prune: int = 1, salt: str = "") -> str:
    """Hash each segment of an account name after the first `prune`."""
    parts = account.split(":")
    return ":".join(
        part if n < prune else _digest(part, salt, 3) for n, part in enumerate(parts)
    )


def obfuscate(blocks: Iterable[TxLines], prune: int = 1, salt: str = "") -> Iterator[str]:
    """Yield journal lines with payees and account names obfuscated.

    Args:
        blocks: journal blocks in file order, e.g. from scan.scan().
        prune: number of leading account name segments left readable,
               e.g. "Assets" vs "Expenses".
        salt: makes hashes unique, and reproducible only when salt is known.
    """
    for txlines in blocks:
        lines = list(txlines.lines)

        payee, index = txlines.payee()
        if index != PAYEE_NOT_FOUND:
            body = payee.split(";", 1)[0]
            date, _, description = body.partition(" ")
            # put original line in a comment above the obfuscated line
            lines[index] = f"; {payee}\n{date} {_digest(description, salt, 8)}"

        for n, line in enumerate(lines):
            split = parse_split(line)
            if split is None:
                continue
            cleartext = split.account.strip("[]()")
            lines[n] = line.replace(cleartext, obfuscate_name(cleartext, prune, salt), 1)

        yield from lines
        yield ""
