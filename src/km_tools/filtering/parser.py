# km_tools/filtering/parser.py
"""Row parsing for whitespace-delimited k-mer abundance matrices."""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

# Fields are separated by runs of space, tab or newline only
_TOKEN_RE = re.compile(rb"[^ \t\n]+")
# Leading whitespace, optional sign, then as many digits as are present
_COUNT_RE = re.compile(rb"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Row:
    """One parsed matrix line."""
    identifier: bytes
    abundances: Tuple[int, ...]
    raw: bytes

    @property
    def width(self):
        return len(self.abundances)


def parse_count(token: bytes) -> int:
    """
    Parse an abundance field leniently.

    The longest leading base-10 integer is used and anything after it is
    ignored; a token without digits is 0. Malformed fields are therefore
    never an error.
    """
    if token.isdigit():
        return int(token)
    match = _COUNT_RE.match(token)
    if match is None:
        return 0
    return int(match.group(1))


def tokenize(line: bytes):
    return _TOKEN_RE.findall(line)


def parse_row(line: bytes) -> Optional[Row]:
    """
    Split a raw line into identifier and abundance values.

    Returns None for a line without tokens. The original bytes are kept on
    the returned Row untouched.
    """
    tokens = tokenize(line)
    if not tokens:
        return None
    abundances = tuple(parse_count(token) for token in tokens[1:])
    return Row(identifier=tokens[0], abundances=abundances, raw=line)
