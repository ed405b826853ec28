"""Parsing and formatting of amounts in the fund's money notation.

Amounts are integers of minor units (Rappen). The notation writes them as
``MAJOR.MINOR`` where either part may be replaced by a dash when it is zero:

    0     -> "0.-"
    100   -> "1.-"
    99    -> "-.99"
    -101  -> "- 1.01"

The parser also accepts ``,`` as separator, a single minor digit meaning
tenths (``"2.5"`` is 250) and a bare major amount (``"2"`` is 200).
"""

from coffee_fund.errors import ParseError

SEPARATORS = (".", ",")
SEPARATOR_CHARS = "".join(SEPARATORS)
DASH = "-"
SIGN_PREFIX = "- "
DIGITS = "0123456789"


def format_amount(amount: int) -> str:
    """Format an amount of minor units, e.g. ``-150`` as ``"- 1.50"``."""
    prefix = SIGN_PREFIX if amount < 0 else ""
    major, minor = divmod(abs(amount), 100)

    if amount != 0 and major == 0:
        major_text = DASH
    else:
        major_text = str(major)

    minor_text = DASH if minor == 0 else f"{minor:02d}"

    return f"{prefix}{major_text}.{minor_text}"


class _Cursor:
    """Read position into the text being parsed."""

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def take(self, chars: str) -> str | None:
        """Consume one character if it is one of ``chars``."""
        ch = self.peek()
        if ch and ch in chars:
            self.pos += 1
            return ch
        return None

    def take_digits(self, min_count: int = 1, max_count: int | None = None) -> str | None:
        start = self.pos
        while not self.at_end() and self.peek() in DIGITS:
            if max_count is not None and self.pos - start == max_count:
                break
            self.pos += 1
        if self.pos - start < min_count:
            self.pos = start
            return None
        return self.text[start:self.pos]


def _sign(cursor: _Cursor) -> int:
    # A dash directly in front of the separator means "no major units".
    if cursor.peek() != DASH:
        return 1
    following = cursor.text[cursor.pos + 1:cursor.pos + 2]
    if following in SEPARATORS:
        return 1
    cursor.pos += 1
    while cursor.take(" "):
        pass
    return -1


def _major(cursor: _Cursor) -> int | None:
    digits = cursor.take_digits()
    if digits is None:
        return None
    try:
        return int(digits)
    except ValueError as e:
        # Digit runs past the interpreter's int conversion limit.
        raise ParseError(cursor.text) from e


def _minor(cursor: _Cursor) -> int | None:
    digits = cursor.take_digits(min_count=1, max_count=2)
    if digits is None:
        return None
    if len(digits) == 1:
        return int(digits) * 10
    return int(digits)


def _major_sep_minor(cursor):
    major = _major(cursor)
    if major is None or not cursor.take(SEPARATOR_CHARS):
        return None
    minor = _minor(cursor)
    if minor is None:
        return None
    return major, minor


def _major_sep_dash(cursor):
    major = _major(cursor)
    if major is None or not cursor.take(SEPARATOR_CHARS):
        return None
    if not cursor.take(DASH):
        return None
    return major, 0


def _dash_sep_minor(cursor):
    if not cursor.take(DASH) or not cursor.take(SEPARATOR_CHARS):
        return None
    minor = _minor(cursor)
    if minor is None:
        return None
    return 0, minor


def _major_only(cursor):
    major = _major(cursor)
    if major is None:
        return None
    return major, 0


# Tried in order, the first one that matches wins.
_BODY_ALTERNATIVES = (_major_sep_minor, _major_sep_dash, _dash_sep_minor, _major_only)


def _body(cursor: _Cursor) -> tuple[int, int] | None:
    for alternative in _BODY_ALTERNATIVES:
        attempt = _Cursor(cursor.text, cursor.pos)
        result = alternative(attempt)
        if result is not None:
            cursor.pos = attempt.pos
            return result
    return None


def parse_amount(text: str) -> int:
    """Parse ``text`` into minor units.

    Raises:
        ParseError: if the text is not a complete amount in the notation.
    """
    cursor = _Cursor(text)
    sign = _sign(cursor)

    parts = _body(cursor)
    if parts is None or not cursor.at_end():
        raise ParseError(text)

    major, minor = parts
    return sign * (major * 100 + minor)
