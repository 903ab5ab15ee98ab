"""Amount parsing and fixed-point formatting utilities."""

import re

from chaintrack.logging_setup import get_logger

logger = get_logger(__name__)

_INTEGER_RE = re.compile(r"^[0-9]+$")


def parse_minor_units(raw: str | int | None) -> int:
    """Parse a minor-unit amount (wei, sompi, ...) into an int.

    Chain data is untrusted: empty, negative, fractional or otherwise
    malformed values are treated as zero instead of raising.

    Args:
        raw: Base-10 integer string (or int) from an explorer response

    Returns:
        Non-negative integer amount
    """
    if raw is None:
        return 0
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return raw if raw >= 0 else 0

    text = str(raw).strip()
    if not _INTEGER_RE.match(text):
        if text:
            logger.debug("Treating malformed amount %r as zero", raw)
        return 0
    return int(text)


def format_amount(raw: str | int | None, decimals: int) -> str:
    """Format a minor-unit integer as a trimmed decimal string.

    Uses exact integer arithmetic on the digit string:
    - "1000000000000000000", 18 -> "1"
    - "1500000000000000000", 18 -> "1.5"
    - "21000000000000", 18 -> "0.000021"
    - "0" or "-5" -> "0"

    Args:
        raw: Minor-unit amount, parsed with ``parse_minor_units``
        decimals: Number of decimal places of the display unit

    Returns:
        Decimal string without trailing fractional zeros or exponent
    """
    value = parse_minor_units(raw)
    if value == 0:
        return "0"

    if decimals <= 0:
        return str(value)

    digits = str(value).rjust(decimals + 1, "0")
    integer_part = digits[:-decimals]
    fractional_part = digits[-decimals:].rstrip("0")

    if not fractional_part:
        return integer_part
    return f"{integer_part}.{fractional_part}"
