"""
Wallet address validation.

Solana addresses are base58 strings, 32 to 44 characters long. Validation is
purely syntactic and runs before any network call is made.
"""

import re
from typing import Optional

from .errors import AddressValidationError, ValidationReason


BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
MIN_ADDRESS_LENGTH = 32
MAX_ADDRESS_LENGTH = 44

_BASE58_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]+$")
_NON_ALPHANUMERIC_RE = re.compile(r"[^A-Za-z0-9]")


def validate_address(candidate: Optional[str]) -> None:
    """
    Check that a candidate string looks like a Solana wallet address.

    Args:
        candidate: Raw user input; surrounding whitespace is ignored

    Raises:
        AddressValidationError: With reason EMPTY, BAD_LENGTH or BAD_ALPHABET
    """
    address = (candidate or "").strip()

    if not address:
        raise AddressValidationError(ValidationReason.EMPTY)

    if len(address) < MIN_ADDRESS_LENGTH or len(address) > MAX_ADDRESS_LENGTH:
        raise AddressValidationError(ValidationReason.BAD_LENGTH)

    if not _BASE58_RE.match(address):
        raise AddressValidationError(ValidationReason.BAD_ALPHABET)


def sanitize_address_input(value: Optional[str]) -> str:
    """
    Clean raw address input the way the input field does while typing.

    Strips everything outside [A-Za-z0-9] and truncates to 44 characters.
    Characters such as 0, O, I and l survive; validate_address rejects them.

    Examples:
        sanitize_address_input(" GKvq-suNc ") -> "GKvqsuNc"
    """
    cleaned = _NON_ALPHANUMERIC_RE.sub("", value or "")
    return cleaned[:MAX_ADDRESS_LENGTH]
