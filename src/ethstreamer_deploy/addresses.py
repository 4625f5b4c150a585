"""Account address validation."""

from typing import Any

from eth_utils import is_address, to_checksum_address

from .exceptions import InvalidAddressError


def validate_address(value: Any) -> str:
    """
    Validate an account address literal.

    Accepts 0x-prefixed 40 hex digit strings that are all lower case, all
    upper case, or correctly EIP-55 checksummed.

    Args:
        value: Candidate address

    Returns:
        Checksummed address

    Raises:
        InvalidAddressError: If value is not a well-formed address
    """
    if not isinstance(value, str) or not value.startswith(("0x", "0X")):
        raise InvalidAddressError(f"Not a 0x-prefixed address: {value!r}")

    if len(value) != 42:
        raise InvalidAddressError(
            f"Address must have 40 hex digits, got {len(value) - 2}: {value}"
        )

    if not is_address(value):
        raise InvalidAddressError(f"Invalid address or checksum: {value}")

    return to_checksum_address(value)
