"""
Byte conversion helpers shared by the models and the hashing pipeline.
"""

from typing import Union

from hexbytes import HexBytes
from web3 import Web3

WORD_SIZE = 32
ADDRESS_SIZE = 20


def to_bytes_safe(value: Union[HexBytes, bytes, bytearray, str]) -> bytes:
    """
    Safely convert value to bytes, handling HexBytes, bytes, and hex strings.

    Args:
        value: Value to convert (HexBytes, bytes, bytearray or hex string)

    Returns:
        Bytes representation
    """
    if isinstance(value, HexBytes):
        return bytes(value)
    elif isinstance(value, bytes):
        return value
    elif isinstance(value, bytearray):
        return bytes(value)
    elif isinstance(value, str):
        return Web3.to_bytes(hexstr=value)
    raise ValueError(f"Cannot convert {type(value).__name__} to bytes")


def to_bytes32(value: Union[HexBytes, bytes, bytearray, str], name: str) -> HexBytes:
    """Convert a 32-byte value, raising ValueError naming the field on a size mismatch."""
    raw = to_bytes_safe(value)
    if len(raw) != WORD_SIZE:
        raise ValueError(f"{name} must be {WORD_SIZE} bytes, got {len(raw)}")
    return HexBytes(raw)


def to_checksum(address: str, name: str) -> str:
    """Validate an account address and return its EIP-55 checksum form."""
    if not address:
        raise ValueError(f"{name} is required")
    if not Web3.is_address(address):
        raise ValueError(f"Invalid {name}: {address}")
    return Web3.to_checksum_address(address)


def check_uint(name: str, value: int, bits: int) -> None:
    """Raise ValueError unless value fits in an unsigned integer of the given width."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value >= 1 << bits:
        raise ValueError(f"{name} out of range for uint{bits}: {value}")


def padded_length(length: int) -> int:
    """Round a byte length up to the next multiple of the 32-byte word."""
    return (length + WORD_SIZE - 1) // WORD_SIZE * WORD_SIZE
