"""
Data models for the GMP message layer.

This module contains the immutable value objects exchanged between the source
chain, the relay layer and destination recipients. Every model validates its
field widths on construction so that out-of-range input is rejected before it
reaches the hashing pipeline.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from hexbytes import HexBytes
from web3 import Web3

from .ufloat import UFloat9x56
from .utils.conversions import (
    ADDRESS_SIZE,
    WORD_SIZE,
    check_uint,
    to_bytes32,
    to_bytes_safe,
    to_checksum,
)

_ADDRESS_BITS = ADDRESS_SIZE * 8
_ADDRESS_MASK = (1 << _ADDRESS_BITS) - 1
_CONTRACT_FLAG = 1 << _ADDRESS_BITS


@dataclass(frozen=True, slots=True)
class SenderIdentity:
    """Opaque cross-chain sender handle.

    The handle is a 256-bit word holding the 20-byte account address in its
    low 160 bits and the is-contract flag in bit 160. Build it with
    ``encode`` (or ``from_bytes`` for wire input) and read it back with
    ``decode``; the word itself is not part of the public surface.
    """

    _word: int

    def __post_init__(self) -> None:
        check_uint("sender identity", self._word, 256)

    @classmethod
    def encode(cls, address: str, is_contract: bool) -> "SenderIdentity":
        """Pack an account address and its is-contract flag."""
        account = int.from_bytes(Web3.to_bytes(hexstr=to_checksum(address, "sender address")), "big")
        return cls(account | (_CONTRACT_FLAG if is_contract else 0))

    @classmethod
    def from_bytes(cls, value: bytes | str) -> "SenderIdentity":
        """Wrap a 32-byte handle received from the wire. Any 32-byte value is accepted."""
        return cls(int.from_bytes(to_bytes32(value, "sender identity"), "big"))

    def decode(self) -> str:
        """Return the account address, discarding the flag and any higher bits."""
        account = (self._word & _ADDRESS_MASK).to_bytes(ADDRESS_SIZE, "big")
        return Web3.to_checksum_address(Web3.to_hex(account))

    @property
    def is_contract(self) -> bool:
        return bool(self._word & _CONTRACT_FLAG)

    def to_bytes(self) -> bytes:
        return self._word.to_bytes(WORD_SIZE, "big")

    def to_hex(self) -> str:
        return Web3.to_hex(self.to_bytes())

    def __str__(self) -> str:
        kind = "contract" if self.is_contract else "account"
        return f"SenderIdentity({kind} {self.decode()})"


@dataclass(frozen=True, slots=True)
class SignerKey:
    """Public key of one TSS signer.

    Attributes:
        parity: Parity of the y coordinate, 0 or 1
        x_coord: x coordinate of the public key point
    """

    parity: int
    x_coord: int

    def __post_init__(self) -> None:
        if isinstance(self.parity, bool) or not isinstance(self.parity, int):
            raise ValueError(f"parity must be an integer, got {type(self.parity).__name__}")
        if self.parity not in (0, 1):
            raise ValueError(f"parity must be 0 or 1, got {self.parity}")
        check_uint("x_coord", self.x_coord, 256)

    @classmethod
    def from_y_parity(cls, y_parity: int, x_coord: int) -> "SignerKey":
        """Build a key from the 27/28 recovery-id form used by verifiers."""
        if isinstance(y_parity, bool) or not isinstance(y_parity, int):
            raise ValueError(f"y_parity must be an integer, got {type(y_parity).__name__}")
        if y_parity not in (27, 28):
            raise ValueError(f"y_parity must be 27 or 28, got {y_parity}")
        return cls(parity=y_parity - 27, x_coord=x_coord)

    @property
    def y_parity(self) -> int:
        """Parity in the 27/28 form expected by signature verification."""
        return self.parity + 27

    def to_dict(self) -> dict[str, Any]:
        return {"parity": self.parity, "x_coord": hex(self.x_coord)}


@dataclass(frozen=True, slots=True)
class Signature:
    """A Schnorr signature produced by the signer set."""

    x_coord: int
    e: int
    s: int

    def __post_init__(self) -> None:
        check_uint("signature x_coord", self.x_coord, 256)
        check_uint("signature e", self.e, 256)
        check_uint("signature s", self.s, 256)

    def to_dict(self) -> dict[str, Any]:
        return {"x_coord": hex(self.x_coord), "e": hex(self.e), "s": hex(self.s)}


@dataclass(frozen=True, slots=True)
class GmpMessage:
    """A cross-chain call request.

    Attributes:
        source: Identity of the sender on the source network
        src_network: Source network id
        dest: Recipient contract address on the destination network
        dest_network: Destination network id
        gas_limit: Gas made available to the recipient
        salt: Caller-chosen value so identical payloads yield distinct messages
        data: Message body handed to the recipient
    """

    source: SenderIdentity
    src_network: int
    dest: str
    dest_network: int
    gas_limit: int
    salt: int
    data: bytes = b""

    def __post_init__(self) -> None:
        if not isinstance(self.source, SenderIdentity):
            raise ValueError(f"source must be a SenderIdentity, got {type(self.source).__name__}")
        check_uint("src_network", self.src_network, 16)
        check_uint("dest_network", self.dest_network, 16)
        check_uint("gas_limit", self.gas_limit, 256)
        check_uint("salt", self.salt, 256)

        checksummed = to_checksum(self.dest, "destination address")
        if checksummed != self.dest:
            object.__setattr__(self, "dest", checksummed)
        if not isinstance(self.data, bytes) or isinstance(self.data, HexBytes):
            object.__setattr__(self, "data", to_bytes_safe(self.data))

    def __str__(self) -> str:
        return (
            f"GmpMessage({self.src_network}:{self.source.decode()[:10]}... -> "
            f"{self.dest_network}:{self.dest[:10]}..., "
            f"gas={self.gas_limit}, {len(self.data)} bytes)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source.to_hex(),
            "src_network": self.src_network,
            "dest": self.dest,
            "dest_network": self.dest_network,
            "gas_limit": self.gas_limit,
            "salt": self.salt,
            "data": Web3.to_hex(self.data),
        }


@dataclass(frozen=True, slots=True)
class SignerKeySetUpdate:
    """Keys to revoke and to register, in the order they were signed."""

    revoke: tuple[SignerKey, ...] = ()
    register: tuple[SignerKey, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "revoke", tuple(self.revoke))
        object.__setattr__(self, "register", tuple(self.register))
        for key in self.revoke + self.register:
            if not isinstance(key, SignerKey):
                raise ValueError(f"expected SignerKey, got {type(key).__name__}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "revoke": [key.to_dict() for key in self.revoke],
            "register": [key.to_dict() for key in self.register],
        }


@dataclass(frozen=True, slots=True)
class NetworkInfoUpdate:
    """Per-network economic and replay parameters.

    ``mortality`` is the deadline after which the update must not be applied.
    It is carried in the struct but is not part of its digest.
    """

    network_id: int
    domain_separator: HexBytes
    gas_limit: int
    relative_gas_price: UFloat9x56
    base_fee: int
    mortality: int

    def __post_init__(self) -> None:
        check_uint("network_id", self.network_id, 16)
        object.__setattr__(
            self, "domain_separator", to_bytes32(self.domain_separator, "domain_separator")
        )
        check_uint("gas_limit", self.gas_limit, 64)
        if not isinstance(self.relative_gas_price, UFloat9x56):
            raise ValueError("relative_gas_price must be a UFloat9x56")
        check_uint("base_fee", self.base_fee, 128)
        check_uint("mortality", self.mortality, 64)

    def to_dict(self) -> dict[str, Any]:
        return {
            "network_id": self.network_id,
            "domain_separator": Web3.to_hex(self.domain_separator),
            "gas_limit": self.gas_limit,
            "relative_gas_price": self.relative_gas_price.raw,
            "base_fee": self.base_fee,
            "mortality": self.mortality,
        }


@dataclass(frozen=True, slots=True)
class Network:
    """A known destination chain and its gateway contract."""

    id: int
    gateway: str

    def __post_init__(self) -> None:
        check_uint("network id", self.id, 16)
        checksummed = to_checksum(self.gateway, "gateway address")
        if checksummed != self.gateway:
            object.__setattr__(self, "gateway", checksummed)

    def __str__(self) -> str:
        return f"Network({self.id}, gateway={self.gateway})"


@dataclass(frozen=True, slots=True)
class Route:
    """Routing parameters towards a remote network, carried by SET_ROUTE.

    Attributes:
        network_id: Remote network id
        gas_limit: Maximum gas a message to this network may request
        base_fee: Flat fee charged per message
        gateway: Remote gateway identifier, left-padded to 32 bytes
        relative_gas_price: Remote gas price expressed in local gas units
    """

    network_id: int
    gas_limit: int
    base_fee: int
    gateway: HexBytes
    relative_gas_price: UFloat9x56

    def __post_init__(self) -> None:
        check_uint("network_id", self.network_id, 16)
        check_uint("gas_limit", self.gas_limit, 64)
        check_uint("base_fee", self.base_fee, 128)
        object.__setattr__(self, "gateway", to_bytes32(self.gateway, "gateway"))
        if not isinstance(self.relative_gas_price, UFloat9x56):
            raise ValueError("relative_gas_price must be a UFloat9x56")

    def to_dict(self) -> dict[str, Any]:
        return {
            "network_id": self.network_id,
            "gas_limit": self.gas_limit,
            "base_fee": self.base_fee,
            "gateway": Web3.to_hex(self.gateway),
            "relative_gas_price": self.relative_gas_price.raw,
        }


class Command(IntEnum):
    """Command carried by an inbound message; selects the params schema."""

    GMP = 0
    SET_SHARDS = 1
    SET_ROUTE = 2


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """Envelope delivered by the relay layer.

    Attributes:
        signature: Signer set signature over the envelope
        nonce: Strictly increasing per channel
        max_dispatch_gas: Gas budget for executing the command
        max_fee_per_gas: Fee cap for executing the command
        command: Selects how ``params`` is decoded
        params: ABI-encoded command payload
    """

    signature: Signature
    nonce: int
    max_dispatch_gas: int
    max_fee_per_gas: int
    command: Command
    params: bytes

    def __post_init__(self) -> None:
        check_uint("nonce", self.nonce, 64)
        check_uint("max_dispatch_gas", self.max_dispatch_gas, 64)
        check_uint("max_fee_per_gas", self.max_fee_per_gas, 256)
        object.__setattr__(self, "command", Command(self.command))
        if not isinstance(self.params, bytes) or isinstance(self.params, HexBytes):
            object.__setattr__(self, "params", to_bytes_safe(self.params))

    def __str__(self) -> str:
        return (
            f"InboundMessage(nonce={self.nonce}, command={self.command.name}, "
            f"{len(self.params)} param bytes)"
        )


@dataclass(frozen=True, slots=True)
class CallbackPayload:
    """Dispatch call produced for a GMP message.

    ``callback`` is the complete calldata for the recipient's receive entry
    point. It is a freshly allocated buffer owned by the caller.

    Attributes:
        message_hash: Typed hash of the message, as signed by the signer set
        dest: Recipient contract address
        gas_limit: Gas the recipient call may consume
        callback: Selector followed by the ABI-encoded call arguments
    """

    message_hash: HexBytes
    dest: str
    gas_limit: int
    callback: bytearray

    def __str__(self) -> str:
        return (
            f"CallbackPayload(id={Web3.to_hex(self.message_hash)[:10]}..., "
            f"dest={self.dest}, {len(self.callback)} bytes)"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "message_hash": Web3.to_hex(self.message_hash),
            "dest": self.dest,
            "gas_limit": self.gas_limit,
            "callback": Web3.to_hex(bytes(self.callback)),
        }
