"""
Struct hashing and typed-hash construction.

Every struct digest is keccak256(abi.encode(typeHash, field1, field2, ...)),
with dynamic fields (byte strings, key arrays) replaced by their own hash.
A signable digest is then keccak256(0x1901 || domainSeparator || structDigest),
which binds the signature to a single network and gateway instance.
"""

import logging
from collections.abc import Iterable
from typing import Union

from eth_abi import encode
from hexbytes import HexBytes
from web3 import Web3

from .models import GmpMessage, NetworkInfoUpdate, SignerKey, SignerKeySetUpdate
from .type_registry import (
    EIP712_DOMAIN_TYPE_HASH,
    GMP_MESSAGE_TYPE_HASH,
    TSS_KEY_TYPE_HASH,
    UPDATE_KEYS_TYPE_HASH,
    UPDATE_NETWORK_INFO_TYPE_HASH,
)
from .utils.conversions import check_uint, to_bytes32, to_checksum

logger = logging.getLogger(__name__)

TYPED_DATA_PREFIX = b"\x19\x01"

_GMP_MESSAGE_FIELDS = [
    "bytes32",  # type hash
    "bytes32",  # source
    "uint16",   # srcNetwork
    "address",  # dest
    "uint16",   # destNetwork
    "uint256",  # gasLimit
    "uint256",  # salt
    "bytes32",  # keccak256(data)
]


def hash_signer_key(key: SignerKey) -> HexBytes:
    """Digest of a single signer key."""
    return Web3.keccak(
        encode(["bytes32", "uint8", "uint256"], [TSS_KEY_TYPE_HASH, key.parity, key.x_coord])
    )


def hash_signer_keys(keys: Iterable[SignerKey]) -> HexBytes:
    """
    Digest of an ordered sequence of signer keys.

    The per-key digests are concatenated and hashed once, so the result depends
    on the order of the keys. An empty sequence hashes to keccak256("").
    """
    return Web3.keccak(b"".join(hash_signer_key(key) for key in keys))


def hash_signer_key_set_update(update: SignerKeySetUpdate) -> HexBytes:
    digest = Web3.keccak(
        encode(
            ["bytes32", "bytes32", "bytes32"],
            [
                UPDATE_KEYS_TYPE_HASH,
                hash_signer_keys(update.revoke),
                hash_signer_keys(update.register),
            ],
        )
    )
    logger.debug(
        f"Hashed key set update (revoke={len(update.revoke)}, "
        f"register={len(update.register)}): {Web3.to_hex(digest)}"
    )
    return digest


def hash_network_info_update(update: NetworkInfoUpdate) -> HexBytes:
    """
    Digest of a network parameter update.

    ``mortality`` is not part of the encoded fields; two updates that differ
    only in their deadline share a digest.
    """
    digest = Web3.keccak(
        encode(
            ["bytes32", "uint16", "bytes32", "uint64", "uint64", "uint128"],
            [
                UPDATE_NETWORK_INFO_TYPE_HASH,
                update.network_id,
                update.domain_separator,
                update.gas_limit,
                update.relative_gas_price.raw,
                update.base_fee,
            ],
        )
    )
    logger.debug(f"Hashed network info update for network {update.network_id}: {Web3.to_hex(digest)}")
    return digest


def encode_gmp_message_struct(message: GmpMessage, data_hash: bytes) -> bytes:
    """ABI-encode the fixed-size hash input of a message, given the digest of its body."""
    return encode(
        _GMP_MESSAGE_FIELDS,
        [
            GMP_MESSAGE_TYPE_HASH,
            message.source.to_bytes(),
            message.src_network,
            message.dest,
            message.dest_network,
            message.gas_limit,
            message.salt,
            data_hash,
        ],
    )


def hash_gmp_message(message: GmpMessage) -> HexBytes:
    """Digest of a GMP message. The body enters as its own hash."""
    return Web3.keccak(encode_gmp_message_struct(message, Web3.keccak(message.data)))


def typed_hash(
    domain_separator: Union[HexBytes, bytes, str],
    struct_hash: Union[HexBytes, bytes, str],
) -> HexBytes:
    """
    Combine a domain separator and a struct digest into the signable digest.

    Args:
        domain_separator: 32-byte separator of the target network/gateway
        struct_hash: 32-byte struct digest

    Returns:
        keccak256(0x1901 || domain_separator || struct_hash)

    Raises:
        ValueError: If either input is not 32 bytes
    """
    separator = to_bytes32(domain_separator, "domain_separator")
    digest = to_bytes32(struct_hash, "struct_hash")
    return Web3.keccak(TYPED_DATA_PREFIX + bytes(separator) + bytes(digest))


def gmp_message_id(message: GmpMessage, domain_separator: Union[HexBytes, bytes, str]) -> HexBytes:
    """Signable digest of a GMP message for the given domain."""
    return typed_hash(domain_separator, hash_gmp_message(message))


def domain_separator(name: str, version: str, chain_id: int, verifying_contract: str) -> HexBytes:
    """
    Build the EIP-712 domain separator of a gateway deployment.

    Args:
        name: Protocol name
        version: Protocol version
        chain_id: Chain id of the network hosting the gateway
        verifying_contract: Gateway contract address

    Returns:
        32-byte domain separator
    """
    check_uint("chain_id", chain_id, 256)
    separator = Web3.keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                EIP712_DOMAIN_TYPE_HASH,
                Web3.keccak(text=name),
                Web3.keccak(text=version),
                chain_id,
                to_checksum(verifying_contract, "verifying contract"),
            ],
        )
    )
    logger.debug(f"Domain separator for {name} v{version} on chain {chain_id}: {Web3.to_hex(separator)}")
    return separator
