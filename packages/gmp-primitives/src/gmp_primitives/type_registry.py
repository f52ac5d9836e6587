"""
Canonical type descriptors for every signed message schema.

Each schema is identified by the Keccak-256 hash of its descriptor string
(field types and names in declaration order, followed by the descriptors of
any nested struct types). The hash is the first value mixed into every struct
digest, so two schemas can never produce the same digest. Changing a
descriptor changes every digest for that schema and breaks compatibility with
deployed signers and gateways.
"""

from types import MappingProxyType

from hexbytes import HexBytes
from web3 import Web3

TSS_KEY_TYPE = "TssKey(uint8 yParity,uint256 xCoord)"
UPDATE_KEYS_TYPE = "UpdateKeysMessage(TssKey[] revoke,TssKey[] register)" + TSS_KEY_TYPE
UPDATE_NETWORK_INFO_TYPE = (
    "UpdateNetworkInfo(uint16 networkId,bytes32 domainSeparator,uint64 gasLimit,"
    "UFloat9x56 relativeGasPrice,uint128 baseFee,uint64 mortality)"
)
GMP_MESSAGE_TYPE = (
    "GmpMessage(bytes32 source,uint16 srcNetwork,address dest,uint16 destNetwork,"
    "uint256 gasLimit,uint256 salt,bytes data)"
)
EIP712_DOMAIN_TYPE = (
    "EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)


def type_hash(descriptor: str) -> HexBytes:
    """Hash a canonical type descriptor."""
    return Web3.keccak(text=descriptor)


TSS_KEY_TYPE_HASH = type_hash(TSS_KEY_TYPE)
UPDATE_KEYS_TYPE_HASH = type_hash(UPDATE_KEYS_TYPE)
UPDATE_NETWORK_INFO_TYPE_HASH = type_hash(UPDATE_NETWORK_INFO_TYPE)
GMP_MESSAGE_TYPE_HASH = type_hash(GMP_MESSAGE_TYPE)
EIP712_DOMAIN_TYPE_HASH = type_hash(EIP712_DOMAIN_TYPE)

# Schema name -> (descriptor, descriptor hash)
TYPE_REGISTRY = MappingProxyType({
    "TssKey": (TSS_KEY_TYPE, TSS_KEY_TYPE_HASH),
    "UpdateKeysMessage": (UPDATE_KEYS_TYPE, UPDATE_KEYS_TYPE_HASH),
    "UpdateNetworkInfo": (UPDATE_NETWORK_INFO_TYPE, UPDATE_NETWORK_INFO_TYPE_HASH),
    "GmpMessage": (GMP_MESSAGE_TYPE, GMP_MESSAGE_TYPE_HASH),
    "EIP712Domain": (EIP712_DOMAIN_TYPE, EIP712_DOMAIN_TYPE_HASH),
})

TYPE_HASHES = MappingProxyType({
    name: descriptor_hash for name, (_, descriptor_hash) in TYPE_REGISTRY.items()
})
