"""
GMP primitives package.

Canonical message encoding and hashing for the cross-chain GMP gateway.
"""

from .callback import build_callback
from .config import GatewayDomainConfig
from .hashing import (
    domain_separator,
    gmp_message_id,
    hash_gmp_message,
    hash_network_info_update,
    hash_signer_key,
    hash_signer_key_set_update,
    hash_signer_keys,
    typed_hash,
)
from .models import (
    CallbackPayload,
    Command,
    GmpMessage,
    InboundMessage,
    Network,
    NetworkInfoUpdate,
    Route,
    SenderIdentity,
    Signature,
    SignerKey,
    SignerKeySetUpdate,
)
from .ufloat import UFloat9x56

__all__ = [
    "CallbackPayload",
    "Command",
    "GatewayDomainConfig",
    "GmpMessage",
    "InboundMessage",
    "Network",
    "NetworkInfoUpdate",
    "Route",
    "SenderIdentity",
    "Signature",
    "SignerKey",
    "SignerKeySetUpdate",
    "UFloat9x56",
    "build_callback",
    "domain_separator",
    "gmp_message_id",
    "hash_gmp_message",
    "hash_network_info_update",
    "hash_signer_key",
    "hash_signer_key_set_update",
    "hash_signer_keys",
    "typed_hash",
]
__version__ = "0.1.0"
