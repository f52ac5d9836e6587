"""
Callback payload builder for GMP messages.

The dispatch call handed to a recipient is
``onGmpReceived(bytes32 id, uint128 network, bytes32 source, bytes payload)``
where ``id`` is the typed hash the signer set signed. Its calldata layout is:

    offset  size  field
    0       4     selector
    4       32    id (typed message hash)
    36      32    source network id
    68      32    source identity
    100     32    offset of payload, relative to offset 4 (always 0x80)
    132     32    payload length
    164     n     payload, zero padded to a multiple of 32 bytes

The buffer is sized once from these offsets and the message body is copied
into it exactly once. The body digest used for the message id is computed
directly over the message's own bytes.
"""

import logging
from typing import Union

from eth_utils import function_signature_to_4byte_selector
from hexbytes import HexBytes
from web3 import Web3

from .hashing import encode_gmp_message_struct, typed_hash
from .models import CallbackPayload, GmpMessage
from .utils.conversions import WORD_SIZE, padded_length, to_bytes32

logger = logging.getLogger(__name__)

ON_GMP_RECEIVED_SIGNATURE = "onGmpReceived(bytes32,uint128,bytes32,bytes)"
ON_GMP_RECEIVED_SELECTOR = function_signature_to_4byte_selector(ON_GMP_RECEIVED_SIGNATURE)

SELECTOR_SIZE = 4
ID_OFFSET = SELECTOR_SIZE
NETWORK_OFFSET = ID_OFFSET + WORD_SIZE
SOURCE_OFFSET = NETWORK_OFFSET + WORD_SIZE
PAYLOAD_POINTER_OFFSET = SOURCE_OFFSET + WORD_SIZE
PAYLOAD_LENGTH_OFFSET = PAYLOAD_POINTER_OFFSET + WORD_SIZE
PAYLOAD_OFFSET = PAYLOAD_LENGTH_OFFSET + WORD_SIZE

# Head of the argument tuple: id, network, source, payload pointer
PAYLOAD_POINTER = PAYLOAD_LENGTH_OFFSET - SELECTOR_SIZE


def _word(value: int) -> bytes:
    return value.to_bytes(WORD_SIZE, "big")


def callback_size(payload_length: int) -> int:
    """Exact size in bytes of the callback for a body of the given length."""
    return PAYLOAD_OFFSET + padded_length(payload_length)


def build_callback(
    message: GmpMessage,
    domain_separator: Union[HexBytes, bytes, str],
) -> CallbackPayload:
    """
    Build the recipient dispatch call and the message id in one pass.

    Args:
        message: The GMP message being delivered
        domain_separator: 32-byte separator of the gateway that verifies it

    Returns:
        CallbackPayload holding the typed message hash and the calldata
    """
    separator = to_bytes32(domain_separator, "domain_separator")
    data = message.data
    data_length = len(data)

    struct_hash = Web3.keccak(encode_gmp_message_struct(message, Web3.keccak(data)))
    message_hash = typed_hash(separator, struct_hash)

    callback = bytearray(callback_size(data_length))
    callback[:ID_OFFSET] = ON_GMP_RECEIVED_SELECTOR
    callback[ID_OFFSET:NETWORK_OFFSET] = message_hash
    callback[NETWORK_OFFSET:SOURCE_OFFSET] = _word(message.src_network)
    callback[SOURCE_OFFSET:PAYLOAD_POINTER_OFFSET] = message.source.to_bytes()
    callback[PAYLOAD_POINTER_OFFSET:PAYLOAD_LENGTH_OFFSET] = _word(PAYLOAD_POINTER)
    callback[PAYLOAD_LENGTH_OFFSET:PAYLOAD_OFFSET] = _word(data_length)
    callback[PAYLOAD_OFFSET:PAYLOAD_OFFSET + data_length] = data
    # padding after the body is already zero from the allocation

    logger.debug(
        f"Built callback for message {Web3.to_hex(message_hash)} to {message.dest} "
        f"({len(callback)} bytes, body {data_length} bytes)"
    )

    return CallbackPayload(
        message_hash=message_hash,
        dest=message.dest,
        gas_limit=message.gas_limit,
        callback=callback,
    )
