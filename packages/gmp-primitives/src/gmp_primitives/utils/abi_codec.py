"""
ABI encoding utilities for inbound relay messages.

This module encodes and decodes the envelope delivered by the relay layer and
the command payloads it carries in ``params``, using the Solidity ABI tuple
layouts the gateway contracts expect.
"""

import logging
from typing import Union

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError

from ..models import (
    Command,
    GmpMessage,
    InboundMessage,
    Route,
    SenderIdentity,
    Signature,
    SignerKey,
    SignerKeySetUpdate,
)
from ..ufloat import UFloat9x56

logger = logging.getLogger(__name__)

SIGNER_KEY_ABI = "(uint8,uint256)"
SIGNATURE_ABI = "(uint256,uint256,uint256)"
GMP_MESSAGE_ABI = "(bytes32,uint16,address,uint16,uint256,uint256,bytes)"
SIGNER_KEY_SET_UPDATE_ABI = f"({SIGNER_KEY_ABI}[],{SIGNER_KEY_ABI}[])"
ROUTE_ABI = "(uint16,uint64,uint128,bytes32,uint64)"
INBOUND_MESSAGE_ABI = f"({SIGNATURE_ABI},uint64,uint64,uint256,uint8,bytes)"

CommandParams = Union[GmpMessage, SignerKeySetUpdate, Route]


class AbiCodec:
    """Encoders and decoders for relay envelopes and command payloads."""

    @staticmethod
    def _encode(abi_type: str, value: tuple) -> bytes:
        try:
            return encode([abi_type], [value])
        except EncodingError as e:
            raise ValueError(f"Cannot encode {abi_type}: {e}") from e

    @staticmethod
    def _decode(abi_type: str, data: bytes) -> tuple:
        try:
            (value,) = decode([abi_type], data)
        except DecodingError as e:
            raise ValueError(f"Malformed {abi_type} payload: {e}") from e
        return value

    @staticmethod
    def encode_gmp_message(message: GmpMessage) -> bytes:
        return AbiCodec._encode(GMP_MESSAGE_ABI, (
            message.source.to_bytes(),
            message.src_network,
            message.dest,
            message.dest_network,
            message.gas_limit,
            message.salt,
            message.data,
        ))

    @staticmethod
    def decode_gmp_message(data: bytes) -> GmpMessage:
        source, src_network, dest, dest_network, gas_limit, salt, body = AbiCodec._decode(
            GMP_MESSAGE_ABI, data
        )
        return GmpMessage(
            source=SenderIdentity.from_bytes(source),
            src_network=src_network,
            dest=dest,
            dest_network=dest_network,
            gas_limit=gas_limit,
            salt=salt,
            data=body,
        )

    @staticmethod
    def encode_signer_key_set_update(update: SignerKeySetUpdate) -> bytes:
        return AbiCodec._encode(SIGNER_KEY_SET_UPDATE_ABI, (
            [(key.parity, key.x_coord) for key in update.revoke],
            [(key.parity, key.x_coord) for key in update.register],
        ))

    @staticmethod
    def decode_signer_key_set_update(data: bytes) -> SignerKeySetUpdate:
        revoke, register = AbiCodec._decode(SIGNER_KEY_SET_UPDATE_ABI, data)
        return SignerKeySetUpdate(
            revoke=tuple(SignerKey(parity, x_coord) for parity, x_coord in revoke),
            register=tuple(SignerKey(parity, x_coord) for parity, x_coord in register),
        )

    @staticmethod
    def encode_route(route: Route) -> bytes:
        return AbiCodec._encode(ROUTE_ABI, (
            route.network_id,
            route.gas_limit,
            route.base_fee,
            route.gateway,
            route.relative_gas_price.raw,
        ))

    @staticmethod
    def decode_route(data: bytes) -> Route:
        network_id, gas_limit, base_fee, gateway, relative_gas_price = AbiCodec._decode(
            ROUTE_ABI, data
        )
        return Route(
            network_id=network_id,
            gas_limit=gas_limit,
            base_fee=base_fee,
            gateway=gateway,
            relative_gas_price=UFloat9x56.from_raw(relative_gas_price),
        )

    @staticmethod
    def encode_params(params: CommandParams) -> tuple[Command, bytes]:
        """Encode a command payload, returning the command it belongs to."""
        if isinstance(params, GmpMessage):
            return Command.GMP, AbiCodec.encode_gmp_message(params)
        elif isinstance(params, SignerKeySetUpdate):
            return Command.SET_SHARDS, AbiCodec.encode_signer_key_set_update(params)
        elif isinstance(params, Route):
            return Command.SET_ROUTE, AbiCodec.encode_route(params)
        raise ValueError(f"Unsupported command payload: {type(params).__name__}")

    @staticmethod
    def decode_params(command: Command, params: bytes) -> CommandParams:
        """
        Decode ``params`` according to ``command``.

        Raises:
            ValueError: If the command is unknown or the payload is malformed
        """
        command = Command(command)
        if command == Command.GMP:
            return AbiCodec.decode_gmp_message(params)
        elif command == Command.SET_SHARDS:
            return AbiCodec.decode_signer_key_set_update(params)
        else:
            return AbiCodec.decode_route(params)

    @staticmethod
    def encode_inbound_message(message: InboundMessage) -> bytes:
        signature = message.signature
        return AbiCodec._encode(INBOUND_MESSAGE_ABI, (
            (signature.x_coord, signature.e, signature.s),
            message.nonce,
            message.max_dispatch_gas,
            message.max_fee_per_gas,
            int(message.command),
            message.params,
        ))

    @staticmethod
    def decode_inbound_message(data: bytes) -> InboundMessage:
        signature, nonce, max_dispatch_gas, max_fee_per_gas, command, params = AbiCodec._decode(
            INBOUND_MESSAGE_ABI, data
        )
        message = InboundMessage(
            signature=Signature(*signature),
            nonce=nonce,
            max_dispatch_gas=max_dispatch_gas,
            max_fee_per_gas=max_fee_per_gas,
            command=command,
            params=params,
        )
        logger.debug(f"Decoded {message}")
        return message
