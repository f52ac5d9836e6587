"""Configuration management for the GMP primitives.

This module provides the gateway domain configuration used to derive the
domain separator every signed digest is bound to. Configuration is loaded
from environment variables with sensible defaults where appropriate.
"""

import logging
import os
from dataclasses import dataclass

from hexbytes import HexBytes
from web3 import Web3

from .hashing import domain_separator
from .models import Network
from .utils.conversions import to_checksum

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_DOMAIN_NAME = "Analog Gateway Contract"
DEFAULT_DOMAIN_VERSION = "0.1.0"


@dataclass(frozen=True, slots=True)
class GatewayDomainConfig:
    """Identity of one gateway deployment.

    Attributes:
        chain_id: Chain id of the network hosting the gateway
        gateway_address: Checksummed gateway contract address
        network_id: GMP network id assigned to this chain
        name: Protocol name mixed into the domain separator
        version: Protocol version mixed into the domain separator
    """

    chain_id: int
    gateway_address: str
    network_id: int
    name: str = DEFAULT_DOMAIN_NAME
    version: str = DEFAULT_DOMAIN_VERSION

    def __post_init__(self) -> None:
        """Validate gateway domain configuration."""
        if self.chain_id <= 0:
            raise ValueError(f"Chain ID must be positive, got {self.chain_id}")

        if not 0 <= self.network_id < 1 << 16:
            raise ValueError(f"Network ID must fit in 16 bits, got {self.network_id}")

        if not self.name:
            raise ValueError("Domain name must not be empty (GMP_DOMAIN_NAME)")
        if not self.version:
            raise ValueError("Domain version must not be empty (GMP_DOMAIN_VERSION)")

        # Validate and checksum gateway address
        if not self.gateway_address:
            raise ValueError("Gateway address is required (GMP_GATEWAY_ADDRESS)")

        checksummed = to_checksum(self.gateway_address, "gateway address")
        if checksummed != self.gateway_address:
            # Use object.__setattr__ since dataclass is frozen
            object.__setattr__(self, 'gateway_address', checksummed)

    @property
    def domain_separator(self) -> HexBytes:
        """Domain separator of this gateway deployment."""
        return domain_separator(self.name, self.version, self.chain_id, self.gateway_address)

    @property
    def network(self) -> Network:
        return Network(id=self.network_id, gateway=self.gateway_address)

    @classmethod
    def from_env(cls) -> "GatewayDomainConfig":
        """Load configuration from environment variables.

        Returns:
            GatewayDomainConfig instance with loaded values

        Raises:
            ValueError: If required environment variables are missing or invalid
        """
        chain_id = os.environ.get("GMP_CHAIN_ID", "")
        if not chain_id:
            raise ValueError(
                "GMP_CHAIN_ID environment variable is required. "
                "This is the chain id of the network hosting the gateway."
            )

        gateway_address = os.environ.get("GMP_GATEWAY_ADDRESS", "")
        if not gateway_address:
            raise ValueError(
                "GMP_GATEWAY_ADDRESS environment variable is required. "
                "This is the address of the deployed Gateway contract."
            )

        network_id = os.environ.get("GMP_NETWORK_ID", "")
        if not network_id:
            raise ValueError(
                "GMP_NETWORK_ID environment variable is required. "
                "This is the GMP network id assigned to the gateway's chain."
            )

        try:
            chain_id_value = int(chain_id, 0)
            network_id_value = int(network_id, 0)
        except ValueError:
            raise ValueError(
                f"GMP_CHAIN_ID and GMP_NETWORK_ID must be integers, got {chain_id!r} and {network_id!r}"
            ) from None

        return cls(
            chain_id=chain_id_value,
            gateway_address=gateway_address,
            network_id=network_id_value,
            name=os.environ.get("GMP_DOMAIN_NAME", DEFAULT_DOMAIN_NAME),
            version=os.environ.get("GMP_DOMAIN_VERSION", DEFAULT_DOMAIN_VERSION),
        )

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.info("=" * 60)
        logger.info("Gateway Domain Configuration")
        logger.info("=" * 60)
        logger.info(f"  Name: {self.name}")
        logger.info(f"  Version: {self.version}")
        logger.info(f"  Chain ID: {self.chain_id}")
        logger.info(f"  Gateway: {self.gateway_address}")
        logger.info(f"  Network ID: {self.network_id}")
        logger.info(f"  Domain Separator: {Web3.to_hex(self.domain_separator)}")
        logger.info("=" * 60)
