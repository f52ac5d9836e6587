"""Command line interface for the GMP primitives.

Prints type hashes, domain separators, message ids and callback payloads so
that signer and gateway implementations can be checked against this package.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from web3 import Web3

from .callback import build_callback
from .config import GatewayDomainConfig
from .hashing import hash_gmp_message, typed_hash
from .models import GmpMessage, SenderIdentity
from .type_registry import TYPE_REGISTRY

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the application.

    Args:
        level: Logging level as string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level: int = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def _json_int(raw: dict[str, Any], name: str, default: int | None = None) -> int:
    value = raw.get(name, default)
    if value is None:
        raise KeyError(name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be a JSON integer, got {value!r}")
    return value


def load_message(path: Path) -> GmpMessage:
    """Load a GMP message from a JSON file.

    The file holds the message fields by name; ``source`` is an object with
    ``address`` and ``is_contract`` and ``data`` is a hex string. Values are
    not coerced: integers must be JSON integers and ``is_contract`` a JSON
    boolean.

    Raises:
        ValueError: If the file is not valid JSON or a field is missing or mistyped
    """
    try:
        with path.open() as file:
            raw: dict[str, Any] = json.load(file)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        source = raw["source"]
        is_contract = source.get("is_contract", False)
        if not isinstance(is_contract, bool):
            raise ValueError(f"source.is_contract must be a JSON boolean, got {is_contract!r}")
        data = raw.get("data", "0x")
        if not isinstance(data, str):
            raise ValueError(f"data must be a hex string, got {data!r}")
        return GmpMessage(
            source=SenderIdentity.encode(source["address"], is_contract),
            src_network=_json_int(raw, "src_network"),
            dest=raw["dest"],
            dest_network=_json_int(raw, "dest_network"),
            gas_limit=_json_int(raw, "gas_limit"),
            salt=_json_int(raw, "salt", 0),
            data=Web3.to_bytes(hexstr=data),
        )
    except KeyError as e:
        raise ValueError(f"Missing field {e} in {path}") from None
    except (TypeError, AttributeError) as e:
        raise ValueError(f"Malformed message in {path}: {e}") from None


def _print_json(value: dict[str, Any]) -> None:
    print(json.dumps(value, indent=2))


def _cmd_type_hashes(args: argparse.Namespace) -> None:
    _print_json({
        name: {"descriptor": descriptor, "hash": Web3.to_hex(descriptor_hash)}
        for name, (descriptor, descriptor_hash) in TYPE_REGISTRY.items()
    })


def _cmd_domain_separator(args: argparse.Namespace) -> None:
    config = GatewayDomainConfig.from_env()
    config.log_config()
    _print_json({"domain_separator": Web3.to_hex(config.domain_separator)})


def _cmd_message_id(args: argparse.Namespace) -> None:
    config = GatewayDomainConfig.from_env()
    message = load_message(args.message)
    logger.info(f"Hashing {message}")
    struct_hash = hash_gmp_message(message)
    _print_json({
        "struct_hash": Web3.to_hex(struct_hash),
        "message_id": Web3.to_hex(typed_hash(config.domain_separator, struct_hash)),
    })


def _cmd_callback(args: argparse.Namespace) -> None:
    config = GatewayDomainConfig.from_env()
    message = load_message(args.message)
    payload = build_callback(message, config.domain_separator)
    logger.info(f"Built {payload}")
    _print_json(payload.to_dict())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="GMP message hashing and callback encoding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Environment Variables:
  GMP_CHAIN_ID         - Chain id of the network hosting the gateway
  GMP_GATEWAY_ADDRESS  - Gateway contract address
  GMP_NETWORK_ID       - GMP network id of the gateway's chain
  GMP_DOMAIN_NAME      - Domain name (default: Analog Gateway Contract)
  GMP_DOMAIN_VERSION   - Domain version (default: 0.1.0)
  LOG_LEVEL            - Logging level (can be overridden with --log-level)
        """
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level (default: WARNING)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "type-hashes", help="Print the canonical type descriptors and their hashes"
    ).set_defaults(handler=_cmd_type_hashes)

    subparsers.add_parser(
        "domain-separator", help="Print the domain separator of the configured gateway"
    ).set_defaults(handler=_cmd_domain_separator)

    message_id = subparsers.add_parser("message-id", help="Hash a GMP message JSON file")
    message_id.add_argument("message", type=Path, help="Path to the message JSON file")
    message_id.set_defaults(handler=_cmd_message_id)

    callback = subparsers.add_parser("callback", help="Build the callback payload of a GMP message")
    callback.add_argument("message", type=Path, help="Path to the message JSON file")
    callback.set_defaults(handler=_cmd_callback)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the GMP primitives tool."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        args.handler(args)
    except ValueError as e:
        logger.error(f"Input error: {e}")
        return 1
    except OSError as e:
        logger.error(f"Cannot read input: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
