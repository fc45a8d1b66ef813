"""
Devkit Wallet - Local keystore for Conflux development accounts.

Entry point for the command line.

Usage:
    devkit-wallet list                      # Show stored mnemonics
    devkit-wallet add                       # Generate or import a mnemonic
    devkit-wallet select [INDEX]            # Choose the active mnemonic
    devkit-wallet delete INDEX              # Remove a mnemonic
    devkit-wallet keys --chain core -n 3    # Derive keys of the active mnemonic
    devkit-wallet genesis 5                 # Genesis secrets, one per line
"""

import argparse
import json
import logging
import sys

from networks import Chain, get_chain_config
from services import KeystoreService, configure_logging
from utils import load_settings
from wallet import KeystoreError, TerminalPrompter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devkit-wallet",
        description="Manage the devkit mnemonic keystore",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List stored mnemonics")
    sub.add_parser("add", help="Generate or import a mnemonic")
    sub.add_parser("mnemonic", help="Print the active mnemonic")

    select = sub.add_parser("select", help="Choose the active mnemonic")
    select.add_argument("index", type=int, nargs="?", help="Entry index (prompts if omitted)")

    delete = sub.add_parser("delete", help="Delete a mnemonic")
    delete.add_argument("index", type=int)

    keys = sub.add_parser("keys", help="Derive keys of the active mnemonic")
    keys.add_argument("--chain", choices=[c.value for c in Chain], default=Chain.CORE.value)
    keys.add_argument("--from", dest="from_index", type=int, default=0)
    keys.add_argument("-n", "--count", type=int, default=1)
    keys.add_argument("--json", action="store_true", help="Print as JSON")

    genesis = sub.add_parser("genesis", help="Print genesis secrets for N accounts")
    genesis.add_argument("count", type=int)

    return parser


def run(args: argparse.Namespace, service: KeystoreService) -> None:
    """Execute one command against an initialized service."""
    if args.command == "list":
        for info in service.list_entries():
            print(info.display_label())
    elif args.command == "add":
        service.add_mnemonic()
    elif args.command == "mnemonic":
        print(service.resolve_active_mnemonic())
    elif args.command == "select":
        if args.index is None:
            service.choose_active()
        else:
            service.select_active(args.index)
            print(f"Active wallet set to: {service.active_label()}")
    elif args.command == "delete":
        removed = service.delete_mnemonic(args.index)
        print(f"Deleted: {removed.label}")
    elif args.command == "keys":
        accounts = service.derive_batch(
            args.chain, args.from_index, args.from_index + args.count - 1
        )
        if args.json:
            print(json.dumps([a.to_dict() for a in accounts], indent=2))
        else:
            config = get_chain_config(args.chain)
            print(f"# {config.display_name} (chain id {service.chain_id(config.chain)})")
            for account in accounts:
                print(f"{account.path}  {account.address}  {account.private_key}")
    elif args.command == "genesis":
        for secret in service.genesis_secrets(args.count):
            print(secret)


def main(argv=None) -> int:
    """Application entry point."""
    settings = load_settings()
    configure_logging(settings.log_level)

    args = build_parser().parse_args(argv)
    service = KeystoreService(settings, TerminalPrompter(output=lambda m: print(m, file=sys.stderr)))

    try:
        service.initialize()
        run(args, service)
    except KeystoreError as e:
        logger.error(str(e))
        return 1
    except (KeyboardInterrupt, EOFError):
        logger.warning("Aborted; keystore unchanged")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
