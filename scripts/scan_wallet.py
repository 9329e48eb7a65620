#!/usr/bin/env python3
"""
Scan a Solana wallet for tokens, NFTs and recent transactions.

This script validates a wallet address, queries the Helius indexing API for
its token balances, metadata and transaction history, and prints a report.
Optionally the report is exported to CSV and a transaction is opened in the
Solscan explorer.
"""

import argparse
import sys
import webbrowser
from typing import Callable, List, Optional

from scripts.lib.address import sanitize_address_input
from scripts.lib.config import ScannerConfig
from scripts.lib.errors import ConfigurationError, user_message_for
from scripts.lib.formatters import render_report, write_csv
from scripts.lib.helius_client import HeliusClient
from scripts.lib.models import ScanResult
from scripts.lib.transaction_normalizer import open_in_explorer
from scripts.lib.wallet_scanner import WalletScanner, log


def open_transaction(
    result: ScanResult,
    index: int,
    opener: Callable[[str], object] = webbrowser.open_new_tab,
) -> bool:
    """
    Open the index-th (1-based) transaction of a result in the explorer.

    Returns:
        True if a browser view was requested
    """
    if index < 1 or index > len(result.transactions):
        log(f"No transaction #{index} to open")
        return False

    signature = result.transactions[index - 1].signature
    if not open_in_explorer(signature, opener):
        log(f"Transaction #{index} has no known signature")
        return False
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Show the tokens, NFTs and recent transactions of a Solana wallet.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan a wallet, API key from HELIUS_API_KEY
  %(prog)s --wallet GKvqsuNcnwWqPzzuhLmGi4rzzh55FhJtGizkhHaEJqiV

  # Tokens only, saved to CSV
  %(prog)s --api-key YOUR_KEY --wallet GKvq... --no-transactions --output wallet.csv
        """,
    )

    parser.add_argument(
        "--wallet",
        required=True,
        help="Solana wallet address to scan",
    )
    parser.add_argument(
        "--api-key",
        help="Helius API key (defaults to the HELIUS_API_KEY environment variable)",
    )
    parser.add_argument(
        "--endpoint",
        help="Helius API base URL (defaults to HELIUS_ENDPOINT or https://api.helius.xyz/v0)",
    )
    parser.add_argument(
        "--no-transactions",
        action="store_true",
        help="Skip the recent transaction history",
    )
    parser.add_argument(
        "--output",
        help="Also write token and transaction CSV files (timestamp auto-appended)",
    )
    parser.add_argument(
        "--open",
        type=int,
        metavar="N",
        help="Open the N-th recent transaction on Solscan",
    )
    return parser


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parsed_args = build_parser().parse_args(args)

    try:
        config = ScannerConfig.from_env(
            api_key=parsed_args.api_key,
            endpoint=parsed_args.endpoint,
        )
    except ConfigurationError as e:
        print(f"Error: {user_message_for(e)}", file=sys.stderr)
        return 1

    scanner = WalletScanner(
        HeliusClient(config),
        include_transactions=not parsed_args.no_transactions,
    )
    result = scanner.scan(sanitize_address_input(parsed_args.wallet))

    if result.error is not None:
        print(f"Error: {user_message_for(result.error)}", file=sys.stderr)
        return 1

    render_report(result, sys.stdout)

    if parsed_args.output:
        tokens_file, transactions_file = write_csv(result, parsed_args.output)
        print(f"\nTokens written to: {tokens_file}", file=sys.stderr)
        print(f"Transactions written to: {transactions_file}", file=sys.stderr)

    if parsed_args.open is not None:
        open_transaction(result, parsed_args.open)

    return 0


if __name__ == "__main__":
    sys.exit(main())
