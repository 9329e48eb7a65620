"""
Output formatters for wallet scan reports.

This module renders a ScanResult as a plain-text report and handles CSV
export with timestamp-based filenames for tokens and transactions.
"""

import csv
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

from .models import (
    TOKEN_CSV_COLUMNS,
    TRANSACTION_CSV_COLUMNS,
    ScanResult,
    TokenRecord,
    TransactionSummary,
)
from .transaction_normalizer import explorer_url, format_relative_time


def generate_timestamp() -> str:
    """
    Generate a timestamp string for filenames.

    Returns:
        Timestamp in YYYYMMDD_HHMMSS format
    """
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def generate_filenames(base_path: str, timestamp: Optional[str] = None) -> Tuple[str, str]:
    """
    Generate timestamped filenames for token and transaction CSV files.

    Args:
        base_path: Base output path (e.g., "wallet_report.csv")
        timestamp: Optional timestamp to use (generates new one if not provided)

    Returns:
        Tuple of (tokens_file_path, transactions_file_path)

    Examples:
        generate_filenames("wallet_report.csv", "20241214_153022")
        -> ("wallet_report_20241214_153022_tokens.csv",
            "wallet_report_20241214_153022_transactions.csv")
    """
    if timestamp is None:
        timestamp = generate_timestamp()

    path = Path(base_path)
    stem = path.stem
    suffix = path.suffix or ".csv"
    parent = path.parent

    tokens_file = parent / f"{stem}_{timestamp}_tokens{suffix}"
    transactions_file = parent / f"{stem}_{timestamp}_transactions{suffix}"

    return str(tokens_file), str(transactions_file)


def write_tokens_csv(tokens: List[TokenRecord], stream: TextIO) -> None:
    writer = csv.writer(stream)
    writer.writerow(TOKEN_CSV_COLUMNS)

    for token in tokens:
        writer.writerow(token.to_csv_row())


def write_transactions_csv(transactions: List[TransactionSummary], stream: TextIO) -> None:
    writer = csv.writer(stream)
    writer.writerow(TRANSACTION_CSV_COLUMNS)

    for tx in transactions:
        writer.writerow(tx.to_csv_row())


def write_csv(result: ScanResult, output_path: str) -> Tuple[str, str]:
    """
    Write a scan result to a pair of timestamped CSV files.

    Args:
        result: Successful scan result
        output_path: Base output path; the timestamp is appended

    Returns:
        Tuple of (tokens_file_path, transactions_file_path)
    """
    tokens_file, transactions_file = generate_filenames(output_path)

    with open(tokens_file, "w", newline="", encoding="utf-8") as f:
        write_tokens_csv(result.fungible + result.non_fungible, f)

    with open(transactions_file, "w", newline="", encoding="utf-8") as f:
        write_transactions_csv(result.transactions, f)

    return tokens_file, transactions_file


def format_token_line(token: TokenRecord) -> str:
    return f"  {token.name} ({token.symbol})  {token.balance}"


def format_transaction_lines(tx: TransactionSummary, now: Optional[datetime] = None) -> List[str]:
    lines = [
        f"  {tx.tx_type}  {tx.amount} {tx.token}  Fee: {tx.fee} SOL  "
        f"{format_relative_time(tx.timestamp, now)}  [{tx.status}]"
    ]
    url = explorer_url(tx.signature)
    if url:
        lines.append(f"    {url}")
    return lines


def render_report(result: ScanResult, stream: TextIO, now: Optional[datetime] = None) -> None:
    """
    Render a successful scan result as a human-readable report.

    Args:
        result: Scan result to render
        stream: File-like object to write to
        now: Reference time for relative timestamps (defaults to now)
    """
    lines = [f"Wallet: {result.address}", f"Total tokens: {result.total_tokens}", ""]

    lines.append(f"Fungible Tokens ({len(result.fungible)})")
    if result.fungible:
        lines.extend(format_token_line(token) for token in result.fungible)
    else:
        lines.append("  No fungible tokens found")
    lines.append("")

    lines.append(f"NFTs ({len(result.non_fungible)})")
    if result.non_fungible:
        lines.extend(format_token_line(token) for token in result.non_fungible)
    else:
        lines.append("  No NFTs found")
    lines.append("")

    lines.append(f"Recent Transactions ({len(result.transactions)})")
    if result.transactions:
        for tx in result.transactions:
            lines.extend(format_transaction_lines(tx, now))
    else:
        lines.append("  No recent transactions found")

    stream.write("\n".join(lines) + "\n")
