"""
Transaction normalization.

Maps raw transaction records, whose shape depends on the kind of transfer
they carry, onto a uniform TransactionSummary. Also holds the presentation
helpers tied to transactions: relative timestamps and explorer links.
"""

from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from .models import RawTransaction, TransactionSummary
from .token_classifier import UNKNOWN_NAME, format_balance


MAX_TRANSACTIONS = 10
LAMPORTS_PER_SOL = 10**9
SOL_DECIMALS = 9

UNKNOWN_SIGNATURE = "Unknown"
EXPLORER_TX_URL = "https://solscan.io/tx/{signature}"

TYPE_TRANSFER = "Transfer"
TYPE_TOKEN_TRANSFER = "Token Transfer"
TYPE_SOL_TRANSFER = "SOL Transfer"
TYPE_NFT_TRANSFER = "NFT Transfer"

STATUS_SUCCESS = "Success"
STATUS_FAILED = "Failed"


def format_lamports(lamports: Optional[int]) -> str:
    """
    Convert lamports to SOL with exactly 9 fractional digits.

    Examples:
        format_lamports(1500000000) -> "1.500000000"
        format_lamports(5000) -> "0.000005000"
    """
    lamports = lamports or 0
    sign = "-" if lamports < 0 else ""
    whole, fraction = divmod(abs(lamports), LAMPORTS_PER_SOL)
    return f"{sign}{whole}.{fraction:0{SOL_DECIMALS}d}"


def resolve_signature(raw: RawTransaction) -> str:
    if raw.signature:
        return raw.signature
    if raw.nested_signatures and raw.nested_signatures[0]:
        return raw.nested_signatures[0]
    return UNKNOWN_SIGNATURE


def to_datetime(timestamp: Optional[int], now: datetime) -> datetime:
    """Convert epoch seconds to an aware UTC datetime, defaulting to now."""
    if not timestamp:
        return now
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        # Outside the platform's representable range
        return now


def normalize_transaction(raw: RawTransaction, now: Optional[datetime] = None) -> TransactionSummary:
    """
    Normalize one raw transaction.

    The transfer kind is decided by the first non-empty list, checked in
    order: token transfers, native SOL transfers, NFT transfers.

    Args:
        raw: Raw transaction record
        now: Time used when the record has no timestamp (defaults to now)

    Returns:
        TransactionSummary for display
    """
    if now is None:
        now = datetime.now(timezone.utc)

    if raw.token_transfers:
        transfer = raw.token_transfers[0]
        tx_type = TYPE_TOKEN_TRANSFER
        amount = format_balance(transfer.amount, transfer.decimals or 0)
        token = transfer.mint or UNKNOWN_NAME
    elif raw.native_transfers:
        tx_type = TYPE_SOL_TRANSFER
        amount = format_lamports(raw.native_transfers[0].amount)
        token = "SOL"
    elif raw.nft_transfer_count > 0:
        tx_type = TYPE_NFT_TRANSFER
        amount = "1"
        token = "NFT"
    else:
        tx_type = TYPE_TRANSFER
        amount = "0"
        token = "SOL"

    return TransactionSummary(
        signature=resolve_signature(raw),
        tx_type=tx_type,
        amount=amount,
        token=token,
        timestamp=to_datetime(raw.timestamp, now),
        status=STATUS_FAILED if raw.error else STATUS_SUCCESS,
        fee=format_lamports(raw.fee) if raw.fee else "0",
    )


def normalize_transactions(
    raw_transactions: Iterable[RawTransaction],
    now: Optional[datetime] = None,
) -> List[TransactionSummary]:
    """
    Normalize the most recent transactions.

    Input is expected newest-first; only the first MAX_TRANSACTIONS records
    are kept and their order is preserved.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    recent = list(raw_transactions)[:MAX_TRANSACTIONS]
    return [normalize_transaction(raw, now) for raw in recent]


def format_relative_time(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """
    Describe how long ago a timestamp was.

    Returns:
        "Just now", "5m ago", "3h ago", "2d ago", or a YYYY-MM-DD date for
        anything a week old or more
    """
    if now is None:
        now = datetime.now(timezone.utc)

    seconds = (now - timestamp).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return timestamp.strftime("%Y-%m-%d")


def explorer_url(signature: Optional[str]) -> Optional[str]:
    """Return the Solscan URL for a signature, or None if it is unknown."""
    if not signature or signature == UNKNOWN_SIGNATURE:
        return None
    return EXPLORER_TX_URL.format(signature=signature)


def open_in_explorer(signature: Optional[str], opener: Callable[[str], object]) -> bool:
    """
    Ask the host to open a transaction in the block explorer.

    Args:
        signature: Transaction signature
        opener: Host capability that opens a URL in a new view

    Returns:
        True if the opener was called
    """
    url = explorer_url(signature)
    if url is None:
        return False
    opener(url)
    return True
