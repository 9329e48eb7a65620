"""
Token classification and balance formatting.

Combines a raw balance entry with optional metadata into a TokenRecord and
decides whether it belongs in the fungible or the NFT bucket.
"""

from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Dict, Iterable, List, Optional, Tuple

from .models import RawBalanceEntry, TokenMetadata, TokenRecord


UNKNOWN_NAME = "Unknown Token"
UNKNOWN_SYMBOL = "UNKNOWN"

# Fractional digits shown for tokens with more than this many decimals
MAX_DISPLAY_DECIMALS = 6
MIN_BALANCE_PRECISION = 28


def format_balance(amount: Optional[str], decimals: int) -> str:
    """
    Format a raw token amount for display.

    Args:
        amount: String-encoded integer in the token's smallest unit
        decimals: Number of decimal places of the token

    Returns:
        "0" for a missing or zero amount, a thousands-grouped integer for
        zero-decimal tokens, otherwise a fixed-point string with
        min(decimals, 6) fractional digits

    Examples:
        format_balance("1500000", 6) -> "1.500000"
        format_balance("1234", 0) -> "1,234"
        format_balance("123456789", 9) -> "0.123457"
    """
    if not amount or amount == "0":
        return "0"

    try:
        raw = Decimal(amount)
    except InvalidOperation:
        return "0"

    if not raw.is_finite():
        return "0"

    decimals = max(decimals, 0)
    places = min(decimals, MAX_DISPLAY_DECIMALS)

    with localcontext() as ctx:
        # Amounts are arbitrary precision; size the context so no digit is lost
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        ctx.prec = len(raw.as_tuple().digits) + 2
        value = raw.scaleb(-decimals)
        ctx.prec = max(ctx.prec, value.adjusted() + 1 + places + 2, MIN_BALANCE_PRECISION)

        if decimals == 0:
            return f"{value.quantize(Decimal(1), rounding=ROUND_HALF_UP):,}"

        quantum = Decimal(1).scaleb(-places)
        return f"{value.quantize(quantum, rounding=ROUND_HALF_UP):f}"


def _first_present(*candidates: Optional[str]) -> Optional[str]:
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def resolve_name(entry: RawBalanceEntry, metadata: Optional[TokenMetadata]) -> str:
    """Pick a display name: on-chain, then off-chain, then the balance entry."""
    if metadata is None:
        metadata = TokenMetadata()
    name = _first_present(metadata.on_chain_name, metadata.off_chain_name, entry.name)
    return name or UNKNOWN_NAME


def resolve_symbol(entry: RawBalanceEntry, metadata: Optional[TokenMetadata]) -> str:
    """Pick a display symbol with the same precedence as resolve_name."""
    if metadata is None:
        metadata = TokenMetadata()
    symbol = _first_present(metadata.on_chain_symbol, metadata.off_chain_symbol, entry.symbol)
    return symbol or UNKNOWN_SYMBOL


def is_non_fungible(entry: RawBalanceEntry) -> bool:
    """
    Decide NFT membership.

    A holding of exactly "1" with zero decimals counts as an NFT. This is a
    heuristic, not a token-standard check: a fungible token that happens to
    have a balance of 1 and no decimals is classified as an NFT too.
    """
    return entry.amount == "1" and entry.decimals == 0


def classify(entry: RawBalanceEntry, metadata: Optional[TokenMetadata]) -> TokenRecord:
    """
    Merge a balance entry with its metadata into a TokenRecord.

    Args:
        entry: Raw balance entry
        metadata: Metadata for the entry's mint, or None if unavailable

    Returns:
        TokenRecord with resolved name/symbol, formatted balance and bucket
    """
    return TokenRecord(
        mint=entry.mint,
        amount=entry.amount,
        decimals=entry.decimals,
        name=resolve_name(entry, metadata),
        symbol=resolve_symbol(entry, metadata),
        balance=format_balance(entry.amount, entry.decimals),
        is_nft=is_non_fungible(entry),
    )


def classify_all(
    entries: Iterable[RawBalanceEntry],
    metadata_by_mint: Dict[str, Optional[TokenMetadata]],
) -> Tuple[List[TokenRecord], List[TokenRecord]]:
    """
    Classify every balance entry into the fungible or NFT bucket.

    Args:
        entries: Balance entries in response order
        metadata_by_mint: Metadata keyed by mint; missing keys mean no metadata

    Returns:
        Tuple of (fungible, non_fungible), each in the order of entries
    """
    fungible: List[TokenRecord] = []
    non_fungible: List[TokenRecord] = []

    for entry in entries:
        record = classify(entry, metadata_by_mint.get(entry.mint))
        if record.is_nft:
            non_fungible.append(record)
        else:
            fungible.append(record)

    return fungible, non_fungible
