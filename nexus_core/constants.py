"""Global constants for the Nexus Store bot."""

from __future__ import annotations

from dataclasses import dataclass

# ============================================================================
# Redemption codes
# ============================================================================

NEXUS_CODE_PATTERN = r"NXS-[A-Z0-9]{4}-[A-Z0-9]{4}"

# ============================================================================
# Tickets
# ============================================================================

TICKET_CHANNEL_PREFIX = "order-"
TICKET_SUMMARY_TITLE = "🎫 Nowe Zgłoszenie Zamówienia"
TICKET_FOOTER = "NexusStore Ticketing System"
BUNDLE_ITEM_TITLE = "FiveM Bundle"
CLOSE_DELETE_DELAY_SECONDS = 2
PAYMENT_LOOKBACK_MESSAGES = 20

# ============================================================================
# Transcripts
# ============================================================================

TRANSCRIPT_MESSAGE_LIMIT = 100
TRANSCRIPT_SEPARATOR = "=" * 52
TRANSCRIPT_TIME_FORMAT = "%d.%m.%Y, %H:%M:%S"

# ============================================================================
# Rewards
# ============================================================================

XP_PER_CURRENCY_UNIT = 10
XP_PROCEDURE = "add_xp"

# ============================================================================
# Presence
# ============================================================================

PRESENCE_INTERVAL_SECONDS = 30

# ============================================================================
# Product sync
# ============================================================================

PRODUCT_SYNC_CHANNEL = "products-sync"
PRODUCT_PRICE_CURRENCY = "PLN"
REALTIME_JOIN_TIMEOUT_SECONDS = 10.0
REALTIME_HEARTBEAT_SECONDS = 25.0

# ============================================================================
# Colors
# ============================================================================

COLOR_INFO = 0x3B82F6
COLOR_SUCCESS = 0x22C55E
COLOR_DANGER = 0xEF4444
COLOR_PAYMENT = 0xE11D48
COLOR_PRODUCT = 0xFACC15
COLOR_RULES = 0xFFFFFF


# ============================================================================
# Retry policies
# ============================================================================


@dataclass(frozen=True)
class RetryPolicy:
    retryable: bool
    max_attempts: int = 0
    backoff_seconds: float = 0.0
    retry_on: frozenset[str] = frozenset()


NO_RETRY = RetryPolicy(retryable=False)

# Only the product feed subscription is retried; every other store or
# Discord call fails once and is reported by its handler.
RETRY_POLICIES: dict[str, RetryPolicy] = {
    "product_sync_subscribe": RetryPolicy(
        retryable=True,
        max_attempts=3,
        backoff_seconds=5.0,
        retry_on=frozenset({"TIMED_OUT"}),
    ),
}


def retry_policy(operation: str) -> RetryPolicy:
    return RETRY_POLICIES.get(operation, NO_RETRY)
