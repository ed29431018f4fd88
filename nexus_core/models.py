"""Row types for the tables the bot reads and writes."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional

from .constants import BUNDLE_ITEM_TITLE


class OrderStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    VERIFIED = "verified"
    REJECTED = "rejected"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_ORDER_STATUSES

    def can_transition_to(self, target: OrderStatus) -> bool:
        """Whether an order in this status may move to ``target``."""
        return target in ALLOWED_ORDER_TRANSITIONS[self]


TERMINAL_ORDER_STATUSES = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.FAILED, OrderStatus.REJECTED}
)

# pending -> accepted -> completed | failed; pending -> verified | rejected.
# Re-applying the current status is not a transition.
ALLOWED_ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.ACCEPTED, OrderStatus.VERIFIED, OrderStatus.REJECTED}),
    OrderStatus.ACCEPTED: frozenset({OrderStatus.COMPLETED, OrderStatus.FAILED}),
    OrderStatus.VERIFIED: frozenset(),
    OrderStatus.REJECTED: frozenset(),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.FAILED: frozenset(),
}


class TicketStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class InvalidTransitionError(ValueError):
    """Raised when an order status change is not on the allowed path."""

    def __init__(self, current: OrderStatus, target: OrderStatus) -> None:
        super().__init__(f"Cannot move order from {current.value} to {target.value}")
        self.current = current
        self.target = target


def ensure_transition(current: OrderStatus, target: OrderStatus) -> None:
    if not current.can_transition_to(target):
        raise InvalidTransitionError(current, target)


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid decimal amount: {value!r}") from exc


@dataclass(frozen=True)
class OrderItem:
    title: str
    variant_name: str
    qty: int = 1

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> OrderItem:
        return cls(
            title=payload.get("title") or "",
            variant_name=payload.get("variantName") or "",
            qty=int(payload.get("qty") or 1),
        )

    @property
    def display_name(self) -> str:
        if not self.title or self.title == BUNDLE_ITEM_TITLE:
            return self.variant_name
        return f"{self.title} ({self.variant_name})"


@dataclass
class Order:
    id: Any
    order_id: str
    nexus_code: str
    status: OrderStatus
    email: str = ""
    total: Decimal = Decimal("0")
    currency: str = ""
    items: list[OrderItem] = field(default_factory=list)
    discord_user_id: Optional[str] = None
    discord_user: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Order:
        return cls(
            id=row["id"],
            order_id=str(row["order_id"]),
            nexus_code=row.get("nexus_code") or "",
            status=OrderStatus(row["status"]),
            email=row.get("email") or "",
            total=_parse_decimal(row.get("total")),
            currency=row.get("currency") or "",
            items=[OrderItem.from_dict(item) for item in row.get("items") or []],
            discord_user_id=_optional_str(row.get("discord_user_id")),
            discord_user=row.get("discord_user"),
        )

    def render_items(self) -> str:
        return "\n".join(f"• {item.display_name} x{item.qty}" for item in self.items)


@dataclass
class Ticket:
    id: str
    order_id: str
    customer_id: str
    status: TicketStatus
    discord_user_tag: Optional[str] = None
    channel_id: Optional[str] = None
    closed_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Ticket:
        return cls(
            id=str(row["id"]),
            order_id=str(row["order_id"]),
            customer_id=str(row["customer_id"]),
            status=TicketStatus(row.get("status") or TicketStatus.ACTIVE.value),
            discord_user_tag=row.get("discord_user_tag"),
            channel_id=_optional_str(row.get("channel_id")),
            closed_at=row.get("closed_at"),
        )


@dataclass
class Announcement:
    id: str
    discord_message_id: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Announcement:
        return cls(id=str(row["id"]), discord_message_id=str(row["discord_message_id"]))


@dataclass
class Product:
    title: str
    description: str = ""
    variants: list[dict[str, Any]] = field(default_factory=list)
    image_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Product:
        return cls(
            title=record.get("title") or "",
            description=record.get("description") or "",
            variants=list(record.get("variants") or []),
            image_url=record.get("image_url"),
        )

    @property
    def starting_price(self) -> str:
        if self.variants and self.variants[0].get("price") is not None:
            return str(self.variants[0]["price"])
        return "N/A"
