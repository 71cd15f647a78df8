"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Self
from uuid import UUID


@dataclass(frozen=True)
class _Identifier:
    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class EventId(_Identifier):
    """Unique identifier for an Event."""


@dataclass(frozen=True)
class TicketTypeId(_Identifier):
    """Unique identifier for a TicketType."""


@dataclass(frozen=True)
class OrderId(_Identifier):
    """Unique identifier for an Order."""


@dataclass(frozen=True)
class TicketId(_Identifier):
    """Unique identifier for a Ticket."""


@dataclass(frozen=True)
class UserId(_Identifier):
    """Identifier of the purchasing user, issued by the auth provider."""


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def parse(cls, raw: object) -> Self:
        """Build Money from a persisted price (Decimal, int, float or str).

        Raises ValueError for non-numeric, non-finite or negative input.
        """
        if isinstance(raw, bool) or raw is None:
            raise ValueError(f"Not a price: {raw!r}")
        try:
            amount = Decimal(str(raw)) if isinstance(raw, float) else Decimal(raw)
        except (InvalidOperation, TypeError) as e:
            raise ValueError(f"Not a price: {raw!r}") from e
        if not amount.is_finite():
            raise ValueError(f"Not a price: {raw!r}")
        return cls(amount=amount)

    def __add__(self, other: "Money") -> "Money":
        return Money(self.amount + other.amount)

    def __mul__(self, quantity: int) -> "Money":
        return Money(self.amount * quantity)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")
