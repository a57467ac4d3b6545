"""Value objects describing raffle participants and their tickets."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field, fields
from typing import Any, Iterable, Mapping, Optional


def _whole_number(value: Any) -> Any:
    """Turn JSON floats such as ``3.0`` into ints; anything else passes through.

    Fractional or non-numeric quotas are left as-is so that
    :meth:`Participant.__post_init__` rejects them.
    """
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class Participant:
    """A roster entry competing in the raffle.

    Attributes
    ----------
    id : int
        Unique roster identifier.
    name, supervisor, department : str
        Display fields carried through to winner records.
    nps, nrpc, refund_percent : float
        Performance metrics the ticket quota was derived from. They are not
        used by allocation or drawing.
    total_tickets : int
        Non-negative ticket quota, i.e. the participant's weight in a draw.
    """

    id: int
    name: str
    supervisor: str
    department: str
    nps: float
    nrpc: float
    refund_percent: float
    total_tickets: int

    def __post_init__(self) -> None:
        if isinstance(self.total_tickets, bool) or not isinstance(
            self.total_tickets, int
        ):
            raise TypeError("total_tickets must be an integer")
        if self.total_tickets < 0:
            raise ValueError("total_tickets must be non-negative")

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Participant":
        """Build a participant from a roster record.

        Both the dashboard's camelCase keys (``refundPercent``,
        ``totalTickets``) and snake_case keys are accepted.
        """

        def pick(snake: str, camel: str, default: Any = None) -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            supervisor=str(data.get("supervisor", "")),
            department=str(data.get("department", "")),
            nps=float(data.get("nps", 0.0)),
            nrpc=float(data.get("nrpc", 0.0)),
            refund_percent=float(pick("refund_percent", "refundPercent", 0.0)),
            total_tickets=_whole_number(pick("total_tickets", "totalTickets", 0)),
        )

    def to_json(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(Participant)}


@dataclass(frozen=True)
class TicketRange:
    """Lowest and highest ticket held; the span may contain other owners' tickets."""

    start: int
    end: int


@dataclass(frozen=True)
class TicketedParticipant(Participant):
    """A participant together with the ticket numbers assigned to them."""

    ticket_numbers: tuple[int, ...] = field(default=())
    ticket_range: Optional[TicketRange] = None

    @classmethod
    def from_participant(
        cls, participant: Participant, ticket_numbers: Iterable[int]
    ) -> "TicketedParticipant":
        numbers = tuple(sorted(ticket_numbers))
        ticket_range = TicketRange(numbers[0], numbers[-1]) if numbers else None
        base = {f.name: getattr(participant, f.name) for f in fields(Participant)}
        return cls(**base, ticket_numbers=numbers, ticket_range=ticket_range)

    def owns(self, ticket: int) -> bool:
        """Return ``True`` when ``ticket`` belongs to this participant."""
        idx = bisect_left(self.ticket_numbers, ticket)
        return idx < len(self.ticket_numbers) and self.ticket_numbers[idx] == ticket

    def as_participant(self) -> Participant:
        return Participant(**{f.name: getattr(self, f.name) for f in fields(Participant)})

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        data["ticket_numbers"] = list(self.ticket_numbers)
        data["ticket_range"] = (
            None
            if self.ticket_range is None
            else {"start": self.ticket_range.start, "end": self.ticket_range.end}
        )
        return data


__all__ = ["Participant", "TicketRange", "TicketedParticipant"]
