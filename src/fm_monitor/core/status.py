"""FM Transportes status catalog.

Single static table mapping the carrier's numeric status codes to
descriptions, plus the set of terminal codes after which no further
movement is expected.
"""

from __future__ import annotations

STATUS_CREATED = 0
STATUS_DELIVERED = 5
STATUS_RETURNED = 6
STATUS_LOST = 7
STATUS_CANCELLED = 8

UNKNOWN_STATUS_DESCRIPTION = "Unknown"

STATUS_DESCRIPTIONS: dict[int, str] = {
    STATUS_CREATED: "Order created",
    1: "Being prepared",
    2: "Collected",
    3: "In transit",
    4: "Out for delivery",
    STATUS_DELIVERED: "Delivered",
    STATUS_RETURNED: "Returned",
    STATUS_LOST: "Lost",
    STATUS_CANCELLED: "Cancelled",
    9: "Awaiting pickup",
    10: "First delivery attempt",
    11: "Second delivery attempt",
    12: "Third delivery attempt",
}

FINAL_STATUSES: frozenset[int] = frozenset(
    {STATUS_DELIVERED, STATUS_RETURNED, STATUS_LOST, STATUS_CANCELLED}
)


def describe(code: int) -> str:
    """Return the human description for a carrier status code."""
    return STATUS_DESCRIPTIONS.get(code, UNKNOWN_STATUS_DESCRIPTION)


def is_final(code: int) -> bool:
    """Return True if the status code is terminal."""
    return code in FINAL_STATUSES
