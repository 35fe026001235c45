from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..models.parsed_guest import ParsedGuest
from .batch_insert import BatchInsertError, batch_insert

"""Guest sinks: the ``on_import`` collaborators handed to an ImportSession.

PostgresGuestSink persists one batch per call inside a single transaction:

1. households already on the wedding are looked up by case-insensitive name
2. household names new to the wedding are created once, sized by how many guests
   of this batch share the name; the first such guest's side becomes the
   household affiliation and a main-contact guest's email its contact email
3. guests are inserted with their household id; ``address`` lands in
   ``address_street``

MockGuestSink accepts everything and only counts (mock mode, no database).
"""

__all__ = [
    "GUEST_COLUMNS",
    "HOUSEHOLD_COLUMNS",
    "HouseholdPlan",
    "MockGuestSink",
    "PostgresGuestSink",
    "WriteResult",
    "plan_households",
    "write_guests",
]

logger = logging.getLogger(__name__)

HOUSEHOLD_COLUMNS = (
    "wedding_id",
    "name",
    "affiliation",
    "relationship_tier",
    "priority_tier",
    "max_count",
    "contact_email",
)

GUEST_COLUMNS = (
    "wedding_id",
    "household_id",
    "name",
    "email",
    "phone",
    "side",
    "event_ids",
    "rsvp_status",
    "plus_one",
    "dietary_restrictions",
    "address_street",
)

NEW_HOUSEHOLD_RELATIONSHIP_TIER = "friend"
NEW_HOUSEHOLD_PRIORITY_TIER = "nice_to_have"


@dataclass(frozen=True)
class HouseholdPlan:
    name: str  # as first written in the batch
    affiliation: str
    max_count: int
    contact_email: str | None = None


@dataclass(frozen=True)
class WriteResult:
    inserted_guests: int
    created_households: int


def _household_key(name: str | None) -> str | None:
    if not name:
        return None
    key = name.strip().lower()
    return key or None


def plan_households(guests: Sequence[ParsedGuest]) -> dict[str, HouseholdPlan]:
    """Household key (trimmed, lower-cased name) -> what to create for it."""
    counts: dict[str, int] = {}
    first: dict[str, ParsedGuest] = {}
    contacts: dict[str, str] = {}
    for g in guests:
        key = _household_key(g.household_name)
        if key is None:
            continue
        counts[key] = counts.get(key, 0) + 1
        first.setdefault(key, g)
        if g.is_main_household_contact and g.email and key not in contacts:
            contacts[key] = g.email
    return {
        key: HouseholdPlan(
            name=(first[key].household_name or "").strip(),
            affiliation=first[key].side or "mutual",
            max_count=count,
            contact_email=contacts.get(key),
        )
        for key, count in counts.items()
    }


def fetch_household_ids(cursor: Any, wedding_id: str) -> dict[str, str]:
    cursor.execute("SELECT id, name FROM households WHERE wedding_id = %s", (wedding_id,))
    return {str(name).lower(): hid for hid, name in cursor.fetchall()}


def write_guests(
    cursor: Any,
    wedding_id: str,
    guests: Sequence[ParsedGuest],
    page_size: int = 500,
) -> WriteResult:
    """Insert households and guests for one batch (caller owns the transaction)."""
    household_ids = fetch_household_ids(cursor, wedding_id)
    plans = plan_households(guests)
    new_plans = {k: p for k, p in plans.items() if k not in household_ids}

    created = 0
    if new_plans:
        result = batch_insert(
            cursor,
            "households",
            HOUSEHOLD_COLUMNS,
            [
                (
                    wedding_id,
                    p.name,
                    p.affiliation,
                    NEW_HOUSEHOLD_RELATIONSHIP_TIER,
                    NEW_HOUSEHOLD_PRIORITY_TIER,
                    p.max_count,
                    p.contact_email,
                )
                for p in new_plans.values()
            ],
            returning=("id", "name"),
            page_size=page_size,
        )
        for hid, name in result.returned_values or []:
            household_ids[str(name).strip().lower()] = hid
        created = result.inserted_rows
        logger.debug("created %d household(s) in %.3fs", created, result.elapsed_seconds)

    guest_rows = []
    for g in guests:
        key = _household_key(g.household_name)
        guest_rows.append(
            (
                wedding_id,
                household_ids.get(key) if key else None,
                g.name,
                g.email,
                g.phone,
                g.side,
                g.event_ids,
                g.rsvp_status,
                g.plus_one,
                g.dietary_restrictions,
                g.address,
            )
        )
    result = batch_insert(cursor, "guests", GUEST_COLUMNS, guest_rows, page_size=page_size)
    logger.debug("inserted %d guest(s) in %.3fs", result.inserted_rows, result.elapsed_seconds)
    return WriteResult(inserted_guests=result.inserted_rows, created_households=created)


class PostgresGuestSink:
    """Async ``on_import`` callable writing each batch in its own transaction."""

    def __init__(self, connection: Any, wedding_id: str, page_size: int = 500) -> None:
        self.connection = connection
        self.wedding_id = wedding_id
        self.page_size = page_size
        self.imported_guests = 0
        self.created_households = 0

    def _write(self, guests: list[ParsedGuest]) -> WriteResult:
        cur = self.connection.cursor()
        try:
            result = write_guests(cur, self.wedding_id, guests, page_size=self.page_size)
            self.connection.commit()
        except Exception as e:
            self.connection.rollback()
            if isinstance(e, BatchInsertError):
                raise
            raise BatchInsertError(str(e)) from e
        finally:
            cur.close()
        return result

    async def __call__(self, guests: list[ParsedGuest]) -> None:
        result = await asyncio.to_thread(self._write, guests)
        self.imported_guests += result.inserted_guests
        self.created_households += result.created_households


class MockGuestSink:
    """Accepts every batch without persisting it."""

    def __init__(self) -> None:
        self.batches: list[list[ParsedGuest]] = []

    @property
    def imported_guests(self) -> int:
        return sum(len(b) for b in self.batches)

    @property
    def created_households(self) -> int:
        return len({k for b in self.batches for k in plan_households(b)})

    async def __call__(self, guests: list[ParsedGuest]) -> None:
        logger.debug("mock import of %d guest(s)", len(guests))
        self.batches.append(list(guests))
