"""
Statistic owners — the organizational unit or person a statistic belongs to.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OwnerKind(str, Enum):
    COMPANY    = "company"
    DIVISION   = "division"
    DEPARTMENT = "department"
    EMPLOYEE   = "employee"


@dataclass(frozen=True)
class Owner:
    kind: OwnerKind
    id:   str

    @classmethod
    def parse(cls, kind: str, owner_id: str | None) -> "Owner":
        try:
            owner_kind = OwnerKind(str(kind).lower())
        except ValueError:
            raise ValueError(f"Unknown owner kind: {kind!r}") from None
        return cls(owner_kind, owner_id or "")


def owner_label(owner: Owner, names: dict[str, str] | None = None) -> str:
    """'Department: Sales', falling back to the raw id when no name is known."""
    if not owner.id:
        return "Unknown"
    name = (names or {}).get(owner.id, owner.id)
    return f"{owner.kind.value.capitalize()}: {name}"
