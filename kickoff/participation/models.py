"""Data models for the participation blueprint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from kickoff.core.types import FirestoreDocument


class Team(FirestoreDocument, total=False):
    """A team as stored in Firestore."""

    name: str
    orgId: str
    countyId: str
    subCountyId: str
    wardId: str


class Tournament(FirestoreDocument, total=False):
    """The parts of a tournament document the participation filter reads."""

    name: str
    orgId: str
    tournamentModel: str
    # Inferred from ``tournamentModel`` when unset
    participationModel: str
    countyId: str
    subCountyId: str
    wardId: str


@dataclass(frozen=True)
class TeamEligibilityResult:
    """Whether a team may register for a tournament."""

    is_eligible: bool
    reason: Optional[str] = None
    restrictions: Optional[list[str]] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"isEligible": self.is_eligible}
        if self.reason is not None:
            data["reason"] = self.reason
        if self.restrictions is not None:
            data["restrictions"] = list(self.restrictions)
        return data
