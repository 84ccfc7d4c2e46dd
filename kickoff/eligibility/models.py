"""Data models for the eligibility blueprint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from kickoff.constants import SEVERITY_ERROR, SYSTEM_RULE_ID
from kickoff.core.types import FirestoreDocument


class PlayerRecord(FirestoreDocument, total=False):
    """A player registry document; ``id`` is the UPID."""

    firstName: str
    lastName: str
    dob: Any
    nationality: str
    sex: str
    status: str
    wardId: str
    # Derived from the ward lineage when not stored on the player
    subCountyId: str
    countyId: str
    identityKeyHash: str


class PlayerDocument(FirestoreDocument, total=False):
    """An identity or registration document uploaded for a player."""

    upid: str
    docType: str
    verified: bool
    verifiedAt: Any


class DisciplinaryRecord(FirestoreDocument, total=False):
    """A disciplinary incident recorded against a player."""

    upid: str
    incidentType: str
    status: str
    servingStartDate: Any
    servingEndDate: Any
    matchesSuspended: int


class Contract(FirestoreDocument, total=False):
    """A player contract with a team."""

    upid: str
    teamId: str
    status: str
    startDate: Any
    endDate: Any


@dataclass(frozen=True)
class RuleCheck:
    """The verdict of a single rule for a single player."""

    rule_id: str
    rule_name: str
    rule_type: str
    severity: str
    passed: bool
    message: str
    # Set when the rule was not really evaluated (bad config, unknown type)
    skipped: bool = False

    @property
    def blocking(self) -> bool:
        """Return True if this verdict makes the player ineligible."""
        return not self.passed and self.severity == SEVERITY_ERROR

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the JSON field names the UI expects."""
        return {
            "ruleId": self.rule_id,
            "ruleName": self.rule_name,
            "ruleType": self.rule_type,
            "severity": self.severity,
            "passed": self.passed,
            "message": self.message,
            "skipped": self.skipped,
        }


@dataclass(frozen=True)
class EligibilityResult:
    """Aggregated eligibility of a player for a tournament."""

    eligible: bool
    reasons: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    checked_rules: list[RuleCheck] = field(default_factory=list)

    @classmethod
    def from_checks(cls, checks: list[RuleCheck]) -> EligibilityResult:
        """Combine rule verdicts, preserving evaluation order."""
        reasons = [c.message for c in checks if c.blocking]
        warnings = [c.message for c in checks if not c.passed and not c.blocking]
        return cls(
            eligible=not reasons,
            reasons=reasons,
            warnings=warnings,
            checked_rules=list(checks),
        )

    @classmethod
    def subject_not_found(cls) -> EligibilityResult:
        """Build the short-circuit result for an unknown player."""
        check = RuleCheck(
            rule_id=SYSTEM_RULE_ID,
            rule_name="Player Not Found",
            rule_type=SYSTEM_RULE_ID,
            severity=SEVERITY_ERROR,
            passed=False,
            message="Player not found",
        )
        return cls.from_checks([check])

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the JSON field names the UI expects."""
        return {
            "eligible": self.eligible,
            "reasons": list(self.reasons),
            "warnings": list(self.warnings),
            "checkedRules": [c.to_dict() for c in self.checked_rules],
        }
