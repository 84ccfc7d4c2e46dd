"""Per-rule-type eligibility evaluators.

Each evaluator takes an ``EvaluationContext`` and the rule's typed config and
returns a ``RuleOutcome``. Messages always describe the value that was
actually checked, on a pass as well as on a failure.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from kickoff.constants import (
    CONTRACT_STATUS_ACTIVE,
    DISCIPLINARY_STATUS_ACTIVE,
    RULE_AGE_RANGE,
    RULE_DOCUMENT_VERIFIED,
    RULE_GENDER,
    RULE_GEOGRAPHIC,
    RULE_NATIONALITY,
    RULE_NO_ACTIVE_SUSPENSIONS,
    RULE_PLAYER_STATUS,
    RULE_VALID_CONTRACT,
    SCOPE_COUNTY,
    SCOPE_SUBCOUNTY,
    SCOPE_WARD,
    SUSPENSION_INCIDENT_TYPES,
)
from kickoff.utils import safe_to_date, to_date

from .rule_config import AgeRangeConfig, AllowListConfig, GeographicConfig

if TYPE_CHECKING:
    from .models import Contract, DisciplinaryRecord, PlayerDocument, PlayerRecord
    from .repository import EligibilityDataSource


@dataclass(frozen=True)
class RuleOutcome:
    passed: bool
    message: str


class EvaluationContext:
    """Everything a rule may look at for one player check.

    Documents, disciplinary records and contracts are fetched on first use
    and then reused for the rest of the check; nothing outlives the check.
    Stored timestamps are turned into dates in ``timezone`` (UTC when None).
    """

    def __init__(
        self,
        player: PlayerRecord,
        as_of: datetime.date,
        team_id: Optional[str] = None,
        data_source: Optional[EligibilityDataSource] = None,
        documents: Optional[list[PlayerDocument]] = None,
        disciplinary_records: Optional[list[DisciplinaryRecord]] = None,
        contracts: Optional[list[Contract]] = None,
        timezone: Optional[datetime.tzinfo] = None,
    ) -> None:
        self.player = player
        self.as_of = as_of
        self.team_id = team_id
        self._data_source = data_source
        self._documents = documents
        self._disciplinary_records = disciplinary_records
        self._contracts = contracts
        self.timezone = timezone

    @property
    def subject_id(self) -> str:
        return self.player["id"]

    @property
    def documents(self) -> list[PlayerDocument]:
        if self._documents is None:
            self._documents = self._require_source().get_documents_for_subject(
                self.subject_id
            )
        return self._documents

    @property
    def disciplinary_records(self) -> list[DisciplinaryRecord]:
        if self._disciplinary_records is None:
            source = self._require_source()
            self._disciplinary_records = source.get_disciplinary_records_for_subject(
                self.subject_id
            )
        return self._disciplinary_records

    @property
    def contracts(self) -> list[Contract]:
        if self._contracts is None:
            self._contracts = self._require_source().get_contracts_for_subject(
                self.subject_id
            )
        return self._contracts

    def _require_source(self) -> EligibilityDataSource:
        if self._data_source is None:
            raise RuntimeError("No data source to load player records from.")
        return self._data_source


def calculate_age(dob: datetime.date, reference: datetime.date) -> int:
    """Whole years between ``dob`` and ``reference``, calendar aware.

    A player turns a year older on their birthday; a 29 February birthday
    is reached on 1 March in non-leap years.
    """
    age = reference.year - dob.year
    if (reference.month, reference.day) < (dob.month, dob.day):
        age -= 1
    return age


def is_active_suspension(
    record: DisciplinaryRecord,
    today: datetime.date,
    tz: Optional[datetime.tzinfo] = None,
) -> bool:
    """Return True if ``record`` currently bars the player from playing.

    Timestamped serving dates are read in ``tz``.
    """
    if record.get("status") != DISCIPLINARY_STATUS_ACTIVE:
        return False
    if record.get("incidentType") not in SUSPENSION_INCIDENT_TYPES:
        return False

    start = safe_to_date(record.get("servingStartDate"), tz)
    end = safe_to_date(record.get("servingEndDate"), tz)
    if start and end and start <= today <= end:
        return True

    matches_suspended = record.get("matchesSuspended") or 0
    return isinstance(matches_suspended, int) and matches_suspended > 0


def is_contract_valid(
    contract: Contract,
    team_id: str,
    on: datetime.date,
    tz: Optional[datetime.tzinfo] = None,
) -> bool:
    """Return True if ``contract`` binds the player to ``team_id`` on ``on``."""
    if contract.get("status") != CONTRACT_STATUS_ACTIVE:
        return False
    if contract.get("teamId") != team_id:
        return False

    start = safe_to_date(contract.get("startDate"), tz)
    if start is None or on < start:
        return False

    end_raw = contract.get("endDate")
    if end_raw:
        end = safe_to_date(end_raw, tz)
        if end is None or on > end:
            return False
    return True


def evaluate_age_range(context: EvaluationContext, config: AgeRangeConfig) -> RuleOutcome:
    dob_raw = context.player.get("dob")
    if not dob_raw:
        if not config.require_dob:
            return RuleOutcome(True, "Date of birth not required for this rule")
        return RuleOutcome(False, "Date of birth is required")

    try:
        dob = to_date(dob_raw, context.timezone)
    except ValueError:
        return RuleOutcome(False, f"Date of birth is not a valid date ({dob_raw})")

    reference = config.age_calculation_date or context.as_of
    age = calculate_age(dob, reference)

    if config.min_age is not None and age < config.min_age:
        return RuleOutcome(
            False, f"Player is {age} years old, minimum age is {config.min_age}"
        )
    if config.max_age is not None and age > config.max_age:
        return RuleOutcome(
            False, f"Player is {age} years old, maximum age is {config.max_age}"
        )
    return RuleOutcome(
        True, f"Player is {age} years old, within the allowed age range"
    )


_SCOPE_FIELDS = {
    SCOPE_WARD: ("wardId", "ward"),
    SCOPE_SUBCOUNTY: ("subCountyId", "sub-county"),
    SCOPE_COUNTY: ("countyId", "county"),
}


def evaluate_geographic(
    context: EvaluationContext, config: GeographicConfig
) -> RuleOutcome:
    field_name, label = _SCOPE_FIELDS[config.scope]
    value = context.player.get(field_name)
    if value is None or value == "":
        return RuleOutcome(False, f"Player {label} is not set")

    value = str(value)
    if value not in config.allowed_ids:
        return RuleOutcome(
            False, f"Player's {label} ({value}) is not in the allowed list"
        )
    return RuleOutcome(True, f"Player's {label} ({value}) is in the allowed list")


def evaluate_document_verified(context: EvaluationContext, config: Any) -> RuleOutcome:
    verified = [doc for doc in context.documents if doc.get("verified") is True]
    if not verified:
        return RuleOutcome(False, "Player must have at least one verified document")
    return RuleOutcome(True, f"Player has {len(verified)} verified document(s)")


def evaluate_no_active_suspensions(
    context: EvaluationContext, config: Any
) -> RuleOutcome:
    active = [
        record
        for record in context.disciplinary_records
        if is_active_suspension(record, context.as_of, context.timezone)
    ]
    if active:
        return RuleOutcome(False, f"Player has {len(active)} active suspension(s)")
    return RuleOutcome(True, "No active suspensions")


def evaluate_valid_contract(context: EvaluationContext, config: Any) -> RuleOutcome:
    if not context.team_id:
        return RuleOutcome(False, "Team ID required for contract validation")

    if any(
        is_contract_valid(
            contract, context.team_id, context.as_of, context.timezone
        )
        for contract in context.contracts
    ):
        return RuleOutcome(
            True, f"Player has an active contract with team {context.team_id}"
        )
    return RuleOutcome(
        False,
        f"Player must have an active contract with the participating team "
        f"({context.team_id})",
    )


def evaluate_nationality(
    context: EvaluationContext, config: AllowListConfig
) -> RuleOutcome:
    if not config.allowed:
        return RuleOutcome(True, "No nationality restrictions")
    nationality = context.player.get("nationality")
    if not nationality:
        return RuleOutcome(False, "Player nationality is required")
    if nationality not in config.allowed:
        return RuleOutcome(
            False, f"Player nationality ({nationality}) not allowed for this tournament"
        )
    return RuleOutcome(True, f"Player nationality ({nationality}) is allowed")


def evaluate_gender(context: EvaluationContext, config: AllowListConfig) -> RuleOutcome:
    if not config.allowed:
        return RuleOutcome(True, "No gender restrictions")
    sex = context.player.get("sex")
    if not sex:
        return RuleOutcome(False, "Player gender is required")
    if sex not in config.allowed:
        return RuleOutcome(
            False,
            f"This tournament is restricted to {', '.join(config.allowed)} players "
            f"(player is {sex})",
        )
    return RuleOutcome(True, f"Player gender ({sex}) is allowed")


def evaluate_player_status(
    context: EvaluationContext, config: AllowListConfig
) -> RuleOutcome:
    if not config.allowed:
        return RuleOutcome(True, "No status restrictions")
    status = context.player.get("status")
    if status not in config.allowed:
        return RuleOutcome(
            False, f"Player status ({status}) not allowed for this tournament"
        )
    return RuleOutcome(True, f"Player status ({status}) is allowed")


RULE_EVALUATORS: dict[str, Callable[[EvaluationContext, Any], RuleOutcome]] = {
    RULE_AGE_RANGE: evaluate_age_range,
    RULE_GEOGRAPHIC: evaluate_geographic,
    RULE_DOCUMENT_VERIFIED: evaluate_document_verified,
    RULE_NO_ACTIVE_SUSPENSIONS: evaluate_no_active_suspensions,
    RULE_VALID_CONTRACT: evaluate_valid_contract,
    RULE_NATIONALITY: evaluate_nationality,
    RULE_GENDER: evaluate_gender,
    RULE_PLAYER_STATUS: evaluate_player_status,
}
