"""Service layer for team participation in tournaments."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Optional

from kickoff.constants import (
    FIRESTORE_BATCH_LIMIT,
    PARTICIPATION_GEOGRAPHIC,
    PARTICIPATION_OPEN,
    PARTICIPATION_ORGANIZATIONAL,
    RESTRICTION_ORGANIZATION_REQUIRED,
    RESTRICTION_WRONG_COUNTY,
    RESTRICTION_WRONG_ORGANIZATION,
    RESTRICTION_WRONG_SUB_COUNTY,
    RESTRICTION_WRONG_WARD,
    TOURNAMENTS_COLLECTION,
)

from .models import TeamEligibilityResult

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

    from kickoff.eligibility.repository import EligibilityDataSource

    from .models import Team, Tournament

logger = logging.getLogger(__name__)

RECOMMENDED_PARTICIPATION_MODELS = {
    "LEAGUE": PARTICIPATION_ORGANIZATIONAL,
    "ADMINISTRATIVE_WARD": PARTICIPATION_GEOGRAPHIC,
    "ADMINISTRATIVE_SUB_COUNTY": PARTICIPATION_GEOGRAPHIC,
    "ADMINISTRATIVE_COUNTY": PARTICIPATION_GEOGRAPHIC,
    "ADMINISTRATIVE_NATIONAL": PARTICIPATION_GEOGRAPHIC,
    "WARD": PARTICIPATION_GEOGRAPHIC,
    "SUB_COUNTY": PARTICIPATION_GEOGRAPHIC,
    "COUNTY": PARTICIPATION_GEOGRAPHIC,
    "NATIONAL": PARTICIPATION_GEOGRAPHIC,
    "INTER_COUNTY": PARTICIPATION_OPEN,
    "INDEPENDENT": PARTICIPATION_OPEN,
}

# Tournament scoping field, team field, restriction code
GEOGRAPHIC_SCOPES = (
    ("countyId", RESTRICTION_WRONG_COUNTY),
    ("subCountyId", RESTRICTION_WRONG_SUB_COUNTY),
    ("wardId", RESTRICTION_WRONG_WARD),
)

GEOGRAPHIC_REASON = "Team does not meet geographic eligibility requirements"


def recommended_participation_model(tournament_model: Optional[str]) -> str:
    """Map a tournament model to the participation model it normally uses.

    Unknown models default to ORGANIZATIONAL, the most restrictive choice.
    """
    return RECOMMENDED_PARTICIPATION_MODELS.get(
        (tournament_model or "").upper(), PARTICIPATION_ORGANIZATIONAL
    )


def resolve_participation_model(tournament: Tournament) -> str:
    """Return the tournament's participation model, inferring it when unset."""
    model = tournament.get("participationModel")
    if model:
        return model
    return recommended_participation_model(tournament.get("tournamentModel"))


def _geographic_scope(tournament: Tournament) -> dict[str, Any]:
    """The scoping ids a GEOGRAPHIC tournament actually sets."""
    return {
        field_name: tournament.get(field_name)
        for field_name, _ in GEOGRAPHIC_SCOPES
        if tournament.get(field_name)
    }


def evaluate_team_participation(
    team: Team, tournament: Tournament
) -> TeamEligibilityResult:
    """Decide whether ``team`` may register for ``tournament``.

    This is the only participation predicate; list queries reuse it so a
    team is never listed as eligible while failing the single-team check.
    """
    model = resolve_participation_model(tournament)

    if model == PARTICIPATION_ORGANIZATIONAL:
        if not team.get("orgId"):
            return TeamEligibilityResult(
                is_eligible=False,
                reason="Team must belong to an organization for league participation",
                restrictions=[RESTRICTION_ORGANIZATION_REQUIRED],
            )
        if team.get("orgId") != tournament.get("orgId"):
            return TeamEligibilityResult(
                is_eligible=False,
                reason="Team must belong to the organizing organization",
                restrictions=[RESTRICTION_WRONG_ORGANIZATION],
            )
        return TeamEligibilityResult(is_eligible=True)

    if model == PARTICIPATION_GEOGRAPHIC:
        scope = _geographic_scope(tournament)
        restrictions = [
            code
            for field_name, code in GEOGRAPHIC_SCOPES
            if field_name in scope and team.get(field_name) != scope[field_name]
        ]
        if restrictions:
            return TeamEligibilityResult(
                is_eligible=False, reason=GEOGRAPHIC_REASON, restrictions=restrictions
            )
        return TeamEligibilityResult(is_eligible=True)

    if model == PARTICIPATION_OPEN:
        return TeamEligibilityResult(is_eligible=True)

    return TeamEligibilityResult(is_eligible=False, reason="Invalid participation model")


class ParticipationService:
    """Team-level eligibility, driven by a tournament's participation model."""

    def __init__(self, data_source: EligibilityDataSource) -> None:
        self.data_source = data_source

    def check_team_eligibility(
        self, team_id: str, tournament_id: str
    ) -> TeamEligibilityResult:
        """Check whether a team may register for a tournament.

        Missing teams and tournaments are reported in the result, not raised.
        """
        team = self.data_source.get_team_by_id(team_id)
        if team is None:
            return TeamEligibilityResult(is_eligible=False, reason="Team not found")

        tournament = self.data_source.get_tournament_by_id(tournament_id)
        if tournament is None:
            return TeamEligibilityResult(
                is_eligible=False, reason="Tournament not found"
            )

        return evaluate_team_participation(team, tournament)

    def get_eligible_teams(self, tournament_id: str) -> list[Team]:
        """List every team that may register for a tournament, ordered by id."""
        tournament = self.data_source.get_tournament_by_id(tournament_id)
        if tournament is None:
            logger.warning(f"Eligible teams requested for unknown tournament {tournament_id}")
            return []

        model = resolve_participation_model(tournament)
        if model == PARTICIPATION_ORGANIZATIONAL:
            if not tournament.get("orgId"):
                return []
            filters: dict[str, Any] = {"orgId": tournament["orgId"]}
        elif model == PARTICIPATION_GEOGRAPHIC:
            filters = _geographic_scope(tournament)
        elif model == PARTICIPATION_OPEN:
            filters = {}
        else:
            logger.warning(
                f"Tournament {tournament_id} has an invalid participation model: {model}"
            )
            return []

        candidates = self.data_source.list_teams(filters)
        return [
            team
            for team in candidates
            if evaluate_team_participation(team, tournament).is_eligible
        ]

    @staticmethod
    def plan_participation_model_backfill(
        tournaments: Iterable[Tournament],
    ) -> dict[str, str]:
        """Work out the participation model for tournaments that lack one."""
        plan = {}
        for tournament in tournaments:
            if tournament.get("participationModel"):
                continue
            plan[tournament["id"]] = recommended_participation_model(
                tournament.get("tournamentModel")
            )
        return plan

    @staticmethod
    def apply_participation_model_backfill(db: Client, plan: dict[str, str]) -> int:
        """Write a backfill plan in batches, returning the number of updates."""
        batch = db.batch()
        pending = 0
        for tournament_id, model in sorted(plan.items()):
            ref = db.collection(TOURNAMENTS_COLLECTION).document(tournament_id)
            batch.update(ref, {"participationModel": model})
            pending += 1
            if pending >= FIRESTORE_BATCH_LIMIT:
                batch.commit()
                batch = db.batch()
                pending = 0
        if pending:
            batch.commit()
        return len(plan)
