"""Routes for the participation blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify

from kickoff.eligibility.repository import FirestoreEligibilityRepository

from . import bp
from .services import ParticipationService, recommended_participation_model


def _participation_service() -> ParticipationService:
    return ParticipationService(FirestoreEligibilityRepository(firestore.client()))


@bp.route("/teams/<string:team_id>/tournaments/<string:tournament_id>", methods=["GET"])
def check_team(team_id: str, tournament_id: str) -> Any:
    """Check whether a team may register for a tournament."""
    result = _participation_service().check_team_eligibility(team_id, tournament_id)
    current_app.logger.info(
        f"Team {team_id} eligibility for tournament {tournament_id}: "
        f"{result.is_eligible}"
    )
    return jsonify(result.to_dict())


@bp.route("/tournaments/<string:tournament_id>/teams", methods=["GET"])
def eligible_teams(tournament_id: str) -> Any:
    """List the teams that may register for a tournament."""
    teams = _participation_service().get_eligible_teams(tournament_id)
    return jsonify({"teams": teams})


@bp.route("/participation-models/<string:tournament_model>", methods=["GET"])
def participation_model(tournament_model: str) -> Any:
    """Show which participation model a tournament model normally uses."""
    return jsonify(
        {
            "tournamentModel": tournament_model,
            "participationModel": recommended_participation_model(tournament_model),
        }
    )
