"""Routes for the eligibility blueprint."""

from __future__ import annotations

import datetime
from typing import Any, Optional

from firebase_admin import firestore
from flask import current_app, jsonify, request
from flask_wtf.csrf import generate_csrf

from kickoff.auth.decorators import login_required
from kickoff.errors import ValidationError
from kickoff.extensions import csrf
from kickoff.utils import get_timezone, to_date

from . import bp
from .repository import FirestoreEligibilityRepository
from .rule_admin import RuleAdminService
from .services import EligibilityService


def _eligibility_service() -> EligibilityService:
    return EligibilityService(
        FirestoreEligibilityRepository(firestore.client()),
        timezone=get_timezone(current_app.config["ELIGIBILITY_TIMEZONE"]),
    )


def _parse_as_of() -> Optional[datetime.date]:
    """Read the optional ``asOf`` query parameter."""
    raw = request.args.get("asOf")
    if not raw:
        return None
    try:
        return to_date(raw)
    except ValueError as e:
        raise ValidationError("asOf must be an ISO date (YYYY-MM-DD).") from e


def _json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload


@bp.route("/csrf-token", methods=["GET"])
def csrf_token() -> Any:
    """Issue a CSRF token for the rule administration endpoints."""
    return jsonify({"csrfToken": generate_csrf()})


@bp.route("/players/<string:upid>/tournaments/<string:tournament_id>", methods=["GET"])
def check_player(upid: str, tournament_id: str) -> Any:
    """Check whether a player may take part in a tournament."""
    team_id = request.args.get("teamId") or None
    result = _eligibility_service().check_eligibility(
        upid, tournament_id, team_id=team_id, as_of=_parse_as_of()
    )
    current_app.logger.info(
        f"Eligibility of {upid} for tournament {tournament_id}: {result.eligible}"
    )
    return jsonify(result.to_dict())


@bp.route("/tournaments/<string:tournament_id>/players:bulk", methods=["POST"])
@csrf.exempt
def check_players_bulk(tournament_id: str) -> Any:
    """Check many players against one tournament."""
    payload = _json_body()
    player_ids = payload.get("playerIds")
    if (
        not isinstance(player_ids, list)
        or not player_ids
        or not all(isinstance(pid, str) and pid for pid in player_ids)
    ):
        raise ValidationError("playerIds must be a non-empty list of player ids.")

    max_subjects = current_app.config["ELIGIBILITY_BULK_MAX_SUBJECTS"]
    if len(player_ids) > max_subjects:
        raise ValidationError(f"At most {max_subjects} players can be checked at once.")

    team_id = payload.get("teamId")
    if team_id is not None and not isinstance(team_id, str):
        raise ValidationError("teamId must be a string.")

    results = _eligibility_service().check_eligibility_bulk(
        player_ids,
        tournament_id,
        team_id=team_id or None,
        as_of=_parse_as_of(),
        max_workers=current_app.config["ELIGIBILITY_BULK_MAX_WORKERS"],
    )
    return jsonify({"results": {upid: r.to_dict() for upid, r in results.items()}})


@bp.route("/tournaments/<string:tournament_id>/rules", methods=["GET"])
@login_required
def list_rules(tournament_id: str) -> Any:
    """List a tournament's rules, including inactive ones."""
    rules = RuleAdminService.list_rules(tournament_id, db=firestore.client())
    return jsonify({"rules": rules})


@bp.route("/tournaments/<string:tournament_id>/rules", methods=["POST"])
@login_required(admin_required=True)
def create_rule(tournament_id: str) -> Any:
    """Add a rule to a tournament."""
    rule_id = RuleAdminService.create_rule(
        tournament_id, _json_body(), db=firestore.client()
    )
    current_app.logger.info(f"Created eligibility rule {rule_id} for {tournament_id}")
    return jsonify({"id": rule_id}), 201


@bp.route("/rules/<string:rule_id>", methods=["PATCH"])
@login_required(admin_required=True)
def update_rule(rule_id: str) -> Any:
    """Edit an existing rule."""
    rule = RuleAdminService.update_rule(rule_id, _json_body(), db=firestore.client())
    current_app.logger.info(f"Updated eligibility rule {rule_id}")
    return jsonify(rule)


@bp.route("/rules/<string:rule_id>/deactivate", methods=["POST"])
@login_required(admin_required=True)
def deactivate_rule(rule_id: str) -> Any:
    """Stop evaluating a rule without deleting it."""
    RuleAdminService.deactivate_rule(rule_id, db=firestore.client())
    current_app.logger.info(f"Deactivated eligibility rule {rule_id}")
    return jsonify({"status": "success"})
