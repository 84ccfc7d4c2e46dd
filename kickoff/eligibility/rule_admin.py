"""Write-side service for managing a tournament's eligibility rules."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from kickoff.constants import ELIGIBILITY_RULES_COLLECTION, TOURNAMENTS_COLLECTION
from kickoff.errors import NotFoundError, ValidationError

from .forms import EligibilityRuleForm
from .repository import translate_firestore_errors
from .rule_config import RuleConfigurationError, parse_rule_config

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

EDITABLE_FIELDS = ("name", "ruleType", "severity", "isActive", "description", "config")


def _form_errors(form: EligibilityRuleForm) -> str:
    messages = []
    for field_name, errors in form.errors.items():
        for error in errors:
            messages.append(f"{field_name}: {error}")
    return "; ".join(messages)


def _validate(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Validate a complete rule payload and return the fields to store."""
    for key in ("name", "description"):
        if payload.get(key) is not None and not isinstance(payload[key], str):
            raise ValidationError(f"{key}: must be a string")
    if "isActive" in payload and not isinstance(payload["isActive"], bool):
        raise ValidationError("isActive: must be true or false")

    config = payload.get("config")
    if config is not None and not isinstance(config, Mapping):
        raise ValidationError("config: must be an object")

    form = EligibilityRuleForm(formdata=None, data=dict(payload))
    if not form.validate():
        raise ValidationError(_form_errors(form))

    try:
        parse_rule_config(form.ruleType.data, config)
    except RuleConfigurationError as e:
        raise ValidationError(f"config: {e}") from e

    return {
        "name": form.name.data.strip(),
        "ruleType": form.ruleType.data,
        "severity": form.severity.data,
        "isActive": bool(form.isActive.data),
        "description": form.description.data or "",
        "config": dict(config or {}),
    }


class RuleAdminService:
    """Create, edit and retire eligibility rules.

    Every write is validated with the parser the evaluator uses, so a rule
    that is accepted here will never be skipped as misconfigured.
    """

    @staticmethod
    @translate_firestore_errors
    def list_rules(tournament_id: str, db: Client | None = None) -> list[dict[str, Any]]:
        """List all of a tournament's rules, including inactive ones."""
        if db is None:
            db = firestore.client()
        docs = (
            db.collection(ELIGIBILITY_RULES_COLLECTION)
            .where(filter=firestore.FieldFilter("tournamentId", "==", tournament_id))
            .stream()
        )
        rules = []
        for doc in docs:
            data = doc.to_dict() or {}
            data["id"] = doc.id
            rules.append(data)
        return sorted(rules, key=lambda rule: rule["id"])

    @staticmethod
    @translate_firestore_errors
    def create_rule(
        tournament_id: str, payload: Mapping[str, Any], db: Client | None = None
    ) -> str:
        """Validate and store a new rule, returning its id."""
        if db is None:
            db = firestore.client()

        tournament = cast(
            "DocumentSnapshot",
            db.collection(TOURNAMENTS_COLLECTION).document(tournament_id).get(),
        )
        if not tournament.exists:
            raise NotFoundError("Tournament not found.")

        rule_data = _validate(
            {key: payload[key] for key in EDITABLE_FIELDS if key in payload}
        )
        rule_data.update(
            {
                "tournamentId": tournament_id,
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            }
        )

        rule_ref = db.collection(ELIGIBILITY_RULES_COLLECTION).document()
        rule_ref.set(rule_data)
        return rule_ref.id

    @staticmethod
    @translate_firestore_errors
    def update_rule(
        rule_id: str, payload: Mapping[str, Any], db: Client | None = None
    ) -> dict[str, Any]:
        """Apply a partial update to a rule and return the stored fields."""
        if db is None:
            db = firestore.client()

        rule_ref = db.collection(ELIGIBILITY_RULES_COLLECTION).document(rule_id)
        rule_doc = cast("DocumentSnapshot", rule_ref.get())
        if not rule_doc.exists:
            raise NotFoundError("Eligibility rule not found.")

        changes = {key: payload[key] for key in EDITABLE_FIELDS if key in payload}
        if not changes:
            raise ValidationError("No editable fields supplied.")

        existing = rule_doc.to_dict() or {}
        merged = {key: existing.get(key) for key in EDITABLE_FIELDS if key in existing}
        merged.update(changes)
        validated = _validate(merged)

        updates: dict[str, Any] = {key: validated[key] for key in changes}
        updates["updatedAt"] = firestore.SERVER_TIMESTAMP
        rule_ref.update(updates)

        return {"id": rule_id, "tournamentId": existing.get("tournamentId"), **validated}

    @staticmethod
    @translate_firestore_errors
    def deactivate_rule(rule_id: str, db: Client | None = None) -> None:
        """Soft-delete a rule; it stays on record but is no longer evaluated."""
        if db is None:
            db = firestore.client()

        rule_ref = db.collection(ELIGIBILITY_RULES_COLLECTION).document(rule_id)
        if not cast("DocumentSnapshot", rule_ref.get()).exists:
            raise NotFoundError("Eligibility rule not found.")
        rule_ref.update({"isActive": False, "updatedAt": firestore.SERVER_TIMESTAMP})
