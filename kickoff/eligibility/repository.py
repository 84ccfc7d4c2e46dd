"""Read-only data access for the eligibility engine."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import wraps
from typing import TYPE_CHECKING, Any, Optional, Protocol, cast

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from kickoff.constants import (
    CONTRACTS_COLLECTION,
    DISCIPLINARY_RECORDS_COLLECTION,
    ELIGIBILITY_RULES_COLLECTION,
    PLAYER_DOCUMENTS_COLLECTION,
    PLAYERS_COLLECTION,
    SUB_COUNTIES_COLLECTION,
    TEAMS_COLLECTION,
    TOURNAMENTS_COLLECTION,
    WARDS_COLLECTION,
)
from kickoff.errors import DataAccessError

from .rule_config import EligibilityRule

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from kickoff.participation.models import Team, Tournament

    from .models import Contract, DisciplinaryRecord, PlayerDocument, PlayerRecord


class EligibilityDataSource(Protocol):
    """What the eligibility engine needs from a backing store.

    Lookups return None for a missing record. Storage failures must raise
    ``DataAccessError`` rather than look like an empty result.
    """

    def get_subject_by_id(self, subject_id: str) -> Optional[PlayerRecord]: ...

    def get_active_rules_for_tournament(
        self, tournament_id: str
    ) -> list[EligibilityRule]: ...

    def get_documents_for_subject(self, subject_id: str) -> list[PlayerDocument]: ...

    def get_disciplinary_records_for_subject(
        self, subject_id: str
    ) -> list[DisciplinaryRecord]: ...

    def get_contracts_for_subject(self, subject_id: str) -> list[Contract]: ...

    def get_team_by_id(self, team_id: str) -> Optional[Team]: ...

    def get_tournament_by_id(self, tournament_id: str) -> Optional[Tournament]: ...

    def list_teams(self, filters: Optional[Mapping[str, Any]] = None) -> list[Team]: ...


def translate_firestore_errors(func):
    """Re-raise Firestore failures as ``DataAccessError``.

    The failure is logged on the logger of the module defining ``func``.
    """
    func_logger = logging.getLogger(func.__module__)

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except google_exceptions.GoogleAPIError as e:
            func_logger.error(f"Firestore error in {func.__name__}: {e}")
            raise DataAccessError(
                "Eligibility data is unavailable. Please try again later."
            ) from e

    return wrapper


def _snapshot_to_dict(doc: Any) -> dict[str, Any]:
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return data


class FirestoreEligibilityRepository:
    """``EligibilityDataSource`` backed by Cloud Firestore."""

    def __init__(self, db: Client | None = None) -> None:
        if db is None:
            db = firestore.client()
        self.db = db

    def _get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        if not doc_id:
            return None
        doc = cast("DocumentSnapshot", self.db.collection(collection).document(doc_id).get())
        if not doc.exists:
            return None
        return _snapshot_to_dict(doc)

    def _where_upid(self, collection: str, subject_id: str) -> list[dict[str, Any]]:
        docs = (
            self.db.collection(collection)
            .where(filter=firestore.FieldFilter("upid", "==", subject_id))
            .stream()
        )
        return sorted((_snapshot_to_dict(doc) for doc in docs), key=lambda d: d["id"])

    @translate_firestore_errors
    def get_subject_by_id(self, subject_id: str) -> Optional[PlayerRecord]:
        """Fetch a player with their sub-county and county resolved from the ward."""
        player = self._get(PLAYERS_COLLECTION, subject_id)
        if player is None:
            return None

        for key in ("wardId", "subCountyId", "countyId"):
            if player.get(key) is not None:
                player[key] = str(player[key])

        if player.get("wardId") and not player.get("subCountyId"):
            ward = self._get(WARDS_COLLECTION, player["wardId"])
            if ward and ward.get("subCountyId"):
                player["subCountyId"] = str(ward["subCountyId"])

        if player.get("subCountyId") and not player.get("countyId"):
            sub_county = self._get(SUB_COUNTIES_COLLECTION, player["subCountyId"])
            if sub_county and sub_county.get("countyId"):
                player["countyId"] = str(sub_county["countyId"])

        return cast("PlayerRecord", player)

    @translate_firestore_errors
    def get_active_rules_for_tournament(
        self, tournament_id: str
    ) -> list[EligibilityRule]:
        """Fetch active rules for a tournament in a stable (document id) order."""
        docs = (
            self.db.collection(ELIGIBILITY_RULES_COLLECTION)
            .where(filter=firestore.FieldFilter("tournamentId", "==", tournament_id))
            .where(filter=firestore.FieldFilter("isActive", "==", True))
            .stream()
        )
        rules = [EligibilityRule.from_document(doc.id, doc.to_dict() or {}) for doc in docs]
        return sorted(rules, key=lambda rule: rule.id)

    @translate_firestore_errors
    def get_documents_for_subject(self, subject_id: str) -> list[PlayerDocument]:
        return cast("list[PlayerDocument]", self._where_upid(PLAYER_DOCUMENTS_COLLECTION, subject_id))

    @translate_firestore_errors
    def get_disciplinary_records_for_subject(
        self, subject_id: str
    ) -> list[DisciplinaryRecord]:
        return cast(
            "list[DisciplinaryRecord]",
            self._where_upid(DISCIPLINARY_RECORDS_COLLECTION, subject_id),
        )

    @translate_firestore_errors
    def get_contracts_for_subject(self, subject_id: str) -> list[Contract]:
        return cast("list[Contract]", self._where_upid(CONTRACTS_COLLECTION, subject_id))

    @translate_firestore_errors
    def get_team_by_id(self, team_id: str) -> Optional[Team]:
        return cast("Optional[Team]", self._get(TEAMS_COLLECTION, team_id))

    @translate_firestore_errors
    def get_tournament_by_id(self, tournament_id: str) -> Optional[Tournament]:
        return cast("Optional[Tournament]", self._get(TOURNAMENTS_COLLECTION, tournament_id))

    @translate_firestore_errors
    def list_teams(self, filters: Optional[Mapping[str, Any]] = None) -> list[Team]:
        """Fetch teams whose fields equal ``filters``, ordered by id."""
        query: Any = self.db.collection(TEAMS_COLLECTION)
        for field_path, value in sorted((filters or {}).items()):
            query = query.where(filter=firestore.FieldFilter(field_path, "==", value))
        teams = [_snapshot_to_dict(doc) for doc in query.stream()]
        return cast("list[Team]", sorted(teams, key=lambda t: t["id"]))
