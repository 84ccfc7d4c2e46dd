"""
Backfill ``participationModel`` on tournaments that do not have one.

- Scans all tournaments.
- For each tournament without a participation model, derives one from its
  ``tournamentModel`` (LEAGUE -> ORGANIZATIONAL, administrative models ->
  GEOGRAPHIC, INTER_COUNTY/INDEPENDENT -> OPEN).
- Writes the updates in Firestore batches. ``--dry-run`` only prints the plan.

Set MOCK_DB=1 to run against an in-memory Firestore seeded with sample data.
"""

import argparse
import json
import os
import sys
from pathlib import Path

import firebase_admin
from firebase_admin import credentials, firestore

# Add the project root to the Python path to allow importing 'kickoff'
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from kickoff.constants import TOURNAMENTS_COLLECTION  # noqa: E402
from kickoff.participation.services import ParticipationService  # noqa: E402


def initialize_firebase():
    """Initializes the Firebase Admin SDK."""
    cred = None
    # Try loading from file (for local dev)
    cred_path = project_root / "firebase_credentials.json"
    if cred_path.exists():
        try:
            cred = credentials.Certificate(str(cred_path))
        except ValueError as e:
            print(f"Error loading credentials from file: {e}")
            return False
    else:
        # Fallback to environment variable (for production/CI)
        cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
        if cred_json:
            try:
                cred_info = json.loads(cred_json)
                cred = credentials.Certificate(cred_info)
            except (json.JSONDecodeError, ValueError) as e:
                print(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")
                return False

    if not cred:
        print("Could not find Firebase credentials in file or environment variable.")
        return False

    if not firebase_admin._apps:
        firebase_admin.initialize_app(cred)
    return True


class _MockWriteBatch:
    """Queues writes for a MockFirestore, which has no batch support."""

    def __init__(self):
        self._writes = []

    def update(self, ref, data):
        self._writes.append((ref, data))

    def commit(self):
        for ref, data in self._writes:
            ref.update(data)
        self._writes = []


def _mock_db():
    """An in-memory Firestore with a few tournaments to migrate."""
    from mockfirestore import MockFirestore

    db = MockFirestore()
    db.batch = _MockWriteBatch
    tournaments = db.collection(TOURNAMENTS_COLLECTION)
    tournaments.document("league").set({"name": "County League", "tournamentModel": "LEAGUE"})
    tournaments.document("ward-cup").set(
        {"name": "Ward Cup", "tournamentModel": "ADMINISTRATIVE_WARD", "wardId": "w1"}
    )
    tournaments.document("open").set({"name": "Open Cup", "tournamentModel": "INDEPENDENT"})
    tournaments.document("done").set(
        {
            "name": "Already Set",
            "tournamentModel": "LEAGUE",
            "participationModel": "ORGANIZATIONAL",
        }
    )
    return db


def migrate_participation_models(dry_run=False):
    """Main migration logic."""
    if os.environ.get("MOCK_DB"):
        db = _mock_db()
    else:
        if not initialize_firebase():
            sys.exit(1)
        db = firestore.client()

    tournaments = []
    for doc in db.collection(TOURNAMENTS_COLLECTION).stream():
        data = doc.to_dict() or {}
        data["id"] = doc.id
        tournaments.append(data)
    print(f"Found {len(tournaments)} tournaments.")

    plan = ParticipationService.plan_participation_model_backfill(tournaments)
    if not plan:
        print("Every tournament already has a participation model.")
        return plan

    for tournament_id, model in sorted(plan.items()):
        print(f"{tournament_id}: participationModel -> {model}")

    if dry_run:
        print(f"\nDry run: {len(plan)} tournaments would be updated.")
        return plan

    updated = ParticipationService.apply_participation_model_backfill(db, plan)
    print(f"\nMigration complete. Updated {updated} tournaments.")
    return plan


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the planned updates without writing them.",
    )
    args = parser.parse_args(argv)
    migrate_participation_models(dry_run=args.dry_run)


if __name__ == "__main__":
    main()
