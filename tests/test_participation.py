"""Tests for team participation eligibility."""

import unittest
from unittest.mock import MagicMock, patch

from mockfirestore import MockFirestore

from kickoff.eligibility.repository import FirestoreEligibilityRepository
from kickoff.participation.services import (
    ParticipationService,
    evaluate_team_participation,
    recommended_participation_model,
)
from tests.conftest import MockBatch, patch_mockfirestore


def team(**fields):
    data = {"orgId": None, "countyId": None, "subCountyId": None, "wardId": None}
    data.update(fields)
    return data


class RecommendedParticipationModelTestCase(unittest.TestCase):
    def test_lookup_table(self) -> None:
        expected = {
            "LEAGUE": "ORGANIZATIONAL",
            "ADMINISTRATIVE_WARD": "GEOGRAPHIC",
            "ADMINISTRATIVE_SUB_COUNTY": "GEOGRAPHIC",
            "ADMINISTRATIVE_COUNTY": "GEOGRAPHIC",
            "ADMINISTRATIVE_NATIONAL": "GEOGRAPHIC",
            "INTER_COUNTY": "OPEN",
            "INDEPENDENT": "OPEN",
            "FRIENDLY": "ORGANIZATIONAL",
            None: "ORGANIZATIONAL",
        }
        for model, participation in expected.items():
            with self.subTest(model=model):
                self.assertEqual(recommended_participation_model(model), participation)

    def test_short_administrative_aliases(self) -> None:
        for model in ("WARD", "SUB_COUNTY", "COUNTY", "NATIONAL"):
            self.assertEqual(recommended_participation_model(model), "GEOGRAPHIC")


class EvaluateTeamParticipationTestCase(unittest.TestCase):
    def test_organizational(self) -> None:
        tournament = {"participationModel": "ORGANIZATIONAL", "orgId": "org-1"}

        self.assertTrue(evaluate_team_participation(team(orgId="org-1"), tournament).is_eligible)

        result = evaluate_team_participation(team(), tournament)
        self.assertFalse(result.is_eligible)
        self.assertEqual(result.restrictions, ["ORGANIZATION_REQUIRED"])

        result = evaluate_team_participation(team(orgId="org-2"), tournament)
        self.assertEqual(result.restrictions, ["WRONG_ORGANIZATION"])
        self.assertEqual(result.reason, "Team must belong to the organizing organization")

    def test_geographic_collects_every_violation(self) -> None:
        tournament = {
            "participationModel": "GEOGRAPHIC",
            "countyId": "c1",
            "subCountyId": "sc1",
            "wardId": "w1",
        }
        result = evaluate_team_participation(
            team(countyId="c2", subCountyId="sc2", wardId="w1"), tournament
        )
        self.assertFalse(result.is_eligible)
        self.assertEqual(result.restrictions, ["WRONG_COUNTY", "WRONG_SUB_COUNTY"])
        self.assertEqual(
            result.to_dict(),
            {
                "isEligible": False,
                "reason": "Team does not meet geographic eligibility requirements",
                "restrictions": ["WRONG_COUNTY", "WRONG_SUB_COUNTY"],
            },
        )

    def test_geographic_only_checks_scoped_levels(self) -> None:
        tournament = {"participationModel": "GEOGRAPHIC", "countyId": "c1"}
        result = evaluate_team_participation(team(countyId="c1", wardId="w9"), tournament)
        self.assertTrue(result.is_eligible)
        self.assertEqual(result.to_dict(), {"isEligible": True})

    def test_open(self) -> None:
        result = evaluate_team_participation(team(), {"participationModel": "OPEN"})
        self.assertTrue(result.is_eligible)

    def test_invalid_model(self) -> None:
        result = evaluate_team_participation(team(), {"participationModel": "LOTTERY"})
        self.assertFalse(result.is_eligible)
        self.assertEqual(result.reason, "Invalid participation model")

    def test_unset_model_is_inferred(self) -> None:
        tournament = {"tournamentModel": "INDEPENDENT"}
        self.assertTrue(evaluate_team_participation(team(), tournament).is_eligible)

        tournament = {"tournamentModel": "LEAGUE", "orgId": "org-1"}
        result = evaluate_team_participation(team(), tournament)
        self.assertEqual(result.restrictions, ["ORGANIZATION_REQUIRED"])


class ParticipationServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        patch_mockfirestore()
        self.db = MockFirestore()
        teams = self.db.collection("teams")
        teams.document("t-a").set(team(name="A", orgId="org-1", countyId="c1", wardId="w1"))
        teams.document("t-b").set(team(name="B", orgId="org-2", countyId="c1", wardId="w2"))
        teams.document("t-c").set(team(name="C", countyId="c2", wardId="w3"))
        teams.document("t-d").set(team(name="D"))

        tournaments = self.db.collection("tournaments")
        tournaments.document("league").set(
            {"tournamentModel": "LEAGUE", "participationModel": "ORGANIZATIONAL", "orgId": "org-1"}
        )
        tournaments.document("county-cup").set(
            {"tournamentModel": "ADMINISTRATIVE_COUNTY", "countyId": "c1"}
        )
        tournaments.document("open").set({"participationModel": "OPEN"})
        tournaments.document("broken").set({"participationModel": "LOTTERY"})

        self.service = ParticipationService(FirestoreEligibilityRepository(self.db))

    def tearDown(self) -> None:
        self.db.reset()

    def test_check_team_eligibility(self) -> None:
        self.assertTrue(self.service.check_team_eligibility("t-a", "league").is_eligible)
        result = self.service.check_team_eligibility("t-c", "county-cup")
        self.assertEqual(result.restrictions, ["WRONG_COUNTY"])

    def test_not_found_is_a_result(self) -> None:
        self.assertEqual(
            self.service.check_team_eligibility("ghost", "league").reason, "Team not found"
        )
        self.assertEqual(
            self.service.check_team_eligibility("t-a", "ghost").reason,
            "Tournament not found",
        )

    def test_eligible_teams(self) -> None:
        def ids(tournament_id):
            return [t["id"] for t in self.service.get_eligible_teams(tournament_id)]

        self.assertEqual(ids("league"), ["t-a"])
        self.assertEqual(ids("county-cup"), ["t-a", "t-b"])
        self.assertEqual(ids("open"), ["t-a", "t-b", "t-c", "t-d"])
        self.assertEqual(ids("broken"), [])

    def test_unknown_tournament_lists_no_teams(self) -> None:
        with self.assertLogs("kickoff.participation.services", level="WARNING"):
            self.assertEqual(self.service.get_eligible_teams("ghost"), [])

    def test_list_and_single_checks_agree(self) -> None:
        all_teams = ["t-a", "t-b", "t-c", "t-d"]
        for tournament_id in ("league", "county-cup", "open", "broken"):
            listed = {t["id"] for t in self.service.get_eligible_teams(tournament_id)}
            checked = {
                team_id
                for team_id in all_teams
                if self.service.check_team_eligibility(team_id, tournament_id).is_eligible
            }
            with self.subTest(tournament_id=tournament_id):
                self.assertEqual(listed, checked)


class ParticipationModelBackfillTestCase(unittest.TestCase):
    def test_plan_skips_tournaments_with_a_model(self) -> None:
        plan = ParticipationService.plan_participation_model_backfill(
            [
                {"id": "a", "tournamentModel": "LEAGUE"},
                {"id": "b", "tournamentModel": "ADMINISTRATIVE_WARD"},
                {"id": "c", "tournamentModel": "INTER_COUNTY", "participationModel": "OPEN"},
                {"id": "d"},
            ]
        )
        self.assertEqual(plan, {"a": "ORGANIZATIONAL", "b": "GEOGRAPHIC", "d": "ORGANIZATIONAL"})

    def test_apply_commits_in_batches(self) -> None:
        patch_mockfirestore()
        db = MockFirestore()
        for tournament_id in ("a", "b", "c"):
            db.collection("tournaments").document(tournament_id).set({"name": tournament_id})
        batches = []

        def new_batch():
            batches.append(MockBatch(db))
            return batches[-1]

        db.batch = MagicMock(side_effect=new_batch)
        plan = {"a": "OPEN", "b": "GEOGRAPHIC", "c": "ORGANIZATIONAL"}

        with patch("kickoff.participation.services.FIRESTORE_BATCH_LIMIT", 2):
            updated = ParticipationService.apply_participation_model_backfill(db, plan)

        self.assertEqual(updated, 3)
        self.assertEqual(sum(b.commit.call_count for b in batches), 2)
        stored = db.collection("tournaments").document("b").get().to_dict()
        self.assertEqual(stored["participationModel"], "GEOGRAPHIC")
        db.reset()


if __name__ == "__main__":
    unittest.main()
