"""Tests for parsing stored eligibility rule configs."""

import datetime
import unittest

from kickoff.eligibility.rule_config import (
    AgeRangeConfig,
    AllowListConfig,
    DocumentVerifiedConfig,
    EligibilityRule,
    GeographicConfig,
    RuleConfigurationError,
    parse_rule_config,
)


class ParseRuleConfigTestCase(unittest.TestCase):
    """Tests for parse_rule_config."""

    def test_age_range(self) -> None:
        config = parse_rule_config(
            "AGE_RANGE",
            {"minAge": 16, "maxAge": "23", "ageCalculationDate": "2024-01-01"},
        )
        self.assertEqual(
            config,
            AgeRangeConfig(
                min_age=16,
                max_age=23,
                age_calculation_date=datetime.date(2024, 1, 1),
                require_dob=True,
            ),
        )

    def test_age_range_require_dob_opt_out(self) -> None:
        config = parse_rule_config("AGE_RANGE", {"maxAge": 12, "requireDob": False})
        self.assertFalse(config.require_dob)
        self.assertIsNone(config.min_age)

    def test_age_range_needs_a_bound(self) -> None:
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config("AGE_RANGE", {})

    def test_age_range_rejects_inverted_bounds(self) -> None:
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config("AGE_RANGE", {"minAge": 20, "maxAge": 18})

    def test_age_range_rejects_bad_values(self) -> None:
        for bad in (-1, 16.5, "sixteen", True):
            with self.subTest(bad=bad):
                with self.assertRaises(RuleConfigurationError):
                    parse_rule_config("AGE_RANGE", {"minAge": bad})

    def test_age_range_rejects_bad_calculation_date(self) -> None:
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config(
                "AGE_RANGE", {"minAge": 16, "ageCalculationDate": "next season"}
            )

    def test_geographic(self) -> None:
        config = parse_rule_config(
            "GEOGRAPHIC", {"scope": "subcounty", "allowedIds": ["sc1", 42]}
        )
        self.assertEqual(
            config, GeographicConfig(scope="SUBCOUNTY", allowed_ids=("sc1", "42"))
        )

    def test_geographic_requires_known_scope(self) -> None:
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config("GEOGRAPHIC", {"allowedIds": ["w1"]})
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config("GEOGRAPHIC", {"scope": "REGION", "allowedIds": ["w1"]})

    def test_geographic_requires_allowed_ids(self) -> None:
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config("GEOGRAPHIC", {"scope": "WARD", "allowedIds": "w1"})
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config("GEOGRAPHIC", {"scope": "WARD", "allowedIds": []})

    def test_allow_lists(self) -> None:
        self.assertEqual(
            parse_rule_config("NATIONALITY", {"allowedNationalities": ["KE", "UG"]}),
            AllowListConfig(allowed=("KE", "UG")),
        )
        self.assertEqual(parse_rule_config("GENDER", None), AllowListConfig())
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config("PLAYER_STATUS", {"allowedStatuses": "ACTIVE"})

    def test_configless_rule_types(self) -> None:
        self.assertEqual(
            parse_rule_config("DOCUMENT_VERIFIED", None), DocumentVerifiedConfig()
        )

    def test_config_must_be_a_mapping(self) -> None:
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config("GENDER", ["M"])

    def test_unknown_rule_type(self) -> None:
        with self.assertRaises(RuleConfigurationError):
            parse_rule_config("SHOE_SIZE", {})


class EligibilityRuleFromDocumentTestCase(unittest.TestCase):
    """Tests for EligibilityRule.from_document."""

    def test_parses_document(self) -> None:
        rule = EligibilityRule.from_document(
            "r1",
            {
                "tournamentId": "t1",
                "name": "U17",
                "ruleType": "AGE_RANGE",
                "isActive": True,
                "severity": "warning",
                "config": {"maxAge": 17},
            },
        )
        self.assertEqual(rule.id, "r1")
        self.assertEqual(rule.tournament_id, "t1")
        self.assertEqual(rule.severity, "WARNING")
        self.assertTrue(rule.is_active)
        self.assertEqual(rule.config, AgeRangeConfig(max_age=17))
        self.assertIsNone(rule.config_error)

    def test_bad_config_is_kept_not_raised(self) -> None:
        rule = EligibilityRule.from_document(
            "r2", {"ruleType": "AGE_RANGE", "isActive": True, "config": {}}
        )
        self.assertIsNone(rule.config)
        self.assertIn("minAge", rule.config_error)

    def test_defaults(self) -> None:
        rule = EligibilityRule.from_document(
            "r3", {"ruleType": "NEW_TYPE", "severity": "FATAL"}
        )
        self.assertEqual(rule.severity, "ERROR")
        self.assertEqual(rule.name, "NEW_TYPE")
        self.assertFalse(rule.is_active)
        self.assertIsNone(rule.config)
        self.assertIsNone(rule.config_error)


if __name__ == "__main__":
    unittest.main()
