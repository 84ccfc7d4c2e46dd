"""Service layer for player eligibility checks."""

from __future__ import annotations

import datetime
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Iterable, Optional

from kickoff.utils import today_in

from .models import EligibilityResult, RuleCheck
from .rules import RULE_EVALUATORS, EvaluationContext

if TYPE_CHECKING:
    from .repository import EligibilityDataSource
    from .rule_config import EligibilityRule

logger = logging.getLogger(__name__)


class EligibilityService:
    """Evaluates a tournament's active rules against a player.

    The service is stateless and never writes; everything it reads comes from
    ``data_source`` and nothing is cached between calls. Calendar dates,
    "today" included, are taken in ``timezone`` (UTC when not given).
    """

    def __init__(
        self,
        data_source: EligibilityDataSource,
        timezone: Optional[datetime.tzinfo] = None,
    ) -> None:
        self.data_source = data_source
        self.timezone = timezone

    def check_eligibility(
        self,
        subject_id: str,
        tournament_id: str,
        team_id: Optional[str] = None,
        as_of: Optional[datetime.date] = None,
    ) -> EligibilityResult:
        """Check whether a player may take part in a tournament.

        Args:
            subject_id: The player's UPID.
            tournament_id: The tournament whose active rules apply.
            team_id: The team the player is registering with, needed by
                contract rules.
            as_of: The date to evaluate on. Defaults to today in the
                service timezone.

        Raises:
            DataAccessError: If the data source cannot be read.
        """
        player = self.data_source.get_subject_by_id(subject_id)
        if player is None:
            logger.info(f"Eligibility check for unknown player {subject_id}")
            return EligibilityResult.subject_not_found()

        rules = self.data_source.get_active_rules_for_tournament(tournament_id)
        context = EvaluationContext(
            player=player,
            as_of=as_of or today_in(self.timezone),
            team_id=team_id,
            data_source=self.data_source,
            timezone=self.timezone,
        )
        checks = [self._evaluate_rule(rule, context) for rule in rules]
        return EligibilityResult.from_checks(checks)

    @staticmethod
    def _evaluate_rule(rule: EligibilityRule, context: EvaluationContext) -> RuleCheck:
        def verdict(passed: bool, message: str, skipped: bool = False) -> RuleCheck:
            return RuleCheck(
                rule_id=rule.id,
                rule_name=rule.name,
                rule_type=rule.rule_type,
                severity=rule.severity,
                passed=passed,
                message=message,
                skipped=skipped,
            )

        evaluator = RULE_EVALUATORS.get(rule.rule_type)
        if evaluator is None:
            logger.warning(
                f"Skipping rule {rule.id}: unsupported rule type {rule.rule_type!r}"
            )
            return verdict(True, f"Rule type {rule.rule_type} is not supported", True)

        if rule.config_error is not None:
            # Misconfigured rules never block a player
            logger.warning(
                f"Skipping rule {rule.id}: invalid configuration ({rule.config_error})"
            )
            return verdict(
                True, f"Rule configuration invalid: {rule.config_error}", True
            )

        outcome = evaluator(context, rule.config)
        return verdict(outcome.passed, outcome.message)

    def check_eligibility_bulk(
        self,
        subject_ids: Iterable[str],
        tournament_id: str,
        team_id: Optional[str] = None,
        as_of: Optional[datetime.date] = None,
        max_workers: int = 4,
    ) -> dict[str, EligibilityResult]:
        """Check many players against the same tournament.

        Players are evaluated independently; the returned mapping keeps the
        order of ``subject_ids`` with duplicates removed.
        """
        unique_ids = list(dict.fromkeys(subject_ids))
        if not unique_ids:
            return {}

        as_of = as_of or today_in(self.timezone)
        with ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
            results = executor.map(
                lambda subject_id: self.check_eligibility(
                    subject_id, tournament_id, team_id=team_id, as_of=as_of
                ),
                unique_ids,
            )
            return dict(zip(unique_ids, results))
