"""Typed eligibility rule configurations.

Rules are stored with an untyped ``config`` map whose shape depends on
``ruleType``. Configs are parsed into one frozen dataclass per rule type when
a rule is loaded, so evaluators never poke at raw dictionaries.
"""

from __future__ import annotations

import datetime
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from kickoff.constants import (
    GEOGRAPHIC_SCOPES,
    RULE_AGE_RANGE,
    RULE_DOCUMENT_VERIFIED,
    RULE_GENDER,
    RULE_GEOGRAPHIC,
    RULE_NATIONALITY,
    RULE_NO_ACTIVE_SUSPENSIONS,
    RULE_PLAYER_STATUS,
    RULE_VALID_CONTRACT,
    SEVERITIES,
    SEVERITY_ERROR,
)
from kickoff.utils import to_date


class RuleConfigurationError(ValueError):
    """Raised when a rule's config does not fit its declared rule type."""


@dataclass(frozen=True)
class AgeRangeConfig:
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    # None means "the evaluation date"
    age_calculation_date: Optional[datetime.date] = None
    require_dob: bool = True


@dataclass(frozen=True)
class GeographicConfig:
    scope: str
    allowed_ids: tuple[str, ...]


@dataclass(frozen=True)
class DocumentVerifiedConfig:
    pass


@dataclass(frozen=True)
class NoActiveSuspensionsConfig:
    pass


@dataclass(frozen=True)
class ValidContractConfig:
    pass


@dataclass(frozen=True)
class AllowListConfig:
    """Shared shape of the NATIONALITY, GENDER and PLAYER_STATUS configs."""

    # An empty allow-list means "no restriction"
    allowed: tuple[str, ...] = ()


RuleConfig = Union[
    AgeRangeConfig,
    GeographicConfig,
    DocumentVerifiedConfig,
    NoActiveSuspensionsConfig,
    ValidContractConfig,
    AllowListConfig,
]


def _parse_age(raw: Mapping[str, Any], key: str) -> Optional[int]:
    value = raw.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise RuleConfigurationError(f"{key} must be a whole number")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise RuleConfigurationError(f"{key} must be a whole number")
    if value < 0:
        raise RuleConfigurationError(f"{key} cannot be negative")
    return value


def _parse_string_list(raw: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = raw.get(key)
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        raise RuleConfigurationError(f"{key} must be a list")
    if not all(isinstance(item, (str, int)) and not isinstance(item, bool) for item in value):
        raise RuleConfigurationError(f"{key} must only contain identifiers")
    return tuple(str(item) for item in value)


def _parse_age_range(raw: Mapping[str, Any]) -> AgeRangeConfig:
    min_age = _parse_age(raw, "minAge")
    max_age = _parse_age(raw, "maxAge")
    if min_age is None and max_age is None:
        raise RuleConfigurationError("AGE_RANGE needs minAge, maxAge or both")
    if min_age is not None and max_age is not None and min_age > max_age:
        raise RuleConfigurationError("minAge cannot be greater than maxAge")

    try:
        calculation_date = to_date(raw.get("ageCalculationDate"))
    except ValueError as e:
        raise RuleConfigurationError(
            f"ageCalculationDate is not a valid date: {raw.get('ageCalculationDate')!r}"
        ) from e

    return AgeRangeConfig(
        min_age=min_age,
        max_age=max_age,
        age_calculation_date=calculation_date,
        require_dob=raw.get("requireDob", True) is not False,
    )


def _parse_geographic(raw: Mapping[str, Any]) -> GeographicConfig:
    scope = raw.get("scope")
    if not scope:
        raise RuleConfigurationError("GEOGRAPHIC needs a scope")
    scope = str(scope).upper()
    if scope not in GEOGRAPHIC_SCOPES:
        raise RuleConfigurationError(f"Unknown geographic scope: {scope}")
    allowed_ids = _parse_string_list(raw, "allowedIds")
    if not allowed_ids:
        raise RuleConfigurationError("GEOGRAPHIC needs at least one allowed id")
    return GeographicConfig(scope=scope, allowed_ids=allowed_ids)


def _allow_list_parser(key: str) -> Callable[[Mapping[str, Any]], AllowListConfig]:
    def parse(raw: Mapping[str, Any]) -> AllowListConfig:
        return AllowListConfig(allowed=_parse_string_list(raw, key))

    return parse


_PARSERS: dict[str, Callable[[Mapping[str, Any]], RuleConfig]] = {
    RULE_AGE_RANGE: _parse_age_range,
    RULE_GEOGRAPHIC: _parse_geographic,
    RULE_DOCUMENT_VERIFIED: lambda raw: DocumentVerifiedConfig(),
    RULE_NO_ACTIVE_SUSPENSIONS: lambda raw: NoActiveSuspensionsConfig(),
    RULE_VALID_CONTRACT: lambda raw: ValidContractConfig(),
    RULE_NATIONALITY: _allow_list_parser("allowedNationalities"),
    RULE_GENDER: _allow_list_parser("allowedGenders"),
    RULE_PLAYER_STATUS: _allow_list_parser("allowedStatuses"),
}


def is_supported_rule_type(rule_type: str) -> bool:
    """Return True if the engine knows how to evaluate ``rule_type``."""
    return rule_type in _PARSERS


def parse_rule_config(rule_type: str, raw: Any) -> RuleConfig:
    """Validate a raw config map for ``rule_type``.

    Raises:
        RuleConfigurationError: If the config is malformed or the rule type
            is unknown.
    """
    parser = _PARSERS.get(rule_type)
    if parser is None:
        raise RuleConfigurationError(f"Unsupported rule type: {rule_type}")
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise RuleConfigurationError("config must be an object")
    return parser(raw)


@dataclass(frozen=True)
class EligibilityRule:
    """An eligibility rule as loaded from the rule store."""

    id: str
    tournament_id: str
    name: str
    rule_type: str
    is_active: bool
    severity: str = SEVERITY_ERROR
    config: Optional[RuleConfig] = None
    # Why ``config`` could not be parsed, if it could not
    config_error: Optional[str] = None

    @classmethod
    def from_document(cls, rule_id: str, data: Mapping[str, Any]) -> EligibilityRule:
        """Build a rule from a stored document, parsing its config.

        Never raises for a bad config; the parse failure is kept on the rule
        so the evaluator can skip it and report why.
        """
        rule_type = str(data.get("ruleType") or "")
        severity = str(data.get("severity") or SEVERITY_ERROR).upper()
        if severity not in SEVERITIES:
            severity = SEVERITY_ERROR
        raw_config = data.get("config")

        config = None
        config_error = None
        if is_supported_rule_type(rule_type):
            try:
                config = parse_rule_config(rule_type, raw_config)
            except RuleConfigurationError as e:
                config_error = str(e)

        return cls(
            id=rule_id,
            tournament_id=str(data.get("tournamentId") or ""),
            name=str(data.get("name") or rule_type),
            rule_type=rule_type,
            is_active=data.get("isActive") is True,
            severity=severity,
            config=config,
            config_error=config_error,
        )
