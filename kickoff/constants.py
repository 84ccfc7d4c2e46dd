"""Global constants for the kickoff application."""

FIRESTORE_BATCH_LIMIT = 400

# Collection names
PLAYERS_COLLECTION = "players"
PLAYER_DOCUMENTS_COLLECTION = "player_documents"
DISCIPLINARY_RECORDS_COLLECTION = "disciplinary_records"
CONTRACTS_COLLECTION = "contracts"
ELIGIBILITY_RULES_COLLECTION = "eligibility_rules"
TEAMS_COLLECTION = "teams"
TOURNAMENTS_COLLECTION = "tournaments"
WARDS_COLLECTION = "wards"
SUB_COUNTIES_COLLECTION = "sub_counties"

# Rule types
RULE_AGE_RANGE = "AGE_RANGE"
RULE_GEOGRAPHIC = "GEOGRAPHIC"
RULE_DOCUMENT_VERIFIED = "DOCUMENT_VERIFIED"
RULE_NO_ACTIVE_SUSPENSIONS = "NO_ACTIVE_SUSPENSIONS"
RULE_VALID_CONTRACT = "VALID_CONTRACT"
RULE_NATIONALITY = "NATIONALITY"
RULE_GENDER = "GENDER"
RULE_PLAYER_STATUS = "PLAYER_STATUS"

RULE_TYPES = (
    RULE_AGE_RANGE,
    RULE_GEOGRAPHIC,
    RULE_DOCUMENT_VERIFIED,
    RULE_NO_ACTIVE_SUSPENSIONS,
    RULE_VALID_CONTRACT,
    RULE_NATIONALITY,
    RULE_GENDER,
    RULE_PLAYER_STATUS,
)

# Rule severities; only ERROR gates eligibility
SEVERITY_ERROR = "ERROR"
SEVERITY_WARNING = "WARNING"
SEVERITY_INFO = "INFO"
SEVERITIES = (SEVERITY_ERROR, SEVERITY_WARNING, SEVERITY_INFO)

# Geographic scopes
SCOPE_WARD = "WARD"
SCOPE_SUBCOUNTY = "SUBCOUNTY"
SCOPE_COUNTY = "COUNTY"
GEOGRAPHIC_SCOPES = (SCOPE_WARD, SCOPE_SUBCOUNTY, SCOPE_COUNTY)

# Disciplinary records
DISCIPLINARY_STATUS_ACTIVE = "ACTIVE"
SUSPENSION_INCIDENT_TYPES = frozenset({"SUSPENSION", "RED_CARD"})

# Contracts
CONTRACT_STATUS_ACTIVE = "ACTIVE"

# Participation models
PARTICIPATION_ORGANIZATIONAL = "ORGANIZATIONAL"
PARTICIPATION_GEOGRAPHIC = "GEOGRAPHIC"
PARTICIPATION_OPEN = "OPEN"

# Team restriction codes
RESTRICTION_ORGANIZATION_REQUIRED = "ORGANIZATION_REQUIRED"
RESTRICTION_WRONG_ORGANIZATION = "WRONG_ORGANIZATION"
RESTRICTION_WRONG_COUNTY = "WRONG_COUNTY"
RESTRICTION_WRONG_SUB_COUNTY = "WRONG_SUB_COUNTY"
RESTRICTION_WRONG_WARD = "WRONG_WARD"

# Pseudo rule id used for system-level violations
SYSTEM_RULE_ID = "SYSTEM"
