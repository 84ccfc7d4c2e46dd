"""Forms for the eligibility blueprint."""

from flask_wtf import FlaskForm
from wtforms import BooleanField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional

from kickoff.constants import RULE_TYPES, SEVERITIES, SEVERITY_ERROR


class EligibilityRuleForm(FlaskForm):
    """Validates the scalar fields of an eligibility rule from a JSON payload.

    The rule's ``config`` map is validated separately by the same parser the
    evaluator uses.
    """

    class Meta:
        # Populated from JSON bodies, not browser form posts
        csrf = False

    name = StringField("Rule Name", validators=[DataRequired(), Length(max=120)])

    ruleType = SelectField(
        "Rule Type",
        choices=[(rule_type, rule_type) for rule_type in RULE_TYPES],
        validators=[DataRequired()],
    )

    severity = SelectField(
        "Severity",
        choices=[(severity, severity) for severity in SEVERITIES],
        default=SEVERITY_ERROR,
    )

    isActive = BooleanField("Active", default=True)

    description = TextAreaField("Description", validators=[Optional(), Length(max=500)])
