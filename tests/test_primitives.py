"""Primitive schema tests: leaf kinds, constraint chains and opt-in coercion.

Tests cover:
    - string: length bounds, regex, formats (email, url, uuid, datetime), trim/lower
    - number: bool/NaN rejection, int, bounds, multiple_of, finite, ints beyond float range
    - literal / enum equality and membership, enum derivations
    - date bounds across date/datetime and naive/aware values, coerced date parsing
    - unknown and the required-when-absent rule
    - collect-all vs fail-fast check chains
    - coercion success and failure reporting
"""

import math
from datetime import date, datetime, timezone

import pytest

from shared_types.validation import MISSING, IssueCode, ValidationMode, s


def _codes(result):
    return [issue.code for issue in result.issues]


# -- string --------------------------------------------------------------------

def test_string_accepts_string():
    assert s.string().parse("hello") == "hello"


def test_string_rejects_number_with_type_names():
    result = s.string().safe_parse(42)
    assert result.is_failure()
    (issue,) = result.issues
    assert issue.code is IssueCode.INVALID_TYPE
    assert issue.message == "Expected string, received integer"
    assert issue.details == {"expected": "string", "received": "integer"}


def test_string_min_reports_too_small_at_root():
    (issue,) = s.string().min(3).safe_parse("ab").issues
    assert issue.path == ()
    assert issue.code is IssueCode.TOO_SMALL
    assert issue.message == "String must contain at least 3 character(s)"
    assert issue.details["minimum"] == 3


def test_string_max_and_length():
    assert _codes(s.string().max(2).safe_parse("abc")) == [IssueCode.TOO_LARGE]
    assert _codes(s.string().length(2).safe_parse("a")) == [IssueCode.TOO_SMALL]
    assert _codes(s.string().length(2).safe_parse("abc")) == [IssueCode.TOO_LARGE]
    assert s.string().length(2).parse("ab") == "ab"


def test_string_custom_message_overrides_default():
    (issue,) = s.string().min(1, "Title is required").safe_parse("").issues
    assert issue.message == "Title is required"


def test_string_regex_is_a_search():
    schema = s.string().regex(r"[0-9]", "Needs a digit")
    assert schema.parse("abc1") == "abc1"
    (issue,) = schema.safe_parse("abc").issues
    assert issue.code is IssueCode.INVALID_FORMAT
    assert issue.message == "Needs a digit"


def test_string_email():
    assert s.string().email().parse("user@example.com") == "user@example.com"
    (issue,) = s.string().email().safe_parse("not-an-email").issues
    assert issue.code is IssueCode.INVALID_FORMAT
    assert issue.message == "Invalid email"


def test_string_url_requires_allowed_scheme_and_host():
    schema = s.string().url()
    assert schema.is_valid("https://api.example.com/v1")
    assert not schema.is_valid("ftp://example.com")
    assert not schema.is_valid("not a url")
    assert s.string().url(schemes=["ftp"]).is_valid("ftp://example.com")


def test_string_uuid():
    assert s.string().uuid().is_valid("3f2b6c1e-8a4d-4b5e-9c7f-1a2b3c4d5e6f")
    assert not s.string().uuid().is_valid("3f2b6c1e")


def test_string_datetime():
    assert s.string().datetime().is_valid("2024-01-15T10:30:00Z")
    assert s.string().datetime().is_valid("2024-01-15T10:30:00")
    assert not s.string().datetime().is_valid("2024-01-15")
    assert not s.string().datetime(require_timezone=True).is_valid("2024-01-15T10:30:00")


def test_string_startswith_endswith():
    assert s.string().startswith("med-").is_valid("med-42")
    assert not s.string().endswith(".json").is_valid("data.csv")


def test_trim_runs_before_checks():
    assert s.string().trim().parse("  hi ") == "hi"
    assert _codes(s.string().trim().min(1).safe_parse("   ")) == [IssueCode.TOO_SMALL]


def test_lower_normalises_output():
    assert s.string().lower().parse("ADMIN") == "admin"


def test_constraint_methods_return_new_nodes():
    base = s.string()
    derived = base.min(3)
    assert base.checks == ()
    assert len(derived.checks) == 1
    assert base.parse("a") == "a"


# -- check chains ----------------------------------------------------------------

def test_collect_mode_reports_every_failing_check():
    result = s.string().min(5).email().safe_parse("ab")
    assert _codes(result) == [IssueCode.TOO_SMALL, IssueCode.INVALID_FORMAT]


def test_fail_fast_mode_stops_at_first_failing_check():
    result = s.string().min(5).email().safe_parse("ab", mode=ValidationMode.FAIL_FAST)
    assert _codes(result) == [IssueCode.TOO_SMALL]


# -- number ----------------------------------------------------------------------

def test_number_accepts_int_and_float():
    assert s.number().parse(3) == 3
    assert s.number().parse(2.5) == 2.5


def test_number_rejects_bool():
    (issue,) = s.number().safe_parse(True).issues
    assert issue.code is IssueCode.INVALID_TYPE
    assert issue.details["received"] == "boolean"


def test_number_rejects_nan():
    (issue,) = s.number().safe_parse(float("nan")).issues
    assert issue.code is IssueCode.INVALID_TYPE
    assert issue.details["received"] == "nan"


def test_number_rejects_numeric_string_without_coercion():
    assert _codes(s.number().safe_parse("5")) == [IssueCode.INVALID_TYPE]


def test_number_int():
    assert s.number().int().parse(4) == 4
    assert s.number().int().parse(2.0) == 2.0
    assert _codes(s.number().int().safe_parse(1.5)) == [IssueCode.INVALID_TYPE]


def test_number_bounds():
    assert _codes(s.number().min(18).safe_parse(17)) == [IssueCode.TOO_SMALL]
    assert s.number().min(18).parse(18) == 18
    assert _codes(s.number().max(120).safe_parse(121)) == [IssueCode.TOO_LARGE]
    assert _codes(s.number().lt(10).safe_parse(10)) == [IssueCode.TOO_LARGE]


def test_number_positive_is_exclusive():
    (issue,) = s.number().positive().safe_parse(0).issues
    assert issue.code is IssueCode.TOO_SMALL
    assert issue.details["inclusive"] is False
    assert issue.message == "Number must be greater than 0"


def test_number_nonnegative_and_negative():
    assert s.number().nonnegative().is_valid(0)
    assert not s.number().negative().is_valid(0)


def test_number_multiple_of():
    assert s.number().multiple_of(5).is_valid(15)
    assert s.number().multiple_of(0.1).is_valid(0.3)
    assert _codes(s.number().multiple_of(5).safe_parse(7)) == [IssueCode.NOT_MULTIPLE_OF]


def test_number_multiple_of_zero_is_a_definition_error():
    with pytest.raises(ValueError):
        s.number().multiple_of(0)


def test_number_finite():
    assert _codes(s.number().finite().safe_parse(math.inf)) == [IssueCode.NOT_FINITE]


def test_number_finite_accepts_ints_beyond_float_range():
    huge = 10**400
    assert s.number().finite().parse(huge) == huge
    assert s.number().int().min(0).parse(huge) == huge


def test_number_multiple_of_is_exact_for_large_ints():
    huge = 10**400
    assert s.number().multiple_of(5).is_valid(huge)
    assert _codes(s.number().multiple_of(7).safe_parse(huge)) == [IssueCode.NOT_MULTIPLE_OF]
    assert s.number().multiple_of(0.5).is_valid(huge)
    assert s.number().multiple_of(5).is_valid(15.0)
    assert not s.number().multiple_of(5).is_valid(15.5)


def test_number_multiple_of_rejects_infinity():
    assert _codes(s.number().multiple_of(5).safe_parse(math.inf)) == [IssueCode.NOT_MULTIPLE_OF]


# -- boolean / literal / enum ----------------------------------------------------

def test_boolean():
    assert s.boolean().parse(False) is False
    assert _codes(s.boolean().safe_parse("true")) == [IssueCode.INVALID_TYPE]


def test_literal_equality():
    assert s.literal("admin").parse("admin") == "admin"
    (issue,) = s.literal("admin").safe_parse("user").issues
    assert issue.code is IssueCode.INVALID_LITERAL
    assert issue.message == "Invalid literal value, expected 'admin'"


def test_literal_true_does_not_match_one():
    assert not s.literal(True).is_valid(1)
    assert not s.literal(1).is_valid(True)
    assert s.literal(True).is_valid(True)


def test_enum_membership():
    schema = s.enum("beginner", "intermediate", "advanced")
    assert schema.parse("advanced") == "advanced"
    (issue,) = schema.safe_parse("expert").issues
    assert issue.code is IssueCode.INVALID_ENUM_VALUE
    assert issue.message == "Invalid enum value. Expected 'beginner' | 'intermediate' | 'advanced', received 'expert'"
    assert issue.details["options"] == ["beginner", "intermediate", "advanced"]


def test_enum_accepts_list_form():
    assert s.enum(["asc", "desc"]).options == ("asc", "desc")


def test_enum_non_string_is_invalid_type():
    (issue,) = s.enum("a", "b").safe_parse(1).issues
    assert issue.code is IssueCode.INVALID_TYPE
    assert issue.message == "Expected 'a' | 'b', received integer"


def test_enum_definition_errors():
    with pytest.raises(ValueError):
        s.enum()
    with pytest.raises(ValueError):
        s.enum("a", "a")


def test_enum_extract_and_exclude():
    roles = s.enum("admin", "doctor", "student")
    assert roles.extract("doctor", "student").options == ("doctor", "student")
    assert roles.exclude("admin").options == ("doctor", "student")
    with pytest.raises(KeyError):
        roles.extract("nurse")


# -- date ------------------------------------------------------------------------

def test_date_accepts_datetime_only():
    moment = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert s.date().parse(moment) == moment
    assert _codes(s.date().safe_parse("2024-01-15T10:30:00Z")) == [IssueCode.INVALID_TYPE]


def test_date_bounds():
    schema = s.date().min(datetime(2024, 1, 1))
    assert schema.is_valid(datetime(2024, 6, 1))
    (issue,) = schema.safe_parse(datetime(2023, 12, 31)).issues
    assert issue.code is IssueCode.TOO_SMALL
    assert issue.details["type"] == "date"


def test_date_bound_against_datetime_value_compares_calendar_day():
    schema = s.date().min(date(2024, 1, 1)).max(date(2024, 12, 31))
    assert schema.is_valid(datetime(2024, 6, 1, 12, 0))
    assert schema.is_valid(datetime(2024, 12, 31, 23, 59, tzinfo=timezone.utc))
    assert _codes(schema.safe_parse(datetime(2023, 12, 31, 23, 59))) == [IssueCode.TOO_SMALL]


def test_coerced_date_with_plain_date_bound():
    schema = s.coerce.date().min(date(2024, 1, 1))
    assert schema.parse("2024-06-01") == datetime(2024, 6, 1)
    assert _codes(schema.safe_parse("2023-06-01")) == [IssueCode.TOO_SMALL]


def test_plain_date_value_against_datetime_bound_is_midnight():
    schema = s.date().min(datetime(2024, 1, 1, 12, 0))
    assert _codes(schema.safe_parse(date(2024, 1, 1))) == [IssueCode.TOO_SMALL]
    assert schema.is_valid(date(2024, 1, 2))


def test_naive_and_aware_datetimes_are_reported_not_raised():
    aware_bound = s.date().min(datetime(2024, 1, 1, tzinfo=timezone.utc))
    (issue,) = aware_bound.safe_parse(datetime(2024, 6, 1)).issues
    assert issue.code is IssueCode.INVALID_DATE
    naive_bound = s.date().max(datetime(2024, 1, 1))
    assert _codes(naive_bound.safe_parse(datetime(2024, 6, 1, tzinfo=timezone.utc))) == [IssueCode.INVALID_DATE]
    assert aware_bound.is_valid(datetime(2024, 6, 1, tzinfo=timezone.utc))


def test_date_bound_must_be_a_date():
    with pytest.raises(TypeError):
        s.date().min("2024-01-01")


def test_coerced_date_parses_iso_strings():
    value = s.coerce.date().parse("2024-01-15T10:30:00Z")
    assert value == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


def test_coerced_date_applies_default_timezone_to_naive_values():
    value = s.coerce.date(default_timezone=timezone.utc).parse("2024-01-15T10:30:00")
    assert value.tzinfo is timezone.utc


def test_coerced_date_unparseable_string_is_invalid_date():
    (issue,) = s.coerce.date().safe_parse("not-a-date").issues
    assert issue.code is IssueCode.INVALID_DATE


def test_coerced_date_non_string_is_invalid_type():
    assert _codes(s.coerce.date().safe_parse(5)) == [IssueCode.INVALID_TYPE]


# -- unknown / absent values -----------------------------------------------------

def test_unknown_accepts_anything():
    assert s.unknown().parse(None) is None
    assert s.unknown().parse({"a": [1]}) == {"a": [1]}
    assert s.unknown().parse() is MISSING


def test_absent_value_is_required():
    (issue,) = s.string().safe_parse().issues
    assert issue.code is IssueCode.REQUIRED
    assert issue.message == "Required"
    assert issue.path == ()


def test_none_is_not_absent():
    (issue,) = s.string().safe_parse(None).issues
    assert issue.code is IssueCode.INVALID_TYPE
    assert issue.details["received"] == "null"


# -- coercion --------------------------------------------------------------------

def test_coerce_number_from_string():
    assert s.coerce.number().parse("42") == 42
    assert s.coerce.number().parse("4.5") == 4.5
    assert s.coerce.number().parse(7) == 7


def test_coerce_number_failure_is_invalid_type():
    for raw in ("", "abc", True, None):
        result = s.coerce.number().safe_parse(raw)
        assert _codes(result) == [IssueCode.INVALID_TYPE], raw
        assert "coercion" in result.issues[0].details


def test_coerced_value_still_runs_checks():
    assert _codes(s.coerce.number().int().positive().safe_parse("0")) == [IssueCode.TOO_SMALL]


def test_coerce_boolean():
    assert s.coerce.boolean().parse("yes") is True
    assert s.coerce.boolean().parse("OFF") is False
    assert _codes(s.coerce.boolean().safe_parse("maybe")) == [IssueCode.INVALID_TYPE]


def test_coerce_string():
    assert s.coerce.string().parse(5) == "5"
    assert s.coerce.string().parse(True) == "true"
    assert _codes(s.coerce.string().safe_parse(None)) == [IssueCode.INVALID_TYPE]
