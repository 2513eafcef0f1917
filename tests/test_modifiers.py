"""Modifier wrapper tests: optional, nullable, default, refine, transform.

Tests cover:
    - Absent vs null handling for optional / nullable / nullish
    - Defaults (static, deep-copied, factory) are validated and only apply when absent
    - refine runs after the inner schema and reports at its sub-path
    - transform output is final and never re-validated
    - Wrappers stack in any order
"""

from datetime import datetime

from shared_types.validation import MISSING, IssueCode, SchemaKind, s


def _codes(result):
    return [issue.code for issue in result.issues]


# -- optional / nullable ---------------------------------------------------------

def test_optional_accepts_absence():
    assert s.string().optional().parse() is MISSING
    assert s.string().optional().parse("x") == "x"


def test_optional_still_rejects_null():
    assert _codes(s.string().optional().safe_parse(None)) == [IssueCode.INVALID_TYPE]


def test_optional_field_is_omitted_from_output():
    schema = s.object({"name": s.string(), "nickname": s.string().optional()})
    assert schema.parse({"name": "Ada"}) == {"name": "Ada"}


def test_nullable_accepts_null_but_not_absence():
    assert s.number().nullable().parse(None) is None
    assert _codes(s.number().nullable().safe_parse()) == [IssueCode.REQUIRED]


def test_nullish_accepts_both():
    schema = s.number().nullish()
    assert schema.parse() is MISSING
    assert schema.parse(None) is None
    assert schema.parse(3) == 3


def test_unwrap_returns_inner_schema():
    inner = s.string()
    assert inner.optional().unwrap() is inner
    assert inner.optional().kind is SchemaKind.OPTIONAL


# -- default ---------------------------------------------------------------------

def test_default_applies_only_when_absent():
    schema = s.number().default(10)
    assert schema.parse() == 10
    assert schema.parse(3) == 3
    assert _codes(schema.safe_parse(None)) == [IssueCode.INVALID_TYPE]


def test_default_fills_object_fields():
    schema = s.object({"isPublished": s.boolean().default(False)})
    assert schema.parse({}) == {"isPublished": False}


def test_default_value_is_validated():
    assert _codes(s.number().positive().default(0).safe_parse()) == [IssueCode.TOO_SMALL]


def test_mutable_default_is_copied_per_call():
    schema = s.unknown().default({"tags": []})
    first = schema.parse()
    first["tags"].append("x")
    assert schema.parse() == {"tags": []}


def test_callable_default_is_a_factory():
    stamp = datetime(2024, 1, 1)
    calls = []

    def factory():
        calls.append(1)
        return stamp

    schema = s.date().default(factory)
    assert schema.parse() == stamp
    assert schema.parse(datetime(2025, 1, 1)) == datetime(2025, 1, 1)
    assert len(calls) == 1


def test_remove_default():
    inner = s.number()
    assert inner.default(1).remove_default() is inner


# -- refine ----------------------------------------------------------------------

def test_refine_adds_custom_issue():
    schema = s.number().refine(lambda n: n % 2 == 0, "Must be even")
    assert schema.parse(4) == 4
    (issue,) = schema.safe_parse(3).issues
    assert issue.code is IssueCode.CUSTOM
    assert issue.message == "Must be even"
    assert issue.path == ()


def test_refine_default_message():
    (issue,) = s.string().refine(lambda v: False).safe_parse("x").issues
    assert issue.message == "Invalid input"


def test_refine_reports_at_sub_path():
    schema = s.object({"password": s.string(), "confirm": s.string()}).refine(
        lambda v: v["password"] == v["confirm"], "Passwords do not match", path=["confirm"])
    (issue,) = schema.safe_parse({"password": "a", "confirm": "b"}).issues
    assert issue.path == ("confirm",)


def test_refine_sub_path_is_relative_to_the_node():
    inner = s.object({"a": s.number(), "b": s.number()}).refine(lambda v: v["a"] < v["b"], path=["b"])
    (issue,) = s.object({"range": inner}).safe_parse({"range": {"a": 2, "b": 1}}).issues
    assert issue.path == ("range", "b")


def test_refine_predicate_skipped_when_inner_fails():
    def explode(_):
        raise AssertionError("predicate must not run")

    assert _codes(s.number().refine(explode).safe_parse("x")) == [IssueCode.INVALID_TYPE]


# -- transform -------------------------------------------------------------------

def test_transform_maps_output():
    assert s.string().transform(len).parse("abcd") == 4


def test_transform_output_is_final():
    schema = s.string().transform(int)
    value = schema.parse("12")
    assert value == 12
    assert isinstance(value, int)


def test_transform_not_applied_on_failure():
    assert _codes(s.string().transform(int).safe_parse(12)) == [IssueCode.INVALID_TYPE]


def test_transform_then_refine_checks_transformed_value():
    schema = s.string().transform(len).refine(lambda n: n > 2, "Too short")
    assert schema.parse("abc") == 3
    assert [i.message for i in schema.safe_parse("ab").issues] == ["Too short"]


# -- stacking --------------------------------------------------------------------

def test_wrappers_stack_in_any_order():
    a = s.string().min(2).optional().nullable()
    b = s.string().min(2).nullable().optional()
    for schema in (a, b):
        assert schema.parse(None) is None
        assert schema.parse() is MISSING
        assert _codes(schema.safe_parse("x")) == [IssueCode.TOO_SMALL]


def test_optional_then_default_inside_object():
    schema = s.object({"limit": s.number().max(100).default(10)})
    assert schema.parse({}) == {"limit": 10}
    assert [i.path for i in schema.safe_parse({"limit": 500}).issues] == [("limit",)]
