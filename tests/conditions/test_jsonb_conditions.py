"""
Tests for JSONB path condition factories and the scoring expression.
"""

from todokit.conditions import Condition
from todokit.jsonb_conditions import (
    ScoreField,
    build_score,
    json_path,
    jsonb_age_range,
    jsonb_array_overlap,
    jsonb_field,
    jsonb_field_ilike,
    jsonb_field_ilike_null_safe,
    jsonb_field_null_safe,
    jsonb_multi_fields_ilike,
    jsonb_nested_field,
    jsonb_nested_field_ilike,
    jsonb_numeric_max,
    jsonb_numeric_min,
)


class TestJsonPath:
    """Test cases for the shared path-walking rule"""

    def test_single_segment_uses_text_operator(self):
        assert json_path("address", ["city"]) == "address->>'city'"

    def test_nested_segments(self):
        assert json_path("config", ["translation", "tr", "title"]) == (
            "config->'translation'->'tr'->>'title'"
        )

    def test_segment_quotes_are_escaped(self):
        assert json_path("meta", ["o'brien"]) == "meta->>'o''brien'"


class TestJsonbFieldConditions:
    """Test cases for single-level JSONB access"""

    def test_jsonb_field(self):
        assert jsonb_field("address", "city", "Izmir") == Condition(
            "address->>'city' = ?", ("Izmir",)
        )

    def test_jsonb_field_skips_empty(self):
        assert jsonb_field("address", "city", "").skip is True
        assert jsonb_field("address", "city", None).skip is True

    def test_jsonb_field_null_safe(self):
        cond = jsonb_field_null_safe("address", "city", "Izmir")

        assert cond.key == "(address IS NOT NULL AND address->>'city' = ?)"

    def test_jsonb_field_ilike(self):
        cond = jsonb_field_ilike("address", "city", "izm")

        assert cond == Condition("address->>'city' ILIKE ?", ("%izm%",))
        assert jsonb_field_ilike("address", "city", "").skip is True

    def test_jsonb_field_ilike_null_safe(self):
        cond = jsonb_field_ilike_null_safe("address", "city", "izm")

        assert cond.key == "(address IS NOT NULL AND address->>'city' ILIKE ?)"
        assert cond.values == ("%izm%",)


class TestJsonbNestedConditions:
    """Test cases for nested and multi-path JSONB access"""

    def test_nested_field(self):
        cond = jsonb_nested_field("config", ["translation", "tr", "title"], "value")

        assert cond.key == "config->'translation'->'tr'->>'title' = ?"
        assert cond.values == ("value",)

    def test_nested_field_empty_path_skips(self):
        assert jsonb_nested_field("config", [], "value").skip is True

    def test_nested_field_ilike(self):
        cond = jsonb_nested_field_ilike("config", ["a", "b"], "x")

        assert cond.key == "config->'a'->>'b' ILIKE ?"
        assert cond.values == ("%x%",)

    def test_multi_fields_ilike(self):
        cond = jsonb_multi_fields_ilike(
            "translation", [["tr", "title"], [], ["en", "title"]], "search"
        )

        assert cond.key == (
            "(translation->'tr'->>'title' ILIKE ? OR translation->'en'->>'title' ILIKE ?)"
        )
        assert cond.values == ("%search%", "%search%")

    def test_multi_fields_ilike_skips(self):
        assert jsonb_multi_fields_ilike("translation", [], "x").skip is True
        assert jsonb_multi_fields_ilike("translation", [["tr"]], "").skip is True
        assert jsonb_multi_fields_ilike("translation", [[]], "x").skip is True


class TestJsonbNumericAndArrayConditions:
    """Test cases for numeric ranges, array overlap and age ranges"""

    def test_numeric_min_max(self):
        assert jsonb_numeric_min("review", "average_point", 4.5).key == (
            "(review->>'average_point')::float >= ?"
        )
        assert jsonb_numeric_max("review", "average_point", 4.5).key == (
            "(review->>'average_point')::float <= ?"
        )
        assert jsonb_numeric_min("review", "average_point", None).skip is True

    def test_numeric_zero_is_a_value(self):
        assert jsonb_numeric_min("review", "average_point", 0).skip is False

    def test_array_overlap(self):
        cond = jsonb_array_overlap("audience", "interest", ["hiking", "camping"])

        assert cond.key == "audience->'interest' ?| ?::text[]"
        assert cond.values == (["hiking", "camping"],)
        assert cond.placeholder_count == 1

    def test_array_overlap_empty(self):
        assert jsonb_array_overlap("audience", "interest", []).skip is True

    def test_age_range(self):
        cond = jsonb_age_range("audience", 25)

        assert cond.key == (
            "((audience->'age_range'->>0)::int <= ? AND (audience->'age_range'->>1)::int >= ?)"
        )
        assert cond.values == (25, 25)
        assert jsonb_age_range("audience", 0).skip is True


class TestBuildScore:
    """Test cases for the weighted ranking expression"""

    def test_empty_fields(self):
        assert build_score("audience", []) == "0"

    def test_all_fields_empty_contribute_nothing(self):
        fields = [
            ScoreField("interest", [], 10),
            ScoreField("gender", "", 5),
            ScoreField("age", 0, 3),
            ScoreField("unknown", "x", 1),
        ]

        assert build_score("audience", fields) == "0"

    def test_sums_case_expressions(self):
        fields = [
            ScoreField("interest", ["hiking", "camping"], 10),
            ScoreField("gender", "female", 5),
            ScoreField("age", 30, 3),
        ]

        assert build_score("audience", fields) == (
            "(CASE WHEN audience->'interest' ?| ARRAY['hiking','camping']::text[] THEN 10 ELSE 0 END"
            " + CASE WHEN audience->>'gender' = 'female' THEN 5 ELSE 0 END"
            " + CASE WHEN (audience->'age_range'->>0)::int <= 30"
            " AND (audience->'age_range'->>1)::int >= 30 THEN 3 ELSE 0 END)"
        )

    def test_non_numeric_points_contribute_nothing(self):
        fields = [
            ScoreField("gender", "female", "lots"),
            ScoreField("interest", ["hiking"], None),
            ScoreField("age", 30, 3),
        ]

        assert build_score("audience", fields) == (
            "(CASE WHEN (audience->'age_range'->>0)::int <= 30"
            " AND (audience->'age_range'->>1)::int >= 30 THEN 3 ELSE 0 END)"
        )

    def test_literals_are_escaped(self):
        expr = build_score("audience", [ScoreField("badges", ["o'neil"], 2)])

        assert "'o''neil'" in expr
