# domain/inspection/stages/test_profiling.py

from dataclasses import replace

import pytest

from data_detective.domain.inspection import default_settings
from data_detective.domain.inspection.stages import build_profile
from data_detective.domain.inspection.stages.profiling import (
    compute_numeric_stats,
    detect_patterns,
    percentile,
    profile_field,
)

pytestmark = pytest.mark.unit


def test_eighty_percent_majority_is_mixed() -> None:
    """
    ARRANGE: 80 numbers and 20 words
    ACT:     profile_field
    ASSERT:  type is mixed
    """
    values = [1] * 80 + ["word"] * 20

    actual = profile_field("a", values, 100, default_settings())

    assert actual.data_type == "mixed"


def test_eighty_one_percent_majority_is_number() -> None:
    """
    ARRANGE: 81 numbers and 19 words
    ACT:     profile_field
    ASSERT:  type is number
    """
    values = [1] * 81 + ["word"] * 19

    actual = profile_field("a", values, 100, default_settings())

    assert actual.data_type == "number"


def test_all_null_field_is_null() -> None:
    """
    ARRANGE: only null and empty values
    ACT:     profile_field
    ASSERT:  type null with zero unique rate
    """
    actual = profile_field("a", [None, ""], 2, default_settings())

    assert (actual.data_type, actual.unique_rate, actual.null_rate) == (
        "null",
        0.0,
        1.0,
    )


def test_date_strings_are_dates() -> None:
    """
    ARRANGE: ISO date strings
    ACT:     profile_field
    ASSERT:  type date
    """
    actual = profile_field("d", ["2024-01-01", "2024-02-01"], 2, default_settings())

    assert actual.data_type == "date"


def test_null_rate_uses_sample_size() -> None:
    """
    ARRANGE: three records, one null and one missing the field
    ACT:     build_profile
    ASSERT:  null rate relative to all three records
    """
    records = ({"a": None}, {"a": 1}, {"b": 2})

    profile = build_profile(records, "json", 10, default_settings())

    assert profile.get_field("a").null_rate == pytest.approx(1 / 3)


def test_fields_in_first_seen_order() -> None:
    """
    ARRANGE: records introducing fields at different points
    ACT:     build_profile
    ASSERT:  fields ordered by first appearance
    """
    records = ({"b": 1}, {"a": 1, "c": 2})

    profile = build_profile(records, "json", 10, default_settings())

    assert [field.name for field in profile.fields] == ["b", "a", "c"]


def test_profile_sample_is_bounded() -> None:
    """
    ARRANGE: five records with a sample limit of two
    ACT:     build_profile
    ASSERT:  all records counted, two sampled
    """
    settings = replace(default_settings(), max_records_to_profile=2)
    records = tuple({"a": index} for index in range(5))

    profile = build_profile(records, "json", 10, settings)

    assert (profile.record_count, profile.sample_size) == (5, 2)


def test_samples_are_capped() -> None:
    """
    ARRANGE: twenty distinct values
    ACT:     profile_field
    ASSERT:  ten samples kept
    """
    actual = profile_field("a", list(range(20)), 20, default_settings())

    assert len(actual.samples) == 10


def test_enum_value_set_in_first_seen_order() -> None:
    """
    ARRANGE: three distinct statuses
    ACT:     profile_field
    ASSERT:  enum-like with values in first-seen order
    """
    values = ["open", "closed", "open", "held"]

    actual = profile_field("s", values, 4, default_settings())

    assert (actual.enum_like.value_set, actual.enum_like.cardinality) == (
        ("open", "closed", "held"),
        3,
    )


def test_high_cardinality_is_not_enum() -> None:
    """
    ARRANGE: twenty-one distinct values
    ACT:     profile_field
    ASSERT:  not enum-like
    """
    actual = profile_field("a", list(range(21)), 21, default_settings())

    assert actual.enum_like is None


def test_numeric_stats_nearest_rank_percentiles() -> None:
    """
    ARRANGE: values 1 to 10
    ACT:     compute_numeric_stats
    ASSERT:  nearest-rank percentiles and true median
    """
    actual = compute_numeric_stats(list(range(1, 11)), default_settings())

    assert (actual.p90, actual.p95, actual.p99, actual.median) == (9, 10, 10, 5.5)


def test_numeric_stats_population_stdev() -> None:
    """
    ARRANGE: values 2, 4, 4, 4, 5, 5, 7, 9
    ACT:     compute_numeric_stats
    ASSERT:  population standard deviation of 2
    """
    actual = compute_numeric_stats([2, 4, 4, 4, 5, 5, 7, 9], default_settings())

    assert actual.stdev == pytest.approx(2.0)


def test_numeric_stats_zero_inflation_is_strict() -> None:
    """
    ARRANGE: half zeros, then three quarters zeros
    ACT:     compute_numeric_stats
    ASSERT:  only the second is zero-inflated
    """
    settings = default_settings()

    actual = (
        compute_numeric_stats([0, 0, 1, 1], settings).is_zero_inflated,
        compute_numeric_stats([0, 0, 0, 1], settings).is_zero_inflated,
    )

    assert actual == (False, True)


def test_numeric_stats_counts_negatives() -> None:
    """
    ARRANGE: two negative values
    ACT:     compute_numeric_stats
    ASSERT:  negatives counted
    """
    actual = compute_numeric_stats([-1, -2, 3], default_settings())

    assert (actual.has_negatives, actual.negative_count) == (True, 2)


def test_percentile_single_value() -> None:
    """
    ARRANGE: one value
    ACT:     percentile at 1 and 99
    ASSERT:  the value both times
    """
    actual = (percentile([7], 1), percentile([7], 99))

    assert actual == (7, 7)


def test_detect_patterns() -> None:
    """
    ARRANGE: an email, a URL, an IPv4 address and a UUID
    ACT:     detect_patterns
    ASSERT:  every pattern named in order
    """
    strings = [
        "ann@example.com",
        "https://example.com",
        "10.0.0.1",
        "123e4567-e89b-12d3-a456-426614174000",
    ]

    actual = detect_patterns(strings)

    assert actual == ("email", "url", "ipv4", "uuid")


def test_string_stats_lengths() -> None:
    """
    ARRANGE: words of length 2 and 4
    ACT:     profile_field
    ASSERT:  min, max and average length
    """
    actual = profile_field("w", ["ab", "abcd"], 2, default_settings()).string_stats

    assert (actual.min_length, actual.max_length, actual.avg_length) == (2, 4, 3.0)


def test_integers_beyond_float_range_are_left_out_of_stats() -> None:
    """
    ARRANGE: a 400-digit integer beside two ordinary numbers
    ACT:     profile_field
    ASSERT:  numeric stats cover only the ordinary numbers
    """
    actual = profile_field("a", [10**400, 2, 4], 3, default_settings())

    assert (actual.data_type, actual.numeric_stats.max) == ("number", 4)
