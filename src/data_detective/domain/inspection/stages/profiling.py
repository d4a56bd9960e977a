# stages/profiling.py

import math
import re
from collections import Counter
from collections.abc import Sequence
from statistics import fmean, median, pstdev
from typing import Any

from data_detective.domain._utils import classify_value, is_finite_number, value_key
from data_detective.schemas import FileType

from ..documents import Record
from ..models import (
    AnalysisSettings,
    DataProfile,
    DataType,
    EnumProfile,
    FieldAnalysis,
    NumericStats,
    StringStats,
)

# Checked in this order when deciding a field's majority type
_MAJORITY_ORDER: tuple[DataType, ...] = ("number", "date", "boolean", "string")

_PATTERNS = (
    ("email", re.compile(r"@.+\..+")),
    ("url", re.compile(r"^https?://")),
    ("ipv4", re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$")),
    ("uuid", re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-", re.IGNORECASE)),
)


def build_profile(
    records: tuple[Record, ...],
    file_type: FileType,
    file_size: int,
    settings: AnalysisSettings,
) -> DataProfile:
    """
    Profile every field over the leading sample of records.

    Fields appear in the order they are first seen. A field's values are
    taken from the records that hold it; its null rate is relative to the
    whole sample.

    Args:
        records: All loaded records.
        file_type: Format the records came from.
        file_size: Size of the source content in characters.
        settings: Inspection thresholds.

    Returns:
        DataProfile: The profile of the document.
    """
    sample = records[: settings.max_records_to_profile]

    values_by_field: dict[str, list[Any]] = {}
    for record in sample:
        for name, value in record.items():
            values_by_field.setdefault(name, []).append(value)

    fields = tuple(
        profile_field(name, values, len(sample), settings)
        for name, values in values_by_field.items()
    )

    return DataProfile(
        record_count=len(records),
        fields=fields,
        file_type=file_type,
        file_size=file_size,
        sample_size=len(sample),
    )


def profile_field(
    name: str,
    values: Sequence[Any],
    total_records: int,
    settings: AnalysisSettings,
) -> FieldAnalysis:
    """
    Summarise the values of one field.

    Args:
        name: Field name.
        values: The field's values from the sampled records that hold it.
        total_records: Number of sampled records.
        settings: Inspection thresholds.

    Returns:
        FieldAnalysis: Type, rates, samples and the statistics that apply.
    """
    classified = [(value, classify_value(value)) for value in values]
    kinds = Counter(kind for _, kind in classified)
    non_null = [value for value, kind in classified if kind != "null"]
    null_count = kinds["null"]
    unique_keys = dict.fromkeys(value_key(value) for value in non_null)

    data_type = majority_type(kinds, len(non_null), settings.majority_ratio)
    unique_count = len(unique_keys)

    numeric_stats = None
    if data_type == "number":
        numbers = [value for value in non_null if is_finite_number(value)]
        if numbers:
            numeric_stats = compute_numeric_stats(numbers, settings)

    string_stats = None
    if data_type == "string":
        strings = [value for value in non_null if isinstance(value, str)]
        if strings:
            string_stats = compute_string_stats(strings, settings)

    enum_like = None
    if non_null and unique_count <= settings.enum_cardinality_limit:
        enum_like = EnumProfile(
            is_enum_like=True,
            value_set=tuple(unique_keys),
            cardinality=unique_count,
        )

    return FieldAnalysis(
        name=name,
        data_type=data_type,
        null_count=null_count,
        null_rate=null_count / total_records if total_records else 0.0,
        unique_count=unique_count,
        unique_rate=unique_count / len(non_null) if non_null else 0.0,
        samples=tuple(non_null[: settings.sample_limit]),
        numeric_stats=numeric_stats,
        string_stats=string_stats,
        enum_like=enum_like,
    )


def majority_type(
    kinds: Counter,
    non_null_count: int,
    majority_ratio: float,
) -> DataType:
    """
    Decide a field's type from the kinds of its non-null values.

    A kind must hold strictly more than ``majority_ratio`` of the non-null
    values; kinds are tried in the order number, date, boolean, string.

    Args:
        kinds: Count of values per kind, including "null".
        non_null_count: Number of non-null values.
        majority_ratio: Share a kind must exceed.

    Returns:
        DataType: The majority kind, "mixed" without one, or "null" when
            there are no non-null values.
    """
    if not non_null_count:
        return "null"
    for kind in _MAJORITY_ORDER:
        if kinds[kind] / non_null_count > majority_ratio:
            return kind
    return "mixed"


def compute_numeric_stats(
    numbers: Sequence[float],
    settings: AnalysisSettings,
) -> NumericStats:
    """
    Compute distribution statistics for numeric values.

    Percentiles use the nearest-rank method; the standard deviation is the
    population one.

    Args:
        numbers: At least one numeric value.
        settings: Inspection thresholds.

    Returns:
        NumericStats: The distribution summary.
    """
    ordered = sorted(numbers)
    negative_count = sum(1 for value in ordered if value < 0)
    zero_count = sum(1 for value in ordered if value == 0)

    return NumericStats(
        min=ordered[0],
        max=ordered[-1],
        mean=fmean(ordered),
        median=median(ordered),
        stdev=pstdev(ordered),
        p90=percentile(ordered, 90),
        p95=percentile(ordered, 95),
        p99=percentile(ordered, 99),
        has_negatives=negative_count > 0,
        negative_count=negative_count,
        is_zero_inflated=zero_count / len(ordered) > settings.zero_inflation_ratio,
    )


def percentile(ordered: Sequence[float], p: float) -> float:
    """
    Return the nearest-rank percentile of sorted values.

    Args:
        ordered: Values in ascending order; must not be empty.
        p: Percentile between 0 and 100.

    Returns:
        float: The value at rank ceil(p / 100 * n), clamped to the data.
    """
    index = math.ceil(p / 100 * len(ordered)) - 1
    return ordered[min(max(index, 0), len(ordered) - 1)]


def compute_string_stats(
    strings: Sequence[str],
    settings: AnalysisSettings,
) -> StringStats:
    lengths = [len(text) for text in strings]
    return StringStats(
        min_length=min(lengths),
        max_length=max(lengths),
        avg_length=fmean(lengths),
        patterns=detect_patterns(strings[: settings.pattern_sample_limit]),
    )


def detect_patterns(strings: Sequence[str]) -> tuple[str, ...]:
    """
    Name the well-known formats that appear among some strings.

    Returns:
        tuple[str, ...]: Any of "email", "url", "ipv4" and "uuid", in that order.
    """
    return tuple(
        name
        for name, pattern in _PATTERNS
        if any(pattern.search(text) for text in strings)
    )
