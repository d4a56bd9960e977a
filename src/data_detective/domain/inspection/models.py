# inspection/models.py

from dataclasses import dataclass, field, replace
from typing import Any, Literal

from data_detective.schemas import Category, Confidence, FileType, OffsetRange, Severity

DataType = Literal["number", "string", "boolean", "date", "mixed", "null"]


@dataclass(frozen=True)
class AnalysisSettings:
    """
    Configuration values controlling inspection thresholds.
    """

    # Content larger than this is rejected without analysis
    max_file_mb: float = 50.0
    # Content larger than this switches to fast mode
    fast_mode_threshold_mb: float = 5.0
    # Set by tune_for_size when fast mode is active
    fast_mode: bool = False
    # Records profiled per field
    max_records_to_profile: int = 10_000
    # Data rows loaded from a CSV file; None loads every row
    csv_row_limit: int | None = None
    # Records profiled in fast mode
    fast_max_records_to_profile: int = 1_000
    # Data rows loaded from a CSV file in fast mode
    fast_csv_row_limit: int = 500
    # Share of non-null values one kind needs to become the field's type
    majority_ratio: float = 0.8
    # Fields with at most this many distinct values are treated as enums
    enum_cardinality_limit: int = 20
    # Share of zeros above which a numeric field is zero-inflated
    zero_inflation_ratio: float = 0.5
    # Absolute z-score above which a value is an extreme outlier
    z_score_threshold: float = 4.0
    # Dates further ahead than this many years are flagged
    future_date_years: int = 5
    # Dates before this year are implausibly old
    min_plausible_year: int = 1900
    # Placeholders are only flagged in fields with a null rate below this
    placeholder_max_null_rate: float = 0.1
    # Placeholders are only flagged in fields with a unique rate above this
    placeholder_min_unique_rate: float = 0.5
    # Values treated as placeholders, compared case-insensitively
    placeholder_tokens: frozenset[str] = field(
        default=frozenset({"unknown", "n/a", "null", "none", "na", "???"}),
    )
    # Null share above which an array-of-records key is reported
    high_null_rate: float = 0.5
    # Relative record-count change, in percent, reported as drift
    drift_record_change_pct: float = 20.0
    # CSV rows differing from the header by more columns than this are broken
    csv_column_tolerance: int = 1
    # Maximum column-mismatch findings reported for one CSV file
    max_csv_structure_findings: int = 5
    # Maximum line-grammar findings reported for one YAML file
    max_yaml_structure_findings: int = 3
    # Maximum sample values kept per field
    sample_limit: int = 10
    # Maximum strings inspected for patterns per field
    pattern_sample_limit: int = 100
    # Maximum values listed in enum-related evidence
    evidence_value_limit: int = 5
    # Do not report numbers in string fields or strings in number fields
    allow_numeric_string_coercion: bool = True
    # Minimum similarity score (0-100) for suggesting a known enum value
    suggestion_cutoff: float = 80.0


def default_settings() -> AnalysisSettings:
    """
    Return default inspection thresholds.

    Returns:
        AnalysisSettings: Default configuration values.
    """
    return AnalysisSettings()


def tune_for_size(settings: AnalysisSettings, size_mb: float) -> AnalysisSettings:
    """
    Switch to fast mode when the content is larger than the fast-mode threshold.

    Fast mode profiles fewer records and loads fewer CSV rows to bound latency.

    Args:
        settings: The requested thresholds.
        size_mb: Size of the content in megabytes.

    Returns:
        AnalysisSettings: The settings to use for this content.
    """
    if settings.fast_mode or size_mb <= settings.fast_mode_threshold_mb:
        return settings

    return replace(
        settings,
        fast_mode=True,
        max_records_to_profile=settings.fast_max_records_to_profile,
        csv_row_limit=settings.fast_csv_row_limit,
    )


@dataclass(frozen=True)
class Located:
    """
    A finding position resolved to an exact source span.
    """

    span: OffsetRange


@dataclass(frozen=True)
class Unlocatable:
    """
    A finding that has no exact span; ``row`` is the best known line, if any.
    """

    row: int | None
    reason: str


Location = Located | Unlocatable


@dataclass(frozen=True)
class FindingDraft:
    """
    A finding as produced by a stage, before numbering and position display.
    """

    category: Category
    severity: Severity
    confidence: Confidence
    where: Location
    summary: str
    evidence: dict[str, Any]
    why_it_matters: str
    suggested_action: str
    field: str | None = None


@dataclass(frozen=True)
class NumericStats:
    """
    Distribution of a numeric field.
    """

    min: float
    max: float
    mean: float
    median: float
    stdev: float
    p90: float
    p95: float
    p99: float
    has_negatives: bool
    negative_count: int
    is_zero_inflated: bool


@dataclass(frozen=True)
class StringStats:
    min_length: int
    max_length: int
    avg_length: float
    patterns: tuple[str, ...]


@dataclass(frozen=True)
class EnumProfile:
    """
    The closed value set of a low-cardinality field.
    """

    is_enum_like: bool
    value_set: tuple[str, ...]
    cardinality: int


@dataclass(frozen=True)
class FieldAnalysis:
    """
    Profile of one field over the sampled records.
    """

    name: str
    data_type: DataType
    null_count: int
    null_rate: float
    unique_count: int
    unique_rate: float
    samples: tuple[Any, ...]
    numeric_stats: NumericStats | None = None
    string_stats: StringStats | None = None
    enum_like: EnumProfile | None = None


@dataclass(frozen=True)
class DataProfile:
    """
    Profile of a whole document.

    ``record_count`` counts every loaded record; ``sample_size`` counts those
    that were profiled.
    """

    record_count: int
    fields: tuple[FieldAnalysis, ...]
    file_type: FileType
    file_size: int
    sample_size: int

    def get_field(self, name: str) -> FieldAnalysis | None:
        return next((item for item in self.fields if item.name == name), None)
