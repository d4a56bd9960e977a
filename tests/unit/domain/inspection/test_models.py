# domain/inspection/test_models.py

import pytest

from data_detective.domain.inspection import (
    AnalysisSettings,
    DataProfile,
    FieldAnalysis,
    default_settings,
    tune_for_size,
)

pytestmark = pytest.mark.unit


def test_default_settings() -> None:
    """
    ARRANGE: no overrides
    ACT:     default_settings
    ASSERT:  equals a plain AnalysisSettings
    """
    actual = default_settings()

    assert actual == AnalysisSettings()


def test_tune_for_size_small_content_unchanged() -> None:
    """
    ARRANGE: default settings and 1 MB of content
    ACT:     tune_for_size
    ASSERT:  settings returned unchanged
    """
    settings = default_settings()

    actual = tune_for_size(settings, 1.0)

    assert actual is settings


def test_tune_for_size_enables_fast_mode() -> None:
    """
    ARRANGE: default settings and 6 MB of content
    ACT:     tune_for_size
    ASSERT:  fast mode with reduced sampling
    """
    actual = tune_for_size(default_settings(), 6.0)

    assert (actual.fast_mode, actual.max_records_to_profile, actual.csv_row_limit) == (
        True,
        1_000,
        500,
    )


def test_data_profile_get_field() -> None:
    """
    ARRANGE: profile with one field
    ACT:     get_field for present and absent names
    ASSERT:  field found, absent name gives None
    """
    field = FieldAnalysis(
        name="a",
        data_type="number",
        null_count=0,
        null_rate=0.0,
        unique_count=1,
        unique_rate=1.0,
        samples=(1,),
    )
    profile = DataProfile(
        record_count=1,
        fields=(field,),
        file_type="json",
        file_size=10,
        sample_size=1,
    )

    actual = (profile.get_field("a"), profile.get_field("b"))

    assert actual == (field, None)
