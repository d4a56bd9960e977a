# stages/__init__.py

from .anomalies import detect_anomalies
from .drift import detect_drift
from .logic import check_logic
from .profiling import build_profile
from .schema import check_schema
from .structure import check_structure

__all__ = [
    "build_profile",
    "check_logic",
    "check_schema",
    "check_structure",
    "detect_anomalies",
    "detect_drift",
]
