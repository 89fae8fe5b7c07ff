"""Database domain mixins package."""

from .db_performances import PerformanceDbMixin
from .db_scores import ScoreDbMixin
from .db_registration_fees import RegistrationFeeDbMixin

__all__ = [
    "PerformanceDbMixin",
    "ScoreDbMixin",
    "RegistrationFeeDbMixin",
]
