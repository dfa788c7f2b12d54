"""
유틸리티 패키지
"""

from .normalization import clean_label, clean_optional_label
from .dates import add_months, months_between, today_local

__all__ = [
    "clean_label",
    "clean_optional_label",
    "add_months",
    "months_between",
    "today_local",
]
