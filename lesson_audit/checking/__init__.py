"""
Compliance checking engine and policy thresholds.
"""

from .checker import ComplianceChecker, check_lessons
from .policy import CheckPolicy, MIN_CONSECUTIVE_MINUTES, MIN_SESSION_MINUTES

__all__ = [
    "ComplianceChecker",
    "check_lessons",
    "CheckPolicy",
    "MIN_CONSECUTIVE_MINUTES",
    "MIN_SESSION_MINUTES",
]
