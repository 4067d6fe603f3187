"""
Scheduling policy thresholds for supplementary lessons.
"""

from dataclasses import dataclass


# Minimum length of a single session in minutes
MIN_SESSION_MINUTES = 40

# Minimum combined length of two back-to-back sessions in minutes
MIN_CONSECUTIVE_MINUTES = 80


@dataclass(frozen=True)
class CheckPolicy:
    """
    Thresholds applied by the compliance checker.

    All values can be adjusted for policy changes or testing.

    Examples:
        >>> policy = CheckPolicy()
        >>> policy.min_session_minutes
        40
        >>> strict = CheckPolicy(min_session_minutes=45, min_consecutive_minutes=90)
    """

    min_session_minutes: int = MIN_SESSION_MINUTES
    min_consecutive_minutes: int = MIN_CONSECUTIVE_MINUTES

    def __post_init__(self):
        if self.min_session_minutes <= 0:
            raise ValueError(
                f"min_session_minutes must be positive, got {self.min_session_minutes}"
            )
        if self.min_consecutive_minutes <= 0:
            raise ValueError(
                f"min_consecutive_minutes must be positive, got {self.min_consecutive_minutes}"
            )

    @classmethod
    def from_config(cls, config) -> 'CheckPolicy':
        """
        Build a policy from application configuration.

        Args:
            config: Object exposing ``min_session_minutes`` and
                ``min_consecutive_minutes``

        Returns:
            CheckPolicy instance
        """
        return cls(
            min_session_minutes=config.min_session_minutes,
            min_consecutive_minutes=config.min_consecutive_minutes
        )
