"""
Policy thresholds for the lifecycle guards using Pydantic v2.
Every numeric limit a guard checks against lives here.
"""

from datetime import timedelta
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PolicyConfig(BaseModel):
    """Tunable limits shared by the resolver and the guards"""

    model_config = ConfigDict(frozen=True)

    # Phase resolver
    closing_soon_fraction: float = Field(
        0.1, gt=0.0, lt=1.0, description="Final share of a window labelled 'closing soon'"
    )
    starts_soon_window: timedelta = Field(
        timedelta(hours=24), description="Lead time labelled 'starts soon'"
    )

    # Event dates
    min_event_duration: timedelta = Field(timedelta(hours=1))
    long_event_warning: timedelta = Field(timedelta(days=30))
    far_future_warning: timedelta = Field(timedelta(days=365))

    # Teams
    team_name_min: int = Field(2, ge=1, le=100)
    team_name_max: int = Field(50, ge=1, le=200)
    recommended_team_size: int = Field(10, ge=1, le=1000)

    # Submissions
    project_name_min: int = Field(3, ge=1, le=200)
    project_name_max: int = Field(100, ge=1, le=500)
    description_min: int = Field(10, ge=1, le=1000)
    description_max: int = Field(5000, ge=1, le=100000)
    url_max_length: int = Field(2000, ge=10, le=10000)
    max_technologies: int = Field(20, ge=1, le=200)
    technology_max_length: int = Field(50, ge=1, le=500)
    upload_max_mb: int = Field(50, ge=1, le=10240)

    # Judging
    feedback_max_length: int = Field(2000, ge=1, le=100000)
    overall_tolerance: float = Field(10.0, ge=0.0, le=100.0)
    extreme_score_fraction: float = Field(0.1, ge=0.0, lt=0.5)
    score_decimal_places: int = Field(2, ge=0, le=10)
    max_batch_size: int = Field(50, ge=1, le=10000)

    # Judge tokens
    token_expiry_days: int = Field(30, ge=1, le=3650)
    token_min_length: int = Field(32, ge=16, le=512)

    @model_validator(mode="after")
    def validate_bounds(self) -> Self:
        """Reject min/max pairs that cannot be satisfied"""
        pairs = [
            ("team_name_min", "team_name_max"),
            ("project_name_min", "project_name_max"),
            ("description_min", "description_max"),
        ]
        for low, high in pairs:
            if getattr(self, low) > getattr(self, high):
                raise ValueError(f"{low} must not exceed {high}")
        if self.min_event_duration <= timedelta(0):
            raise ValueError("min_event_duration must be positive")
        if self.starts_soon_window < timedelta(0):
            raise ValueError("starts_soon_window cannot be negative")
        return self


DEFAULT_POLICY = PolicyConfig()

__all__ = ["PolicyConfig", "DEFAULT_POLICY"]
