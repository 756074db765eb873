"""Configuration classes for schedule resolution."""

from pydantic import BaseModel, field_validator

from ganttplan.models import DurationSpec


class SchedulingConfig(BaseModel):
    """Knobs for the dependency resolver and the document ingester."""

    # Week/month tasks report 7x/30x their value as day count and end that many
    # days after their start, regardless of calendar exclusions
    literal_coarse_units: bool = True

    # Duplicate ids become "<id><separator><n>"
    id_suffix_separator: str = "_"

    # Duration for tasks that do not declare one
    default_duration: str = "1d"

    @field_validator("default_duration")
    @classmethod
    def validate_default_duration(cls, v: str) -> str:
        """Reject durations the ingester would not understand."""
        DurationSpec.parse(v)
        return v

    @field_validator("id_suffix_separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        if not v:
            raise ValueError("id_suffix_separator must not be empty")
        return v
