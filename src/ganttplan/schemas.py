"""Pydantic schemas for YAML schedule documents."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# The YAML loader annotates every mapping with its source position under these keys
LINE_KEY = "__line__"
COLUMN_KEY = "__column__"


class _Positioned(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    line: int | None = Field(default=None, alias=LINE_KEY)
    column: int | None = Field(default=None, alias=COLUMN_KEY)


class TaskSchema(_Positioned):
    """Schema for a task or marker entry."""

    name: str
    id: str | None = None
    start: datetime | date | str | None = None
    end: datetime | date | str | None = None
    duration: str | None = None
    after: list[str] = Field(default_factory=list)
    before: list[str] = Field(default_factory=list)
    until: list[str] = Field(default_factory=list)
    status: str | None = None
    vertical: bool = False
    progress: int | None = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def coerce_to_string(cls, v: Any) -> Any:
        """Allow numeric names and ids such as `id: 1`."""
        if isinstance(v, int | float):
            return str(v)
        return v

    @field_validator("start", "end", mode="before")
    @classmethod
    def reject_sexagesimal(cls, v: Any) -> Any:
        """Catch unquoted times like 10:30, which YAML reads as base-60 integers."""
        if isinstance(v, int) and not isinstance(v, bool):
            raise ValueError("times of day must be quoted, e.g. start: \"10:30\"")
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def coerce_duration(cls, v: Any) -> Any:
        """A bare number means days."""
        if isinstance(v, int) and not isinstance(v, bool):
            return f"{v}d"
        return v

    @field_validator("after", "before", "until", mode="before")
    @classmethod
    def ensure_id_list(cls, v: Any) -> list[str]:
        """Accept a single id, a space-separated string of ids, or a list."""
        if v is None:
            return []
        items: list[Any] = v if isinstance(v, list) else [v]  # type: ignore[assignment]
        ids: list[str] = []
        for item in items:
            ids.extend(str(item).split())
        return ids


class SectionSchema(_Positioned):
    """Schema for a section of tasks."""

    name: str = ""
    tasks: list[TaskSchema] = Field(default_factory=list)


class CalendarSchema(BaseModel):
    """Schema for calendar directives."""

    timezone: str = "UTC"
    excludes: list[date | str] = Field(default_factory=list)
    includes: list[date | str] = Field(default_factory=list)
    weekend: list[str] | None = None

    @field_validator("excludes", "includes", "weekend", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> Any:
        """Accept a single value or a comma/space separated string."""
        if v is None or isinstance(v, list):
            return v
        if isinstance(v, str):
            return v.replace(",", " ").split()
        return [v]


class DocumentSchema(BaseModel):
    """Schema for a whole schedule document."""

    title: str = ""
    date_format: str | None = None  # strftime format for string dates
    calendar: CalendarSchema = Field(default_factory=CalendarSchema)
    tick_interval: str | None = None
    week_start: str | None = None
    today_marker: bool | date | str | None = None
    sections: list[SectionSchema] = Field(default_factory=list)
    tasks: list[TaskSchema] = Field(default_factory=list)  # Tasks outside any section
    markers: list[TaskSchema] = Field(default_factory=list)
