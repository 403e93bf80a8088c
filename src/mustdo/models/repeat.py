"""Repeat rule schemas (tagged union on ``type``)."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

WEEKDAY_MIN = 1  # Monday
WEEKDAY_MAX = 7  # Sunday


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True)


class NoRepeat(_Rule):
    type: Literal["none"] = "none"


class DailyRepeat(_Rule):
    type: Literal["daily"] = "daily"
    workday_only: bool = False


class WeeklyRepeat(_Rule):
    type: Literal["weekly"] = "weekly"
    days: tuple[int, ...]

    @field_validator("days")
    @classmethod
    def days_valid(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if not v:
            raise ValueError("weekly repeat needs at least one weekday")
        for day in v:
            if not (WEEKDAY_MIN <= day <= WEEKDAY_MAX):
                raise ValueError(
                    f"weekdays must be between {WEEKDAY_MIN} and {WEEKDAY_MAX}")
        return tuple(sorted(set(v)))


def _clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


class MonthlyRepeat(_Rule):
    type: Literal["monthly"] = "monthly"
    day: int

    @field_validator("day")
    @classmethod
    def clamp_day(cls, v: int) -> int:
        return _clamp(v, 1, 31)


class YearlyRepeat(_Rule):
    type: Literal["yearly"] = "yearly"
    month: int
    day: int

    @field_validator("month")
    @classmethod
    def clamp_month(cls, v: int) -> int:
        return _clamp(v, 1, 12)

    @field_validator("day")
    @classmethod
    def clamp_day(cls, v: int) -> int:
        return _clamp(v, 1, 31)


RepeatRule = Annotated[
    Union[NoRepeat, DailyRepeat, WeeklyRepeat, MonthlyRepeat, YearlyRepeat],
    Field(discriminator="type"),
]
