"""Billing periods for recurring runs"""

import calendar
from datetime import date, timedelta
from typing import Optional, Tuple
from pydantic import BaseModel, model_validator


def next_monday(day: date) -> date:
    """The Monday strictly after ``day``"""
    return day + timedelta(days=7 - day.weekday())


def week_bounds(day: date) -> Tuple[date, date]:
    """Monday through Friday of the week containing ``day``"""
    monday = day - timedelta(days=day.weekday())
    return monday, monday + timedelta(days=4)


def month_bounds(day: date) -> Tuple[date, date]:
    _, last_day = calendar.monthrange(day.year, day.month)
    return day.replace(day=1), day.replace(day=last_day)


def describe_period(start: date, end: date) -> str:
    """Invoice note for a period: a Monday-Friday week, a calendar month or a plain range"""
    if (start, end) == week_bounds(start):
        return f"For the week of {start:%m/%d/%Y} - {end:%m/%d/%Y}"
    if (start, end) == month_bounds(start):
        return f"For {start:%B %Y}"
    return f"For {start:%m/%d/%Y} - {end:%m/%d/%Y}"


class BillingPeriod(BaseModel):
    """Date range a recurring invoice covers"""

    start: date
    end: date
    due_date: Optional[date] = None
    note: str = ""

    class Config:
        frozen = True

    @model_validator(mode="after")
    def check_range(self):
        if self.end < self.start:
            raise ValueError("Period end must not be before period start")
        return self

    @classmethod
    def for_week(cls, day: date) -> "BillingPeriod":
        return cls.for_range(*week_bounds(day))

    @classmethod
    def for_month(cls, day: date) -> "BillingPeriod":
        return cls.for_range(*month_bounds(day))

    @classmethod
    def for_range(cls, start: date, end: date) -> "BillingPeriod":
        """Period due the Monday after it ends, with a note describing the range"""
        return cls(start=start, end=end, due_date=next_monday(end), note=describe_period(start, end))
