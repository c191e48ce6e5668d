#!/usr/bin/env python3
"""
Analytics interface definitions and exceptions.

This module defines the exception hierarchy shared by the zone, TRIMP,
pace/power and training-load calculators.
"""

from datetime import date, datetime
from typing import Union


DateLike = Union[date, datetime]


def to_date(value: DateLike) -> date:
    """Normalize a date or datetime to a calendar date"""
    # datetime is a subclass of date, so test it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidParameterError(f"Expected a date or datetime, got {type(value).__name__}")


# Exception classes
class AnalyticsError(Exception):
    """Base exception for analytics operations"""
    pass


class InsufficientDataError(AnalyticsError):
    """Raised when there is insufficient data for analysis"""
    pass


class InvalidParameterError(AnalyticsError):
    """Raised when invalid parameters are provided"""
    pass


class NonChronologicalSample(AnalyticsError):
    """Raised when a load sample is dated before the tracker's last sample"""

    def __init__(self, sample_date: date, last_date: date):
        super().__init__(f"Sample dated {sample_date} precedes last applied date {last_date}")
        self.sample_date = sample_date
        self.last_date = last_date
