"""
Date helper utilities
"""

import calendar
import time
from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, datetime]


class DateHelper:
    """Date formatting and arithmetic used by the RCM screens (mm/dd/yyyy inputs)."""

    @staticmethod
    def format_date(value: DateLike) -> str:
        """Format date to YYYY-MM-DD"""
        return value.strftime('%Y-%m-%d')

    @staticmethod
    def format_date_us(value: DateLike) -> str:
        """Format date to MM/DD/YYYY"""
        return value.strftime('%m/%d/%Y')

    @classmethod
    def get_days_ago(cls, days: int, today: Optional[date] = None) -> str:
        return cls.format_date((today or date.today()) - timedelta(days=days))

    @classmethod
    def get_days_from_now(cls, days: int, today: Optional[date] = None) -> str:
        return cls.format_date((today or date.today()) + timedelta(days=days))

    @staticmethod
    def subtract_days(value: DateLike, days: int) -> DateLike:
        return value - timedelta(days=days)

    @staticmethod
    def add_days(value: DateLike, days: int) -> DateLike:
        return value + timedelta(days=days)

    @staticmethod
    def get_timestamp() -> int:
        """Current time in milliseconds"""
        return int(time.time() * 1000)

    @staticmethod
    def parse_date(value: str) -> date:
        """Parse YYYY-MM-DD or MM/DD/YYYY"""
        for fmt in ('%Y-%m-%d', '%m/%d/%Y'):
            try:
                return datetime.strptime(value, fmt).date()
            except ValueError:
                continue
        raise ValueError(f"Unrecognised date: {value!r}")

    @staticmethod
    def _shift_month(month_offset: int, today: Optional[date] = None):
        today = today or date.today()
        index = today.year * 12 + (today.month - 1) + month_offset
        return index // 12, index % 12 + 1

    @classmethod
    def get_first_date_of_month_with_offset(cls, month_offset: int = 0, today: Optional[date] = None) -> str:
        """First day of the month ``month_offset`` months from today, MM/DD/YYYY"""
        year, month = cls._shift_month(month_offset, today)
        return cls.format_date_us(date(year, month, 1))

    @classmethod
    def get_last_date_of_month_with_offset(cls, month_offset: int = 0, today: Optional[date] = None) -> str:
        """Last day of the month ``month_offset`` months from today, MM/DD/YYYY"""
        year, month = cls._shift_month(month_offset, today)
        last_day = calendar.monthrange(year, month)[1]
        return cls.format_date_us(date(year, month, last_day))
