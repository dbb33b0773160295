"""
Unit tests for DateHelper.
"""
from datetime import date, datetime

import pytest

from utils.date_helper import DateHelper

TODAY = date(2025, 3, 15)


class TestDateHelper:

    def test_formats(self):
        assert DateHelper.format_date(date(2025, 9, 1)) == '2025-09-01'
        assert DateHelper.format_date_us(datetime(2025, 9, 1, 13, 30)) == '09/01/2025'

    def test_relative_days(self):
        assert DateHelper.get_days_ago(15, today=TODAY) == '2025-02-28'
        assert DateHelper.get_days_from_now(17, today=TODAY) == '2025-04-01'

    def test_add_and_subtract(self):
        assert DateHelper.add_days(TODAY, 1) == date(2025, 3, 16)
        assert DateHelper.subtract_days(TODAY, 15) == date(2025, 2, 28)

    @pytest.mark.parametrize('value', ['2025-09-30', '09/30/2025'])
    def test_parse_both_formats(self, value):
        assert DateHelper.parse_date(value) == date(2025, 9, 30)

    def test_parse_rejects_other_formats(self):
        with pytest.raises(ValueError):
            DateHelper.parse_date('30.09.2025')

    def test_timestamp_is_milliseconds(self):
        assert DateHelper.get_timestamp() > 1_600_000_000_000

    @pytest.mark.parametrize('offset,first,last', [
        (0, '03/01/2025', '03/31/2025'),
        (-1, '02/01/2025', '02/28/2025'),
        (-3, '12/01/2024', '12/31/2024'),
        (11, '02/01/2026', '02/28/2026'),
        (-13, '02/01/2024', '02/29/2024'),
    ])
    def test_month_bounds_with_offset(self, offset, first, last):
        assert DateHelper.get_first_date_of_month_with_offset(offset, today=TODAY) == first
        assert DateHelper.get_last_date_of_month_with_offset(offset, today=TODAY) == last
