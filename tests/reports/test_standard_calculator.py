import pytest

from src.class_attendance.class_attendance.reports.calculator.standard_calculator import StandardPercentageCalculator


@pytest.mark.parametrize(
    "present, total, expected",
    [
        (2, 3, 67),
        (1, 3, 33),
        (0, 0, 0),
        (0, 5, 0),
        (5, 5, 100),
        (1, 8, 13),  # 12.5 rounds up
        (5, 8, 63),  # 62.5 rounds up
        (3, 8, 38),  # 37.5 rounds up
    ],
)
def test_percentage_rounds_half_up(present, total, expected):
    assert StandardPercentageCalculator().percentage(present, total) == expected
