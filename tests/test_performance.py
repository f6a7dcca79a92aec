from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from finance_calc.config import ChartCanvas
from finance_calc.data_models import AssetPosition, RangeKey, SeriesPoint
from finance_calc.errors import InvalidRangeError, InvalidRecordError
from finance_calc.performance import build_chart, filter_range, performance, portfolio_summary, snapshot

UTC = timezone.utc


def _monthly_series():
    return [SeriesPoint(date=datetime(2024, m, 1, tzinfo=UTC), value=1000 + m * 10) for m in range(1, 11)]


def _points(*values):
    start = datetime(2024, 1, 1, tzinfo=UTC)
    return [SeriesPoint(date=start + timedelta(days=i), value=v) for i, v in enumerate(values)]


def test_snapshot_profit_and_loss():
    result = snapshot(1000, 1200)
    assert result.pnl == 200
    assert result.pnl_pct == pytest.approx(20)


def test_snapshot_loss_and_zero_invested():
    assert snapshot(1000, 900).pnl_pct == pytest.approx(-10)
    assert snapshot(0, 50).pnl_pct == 0


def test_short_window_falls_back_to_last_eight_points_of_full_series():
    series = _monthly_series()
    now = datetime(2024, 10, 15, tzinfo=UTC)

    result = filter_range(series, "1m", now=now)

    assert result == series[-8:]


def test_filter_range_sorts_unordered_input():
    series = _monthly_series()
    now = datetime(2024, 10, 15, tzinfo=UTC)
    assert filter_range(list(reversed(series)), RangeKey.ALL, now=now) == series
    assert filter_range(list(reversed(series)), "1m", now=now) == series[-8:]


def test_filter_range_keeps_points_inside_window():
    now = datetime(2024, 6, 30, tzinfo=UTC)
    series = [SeriesPoint(date=now - timedelta(days=7 * k), value=100 + k) for k in range(20)]

    result = filter_range(series, "3m", now=now)

    assert len(result) == 13
    assert result[0].date == now - timedelta(days=84)
    assert result[-1].date == now


def test_fallback_triggers_below_four_points_exactly():
    now = datetime(2024, 6, 30, tzinfo=UTC)
    old = [SeriesPoint(date=now - timedelta(days=100 + d), value=50) for d in range(10)]
    recent = [SeriesPoint(date=now - timedelta(days=d), value=60) for d in (29, 20, 10, 0)]

    assert filter_range(old + recent, "1m", now=now) == recent
    trimmed = old + recent[1:]
    assert filter_range(trimmed, "1m", now=now) == sorted(trimmed, key=lambda p: p.date)[-8:]


def test_filter_range_window_boundary_is_inclusive():
    now = datetime(2024, 6, 30, tzinfo=UTC)
    series = [SeriesPoint(date=now - timedelta(days=d), value=1) for d in (0, 5, 10, 30, 31)]
    result = filter_range(series, "1m", now=now)
    assert [now - p.date for p in result] == [timedelta(days=d) for d in (30, 10, 5, 0)]


def test_filter_range_all_and_empty():
    series = _monthly_series()
    assert filter_range(series, "all") == series
    assert filter_range([], "1y") == []


def test_filter_range_rejects_unknown_window():
    with pytest.raises(InvalidRangeError):
        filter_range(_monthly_series(), "2w")


def test_build_chart_two_points():
    chart = build_chart(_points(100, 150))

    assert chart.range_delta == 50
    assert chart.range_delta_pct == pytest.approx(50)
    assert chart.last_delta == 50
    assert chart.min_value == 100
    assert chart.max_value == 150
    assert len(chart.points) == 2
    low, high = chart.points
    assert (low.x, low.y) == (pytest.approx(12), pytest.approx(114))
    assert (high.x, high.y) == (pytest.approx(328), pytest.approx(14))
    assert high.y < low.y
    assert chart.path == "M 12.00 114.00 L 328.00 14.00"
    assert chart.area_path == "M 12.00 114.00 L 328.00 14.00 L 328.00 114.00 L 12.00 114.00 Z"


def test_build_chart_deltas_use_last_two_and_first_points():
    chart = build_chart(_points(200, 100, 120, 90))
    assert chart.last_delta == -30
    assert chart.last_delta_pct == pytest.approx(-25)
    assert chart.range_delta == -110
    assert chart.range_delta_pct == pytest.approx(-55)


def test_build_chart_flat_series_uses_unit_span():
    chart = build_chart(_points(5, 5, 5))
    assert [p.y for p in chart.points] == [pytest.approx(114)] * 3
    assert [p.x for p in chart.points] == [pytest.approx(12), pytest.approx(170), pytest.approx(328)]


def test_build_chart_zero_start_value_gives_zero_percentage():
    chart = build_chart(_points(0, 0, 40))
    assert chart.range_delta == 40
    assert chart.range_delta_pct == 0
    assert chart.last_delta_pct == 0


def test_build_chart_needs_two_points():
    assert build_chart([]) is None
    assert build_chart(_points(100)) is None


def test_build_chart_custom_canvas():
    canvas = ChartCanvas(width=100, height=50, pad_x=0, pad_y=5)
    chart = build_chart(_points(1, 2, 3), canvas=canvas)
    assert [p.x for p in chart.points] == [0, 50, 100]
    assert [p.y for p in chart.points] == [pytest.approx(45), pytest.approx(25), pytest.approx(5)]
    assert chart.area_path.endswith("L 100.00 45.00 L 0.00 45.00 Z")


def test_performance_combines_pnl_and_chart():
    series = _monthly_series()
    result = performance(1000, 1100, series, "1y", now=datetime(2024, 10, 15, tzinfo=UTC))
    assert result.pnl == 100
    assert result.range is RangeKey.ONE_YEAR
    assert len(result.chart.points) == 10
    assert result.range_delta == pytest.approx(90)
    assert result.last_delta == pytest.approx(10)


def test_performance_without_enough_data_has_no_chart():
    result = performance(500, 450, _points(450), "all")
    assert result.chart is None
    assert result.range_delta is None
    assert result.last_delta_pct is None
    assert result.pnl == -50


def test_performance_is_idempotent():
    now = datetime(2024, 10, 15, tzinfo=UTC)
    assert performance(1000, 1100, _monthly_series(), "6m", now=now) == performance(
        1000, 1100, _monthly_series(), "6m", now=now
    )


def test_portfolio_summary_ranks_and_totals():
    positions = [
        AssetPosition(id=1, name="Bitcoin", invested=500, current_value=500),
        AssetPosition(id=2, name="Index Fund", invested=1000, current_value=1500),
        AssetPosition(id=3, name="Apple", invested=200, current_value=500),
    ]
    summary = portfolio_summary(positions)

    assert [a.name for a in summary.assets] == ["Index Fund", "Apple", "Bitcoin"]
    assert summary.total_invested == 1700
    assert summary.total_current_value == 2500
    assert summary.total_pnl == 800
    assert summary.pnl_pct == pytest.approx(800 / 1700 * 100)
    assert [a.share for a in summary.assets] == [pytest.approx(0.6), pytest.approx(0.2), pytest.approx(0.2)]
    assert summary.assets[1].pnl_pct == pytest.approx(150)


def test_portfolio_summary_empty():
    summary = portfolio_summary([])
    assert summary.assets == ()
    assert summary.total_pnl == 0
    assert summary.pnl_pct == 0


def test_build_chart_accepts_decimal_values():
    chart = build_chart(_points(Decimal("100"), Decimal("150")))
    assert chart.range_delta == 50
    assert chart.range_delta_pct == pytest.approx(50)
    assert [p.y for p in chart.points] == [pytest.approx(114), pytest.approx(14)]
    assert isinstance(chart.points[0].value, float)


def test_build_chart_rejects_non_numeric_values():
    with pytest.raises(InvalidRecordError):
        build_chart(_points(100, "150"))


def test_portfolio_summary_validates_before_ranking():
    positions = [
        AssetPosition(id=1, name="a", invested=100, current_value="x"),
        AssetPosition(id=2, name="b", invested=100, current_value=50),
    ]
    with pytest.raises(InvalidRecordError):
        portfolio_summary(positions)


def test_portfolio_summary_accepts_decimal_values():
    summary = portfolio_summary([AssetPosition(id=1, name="Fund", invested=Decimal("100"), current_value=Decimal("150"))])
    assert summary.total_pnl == 50
    assert summary.assets[0].share == pytest.approx(1)
