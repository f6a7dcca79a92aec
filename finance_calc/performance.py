"""Investment performance figures.

Given what was put into an asset and its dated valuations, this module
derives the profit and loss, restricts the valuations to a trailing window
and maps them onto a fixed logical canvas so a caller can draw a sparkline
with an optional filled area. It also summarizes a whole portfolio of
assets.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Union

from .allocation import percent_of
from .config import DEFAULT_CANVAS, FALLBACK_POINTS, MIN_RANGE_POINTS, RANGE_WINDOW_DAYS, ChartCanvas
from .data_models import (
    AssetPosition,
    AssetSummary,
    ChartGeometry,
    ChartPoint,
    PerformanceSnapshot,
    PnL,
    PortfolioSummary,
    RangeKey,
    SeriesPoint,
)
from .utils import require_number

logger = logging.getLogger(__name__)


def _aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def snapshot(invested: float, current_value: float) -> PnL:
    """Return profit and loss of an asset.

    ``pnl_pct`` is relative to ``invested`` and is 0 when nothing was
    invested.
    """
    invested = require_number(invested, "invested")
    current_value = require_number(current_value, "current_value")
    pnl = current_value - invested
    return PnL(
        invested=invested,
        current_value=current_value,
        pnl=pnl,
        pnl_pct=percent_of(pnl, invested),
    )


def sort_series(series: Iterable[SeriesPoint]) -> List[SeriesPoint]:
    """Return valuations ordered from oldest to newest."""
    return sorted(series, key=lambda p: _aware(p.date))


def filter_range(
    series: Iterable[SeriesPoint],
    range_key: Union[RangeKey, str],
    now: Optional[datetime] = None,
) -> List[SeriesPoint]:
    """Keep the valuations that fall inside a trailing window.

    Parameters
    ----------
    series: Iterable[SeriesPoint]
        Valuations in any order.
    range_key: RangeKey or str
        ``1m`` (30 days), ``3m`` (90), ``6m`` (180), ``1y`` (365) or ``all``.
    now: datetime, optional
        End of the window; defaults to the current UTC time.

    Returns
    -------
    List[SeriesPoint]
        The points dated on or after ``now - window``, oldest first. When
        fewer than ``MIN_RANGE_POINTS`` points survive, the last
        ``FALLBACK_POINTS`` points of the full series are returned instead.
    """
    key = RangeKey.parse(range_key)
    ordered = sort_series(series)
    if not ordered or key is RangeKey.ALL:
        return ordered

    now = _aware(now) if now is not None else datetime.now(timezone.utc)
    cutoff = now - timedelta(days=RANGE_WINDOW_DAYS[key.value])
    filtered = [p for p in ordered if _aware(p.date) >= cutoff]
    if len(filtered) < MIN_RANGE_POINTS:
        logger.debug(
            "Range %s kept %d of %d points; using the last %d",
            key.value,
            len(filtered),
            len(ordered),
            FALLBACK_POINTS,
        )
        return ordered[-FALLBACK_POINTS:]
    return filtered


def _spark_path(points: Sequence[ChartPoint]) -> str:
    return " ".join(
        f"{'M' if i == 0 else 'L'} {p.x:.2f} {p.y:.2f}" for i, p in enumerate(points)
    )


def build_chart(
    series: Sequence[SeriesPoint],
    canvas: ChartCanvas = DEFAULT_CANVAS,
) -> Optional[ChartGeometry]:
    """Map an ordered valuation list onto ``canvas``.

    Larger values are drawn higher, i.e. with a smaller ``y``. A flat
    series uses a span of 1 so every point sits on the bottom padding line.
    Returns ``None`` when fewer than two points are available.
    """
    points = list(series)
    n = len(points)
    if n < 2:
        return None

    values = [require_number(p.value, "value") for p in points]
    min_value = min(values)
    max_value = max(values)
    span = (max_value - min_value) or 1

    step = (canvas.width - canvas.pad_x * 2) / (n - 1)
    drawable_height = canvas.height - canvas.pad_y * 2
    mapped = tuple(
        ChartPoint(
            x=canvas.pad_x + i * step,
            y=canvas.pad_y + (1 - (value - min_value) / span) * drawable_height,
            date=p.date,
            value=value,
        )
        for i, (p, value) in enumerate(zip(points, values))
    )

    path = _spark_path(mapped)
    baseline = canvas.baseline
    area_path = (
        f"{path} L {mapped[-1].x:.2f} {baseline:.2f} "
        f"L {mapped[0].x:.2f} {baseline:.2f} Z"
    )

    first, prev, last = values[0], values[-2], values[-1]
    last_delta = last - prev
    range_delta = last - first

    return ChartGeometry(
        width=canvas.width,
        height=canvas.height,
        pad_x=canvas.pad_x,
        pad_y=canvas.pad_y,
        min_value=min_value,
        max_value=max_value,
        points=mapped,
        path=path,
        area_path=area_path,
        last_delta=last_delta,
        last_delta_pct=percent_of(last_delta, prev),
        range_delta=range_delta,
        range_delta_pct=percent_of(range_delta, first),
    )


def performance(
    invested: float,
    current_value: float,
    series: Iterable[SeriesPoint],
    range_key: Union[RangeKey, str] = RangeKey.THREE_MONTHS,
    now: Optional[datetime] = None,
    canvas: ChartCanvas = DEFAULT_CANVAS,
) -> PerformanceSnapshot:
    """Combine P&L, range filtering and chart geometry for one asset."""
    key = RangeKey.parse(range_key)
    pnl = snapshot(invested, current_value)
    chart = build_chart(filter_range(series, key, now=now), canvas=canvas)
    return PerformanceSnapshot(
        invested=pnl.invested,
        current_value=pnl.current_value,
        pnl=pnl.pnl,
        pnl_pct=pnl.pnl_pct,
        range=key,
        chart=chart,
        range_delta=chart.range_delta if chart else None,
        range_delta_pct=chart.range_delta_pct if chart else None,
        last_delta=chart.last_delta if chart else None,
        last_delta_pct=chart.last_delta_pct if chart else None,
    )


def portfolio_summary(positions: Iterable[AssetPosition]) -> PortfolioSummary:
    """Totals and per-asset shares of a portfolio.

    Assets are ranked by current value, largest first, then by name.
    ``share`` is each asset's fraction of the total current value (0 for
    an empty or worthless portfolio).
    """
    valued = [(asset, snapshot(asset.invested, asset.current_value)) for asset in positions]
    ranked = sorted(valued, key=lambda item: (-item[1].current_value, item[0].name))

    total_invested = 0.0
    total_current_value = 0.0
    for _, pnl in ranked:
        total_invested += pnl.invested
        total_current_value += pnl.current_value
    total_pnl = total_current_value - total_invested

    assets = []
    for asset, pnl in ranked:
        assets.append(
            AssetSummary(
                id=asset.id,
                name=asset.name,
                invested=pnl.invested,
                current_value=pnl.current_value,
                pnl=pnl.pnl,
                pnl_pct=pnl.pnl_pct,
                share=pnl.current_value / total_current_value if total_current_value else 0.0,
            )
        )

    return PortfolioSummary(
        total_invested=total_invested,
        total_current_value=total_current_value,
        total_pnl=total_pnl,
        pnl_pct=percent_of(total_pnl, total_invested),
        assets=tuple(assets),
    )
