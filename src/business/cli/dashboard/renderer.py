"""Portfolio renderer for CLI.

Renders a RefreshResult as plain text:
- Header (timestamp, cached/live, errors)
- Account summary (cash and P/L)
- Positions table (losers first by daily change)
- New alerts
- Multi-day trends
"""

from typing import Optional

from src.business.cli.dashboard.components import (
    box_bottom,
    box_line,
    box_title,
    change_icon,
    format_money,
    format_pct,
    table_header,
    table_row,
    table_separator,
)
from src.business.monitoring.portfolio_monitor import RefreshResult
from src.engine.models.performance import EnrichedPosition, TrendDirection, TrendResult

POSITION_COLUMNS = [
    ("Ticker", 10),
    ("Name", 24),
    ("Qty", 10),
    ("Price", 12),
    ("Day", 9),
    ("Total", 9),
    ("P/L", 12),
]

WIDTH = 90


class PortfolioRenderer:
    """Text renderer for refresh results."""

    def __init__(self, width: int = WIDTH):
        self.width = width

    def render(self, result: RefreshResult) -> str:
        """Render a complete refresh result.

        Args:
            result: RefreshResult from PortfolioMonitor

        Returns:
            Formatted multi-line string
        """
        lines = []

        timestamp = result.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        source = "cached" if result.from_cache else "live"
        lines.append("═" * self.width)
        lines.append(f"  Trading 212 Portfolio  |  {timestamp}  |  {source}")
        lines.append("═" * self.width)

        if result.error:
            lines.append(f"❌ Refresh failed: {result.error}")
            return "\n".join(lines)

        lines.extend(self.render_summary(result))
        lines.append("")
        lines.extend(self.render_positions(result.enriched_positions))

        if result.alerts:
            lines.append("")
            lines.append(f"🔔 New alerts ({len(result.alerts)}):")
            for alert in result.alerts:
                lines.append(f"   {alert.title}: {alert.message}")

        if result.trend_results:
            lines.append("")
            lines.extend(self.render_trends(result.trend_results, result.enriched_positions))

        return "\n".join(lines)

    def render_summary(self, result: RefreshResult) -> list[str]:
        """Account summary box."""
        width = 48
        lines = [box_title("Account", width)]
        cash = result.cash
        base = result.base_currency
        if cash is not None:
            lines.append(box_line(f"Total value : {format_money(cash.total, base)}", width))
            lines.append(box_line(f"Invested    : {format_money(cash.invested, base)}", width))
            lines.append(box_line(f"Free cash   : {format_money(cash.free, base)}", width))
            lines.append(box_line(f"Open P/L    : {format_money(cash.ppl, base)}", width))
        else:
            lines.append(box_line(f"Open P/L    : {format_money(result.total_ppl, base)}", width))
        lines.append(box_line(f"Positions   : {len(result.enriched_positions)}", width))
        lines.append(box_bottom(width))
        return lines

    def render_positions(self, positions: list[EnrichedPosition]) -> list[str]:
        """Positions table, losers first."""
        if not positions:
            return ["No open positions."]

        ordered = sorted(positions, key=lambda p: (p.daily_change_percent, p.ticker))
        lines = [
            table_header(POSITION_COLUMNS),
            table_separator(POSITION_COLUMNS),
        ]
        for p in ordered:
            day = format_pct(p.daily_change_percent) if p.has_previous_data else "-"
            lines.append(
                table_row(
                    [
                        p.short_ticker,
                        p.company_name or "",
                        f"{p.position.quantity:.4f}",
                        f"{p.current_price:.2f}",
                        day,
                        format_pct(p.total_return_percent),
                        f"{p.position.ppl:.2f}",
                    ],
                    POSITION_COLUMNS,
                )
            )
        return lines

    def render_trends(
        self,
        trends: list[TrendResult],
        positions: Optional[list[EnrichedPosition]] = None,
    ) -> list[str]:
        """Downtrend and uptrend sections."""
        currencies = {p.ticker: p.instrument_currency for p in positions or []}
        lines = []

        down = [t for t in trends if t.direction == TrendDirection.DOWN]
        up = [t for t in trends if t.direction == TrendDirection.UP]

        if down:
            lines.append(f"⚠️ Downtrends ({len(down)}):")
            lines.extend(self._trend_line(t, currencies.get(t.ticker)) for t in down)
        if up:
            lines.append(f"🚀 Uptrends ({len(up)}):")
            lines.extend(self._trend_line(t, currencies.get(t.ticker)) for t in up)
        return lines

    @staticmethod
    def _trend_line(trend: TrendResult, currency: Optional[str]) -> str:
        verb = "Down" if trend.direction == TrendDirection.DOWN else "Up"
        return (
            f"   {change_icon(trend.change_percent)} {trend.short_ticker:<8} "
            f"{verb} {abs(trend.change_percent):.2f}% over {trend.days} days "
            f"({format_money(trend.start_price, currency)} → "
            f"{format_money(trend.end_price, currency)}, "
            f"{trend.start_date} → {trend.end_date})"
        )
