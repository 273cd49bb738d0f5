"""
Trends Command - 多日趋势命令

基于本地快照计算多日涨跌趋势（不访问 API，不触发预警）。
"""

import json
import logging
from typing import Optional

import click

from src.business.cli.context import load_config, open_store, setup_logging
from src.business.cli.dashboard.renderer import PortfolioRenderer
from src.engine.performance import detect_downtrends, detect_uptrends

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    help="配置文件路径",
)
@click.option(
    "--days",
    "-d",
    type=click.IntRange(min=2),
    default=None,
    help="趋势窗口天数，默认取配置 trend.days",
)
@click.option(
    "--threshold",
    "-t",
    type=float,
    default=None,
    help="趋势阈值（百分比绝对值，如 10 表示 ±10%）",
)
@click.option(
    "--direction",
    type=click.Choice(["down", "up", "both"]),
    default="both",
    help="趋势方向",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="输出格式",
)
@click.option("--verbose", "-v", is_flag=True, help="显示详细日志")
def trends(
    config_path: Optional[str],
    days: Optional[int],
    threshold: Optional[float],
    direction: str,
    output: str,
    verbose: bool,
) -> None:
    """查看多日涨跌趋势

    \b
    示例：
      t212-monitor trends
      t212-monitor trends -d 10 -t 15 --direction down
    """
    setup_logging(verbose, logging.WARNING)

    config = load_config(config_path)
    store = open_store(config)
    window = store.window(days or config.trend.days)

    down_threshold = -abs(threshold) if threshold is not None else config.trend.downtrend_threshold
    up_threshold = abs(threshold) if threshold is not None else config.trend.uptrend_threshold

    results = []
    if direction in ("down", "both"):
        results += detect_downtrends(window, down_threshold)
    if direction in ("up", "both"):
        results += detect_uptrends(window, up_threshold)

    if output == "json":
        click.echo(json.dumps([r.to_dict() for r in results], ensure_ascii=False, indent=2))
        return

    if len(window) < 2:
        click.echo(f"📭 Not enough history for trends ({len(window)} day(s) stored)")
        return

    click.echo(f"📊 Trends over {window[0].date} → {window[-1].date} ({len(window)} days)")
    click.echo("-" * 50)
    if not results:
        click.echo("✅ No trends past the threshold")
        return

    for line in PortfolioRenderer().render_trends(results):
        click.echo(line)
