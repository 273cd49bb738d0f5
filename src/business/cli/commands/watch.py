"""
Watch Command - 持续监控命令

启动时如果本地数据足够新则直接展示缓存数据，否则立即刷新；
之后按固定间隔轮询。发送 SIGUSR1 可触发立即刷新：

    kill -USR1 <pid>
"""

import logging
import signal
import sys
from typing import Optional

import click

from src.business.cli.context import build_monitor, load_config, setup_logging
from src.business.cli.dashboard.renderer import PortfolioRenderer
from src.business.monitoring.portfolio_monitor import RefreshResult
from src.business.monitoring.scheduler import PollingScheduler
from src.data.providers.base import DataProviderError

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
    "--interval",
    "-i",
    type=click.IntRange(min=1),
    default=None,
    help="轮询间隔（秒），默认取配置 polling.interval_seconds",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="显示详细日志",
)
def watch(config_path: Optional[str], interval: Optional[int], verbose: bool) -> None:
    """持续监控持仓（Ctrl+C 退出）

    \b
    示例：
      t212-monitor watch
      t212-monitor watch -i 600
    """
    setup_logging(verbose, logging.WARNING)

    try:
        config = load_config(config_path)
        monitor = build_monitor(config)
    except ValueError as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(3)

    interval = interval or config.polling.interval_seconds
    renderer = PortfolioRenderer()

    def show(result: RefreshResult) -> None:
        click.clear()
        click.echo(renderer.render(result))
        click.echo(f"\n⏱️ Next refresh in {interval}s (Ctrl+C to quit, SIGUSR1 to refresh now)")

    click.echo("🔌 Testing API connection...")
    try:
        monitor.source.test_connection()
    except DataProviderError as e:
        click.echo(f"❌ Could not connect to Trading 212: {e}", err=True)
        sys.exit(3)

    cached = monitor.load_cached()
    if cached is not None:
        show(cached)

    scheduler = PollingScheduler(monitor, interval_seconds=interval, on_result=show)
    if hasattr(signal, "SIGUSR1"):
        signal.signal(signal.SIGUSR1, lambda signum, frame: scheduler.request_refresh())

    try:
        scheduler.run(initial=cached is None)
    except KeyboardInterrupt:
        scheduler.stop()
        click.echo("\n👋 Stopped watching")
        sys.exit(0)
