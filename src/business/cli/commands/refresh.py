"""
Refresh Command - 单次刷新命令

执行一次完整刷新周期：拉取持仓、保存快照、计算涨跌和趋势、检查预警。

退出码：
    0 成功且无新预警
    1 成功且有新预警
    3 配置错误或刷新失败
"""

import json
import logging
import sys
from typing import Optional

import click

from src.business.cli.context import build_monitor, load_config, setup_logging
from src.business.cli.dashboard.renderer import PortfolioRenderer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ALERTS = 1
EXIT_ERROR = 3


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True),
    help="配置文件路径 (默认 config/monitor/settings.yaml)",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="输出格式",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="显示详细日志",
)
def refresh(config_path: Optional[str], output: str, verbose: bool) -> None:
    """执行一次刷新周期

    \b
    示例：
      t212-monitor refresh
      t212-monitor refresh -o json
    """
    setup_logging(verbose, logging.WARNING)

    try:
        config = load_config(config_path)
        monitor = build_monitor(config)
    except ValueError as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    result = monitor.refresh()

    if output == "json":
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        click.echo(PortfolioRenderer().render(result))

    if result.error:
        sys.exit(EXIT_ERROR)
    sys.exit(EXIT_ALERTS if result.alerts else EXIT_OK)
