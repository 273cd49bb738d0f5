"""
CLI Main Entry Point - 命令行主入口

使用 Click 库构建命令行工具。
"""

import click

from src.business.cli.commands.history import history
from src.business.cli.commands.notify import notify
from src.business.cli.commands.refresh import refresh
from src.business.cli.commands.trends import trends
from src.business.cli.commands.watch import watch


@click.group()
@click.version_option(version="0.1.0", prog_name="t212-monitor")
def cli() -> None:
    """Trading 212 持仓监控 - 命令行工具

    定时拉取持仓、保存每日快照、计算日涨跌与多日趋势，并推送预警。
    """
    pass


# 注册子命令
cli.add_command(watch)
cli.add_command(refresh)
cli.add_command(history)
cli.add_command(trends)
cli.add_command(notify)


if __name__ == "__main__":
    cli()
