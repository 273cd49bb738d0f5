"""
History Command - 快照历史命令

列出本地保存的每日快照（不访问 API）。
"""

import json
import logging
from typing import Optional

import click

from src.business.cli.context import load_config, open_store, setup_logging

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
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=30,
    help="最多显示的天数（最近的 N 天）",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="输出格式",
)
@click.option("--verbose", "-v", is_flag=True, help="显示详细日志")
def history(config_path: Optional[str], limit: int, output: str, verbose: bool) -> None:
    """查看本地快照历史"""
    setup_logging(verbose, logging.WARNING)

    config = load_config(config_path)
    store = open_store(config)
    snapshots = store.window(limit)

    if output == "json":
        data = [
            {
                "date": s.date,
                "positions": len(s.positions),
                "captured_at": s.captured_at.isoformat(),
            }
            for s in snapshots
        ]
        click.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return

    if not snapshots:
        click.echo(f"📭 No snapshots stored in {config.storage_path}")
        return

    click.echo(f"📚 {len(store)} snapshots stored (retention {store.retention_days} days)")
    click.echo("-" * 50)
    for snapshot in reversed(snapshots):
        captured = snapshot.captured_at.strftime("%H:%M:%S")
        click.echo(f"  {snapshot.date}  {len(snapshot.positions):>4} positions  (captured {captured})")

    last_fetch = store.last_fetch_time
    if last_fetch is not None:
        click.echo(f"\n⏱️ Last fetch: {last_fetch.isoformat()}")
