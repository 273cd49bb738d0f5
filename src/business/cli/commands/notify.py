"""
Notify Command - 通知测试命令

通过配置的通知渠道发送一条测试通知。
"""

import logging
import sys
from typing import Optional

import click

from src.business.cli.context import load_config, setup_logging
from src.business.notification import create_channel

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
    "--channel",
    "channel_name",
    type=click.Choice(["desktop", "log", "auto"]),
    default=None,
    help="通知渠道，默认取配置 notification.channel",
)
@click.option("--title", "-T", default=None, help="消息标题")
@click.option("--content", "-C", "content", default=None, help="消息内容")
@click.option("--verbose", "-v", is_flag=True, help="显示详细日志")
def notify(
    config_path: Optional[str],
    channel_name: Optional[str],
    title: Optional[str],
    content: Optional[str],
    verbose: bool,
) -> None:
    """发送测试通知

    \b
    示例：
      t212-monitor notify
      t212-monitor notify --channel log -T "Hello" -C "World"
    """
    setup_logging(verbose)

    config = load_config(config_path)
    try:
        channel = create_channel(
            channel_name or config.notification.channel,
            enabled=config.notification.enabled,
        )
    except ValueError as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        sys.exit(3)

    title = title or "🧪 Trading 212 Monitor"
    content = content or "Notifications are working."

    click.echo(f"📤 Sending test notification via {channel.name}...")
    result = channel.send(title, content)

    if result.is_success:
        click.echo("✅ Sent")
    elif result.is_silenced:
        click.echo("🔕 Notifications are disabled (notification.enabled = false)")
    else:
        click.echo(f"❌ Send failed: {result.error}", err=True)
        sys.exit(1)
