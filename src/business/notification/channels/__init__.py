"""
Notification Channels - 通知渠道

支持的渠道：
- DesktopChannel: 桌面通知 (notify-send / osascript)
- LogChannel: 写入日志
"""

from src.business.notification.channels.base import (
    NotificationChannel,
    SendResult,
    SendStatus,
)
from src.business.notification.channels.desktop import DesktopChannel
from src.business.notification.channels.log_channel import LogChannel

__all__ = [
    "NotificationChannel",
    "SendResult",
    "SendStatus",
    "DesktopChannel",
    "LogChannel",
]
