"""
Log Channel - 日志通知渠道

把通知写入日志，用于无桌面环境（服务器、容器）或测试。
"""

import logging

from src.business.notification.channels.base import NotificationChannel, SendResult

logger = logging.getLogger(__name__)


class LogChannel(NotificationChannel):
    """日志通知渠道

    已投递的 (title, content) 依次记录在 sent 中。
    """

    def __init__(self, level: int = logging.WARNING, enabled: bool = True) -> None:
        super().__init__(enabled=enabled)
        self.level = level
        self.sent: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "log"

    @property
    def is_available(self) -> bool:
        return True

    def _deliver(self, title: str, content: str) -> SendResult:
        logger.log(self.level, f"{title}: {content}")
        self.sent.append((title, content))
        return SendResult.delivered()
