"""
Alert Sink - 预警通知渠道接口

预警引擎只依赖 NotificationChannel.send(title, content)：
- 渠道关闭时直接返回 SILENCED，不调用具体实现
- 两次投递之间保持 min_interval 秒的间隔
- 投递失败通过 SendResult 返回，不抛异常
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SendStatus(str, Enum):
    """投递状态"""

    SUCCESS = "success"
    FAILED = "failed"
    SILENCED = "silenced"  # 渠道已关闭（notification.enabled = false）


@dataclass(frozen=True)
class SendResult:
    """投递结果

    Attributes:
        status: 投递状态
        error: 失败原因（仅 FAILED）
        details: 渠道附加信息，如命令的 stderr
    """

    status: SendStatus
    error: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def delivered(cls) -> "SendResult":
        return cls(status=SendStatus.SUCCESS)

    @classmethod
    def silenced(cls) -> "SendResult":
        return cls(status=SendStatus.SILENCED)

    @classmethod
    def failed(cls, error: str, **details: Any) -> "SendResult":
        return cls(status=SendStatus.FAILED, error=error, details=details)

    @property
    def is_success(self) -> bool:
        return self.status == SendStatus.SUCCESS

    @property
    def is_silenced(self) -> bool:
        return self.status == SendStatus.SILENCED


class NotificationChannel(ABC):
    """预警通知渠道基类

    子类实现 name、is_available 和 _deliver()；
    send() 负责开关判断和投递间隔。
    """

    def __init__(self, enabled: bool = True, min_interval: float = 0.0) -> None:
        """初始化渠道

        Args:
            enabled: False 时 send() 返回 SILENCED
            min_interval: 两次投递之间的最小间隔（秒）
        """
        self.enabled = enabled
        self.min_interval = min_interval
        self._last_send_time: float = 0.0

    @property
    @abstractmethod
    def name(self) -> str:
        """渠道名称"""
        pass

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """当前环境能否投递"""
        pass

    @abstractmethod
    def _deliver(self, title: str, content: str) -> SendResult:
        """实际投递一条通知"""
        pass

    def send(self, title: str, content: str) -> SendResult:
        """投递一条预警通知

        Args:
            title: 通知标题，如 "📉 AAPL Down"
            content: 通知正文，如 "AAPL has dropped 6.25% today"

        Returns:
            SendResult
        """
        if not self.enabled:
            return SendResult.silenced()
        self._throttle()
        return self._deliver(title, content)

    def _throttle(self) -> None:
        elapsed = time.time() - self._last_send_time
        if elapsed < self.min_interval:
            time.sleep(self.min_interval - elapsed)
        self._last_send_time = time.time()
