"""
Alert Models - 预警数据模型

定义预警系统的核心数据结构：
- AlertKind: 预警类型（日跌幅/日涨幅/多日下跌/多日上涨）
- AlertEvent: 单条预警事件（仅存在于内存，不落盘）
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class AlertKind(str, Enum):
    """预警类型"""

    DAILY_LOSS = "daily_loss"  # 当日跌幅超过阈值
    DAILY_GAIN = "daily_gain"  # 当日涨幅超过阈值
    DOWNTREND = "downtrend"  # 多日下跌
    UPTREND = "uptrend"  # 多日上涨

    @property
    def key_label(self) -> str:
        """去重键中使用的短标签"""
        return _KEY_LABELS[self]


_KEY_LABELS = {
    AlertKind.DAILY_LOSS: "loss",
    AlertKind.DAILY_GAIN: "gain",
    AlertKind.DOWNTREND: "downtrend",
    AlertKind.UPTREND: "uptrend",
}


def alert_key(ticker: str, kind: AlertKind, day: str) -> str:
    """构造去重键 "ticker:kind:day"

    Example:
        >>> alert_key("AAPL_US_EQ", AlertKind.DAILY_LOSS, "2024-03-15")
        'AAPL_US_EQ:loss:2024-03-15'
    """
    return f"{ticker}:{kind.key_label}:{day}"


@dataclass
class AlertEvent:
    """预警事件"""

    kind: AlertKind
    ticker: str
    short_ticker: str
    day: str  # 触发日期 (YYYY-MM-DD)
    change_percent: float
    title: str  # 通知标题
    message: str  # 展示文本
    body: str  # 通知正文
    threshold: Optional[float] = None
    current_price: Optional[float] = None
    days: Optional[int] = None  # 仅趋势预警
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def key(self) -> str:
        return alert_key(self.ticker, self.kind, self.day)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "ticker": self.ticker,
            "short_ticker": self.short_ticker,
            "day": self.day,
            "change_percent": self.change_percent,
            "threshold": self.threshold,
            "current_price": self.current_price,
            "days": self.days,
            "title": self.title,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
        }
