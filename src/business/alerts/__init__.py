"""
Alerts - 预警系统

- AlertEngine: 阈值判断与按日去重
- AlertEvent / AlertKind: 预警事件模型
"""

from src.business.alerts.engine import AlertEngine
from src.business.alerts.models import AlertEvent, AlertKind, alert_key

__all__ = ["AlertEngine", "AlertEvent", "AlertKind", "alert_key"]
