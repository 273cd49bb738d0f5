"""
Configuration Management - 配置管理

加载和管理业务层配置：
- MonitorConfig: 持仓监控配置（API、轮询、预警阈值、趋势、存储、通知、汇率）
"""

from src.business.config.monitor_config import (
    AlertThresholds,
    ApiConfig,
    FxConfig,
    MonitorConfig,
    NotificationConfig,
    PollingConfig,
    StorageConfig,
    TrendConfig,
)

__all__ = [
    "AlertThresholds",
    "ApiConfig",
    "FxConfig",
    "MonitorConfig",
    "NotificationConfig",
    "PollingConfig",
    "StorageConfig",
    "TrendConfig",
]
