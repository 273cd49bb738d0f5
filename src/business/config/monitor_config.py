"""
Monitor Configuration - 持仓监控配置

加载和管理 Trading 212 持仓监控的配置参数。

配置优先级: 环境变量 > YAML (config/monitor/settings.yaml) > dataclass 默认值

API 凭证只从环境变量读取（支持 .env 文件）：
    TRADING212_API_KEY / TRADING212_API_SECRET / TRADING212_ENVIRONMENT

其他环境变量覆盖：
    MONITOR_POLLING_INTERVAL       轮询间隔（秒）
    MONITOR_DAILY_LOSS_THRESHOLD   日跌幅阈值（none/null/空 表示关闭）
    MONITOR_DAILY_GAIN_THRESHOLD   日涨幅阈值（none/null/空 表示关闭）
    MONITOR_STORAGE_PATH           状态文件路径
    MONITOR_TIMEZONE               划分自然日的时区
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv

from src.data.providers.trading212_provider import API_BASE_URLS, Trading212Config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = (
    Path(__file__).parent.parent.parent.parent / "config" / "monitor" / "settings.yaml"
)

_DISABLED_VALUES = ("", "none", "null")


def _env_float(key: str, default: float) -> float:
    """从环境变量获取 float"""
    val = os.getenv(key)
    if val is not None:
        try:
            return float(val)
        except ValueError:
            logger.warning(f"Ignoring non-numeric {key}={val!r}")
    return default


def _env_int(key: str, default: int) -> int:
    """从环境变量获取 int"""
    val = os.getenv(key)
    if val is not None:
        try:
            return int(val)
        except ValueError:
            logger.warning(f"Ignoring non-integer {key}={val!r}")
    return default


def _env_threshold(key: str, default: Optional[float]) -> Optional[float]:
    """从环境变量获取可关闭的阈值，none/null/空字符串 表示关闭"""
    val = os.getenv(key)
    if val is None:
        return default
    if val.strip().lower() in _DISABLED_VALUES:
        return None
    try:
        return float(val)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {key}={val!r}")
        return default


def _optional_float(value: Any) -> Optional[float]:
    """YAML 中的 null 表示关闭"""
    if value is None:
        return None
    return float(value)


@dataclass
class ApiConfig:
    """Trading 212 API 配置"""

    api_key: str = ""
    api_secret: str = ""
    environment: str = "live"  # demo or live
    timeout: int = 30
    rate_limit: float = 1.0  # 两次请求的最小间隔（秒）

    def validate(self) -> None:
        """校验凭证和环境

        Raises:
            ValueError: 凭证缺失或环境非法
        """
        if not self.api_key or not self.api_secret:
            raise ValueError(
                "Trading 212 API credentials are not configured.\n"
                "  1. Open Trading 212 > Settings > API (Beta) and generate a key\n"
                "  2. Set TRADING212_API_KEY and TRADING212_API_SECRET "
                "(environment or .env file)"
            )
        if self.environment not in API_BASE_URLS:
            raise ValueError(
                f"Invalid TRADING212_ENVIRONMENT: {self.environment}. Use 'demo' or 'live'."
            )

    def to_provider_config(self) -> Trading212Config:
        return Trading212Config(
            api_key=self.api_key,
            api_secret=self.api_secret,
            environment=self.environment,
            timeout=self.timeout,
            rate_limit=self.rate_limit,
        )


@dataclass
class PollingConfig:
    """轮询配置"""

    interval_seconds: int = 3600  # 每小时刷新一次
    fresh_data_minutes: float = 30  # 启动时缓存数据的有效期


@dataclass
class AlertThresholds:
    """日涨跌预警阈值（百分比），None 表示关闭"""

    daily_loss: Optional[float] = -5.0
    daily_gain: Optional[float] = 10.0


@dataclass
class TrendConfig:
    """多日趋势配置"""

    days: int = 5
    downtrend_threshold: float = -10.0
    uptrend_threshold: float = 10.0
    alert_uptrends: bool = True


@dataclass
class StorageConfig:
    """本地存储配置"""

    path: str = "data/portfolio/portfolio-data.json"
    retention_days: int = 90
    metadata_ttl_hours: float = 24


@dataclass
class NotificationConfig:
    """通知配置"""

    channel: str = "auto"  # desktop / log / auto
    enabled: bool = True


@dataclass
class FxConfig:
    """汇率换算配置"""

    enabled: bool = True
    base_currency: str = "GBP"
    timeout: float = 5.0


@dataclass
class MonitorConfig:
    """持仓监控总配置

    Usage:
        config = MonitorConfig.load()
        config.api.validate()
    """

    api: ApiConfig = field(default_factory=ApiConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    alerts: AlertThresholds = field(default_factory=AlertThresholds)
    trend: TrendConfig = field(default_factory=TrendConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    notification: NotificationConfig = field(default_factory=NotificationConfig)
    fx: FxConfig = field(default_factory=FxConfig)
    timezone: str = "UTC"

    @property
    def tzinfo(self) -> ZoneInfo:
        """划分自然日使用的时区

        Raises:
            ValueError: 时区名称无效
        """
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {self.timezone}") from e

    @property
    def storage_path(self) -> Path:
        return Path(self.storage.path).expanduser()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MonitorConfig":
        """从字典创建配置（YAML 结构），缺失字段使用默认值"""
        config = cls()

        if "api" in data:
            a = data["api"] or {}
            config.api.environment = a.get("environment", config.api.environment)
            config.api.timeout = int(a.get("timeout", config.api.timeout))
            config.api.rate_limit = float(a.get("rate_limit", config.api.rate_limit))

        if "polling" in data:
            p = data["polling"] or {}
            config.polling.interval_seconds = int(
                p.get("interval_seconds", config.polling.interval_seconds)
            )
            config.polling.fresh_data_minutes = float(
                p.get("fresh_data_minutes", config.polling.fresh_data_minutes)
            )

        if "alerts" in data:
            al = data["alerts"] or {}
            if "daily_loss_threshold" in al:
                config.alerts.daily_loss = _optional_float(al["daily_loss_threshold"])
            if "daily_gain_threshold" in al:
                config.alerts.daily_gain = _optional_float(al["daily_gain_threshold"])

        if "trend" in data:
            t = data["trend"] or {}
            config.trend.days = int(t.get("days", config.trend.days))
            config.trend.downtrend_threshold = float(
                t.get("downtrend_threshold", config.trend.downtrend_threshold)
            )
            config.trend.uptrend_threshold = float(
                t.get("uptrend_threshold", config.trend.uptrend_threshold)
            )
            config.trend.alert_uptrends = bool(
                t.get("alert_uptrends", config.trend.alert_uptrends)
            )

        if "storage" in data:
            s = data["storage"] or {}
            config.storage.path = str(s.get("path", config.storage.path))
            config.storage.retention_days = int(
                s.get("retention_days", config.storage.retention_days)
            )
            config.storage.metadata_ttl_hours = float(
                s.get("metadata_ttl_hours", config.storage.metadata_ttl_hours)
            )

        if "notification" in data:
            n = data["notification"] or {}
            config.notification.channel = n.get("channel", config.notification.channel)
            config.notification.enabled = bool(n.get("enabled", config.notification.enabled))

        if "fx" in data:
            f = data["fx"] or {}
            config.fx.enabled = bool(f.get("enabled", config.fx.enabled))
            config.fx.base_currency = f.get("base_currency", config.fx.base_currency)
            config.fx.timeout = float(f.get("timeout", config.fx.timeout))

        config.timezone = data.get("timezone", config.timezone)
        return config

    @classmethod
    def from_yaml(cls, path: str | Path) -> "MonitorConfig":
        """从 YAML 文件加载"""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def apply_env(self) -> "MonitorConfig":
        """应用环境变量覆盖（原地修改并返回自身）"""
        load_dotenv()

        self.api.api_key = os.getenv("TRADING212_API_KEY", self.api.api_key)
        self.api.api_secret = os.getenv("TRADING212_API_SECRET", self.api.api_secret)
        self.api.environment = os.getenv("TRADING212_ENVIRONMENT", self.api.environment)

        self.polling.interval_seconds = _env_int(
            "MONITOR_POLLING_INTERVAL", self.polling.interval_seconds
        )
        self.alerts.daily_loss = _env_threshold(
            "MONITOR_DAILY_LOSS_THRESHOLD", self.alerts.daily_loss
        )
        self.alerts.daily_gain = _env_threshold(
            "MONITOR_DAILY_GAIN_THRESHOLD", self.alerts.daily_gain
        )
        self.trend.downtrend_threshold = _env_float(
            "MONITOR_DOWNTREND_THRESHOLD", self.trend.downtrend_threshold
        )
        self.storage.path = os.getenv("MONITOR_STORAGE_PATH", self.storage.path)
        self.timezone = os.getenv("MONITOR_TIMEZONE", self.timezone)
        return self

    @classmethod
    def load(cls, path: str | Path | None = None) -> "MonitorConfig":
        """加载配置

        Args:
            path: YAML 文件路径，默认 config/monitor/settings.yaml（不存在时使用默认值）
        """
        config_file = Path(path) if path else DEFAULT_CONFIG_FILE
        if config_file.exists():
            config = cls.from_yaml(config_file)
        else:
            if path:
                logger.warning(f"Config file not found: {config_file}, using defaults")
            config = cls()
        return config.apply_env()

    def to_dict(self) -> dict[str, Any]:
        """转换为字典（不包含凭证）"""
        return {
            "api": {
                "environment": self.api.environment,
                "timeout": self.api.timeout,
                "rate_limit": self.api.rate_limit,
                "credentials_set": bool(self.api.api_key and self.api.api_secret),
            },
            "polling": {
                "interval_seconds": self.polling.interval_seconds,
                "fresh_data_minutes": self.polling.fresh_data_minutes,
            },
            "alerts": {
                "daily_loss_threshold": self.alerts.daily_loss,
                "daily_gain_threshold": self.alerts.daily_gain,
            },
            "trend": {
                "days": self.trend.days,
                "downtrend_threshold": self.trend.downtrend_threshold,
                "uptrend_threshold": self.trend.uptrend_threshold,
                "alert_uptrends": self.trend.alert_uptrends,
            },
            "storage": {
                "path": self.storage.path,
                "retention_days": self.storage.retention_days,
                "metadata_ttl_hours": self.storage.metadata_ttl_hours,
            },
            "notification": {
                "channel": self.notification.channel,
                "enabled": self.notification.enabled,
            },
            "fx": {
                "enabled": self.fx.enabled,
                "base_currency": self.fx.base_currency,
                "timeout": self.fx.timeout,
            },
            "timezone": self.timezone,
        }
