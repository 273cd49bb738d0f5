"""
CLI Context - 命令行公共工具

日志初始化、配置加载与监控器组装，供各子命令共用。
"""

import logging
from typing import Optional

from src.business.config.monitor_config import MonitorConfig
from src.business.monitoring.portfolio_monitor import PortfolioMonitor
from src.data.store import SnapshotStore, StateFile

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool, default_level: int = logging.INFO) -> None:
    """配置日志，--verbose 时为 DEBUG"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else default_level,
        format=LOG_FORMAT,
    )


def load_config(config_path: Optional[str] = None) -> MonitorConfig:
    """加载配置（YAML + 环境变量）"""
    return MonitorConfig.load(config_path)


def build_monitor(config: MonitorConfig) -> PortfolioMonitor:
    """组装监控器

    Raises:
        ValueError: 凭证缺失或配置非法
    """
    return PortfolioMonitor.from_config(config)


def open_store(config: MonitorConfig) -> SnapshotStore:
    """只读打开快照存储（无需 API 凭证）"""
    return SnapshotStore(
        StateFile(config.storage_path),
        retention_days=config.storage.retention_days,
        tz=config.tzinfo,
    )
