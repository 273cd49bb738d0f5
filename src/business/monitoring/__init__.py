"""
Portfolio Monitoring - 持仓监控

- PortfolioMonitor: 刷新周期（拉取、快照、日涨跌、趋势、预警）
- PollingScheduler: 定时轮询与手动刷新
"""

from src.business.monitoring.portfolio_monitor import PortfolioMonitor, RefreshResult
from src.business.monitoring.scheduler import PollingScheduler

__all__ = ["PollingScheduler", "PortfolioMonitor", "RefreshResult"]
