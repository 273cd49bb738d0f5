"""
Business Layer - 业务模块层

Trading 212 持仓监控的业务逻辑层，包含：
- alerts: 预警判断与按日去重
- monitoring: 刷新周期与定时轮询
- notification: 通知渠道
- config: 配置管理
- cli: 命令行工具
"""
