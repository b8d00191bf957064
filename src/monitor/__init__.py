"""Monitoring subsystem — SMS dispatch, message templates, and the control loop."""

from src.monitor.dispatcher import NotificationDispatcher
from src.monitor.factory import create_dispatcher, create_driver, create_monitor_stack
from src.monitor.loop import MonitorLoop
from src.monitor.messages import SUPPORTED_LOCALES, format_alert

__all__ = [
    "MonitorLoop",
    "NotificationDispatcher",
    "SUPPORTED_LOCALES",
    "create_dispatcher",
    "create_driver",
    "create_monitor_stack",
    "format_alert",
]
