"""Alerting — threshold ladder, report scheduler, and fault monitor."""

from src.alerting.fault_monitor import FaultMonitor
from src.alerting.ladder import LadderState, ThresholdLadder
from src.alerting.scheduler import ReportScheduler, ReportWindowState

__all__ = [
    "FaultMonitor",
    "LadderState",
    "ReportScheduler",
    "ReportWindowState",
    "ThresholdLadder",
]
