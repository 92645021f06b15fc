"""Models package initialization"""
from .fetch_result import FetchResult
from .monitoring_record import MonitoringRecord

__all__ = ['FetchResult', 'MonitoringRecord']
