"""
Plot and report modules for speed test results.
"""

from .base import BasePlotter
from .history_plots import HistoryPlotter
from .dashboard import DashboardPlotter

__all__ = ['BasePlotter', 'HistoryPlotter', 'DashboardPlotter']
