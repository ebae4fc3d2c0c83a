"""
Base classes for plot visualization.
"""

import pandas as pd
import logging
from typing import Dict, List

from rpc_bench.common.endpoints import display_name

logger = logging.getLogger(__name__)


def history_to_frame(history: Dict[str, List[float]], value_col: str = 'latency_ms') -> pd.DataFrame:
    """Flatten an endpoint -> values mapping into a long DataFrame (endpoint, test, value)."""
    rows = []
    for endpoint, values in history.items():
        for i, value in enumerate(values):
            rows.append({'endpoint': endpoint, 'test': i + 1, value_col: value})
    return pd.DataFrame(rows, columns=['endpoint', 'test', value_col])


class BasePlotter:
    """Base class for all plotters with common functionality."""

    def __init__(self, data: pd.DataFrame, output_dir: str):
        self.data = data
        self.output_dir = output_dir

    def has_data(self) -> bool:
        return self.data is not None and len(self.data) > 0

    def get_unique_endpoints(self):
        """Get endpoints in first-seen order."""
        if not self.has_data():
            return []
        return list(self.data['endpoint'].unique())

    def get_endpoint_colors(self):
        """Generate an evenly spaced hue per endpoint."""
        import seaborn as sns
        endpoints = self.get_unique_endpoints()
        palette = sns.color_palette("husl", len(endpoints))
        return dict(zip(endpoints, palette))

    @staticmethod
    def label(endpoint: str) -> str:
        return display_name(endpoint)
