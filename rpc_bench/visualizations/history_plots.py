"""
Trend plots for latency and health history.
"""

import os
import logging

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from rpc_bench.configuration import HISTORY_CAPACITY
from .base import BasePlotter

logger = logging.getLogger(__name__)


class HistoryPlotter(BasePlotter):
    """Line charts of rolling per-endpoint history.

    ``data`` is the long DataFrame produced by ``history_to_frame``.
    """

    def __init__(self, data, output_dir, value_col: str = 'latency_ms'):
        super().__init__(data, output_dir)
        self.value_col = value_col

    def _create_line_chart(self, title: str, ylabel: str, filename: str, ylim=None):
        if not self.has_data():
            logger.warning(f"No data available for {filename}")
            return None

        try:
            sns.set_theme(style="darkgrid")
            colors = self.get_endpoint_colors()

            fig, ax = plt.subplots(figsize=(12, 6))
            for endpoint in self.get_unique_endpoints():
                series = self.data[self.data['endpoint'] == endpoint]
                ax.plot(
                    series['test'],
                    series[self.value_col],
                    marker='o',
                    linewidth=2,
                    label=self.label(endpoint),
                    color=colors[endpoint],
                )

            ticks = np.arange(1, HISTORY_CAPACITY + 1)
            ax.set_xticks(ticks)
            ax.set_xticklabels([f"Test {i}" for i in ticks])
            ax.set_title(title, fontsize=14, fontweight='bold')
            ax.set_ylabel(ylabel)
            if ylim is not None:
                ax.set_ylim(*ylim)
            else:
                ax.set_ylim(bottom=0)
            ax.legend(loc='upper left', bbox_to_anchor=(1.01, 1), fontsize=8)

            plt.tight_layout()

            output_file = os.path.join(self.output_dir, filename)
            plt.savefig(output_file, dpi=150, bbox_inches='tight')
            plt.close(fig)

            logger.info(f"Created {title}: {output_file}")
            return output_file

        except Exception as e:
            logger.error(f"Failed to create {filename}: {e}")
            plt.close('all')
            return None

    def create_latency_history(self):
        """Create the per-endpoint average latency trend chart."""
        return self._create_line_chart(
            'RPC Latency History (ms)', 'Average latency (ms)', 'latency_history.png'
        )

    def create_health_history(self):
        """Create the per-endpoint health score trend chart."""
        return self._create_line_chart(
            'RPC Health Score History', 'Health score', 'health_history.png', ylim=(0, 105)
        )
