"""
Results table and summary report.
"""

import os
import logging
from datetime import datetime
from typing import Iterable, List

import pandas as pd

from rpc_bench.common.endpoints import display_name
from rpc_bench.persistence.health import EndpointHealth
from rpc_bench.persistence.record import AggregateResult

logger = logging.getLogger(__name__)


def results_table(results: List[AggregateResult]) -> pd.DataFrame:
    """Build the ranked results table.

    The first row gets the ``Fastest`` badge when it has no error. Errored
    endpoints show ``-`` instead of statistics.
    """
    rows = []
    for index, result in enumerate(results):
        rows.append({
            'endpoint': display_name(result.endpoint),
            'badge': 'Fastest' if index == 0 and not result.error else '',
            'avg_ms': '-' if result.error else f"{result.average:.2f}",
            'p50_ms': '-' if result.error else f"{result.p50:.2f}",
            'p90_ms': '-' if result.error else f"{result.p90:.2f}",
            'status': 'Error' if result.error else 'Online',
        })
    return pd.DataFrame(rows, columns=['endpoint', 'badge', 'avg_ms', 'p50_ms', 'p90_ms', 'status'])


def health_table(records: Iterable[EndpointHealth]) -> pd.DataFrame:
    """Build the health overview table, best score first."""
    rows = []
    for record in records:
        rows.append({
            'endpoint': display_name(record.endpoint),
            'health_score': record.health_score,
            'uptime_pct': round(record.uptime, 1),
            'reliability_pct': round(record.reliability, 1),
            'avg_latency_ms': round(record.avg_latency, 2),
            'ok': record.response_success,
            'failed': record.response_failure,
            'last_error': record.errors[-1].message if record.errors else '',
        })
    df = pd.DataFrame(rows, columns=[
        'endpoint', 'health_score', 'uptime_pct', 'reliability_pct',
        'avg_latency_ms', 'ok', 'failed', 'last_error',
    ])
    return df.sort_values('health_score', ascending=False, kind='stable').reset_index(drop=True)

class DashboardPlotter:
    """Writes the plain-text reports of test runs and health sweeps."""

    def __init__(self, output_dir: str):
        self.output_dir = output_dir

    def create_summary_report(self, results: List[AggregateResult], test_type: str, network: str):
        """Create a summary report."""
        if not results:
            logger.warning("No results available for summary report")
            return None

        try:
            working = [r for r in results if not r.error]
            fastest = working[0] if working else None
            fastest_text = f"{display_name(fastest.endpoint)} ({fastest.average:.2f} ms)" if fastest else "-"

            summary = f"""
RPC Speed Test Summary Report
=============================

Generated: {datetime.now().isoformat(timespec='seconds')}
Network: {network}
Test Type: {test_type}
Endpoints Tested: {len(results)}
Endpoints Online: {len(working)}
Fastest: {fastest_text}

Results:
{results_table(results).to_string(index=False)}
"""
            return self._write('summary_report.txt', summary)

        except Exception as e:
            logger.error(f"Failed to create summary report: {e}")
            return None

    def create_health_report(self, records: Iterable[EndpointHealth], network: str):
        """Create a health report from the accumulated sweep state."""
        records = list(records)
        if not records:
            logger.warning("No health records available for health report")
            return None

        try:
            checked = [r for r in records if r.total_checks]
            summary = f"""
RPC Health Report
=================

Generated: {datetime.now().isoformat(timespec='seconds')}
Network: {network}
Endpoints Checked: {len(checked)}
Total Checks: {sum(r.total_checks for r in records)}
Total Failures: {sum(r.response_failure for r in records)}

Health:
{health_table(records).to_string(index=False)}
"""
            return self._write('health_report.txt', summary)

        except Exception as e:
            logger.error(f"Failed to create health report: {e}")
            return None

    def _write(self, filename: str, content: str) -> str:
        output_file = os.path.join(self.output_dir, filename)
        with open(output_file, 'w') as f:
            f.write(content)

        logger.info(f"Created {filename}: {output_file}")
        return output_file
