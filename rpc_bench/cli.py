import os
import sys
import logging
import argparse

# Required: Use uvloop for better performance
import uvloop

from rpc_bench.configuration import (
    RPC_NETWORK,
    RPC_ENDPOINTS,
    NUM_ROUNDS,
    DEFAULT_TEST_TYPE,
    AUTO_REPEAT_SECONDS,
    HEALTH_CHECK_INTERVAL_SECONDS,
    DEFAULT_PLOTS_DIR,
    METRICS_PORT,
)
from rpc_bench.algorithms.auto_repeat import AutoRepeat
from rpc_bench.algorithms.health_check import HealthCheck
from rpc_bench.algorithms.latency_test import LatencyTestOrchestrator
from rpc_bench.common.endpoints import EndpointSet
from rpc_bench.common.errors import RpcBenchError
from rpc_bench.common.notifications import LoggingNotifier
from rpc_bench.persistence.health import HealthStore
from rpc_bench.persistence.history import HistoryStore
from rpc_bench.persistence.prom import SimplePrometheusExporter
from rpc_bench.systems.sui import SuiSystem, TEST_TYPE_INFO
from rpc_bench.visualizations.base import history_to_frame
from rpc_bench.visualizations.dashboard import DashboardPlotter, results_table, health_table
from rpc_bench.visualizations.history_plots import HistoryPlotter

logger = logging.getLogger(__name__)


class RpcSpeedTestCLI:
    """Simple CLI interface for the RPC speed test."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description='Sui RPC speed test',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # List the known mainnet endpoints
  rpc-bench endpoints --network mainnet

  # Rank all mainnet endpoints with the multi-object workload (11 rounds, first discarded)
  rpc-bench test --test-type multiGetObjects

  # Re-run the transaction query test 5 times, one minute apart, and plot the trend
  rpc-bench test --test-type queryTransactionBlocks --repeat 5 --interval 60 --plots-dir plots

  # Health-check two endpoints 10 times, exporting Prometheus metrics on :9100
  rpc-bench health --only https://fullnode.mainnet.sui.io:443 https://mainnet.suiet.app --sweeps 10 --metrics-port 9100
            """
        )

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Endpoints command
        endpoints_parser = subparsers.add_parser('endpoints', help='List known RPC endpoints')
        endpoints_parser.add_argument('--network', choices=list(RPC_ENDPOINTS), default=RPC_NETWORK,
                                      help=f'Network to list (default: {RPC_NETWORK})')

        # Test command
        test_parser = subparsers.add_parser('test', help='Measure and rank endpoint latency')
        self._add_endpoint_arguments(test_parser)
        test_parser.add_argument('--test-type', choices=list(TEST_TYPE_INFO), default=DEFAULT_TEST_TYPE,
                                 help=f'Workload to benchmark (default: {DEFAULT_TEST_TYPE})')
        test_parser.add_argument('--rounds', type=int, default=NUM_ROUNDS,
                                 help=f'Rounds per test, the first is discarded (default: {NUM_ROUNDS})')
        test_parser.add_argument('--repeat', type=int, default=1,
                                 help='Number of test runs (default: 1)')
        test_parser.add_argument('--interval', type=float, default=AUTO_REPEAT_SECONDS,
                                 help=f'Seconds between repeated runs (default: {AUTO_REPEAT_SECONDS})')

        # Health command
        health_parser = subparsers.add_parser('health', help='Track endpoint health')
        self._add_endpoint_arguments(health_parser)
        health_parser.add_argument('--sweeps', type=int, default=1,
                                   help='Number of health sweeps (default: 1)')
        health_parser.add_argument('--interval', type=float, default=HEALTH_CHECK_INTERVAL_SECONDS,
                                   help=f'Seconds between sweeps (default: {HEALTH_CHECK_INTERVAL_SECONDS})')

        return parser

    @staticmethod
    def _add_endpoint_arguments(parser):
        parser.add_argument('--network', choices=list(RPC_ENDPOINTS), default=RPC_NETWORK,
                            help=f'Network to test (default: {RPC_NETWORK})')
        parser.add_argument('--only', nargs='+', metavar='URL',
                            help='Test only these endpoints')
        parser.add_argument('--exclude', nargs='+', metavar='URL',
                            help='Skip these endpoints')
        parser.add_argument('--plots-dir', type=str, default=None,
                            help=f'Write trend plots and a summary here (e.g. {DEFAULT_PLOTS_DIR})')
        parser.add_argument('--metrics-port', type=int, default=0,
                            help=f'Expose Prometheus metrics on this port, e.g. {METRICS_PORT} (default: 0, disabled)')

    def _endpoint_set(self, args) -> EndpointSet:
        endpoint_set = EndpointSet.for_network(args.network)
        if args.only:
            endpoint_set.only(args.only)
        if args.exclude:
            endpoint_set.exclude(args.exclude)
        return endpoint_set

    def _exporter(self, args):
        if not args.metrics_port:
            return None
        exporter = SimplePrometheusExporter(port=args.metrics_port)
        exporter.start_server()
        return exporter

    def run_endpoints(self, args):
        """List the endpoint directory of a network."""
        endpoint_set = EndpointSet.for_network(args.network)
        print(f"{args.network} endpoints:")
        for url in endpoint_set.urls():
            print(f"  {url}")
        print("\nTest types:")
        for test_type, info in TEST_TYPE_INFO.items():
            print(f"  {test_type}: {info['title']} - {info['details']}")
        return 0

    async def run_test(self, args):
        """Run one or more latency tests."""
        logger.info("=== RPC Latency Test ===")

        endpoint_set = self._endpoint_set(args)
        endpoints = endpoint_set.enabled_urls()
        exporter = self._exporter(args)
        history = HistoryStore()

        logger.info(f"Test type: {TEST_TYPE_INFO[args.test_type]['title']}")

        def on_progress(progress):
            logger.info(f"Testing RPC endpoints... {round(progress)}%")

        async with SuiSystem() as system:
            orchestrator = LatencyTestOrchestrator(system, history, LoggingNotifier(), exporter)

            async def job():
                await orchestrator.run_test(endpoints, args.test_type, args.rounds, on_progress)

            if args.repeat > 1:
                repeater = AutoRepeat(
                    job,
                    interval_seconds=args.interval,
                    max_runs=args.repeat,
                    is_busy=lambda: orchestrator.is_running,
                    name="auto-repeat test",
                )
                await repeater.run()
            else:
                await job()

        if not orchestrator.results:
            logger.error("No test run completed")
            return 1

        print("\n=== Results ===")
        print(results_table(orchestrator.results).to_string(index=False))

        if args.plots_dir:
            os.makedirs(args.plots_dir, exist_ok=True)
            plotter = HistoryPlotter(history_to_frame(history.as_dict()), args.plots_dir)
            plotter.create_latency_history()
            DashboardPlotter(args.plots_dir).create_summary_report(
                orchestrator.results, args.test_type, args.network
            )
        return 0

    async def run_health(self, args):
        """Run one or more health sweeps."""
        logger.info("=== RPC Health Check ===")

        endpoint_set = self._endpoint_set(args)
        endpoints = endpoint_set.enabled_urls()
        exporter = self._exporter(args)
        store = HealthStore(endpoints)

        async with SuiSystem() as system:
            health_check = HealthCheck(system, store, LoggingNotifier(), exporter)

            async def job():
                await health_check.sweep(endpoints)

            if args.sweeps > 1:
                repeater = AutoRepeat(
                    job,
                    interval_seconds=args.interval,
                    max_runs=args.sweeps,
                    is_busy=lambda: health_check.is_checking,
                    name="health sweeps",
                )
                await repeater.run()
            else:
                await job()

        print("\n=== Health ===")
        print(health_table(store.all()).to_string(index=False))

        if args.plots_dir:
            os.makedirs(args.plots_dir, exist_ok=True)
            frame = history_to_frame(
                {record.endpoint: list(record.health_history) for record in store.all()},
                value_col='health_score',
            )
            HistoryPlotter(frame, args.plots_dir, value_col='health_score').create_health_history()
            DashboardPlotter(args.plots_dir).create_health_report(store.all(), args.network)
        return 0

    def run(self, args=None):
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            if parsed_args.command == 'endpoints':
                return self.run_endpoints(parsed_args)
            elif parsed_args.command == 'test':
                return uvloop.run(self.run_test(parsed_args))
            elif parsed_args.command == 'health':
                return uvloop.run(self.run_health(parsed_args))
            else:
                logger.error(f"Unknown command: {parsed_args.command}")
                return 1

        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1
        except RpcBenchError as e:
            logger.error(f"{type(e).__name__}: {e}")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            return 1


def main():
    """Main entry point."""
    # Set up logging (only if not already configured)
    if not logging.root.handlers:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    cli = RpcSpeedTestCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
