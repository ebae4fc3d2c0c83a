"""
Tests for the command line interface.
"""

import io
import tempfile
import unittest
import sys
import os
from contextlib import redirect_stdout
from unittest.mock import patch

import matplotlib
matplotlib.use("Agg")

# Add the parent directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rpc_bench.cli import RpcSpeedTestCLI
from rpc_bench.configuration import NUM_ROUNDS, DEFAULT_TEST_TYPE


class FakeSuiSystem:
    """Answers every request instantly without touching the network."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    def health_request(self):
        return "sui_getLatestCheckpointSequenceNumber"

    async def probe(self, endpoint, request):
        return 5.0


class TestCLI(unittest.TestCase):
    """Test argument parsing and command dispatch."""

    def setUp(self):
        self.cli = RpcSpeedTestCLI()

    def test_test_defaults(self):
        args = self.cli.parser.parse_args(['test'])
        self.assertEqual(args.command, 'test')
        self.assertEqual(args.test_type, DEFAULT_TEST_TYPE)
        self.assertEqual(args.rounds, NUM_ROUNDS)
        self.assertEqual(args.repeat, 1)
        self.assertEqual(args.metrics_port, 0)
        self.assertIsNone(args.plots_dir)

    def test_test_options(self):
        args = self.cli.parser.parse_args([
            'test', '--network', 'testnet', '--test-type', 'queryTransactionBlocks',
            '--rounds', '5', '--repeat', '3', '--interval', '10',
            '--only', 'https://a', 'https://b',
        ])
        self.assertEqual(args.network, 'testnet')
        self.assertEqual(args.test_type, 'queryTransactionBlocks')
        self.assertEqual(args.rounds, 5)
        self.assertEqual(args.repeat, 3)
        self.assertEqual(args.interval, 10.0)
        self.assertEqual(args.only, ['https://a', 'https://b'])

    def test_invalid_test_type(self):
        with self.assertRaises(SystemExit):
            with redirect_stdout(io.StringIO()):
                self.cli.parser.parse_args(['test', '--test-type', 'getBalance'])

    def test_no_command(self):
        with redirect_stdout(io.StringIO()):
            self.assertEqual(self.cli.run([]), 1)

    def test_endpoints_command(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(self.cli.run(['endpoints', '--network', 'devnet']), 0)
        self.assertIn("https://fullnode.devnet.sui.io:443", out.getvalue())
        self.assertIn("multiGetObjects", out.getvalue())

    def test_no_enabled_endpoint(self):
        """Selecting only unknown endpoints leaves nothing to test."""
        self.assertEqual(self.cli.run(['test', '--only', 'https://nope.invalid']), 1)

    def test_no_enabled_endpoint_for_health(self):
        self.assertEqual(self.cli.run(['health', '--only', 'https://nope.invalid']), 1)

    def test_health_writes_reports(self):
        with tempfile.TemporaryDirectory() as tmp:
            with patch("rpc_bench.cli.SuiSystem", FakeSuiSystem), redirect_stdout(io.StringIO()):
                code = self.cli.run(['health', '--network', 'devnet', '--plots-dir', tmp])

            self.assertEqual(code, 0)
            self.assertTrue(os.path.exists(os.path.join(tmp, 'health_report.txt')))
            self.assertTrue(os.path.exists(os.path.join(tmp, 'health_history.png')))


if __name__ == '__main__':
    unittest.main()
