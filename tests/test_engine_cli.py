"""
tests/test_engine_cli.py - Tests for engine_cli.py

Commands are invoked through click's CliRunner with -o json so the output
can be parsed.
"""

import json

import pytest


class TestScenarioCommand:

    def test_near_sync_json(self):
        """scenario NEAR_SYNC exits 0 and returns the receipt."""
        from click.testing import CliRunner
        from engine_cli import cli

        runner = CliRunner()
        result = runner.invoke(cli, ["scenario", "NEAR_SYNC", "-o", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["scenario"] == "NEAR_SYNC"
        assert data["receipt"]["receipt_type"] == "kuramoto_simulation"
        assert len(data["samples"]) == data["receipt"]["n_samples"]

    def test_unknown_scenario_rejected(self):
        from click.testing import CliRunner
        from engine_cli import cli

        result = CliRunner().invoke(cli, ["scenario", "NOPE"])
        assert result.exit_code != 0

    def test_rich_output(self):
        from click.testing import CliRunner
        from engine_cli import cli

        result = CliRunner().invoke(cli, ["scenario", "NEAR_SYNC", "--duration", "0.2"])
        assert result.exit_code == 0


class TestHiveCommand:

    def test_hive_json(self):
        from click.testing import CliRunner
        from engine_cli import cli

        result = CliRunner().invoke(cli, ["hive", "-w", "4", "-c", "30", "-o", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert len(data["coherence"]) == 31
        assert data["trend"] in ("improving", "stable", "degrading")
        for value in data["coherence"]:
            assert 0.0 <= value <= 1.0

    def test_zero_cycles_reports_initial_state(self):
        """With no cycles the summary describes the freshly built hive."""
        from click.testing import CliRunner
        import numpy as np
        from engine_cli import cli
        from coherence import create_queen_system, get_desynced_workers, is_hive_synchronized

        result = CliRunner().invoke(cli, ["hive", "-w", "6", "-c", "0", "--seed", "7", "-o", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)

        queen = create_queen_system([f"worker-{i}" for i in range(6)], rng=np.random.default_rng(7), now=0.0)
        assert data["coherence"] == [queen.coherence]
        assert data["desynced_count"] == len(get_desynced_workers(queen))
        assert data["synchronized"] == is_hive_synchronized(queen)


class TestSnapshotCommand:

    def test_snapshot_json(self):
        from click.testing import CliRunner
        from engine_cli import cli

        result = CliRunner().invoke(cli, ["snapshot", "-b", "focused", "-h", "observing", "-o", "json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["receipt_type"] == "metrics_snapshot"
        assert data["coherence_percent"] == pytest.approx(92.0)

    def test_invalid_biofield(self):
        from click.testing import CliRunner
        from engine_cli import cli

        result = CliRunner().invoke(cli, ["snapshot", "-b", "sleepy"])
        assert result.exit_code != 0


class TestIdentitiesCommand:

    def test_identities_pass(self):
        from click.testing import CliRunner
        from engine_cli import cli

        result = CliRunner().invoke(cli, ["identities", "-o", "json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["failed"] == []
