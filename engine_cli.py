"""
engine_cli.py - Command Line Runner for the Coherence Engine

Runs oscillator scenarios, queen-worker hives and metrics snapshots from the
terminal. Every command takes --output rich|json; json output is a single
document on stdout. Exit code 2 on a StopRule.
"""

import json
import sys
from dataclasses import replace
from typing import Optional

import click
import numpy as np
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import golden_constraints
from receipts import StopRule
from coherence import (
    SCENARIOS,
    BiofieldState,
    HeartState,
    build_metrics_snapshot,
    create_queen_system,
    create_test_graph,
    emit_metrics_receipt,
    get_coherence_trend,
    get_desynced_workers,
    is_hive_synchronized,
    run_scenario,
    sync_cycle,
)

console = Console()


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    console.print(f"[red]✗[/red] {message}")


def _fail(output: str, message: str) -> None:
    if output == "json":
        click.echo(json.dumps({"error": message}))
    else:
        print_error(message)
    sys.exit(2)


@click.group()
def cli():
    """Coherence engine runner."""
    pass


# --- scenario ---

@cli.command("scenario")
@click.argument("name", type=click.Choice(sorted(SCENARIOS)))
@click.option("--seed", type=int, default=None, help="Override the scenario seed")
@click.option("--duration", type=float, default=None, help="Override simulated time")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def scenario_cmd(name: str, seed: Optional[int], duration: Optional[float], output: str) -> None:
    """Run a Kuramoto scenario preset."""
    config = SCENARIOS[name]
    if seed is not None:
        config = replace(config, random_seed=seed)
    if duration is not None:
        config = replace(config, duration=duration)

    try:
        run = run_scenario(config)
    except StopRule as e:
        _fail(output, str(e))
        return

    if output == "json":
        click.echo(json.dumps({
            "scenario": config.scenario_name,
            "samples": [s.coherence for s in run.samples],
            "receipt": run.receipt,
        }, indent=2))
        return

    table = Table(title=f"Scenario {config.scenario_name}")
    table.add_column("sample", justify="right")
    table.add_column("coherence r", justify="right")
    table.add_column("mean phase", justify="right")
    for i, sample in enumerate(run.samples):
        table.add_row(str(i), f"{sample.coherence:.4f}", f"{sample.mean_phase:.4f}")
    console.print(table)

    receipt = run.receipt
    console.print(Panel(
        f"oscillators:     {receipt['n_oscillators']}\n"
        f"coupling K:      {receipt['coupling_strength']}\n"
        f"steps:           {receipt['steps']}\n"
        f"final coherence: {receipt['final_coherence']:.4f}\n"
        f"samples_root:    {receipt['samples_root'][:16]}...",
        title="[bold]kuramoto_simulation[/bold]",
        border_style="green",
    ))


# --- hive ---

@cli.command("hive")
@click.option("--workers", "-w", type=int, default=5, help="Number of workers")
@click.option("--cycles", "-c", type=int, default=20, help="Sync cycles to run")
@click.option("--coupling", type=float, default=None, help="Override worker coupling")
@click.option("--seed", type=int, default=42)
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def hive_cmd(workers: int, cycles: int, coupling: Optional[float], seed: int, output: str) -> None:
    """Run queen-worker sync cycles from random worker phases."""
    rng = np.random.default_rng(seed)
    queen = create_queen_system([f"worker-{i}" for i in range(workers)], rng=rng, now=0.0)

    trace = [queen.coherence]
    for i in range(cycles):
        result = sync_cycle(queen, coupling, now=float(i + 1))
        queen = result.queen
        trace.append(result.coherence)

    summary = {
        "workers": workers,
        "cycles": cycles,
        "coherence": trace,
        "synchronized": is_hive_synchronized(queen),
        "desynced_count": len(get_desynced_workers(queen)),
        "trend": get_coherence_trend(queen).value,
    }

    if output == "json":
        click.echo(json.dumps(summary, indent=2))
        return

    table = Table(title="Hive coherence")
    table.add_column("cycle", justify="right")
    table.add_column("coherence", justify="right")
    for i, value in enumerate(trace):
        table.add_row(str(i), f"{value:.4f}")
    console.print(table)
    if summary["synchronized"]:
        print_success(f"Hive synchronized, trend {summary['trend']}")
    else:
        print_error(f"{summary['desynced_count']} worker(s) out of phase, trend {summary['trend']}")


# --- snapshot ---

@cli.command("snapshot")
@click.option("--biofield", "-b", type=click.Choice([s.value for s in BiofieldState]), default=None)
@click.option("--heart", "-h", type=click.Choice([s.value for s in HeartState]), default=None)
@click.option("--lambda", "lambda_", type=float, default=0.5, help="Profile lambda in [0, 1]")
@click.option("--target-phi", type=float, default=3.0, help="Size hint for the reference graph")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def snapshot_cmd(biofield: Optional[str], heart: Optional[str], lambda_: float, target_phi: float, output: str) -> None:
    """Metrics snapshot over the reference phi graph."""
    snapshot = build_metrics_snapshot(create_test_graph(target_phi), biofield, heart, lambda_)
    receipt = emit_metrics_receipt(snapshot)

    if output == "json":
        click.echo(json.dumps(receipt, indent=2))
        return

    console.print(Panel(
        f"phi:                   {snapshot.phi:.4f} ({snapshot.phi_level.value})\n"
        f"coherence:             {snapshot.coherence_percent:.1f}%"
        f"{' (optimal band)' if snapshot.in_optimal_band else ''}\n"
        f"chiral status:         {snapshot.chiral_status.value}\n"
        f"emergence:             {snapshot.raw['emergence']:.4f}\n"
        f"verification eligible: {snapshot.verification_eligible}",
        title="[bold]Metrics snapshot[/bold]",
        border_style="cyan",
    ))


# --- identities ---

@cli.command("identities")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def identities_cmd(output: str) -> None:
    """Check the golden-ratio identities. Exit 2 if any fails."""
    results = golden_constraints.verify_golden_identities()
    failed = [name for name, ok in results.items() if not ok]

    if output == "json":
        click.echo(json.dumps({"results": results, "failed": failed}, indent=2))
    else:
        for name, ok in results.items():
            if ok:
                print_success(name)
            else:
                print_error(name)

    if failed:
        sys.exit(2)


if __name__ == "__main__":
    cli()
