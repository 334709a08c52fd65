"""
coherence/kuramoto.py - Mean-Field Kuramoto Oscillator Engine

dtheta_i/dt = omega_i + K * r * sin(psi - theta_i) * c_i + eta(t)

(r, psi) is the order parameter of the whole population at the start of the
step, so one step costs O(N) instead of the pairwise O(N^2) sum.
Integration is classic RK4 over numpy arrays; the arrays never escape, each
step hands back a new OscillatorSystem.
"""

import math
from dataclasses import replace
from typing import Callable, Optional, Sequence

import numpy as np

from receipts import StopRule, emit_receipt, merkle

from .constants import (
    COHERENCE_SAMPLE_INTERVAL,
    COUPLING_FLOOR,
    DEFAULT_NOISE_AMPLITUDE,
    DEFAULT_NOISE_FREQUENCIES,
    DEFAULT_SYNC_THRESHOLD,
    FREQUENCY_SPREAD,
    TWO_PI,
)
from .golden import clamp, normalize_angle, phase_difference
from .types_config import KuramotoConfig
from .types_result import KuramotoRun
from .types_state import CoherenceResult, Oscillator, OrderParameter, OscillatorSystem


# =============================================================================
# CONSTRUCTORS
# =============================================================================

def create_oscillator(
    osc_id: str,
    natural_frequency: Optional[float] = None,
    initial_phase: Optional[float] = None,
    coupling_modifier: float = 1.0,
    rng: Optional[np.random.Generator] = None,
) -> Oscillator:
    """
    Create one oscillator.

    Missing phase and frequency are drawn from rng: phase uniform on
    [0, 2pi), frequency uniform on 1.0 +/- 0.1. Pass a seeded generator for
    reproducible populations.

    Args:
        osc_id: Oscillator identifier
        natural_frequency: omega, drawn when None
        initial_phase: theta, drawn when None
        coupling_modifier: Per-oscillator multiplier on the coupling term
        rng: Random generator used for the defaults

    Returns:
        Oscillator with phase normalized into [0, 2pi)
    """
    if rng is None and (initial_phase is None or natural_frequency is None):
        rng = np.random.default_rng()
    if initial_phase is None:
        initial_phase = rng.random() * TWO_PI
    if natural_frequency is None:
        natural_frequency = 1.0 + (rng.random() - 0.5) * FREQUENCY_SPREAD
    return Oscillator(
        id=osc_id,
        phase=normalize_angle(float(initial_phase)),
        natural_frequency=float(natural_frequency),
        coupling_modifier=coupling_modifier,
    )


def create_chiral_noise(
    amplitude: float = DEFAULT_NOISE_AMPLITUDE,
    frequencies: Sequence[float] = DEFAULT_NOISE_FREQUENCIES,
) -> Callable[[float], float]:
    """Deterministic quasi-periodic noise: amplitude * mean_i sin(f_i*t + i*pi/n)."""
    freqs = tuple(frequencies)
    n = len(freqs)

    def noise(t: float) -> float:
        if n == 0:
            return 0.0
        total = 0.0
        for i, freq in enumerate(freqs):
            total += math.sin(freq * t + (i * math.pi) / n) / n
        return amplitude * total

    return noise


def create_kuramoto_system(
    oscillator_count: int,
    coupling_strength: float = 1.0,
    noise_fn: Optional[Callable[[float], float]] = None,
    rng: Optional[np.random.Generator] = None,
) -> OscillatorSystem:
    """
    Create a population of oscillators named osc-0 .. osc-(n-1).

    Raises:
        StopRule: If oscillator_count is negative
    """
    if oscillator_count < 0:
        raise StopRule(f"oscillator_count must be >= 0, got {oscillator_count}")
    if rng is None:
        rng = np.random.default_rng()
    oscillators = tuple(
        create_oscillator(f"osc-{i}", rng=rng) for i in range(oscillator_count)
    )
    return OscillatorSystem(
        oscillators=oscillators,
        coupling_strength=coupling_strength,
        noise_fn=noise_fn if noise_fn is not None else create_chiral_noise(),
        time=0.0,
    )


# =============================================================================
# ORDER PARAMETER
# =============================================================================

def _phases(oscillators: Sequence[Oscillator]) -> np.ndarray:
    return np.fromiter((o.phase for o in oscillators), dtype=float, count=len(oscillators))


def compute_order_parameter(oscillators: Sequence[Oscillator]) -> OrderParameter:
    """
    Complex mean of e^{i*theta} over the population.

    Returns:
        OrderParameter with r = min(1, |z|) and psi in [0, 2pi).
        Empty population -> r=0, psi=0.
    """
    if len(oscillators) == 0:
        return OrderParameter(r=0.0, psi=0.0, real=0.0, imag=0.0)

    z = np.exp(1j * _phases(oscillators)).mean()
    real = float(z.real)
    imag = float(z.imag)
    r = math.sqrt(real * real + imag * imag)
    psi = math.atan2(imag, real)

    return OrderParameter(r=min(1.0, r), psi=normalize_angle(psi), real=real, imag=imag)


# =============================================================================
# INTEGRATION
# =============================================================================

def step_kuramoto(system: OscillatorSystem, dt: float) -> OscillatorSystem:
    """
    Advance the population by one RK4 step.

    The order parameter is frozen at the start of the step. Noise is sampled
    at t, t+dt/2 (shared by k2 and k3) and t+dt.

    Args:
        system: Current system (not modified)
        dt: Step size

    Returns:
        New OscillatorSystem with time advanced by dt
    """
    oscillators = system.oscillators
    if not oscillators:
        return replace(system, time=system.time + dt)

    order = compute_order_parameter(oscillators)
    t = system.time
    noise_start = system.noise_fn(t)
    noise_mid = system.noise_fn(t + dt / 2)
    noise_end = system.noise_fn(t + dt)

    theta = _phases(oscillators)
    omega = np.array([o.natural_frequency for o in oscillators], dtype=float)
    modifier = np.array([o.coupling_modifier for o in oscillators], dtype=float)
    gain = system.coupling_strength * order.r

    def derivative(phases: np.ndarray, noise: float) -> np.ndarray:
        return omega + gain * np.sin(order.psi - phases) * modifier + noise

    k1 = derivative(theta, noise_start)
    k2 = derivative(theta + k1 * dt / 2, noise_mid)
    k3 = derivative(theta + k2 * dt / 2, noise_mid)
    k4 = derivative(theta + k3 * dt, noise_end)
    evolved = theta + (dt / 6) * (k1 + 2 * k2 + 2 * k3 + k4)

    new_oscillators = tuple(
        replace(osc, phase=normalize_angle(float(phase)))
        for osc, phase in zip(oscillators, evolved)
    )
    return replace(system, oscillators=new_oscillators, time=system.time + dt)


# =============================================================================
# MEASUREMENT
# =============================================================================

def measure_coherence(system: OscillatorSystem) -> CoherenceResult:
    """Coherence r, mean phase psi, phase variance 1-r and mean natural frequency."""
    oscillators = system.oscillators
    if not oscillators:
        return CoherenceResult(coherence=0.0, mean_phase=0.0, phase_variance=0.0, coherence_frequency=0.0)

    order = compute_order_parameter(oscillators)
    mean_omega = sum(o.natural_frequency for o in oscillators) / len(oscillators)
    return CoherenceResult(
        coherence=order.r,
        mean_phase=order.psi,
        phase_variance=1 - order.r,
        coherence_frequency=mean_omega,
    )


def is_synchronized(system: OscillatorSystem, threshold: float = DEFAULT_SYNC_THRESHOLD) -> bool:
    return measure_coherence(system).coherence >= threshold


def estimate_critical_coupling(oscillators: Sequence[Oscillator]) -> float:
    """
    Classic Kuramoto estimate K_c = 4*dw/pi, dw = half the natural-frequency range.

    Returns 0 for fewer than two oscillators.
    """
    if len(oscillators) < 2:
        return 0.0
    omegas = [o.natural_frequency for o in oscillators]
    delta_omega = (max(omegas) - min(omegas)) / 2
    return (4 * delta_omega) / math.pi


# =============================================================================
# CONTROL
# =============================================================================

def synchronize(system: OscillatorSystem, target_phase: float, strength: float = 0.5) -> OscillatorSystem:
    """
    Pull every oscillator toward target_phase along the shorter arc.

    Each phase moves by shortest_diff * clamp(strength, 0, 1) * coupling_modifier.
    """
    target = normalize_angle(target_phase)
    pull = clamp(strength, 0.0, 1.0)

    new_oscillators = tuple(
        replace(
            osc,
            phase=normalize_angle(osc.phase + phase_difference(target, osc.phase) * pull * osc.coupling_modifier),
        )
        for osc in system.oscillators
    )
    return replace(system, oscillators=new_oscillators)


def adapt_coupling_strength(
    system: OscillatorSystem,
    target_coherence: float,
    learning_rate: float = 0.1,
) -> OscillatorSystem:
    """Nudge K by (target - r) * learning_rate, never below COUPLING_FLOOR."""
    coherence = measure_coherence(system).coherence
    adjustment = (target_coherence - coherence) * learning_rate
    return replace(system, coupling_strength=max(COUPLING_FLOOR, system.coupling_strength + adjustment))


# =============================================================================
# RUNS
# =============================================================================

def simulate(system: OscillatorSystem, duration: float, dt: float = 0.01) -> KuramotoRun:
    """
    Run floor(duration / dt) steps, sampling coherence on every 10th step.

    Samples are taken after steps 0, 10, 20, ... so a run of n steps yields
    ceil(n / 10) samples.

    Args:
        system: Starting system (not modified)
        duration: Simulated time span
        dt: Step size

    Returns:
        KuramotoRun with the final system, the samples and a receipt

    Raises:
        StopRule: If dt is not positive
    """
    if dt <= 0:
        raise StopRule(f"dt must be positive, got {dt}")

    # Guard against 0.3 / 0.1 == 2.9999999999999996
    steps = max(0, int(math.floor(duration / dt + 1e-9)))
    samples = []
    current = system
    for i in range(steps):
        current = step_kuramoto(current, dt)
        if i % COHERENCE_SAMPLE_INTERVAL == 0:
            samples.append(measure_coherence(current))

    final_coherence = samples[-1].coherence if samples else measure_coherence(current).coherence
    receipt = emit_receipt("kuramoto_simulation", {
        "tenant_id": "engine",
        "n_oscillators": len(current.oscillators),
        "coupling_strength": current.coupling_strength,
        "dt": dt,
        "steps": steps,
        "n_samples": len(samples),
        "final_time": current.time,
        "final_coherence": final_coherence,
        "samples_root": merkle([s.coherence for s in samples]),
    })
    return KuramotoRun(system=current, samples=tuple(samples), receipt=receipt)


def run_scenario(config: KuramotoConfig) -> KuramotoRun:
    """Build a seeded population from config and simulate it."""
    rng = np.random.default_rng(config.random_seed)
    system = create_kuramoto_system(
        config.n_oscillators,
        coupling_strength=config.coupling_strength,
        noise_fn=create_chiral_noise(config.noise_amplitude),
        rng=rng,
    )
    return simulate(system, config.duration, config.dt)
