"""
coherence/types_config.py - Configuration Dataclasses and Scenario Presets

Immutable configuration for engine components and oscillator runs.
Frozen dataclasses, no behavior.
"""

from dataclasses import dataclass

from .constants import (
    DEFAULT_RESONANCE_DT,
    DEFAULT_MIN_STATE,
    DEFAULT_MAX_STATE,
    HIVE_COHERENCE_THRESHOLD,
    MAX_HISTORY_LENGTH,
)


@dataclass(frozen=True)
class ResonanceConfig:
    """Euler step size and state clamp for the resonance controller."""
    dt: float = DEFAULT_RESONANCE_DT  # ~60fps
    min_state: float = DEFAULT_MIN_STATE
    max_state: float = DEFAULT_MAX_STATE


DEFAULT_RESONANCE_CONFIG = ResonanceConfig()


@dataclass(frozen=True)
class QueenConfig:
    initial_phase: float = 0.0
    broadcast_frequency: float = 1.0
    coherence_threshold: float = HIVE_COHERENCE_THRESHOLD
    max_history_length: int = MAX_HISTORY_LENGTH


@dataclass(frozen=True)
class KuramotoConfig:
    """Oscillator run configuration (immutable)."""
    n_oscillators: int = 8
    coupling_strength: float = 1.0
    dt: float = 0.01
    duration: float = 10.0
    noise_amplitude: float = 0.1
    random_seed: int = 42
    scenario_name: str = "BASELINE"


# =============================================================================
# SCENARIO PRESETS
# =============================================================================

SCENARIO_BASELINE = KuramotoConfig()

SCENARIO_NEAR_SYNC = KuramotoConfig(
    n_oscillators=3,
    coupling_strength=0.5,
    dt=0.01,
    duration=0.1,
    noise_amplitude=0.0,
    scenario_name="NEAR_SYNC",
)

SCENARIO_INCOHERENT = KuramotoConfig(
    n_oscillators=32,
    coupling_strength=0.0,
    duration=5.0,
    scenario_name="INCOHERENT",
)

# K well above 4*dw/pi for the default +/-0.1 frequency spread
SCENARIO_SUPERCRITICAL = KuramotoConfig(
    n_oscillators=16,
    coupling_strength=4.0,
    duration=20.0,
    scenario_name="SUPERCRITICAL",
)

SCENARIOS = {
    config.scenario_name: config
    for config in (
        SCENARIO_BASELINE,
        SCENARIO_NEAR_SYNC,
        SCENARIO_INCOHERENT,
        SCENARIO_SUPERCRITICAL,
    )
}
