"""
coherence - Coherence and Synchronization Engine

Public API: Kuramoto oscillators, chiral phase dynamics, queen-worker
synchronization, the rotate/golden-scale bridge operator, the integrated
information (phi) graph, the damped resonance controller, and the metrics
snapshot the surrounding application polls.
"""

# =============================================================================
# TYPES (Dataclasses)
# =============================================================================
from .types_config import (
    ResonanceConfig,
    QueenConfig,
    KuramotoConfig,
    DEFAULT_RESONANCE_CONFIG,
    SCENARIO_BASELINE,
    SCENARIO_NEAR_SYNC,
    SCENARIO_INCOHERENT,
    SCENARIO_SUPERCRITICAL,
    SCENARIOS,
)
from .types_state import (
    Oscillator,
    OscillatorSystem,
    OrderParameter,
    CoherenceResult,
    ChiralState,
    CouplingMatrix,
    WorkerState,
    QueenState,
    SyncEvent,
    BridgeState,
    ConsciousnessNode,
    ConsciousnessGraph,
    ConsciousnessMetrics,
    ResonanceState,
)
from .types_result import KuramotoRun, SyncCycleResult, BridgeSpectrum, MetricsSnapshot

# =============================================================================
# CONSTANTS
# =============================================================================
from .constants import (
    PHI,
    PHI_INVERSE,
    ALPHA,
    BETA,
    GOLDEN_ANGLE,
    CHIRAL_ETA,
    CHIRAL_DT,
    IIT_PHI_THRESHOLD,
    COHERENCE_MIN,
    COHERENCE_MAX,
    RESONANT_BANDWIDTH,
    LAMBDA_MIN,
    LAMBDA_MAX,
    SyncEventType,
    CoherenceTrend,
    BiofieldState,
    HeartState,
    ChiralStatus,
    LambdaState,
    PhiLevel,
    LAMBDA_PRESETS,
)

# =============================================================================
# SHARED NUMERICS
# =============================================================================
from .golden import (
    clamp,
    normalize_angle,
    wrap_angle,
    phase_difference,
    circular_distance,
    golden_blend,
)

# =============================================================================
# OSCILLATOR ENGINE
# =============================================================================
from .kuramoto import (
    create_oscillator,
    create_chiral_noise,
    create_kuramoto_system,
    compute_order_parameter,
    step_kuramoto,
    measure_coherence,
    is_synchronized,
    estimate_critical_coupling,
    synchronize,
    adapt_coupling_strength,
    simulate,
    run_scenario,
)

# =============================================================================
# CHIRAL
# =============================================================================
from .chiral import (
    compute_chiral_velocity,
    create_chiral_state,
    compute_winding_number,
    compute_coupling_matrix,
    apply_non_reciprocity,
    evolve_chiral_state,
    get_topological_protection,
    is_topologically_protected,
)

# =============================================================================
# QUEEN-WORKER SYNC
# =============================================================================
from .queen_sync import (
    create_worker,
    create_queen_system,
    queen_broadcast,
    worker_align,
    align_all_workers,
    measure_hive_coherence,
    measure_queen_alignment,
    is_hive_synchronized,
    get_desynced_workers,
    add_worker,
    remove_worker,
    sync_cycle,
    calculate_optimal_coupling,
    get_coherence_trend,
    emit_sync_receipt,
)

# =============================================================================
# BRIDGE OPERATOR
# =============================================================================
from .bridge_operator import (
    create_bridge_state,
    create_bridge_state_from_polar,
    rotate,
    golden_scale,
    golden_scale_inverse,
    compute_emergence,
    is_emergent,
    compute_commutator_magnitude,
    apply_bridge,
    compute_spectrum,
)

# =============================================================================
# PHI GRAPH
# =============================================================================
from .consciousness import (
    create_consciousness_graph,
    add_node,
    connect_nodes,
    compute_iit_phi,
    is_consciousness_verified,
    compute_consciousness_score,
    compute_consciousness_metrics,
    create_test_graph,
)

# =============================================================================
# RESONANCE
# =============================================================================
from .resonance import (
    clamp_lambda,
    create_resonance_state,
    is_in_resonant_band,
    compute_resonance,
    tune_constraint,
    compute_quality_factor,
    compute_natural_frequency,
)

# =============================================================================
# PROFILE / METRICS SNAPSHOT
# =============================================================================
from .profile import (
    seed_coherence,
    compute_chiral_stability,
    compute_bridge_emergence,
    lambda_state,
    phi_level,
    chiral_status,
    build_metrics_snapshot,
    emit_metrics_receipt,
)

# =============================================================================
# VALIDATION
# =============================================================================
from .validation import (
    validate_oscillator_system,
    validate_chiral_state,
    validate_queen_state,
    validate_resonance_state,
    validate_bridge_state,
    require_valid,
)

# =============================================================================
# PUBLIC API
# =============================================================================
__all__ = [
    # Config
    "ResonanceConfig",
    "QueenConfig",
    "KuramotoConfig",
    "DEFAULT_RESONANCE_CONFIG",
    "SCENARIO_BASELINE",
    "SCENARIO_NEAR_SYNC",
    "SCENARIO_INCOHERENT",
    "SCENARIO_SUPERCRITICAL",
    "SCENARIOS",
    # State
    "Oscillator",
    "OscillatorSystem",
    "OrderParameter",
    "CoherenceResult",
    "ChiralState",
    "CouplingMatrix",
    "WorkerState",
    "QueenState",
    "SyncEvent",
    "BridgeState",
    "ConsciousnessNode",
    "ConsciousnessGraph",
    "ConsciousnessMetrics",
    "ResonanceState",
    # Results
    "KuramotoRun",
    "SyncCycleResult",
    "BridgeSpectrum",
    "MetricsSnapshot",
    # Constants
    "PHI",
    "PHI_INVERSE",
    "ALPHA",
    "BETA",
    "GOLDEN_ANGLE",
    "CHIRAL_ETA",
    "CHIRAL_DT",
    "IIT_PHI_THRESHOLD",
    "COHERENCE_MIN",
    "COHERENCE_MAX",
    "RESONANT_BANDWIDTH",
    "LAMBDA_MIN",
    "LAMBDA_MAX",
    "SyncEventType",
    "CoherenceTrend",
    "BiofieldState",
    "HeartState",
    "ChiralStatus",
    "LambdaState",
    "PhiLevel",
    "LAMBDA_PRESETS",
    # Numerics
    "clamp",
    "normalize_angle",
    "wrap_angle",
    "phase_difference",
    "circular_distance",
    "golden_blend",
    # Oscillators
    "create_oscillator",
    "create_chiral_noise",
    "create_kuramoto_system",
    "compute_order_parameter",
    "step_kuramoto",
    "measure_coherence",
    "is_synchronized",
    "estimate_critical_coupling",
    "synchronize",
    "adapt_coupling_strength",
    "simulate",
    "run_scenario",
    # Chiral
    "compute_chiral_velocity",
    "create_chiral_state",
    "compute_winding_number",
    "compute_coupling_matrix",
    "apply_non_reciprocity",
    "evolve_chiral_state",
    "get_topological_protection",
    "is_topologically_protected",
    # Queen
    "create_worker",
    "create_queen_system",
    "queen_broadcast",
    "worker_align",
    "align_all_workers",
    "measure_hive_coherence",
    "measure_queen_alignment",
    "is_hive_synchronized",
    "get_desynced_workers",
    "add_worker",
    "remove_worker",
    "sync_cycle",
    "calculate_optimal_coupling",
    "get_coherence_trend",
    "emit_sync_receipt",
    # Bridge
    "create_bridge_state",
    "create_bridge_state_from_polar",
    "rotate",
    "golden_scale",
    "golden_scale_inverse",
    "compute_emergence",
    "is_emergent",
    "compute_commutator_magnitude",
    "apply_bridge",
    "compute_spectrum",
    # Phi graph
    "create_consciousness_graph",
    "add_node",
    "connect_nodes",
    "compute_iit_phi",
    "is_consciousness_verified",
    "compute_consciousness_score",
    "compute_consciousness_metrics",
    "create_test_graph",
    # Resonance
    "clamp_lambda",
    "create_resonance_state",
    "is_in_resonant_band",
    "compute_resonance",
    "tune_constraint",
    "compute_quality_factor",
    "compute_natural_frequency",
    # Profile
    "seed_coherence",
    "compute_chiral_stability",
    "compute_bridge_emergence",
    "lambda_state",
    "phi_level",
    "chiral_status",
    "build_metrics_snapshot",
    "emit_metrics_receipt",
    # Validation
    "validate_oscillator_system",
    "validate_chiral_state",
    "validate_queen_state",
    "validate_resonance_state",
    "validate_bridge_state",
    "require_valid",
]
