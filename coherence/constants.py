"""
coherence/constants.py - Golden-Ratio and Engine Constants

All constants for the coherence engine. Centralized for tuning.
Pure data, no behavior.
"""

import math
from enum import Enum

# =============================================================================
# GOLDEN RATIO
# =============================================================================

PHI = 1.618033988749895             # (1 + sqrt(5)) / 2
PHI_INVERSE = 0.6180339887498949    # 1 / PHI == PHI - 1
ALPHA = PHI / 2                     # Primary harmonic scaling, bridge strength
BETA = PHI_INVERSE                  # Secondary harmonic scaling
GOLDEN_ANGLE = (2 * math.pi) / (PHI * PHI)

TWO_PI = 2 * math.pi

# =============================================================================
# COHERENCE BAND
# =============================================================================

COHERENCE_MIN = 0.4    # Below: loses coherent oscillation
COHERENCE_MAX = 0.85   # Above: over-constrained
RESONANT_BANDWIDTH = COHERENCE_MAX - COHERENCE_MIN
COHERENCE_OPTIMAL = (COHERENCE_MIN + COHERENCE_MAX) / 2

# =============================================================================
# DAMPING (RESONANCE CONTROLLER)
# =============================================================================

LAMBDA_MIN = 0.001     # Planck-scale damping floor
LAMBDA_MAX = 2.0       # Collapse ceiling
MAX_VELOCITY_SWING = 2.0   # Frame-to-frame velocity change that zeroes instant coherence
DEFAULT_RESONANCE_DT = 0.016
DEFAULT_MIN_STATE = -10.0
DEFAULT_MAX_STATE = 10.0

# =============================================================================
# OSCILLATOR ENGINE
# =============================================================================

DEFAULT_SYNC_THRESHOLD = 0.9
COHERENCE_SAMPLE_INTERVAL = 10   # simulate() records every 10th step
COUPLING_FLOOR = 0.1             # adapt_coupling_strength never goes below
FREQUENCY_SPREAD = 0.2           # Default natural frequency 1.0 +/- 0.1
DEFAULT_NOISE_AMPLITUDE = 0.1
DEFAULT_NOISE_FREQUENCIES = (0.1, 0.3, 0.7)

# =============================================================================
# CHIRAL MODULE
# =============================================================================

CHIRAL_ETA = 0.618033988749895   # Optimal chirality coefficient
CHIRAL_DT = 0.016                # ~1/60 s; ties integration to a 60 Hz cadence
GAMMA_FLOOR = 0.001
PROTECTION_THRESHOLD = 0.5
CHARGED_WINDING_FACTOR = 1.0
NEUTRAL_WINDING_FACTOR = 0.8

# =============================================================================
# QUEEN-WORKER SYNCHRONIZER
# =============================================================================

HIVE_COHERENCE_THRESHOLD = 0.7
QUEEN_COUPLING = 1.0
PASSIVE_DRIFT_RATE = 0.01        # naturalFrequency * 0.01 per align
DESYNC_PHASE_LIMIT = math.pi / 4
MAX_HISTORY_LENGTH = 100
TREND_WINDOW = 5
TREND_THRESHOLD = 0.05
OPTIMAL_COUPLING_BASELINE = 0.5
OVERSHOOT_COUPLING = 0.3
OVERSHOOT_MARGIN = 0.1
COUPLING_MIN = 0.1
COUPLING_MAX = 1.0

# =============================================================================
# BRIDGE OPERATOR
# =============================================================================

EMERGENCE_THRESHOLD = 1e-10

# =============================================================================
# PHI GRAPH ENGINE
# =============================================================================

IIT_PHI_THRESHOLD = 3.0
MAX_BIPARTITIONS = 100    # Order-dependent cap on the partition search
ACTIVITY_FLOOR = 0.001    # Keeps log2(p) finite
UNSTABLE_CHIRAL_FACTOR = 0.5

# =============================================================================
# PROFILE / METRICS SNAPSHOT
# =============================================================================

CHIRAL_STABLE_THRESHOLD = 0.3
EMERGENCE_COHERENCE_FLOOR = 0.4
DEFAULT_PROFILE_LAMBDA = 0.5


# =============================================================================
# ENUMS
# =============================================================================

class SyncEventType(Enum):
    """Kinds of event emitted by the queen-worker synchronizer."""
    BROADCAST = "broadcast"
    ALIGN = "align"
    JOIN = "join"
    LEAVE = "leave"
    THRESHOLD = "threshold"


class CoherenceTrend(Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DEGRADING = "degrading"


class BiofieldState(Enum):
    """Physiological context label supplied by the surrounding application."""
    FOCUSED = "focused"
    CHARGED = "charged"
    RESTORATIVE = "restorative"
    NEUTRAL = "neutral"
    UNSETTLED = "unsettled"
    DEPLETED = "depleted"


class HeartState(Enum):
    """Subjective activity label supplied by the surrounding application."""
    CREATING = "creating"
    LEARNING = "learning"
    EXPLORING = "exploring"
    BUILDING = "building"
    INVESTING = "investing"
    OBSERVING = "observing"
    RESTING = "resting"


class ChiralStatus(Enum):
    UNSTABLE = "unstable"
    STABILIZING = "stabilizing"
    STABLE = "stable"
    CRYSTALLINE = "crystalline"


class LambdaState(Enum):
    GROUNDED = "grounded"
    BALANCED = "balanced"
    ELEVATED = "elevated"
    TRANSCENDENT = "transcendent"


class PhiLevel(Enum):
    MINIMAL = "minimal"
    EMERGING = "emerging"
    INTEGRATED = "integrated"
    UNIFIED = "unified"


# =============================================================================
# BOUNDARY TABLES (reproducible contract)
# =============================================================================

BIOFIELD_COHERENCE = {
    BiofieldState.FOCUSED: 0.80,
    BiofieldState.CHARGED: 0.65,
    BiofieldState.RESTORATIVE: 0.55,
    BiofieldState.NEUTRAL: 0.50,
    BiofieldState.UNSETTLED: 0.35,
    BiofieldState.DEPLETED: 0.25,
}

HEART_MODIFIERS = {
    HeartState.CREATING: 0.10,
    HeartState.LEARNING: 0.08,
    HeartState.EXPLORING: 0.05,
    HeartState.BUILDING: 0.06,
    HeartState.INVESTING: 0.04,
    HeartState.OBSERVING: 0.12,
    HeartState.RESTING: 0.07,
}

BIOFIELD_STABILITY_MODIFIERS = {
    BiofieldState.FOCUSED: 0.3,
    BiofieldState.CHARGED: 0.1,
    BiofieldState.RESTORATIVE: 0.2,
    BiofieldState.NEUTRAL: 0.15,
    BiofieldState.UNSETTLED: -0.2,
    BiofieldState.DEPLETED: -0.1,
}

DEFAULT_BASE_COHERENCE = 0.5

LAMBDA_PRESETS = {
    LambdaState.GROUNDED: 0.3,
    LambdaState.BALANCED: 0.5,
    LambdaState.ELEVATED: 0.7,
    LambdaState.TRANSCENDENT: 0.9,
}
