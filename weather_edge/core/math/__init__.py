"""
Core math modules для weather_edge

Численные примитивы, σ-модель, вероятностная модель пересечения порога и
Brier score для калибровки.
"""

# Numerical Safeguards
from weather_edge.core.math.numerical_safeguards import (
    EPS_FLOAT_COMPARE_ABS,
    EPS_FLOAT_COMPARE_REL,
    clamp,
    clamp_probability,
    is_close,
    is_valid_float,
    round_to_tenth,
    validate_in_range,
    validate_positive,
)

# Sigma
from weather_edge.core.math.sigma import (
    SIGMA_HORIZON_HOURS,
    SigmaCalculator,
    calculate_sigma,
    is_sigma_monotonic,
)

# Probability
from weather_edge.core.math.probability import (
    InvalidProbabilityError,
    InvalidThresholdRangeError,
    calculate_probability,
    calculate_range_probability,
    expected_value,
    is_expired,
    normal_cdf,
)

# Brier score
from weather_edge.core.math.brier import (
    DEFAULT_TARGET_BRIER_SCORE,
    BrierRating,
    BrierScoreResult,
    Prediction,
    brier_score_rating,
    calculate_brier_score,
    calculate_rolling_brier_score,
    meets_target_score,
)

__all__ = [
    # Numerical safeguards
    "EPS_FLOAT_COMPARE_ABS",
    "EPS_FLOAT_COMPARE_REL",
    "clamp",
    "clamp_probability",
    "is_close",
    "is_valid_float",
    "round_to_tenth",
    "validate_in_range",
    "validate_positive",
    # Sigma
    "SIGMA_HORIZON_HOURS",
    "SigmaCalculator",
    "calculate_sigma",
    "is_sigma_monotonic",
    # Probability
    "InvalidProbabilityError",
    "InvalidThresholdRangeError",
    "calculate_probability",
    "calculate_range_probability",
    "expected_value",
    "is_expired",
    "normal_cdf",
    # Brier score
    "DEFAULT_TARGET_BRIER_SCORE",
    "BrierRating",
    "BrierScoreResult",
    "Prediction",
    "brier_score_rating",
    "calculate_brier_score",
    "calculate_rolling_brier_score",
    "meets_target_score",
]
