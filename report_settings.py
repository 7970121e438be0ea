"""
Correlation Report Settings - Canonical Parameters
==================================================

This module defines the fixed parameters used by every figure of the
correlation report. Keeping them in one place guarantees that the Streamlit
page, the HTML export and the tests all reproduce the same datasets.

Usage:
    import report_settings

    full = sample_bivariate_normal(
        report_settings.BIVARIATE_MEAN,
        report_settings.BIVARIATE_COV,
        report_settings.BIVARIATE_SIZE,
        seed=report_settings.RANDOM_SEED,
    )

Rules:
    1. Never hard-code seeds or sample sizes in report code
    2. Change a value here and re-run: every figure follows
"""

# ============================================================================
# RANDOM STATE
# ============================================================================

RANDOM_SEED = 42
"""
Seed of the bivariate-normal generator (int)
Same seed -> bit-identical sample of BIVARIATE_SIZE points.
"""

SUBSAMPLE_SEED = 7
"""
Seed used to draw the smaller sub-samples out of the full sample (int)
"""

# ============================================================================
# REMINDER 2 - SAMPLE SIZE VS OUTLIER INFLUENCE
# ============================================================================

BIVARIATE_MEAN = (10.0, 5.0)
"""Mean vector of the bivariate-normal population (x, y)"""

BIVARIATE_COV = (
    (1.0, -0.7),
    (-0.7, 1.0),
)
"""Covariance matrix of the bivariate-normal population (2x2, PSD)"""

BIVARIATE_SIZE = 500
"""Number of points in the full sample"""

SUBSAMPLE_SIZES = (15, 50, 500)
"""Sample sizes compared side by side (each <= BIVARIATE_SIZE)"""

OUTLIER_POINT = (18.0, 8.0)
"""High-leverage point appended to every sample (x, y)"""

# ============================================================================
# REMINDER 3 - RANK-BASED METHODS VS OUTLIERS
# ============================================================================

CARS_X_COLUMN = 'wt'
"""Car weight (1000 lbs) column of the bundled car-performance table"""

CARS_Y_COLUMN = 'mpg'
"""Fuel consumption (miles per US gallon) column"""

OUTLIER_MULTIPLIERS = (2, 3, 4, 5, 6, 8)
"""
Standard-deviation multipliers of the synthetic outlier rows
Row m sits at (mean_x + m*sd_x, mean_y + m*sd_y).
"""

# ============================================================================
# COEFFICIENTS & DISPLAY
# ============================================================================

CORRELATION_METHODS = ('pearson', 'kendall', 'spearman')
"""Methods annotated on the method-comparison figure (in stacking order)"""

COEFFICIENT_DECIMALS = 2
"""Decimal places of the coefficient annotations"""

PANEL_SIZE = 420
"""Width/height in px of one panel of a comparison figure"""

ANNOTATION_STEP = 0.08
"""Vertical gap (paper fraction of a panel) between stacked annotations"""
