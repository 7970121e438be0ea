"""
Correlation Report Datasets
Anscombe's quartet, seeded bivariate-normal samples and the car-performance
table augmented with synthetic high-leverage outliers
"""

import logging
import numbers
import re
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import streamlit as st

from .exceptions import InvalidParameterError, SubsampleSizeError


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / 'data'
MTCARS_PATH = DATA_DIR / 'mtcars.csv'

# Anscombe, F. J. (1973). "Graphs in Statistical Analysis".
# The American Statistician 27 (1): 17-21.
_ANSCOMBE_X_123 = [10.0, 8.0, 13.0, 9.0, 11.0, 14.0, 6.0, 4.0, 12.0, 7.0, 5.0]
_ANSCOMBE_COLUMNS = {
    'x1': _ANSCOMBE_X_123,
    'x2': _ANSCOMBE_X_123,
    'x3': _ANSCOMBE_X_123,
    'x4': [8.0, 8.0, 8.0, 8.0, 8.0, 8.0, 8.0, 19.0, 8.0, 8.0, 8.0],
    'y1': [8.04, 6.95, 7.58, 8.81, 8.33, 9.96, 7.24, 4.26, 10.84, 4.82, 5.68],
    'y2': [9.14, 8.14, 8.74, 8.77, 9.26, 8.10, 6.13, 3.10, 9.13, 7.26, 4.74],
    'y3': [7.46, 6.77, 12.74, 7.11, 7.81, 8.84, 6.08, 5.39, 8.15, 6.42, 5.73],
    'y4': [6.58, 5.76, 7.71, 8.84, 8.47, 7.04, 5.25, 12.50, 5.56, 7.91, 6.89],
}


# ──────────────────────────────────────────────
#  WIDE <-> LONG RESHAPING
# ──────────────────────────────────────────────

def melt_paired_columns(
    wide: pd.DataFrame,
    stubnames: Sequence[str] = ('x', 'y'),
    group_name: str = 'set',
    index_name: str = 'observation'
) -> pd.DataFrame:
    """
    Reshape paired columns (x1, y1, x2, y2, ...) into a long table

    Every column named ``<stub><suffix>`` is matched with the columns of the
    other stubs sharing the same suffix. The suffix becomes the group value
    (converted to int when it is an unpadded number).

    Parameters
    ----------
    wide : pd.DataFrame
        Table with one column per stub and group
    stubnames : sequence of str
        Column prefixes forming one observation (default ('x', 'y'))
    group_name : str
        Name of the group column of the long table
    index_name : str
        Name of the column holding the original row label

    Returns
    -------
    pd.DataFrame
        Columns: [index_name, group_name, *stubnames], ordered by group then
        original row order
    """
    if not stubnames:
        raise InvalidParameterError("At least one stub name is required")

    pattern = re.compile(
        r'^(' + '|'.join(re.escape(stub) for stub in stubnames) + r')(.+)$'
    )

    # Suffix -> stubs seen, in order of first appearance
    suffixes = {}
    for column in wide.columns:
        match = pattern.match(str(column))
        if match:
            suffixes.setdefault(match.group(2), set()).add(match.group(1))

    if not suffixes:
        raise InvalidParameterError(
            f"No columns matching stubs {list(stubnames)} found in table"
        )

    for suffix, found in suffixes.items():
        missing = [stub for stub in stubnames if stub not in found]
        if missing:
            raise InvalidParameterError(
                f"Group '{suffix}' has no partner column(s) for {missing}"
            )

    frames = []
    for suffix in suffixes:
        # Zero-padded suffixes ('01') stay strings so the pivot restores them
        group = int(suffix) if suffix.isdigit() and str(int(suffix)) == suffix else suffix
        part = pd.DataFrame({
            index_name: wide.index.to_numpy(),
            group_name: [group] * len(wide),
        })
        for stub in stubnames:
            part[stub] = wide[f"{stub}{suffix}"].to_numpy()
        frames.append(part)

    return pd.concat(frames, ignore_index=True)


def pivot_paired_columns(
    long: pd.DataFrame,
    stubnames: Sequence[str] = ('x', 'y'),
    group_name: str = 'set',
    index_name: str = 'observation'
) -> pd.DataFrame:
    """
    Inverse of :func:`melt_paired_columns`

    Columns come out stub-major (x1, x2, ..., y1, y2, ...), groups sorted.
    """
    required = [index_name, group_name, *stubnames]
    missing = [column for column in required if column not in long.columns]
    if missing:
        raise InvalidParameterError(f"Long table is missing column(s) {missing}")

    wide = long.pivot(index=index_name, columns=group_name, values=list(stubnames))
    wide.columns = [f"{stub}{group}" for stub, group in wide.columns]
    wide.index.name = None

    return wide


# ──────────────────────────────────────────────
#  ANSCOMBE'S QUARTET
# ──────────────────────────────────────────────

def load_anscombe_wide() -> pd.DataFrame:
    """Anscombe's quartet as published: columns x1..x4, y1..y4"""
    return pd.DataFrame(_ANSCOMBE_COLUMNS)


def load_anscombe() -> pd.DataFrame:
    """
    Anscombe's quartet in long form

    Returns
    -------
    pd.DataFrame
        Columns: ['observation', 'set', 'x', 'y', 'label'] where label is
        'Set 1'..'Set 4'
    """
    long = melt_paired_columns(load_anscombe_wide())
    long['label'] = 'Set ' + long['set'].astype(str)
    return long


# ──────────────────────────────────────────────
#  BIVARIATE NORMAL SAMPLES
# ──────────────────────────────────────────────

def _check_sample_size(size, name: str = 'size') -> int:
    if isinstance(size, bool) or not isinstance(size, numbers.Integral):
        raise InvalidParameterError(f"{name} must be an integer, got {size!r}")
    if size <= 0:
        raise InvalidParameterError(f"{name} must be positive, got {size}")
    return int(size)


def sample_bivariate_normal(
    mean: Sequence[float],
    cov: Sequence[Sequence[float]],
    size: int,
    seed: int,
    columns: Tuple[str, str] = ('x', 'y')
) -> pd.DataFrame:
    """
    Draw i.i.d. samples from a bivariate normal distribution

    A local ``numpy.random.default_rng(seed)`` generator is used, so the same
    seed always yields the same sample and global numpy state is untouched.

    Parameters
    ----------
    mean : sequence of 2 floats
        Mean vector
    cov : 2x2 nested sequence
        Covariance matrix (finite, symmetric, positive semi-definite)
    size : int
        Number of samples (> 0)
    seed : int
        Generator seed
    columns : tuple of 2 str
        Output column names

    Returns
    -------
    pd.DataFrame
        ``size`` rows, one column per coordinate
    """
    size = _check_sample_size(size)

    mean_arr = np.asarray(mean, dtype=float)
    cov_arr = np.asarray(cov, dtype=float)

    if mean_arr.shape != (2,):
        raise InvalidParameterError(f"Mean vector must have 2 entries, got shape {mean_arr.shape}")
    if cov_arr.shape != (2, 2):
        raise InvalidParameterError(f"Covariance matrix must be 2x2, got shape {cov_arr.shape}")
    if not (np.all(np.isfinite(mean_arr)) and np.all(np.isfinite(cov_arr))):
        raise InvalidParameterError("Mean and covariance must be finite")
    if not np.allclose(cov_arr, cov_arr.T):
        raise InvalidParameterError("Covariance matrix must be symmetric")

    eigenvalues = np.linalg.eigvalsh(cov_arr)
    if eigenvalues.min() < -1e-10:
        raise InvalidParameterError(
            f"Covariance matrix is not positive semi-definite (eigenvalues {eigenvalues})"
        )

    rng = np.random.default_rng(seed)
    samples = rng.multivariate_normal(mean_arr, cov_arr, size=size)

    logger.debug("Drew %d bivariate-normal samples with seed %s", size, seed)
    return pd.DataFrame(samples, columns=list(columns))


def draw_subsample(data: pd.DataFrame, size: int, seed: int) -> pd.DataFrame:
    """
    Deterministic random subset of ``size`` rows (without replacement)

    Raises
    ------
    InvalidParameterError
        ``size`` is not a positive integer
    SubsampleSizeError
        ``size`` exceeds the number of available rows
    """
    size = _check_sample_size(size)
    if size > len(data):
        raise SubsampleSizeError(
            f"Requested sub-sample of {size} rows but only {len(data)} available"
        )

    return data.sample(n=size, random_state=seed)


def append_points(
    data: pd.DataFrame,
    points: Iterable[Mapping[str, float]],
    flag_column: Optional[str] = None
) -> pd.DataFrame:
    """
    Copy of ``data`` with extra rows appended

    Parameters
    ----------
    data : pd.DataFrame
        Base dataset (left untouched)
    points : iterable of mappings
        One mapping column -> value per new row
    flag_column : str, optional
        If given, a boolean column marking the appended rows (True)

    Returns
    -------
    pd.DataFrame
        Base rows followed by the new rows, fresh RangeIndex
    """
    extra = pd.DataFrame(list(points))
    if extra.empty:
        raise InvalidParameterError("No points to append")

    unknown = [column for column in extra.columns if column not in data.columns]
    if unknown:
        raise InvalidParameterError(f"Points reference unknown column(s) {unknown}")

    base = data.copy()
    if flag_column:
        base[flag_column] = False
        extra[flag_column] = True

    return pd.concat([base, extra], ignore_index=True)


# ──────────────────────────────────────────────
#  CAR PERFORMANCE DATA
# ──────────────────────────────────────────────

@st.cache_data
def load_mtcars() -> pd.DataFrame:
    """
    Motor Trend car road tests (1974), 32 models x 11 variables

    Bundled read-only with the package; index is the car model.
    """
    data = pd.read_csv(MTCARS_PATH, index_col='model')
    logger.debug("Loaded %d rows from %s", len(data), MTCARS_PATH.name)
    return data


def build_outlier_rows(
    data: pd.DataFrame,
    x_col: str,
    y_col: str,
    multipliers: Sequence[float]
) -> pd.DataFrame:
    """
    Synthetic high-leverage rows derived from the data's own mean and StDev

    Row m: ``x = mean_x + m * sd_x``, ``y = mean_y + m * sd_y`` (sample
    standard deviation, ddof=1).

    Returns
    -------
    pd.DataFrame
        Columns [x_col, y_col], index labelled 'outlier +<m> sd'
    """
    missing = [column for column in (x_col, y_col) if column not in data.columns]
    if missing:
        raise InvalidParameterError(f"Column(s) {missing} not found in dataset")
    if len(multipliers) == 0:
        raise InvalidParameterError("At least one outlier multiplier is required")

    means = data[[x_col, y_col]].mean()
    stds = data[[x_col, y_col]].std()

    rows: List[dict] = []
    for m in multipliers:
        rows.append({
            x_col: means[x_col] + m * stds[x_col],
            y_col: means[y_col] + m * stds[y_col],
        })

    return pd.DataFrame(rows, index=[f"outlier +{m:g} sd" for m in multipliers])


def augment_with_outliers(
    data: pd.DataFrame,
    x_col: str,
    y_col: str,
    multipliers: Sequence[float]
) -> pd.DataFrame:
    """
    Base rows (x_col, y_col only) followed by synthetic outlier rows

    Returns
    -------
    pd.DataFrame
        Columns [x_col, y_col, 'is_outlier']
    """
    outliers = build_outlier_rows(data, x_col, y_col, multipliers)

    base = data[[x_col, y_col]].copy()
    base['is_outlier'] = False
    outliers['is_outlier'] = True

    augmented = pd.concat([base, outliers])
    logger.debug(
        "Augmented %d rows with %d outliers on (%s, %s)",
        len(base), len(outliers), x_col, y_col
    )
    return augmented
