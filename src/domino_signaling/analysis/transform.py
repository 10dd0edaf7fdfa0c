"""
Signaling Matrix Transforms

Thresholding, scaling and max-normalization of signaling matrices. The
order is always clamp -> scale -> normalize.
"""

import numpy as np
import pandas as pd
from typing import Sequence, Union

from ..errors import ConfigError, DomainError


Matrix = Union[pd.DataFrame, np.ndarray]

# Scale modes accepted by heatmap views; network views additionally allow 'sq'
HEATMAP_SCALES = ('none', 'sqrt', 'log')
NETWORK_SCALES = ('none', 'sqrt', 'log', 'sq')

_NORMALIZE_ALIASES = {
    'none': 'none',
    'row': 'row',
    'rec_norm': 'row',
    'col': 'col',
    'lig_norm': 'col',
}


def _values(matrix: Matrix) -> np.ndarray:
    if isinstance(matrix, pd.DataFrame):
        return matrix.to_numpy(dtype=float, copy=True)
    return np.array(matrix, dtype=float, copy=True)


def _wrap(values: np.ndarray, like: Matrix) -> Matrix:
    if isinstance(like, pd.DataFrame):
        return pd.DataFrame(values, index=like.index, columns=like.columns)
    return values


def clamp(
    matrix: Matrix,
    min_thresh: float = -np.inf,
    max_thresh: float = np.inf,
) -> Matrix:
    """
    Clamp entries into [min_thresh, max_thresh].

    NaN entries are left untouched.
    """
    if min_thresh is None:
        min_thresh = -np.inf
    if max_thresh is None:
        max_thresh = np.inf
    if min_thresh > max_thresh:
        raise ConfigError(
            f"min_thresh ({min_thresh}) is larger than max_thresh ({max_thresh})"
        )

    values = _values(matrix)
    values[values > max_thresh] = max_thresh
    values[values < min_thresh] = min_thresh
    return _wrap(values, matrix)


def scale_matrix(
    matrix: Matrix,
    scale: str = 'none',
    scales: Sequence[str] = NETWORK_SCALES,
) -> Matrix:
    """
    Scale entries elementwise.

    Args:
        matrix: Signaling matrix
        scale: 'none', 'sqrt', 'log' (log10) or 'sq' (square)
        scales: Scale modes accepted in the calling context

    Returns:
        Scaled matrix of the same type
    """
    if scale not in scales:
        raise ConfigError(
            f"Do not recognize scale input: {scale!r} (options: {', '.join(scales)})"
        )

    values = _values(matrix)
    if scale in ('sqrt', 'log') and np.any(values < 0):
        raise DomainError(
            f"Cannot apply {scale} scaling to negative values; "
            "raise min_thresh to at least 0"
        )

    if scale == 'sqrt':
        values = np.sqrt(values)
    elif scale == 'log':
        with np.errstate(divide='ignore'):
            values = np.log10(values)
    elif scale == 'sq':
        values = np.square(values)

    return _wrap(values, matrix)


def _max_abs_divide(values: np.ndarray, axis: int) -> np.ndarray:
    if values.size == 0:
        return values
    # -inf from log of zero and NaN do not count towards the peak
    finite = np.where(np.isfinite(values), np.abs(values), 0.0)
    peak = finite.max(axis=axis, keepdims=True)
    peak = np.where(peak == 0, 1.0, peak)
    return values / peak


def normalize_matrix(matrix: Matrix, normalize: str = 'none') -> Matrix:
    """
    Normalize each row or column to its maximum absolute value.

    Args:
        matrix: Signaling matrix
        normalize: 'none', 'row' (alias 'rec_norm') or 'col' (alias 'lig_norm')

    Returns:
        Normalized matrix of the same type. All-zero rows/columns stay zero.
    """
    mode = _NORMALIZE_ALIASES.get(normalize)
    if mode is None:
        raise ConfigError(f"Do not recognize normalize input: {normalize!r}")

    values = _values(matrix)
    if mode == 'row':
        values = _max_abs_divide(values, axis=1)
    elif mode == 'col':
        values = _max_abs_divide(values, axis=0)

    return _wrap(values, matrix)


def transform(
    matrix: Matrix,
    min_thresh: float = -np.inf,
    max_thresh: float = np.inf,
    scale: str = 'none',
    normalize: str = 'none',
    scales: Sequence[str] = HEATMAP_SCALES,
) -> Matrix:
    """
    Threshold, scale and normalize a signaling matrix.

    Args:
        matrix: Signaling matrix (DataFrame or array); not modified
        min_thresh: Values below are set to min_thresh
        max_thresh: Values above are set to max_thresh
        scale: Scaling applied after thresholding
        normalize: Normalization applied after scaling
        scales: Scale modes accepted in the calling context

    Returns:
        Transformed copy of the matrix
    """
    # Validate options before doing any work
    if scale not in scales:
        raise ConfigError(
            f"Do not recognize scale input: {scale!r} (options: {', '.join(scales)})"
        )
    if normalize not in _NORMALIZE_ALIASES:
        raise ConfigError(f"Do not recognize normalize input: {normalize!r}")

    mat = clamp(matrix, min_thresh, max_thresh)
    mat = scale_matrix(mat, scale, scales=scales)
    return normalize_matrix(mat, normalize)
