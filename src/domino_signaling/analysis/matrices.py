"""
Matrix views of a signaling network.

Prepares the matrices behind signaling, incoming-signaling, feature and
correlation heatmaps. Rendering is left to the caller.
"""

import warnings
import numpy as np
import pandas as pd
from dataclasses import dataclass
from scipy.stats import pearsonr
from typing import List, Optional, Sequence, Union

from ..data.keys import ligand_labels, receptor_labels
from ..data.network import SignalingNetwork
from ..errors import ConfigError, PreconditionError
from .transform import HEATMAP_SCALES, normalize_matrix, transform


def signaling_matrix(
    network: SignalingNetwork,
    clusts: Optional[Sequence] = None,
    min_thresh: float = -np.inf,
    max_thresh: float = np.inf,
    scale: str = 'none',
    normalize: str = 'none',
) -> pd.DataFrame:
    """
    Cluster-to-cluster signaling matrix, thresholded, scaled and normalized.

    Args:
        network: A built SignalingNetwork with clusters
        clusts: Clusters to include. All clusters when None.
        min_thresh: Minimum signaling threshold
        max_thresh: Maximum signaling threshold
        scale: 'none', 'sqrt' or 'log'
        normalize: 'none', 'rec_norm' (rows) or 'lig_norm' (columns)

    Returns:
        DataFrame ["R_<cl>" x "L_<cl>"]
    """
    network.require_built('Please build the signaling network prior to using it.')
    network.require_clusters(
        "This network wasn't built with clusters so intercluster signaling cannot be generated."
    )

    mat = network.signaling
    if clusts is not None:
        missing = [cl for cl in receptor_labels(clusts) if cl not in mat.index]
        missing += [cl for cl in ligand_labels(clusts) if cl not in mat.columns]
        if missing:
            raise ConfigError(f"Unknown clusters: {', '.join(missing)}")
        mat = mat.loc[receptor_labels(clusts), ligand_labels(clusts)]

    return transform(mat, min_thresh, max_thresh, scale, normalize, scales=HEATMAP_SCALES)


def incoming_signaling_matrix(
    network: SignalingNetwork,
    rec_clust,
    min_thresh: float = -np.inf,
    max_thresh: float = np.inf,
    scale: str = 'none',
    normalize: str = 'none',
) -> Optional[pd.DataFrame]:
    """
    Expression of the ligands targeting a receptor cluster.

    Returns:
        DataFrame [ligands x "L_<cl>"], or None if the cluster receives no
        signaling under the build parameters.
    """
    network.require_built('Please build the signaling network prior to using it.')
    network.require_clusters(
        "This network wasn't built with clusters so cluster specific expression is not possible."
    )

    mat = network.incoming(rec_clust)
    if mat.shape[0] == 0:
        warnings.warn(f"No signaling found for cluster {rec_clust} under build parameters.")
        return None

    return transform(mat, min_thresh, max_thresh, scale, normalize, scales=HEATMAP_SCALES)


def _select(
    requested: Union[None, str, Sequence[str]],
    available: pd.Index,
    default: List[str],
) -> List[str]:
    """Resolve None / 'all' / explicit lists, dropping names not found."""
    if requested is None:
        names = list(default)
    elif isinstance(requested, str) and requested == 'all':
        return list(available)
    elif isinstance(requested, str):
        names = [requested]
    else:
        names = list(requested)

    found = [n for n in names if n in available]
    missing = [n for n in names if n not in available]
    if missing:
        warnings.warn(f"Unable to find {' '.join(missing)}")
    return found


def feature_matrix(
    network: SignalingNetwork,
    feats: Union[None, str, Sequence[str]] = None,
    norm: bool = False,
    min_thresh: Optional[float] = None,
    max_thresh: Optional[float] = None,
    binary: bool = True,
    bool_thresh: float = 0.2,
) -> pd.DataFrame:
    """
    Feature activation scores of every cell, with cells ordered by cluster.

    Args:
        network: SignalingNetwork
        feats: Features to include, 'all' for every feature, or None for the
            features selected for the signaling network
        norm: Whether to normalize each feature to its max value
        min_thresh: Lower clamp, applied after normalization
        max_thresh: Upper clamp, applied after normalization
        binary: Whether to binarize scores at bool_thresh
        bool_thresh: Activity threshold separating on (1) and off (0)

    Returns:
        DataFrame [features x cells]
    """
    if not network.has_clusters:
        warnings.warn("This network wasn't built with clusters. Cells will not be ordered.")

    if norm and (min_thresh is not None or max_thresh is not None):
        warnings.warn(
            'You are using norm with min_thresh and max_thresh. '
            'Note that values will be thresholded AFTER normalization.'
        )

    mat = network.features
    if norm:
        mat = normalize_matrix(mat, 'row')
    else:
        mat = mat.copy()

    if min_thresh is not None:
        mat = mat.where(~(mat < min_thresh), min_thresh)
    if max_thresh is not None:
        mat = mat.where(~(mat > max_thresh), max_thresh)

    if binary:
        mat = (mat >= bool_thresh).astype(float)

    feats = _select(feats, mat.index, network.linkages.all_features())

    if network.has_clusters:
        order = network.clusters.sort_values(kind='stable').index
        return mat.loc[feats, order]
    return mat.loc[feats]


def correlation_matrix(
    network: SignalingNetwork,
    feats: Union[None, str, Sequence[str]] = None,
    recs: Union[None, str, Sequence[str]] = None,
    binary: bool = True,
    bool_thresh: float = 0.15,
) -> pd.DataFrame:
    """
    Correlation between receptors and features.

    Args:
        network: SignalingNetwork with a correlation matrix
        feats: Features to include, 'all', or None for network features
        recs: Receptors to include, 'all', or None for receptors linked to feats
        binary: Whether to binarize at bool_thresh
        bool_thresh: Correlation threshold

    Returns:
        DataFrame [receptors x features]
    """
    if network.cor is None:
        raise PreconditionError('This network has no receptor/feature correlation matrix.')

    mat = network.cor
    if binary:
        mat = (mat >= bool_thresh).astype(float)

    feats = _select(feats, mat.columns, network.linkages.all_features())

    linked = []
    for feat in feats:
        for rec in network.linkages.receptors_for(feat):
            if rec not in linked:
                linked.append(rec)
    recs = _select(recs, mat.index, linked)

    return mat.loc[recs, feats]


def connection_marks(
    network: SignalingNetwork,
    recs: Sequence[str],
    feats: Sequence[str],
) -> pd.DataFrame:
    """Table with 'X' where a receptor is linked to a feature, '' elsewhere."""
    marks = pd.DataFrame('', index=list(recs), columns=list(feats))
    for feat in feats:
        for rec in network.linkages.receptors_for(feat):
            if rec in marks.index:
                marks.loc[rec, feat] = 'X'
    return marks


@dataclass
class CorrelationScatter:
    """Per-cell receptor expression against feature activation."""
    data: pd.DataFrame
    r: float
    p_value: float


def correlation_scatter(
    network: SignalingNetwork,
    tf: str,
    rec: str,
    remove_rec_dropout: bool = True,
) -> CorrelationScatter:
    """
    Receptor z-score and feature score per cell, with Pearson correlation.

    Args:
        network: SignalingNetwork
        tf: Feature to correlate
        rec: Receptor to correlate
        remove_rec_dropout: Whether to drop cells with zero receptor counts.
            Should match the setting used to build the network.

    Returns:
        CorrelationScatter with a 'rec'/'tf' table indexed by cell
    """
    if rec not in network.z_scores.index:
        raise ConfigError(f"Receptor not found: {rec}")
    if tf not in network.features.index:
        raise ConfigError(f"Feature not found: {tf}")

    cells = network.z_scores.columns
    if remove_rec_dropout:
        if network.counts is None:
            raise PreconditionError('Removing receptor dropout requires raw counts.')
        counts = network.counts.loc[rec, cells]
        cells = counts.index[counts > 0]

    data = pd.DataFrame({
        'rec': network.z_scores.loc[rec, cells].to_numpy(dtype=float),
        'tf': network.features.loc[tf, cells].to_numpy(dtype=float),
    }, index=cells)

    if len(data) < 2:
        r, p = np.nan, np.nan
    else:
        r, p = pearsonr(data['rec'], data['tf'])

    return CorrelationScatter(data=data, r=float(r), p_value=float(p))
