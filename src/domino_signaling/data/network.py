"""
Signaling Network Container

Holds the inputs and outputs of the network-build step: z-scored
expression, feature (transcription factor) activation scores, cluster
assignment, receptor/feature correlation, linkages and signaling matrices.
Downstream operations treat an instance as read-only and return new objects.
"""

import numpy as np
import pandas as pd
import scanpy as sc
import anndata as ad
from pathlib import Path
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional, Union

from ..errors import ConfigError, PreconditionError
from .keys import ClusterKey
from .linkage import LinkageIndex


# Common obs columns holding cluster labels, in order of preference
CLUSTER_COLUMNS = [
    'cluster',
    'clusters',
    'cell_type',
    'celltype',
    'annotation',
    'leiden',
    'louvain',
]


def _as_categorical(clusters) -> Optional[pd.Series]:
    """Coerce a cluster assignment into a categorical Series of str labels."""
    if clusters is None:
        return None
    if not isinstance(clusters, pd.Series):
        clusters = pd.Series(clusters)
    if isinstance(clusters.dtype, pd.CategoricalDtype):
        levels = [str(c) for c in clusters.cat.categories]
        values = clusters.astype(str)
    else:
        values = clusters.astype(str)
        levels = list(dict.fromkeys(values))
    return pd.Series(
        pd.Categorical(values, categories=levels),
        index=clusters.index,
        name=clusters.name,
    )


def _dense(X) -> np.ndarray:
    if hasattr(X, 'toarray'):
        X = X.toarray()
    return np.asarray(X, dtype=float)


@dataclass
class SignalingNetwork:
    """
    Container for a cell-cell signaling network.

    Attributes:
        z_scores: Z-scored expression [genes x cells]; its index is the gene universe
        features: Feature activation scores [features x cells]
        clusters: Categorical cluster label per cell (levels define ordering)
        counts: Raw counts [genes x cells], used to drop receptor dropouts
        clust_de: Feature enrichment per cluster [features x clusters]
        cor: Receptor/feature correlation [receptors x features]
        signaling: Cluster signaling matrix ["R_<cl>" x "L_<cl>"]
        cl_signaling_matrices: Incoming signaling per receptor cluster
            [ligands x "L_<cl>"]
        linkages: Cluster -> feature -> receptor -> ligand linkages
        created: Whether the inputs were assembled
        built: Whether the signaling network was built
    """
    z_scores: pd.DataFrame = field(default_factory=pd.DataFrame)
    features: pd.DataFrame = field(default_factory=pd.DataFrame)
    clusters: Optional[pd.Series] = None
    counts: Optional[pd.DataFrame] = None
    clust_de: Optional[pd.DataFrame] = None
    cor: Optional[pd.DataFrame] = None
    signaling: Optional[pd.DataFrame] = None
    cl_signaling_matrices: Dict[str, pd.DataFrame] = field(default_factory=dict)
    linkages: LinkageIndex = field(default_factory=LinkageIndex)
    created: bool = True
    built: bool = False

    def __post_init__(self):
        self.clusters = _as_categorical(self.clusters)
        self.cl_signaling_matrices = {
            str(k): v for k, v in self.cl_signaling_matrices.items()
        }

    @property
    def has_clusters(self) -> bool:
        return self.clusters is not None and len(self.clusters) > 0

    @property
    def cluster_levels(self) -> List[str]:
        """Ordered cluster levels, empty if there is no cluster assignment."""
        if not self.has_clusters:
            return []
        return list(self.clusters.cat.categories)

    @property
    def genes(self) -> pd.Index:
        return self.z_scores.index

    def require_built(self, message: Optional[str] = None):
        if not self.built:
            raise PreconditionError(
                message or 'Please build the signaling network before using it.'
            )

    def require_clusters(self, message: Optional[str] = None):
        if not self.has_clusters:
            raise PreconditionError(
                message or 'This network was not built with clusters.'
            )

    def incoming(self, cluster) -> pd.DataFrame:
        """Incoming signaling matrix of a receptor cluster."""
        cluster = str(cluster)
        if cluster not in self.cl_signaling_matrices:
            raise ConfigError(f"Unknown cluster: {cluster}")
        return self.cl_signaling_matrices[cluster]

    @classmethod
    def from_anndata(
        cls,
        adata: ad.AnnData,
        cluster_key: Optional[str] = None,
        features: Optional[pd.DataFrame] = None,
        counts_layer: Optional[str] = 'counts',
        z_score: bool = True,
        max_value: Optional[float] = None,
    ) -> 'SignalingNetwork':
        """
        Create an un-built network from an AnnData object.

        Args:
            adata: AnnData [cells x genes], normalized expression in X
            cluster_key: obs column with cluster labels; common names are
                tried when None
            features: Feature scores, either [cells x features] or
                [features x cells] (e.g. pySCENIC AUC matrix)
            counts_layer: Layer holding raw counts, skipped if absent
            z_score: Whether to z-score X with scanpy; otherwise X is used as is
            max_value: Clip value passed to scanpy's scale

        Returns:
            SignalingNetwork with created=True and built=False
        """
        if z_score:
            scaled = sc.pp.scale(adata, max_value=max_value, copy=True)
            X = scaled.X
        else:
            X = adata.X

        z_scores = pd.DataFrame(
            _dense(X).T,
            index=adata.var_names.astype(str),
            columns=adata.obs_names.astype(str),
        )

        counts = None
        if counts_layer is not None and counts_layer in adata.layers:
            counts = pd.DataFrame(
                _dense(adata.layers[counts_layer]).T,
                index=z_scores.index,
                columns=z_scores.columns,
            )

        if cluster_key is None:
            for col in CLUSTER_COLUMNS:
                if col in adata.obs.columns:
                    cluster_key = col
                    print(f"Using cluster annotation from '{col}'")
                    break
        clusters = None
        if cluster_key is not None:
            if cluster_key not in adata.obs.columns:
                raise ConfigError(f"Cluster key not found in obs: {cluster_key}")
            clusters = adata.obs[cluster_key].copy()
            clusters.index = clusters.index.astype(str)

        if features is None:
            features = pd.DataFrame(columns=z_scores.columns, dtype=float)
        elif features.index.astype(str).isin(z_scores.columns).all():
            features = features.T
        features = features.copy()
        features.columns = features.columns.astype(str)

        print(f"Created network input: {z_scores.shape[0]} genes × "
              f"{z_scores.shape[1]} cells, {features.shape[0]} features")

        return cls(
            z_scores=z_scores,
            features=features,
            clusters=clusters,
            counts=counts,
            created=True,
            built=False,
        )

    @classmethod
    def from_h5ad(cls, path: Union[str, Path], **kwargs) -> 'SignalingNetwork':
        """Read an h5ad file and pass it to from_anndata."""
        adata = sc.read_h5ad(Path(path))
        return cls.from_anndata(adata, **kwargs)

    def with_build(
        self,
        signaling: pd.DataFrame,
        cl_signaling_matrices: Mapping[str, pd.DataFrame],
        linkages: LinkageIndex,
        cor: Optional[pd.DataFrame] = None,
        clust_de: Optional[pd.DataFrame] = None,
    ) -> 'SignalingNetwork':
        """
        Attach the results of the network-build step.

        Args:
            signaling: Cluster signaling matrix ["R_<cl>" x "L_<cl>"]
            cl_signaling_matrices: Incoming signaling per receptor cluster
            linkages: Linkage index
            cor: Receptor/feature correlation matrix
            clust_de: Feature enrichment per cluster

        Returns:
            A new, built SignalingNetwork
        """
        for label in list(signaling.index) + list(signaling.columns):
            ClusterKey.parse(label)

        return replace(
            self,
            signaling=signaling.copy(),
            cl_signaling_matrices={str(k): v.copy() for k, v in cl_signaling_matrices.items()},
            linkages=linkages,
            cor=cor.copy() if cor is not None else self.cor,
            clust_de=clust_de.copy() if clust_de is not None else self.clust_de,
            built=True,
        )


def _rename_labels(labels, mapping: Mapping[str, str]) -> List[str]:
    renamed = []
    for label in labels:
        key = ClusterKey.parse(label)
        renamed.append(ClusterKey(key.role, mapping.get(key.cluster, key.cluster)).label)
    return renamed


def rename_clusters(
    network: SignalingNetwork,
    mapping: Mapping,
) -> SignalingNetwork:
    """
    Rename clusters everywhere they are referenced.

    Args:
        network: SignalingNetwork to rename clusters in
        mapping: Old cluster name -> new cluster name. Clusters missing from
            the mapping keep their name.

    Returns:
        A new SignalingNetwork with clusters renamed in the cluster assignment,
        clust_de, linkages and all signaling matrices.
    """
    if not network.has_clusters:
        raise PreconditionError('There are no clusters in this network.')

    mapping = {str(k): str(v) for k, v in mapping.items()}
    unknown = [k for k in mapping if k not in network.cluster_levels]
    if unknown:
        raise ConfigError(f"Unknown clusters: {', '.join(unknown)}")

    updates = {}
    if network.created:
        updates['clusters'] = network.clusters.cat.rename_categories(
            lambda cl: mapping.get(cl, cl)
        )
        if network.clust_de is not None:
            clust_de = network.clust_de.copy()
            clust_de.columns = [mapping.get(str(cl), str(cl)) for cl in clust_de.columns]
            updates['clust_de'] = clust_de

    if network.built:
        updates['linkages'] = network.linkages.rename_clusters(mapping)
        if network.signaling is not None:
            signaling = network.signaling.copy()
            signaling.index = _rename_labels(signaling.index, mapping)
            signaling.columns = _rename_labels(signaling.columns, mapping)
            updates['signaling'] = signaling
        cl_matrices = {}
        for cl, mat in network.cl_signaling_matrices.items():
            mat = mat.copy()
            mat.columns = _rename_labels(mat.columns, mapping)
            cl_matrices[mapping.get(cl, cl)] = mat
        updates['cl_signaling_matrices'] = cl_matrices

    return replace(network, **updates)
