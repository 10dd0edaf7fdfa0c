"""
Linkage Index

Three-tier mapping from clusters to the transcription factors enriched in
them, from transcription factors to correlated receptors, and from receptors
to the ligands that can activate them. Built once by the network-build step
and read-only afterwards.
"""

import pandas as pd
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import ConfigError


Linkage = Dict[str, Tuple[str, ...]]


def _freeze(mapping: Optional[Mapping]) -> Linkage:
    """Copy a mapping of lists into a dict of tuples, keeping key order."""
    if mapping is None:
        return {}
    frozen = {}
    for key, values in mapping.items():
        if values is None:
            values = ()
        elif isinstance(values, str):
            values = (values,)
        frozen[str(key)] = tuple(str(v) for v in values)
    return frozen


def _read_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read a linkage table from csv, tsv or excel."""
    path = Path(path)

    if path.suffix == '.csv':
        return pd.read_csv(path)
    elif path.suffix in ['.xlsx', '.xls']:
        return pd.read_excel(path)
    elif path.suffix in ['.tsv', '.txt']:
        return pd.read_csv(path, sep='\t')
    else:
        raise ConfigError(f"Unsupported file format: {path.suffix}")


def _group_table(
    table: Optional[pd.DataFrame],
    key_col: str,
    value_col: str,
) -> Linkage:
    """Collapse a long two-column table into key -> values, first-seen order."""
    if table is None:
        return {}

    required = {key_col, value_col}
    if not required.issubset(table.columns):
        raise ConfigError(f"Linkage table must have columns: {sorted(required)}")

    grouped: Dict[str, List[str]] = {}
    for key, value in zip(table[key_col], table[value_col]):
        values = grouped.setdefault(str(key), [])
        if pd.isna(value):
            continue
        value = str(value)
        if value not in values:
            values.append(value)
    return _freeze(grouped)


class LinkageIndex:
    """
    Read-only cluster -> TF -> receptor -> ligand linkages.

    Missing keys behave as empty linkages so traversal never needs to check
    for membership first.

    Args:
        clust_tf: Mapping of cluster -> transcription factors
        tf_rec: Mapping of transcription factor -> receptors
        rec_lig: Mapping of receptor -> ligands
    """

    def __init__(
        self,
        clust_tf: Optional[Mapping[str, Sequence[str]]] = None,
        tf_rec: Optional[Mapping[str, Sequence[str]]] = None,
        rec_lig: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        self._clust_tf = _freeze(clust_tf)
        self._tf_rec = _freeze(tf_rec)
        self._rec_lig = _freeze(rec_lig)

    @classmethod
    def from_frames(
        cls,
        clust_tf: Optional[pd.DataFrame] = None,
        tf_rec: Optional[pd.DataFrame] = None,
        rec_lig: Optional[pd.DataFrame] = None,
    ) -> 'LinkageIndex':
        """
        Build the index from long tables.

        Args:
            clust_tf: Table with 'cluster' and 'feature' columns
            tf_rec: Table with 'feature' and 'receptor' columns
            rec_lig: Table with 'receptor' and 'ligand' columns

        Returns:
            LinkageIndex
        """
        return cls(
            clust_tf=_group_table(clust_tf, 'cluster', 'feature'),
            tf_rec=_group_table(tf_rec, 'feature', 'receptor'),
            rec_lig=_group_table(rec_lig, 'receptor', 'ligand'),
        )

    @classmethod
    def from_files(
        cls,
        clust_tf_path: Optional[Union[str, Path]] = None,
        tf_rec_path: Optional[Union[str, Path]] = None,
        rec_lig_path: Optional[Union[str, Path]] = None,
    ) -> 'LinkageIndex':
        """Load the three linkage tables from csv/tsv/excel files."""
        tables = [
            _read_table(p) if p is not None else None
            for p in (clust_tf_path, tf_rec_path, rec_lig_path)
        ]
        index = cls.from_frames(*tables)
        print(f"Loaded linkages for {len(index.clusters)} clusters, "
              f"{len(index.tf_rec)} features, {len(index.rec_lig)} receptors")
        return index

    @staticmethod
    def rec_lig_from_pairs(lr_pairs: pd.DataFrame) -> Linkage:
        """
        Build a receptor -> ligands mapping from a ligand-receptor pair table.

        Args:
            lr_pairs: DataFrame with 'ligand' and 'receptor' columns

        Returns:
            Mapping of receptor -> ligands, in order of first appearance
        """
        return _group_table(lr_pairs, 'receptor', 'ligand')

    @property
    def clust_tf(self) -> Mapping[str, Tuple[str, ...]]:
        return dict(self._clust_tf)

    @property
    def tf_rec(self) -> Mapping[str, Tuple[str, ...]]:
        return dict(self._tf_rec)

    @property
    def rec_lig(self) -> Mapping[str, Tuple[str, ...]]:
        return dict(self._rec_lig)

    @property
    def clusters(self) -> List[str]:
        return list(self._clust_tf)

    def features_for(self, cluster) -> Tuple[str, ...]:
        """Transcription factors enriched in a cluster."""
        return self._clust_tf.get(str(cluster), ())

    def receptors_for(self, feature) -> Tuple[str, ...]:
        """Receptors linked to a transcription factor."""
        return self._tf_rec.get(str(feature), ())

    def ligands_for(self, receptor) -> Tuple[str, ...]:
        """Ligands that can activate a receptor."""
        return self._rec_lig.get(str(receptor), ())

    def all_features(self) -> List[str]:
        """Union of the transcription factors of every cluster."""
        feats = []
        for tfs in self._clust_tf.values():
            for tf in tfs:
                if tf not in feats:
                    feats.append(tf)
        return feats

    def rename_clusters(self, mapping: Mapping) -> 'LinkageIndex':
        """Return a new index with cluster keys renamed; unmapped keys stay."""
        mapping = {str(k): str(v) for k, v in mapping.items()}
        clust_tf = {mapping.get(cl, cl): tfs for cl, tfs in self._clust_tf.items()}
        return LinkageIndex(clust_tf, self._tf_rec, self._rec_lig)

    def to_dict(self) -> Dict[str, Dict[str, List[str]]]:
        """Plain-dict copy, e.g. for serialization."""
        return {
            'clust_tf': {k: list(v) for k, v in self._clust_tf.items()},
            'tf_rec': {k: list(v) for k, v in self._tf_rec.items()},
            'rec_lig': {k: list(v) for k, v in self._rec_lig.items()},
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, LinkageIndex):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(tuple(
            tuple(sorted(mapping.items()))
            for mapping in (self._clust_tf, self._tf_rec, self._rec_lig)
        ))

    def __repr__(self) -> str:
        return (f"LinkageIndex(clusters={len(self._clust_tf)}, "
                f"features={len(self._tf_rec)}, receptors={len(self._rec_lig)})")
