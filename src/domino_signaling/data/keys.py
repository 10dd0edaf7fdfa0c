"""
Typed row/column keys for signaling matrices.

Signaling matrices share one label namespace for two roles: rows are
receptor-expressing clusters ("R_<cluster>") and columns are
ligand-expressing clusters ("L_<cluster>").
"""

from enum import Enum
from typing import Iterable, List, NamedTuple

from ..errors import ConfigError


class ClusterRole(str, Enum):
    RECEPTOR = 'R'
    LIGAND = 'L'


class ClusterKey(NamedTuple):
    """A cluster identifier tagged with the role it plays in a matrix."""

    role: ClusterRole
    cluster: str

    @classmethod
    def receptor(cls, cluster) -> 'ClusterKey':
        return cls(ClusterRole.RECEPTOR, str(cluster))

    @classmethod
    def ligand(cls, cluster) -> 'ClusterKey':
        return cls(ClusterRole.LIGAND, str(cluster))

    @property
    def label(self) -> str:
        return f"{self.role.value}_{self.cluster}"

    @classmethod
    def parse(cls, label: str) -> 'ClusterKey':
        """
        Parse an "R_<cluster>" / "L_<cluster>" label.

        Only the first underscore separates the prefix, so cluster names may
        contain underscores themselves.
        """
        prefix, sep, cluster = str(label).partition('_')
        if not sep:
            raise ConfigError(f"Not a cluster key label: {label!r}")
        try:
            role = ClusterRole(prefix)
        except ValueError:
            raise ConfigError(f"Unknown cluster key prefix in {label!r}") from None
        return cls(role, cluster)

    def __str__(self) -> str:
        return self.label


def receptor_labels(clusters: Iterable) -> List[str]:
    """Row labels of a signaling matrix for the given clusters."""
    return [ClusterKey.receptor(cl).label for cl in clusters]


def ligand_labels(clusters: Iterable) -> List[str]:
    """Column labels of a signaling matrix for the given clusters."""
    return [ClusterKey.ligand(cl).label for cl in clusters]
