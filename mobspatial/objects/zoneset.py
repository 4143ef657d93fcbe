"""Immutable zone collection with planar centroids."""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd

from mobspatial.utils.errors import raise_validation_error


@dataclass(frozen=True)
class ZoneSet:
    """Ordered, index-stable set of zones.

    Index ``i`` of every weights matrix, value vector and result built from a
    ZoneSet refers to the i-th zone here. Centroids must already be in a
    projected (metric) coordinate system.

    Attributes:
        ids: Unique zone identifiers (n,).
        centroids: Planar centroid coordinates (n, 2).
        attributes: Optional per-zone attributes (population, area, ...),
            one row per zone in the same order.
    """

    ids: np.ndarray
    centroids: np.ndarray
    attributes: Optional[pd.DataFrame] = None

    def __post_init__(self) -> None:
        """Validate and normalize ZoneSet fields."""
        ids = np.asarray(self.ids)
        centroids = np.asarray(self.centroids, dtype=float)

        if ids.ndim != 1:
            raise_validation_error(
                "Zone ids must be one-dimensional",
                expected="shape (n,)",
                received=f"shape {ids.shape}",
            )
        if centroids.ndim != 2 or centroids.shape[1] != 2:
            raise_validation_error(
                "Centroids must be an (n, 2) array",
                expected="shape (n, 2)",
                received=f"shape {centroids.shape}",
            )
        if len(ids) != len(centroids):
            raise_validation_error(
                "Zone ids and centroids must have the same length",
                expected=str(len(ids)),
                received=str(len(centroids)),
            )
        if len(pd.unique(ids)) != len(ids):
            duplicated = pd.Series(ids)[pd.Series(ids).duplicated()].tolist()
            raise_validation_error(
                "Zone ids must be unique",
                received=f"duplicated ids {duplicated[:5]}",
            )

        attributes = self.attributes
        if attributes is not None:
            if len(attributes) != len(ids):
                raise_validation_error(
                    "Attributes must have one row per zone",
                    expected=str(len(ids)),
                    received=str(len(attributes)),
                )
            attributes = attributes.reset_index(drop=True)

        object.__setattr__(self, "ids", ids)
        object.__setattr__(self, "centroids", centroids)
        object.__setattr__(self, "attributes", attributes)

    def __len__(self) -> int:
        return len(self.ids)

    def __repr__(self) -> str:
        """String representation."""
        attrs = list(self.attributes.columns) if self.attributes is not None else []
        return f"ZoneSet(n_zones={len(self)}, attributes={attrs})"

    def index_of(self, zone_id: Any) -> int:
        """Return the row index of ``zone_id``.

        Raises:
            KeyError: If the id is not part of the set.
        """
        matches = np.flatnonzero(self.ids == zone_id)
        if len(matches) == 0:
            raise KeyError(f"Unknown zone id: {zone_id!r}")
        return int(matches[0])

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        id_column: str = "id",
        x_column: str = "x",
        y_column: str = "y",
    ) -> "ZoneSet":
        """Build a ZoneSet from a table with one row per zone.

        Columns other than the id and coordinate columns become attributes.

        Args:
            frame: Zone table.
            id_column: Column holding zone identifiers, default 'id'.
            x_column: Column holding projected x coordinates, default 'x'.
            y_column: Column holding projected y coordinates, default 'y'.

        Returns:
            ZoneSet in the row order of ``frame``.

        Example:
            >>> zones = ZoneSet.from_frame(
            ...     pd.DataFrame({"id": ["a", "b"], "x": [0, 1], "y": [0, 0]})
            ... )
            >>> len(zones)
            2
        """
        missing = [c for c in (id_column, x_column, y_column) if c not in frame.columns]
        if missing:
            raise_validation_error(
                f"Missing required columns: {', '.join(missing)}",
                expected=f"columns {id_column!r}, {x_column!r}, {y_column!r}",
                received=f"columns {list(frame.columns)}",
            )

        extra = [c for c in frame.columns if c not in (id_column, x_column, y_column)]
        attributes = frame[extra].reset_index(drop=True) if extra else None
        return cls(
            ids=frame[id_column].to_numpy(),
            centroids=frame[[x_column, y_column]].to_numpy(dtype=float),
            attributes=attributes,
        )
