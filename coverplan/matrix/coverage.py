"""
Sparse camera x cell coverage matrix.

The matrix maps camera id -> cell id -> bool. Lookups of entries that are
not stored return :attr:`CoverageMatrix.DEFAULT` (False, "not covered").
This makes the dense form produced by the builder and the sparse form
produced by :func:`coverplan.matrix.reducer.remove_redundant_false`
interchangeable for every consumer.
"""

from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Optional, Tuple, Union
import numpy as np


class CoverageMatrix:
    """
    Camera x cell boolean coverage table with "absent means False" lookups.

    Cell ids are tracked per camera row and in a registry of known cells,
    so a cell that is stored as False for every camera is still part of
    :attr:`cell_ids` until it is removed explicitly.

    Example:
        >>> matrix = CoverageMatrix({1: {10: True, 11: False}, 2: {10: False, 11: True}})
        >>> matrix.get(1, 11)
        False
        >>> matrix.coverage(2)
        frozenset({11})
    """

    DEFAULT = False

    def __init__(self, rows: Optional[Mapping[int, Mapping[int, bool]]] = None):
        self._rows: Dict[int, Dict[int, bool]] = {}
        self._cells: set = set()
        if rows:
            for camera_id, cells in rows.items():
                self.add_camera(camera_id)
                for cell_id, value in cells.items():
                    self.set(camera_id, cell_id, value)

    # -------------------------------------------------------------------------
    # Construction and access
    # -------------------------------------------------------------------------

    def add_camera(self, camera_id: int) -> None:
        """Register a camera row (no-op if it exists)."""
        self._rows.setdefault(int(camera_id), {})

    def add_cell(self, cell_id: int) -> None:
        """Register a cell column without storing any entry."""
        self._cells.add(int(cell_id))

    def set(self, camera_id: int, cell_id: int, value: bool) -> None:
        """Store an explicit entry."""
        camera_id = int(camera_id)
        cell_id = int(cell_id)
        self._rows.setdefault(camera_id, {})[cell_id] = bool(value)
        self._cells.add(cell_id)

    def get(self, camera_id: int, cell_id: int) -> bool:
        """Entry lookup; absent entries read as DEFAULT."""
        return self._rows.get(camera_id, {}).get(cell_id, self.DEFAULT)

    def has_entry(self, camera_id: int, cell_id: int) -> bool:
        """True if the entry is stored explicitly (True or False)."""
        return cell_id in self._rows.get(camera_id, {})

    @property
    def camera_ids(self) -> List[int]:
        """Camera ids in ascending order."""
        return sorted(self._rows)

    @property
    def cell_ids(self) -> List[int]:
        """Cell ids in ascending order."""
        return sorted(self._cells)

    @property
    def shape(self) -> Tuple[int, int]:
        """(camera count, cell count)."""
        return len(self._rows), len(self._cells)

    def row(self, camera_id: int) -> Dict[int, bool]:
        """Copy of the stored entries of one camera."""
        return dict(self._rows.get(camera_id, {}))

    def coverage(self, camera_id: int) -> FrozenSet[int]:
        """Ids of the cells the camera covers."""
        return frozenset(
            cell_id for cell_id, value in self._rows.get(camera_id, {}).items() if value
        )

    def covering_cameras(self, cell_id: int) -> List[int]:
        """Ids of the cameras covering a cell, ascending."""
        return [
            camera_id for camera_id in self.camera_ids
            if self._rows[camera_id].get(cell_id, self.DEFAULT)
        ]

    def __contains__(self, camera_id) -> bool:
        return camera_id in self._rows

    def __iter__(self) -> Iterator[int]:
        return iter(self.camera_ids)

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CoverageMatrix):
            return NotImplemented
        return self.to_dict(sparse=True) == other.to_dict(sparse=True) and (
            self._cells == other._cells
        )

    def __repr__(self) -> str:
        cameras, cells = self.shape
        return f"CoverageMatrix(cameras={cameras}, cells={cells})"

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def remove_camera(self, camera_id: int) -> None:
        """Drop a camera row entirely."""
        self._rows.pop(camera_id, None)

    def remove_cell(self, cell_id: int) -> None:
        """Drop a cell column from every row and from the registry."""
        for cells in self._rows.values():
            cells.pop(cell_id, None)
        self._cells.discard(cell_id)

    def merge(self, partial: Union["CoverageMatrix", Mapping[int, Mapping[int, bool]]]) -> None:
        """
        Union another matrix into this one, keyed by (camera id, cell id).

        Entries of ``partial`` overwrite existing ones. Merging disjoint
        partial results is commutative.
        """
        if isinstance(partial, CoverageMatrix):
            for camera_id in partial._rows:
                self.add_camera(camera_id)
            for cell_id in partial._cells:
                self.add_cell(cell_id)
            rows = partial._rows
        else:
            rows = partial

        for camera_id, cells in rows.items():
            self.add_camera(camera_id)
            for cell_id, value in cells.items():
                self.set(camera_id, cell_id, value)

    def copy(self) -> "CoverageMatrix":
        clone = CoverageMatrix()
        clone._rows = {camera_id: dict(cells) for camera_id, cells in self._rows.items()}
        clone._cells = set(self._cells)
        return clone

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def to_array(
        self,
        camera_ids: Optional[List[int]] = None,
        cell_ids: Optional[List[int]] = None,
    ) -> np.ndarray:
        """
        Dense boolean array of shape (cameras, cells).

        Args:
            camera_ids: Row order (default: ascending camera ids).
            cell_ids: Column order (default: ascending cell ids).
        """
        if camera_ids is None:
            camera_ids = self.camera_ids
        if cell_ids is None:
            cell_ids = self.cell_ids

        array = np.zeros((len(camera_ids), len(cell_ids)), dtype=bool)
        column = {cell_id: k for k, cell_id in enumerate(cell_ids)}
        for r, camera_id in enumerate(camera_ids):
            for cell_id, value in self._rows.get(camera_id, {}).items():
                if value and cell_id in column:
                    array[r, column[cell_id]] = True
        return array

    def to_dict(self, sparse: bool = False) -> Dict[int, Dict[int, bool]]:
        """
        Nested dict copy of the stored entries.

        Args:
            sparse: If True, omit False entries.
        """
        return {
            camera_id: {
                cell_id: value
                for cell_id, value in sorted(self._rows[camera_id].items())
                if value or not sparse
            }
            for camera_id in self.camera_ids
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "CoverageMatrix":
        """Create from a nested dict; string keys (as in JSON) are converted to int."""
        return cls({
            int(camera_id): {int(cell_id): bool(value) for cell_id, value in cells.items()}
            for camera_id, cells in data.items()
        })

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        camera_ids: Optional[Iterable[int]] = None,
        cell_ids: Optional[Iterable[int]] = None,
    ) -> "CoverageMatrix":
        """
        Create a dense matrix from a (cameras, cells) boolean array.

        Ids default to 1..n along each axis.
        """
        array = np.asarray(array, dtype=bool)
        n_cameras, n_cells = array.shape
        camera_ids = list(camera_ids) if camera_ids is not None else list(range(1, n_cameras + 1))
        cell_ids = list(cell_ids) if cell_ids is not None else list(range(1, n_cells + 1))

        matrix = cls()
        for r, camera_id in enumerate(camera_ids):
            matrix.add_camera(camera_id)
            for c, cell_id in enumerate(cell_ids):
                matrix.set(camera_id, cell_id, array[r, c])
        return matrix
