# geometry/entities.py

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np

from core.exceptions import DegenerateTopologyError, VertexIndexError
from runtime.topology import euler_characteristic, extract_edges, genus

logger = logging.getLogger("mesh_layout")


def as_vertex_array(vertices) -> np.ndarray:
    """Return an independent ``(N, 3)`` float copy of ``vertices``.

    Raises ``ValueError`` for arrays of the wrong shape or with non-finite
    coordinates.
    """
    arr = np.array(vertices, dtype=float)
    if arr.size == 0:
        arr = arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"vertices must have shape (N, 3); got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        bad = np.flatnonzero(~np.all(np.isfinite(arr), axis=1))
        raise ValueError(f"vertices contain non-finite coordinates at rows {bad.tolist()}")
    return arr


def as_face_array(faces, n_vertices: int) -> np.ndarray:
    """Return an ``(F, 3)`` integer copy of ``faces`` checked against ``n_vertices``.

    Every index must lie in ``[0, n_vertices)`` and a face may not repeat a
    vertex.
    """
    arr = np.array(faces)
    if arr.size == 0:
        arr = arr.reshape(0, 3)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"faces must have shape (F, 3); got {arr.shape}")
    if arr.dtype.kind not in "iu":
        if arr.dtype.kind != "f" or not np.all(np.isfinite(arr)) or np.any(arr != np.round(arr)):
            raise ValueError(f"faces must hold integer vertex indices; got dtype {arr.dtype}")
    arr = arr.astype(np.int64)

    out_of_range = (arr < 0) | (arr >= n_vertices)
    if np.any(out_of_range):
        fi, corner = np.argwhere(out_of_range)[0]
        raise VertexIndexError(int(fi), int(arr[fi, corner]), int(n_vertices))

    repeated = (
        (arr[:, 0] == arr[:, 1]) | (arr[:, 1] == arr[:, 2]) | (arr[:, 2] == arr[:, 0])
    )
    if np.any(repeated):
        fi = int(np.flatnonzero(repeated)[0])
        raise DegenerateTopologyError(
            f"Face {fi} repeats a vertex: {arr[fi].tolist()}",
            n_vertices=int(n_vertices),
            n_edges=len(extract_edges(arr)),
            n_faces=len(arr),
        )
    return arr


@dataclass
class TriangleMesh:
    """Vertex positions plus triangle connectivity.

    ``vertices`` is an ``(N, 3)`` float array whose row index is the vertex
    identifier; ``faces`` is an ``(F, 3)`` array of 0-based row indices.
    ``global_parameters`` carries layout parameters read alongside the mesh.
    """

    vertices: np.ndarray
    faces: np.ndarray
    global_parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.vertices = as_vertex_array(self.vertices)
        self.faces = as_face_array(self.faces, len(self.vertices))

    @property
    def n_vertices(self) -> int:
        return len(self.vertices)

    @property
    def n_faces(self) -> int:
        return len(self.faces)

    def edges(self) -> np.ndarray:
        return extract_edges(self.faces)

    def euler_characteristic(self) -> int:
        return euler_characteristic(self.n_vertices, len(self.edges()), self.n_faces)

    def genus(self) -> float:
        return genus(self.n_vertices, len(self.edges()), self.n_faces)

    def copy(self) -> "TriangleMesh":
        return TriangleMesh(
            self.vertices.copy(), self.faces.copy(), dict(self.global_parameters)
        )

    def with_vertices(self, vertices) -> "TriangleMesh":
        """Return a new mesh sharing this connectivity with new positions."""
        new_vertices = as_vertex_array(vertices)
        if len(new_vertices) != self.n_vertices:
            raise ValueError(
                f"expected {self.n_vertices} vertices; got {len(new_vertices)}"
            )
        return TriangleMesh(new_vertices, self.faces.copy(), dict(self.global_parameters))
