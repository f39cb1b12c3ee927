"""Custom exception types for the mesh layout engine."""

from __future__ import annotations

from typing import Any


class MeshLayoutError(Exception):
    """Base class for domain-specific errors."""


class InvalidParameterError(MeshLayoutError, ValueError):
    """Raised when a layout parameter is outside its valid range."""

    def __init__(self, name: str, value: Any, message: str | None = None) -> None:
        if message is None:
            message = f"Invalid value for parameter {name!r}: {value!r}."
        super().__init__(message)
        self.name = name
        self.value = value


class DegenerateTopologyError(MeshLayoutError):
    """Raised when a mesh is not a closed, genus-0 triangulated 2-manifold."""

    def __init__(
        self,
        message: str,
        *,
        n_vertices: int | None = None,
        n_edges: int | None = None,
        n_faces: int | None = None,
    ) -> None:
        super().__init__(message)
        self.n_vertices = n_vertices
        self.n_edges = n_edges
        self.n_faces = n_faces

    @property
    def genus(self) -> float | None:
        """Genus implied by the Euler characteristic, ``1 - (V - E + F) / 2``."""
        if None in (self.n_vertices, self.n_edges, self.n_faces):
            return None
        return 1 - 0.5 * (self.n_vertices - self.n_edges + self.n_faces)


class VertexIndexError(MeshLayoutError, IndexError):
    """Raised when a face references a vertex index outside ``[0, N)``."""

    def __init__(
        self,
        face_index: int,
        vertex_index: int,
        n_vertices: int,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = (
                f"Face {face_index} references vertex {vertex_index}, "
                f"but the mesh has {n_vertices} vertices. "
                "Face indices are 0-based."
            )
        super().__init__(message)
        self.face_index = face_index
        self.vertex_index = vertex_index
        self.n_vertices = n_vertices


class MeshFormatError(MeshLayoutError):
    """Raised when a mesh file cannot be parsed."""

    def __init__(
        self, message: str, *, path: str | None = None, line_number: int | None = None
    ) -> None:
        location = ""
        if path is not None:
            location = f"{path}"
            if line_number is not None:
                location += f":{line_number}"
            location += ": "
        super().__init__(location + message)
        self.path = path
        self.line_number = line_number


__all__ = [
    "MeshLayoutError",
    "InvalidParameterError",
    "DegenerateTopologyError",
    "VertexIndexError",
    "MeshFormatError",
]
