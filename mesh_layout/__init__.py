"""Package utilities for mesh-fr-layout.

The layout core lives in top-level packages like `geometry/`, `runtime/` and
`parameters/`. This package provides a stable import path for the public
entry points and the installed version.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from core.exceptions import (
    DegenerateTopologyError,
    InvalidParameterError,
    MeshFormatError,
    MeshLayoutError,
    VertexIndexError,
)
from geometry.entities import TriangleMesh
from geometry.geom_io import load_mesh, read_obj, save_mesh_file, write_obj
from parameters.global_parameters import LayoutParameters
from runtime.layout import layout_mesh, layout_with_fr_3d
from runtime.topology import extract_edges

try:
    __version__ = version("mesh-fr-layout")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "DegenerateTopologyError",
    "InvalidParameterError",
    "LayoutParameters",
    "MeshFormatError",
    "MeshLayoutError",
    "TriangleMesh",
    "VertexIndexError",
    "extract_edges",
    "layout_mesh",
    "layout_with_fr_3d",
    "load_mesh",
    "read_obj",
    "save_mesh_file",
    "write_obj",
]
