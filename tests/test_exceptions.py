import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from core.exceptions import (
    DegenerateTopologyError,
    InvalidParameterError,
    MeshFormatError,
    MeshLayoutError,
    VertexIndexError,
)
from geometry.entities import TriangleMesh
from sample_meshes import TETRAHEDRON_FACES, TETRAHEDRON_VERTICES


def test_all_errors_share_a_base_class():
    for exc_type in (
        InvalidParameterError,
        DegenerateTopologyError,
        VertexIndexError,
        MeshFormatError,
    ):
        assert issubclass(exc_type, MeshLayoutError)


def test_invalid_parameter_is_a_value_error():
    err = InvalidParameterError("dist_opt", -1.0)

    assert isinstance(err, ValueError)
    assert "dist_opt" in str(err)
    assert err.value == -1.0


def test_vertex_index_error_message_mentions_zero_based_indices():
    with pytest.raises(VertexIndexError) as excinfo:
        TriangleMesh(TETRAHEDRON_VERTICES, [[0, 1, 9]] + TETRAHEDRON_FACES[1:])

    assert isinstance(excinfo.value, IndexError)
    assert "Face indices are 0-based" in str(excinfo.value)
    assert excinfo.value.vertex_index == 9


def test_degenerate_topology_genus_needs_all_counts():
    assert DegenerateTopologyError("x", n_vertices=4).genus is None
    assert DegenerateTopologyError("x", n_vertices=4, n_edges=6, n_faces=4).genus == 0


def test_mesh_format_error_location_prefix():
    err = MeshFormatError("bad token", path="mesh.obj", line_number=12)

    assert str(err) == "mesh.obj:12: bad token"
    assert str(MeshFormatError("bad token")) == "bad token"
