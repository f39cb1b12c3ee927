# geometry/geom_io.py
import json
import logging
import os

import yaml

from core.exceptions import DegenerateTopologyError, MeshFormatError
from geometry.entities import TriangleMesh
from runtime.topology import check_closed_genus0, genus

logger = logging.getLogger("mesh_layout")

# OBJ statements that carry nothing the layout needs.
IGNORED_OBJ_KEYWORDS = {"#", "vt", "vn", "vp", "o", "g", "s", "mtllib", "usemtl", "l"}


def _parse_obj_index(token: str, path: str, line_number: int) -> int:
    """Return the 0-based vertex index from an OBJ face token (``i``, ``i/t``, ``i//n``, ``i/t/n``)."""
    head = token.split("/", 1)[0]
    try:
        idx = int(head)
    except ValueError:
        raise MeshFormatError(
            f"invalid face vertex reference {token!r}", path=path, line_number=line_number
        ) from None
    if idx <= 0:
        raise MeshFormatError(
            f"face vertex references are 1-based; got {token!r}",
            path=path,
            line_number=line_number,
        )
    return idx - 1


def _log_topology_counts(n_vertices, n_edges, n_faces, path=None) -> None:
    logger.error(
        "nV: %d, nE: %d, nF: %d, g = 1 - 0.5 * (nV - nE + nF) = %g",
        n_vertices,
        n_edges,
        n_faces,
        genus(n_vertices, n_edges, n_faces),
    )
    if path is not None:
        logger.error("Input mesh is not 2-manifold with genus 0: %s", path)


def validate_genus0(mesh: TriangleMesh, path: str | None = None) -> None:
    """Check the Euler relation and log the counts before raising on violation."""
    n_edges = len(mesh.edges())
    try:
        check_closed_genus0(mesh.n_vertices, n_edges, mesh.n_faces)
    except DegenerateTopologyError:
        _log_topology_counts(mesh.n_vertices, n_edges, mesh.n_faces, path)
        raise


def read_obj(path, validate: bool = True) -> TriangleMesh:
    """Read a triangle mesh from a Wavefront OBJ file.

    Only ``v`` and ``f`` statements are used; normals, texture coordinates,
    grouping and material statements are skipped. Face indices are 1-based
    on disk and 0-based in the returned mesh.
    """
    path_str = str(path)
    vertices = []
    faces = []

    with open(path_str, "r") as f:
        for line_number, line in enumerate(f, start=1):
            parts = line.split()
            if not parts:
                continue
            keyword = parts[0]
            if keyword == "v":
                if len(parts) < 4:
                    raise MeshFormatError(
                        "vertex needs three coordinates", path=path_str, line_number=line_number
                    )
                try:
                    vertices.append([float(x) for x in parts[1:4]])
                except ValueError:
                    raise MeshFormatError(
                        f"invalid vertex coordinates {parts[1:4]!r}",
                        path=path_str,
                        line_number=line_number,
                    ) from None
            elif keyword == "f":
                if len(parts) != 4:
                    raise MeshFormatError(
                        f"only triangular faces are supported; got {len(parts) - 1} vertices",
                        path=path_str,
                        line_number=line_number,
                    )
                faces.append(
                    [_parse_obj_index(tok, path_str, line_number) for tok in parts[1:]]
                )
            elif keyword in IGNORED_OBJ_KEYWORDS or keyword.startswith("#"):
                continue
            else:
                logger.debug("%s:%d: ignoring OBJ statement %r", path_str, line_number, keyword)

    try:
        mesh = TriangleMesh(vertices, faces)
    except DegenerateTopologyError as exc:
        _log_topology_counts(exc.n_vertices, exc.n_edges, exc.n_faces, path_str)
        raise
    logger.info(
        "Read %d vertices and %d faces from %s", mesh.n_vertices, mesh.n_faces, path_str
    )
    if validate:
        validate_genus0(mesh, path_str)
    return mesh


def write_obj(mesh_or_vertices, faces=None, path=None) -> None:
    """Write a mesh as Wavefront OBJ with 1-based face indices.

    Accepts ``write_obj(mesh, path)`` or ``write_obj(vertices, faces, path)``
    where ``faces`` holds 0-based indices.
    """
    if isinstance(mesh_or_vertices, TriangleMesh):
        mesh = mesh_or_vertices
        if path is None:
            path = faces
    else:
        mesh = TriangleMesh(mesh_or_vertices, faces)
    if path is None:
        raise TypeError("write_obj() missing the output path")
    with open(str(path), "w") as f:
        for x, y, z in mesh.vertices.tolist():
            f.write(f"v {x!r} {y!r} {z!r}\n")
        for a, b, c in mesh.faces.tolist():
            f.write(f"f {a + 1} {b + 1} {c + 1}\n")
    logger.info("Wrote %d vertices and %d faces to %s", mesh.n_vertices, mesh.n_faces, path)


def load_data(filename):
    """Load a mesh document from a JSON or YAML file.

    Expected format:
    {
        "vertices": [[x, y, z], ...],
        "faces": [[i, j, k], ...],
        "global_parameters": {"dist_opt": 0.5, "temp_start": 0.1, "n_iter": 1}
    }"""
    filename_str = str(filename)
    with open(filename_str, "r") as f:
        if filename_str.endswith((".yaml", ".yml")):
            data = yaml.safe_load(f)
        elif filename_str.endswith(".json"):
            data = json.load(f)
        else:
            logger.error(f"Unsupported file format for: {filename_str}")
            raise ValueError(f"Unsupported file format for: {filename_str}")

    return data


def parse_mesh(data: dict) -> TriangleMesh:
    if not isinstance(data, dict):
        raise MeshFormatError("mesh document must be a mapping")
    for key in ("vertices", "faces"):
        if key not in data:
            raise MeshFormatError(f"mesh document is missing {key!r}")

    global_params = data.get("global_parameters") or {}
    if not isinstance(global_params, dict):
        raise MeshFormatError("global_parameters must be a mapping")

    return TriangleMesh(data["vertices"], data["faces"], dict(global_params))


def _mesh_document(mesh: TriangleMesh) -> dict:
    return {
        "vertices": mesh.vertices.tolist(),
        "faces": mesh.faces.tolist(),
        "global_parameters": dict(mesh.global_parameters),
    }


def save_mesh(mesh: TriangleMesh, path, *, compact: bool = False) -> None:
    data = _mesh_document(mesh)
    with open(str(path), "w") as f:
        if compact:
            json.dump(data, f, separators=(",", ":"), ensure_ascii=False)
        else:
            json.dump(data, f, indent=4, ensure_ascii=False)


def load_mesh(path, validate: bool = True) -> TriangleMesh:
    """Load a mesh from ``.obj``, ``.json``, ``.yaml`` or ``.yml``."""
    path_str = str(path)
    ext = os.path.splitext(path_str)[1].lower()
    if ext == ".obj":
        return read_obj(path_str, validate=validate)
    if ext in (".json", ".yaml", ".yml"):
        mesh = parse_mesh(load_data(path_str))
        if validate:
            validate_genus0(mesh, path_str)
        return mesh
    logger.error(f"Unsupported file format for: {path_str}")
    raise ValueError(f"Unsupported file format for: {path_str}")


def save_mesh_file(mesh: TriangleMesh, path, *, compact: bool = False) -> None:
    """Write ``mesh`` in the format implied by the extension of ``path``."""
    path_str = str(path)
    ext = os.path.splitext(path_str)[1].lower()
    if ext == ".obj":
        write_obj(mesh, path_str)
    elif ext == ".json":
        save_mesh(mesh, path_str, compact=compact)
    elif ext in (".yaml", ".yml"):
        with open(path_str, "w") as f:
            yaml.safe_dump(
                _mesh_document(mesh), f, default_flow_style=None, sort_keys=False
            )
    else:
        logger.error(f"Unsupported file format for: {path_str}")
        raise ValueError(f"Unsupported file format for: {path_str}")


__all__ = [
    "read_obj",
    "write_obj",
    "load_data",
    "parse_mesh",
    "save_mesh",
    "load_mesh",
    "save_mesh_file",
    "validate_genus0",
]
