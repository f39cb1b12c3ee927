import json
import os
import subprocess
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import main
from geometry.geom_io import load_mesh, read_obj
from runtime.layout import layout_with_fr_3d
from sample_meshes import (
    OCTAHEDRON_FACES,
    OCTAHEDRON_VERTICES,
    OPEN_PYRAMID_FACES,
    TETRAHEDRON_FACES,
    TETRAHEDRON_VERTICES,
    write_sample_mesh,
    write_sample_obj,
)


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _run_main(*args: str) -> subprocess.CompletedProcess:
    root = _repo_root()
    env = dict(os.environ, MPLBACKEND="Agg")
    cmd = [sys.executable, str(root / "main.py"), *args]
    return subprocess.run(
        cmd,
        cwd=root,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )


def test_obj_in_obj_out(tmp_path):
    src = write_sample_obj(tmp_path)
    out = tmp_path / "laid_out.obj"

    proc = _run_main(
        "-i", src, "-o", str(out), "--dist-opt", "1.0", "--temp-start", "0.1",
        "--n-iter", "1", "-q",
    )

    assert proc.returncode == 0, proc.stderr
    result = read_obj(out)
    expected = layout_with_fr_3d(TETRAHEDRON_VERTICES, TETRAHEDRON_FACES, 1.0, 0.1, 1)
    assert np.array_equal(result.faces, np.array(TETRAHEDRON_FACES))
    assert np.array_equal(result.vertices, expected)


def test_input_extension_may_be_omitted(tmp_path):
    src = write_sample_obj(tmp_path, name="tetra.obj")
    out = tmp_path / "out.json"

    proc = _run_main("-i", str(tmp_path / "tetra"), "-o", str(out), "-q")

    assert proc.returncode == 0, proc.stderr
    data = json.loads(out.read_text())
    assert len(data["vertices"]) == 4
    assert data["faces"] == TETRAHEDRON_FACES


def test_missing_input_exits_with_error(tmp_path):
    proc = _run_main("-i", str(tmp_path / "nope.obj"), "-q")

    assert proc.returncode == 1
    assert "Cannot find file" in proc.stderr


def test_open_mesh_exits_with_error(tmp_path):
    src = write_sample_obj(tmp_path, faces=OPEN_PYRAMID_FACES)
    log_file = tmp_path / "run.log"

    proc = _run_main("-i", src, "-q", "--log", str(log_file))

    assert proc.returncode == 1
    log_text = log_file.read_text()
    assert "nV: 4, nE: 6, nF: 3" in log_text
    assert "Layout failed" in log_text


def test_invalid_parameter_exits_with_error(tmp_path):
    src = write_sample_obj(tmp_path)

    proc = _run_main("-i", src, "--dist-opt", "0")

    assert proc.returncode == 1
    assert "dist_opt must be > 0" in proc.stderr


def test_viz_save_writes_image(tmp_path):
    src = write_sample_obj(tmp_path)
    image = tmp_path / "layout.png"

    proc = _run_main("-i", src, "--viz-save", str(image), "-q")

    assert proc.returncode == 0, proc.stderr
    assert image.stat().st_size > 0


def test_parameter_precedence(tmp_path):
    # mesh document: n_iter=4, temp_start=0.05, dist_opt=1.0
    mesh_path = write_sample_mesh(tmp_path)
    config = tmp_path / "params.yaml"
    config.write_text("dist_opt: 0.7\nn_iter: 6\n")
    args = main.create_parser().parse_args(
        ["-i", mesh_path, "--config", str(config), "--n-iter", "2"]
    )

    params = main.build_parameters(load_mesh(mesh_path), args)

    assert params.dist_opt == 0.7
    assert params.temp_start == 0.05
    assert params.n_iter == 2


def test_main_in_process_returns_layout(tmp_path):
    mesh_path = write_sample_mesh(tmp_path)
    out = tmp_path / "out.yaml"

    result = main.main(["-i", mesh_path, "-o", str(out), "-q"])

    expected = layout_with_fr_3d(OCTAHEDRON_VERTICES, OCTAHEDRON_FACES, 1.0, 0.05, 4)
    assert np.array_equal(result.vertices, expected)
    assert np.array_equal(load_mesh(out).vertices, expected)


def test_main_in_process_exits_on_bad_topology(tmp_path):
    src = write_sample_obj(tmp_path, faces=OPEN_PYRAMID_FACES)

    with pytest.raises(SystemExit) as excinfo:
        main.main(["-i", src, "-q"])
    assert excinfo.value.code == 1


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


@pytest.mark.parametrize(
    "name, text, message",
    [
        (
            "flat.json",
            json.dumps({"vertices": [[0, 0], [1, 0], [0, 1]], "faces": [[0, 1, 2]]}),
            "vertices must have shape (N, 3)",
        ),
        (
            "nan.obj",
            "v nan 0 0\nv 1 0 0\nv 0 1 0\nv 0 0 1\nf 1 2 3\nf 1 4 2\nf 1 3 4\nf 2 4 3\n",
            "non-finite coordinates",
        ),
        ("mesh.stl", "solid empty\nendsolid empty\n", "Unsupported file format"),
        ("broken.json", '{"vertices": [[0, 0, 0],', "Expecting"),
        ("broken.yaml", "vertices: [[0, 0, 0]\nfaces: {", "Layout failed"),
    ],
)
def test_bad_input_files_exit_cleanly(tmp_path, name, text, message):
    src = _write(tmp_path, name, text)

    proc = _run_main("-i", src)

    assert proc.returncode == 1
    assert "Layout failed" in proc.stderr
    assert message in proc.stderr
    assert "Traceback" not in proc.stderr


def test_missing_config_exits_cleanly(tmp_path):
    src = write_sample_obj(tmp_path)

    proc = _run_main("-i", src, "--config", str(tmp_path / "nope.yaml"))

    assert proc.returncode == 1
    assert "Layout failed" in proc.stderr
    assert "nope.yaml" in proc.stderr
    assert "Traceback" not in proc.stderr


def test_progress_flag_prints_iterations_to_console(tmp_path):
    src = write_sample_obj(tmp_path)

    quiet_proc = _run_main("-i", src, "--n-iter", "2", "--debug")
    loud_proc = _run_main("-i", src, "--n-iter", "2", "--debug", "--progress")

    assert quiet_proc.returncode == 0, quiet_proc.stderr
    assert loud_proc.returncode == 0, loud_proc.stderr
    assert "Iteration 1/2" not in quiet_proc.stderr
    assert "[iter 2]" in loud_proc.stderr
    assert "Iteration 2/2" in loud_proc.stderr
