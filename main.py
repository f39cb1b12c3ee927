import argparse
import logging
import os
import sys

import yaml

from core.exceptions import MeshLayoutError
from geometry.geom_io import load_mesh, save_mesh_file
from parameters.global_parameters import LayoutParameters
from runtime.layout import layout_mesh
from runtime.logging_config import setup_logging

logger = logging.getLogger("mesh_layout")

MESH_EXTENSIONS = (".obj", ".json", ".yaml", ".yml")


def resolve_mesh_path(path: str) -> str:
    """Return a valid mesh file path, allowing a path without extension."""
    if os.path.isfile(path):
        return path
    if not path.lower().endswith(MESH_EXTENSIONS):
        for ext in MESH_EXTENSIONS:
            alt = path + ext
            if os.path.isfile(alt):
                return alt
    raise FileNotFoundError(f"Cannot find file '{path}' or '{path}.obj'")


def build_parameters(mesh, args) -> LayoutParameters:
    """Layer defaults, mesh parameters, ``--config`` and explicit flags."""
    params = LayoutParameters(mesh.global_parameters)
    if args.config:
        params.update(LayoutParameters.from_file(args.config).to_dict())
    if args.dist_opt is not None:
        params.set("dist_opt", args.dist_opt)
    if args.temp_start is not None:
        params.set("temp_start", args.temp_start)
    if args.n_iter is not None:
        params.set("n_iter", args.n_iter)
    params.validate()
    return params


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fruchterman-Reingold 3D layout for closed genus-0 triangle meshes"
    )
    parser.add_argument("-i", "--input", help="Input mesh file (.obj, .json, .yaml)")
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output mesh file; format follows the extension.",
    )
    parser.add_argument(
        "--config", default=None, help="YAML/JSON file with layout parameters"
    )
    parser.add_argument(
        "--dist-opt",
        type=float,
        default=None,
        help="Optimal distance between connected vertices (k).",
    )
    parser.add_argument(
        "--temp-start",
        type=float,
        default=None,
        help="Per-axis displacement cap of the first iteration.",
    )
    parser.add_argument(
        "--n-iter", type=int, default=None, help="Number of layout iterations."
    )
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip the genus-0 check while reading; the layout still enforces it.",
    )
    parser.add_argument(
        "--compact-output-json",
        action="store_true",
        help="Write output JSON in compact (single-line) form.",
    )
    parser.add_argument(
        "--viz",
        action="store_true",
        help="Visualize the resulting layout.",
    )
    parser.add_argument(
        "--viz-save",
        default=None,
        help="Save the visualization image to PATH instead of only showing it.",
    )
    parser.add_argument("--log", default=None, help="Optional log file")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress console output"
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable verbose debug logging"
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="With --debug, also print per-iteration progress to the console.",
    )
    return parser


def main(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.input:
        try:
            args.input = input("Input mesh file: ").strip()
        except EOFError:
            print("No input file provided.", file=sys.stderr)
            sys.exit(1)
    try:
        args.input = resolve_mesh_path(args.input)
    except FileNotFoundError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)

    global logger
    logger = setup_logging(
        args.log, quiet=args.quiet, debug=args.debug, progress=args.progress
    )

    try:
        mesh = load_mesh(args.input, validate=not args.no_validate)
        params = build_parameters(mesh, args)
        logger.debug(f"Layout parameters: {params}")
        result = layout_mesh(mesh, params)
    except (MeshLayoutError, ValueError, TypeError, OSError, yaml.YAMLError) as exc:
        logger.error(f"Layout failed for '{args.input}': {exc}")
        sys.exit(1)

    if args.viz or args.viz_save:
        import matplotlib.pyplot as plt

        from visualization.plotting import plot_mesh

        plot_mesh(result, draw_edges=True, show=args.viz_save is None)
        if args.viz_save:
            fig = plt.gcf()
            fig.savefig(args.viz_save, bbox_inches="tight")
            logger.info("Saved visualization to %s", args.viz_save)

    if args.output:
        save_mesh_file(result, args.output, compact=args.compact_output_json)
        logger.info(f"Layout complete. Output saved to {args.output}")
    else:
        logger.info("Layout complete. No output file written.")
    return result


if __name__ == "__main__":
    main()
