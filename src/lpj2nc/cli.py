from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from .config import DEFAULT_UNIT, ConversionConfig, default_output_path, parse_config_file
from .exceptions import ConversionError
from .io import summarize_output
from .processing import run_conversion

GRID_HELP = (
    "<north>,<west>,<south>,<east>,<xres>,<yres> | <xres>,<yres> | <res>. "
    "The two shorter forms cover the global grid (180W - 180E, 90S - 90N)."
)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lpj2nc",
        description="Convert ascii files produced by LPJ to netcdf files.",
    )
    parser.add_argument("-i", "--in", dest="input", type=Path, help="Name of input file to process.")
    parser.add_argument(
        "-o", "--out", dest="output", type=Path,
        help="Name of output file (may already exist). Defaults to the input name with '.nc'.",
    )
    parser.add_argument("-g", "--grid", help=GRID_HELP)
    parser.add_argument("-u", "--unit", help="Units attribute string to save in the NetCDF file.")
    parser.add_argument("-y", "--year", type=int, help="Year to start the time axis with.")
    parser.add_argument(
        "--config",
        type=Path,
        help="Plain-text configuration file (key=value per line); flags override it.",
    )
    parser.add_argument("-m", "--month", action="store_true", help="Treat columns 4-15 as months.")
    parser.add_argument(
        "-I", "--Invertlat", dest="invertlat", action="store_true",
        help="Start with the northernmost row.",
    )
    parser.add_argument(
        "-c", "--centered", action="store_true",
        help="Coordinates are cell centered instead of lower left corner.",
    )
    parser.add_argument(
        "-O", "--Overwrite", dest="overwrite", action="store_true",
        help="Do not ask, overwrite the output file if it exists.",
    )
    parser.add_argument(
        "-M", "--Modify", dest="modify", action="store_true",
        help="Do not ask, modify the output file if it exists (fails if axis sizes differ).",
    )
    parser.add_argument(
        "--no-validate-order", action="store_true",
        help="Do not reject repeated years or coordinate changes within a point.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print what is done.")
    return parser


def resolve_config(args: argparse.Namespace, command: str) -> ConversionConfig:
    """Merge the optional config file with the command line flags."""
    if args.config is not None:
        config = parse_config_file(args.config)
    elif args.input is not None:
        config = ConversionConfig(input_path=args.input, grid="")
    else:
        raise ValueError("An input file is required: use --in or --config.")

    if args.input is not None:
        explicit_output = config.output_path != default_output_path(config.input_path)
        config.input_path = args.input
        if not explicit_output:
            config.output_path = default_output_path(args.input)
    if args.output is not None:
        config.output_path = args.output
    if args.grid is not None:
        config.grid = args.grid
    if args.unit is not None:
        config.unit = args.unit
    if args.year is not None:
        config.year = args.year
    config.monthly = config.monthly or args.month
    config.invert_latitude = config.invert_latitude or args.invertlat
    config.cell_centered = config.cell_centered or args.centered
    if args.no_validate_order:
        config.validate_order = False
    if args.overwrite:
        config.mode = "overwrite"
    elif args.modify:
        config.mode = "modify"
    config.unit = config.unit or DEFAULT_UNIT
    config.command = command
    return config


def _ask_existing(path: Path, prompt: Callable[[str], str]) -> Optional[str]:
    try:
        answer = prompt(f'File "{path}" exists (o)verwrite, (m)odify or exit? ')
    except EOFError:
        return None
    answer = answer.strip().lower()[:1]
    return {"o": "overwrite", "m": "modify"}.get(answer)


def main(argv: list[str] | None = None, prompt: Callable[[str], str] = input) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(message)s",
    )

    command = " ".join(["lpj2nc", *(sys.argv[1:] if argv is None else argv)])
    try:
        config = resolve_config(args, command)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))

    if not config.input_path.is_file():
        print(f'File "{config.input_path}" does not exist.', file=sys.stderr)
        return 1

    if config.mode == "create" and config.output_path.exists():
        mode = _ask_existing(config.output_path, prompt)
        if mode is None:
            return 0
        config.mode = mode

    try:
        result = run_conversion(config)
    except ConversionError as exc:
        print(f"Error during conversion: {exc}", file=sys.stderr)
        return 1

    summary = summarize_output(result.output_path)
    summary_lines = [
        f"Wrote {result.output_path}",
        f"Grid: {result.grid.ncols}x{result.grid.nrows} cells, {result.n_points} point(s)",
    ]
    for name, shape in summary["variables"].items():
        summary_lines.append(f"  {name}: shape {shape}")
    if summary["time_start"] is not None:
        summary_lines.append(
            f"Time axis: {summary['time_start']} to {summary['time_end']} ({summary['calendar']})"
        )
    print("\n".join(summary_lines))
    return 0


if __name__ == "__main__":
    sys.exit(main())
