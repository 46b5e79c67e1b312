#!/usr/bin/env python3
"""
MEKD CLI Runner
Estimate regional corruption and IPM from the command line, output JSON

Usage:
    python -m mekd.run --pad 1.000.000 --dau 500.000 ... --tipe kota
    python -m mekd.run --input daerah.yaml --chart hasil.png --output hasil.json
"""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional

import yaml

from mekd import __version__
from mekd.core.engine import get_engine
from mekd.executors.report.chart import ChartSlot, render_chart
from mekd.gateway.api.settings import LOG_LEVELS, configure_logging

logger = logging.getLogger(__name__)

FORM_FIELDS = [
    "pad", "dau", "dak", "dbh", "belanja", "pendapatan", "temuan",
    "penduduk", "asn", "pdrb", "usia", "jawa", "tipe",
]


def load_form_file(path: str) -> Dict[str, Any]:
    """Read raw form values from a JSON or YAML mapping"""
    text = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(text) if text.strip() else {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping of form fields")
    return data


async def run_estimate(
    form: Dict[str, Any],
    output_file: str = None,
    chart_file: str = None,
    chart_slot: Optional[ChartSlot] = None,
    verbose: bool = False
) -> dict:
    """Run the estimate workflow and return results"""
    engine = get_engine()

    async def on_progress(progress: dict):
        if verbose:
            stage = progress.get("stage_name", progress.get("stage", ""))
            pct = progress.get("progress", 0)
            print(f"  [{pct:5.1f}%] {stage}", file=sys.stderr)

    if verbose:
        print("Starting estimate", file=sys.stderr)

    results = await engine.run_workflow(
        workflow_name="estimate",
        inputs={"form": form},
        progress_callback=on_progress if verbose else None
    )

    if results["success"] and chart_file:
        slot = chart_slot or ChartSlot()
        render_chart(results["outputs"]["chart"], chart_file, slot)
        if verbose:
            print(f"Chart saved to: {chart_file}", file=sys.stderr)

    output = {
        "meta": {
            "form": form,
            "timestamp": datetime.now().isoformat(),
            "version": __version__
        },
        "results": results,
        "success": results["success"]
    }

    if output_file:
        Path(output_file).write_text(json.dumps(output, indent=2, default=str), encoding="utf-8")
        if verbose:
            print(f"Results saved to: {output_file}", file=sys.stderr)

    return output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mekd",
        description="MEKD - Model Estimasi Korupsi Daerah",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --pad 1.000.000 --dau 500.000 --dak 200.000 --dbh 100.000 \\
           --belanja 900.000 --pendapatan 1.000.000 --temuan 3 --penduduk 2 \\
           --asn 5.000 --pdrb 50.000.000.000 --usia 2 --jawa 1 --tipe kota
  %(prog)s --input daerah.yaml --chart hasil.png --output hasil.json

Units:
  pad, dau, dak, dbh, belanja, pendapatan  juta rupiah ("1.234,5")
  penduduk                                 juta jiwa
  asn, pdrb                                satuan (jiwa, rupiah)
  temuan, usia, jawa                       plain numbers
  tipe                                     kabupaten | kota | lainnya
        """
    )

    parser.add_argument("--input", "-i",
                        help="JSON or YAML file with raw form values")
    for field_name in FORM_FIELDS:
        parser.add_argument(f"--{field_name}", help=f"Raw value for {field_name}")
    parser.add_argument("--output", "-o",
                        help="Output JSON file path")
    parser.add_argument("--chart", "-c",
                        help="Render the dual-axis chart to this image file")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Verbose output")
    parser.add_argument("--json", "-j", action="store_true",
                        help="Output JSON to stdout")
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS,
                        help="Logging level (default: WARNING)")
    return parser


def collect_form(args: argparse.Namespace) -> Dict[str, Any]:
    """File values first, explicit options override"""
    form = load_form_file(args.input) if args.input else {}
    for field_name in FORM_FIELDS:
        value = getattr(args, field_name)
        if value is not None:
            form[field_name] = value
    return form


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    chart_slot = ChartSlot()
    try:
        results = asyncio.run(run_estimate(
            form=collect_form(args),
            output_file=args.output,
            chart_file=args.chart,
            chart_slot=chart_slot,
            verbose=args.verbose
        ))
    finally:
        chart_slot.release()

    if args.json or not args.output:
        print(json.dumps(results, indent=2, default=str))

    if not results["success"]:
        print(results["results"]["error"], file=sys.stderr)

    sys.exit(0 if results.get("success") else 1)


if __name__ == "__main__":
    main()
