#!/usr/bin/env python3
"""Batch render the example flow definitions to SVG and PNG.

Outputs go to /tmp/flowsankey_renders/.

Usage:
    python scripts/render_examples.py
"""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from flowsankey.errors import DegenerateGraphWarning, SankeyError  # noqa: E402
from flowsankey.layout import layout_input  # noqa: E402
from flowsankey.parser import load_sankey  # noqa: E402
from flowsankey.render.svg import render_svg  # noqa: E402
from flowsankey.themes import THEMES  # noqa: E402

OUTPUT_DIR = Path("/tmp/flowsankey_renders")
EXAMPLES_DIR = project_root / "examples"
FIXTURES_DIR = project_root / "tests" / "fixtures"


def render_file(path: Path, output_dir: Path, *, png: bool = True) -> tuple[str, list[str]]:
    """Parse, layout, and render a flow file to SVG (and optionally PNG).

    Returns (name, list_of_issues).
    """
    name = path.stem
    issues: list[str] = []

    try:
        flow = load_sankey(path)
    except ValueError as e:
        return name, [f"PARSE ERROR: {e}"]

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", DegenerateGraphWarning)
        try:
            graph = layout_input(flow)
        except SankeyError as e:
            return name, [f"LAYOUT ERROR: {e}"]
    issues.extend(f"WARNING: {w.message}" for w in caught)
    if graph.circular_links:
        issues.append(f"{len(graph.circular_links)} circular link(s) excluded")

    theme = THEMES.get(flow.style, THEMES["light"])
    svg_str = render_svg(graph, theme)
    svg_path = output_dir / f"{name}.svg"
    svg_path.write_text(svg_str)

    if not png:
        return name, issues

    # Try PNG conversion via cairosvg (optional)
    try:
        import cairosvg

        png_path = output_dir / f"{name}.png"
        cairosvg.svg2png(bytestring=svg_str.encode(), write_to=str(png_path), scale=2)
    except ImportError:
        issues.append("cairosvg not available, skipping PNG")

    return name, issues


def main():
    parser = argparse.ArgumentParser(description="Batch render example flows")
    parser.add_argument("--no-png", action="store_true", help="Skip PNG conversion")
    parser.add_argument(
        "--fixtures", action="store_true", help="Also render the test fixtures"
    )
    args = parser.parse_args()

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    all_files = sorted(EXAMPLES_DIR.glob("*.mmd")) + sorted(EXAMPLES_DIR.glob("*.json"))
    if args.fixtures:
        all_files += sorted(FIXTURES_DIR.glob("*.mmd"))
    print(f"Rendering {len(all_files)} files to {OUTPUT_DIR}/")
    print()

    max_name_len = max(len(f.stem) for f in all_files)
    any_errors = False

    for path in all_files:
        name, issues = render_file(path, OUTPUT_DIR, png=not args.no_png)
        status = "OK" if not issues else "ISSUES"
        if any("ERROR" in i for i in issues):
            status = "FAIL"
            any_errors = True

        print(f"  {name:<{max_name_len}}  [{status}]")
        for issue in issues:
            print(f"    - {issue}")

    print(f"\nOutputs in: {OUTPUT_DIR}/")

    if any_errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
