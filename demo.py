from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.rule import Rule
from rich.traceback import install as rich_traceback

rich_traceback(show_locals=False)
console = Console()

from utils import safe_mkdir, stable_hash, to_jsonable
from type import MockError
from schema_loader import SchemaDocument
from data_generator import DataGenerator
from random_source import RandomSource
from field_resolver import CATALOG

logger = logging.getLogger(__name__)

def read_schema_file(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Schema not found: {p}")

    raw = p.read_text(encoding="utf-8").strip()
    if not raw:
        raise ValueError(f"Schema file is empty: {p}")

    # Try JSON first, then YAML
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    import yaml

    try:
        return yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML schema: {p}") from e

def save_mocks(
        output_dir: str | Path,
        mocks: List[Any],
        seed: Optional[int],
) -> List[Path]:

    root = safe_mkdir(output_dir)
    written: List[Path] = []

    for index, mock in enumerate(mocks):
        payload = to_jsonable(mock)
        path = root / f"{stable_hash(seed, index, payload)}.json"

        with path.open("w", encoding="utf-8") as f:
            json.dump(
                {
                    "index": index,
                    "seed": seed,
                    "data": payload,
                },
                f,
                indent=2,
                ensure_ascii=False,
                sort_keys=True,
            )
        written.append(path)

    return written

def print_catalog() -> None:
    tbl = Table(title=f"Named generators ({len(CATALOG)})", show_lines=False)
    tbl.add_column("Category")
    tbl.add_column("Name")
    tbl.add_column("Domain", justify="center")

    for entry in CATALOG:
        tbl.add_row(entry.category, entry.name, entry.domain)

    console.print(tbl)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate seeded mock data from a JSON/YAML schema document."
    )
    parser.add_argument(
        "--schema",
        type=str,
        default=None,
        help="Path to a JSON Schema flavoured document (JSON or YAML).",
    )
    parser.add_argument(
        "--definition",
        type=str,
        default=None,
        help="Generate the named definition instead of the document root.",
    )
    parser.add_argument(
        "--count", type=int, default=3, help="How many mocks to generate."
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for reproducible output."
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=10,
        help="Recursion ceiling for nested and self-referencing schemas.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="(Optional) write each mock as JSON into this directory.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on schema types that have no generator.",
    )
    parser.add_argument(
        "--list-generators",
        action="store_true",
        help="Show the field-name generator catalog and exit.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging."
    )
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )

    if args.list_generators:
        print_catalog()
        return 0

    if not args.schema:
        console.print("[red]--schema is required[/red]")
        return 2

    console.print(Panel.fit("[b]Schema Mock[/b]"))

    console.print(Rule("[cyan]1) Load Schema[/cyan]"))
    try:
        document = SchemaDocument.from_dict(read_schema_file(args.schema))
        node = document.definition(args.definition) if args.definition else document.root()
    except (OSError, ValueError, MockError) as e:
        console.print(Panel.fit(f"[red]{e}[/red]", title="Schema"))
        return 1

    logger.debug("Loaded %s with %d definition(s)", args.schema, len(document.names()))

    console.print(
        Panel.fit(
            f"[green]Loaded[/green] {args.schema}\n"
            f"Definitions: {', '.join(document.names()) or '-'}\n"
            f"Target: {args.definition or '<root>'}",
            title="Schema",
        )
    )

    console.print(Rule("[cyan]2) Generate[/cyan]"))
    generator = DataGenerator(
        max_depth=args.max_depth,
        throw_on_unknown_type=args.strict,
    )

    mocks: List[Any] = []
    try:
        if args.seed is None:
            mocks = [generator.mock(node) for _ in range(args.count)]
        else:
            # one seeded source for the whole batch: reproducible, but not identical mocks
            source = RandomSource(seed=args.seed)
            mocks = [generator.mock(node, random_source=source) for _ in range(args.count)]
    except MockError as e:
        console.print(Panel.fit(f"[red]{e}[/red]", title="Generation failed"))
        return 1

    tbl = Table(title="Generated mocks", show_lines=False)
    tbl.add_column("#", justify="right")
    tbl.add_column("Signature")
    tbl.add_column("Preview", overflow="fold")
    for i, mock in enumerate(mocks, 1):
        payload = to_jsonable(mock)
        tbl.add_row(
            str(i),
            stable_hash(args.seed, i - 1, payload),
            json.dumps(payload, default=str)[:120],
        )
    console.print(tbl)

    if mocks:
        console.print("[dim]first mock[/dim]:")
        console.print_json(data=to_jsonable(mocks[0]))

    if args.output_dir:
        console.print(Rule("[cyan]3) Save[/cyan]"))
        written = save_mocks(args.output_dir, mocks, args.seed)
        console.print(
            Panel.fit(
                f"Wrote {len(written)} file(s) to {Path(args.output_dir).resolve()}",
                title="Output",
            )
        )

    console.print(Rule("[green]Done[/green]"))
    return 0

if __name__ == "__main__":
    sys.exit(main())
