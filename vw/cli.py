from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .engine import create_engine
from .errors import VWUserError
from .logs import setup_logging
from .report_schema import ViewList
from .version import tool_version


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="vw",
        description="view-weaver: block/inheritance view renderer",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp_render = sub.add_parser("render", help="Render a view to stdout")
    sp_render.add_argument("name", help="dot-delimited view name, e.g. pages.home")
    sp_render.add_argument(
        "--data",
        action="append",
        metavar="KEY=VALUE",
        help="render variable (repeatable; dotted keys build nested mappings)",
    )
    sp_render.add_argument(
        "--data-file",
        metavar="FILE|-",
        help="YAML or JSON mapping with render data, or - for stdin",
    )

    sp_list = sub.add_parser("list", help="Lists (JSON)")
    sp_list.add_argument("what", choices=["views"], help="what to list")

    sub.add_parser("compile", help="Parse every view and report errors (JSON)")

    return p


def _parse_data_pairs(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """Parses KEY=VALUE pairs; 'user.name=Ann' gives {'user': {'name': 'Ann'}}."""
    result: Dict[str, Any] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Invalid data format '{pair}'. Expected 'KEY=VALUE'")
        key, value = pair.split("=", 1)
        parts = [k.strip() for k in key.split(".")]
        if not all(parts):
            raise ValueError(f"Invalid data key '{key}'")

        target = result
        for part in parts[:-1]:
            nested = target.setdefault(part, {})
            if not isinstance(nested, dict):
                raise ValueError(f"Data key '{key}' conflicts with a scalar value")
            target = nested
        target[parts[-1]] = value
    return result


def _read_data_file(arg: Optional[str]) -> Dict[str, Any]:
    if not arg:
        return {}

    if arg == "-":
        text = sys.stdin.read()
        source = "<stdin>"
    else:
        path = Path(arg)
        if not path.is_file():
            raise ValueError(f"Data file not found: {path}")
        text = path.read_text(encoding="utf-8")
        source = str(path)

    try:
        data = YAML(typ="safe").load(text)
    except YAMLError as e:
        raise ValueError(f"Invalid data file {source}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Data file must contain a mapping: {source}")
    return data


def _render_data(ns: argparse.Namespace) -> Dict[str, Any]:
    data = _read_data_file(ns.data_file)
    # Command-line pairs win over file values
    data.update(_parse_data_pairs(ns.data))
    return data


def _jdumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    setup_logging(ns.verbose)

    try:
        if ns.cmd == "render":
            engine = create_engine(Path.cwd())
            engine.render(ns.name, _render_data(ns))
            return 0

        if ns.cmd == "list":
            engine = create_engine(Path.cwd())
            sys.stdout.write(_jdumps(ViewList(views=engine.list_views()).model_dump(mode="json")))
            return 0

        if ns.cmd == "compile":
            engine = create_engine(Path.cwd())
            report = engine.compile_all()
            sys.stdout.write(_jdumps(report.model_dump(mode="json")))
            return 1 if report.failed else 0

    except VWUserError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2
    except ValueError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
