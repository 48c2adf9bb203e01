from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .classifier import build_collections
from .config import load_config, load_env_file, resolve_passthrough, resolve_production
from .content import load_documents
from .errors import BuildError
from .pages import build_pages
from .render import copy_passthrough, load_layouts
from .utils import clean_output_dir, parse_bool


def build_site(args: argparse.Namespace) -> list[str]:
    input_dir = Path(args.input)
    output_dir = Path(args.output)
    project_root = Path.cwd()
    layouts_dir = Path(args.layouts)
    if not layouts_dir.is_absolute():
        layouts_dir = input_dir / layouts_dir

    if not input_dir.exists():
        raise BuildError(f"Input directory not found: {input_dir}")
    if not layouts_dir.exists():
        raise BuildError(f"Layouts directory not found: {layouts_dir}")

    # The environment is read once here and passed down explicitly.
    is_production = resolve_production(args.production)
    mode = "production" if is_production else "development"
    print(f"Building {mode} site from {input_dir}")

    if parse_bool(args.clean):
        clean_output_dir(output_dir, project_root)
    output_dir.mkdir(parents=True, exist_ok=True)

    documents = load_documents(input_dir, exclude=layouts_dir)
    collections = build_collections(documents, is_production)
    layouts = load_layouts(layouts_dir)

    copied = copy_passthrough(input_dir, output_dir, resolve_passthrough(args.passthrough))
    if copied:
        print(f"Copied {len(copied)} passthrough entries.")
    return build_pages(documents, collections, layouts, output_dir, args.site_name, is_production)


def main(argv: Optional[Sequence[str]] = None) -> None:
    load_env_file(Path.cwd() / ".env")
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    parser = argparse.ArgumentParser(description="Build a static site from Markdown sources.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--input", default=cfg_str("input", "src"), help="Directory containing source documents.")
    parser.add_argument("--output", default=cfg_str("output", "dist"), help="Output directory for the site.")
    parser.add_argument(
        "--layouts",
        default=cfg_str("layouts", "layouts"),
        help="Layouts directory, relative to the input directory unless absolute.",
    )
    parser.add_argument("--site-name", default=cfg_str("site_name", "My Site"), help="Site title.")
    parser.add_argument(
        "--production",
        action=argparse.BooleanOptionalAction,
        default=config.get("production"),
        help="Hide drafts and minify HTML (defaults to PAGESMITH_ENV/NODE_ENV).",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=parse_bool(cfg_value("clean", True)),
        help="Clean output directory before build.",
    )
    parser.add_argument(
        "--passthrough",
        default=config.get("passthrough"),
        help="Comma-separated files or directories copied as-is.",
    )
    parser.add_argument("--verbose", action="store_true", help="Print debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    start = time.perf_counter()
    try:
        written = build_site(args)
    except BuildError as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Wrote {len(written)} pages in {elapsed:.2f}s.")
    print(f"Site generated in: {args.output}")
