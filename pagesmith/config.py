from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Mapping, Optional

import dotenv

from .utils import parse_bool

try:
    import tomllib as toml
except ImportError:
    try:
        import tomli as toml
    except ImportError:  # pragma: no cover - optional dependency
        toml = None

try:
    import yaml
except ImportError:  # pragma: no cover - optional dependency
    yaml = None

ENV_VARS = ("PAGESMITH_ENV", "NODE_ENV")
PRODUCTION = "production"
DEFAULT_PASSTHROUGH = [
    "site.webmanifest",
    "keybase.txt",
    "robots.txt",
    "favicon.ico",
    "assets/images",
    "assets/fonts",
]


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        if toml is None:
            print("TOML config requires tomllib (Python 3.11+) or tomli.", file=sys.stderr)
            sys.exit(1)
        try:
            data = toml.loads(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            print(f"Invalid TOML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(data, dict):
            print(f"TOML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        if yaml is None:
            print("YAML config requires PyYAML.", file=sys.stderr)
            sys.exit(1)
        try:
            data = yaml.safe_load(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            print(f"Invalid YAML in config file {path}: {exc}", file=sys.stderr)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            print(f"YAML config must be a mapping: {path}", file=sys.stderr)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        print(f"Invalid JSON in config file {path}: {exc}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"JSON config must be a mapping: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def env_is_production(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Read the production flag from the process environment.

    Only the build entry point calls this; everything downstream receives
    the result as a parameter.
    """
    environ = os.environ if environ is None else environ
    for name in ENV_VARS:
        value = (environ.get(name) or "").strip().lower()
        if value:
            return value == PRODUCTION
    return False


def resolve_production(config_value: object, environ: Optional[Mapping[str, str]] = None) -> bool:
    if config_value is not None:
        return parse_bool(config_value)
    return env_is_production(environ)


def resolve_passthrough(value: object) -> list[str]:
    if value is None:
        return list(DEFAULT_PASSTHROUGH)
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item).strip() for item in value if str(item).strip()]


def load_env_file(path: Path) -> bool:
    """Load ``KEY=value`` pairs from a ``.env`` file without overriding the environment."""
    return dotenv.load_dotenv(path, override=False)
