"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import MolThumbConfig

_ENV_REF = re.compile(r"\$\{(\w+)\}")


def config_search_path(cli_path: str | None = None) -> list[Path]:
    """Candidate config files, highest priority first."""
    paths = [Path("./molthumb.yaml"), Path.home() / ".molthumb" / "config.yaml"]
    if cli_path:
        paths.insert(0, Path(cli_path))
    return paths


def load_config(cli_path: str | None = None) -> MolThumbConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults.

    A relative ``repository.root`` in a config file is taken relative to that
    file, so the cache location does not depend on the working directory.
    """
    for path in config_search_path(cli_path):
        if not path.exists():
            continue
        raw = _read_yaml(path)
        if raw is None:
            continue
        try:
            config = MolThumbConfig(**_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        return _anchor_repository_root(config, path.parent, raw)

    return MolThumbConfig()


def _read_yaml(path: Path) -> dict | None:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: top level must be a mapping")
    return raw


def _anchor_repository_root(config: MolThumbConfig, base: Path, raw: dict) -> MolThumbConfig:
    # only roots spelled out in the file; the built-in default stays cwd-relative
    if "root" not in (raw.get("repository") or {}):
        return config
    root = Path(config.repository.root).expanduser()
    if root.is_absolute():
        return config
    repository = config.repository.model_copy(update={"root": str(base / root)})
    return config.model_copy(update={"repository": repository})


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings; unset vars become ""."""
    if isinstance(obj, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), ""), obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `molthumb config init`
DEFAULT_CONFIG_TEMPLATE = """\
# molthumb.yaml

# External CTF -> SVG converter
converter:
  active: "indigo"             # key of one of the commands below
  tool_dir: "/usr/bin"         # substituted for $path/ (empty: resolve via PATH)
  timeout_seconds: 60
  commands:
    babel:
      command: "$path/babel -i$format $input $output"
      supported_formats: [mol]
      memory_kib: 307200
    indigo:
      command: "$path/indigo-depict $input $output"
      supported_formats: [mol, rxn]
      memory_kib: 307200

# Cached SVG intermediates (stored next to the thumbnails)
cache:
  enabled: true
  prefix: "molhandler-"

# Filesystem repository used by the CLI (relative to this file)
repository:
  root: ".molthumb"

thumbnail:
  default_width: 220

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
