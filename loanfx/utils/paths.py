"""Utilities for resolving project-relative paths."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


SENTINELS = ("pyproject.toml", ".git", "config.yaml")


def find_project_root(start: Optional[Path] = None) -> Path:
    """Locate the project root by walking up from a start path.

    Recognition: presence of one of SENTINELS.
    Honors LOANFX_ROOT if set.
    """
    env_root = os.getenv("LOANFX_ROOT")
    if env_root:
        p = Path(env_root).expanduser().resolve()
        if p.exists():
            return p

    candidates = []
    if start is not None:
        candidates.append(Path(start).resolve())
    candidates.append(Path.cwd())
    candidates.append(Path(__file__).resolve())

    seen = set()
    for c in candidates:
        for p in [c] + list(c.parents):
            if p in seen:
                continue
            seen.add(p)
            for s in SENTINELS:
                if (p / s).exists():
                    return p
    return Path.cwd()


def resolve_config_path(config_path: str = "config.yaml") -> Path:
    """Resolve the configuration file location.

    LOANFX_CONFIG wins over the argument. A relative path that does not exist
    from the working directory is looked up in the project root.
    """
    env_cfg = os.getenv("LOANFX_CONFIG")
    cfg_path = Path(env_cfg).expanduser() if env_cfg else Path(config_path).expanduser()
    if cfg_path.is_absolute() or cfg_path.exists():
        return cfg_path
    candidate = find_project_root() / cfg_path
    if candidate.exists():
        return candidate
    return cfg_path
