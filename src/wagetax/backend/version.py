"""Expose the WageTax version reported by ``/health`` and the profile metadata."""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "wagetax"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed distribution version, else the one in ``pyproject.toml``."""

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version(PYPROJECT_PATH)


def read_pyproject_version(path: Path) -> str:
    """Return ``version`` from the ``[project]`` table of ``path``.

    Only the flat ``key = "value"`` form used by this repository is supported.
    """

    if not path.exists():  # pragma: no cover - repository invariant
        raise RuntimeError(f"Unable to locate project metadata at {path}")

    in_project = False
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if line.startswith("["):
            in_project = line == "[project]"
            continue
        if not in_project:
            continue
        key, separator, value = line.partition("=")
        if separator and key.strip() == "version":
            version = value.strip().strip('"')
            if version:
                return version

    raise RuntimeError(f"No project version declared in {path.name}")


__all__ = ["get_project_version", "read_pyproject_version"]
