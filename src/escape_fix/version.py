"""Version management for escape-fix."""

import re
from importlib import metadata
from pathlib import Path

# Build-time version constant (injected during packaging when available)
__BUILD_VERSION__ = None


def get_version() -> str:
    """
    Get the current version efficiently.

    First tries the build-time constant, then the installed distribution
    metadata, then falls back to reading pyproject.toml in a source checkout.

    Returns:
        str: Version string
    """
    if __BUILD_VERSION__:
        return __BUILD_VERSION__

    try:
        return metadata.version("escape-fix")
    except metadata.PackageNotFoundError:
        pass

    pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject_path.exists():
        # Simple regex parsing instead of full TOML library
        content = pyproject_path.read_text(encoding='utf-8')
        match = re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE)
        if match:
            return match.group(1)

    return "unknown"


__version__ = get_version()
