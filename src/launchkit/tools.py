"""Utilities for finding external CLI tools.

Provides cross-platform discovery of the executables launchkit drives
(git, gh, npx, vercel). npm-installed tools need extra care on Windows,
where they are installed as .cmd shims.
"""

import os
import shutil
import sys
from pathlib import Path
from typing import Optional

from .errors import MissingToolError


GIT = "git"
GH = "gh"
VERCEL = "vercel"

TOOL_NAMES = {
    GIT: "Git",
    GH: "GitHub CLI",
    VERCEL: "Vercel CLI",
}

INSTALL_HINTS = {
    GH: "macOS: brew install gh\nUbuntu: sudo apt install gh",
    VERCEL: "npm install -g vercel",
}


def find_executable(name: str) -> Optional[str]:
    """Find an executable by name.

    Searches in order:
    1. PATH (via shutil.which)
    2. Windows-specific: .cmd extension, npm global locations

    Returns:
        Path to the executable, or None if not found.
    """
    path = shutil.which(name)
    if path:
        return path

    if sys.platform == "win32":
        path = shutil.which(f"{name}.cmd")
        if path:
            return path

        npm_paths = [
            Path(os.environ.get("APPDATA", "")) / "npm" / f"{name}.cmd",
            Path(os.environ.get("LOCALAPPDATA", "")) / "npm" / f"{name}.cmd",
            Path(os.environ.get("NVM_SYMLINK", "")) / f"{name}.cmd" if os.environ.get("NVM_SYMLINK") else None,
        ]
        for p in npm_paths:
            if p and p.exists():
                return str(p)

    return None


def is_available(name: str) -> bool:
    """Check if an executable is available."""
    return find_executable(name) is not None


def require_executable(name: str) -> str:
    """Get an executable path, raising if not found.

    Raises:
        MissingToolError: If the tool is not installed or not in PATH.
    """
    exe = find_executable(name)
    if exe is None:
        raise MissingToolError(name, TOOL_NAMES.get(name, name), INSTALL_HINTS.get(name))
    return exe
