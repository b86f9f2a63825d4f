"""Runtime feature detection for optional extras.

Checks availability of optional dependencies to determine which
capabilities can be used.
"""
from __future__ import annotations

import importlib.util


def _check_import(module_name: str) -> bool:
    """Check if a module is importable without importing it."""
    return importlib.util.find_spec(module_name) is not None


# Capability feature flags
HAS_HTTP2: bool = _check_import("h2")
HAS_KEYRING: bool = _check_import("keyring")


# Map pip package names to import module names (when they differ)
_PACKAGE_TO_MODULE: dict[str, str] = {}


def require_extra(extra_name: str, package_name: str) -> None:
    """Raise ImportError with installation hint if extra is not available.

    Args:
        extra_name: Name of the pip extra (e.g., 'http2')
        package_name: Name of the required package (e.g., 'h2')

    Raises:
        ImportError: With installation instructions when package is not available.
    """
    module_name = _PACKAGE_TO_MODULE.get(package_name, package_name)
    if _check_import(module_name):
        return
    raise ImportError(
        f"The '{extra_name}' extra is required for this feature. "
        f"Install it with: pip install tinify-lib-python[{extra_name}]"
    )
