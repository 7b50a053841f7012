"""prebuild-cli: Command-line interface for prebuild-runtime.

Provides the ``prebuild`` command group and the ``prebuild-addon``
build command.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
