from __future__ import annotations

import sys as _sys

# Enforce the project’s minimum runtime.
if _sys.version_info[:2] < (3, 10):
    raise RuntimeError(f"nimserver requires Python 3.10 or newer; detected {_sys.version.split()[0]}")

__all__: list[str] = []
