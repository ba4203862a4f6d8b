"""Token shop source package.

This package contains:
- config: Configuration loading and management
- core: Ledger, item catalog, event log and the TokenShop state object
"""

from __future__ import annotations

__all__: list[str] = []
