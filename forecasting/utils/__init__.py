"""
Utilities sub-package.

- `ValidationCache` — Redis + in-memory fallback, TTL-aware, single-flight per symbol
"""

from forecasting.utils.cache import ValidationCache

__all__ = ["ValidationCache"]
