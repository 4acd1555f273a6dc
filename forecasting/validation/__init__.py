"""
Validation sub-package.

- `ValidationEngine.validate(forecast, realized, symbol)` → `ValidationResult`
"""

from forecasting.validation.engine import ValidationEngine

__all__ = ["ValidationEngine"]
