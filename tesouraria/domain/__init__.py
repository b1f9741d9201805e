"""Domain models and types for tesouraria.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from the terminal front end
"""

from tesouraria.domain.models import Direction, DenominationCategory, Money

__all__ = ["Money", "DenominationCategory", "Direction"]
