"""
Domain models — Pydantic types for lazyomz.

    from lazyomz.core.models import Action, Receipt
"""

from lazyomz.core.models.action import Action, Receipt

__all__ = [
    "Action",
    "Receipt",
]
