from .owner import OwnerOnlyMiddleware

__all__ = [
    "OwnerOnlyMiddleware",
]
