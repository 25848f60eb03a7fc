"""In-memory stores for batch results."""

from eir_projection.store.portfolio import ProjectionStore

__all__ = ["ProjectionStore"]
