"""Sequence and batch endpoints."""

from label_ledger.api.v1.labels.routes import router

__all__ = ["router"]
