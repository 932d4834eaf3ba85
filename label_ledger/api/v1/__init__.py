"""API v1 routers."""

from label_ledger.api.v1 import backup, health, labels
from label_ledger.api.v1 import settings as label_settings

__all__ = ["backup", "health", "label_settings", "labels"]
