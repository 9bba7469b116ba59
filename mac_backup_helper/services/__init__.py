"""Services (business logic) for mac-backup-helper."""

from . import collector_service
from . import tree_service
from . import report_service
from . import users_service

__all__ = ["collector_service", "tree_service", "report_service", "users_service"]
