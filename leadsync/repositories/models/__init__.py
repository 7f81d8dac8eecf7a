"""ORM models; importing this package registers every table on ``Base.metadata``."""

from .leads_model import Lead, TELECALLER_FIELDS
from .reports_model import Report
from .stores_model import Store
from .sync_logs_model import SyncLog
from .users_model import User

__all__ = ["Lead", "TELECALLER_FIELDS", "Report", "Store", "SyncLog", "User"]
