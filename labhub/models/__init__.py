# Importing the package registers every table on Base.metadata.
from labhub.models.project import Project  # noqa: F401
from labhub.models.audit_log import AuditLogEntry  # noqa: F401
from labhub.models.notification import Notification  # noqa: F401
