import logging
from typing import Optional, Any, Dict

from clinical.models import AuditEvent, User

logger = logging.getLogger(__name__)


def log_action(*, user: Optional[User], action: str, object_type: Optional[str]=None, object_id: Any=None, detail: Optional[Dict[str, Any]]=None) -> AuditEvent:
    logger.info('%s %s:%s by %s', action, object_type or '-', object_id or '-', getattr(user, 'pk', None))
    return AuditEvent.objects.create(
        user=user if isinstance(user, User) else None,
        action=action,
        object_type=object_type,
        object_id=str(object_id) if object_id is not None else None,
        detail=detail or {},
    )
