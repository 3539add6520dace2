# backend/utils/audit.py
import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from models.log import Log

logger = logging.getLogger(__name__)

# Client address of the request, if the transport exposes one
def client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None or request.client is None:
        return None
    return request.client.host

# Persist an audit entry in its own commit, after the business transaction.
# A failed entry is rolled back and logged; the action it describes is already committed.
def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", ip=None, meta=None) -> bool:
    try:
        entry = Log(user_id=user_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to write audit log %s %s for user %s", action, resource, user_id)
        return False
    logger.debug("audit %s %s %s user=%s", action, resource, status, user_id)
    return True
