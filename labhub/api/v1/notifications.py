from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from labhub.api.v1.common import _iso, parse_uuid, to_http
from labhub.core.auth_deps import get_current_actor
from labhub.core.errors import ReviewError
from labhub.db.session import get_db
from labhub.policies.permissions import Actor
from labhub.schemas.notifications import NotificationListResponse, NotificationResponse
from labhub.services.notification_service import NotificationDispatcher

router = APIRouter(prefix="/notifications")


def _resp(n) -> dict:
    return {
        "id": str(n.id),
        "title": n.title,
        "message": n.message,
        "link": n.link,
        "read": bool(n.read),
        "createdAtIso": _iso(n.created_at),
    }


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    limit: int = Query(default=50, ge=1, le=500),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    svc = NotificationDispatcher()
    rows = svc.list_for_user(db, user_id=actor.id, limit=limit)
    return {
        "unreadCount": svc.unread_count(db, user_id=actor.id),
        "notifications": [_resp(n) for n in rows],
    }


@router.post("/read-all")
def mark_all_read(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    try:
        count = NotificationDispatcher().mark_all_read(db, user_id=actor.id)
    except ReviewError as e:
        raise to_http(e)
    return {"updated": count}


@router.post("/{notificationId}/read", response_model=NotificationResponse)
def mark_read(
    notificationId: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    nid = parse_uuid(notificationId, "notificationId")
    try:
        n = NotificationDispatcher().mark_read(db, user_id=actor.id, notification_id=nid)
    except ReviewError as e:
        raise to_http(e)
    return _resp(n)


@router.delete("/{notificationId}", status_code=204)
def delete_notification(
    notificationId: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    nid = parse_uuid(notificationId, "notificationId")
    try:
        NotificationDispatcher().delete(db, user_id=actor.id, notification_id=nid)
    except ReviewError as e:
        raise to_http(e)
    return Response(status_code=204)
