"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
from typing import Any

from anyio import to_thread
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from checkday.application.use_cases.notifications import (
    create_notification as create_notification_uc,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read,
    mark_notification_read,
    parse_category,
)
from checkday.config import get_settings
from checkday.domain.entities import Notification, Principal, User
from checkday.domain.errors import NotificationError
from checkday.infrastructure.database import SessionLocal, get_db
from checkday.infrastructure.notifications import (
    ConnectionRegistry,
    DeliveryError,
    NotificationConnection,
    NotificationDispatcher,
)
from checkday.infrastructure.repositories import NotificationRepository
from checkday.interfaces.api.dependencies import (
    get_current_active_user,
    get_notification_dispatcher,
    require_admin,
    resolve_current_user,
)
from checkday.interfaces.api.routes_helpers import notification_error_to_http
from checkday.interfaces.api.schemas import (
    BroadcastRequest,
    BroadcastResponse,
    MarkAllReadResponse,
    NotificationCreate,
    NotificationCreateResponse,
    NotificationListResponse,
    NotificationRead,
)
from checkday.utils import now_in_app_timezone

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id,
        user_id=notification.user_id,
        type=notification.category,
        title=notification.title,
        message=notification.body,
        link=notification.link,
        is_read=notification.is_read,
        created_at=notification.created_at,
    )


@router.post(
    "/",
    response_model=NotificationCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_notification(
    payload: NotificationCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> NotificationCreateResponse:
    """Create a notification for ``userId`` unless they opted out of its type."""

    try:
        outcome = create_notification_uc(
            db,
            user_id=payload.user_id,
            category=payload.type,
            title=payload.title,
            body=payload.message,
            link=payload.link,
            requested_by=Principal.for_user(current_user),
            dispatcher=dispatcher,
        )
    except NotificationError as exc:
        raise notification_error_to_http(exc) from exc

    if outcome.skipped:
        response.status_code = status.HTTP_200_OK
        return NotificationCreateResponse(
            skipped=True,
            message="The recipient has disabled this notification type",
        )
    return NotificationCreateResponse(
        skipped=False,
        message="Notification created",
        notification=_notification_to_schema(outcome.notification),
    )


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    unread_only: bool = Query(False, alias="unreadOnly"),
    type: str | None = Query(None, description="Restrict the feed to one category"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationListResponse:
    """Return one oldest-first page of the caller's notifications."""

    settings = get_settings()
    page_size = min(
        limit or settings.notification_default_page_size,
        settings.notification_page_size_max,
    )
    try:
        category = parse_category(type) if type else None
        result = list_notifications_uc(
            db,
            current_user.id,
            page=page,
            page_size=page_size,
            unread_only=unread_only,
            category=category,
        )
    except NotificationError as exc:
        raise notification_error_to_http(exc) from exc

    return NotificationListResponse(
        items=[_notification_to_schema(item) for item in result.items],
        total_count=result.total_count,
        unread_count=result.unread_count,
        page=page,
        limit=page_size,
        total_pages=math.ceil(result.total_count / page_size),
    )


@router.post("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> MarkAllReadResponse:
    """Mark every unread notification of the caller as read."""

    count = mark_all_notifications_read(db, current_user.id)
    if count:
        # Other open tabs of the same user reconcile on their next fetch.
        try:
            dispatcher.dispatch_to_user(current_user.id, {"type": "refresh_notifications"})
        except Exception:
            logger.exception("Could not notify user %s about read-all", current_user.id)
    return MarkAllReadResponse(count=count)


@router.post("/broadcast", response_model=BroadcastResponse)
def broadcast_announcement(
    payload: BroadcastRequest,
    _: User = Depends(require_admin),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> BroadcastResponse:
    """Push a system-wide announcement to every live connection."""

    message = {
        "type": "announcement",
        "data": {
            "title": payload.title,
            "message": payload.message,
            "link": payload.link,
            "createdAt": now_in_app_timezone().isoformat(),
        },
    }
    return BroadcastResponse(delivered=dispatcher.dispatch_broadcast(message))


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationRead:
    """Mark one of the caller's notifications as read."""

    try:
        notification = mark_notification_read(
            db, notification_id, requesting_user_id=current_user.id
        )
    except NotificationError as exc:
        raise notification_error_to_http(exc) from exc
    return _notification_to_schema(notification)


def _authenticate(user_id: Any, token: Any) -> tuple[User, int]:
    """Resolve ``token`` and check it belongs to ``user_id``; runs on a worker thread."""

    session = SessionLocal()
    try:
        user = resolve_current_user(str(token), session)
        if str(user.id) != str(user_id):
            raise ValueError("Token does not belong to the requested user")
        if not user.is_active:
            raise ValueError("Inactive user")
        unread = NotificationRepository(session).count_unread(user.id)
    finally:
        session.close()
    return user, unread


async def _handle_authenticate(
    connection: NotificationConnection,
    registry: ConnectionRegistry,
    payload: dict[str, Any],
) -> None:
    user_id = payload.get("userId")
    token = payload.get("token")
    if not user_id or not token:
        registry.leave(connection)
        connection.send_nowait(
            {"type": "auth_error", "data": {"message": "userId and token are required"}}
        )
        return

    try:
        user, unread = await to_thread.run_sync(_authenticate, user_id, token)
    except (HTTPException, ValueError) as exc:
        detail = exc.detail if isinstance(exc, HTTPException) else str(exc)
        logger.info("Websocket authentication failed for user %s: %s", user_id, detail)
        registry.leave(connection)
        connection.send_nowait({"type": "auth_error", "data": {"message": detail}})
        return

    registry.join(user.id, connection)
    connection.send_nowait(
        {"type": "auth_success", "data": {"userId": user.id, "unreadCount": unread}}
    )


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint that streams notifications once the client authenticates."""

    registry: ConnectionRegistry = websocket.app.state.connection_registry
    await websocket.accept()
    connection = NotificationConnection(
        websocket, queue_size=get_settings().ws_send_queue_size
    )
    writer = asyncio.create_task(connection.run_writer())
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except (ValueError, KeyError, TypeError):
                connection.send_nowait(
                    {"type": "error", "data": {"message": "Messages must be JSON objects"}}
                )
                continue

            if not isinstance(message, dict):
                connection.send_nowait(
                    {"type": "error", "data": {"message": "Messages must be JSON objects"}}
                )
                continue

            message_type = message.get("type")
            if message_type == "ping":
                connection.send_nowait({"type": "pong"})
            elif message_type == "authenticate":
                data = message.get("data")
                if not isinstance(data, dict):
                    registry.leave(connection)
                    connection.send_nowait(
                        {
                            "type": "auth_error",
                            "data": {"message": "authenticate expects a data object"},
                        }
                    )
                    continue
                await _handle_authenticate(connection, registry, data)
            else:
                connection.send_nowait(
                    {
                        "type": "error",
                        "data": {"message": f"Unknown message type: {message_type}"},
                    }
                )
    except WebSocketDisconnect:
        pass
    except DeliveryError as exc:
        logger.warning("Closing connection %s: %s", connection.id, exc)
    finally:
        registry.leave(connection)
        connection.mark_closed()
        writer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await writer
