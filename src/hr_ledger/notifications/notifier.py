from __future__ import annotations

import logging
from typing import Optional, Protocol

from ..core.enums import NotificationKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(
        self,
        user_id: int,
        kind: NotificationKind,
        title: str,
        message: str,
        link: Optional[str] = None,
    ) -> None:
        raise NotImplementedError


class MySQLNotifier(Notifier):
    """Stores notifications as unread rows for the front-end to poll."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def notify(
        self,
        user_id: int,
        kind: NotificationKind,
        title: str,
        message: str,
        link: Optional[str] = None,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, kind, title, message, link)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), NotificationKind(kind).value, title, message, link),
            )


def send_quietly(
    notifier: Optional[Notifier],
    user_id: int,
    kind: NotificationKind,
    title: str,
    message: str,
    link: Optional[str] = None,
) -> None:
    """Fire-and-forget delivery: a failed notification never fails the caller."""
    if notifier is None:
        return
    try:
        notifier.notify(user_id, kind, title, message, link)
    except Exception:
        logger.exception("Failed to deliver %s notification to user %s", NotificationKind(kind).value, user_id)
