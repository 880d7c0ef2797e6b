"""Dismissible, control-scoped messages shown to the user."""

from __future__ import annotations

from logging import getLogger

from giftstep.domain.model import NoticeScope

log = getLogger(__name__)


class Notices:
    """At most one message per control; a newer message replaces the older one."""

    def __init__(self) -> None:
        self._messages: dict[NoticeScope, str] = {}

    def report(self, scope: NoticeScope, message: str) -> None:
        log.debug("notice for %s: %s", scope, message)
        self._messages[scope] = message

    def dismiss(self, scope: NoticeScope) -> None:
        self._messages.pop(scope, None)

    def clear(self) -> None:
        self._messages.clear()

    def get(self, scope: NoticeScope) -> str | None:
        return self._messages.get(scope)

    def as_dict(self) -> dict[str, str]:
        return {str(scope): message for scope, message in self._messages.items()}

    @property
    def has_messages(self) -> bool:
        return bool(self._messages)
