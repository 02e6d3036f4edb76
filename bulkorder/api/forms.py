"""Per-session registry of bulk order forms with LRU and idle-TTL eviction."""
from __future__ import annotations

import logging
import secrets
import time
from collections import OrderedDict
from dataclasses import replace
from typing import Callable

from bulkorder.core.config import Settings
from bulkorder.domain.items import Item
from bulkorder.services.bulk_order_form import BulkOrderForm

logger = logging.getLogger(__name__)

FormFactory = Callable[[str], BulkOrderForm]


class FormRegistry:
    """
    One BulkOrderForm per shopper session, created lazily from the catalog.

    At most ``settings.max_forms`` forms are held; the least recently used
    ones go first, and forms idle longer than ``settings.form_ttl`` seconds
    are dropped on the next access. Evicted forms are closed. A form with a
    submission in flight is never evicted.
    """

    def __init__(
        self,
        settings: Settings,
        catalog: list[Item],
        factory: FormFactory | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings
        self.catalog = list(catalog)
        self._factory = factory or self._default_factory
        self._clock = clock
        self._forms: OrderedDict[str, BulkOrderForm] = OrderedDict()
        self._last_access: dict[str, float] = {}

    def _default_factory(self, session_id: str) -> BulkOrderForm:
        # each form gets its own Item copies; quantities are per session
        items = [replace(item, quantity=0) for item in self.catalog]
        cookies = {self.settings.session_cookie: session_id}
        return BulkOrderForm.with_client(items, self.settings, cookies=cookies)

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(24)

    def __len__(self) -> int:
        return len(self._forms)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._forms

    async def get(self, session_id: str) -> BulkOrderForm:
        now = self._clock()
        await self._evict_expired(now)

        form = self._forms.get(session_id)
        if form is None:
            form = self._factory(session_id)
            self._forms[session_id] = form
            logger.debug("Created bulk order form for session %s...", session_id[:6])
        self._forms.move_to_end(session_id)
        self._last_access[session_id] = now

        await self._evict_overflow(keep=session_id)
        return form

    async def _evict_expired(self, now: float) -> None:
        expired = [
            session_id
            for session_id, last_access in self._last_access.items()
            if now - last_access > self.settings.form_ttl and not self._forms[session_id].guard.is_engaged
        ]
        for session_id in expired:
            logger.debug("Evicting idle form for session %s...", session_id[:6])
            await self.discard(session_id)

    async def _evict_overflow(self, keep: str) -> None:
        if len(self._forms) <= self.settings.max_forms:
            return
        candidates = [
            session_id
            for session_id, form in self._forms.items()
            if session_id != keep and not form.guard.is_engaged
        ]
        overflow = len(self._forms) - self.settings.max_forms
        for session_id in candidates[:overflow]:
            logger.info("Form registry full; evicting session %s...", session_id[:6])
            await self.discard(session_id)

    async def discard(self, session_id: str) -> None:
        form = self._forms.pop(session_id, None)
        self._last_access.pop(session_id, None)
        if form is not None:
            await form.close()

    async def close(self) -> None:
        for session_id in list(self._forms):
            await self.discard(session_id)
