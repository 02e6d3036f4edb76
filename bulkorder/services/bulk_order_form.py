"""One bulk order form: the owned state plus the components that act on it."""
from __future__ import annotations

from typing import Any, Iterable

from bulkorder.core.config import Settings
from bulkorder.domain.items import Item
from bulkorder.domain.submission import SubmissionState
from bulkorder.integrations.cart_service import CartServiceClient
from bulkorder.services.cart_resolver import CartResolver
from bulkorder.services.cart_submitter import CartSubmitter, Navigate, SubmitResult
from bulkorder.services.feedback import FeedbackChannel
from bulkorder.services.quantity_store import ItemQuantityStore
from bulkorder.services.submission_guard import SubmissionGuard


class BulkOrderForm:
    """Entry point used by the presentation layer."""

    def __init__(
        self,
        items: Iterable[Item],
        cart_service: Any,
        settings: Settings,
        navigate: Navigate | None = None,
    ):
        self.feedback = FeedbackChannel()
        self.store = ItemQuantityStore(items, self.feedback)
        self.guard = SubmissionGuard()
        self.cart_service = cart_service
        self.submitter = CartSubmitter(
            self.store,
            CartResolver(cart_service),
            cart_service,
            self.guard,
            self.feedback,
            messages=settings.messages,
            cart_view_url=settings.cart_view_url,
            navigate=navigate,
        )

    @classmethod
    def with_client(
        cls,
        items: Iterable[Item],
        settings: Settings,
        *,
        cookies: dict[str, str] | None = None,
        navigate: Navigate | None = None,
    ) -> BulkOrderForm:
        client = CartServiceClient(settings.cart_service, cookies=cookies)
        return cls(items, client, settings, navigate)

    @property
    def items(self) -> tuple[Item, ...]:
        return self.store.items

    @property
    def message(self) -> str:
        return self.feedback.message

    @property
    def message_kind(self) -> str:
        return self.feedback.kind

    @property
    def submit_enabled(self) -> bool:
        return self.guard.submit_enabled

    @property
    def state(self) -> SubmissionState:
        return self.guard.state

    def set_quantity(self, item_id: Any, raw_value: Any) -> None:
        self.store.set_quantity(item_id, raw_value)

    def step_quantity(self, item_id: Any, delta: int) -> None:
        self.store.step_quantity(item_id, delta)

    async def submit(self) -> SubmitResult:
        return await self.submitter.submit()

    async def close(self) -> None:
        close = getattr(self.cart_service, "close", None)
        if close is not None:
            await close()
