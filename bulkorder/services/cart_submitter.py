"""
Cart Submitter - turns the current quantities into one cart write.

One attempt:
- rejected outright while another attempt is in flight
- validation message (and no network) when nothing is selected
- resolve the active cart, then create a cart or append to the existing one
- success requests navigation to the cart view; failure shows an error and
  re-arms the submit trigger
"""
from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol

from bulkorder.core.config import MessagesConfig
from bulkorder.core.exceptions import (
    CartServiceException,
    ResolutionException,
    SubmissionException,
)
from bulkorder.domain.items import CartReference
from bulkorder.services.cart_resolver import CartResolver, cart_id_from_summary
from bulkorder.services.feedback import FeedbackChannel
from bulkorder.services.line_items import build_line_items, line_items_payload
from bulkorder.services.quantity_store import ItemQuantityStore
from bulkorder.services.submission_guard import SubmissionGuard

logger = logging.getLogger(__name__)

Navigate = Callable[[str], Any]


class CartWriter(Protocol):
    async def create_cart(self, payload: dict[str, Any]) -> Any: ...

    async def append_items(self, cart_id: str, payload: dict[str, Any]) -> Any: ...


class SubmitOutcome:
    REJECTED = "rejected"
    VALIDATION_FAILED = "validation_failed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class SubmitResult:
    """Result of one submit trigger."""

    outcome: str
    cart_id: str | None = None
    created: bool = False
    error_message: str | None = None
    redirect_url: str | None = None

    @property
    def success(self) -> bool:
        return self.outcome == SubmitOutcome.SUCCEEDED


class CartSubmitter:
    """Create-or-append against the cart service, gated by a SubmissionGuard."""

    def __init__(
        self,
        store: ItemQuantityStore,
        resolver: CartResolver,
        writer: CartWriter,
        guard: SubmissionGuard,
        feedback: FeedbackChannel,
        *,
        messages: MessagesConfig | None = None,
        cart_view_url: str = "/cart",
        navigate: Navigate | None = None,
    ):
        self.store = store
        self.resolver = resolver
        self.writer = writer
        self.guard = guard
        self.feedback = feedback
        self.messages = messages or MessagesConfig()
        self.cart_view_url = cart_view_url
        self.navigate = navigate

    async def submit(self) -> SubmitResult:
        if not self.guard.submit_enabled:
            return SubmitResult(outcome=SubmitOutcome.REJECTED)

        # Computed before the first await: later edits never reach this payload.
        line_items = build_line_items(self.store.items)
        if not line_items:
            self.feedback.show_validation(self.messages.validation)
            return SubmitResult(
                outcome=SubmitOutcome.VALIDATION_FAILED,
                error_message=self.messages.validation,
            )

        if not self.guard.try_acquire():
            return SubmitResult(outcome=SubmitOutcome.REJECTED)

        self.feedback.show_progress(self.messages.progress)
        payload = line_items_payload(line_items)
        logger.info("Submitting %s line items", len(line_items))

        try:
            cart = await self.resolver.resolve_active_cart()
            cart_id, created = await self._dispatch(cart, payload)
        except (ResolutionException, SubmissionException) as exc:
            return self._fail(exc.service_message, exc.message)
        except Exception as exc:
            logger.exception("Unexpected error while submitting cart: %s", exc)
            return self._fail(None, str(exc))

        self.guard.mark_succeeded()
        logger.info("Cart %s %s", cart_id or "<new>", "created" if created else "updated")
        await self._request_navigation()
        return SubmitResult(
            outcome=SubmitOutcome.SUCCEEDED,
            cart_id=cart_id,
            created=created,
            redirect_url=self.cart_view_url,
        )

    async def _dispatch(
        self, cart: CartReference | None, payload: dict[str, Any]
    ) -> tuple[str | None, bool]:
        try:
            if cart is None:
                response = await self.writer.create_cart(payload)
                cart_id = cart_id_from_summary(response) if isinstance(response, Mapping) else None
                return cart_id, True
            await self.writer.append_items(cart.cart_id, payload)
            return cart.cart_id, False
        except CartServiceException as exc:
            raise SubmissionException(exc.message, service_message=exc.service_message) from exc

    def _fail(self, service_message: str | None, reason: str) -> SubmitResult:
        user_message = service_message or self.messages.generic_failure
        logger.warning("Cart submission failed: %s", reason)
        self.feedback.show_error(user_message)
        self.guard.mark_failed(reason)
        return SubmitResult(outcome=SubmitOutcome.FAILED, error_message=user_message)

    async def _request_navigation(self) -> None:
        if self.navigate is None:
            return
        try:
            result = self.navigate(self.cart_view_url)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            # the cart write already happened; the caller still gets the result
            logger.exception("Navigation to %s failed: %s", self.cart_view_url, exc)
