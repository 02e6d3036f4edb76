from __future__ import annotations

import asyncio

import pytest

from bulkorder.core.exceptions import CartServiceException
from bulkorder.domain.submission import SubmissionStatus
from bulkorder.services.bulk_order_form import BulkOrderForm
from bulkorder.services.cart_submitter import SubmitOutcome
from bulkorder.services.feedback import FeedbackKind


@pytest.mark.asyncio
async def test_new_cart_is_created_when_none_is_active(form, cart_service, navigations) -> None:
    form.set_quantity(1, "2")

    result = await form.submit()

    assert result.success
    assert result.created
    assert result.cart_id == "new-cart"
    assert cart_service.dispatches == [("create", {"lineItems": [{"productId": 1, "quantity": 2}]})]
    assert navigations == ["/cart"]
    assert form.state.status == SubmissionStatus.SUCCEEDED


@pytest.mark.asyncio
async def test_items_are_appended_to_existing_cart(form, cart_service, navigations) -> None:
    cart_service.active_carts = [{"cartId": "abc"}]
    form.set_quantity(1, "3")
    form.set_quantity(2, "1")

    result = await form.submit()

    assert result.success
    assert not result.created
    assert cart_service.dispatches == [
        (
            "append",
            "abc",
            {"lineItems": [{"productId": 1, "quantity": 3}, {"productId": 2, "quantity": 1}]},
        )
    ]
    assert navigations == ["/cart"]


@pytest.mark.asyncio
async def test_append_goes_to_first_of_several_carts(form, cart_service) -> None:
    cart_service.active_carts = [{"cartId": "first"}, {"cartId": "second"}]
    form.set_quantity(2, "1")

    await form.submit()

    assert [call[:2] for call in cart_service.dispatches] == [("append", "first")]


@pytest.mark.asyncio
async def test_nothing_selected_makes_no_network_call(form, cart_service, navigations) -> None:
    result = await form.submit()

    assert result.outcome == SubmitOutcome.VALIDATION_FAILED
    assert cart_service.calls == []
    assert form.message == "select a quantity for at least one item"
    assert form.message_kind == FeedbackKind.VALIDATION
    assert form.state.status == SubmissionStatus.IDLE
    assert form.submit_enabled
    assert navigations == []


@pytest.mark.asyncio
async def test_create_failure_shows_service_error_and_rearms(form, cart_service, navigations) -> None:
    cart_service.write_error = CartServiceException(
        "Cart service returned HTTP 422", status=422, service_message="Product 1 is unavailable"
    )
    form.set_quantity(1, "2")

    result = await form.submit()

    assert result.outcome == SubmitOutcome.FAILED
    assert form.message == "Product 1 is unavailable"
    assert form.message_kind == FeedbackKind.ERROR
    assert form.submit_enabled
    assert form.state.status == SubmissionStatus.IDLE
    assert navigations == []


@pytest.mark.asyncio
async def test_failure_without_service_text_uses_generic_message(form, cart_service, settings) -> None:
    cart_service.write_error = CartServiceException("Cart service unavailable: connection reset")
    form.set_quantity(1, "1")

    result = await form.submit()

    assert result.error_message == settings.messages.generic_failure
    assert form.message == settings.messages.generic_failure


@pytest.mark.asyncio
async def test_resolution_failure_skips_dispatch(form, cart_service) -> None:
    cart_service.resolve_error = CartServiceException("Cart service request timed out")
    form.set_quantity(1, "1")

    result = await form.submit()

    assert result.outcome == SubmitOutcome.FAILED
    assert cart_service.dispatches == []
    assert form.state.status == SubmissionStatus.IDLE
    assert form.message_kind == FeedbackKind.ERROR


@pytest.mark.asyncio
async def test_retry_after_failure_succeeds(form, cart_service, navigations) -> None:
    cart_service.write_error = CartServiceException("Cart service returned HTTP 503", status=503)
    form.set_quantity(1, "1")
    assert (await form.submit()).outcome == SubmitOutcome.FAILED

    cart_service.write_error = None
    form.set_quantity(1, "2")
    assert form.message == ""

    result = await form.submit()

    assert result.success
    assert len(cart_service.dispatches) == 2
    assert navigations == ["/cart"]


@pytest.mark.asyncio
async def test_repeated_triggers_while_in_flight_dispatch_once(form, cart_service) -> None:
    cart_service.gate = asyncio.Event()
    form.set_quantity(1, "2")

    in_flight = asyncio.create_task(form.submit())
    await asyncio.sleep(0)

    assert form.state.status == SubmissionStatus.SUBMITTING
    assert form.message_kind == FeedbackKind.PROGRESS
    assert not form.submit_enabled

    extra = [await form.submit() for _ in range(3)]
    assert [result.outcome for result in extra] == [SubmitOutcome.REJECTED] * 3

    cart_service.gate.set()
    result = await in_flight

    assert result.success
    assert len(cart_service.dispatches) == 1
    assert cart_service.calls.count(("list",)) == 1


@pytest.mark.asyncio
async def test_edits_during_flight_do_not_change_payload(form, cart_service) -> None:
    cart_service.gate = asyncio.Event()
    form.set_quantity(1, "2")

    in_flight = asyncio.create_task(form.submit())
    await asyncio.sleep(0)
    form.set_quantity(2, "5")
    form.set_quantity(1, "9")
    cart_service.gate.set()
    await in_flight

    assert cart_service.dispatches == [("create", {"lineItems": [{"productId": 1, "quantity": 2}]})]
    assert form.store.get_quantity(2) == 5
    assert form.message_kind != FeedbackKind.ERROR


@pytest.mark.asyncio
async def test_submit_after_success_is_rejected(form, cart_service) -> None:
    form.set_quantity(1, "1")
    await form.submit()

    result = await form.submit()

    assert result.outcome == SubmitOutcome.REJECTED
    assert len(cart_service.dispatches) == 1


@pytest.mark.asyncio
async def test_unexpected_error_is_contained(form, cart_service) -> None:
    async def _broken(payload):
        raise RuntimeError("bug in client")

    cart_service.create_cart = _broken
    form.set_quantity(1, "1")

    result = await form.submit()

    assert result.outcome == SubmitOutcome.FAILED
    assert form.submit_enabled


@pytest.mark.asyncio
async def test_navigation_error_does_not_hide_successful_write(catalog, cart_service, settings) -> None:
    def _navigate(url: str) -> None:
        raise RuntimeError("router gone")

    form = BulkOrderForm(catalog, cart_service, settings, navigate=_navigate)
    form.set_quantity(1, "1")

    result = await form.submit()

    assert result.success
    assert result.redirect_url == "/cart"
    assert len(cart_service.dispatches) == 1
    assert form.state.status == SubmissionStatus.SUCCEEDED
