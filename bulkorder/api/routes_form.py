from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel

from bulkorder.api.forms import FormRegistry
from bulkorder.services.bulk_order_form import BulkOrderForm
from bulkorder.services.cart_submitter import SubmitOutcome

logger = logging.getLogger(__name__)

router = APIRouter()

_registry: FormRegistry | None = None


def set_form_registry(registry: FormRegistry | None) -> None:
    """Set the form registry used by the routes."""
    global _registry
    _registry = registry


def get_registry() -> FormRegistry:
    if _registry is None:
        raise HTTPException(status_code=500, detail="Form registry not initialized")
    return _registry


def get_session_id(
    request: Request,
    response: Response,
    registry: FormRegistry = Depends(get_registry),
) -> str:
    cookie_name = registry.settings.session_cookie
    session_id = request.cookies.get(cookie_name)
    if not session_id:
        session_id = registry.new_session_id()
        response.set_cookie(cookie_name, session_id, httponly=True, samesite="lax")
    return session_id


async def get_form(
    session_id: str = Depends(get_session_id),
    registry: FormRegistry = Depends(get_registry),
) -> BulkOrderForm:
    return await registry.get(session_id)


# =============================================================================
# Pydantic Models
# =============================================================================


class ItemResponse(BaseModel):
    id: int | str
    display_name: str
    image_reference: str | None = None
    formatted_price: str
    quantity: int


class FormResponse(BaseModel):
    items: list[ItemResponse]
    message: str
    message_kind: str
    submit_enabled: bool
    state: str


class QuantityUpdateRequest(BaseModel):
    item_id: int | str
    value: int | float | str


class QuantityStepRequest(BaseModel):
    item_id: int | str
    delta: int


class SubmitResponse(BaseModel):
    outcome: str
    cart_id: str | None = None
    created: bool = False
    message: str
    redirect_url: str | None = None


def _form_response(form: BulkOrderForm) -> FormResponse:
    return FormResponse(
        items=[ItemResponse(**item.to_dict()) for item in form.items],
        message=form.message,
        message_kind=form.message_kind,
        submit_enabled=form.submit_enabled,
        state=form.state.status,
    )


def _resolve_item_id(form: BulkOrderForm, raw_id: Any) -> Any:
    """JSON clients may send "3" for an int id; match on the string form."""
    if raw_id in form.store:
        return raw_id
    for item in form.items:
        if str(item.id) == str(raw_id):
            return item.id
    return raw_id


# =============================================================================
# Routes
# =============================================================================


@router.get("/form", response_model=FormResponse)
async def get_form_state(form: BulkOrderForm = Depends(get_form)):
    """Items with current quantities and the latest feedback message."""
    return _form_response(form)


@router.post("/form/quantity", response_model=FormResponse)
async def update_quantity(
    body: QuantityUpdateRequest,
    form: BulkOrderForm = Depends(get_form),
):
    form.set_quantity(_resolve_item_id(form, body.item_id), body.value)
    return _form_response(form)


@router.post("/form/quantity/step", response_model=FormResponse)
async def step_quantity(
    body: QuantityStepRequest,
    form: BulkOrderForm = Depends(get_form),
):
    form.step_quantity(_resolve_item_id(form, body.item_id), body.delta)
    return _form_response(form)


@router.post("/form/submit", response_model=SubmitResponse)
async def submit_form(
    session_id: str = Depends(get_session_id),
    registry: FormRegistry = Depends(get_registry),
):
    """Add every selected item to the shopper's cart in one request."""
    form = await registry.get(session_id)
    result = await form.submit()

    if result.outcome == SubmitOutcome.SUCCEEDED:
        # the form's life ends with the redirect
        await registry.discard(session_id)
    elif result.outcome == SubmitOutcome.REJECTED:
        logger.info("Duplicate submit ignored for session %s...", session_id[:6])

    return SubmitResponse(
        outcome=result.outcome,
        cart_id=result.cart_id,
        created=result.created,
        message=result.error_message or form.message,
        redirect_url=result.redirect_url,
    )


@router.get("/health")
async def health():
    return {"status": "ok"}
