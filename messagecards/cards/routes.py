from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from messagecards.cards.errors import CardNotFound, DuplicateCardId, InvalidCardInput
from messagecards.cards.models import Card, CardCreate, CardCreated
from messagecards.cards.service import get_card_service
from messagecards.cards.share import build_share_url
from messagecards.common.error_envelope import error_response
from messagecards.common.identity import RequestContext, get_request_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cards", tags=["cards"])


@router.post("", response_model=CardCreated)
def create_card(
    payload: CardCreate,
    context: RequestContext = Depends(get_request_context),
):
    try:
        card = get_card_service().create(payload, context)
    except InvalidCardInput as exc:
        error_response(
            code="cards.invalid_input",
            message=str(exc),
            status_code=400,
            resource_kind="card",
            details={"field": exc.field},
        )
    except DuplicateCardId as exc:
        logger.error("duplicate card id generated rid=%s id=%s", context.request_id, exc.card_id)
        error_response(
            code="cards.duplicate_id",
            message="Card id collision",
            status_code=500,
            resource_kind="card",
        )
    return CardCreated(id=card.id, share_url=build_share_url(card.id))


@router.get("/{card_id}", response_model=Card)
def get_card(card_id: str):
    try:
        return get_card_service().get_by_id(card_id)
    except CardNotFound as exc:
        error_response(
            code="cards.not_found",
            message=str(exc),
            status_code=404,
            resource_kind="card",
        )
