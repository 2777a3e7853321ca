from __future__ import annotations

from fastapi import HTTPException

from app.economy.adjustments.errors import (
    AdjustmentIdempotencyConflictError,
    AdjustmentInvalidError,
    AdjustmentPlayerNotFoundError,
)
from app.economy.store.errors import (
    InsufficientCoinsError,
    ProductAlreadyPurchasedError,
    ProductNotFoundError,
    ProductOutOfStockError,
    ProductUnavailableError,
    ProductValidationError,
    StorePlayerNotFoundError,
)
from app.game.errors import (
    AnswerAlreadySubmittedError,
    CampaignNotFoundError,
    CampaignValidationError,
    InvalidAnswerOptionError,
    PlayerNotFoundError,
    QuestionNotFoundError,
    TeamNameTakenError,
    TeamNotFoundError,
)

ERROR_RESPONSES: dict[type[Exception], tuple[int, str, str]] = {
    AnswerAlreadySubmittedError: (409, "E_ALREADY_ANSWERED", "you already answered this question"),
    ProductAlreadyPurchasedError: (409, "E_ALREADY_PURCHASED", "you already bought this item"),
    ProductOutOfStockError: (409, "E_OUT_OF_STOCK", "out of stock"),
    InsufficientCoinsError: (409, "E_INSUFFICIENT_COINS", "not enough coins"),
    ProductUnavailableError: (409, "E_PRODUCT_UNAVAILABLE", "this item is not on sale right now"),
    TeamNameTakenError: (409, "E_TEAM_NAME_TAKEN", "team name already taken"),
    AdjustmentIdempotencyConflictError: (
        409,
        "E_IDEMPOTENCY_CONFLICT",
        "idempotency key was already used for a different adjustment",
    ),
    QuestionNotFoundError: (404, "E_QUESTION_NOT_FOUND", "question not found"),
    CampaignNotFoundError: (404, "E_CAMPAIGN_NOT_FOUND", "campaign not found"),
    PlayerNotFoundError: (404, "E_PLAYER_NOT_FOUND", "player not found"),
    StorePlayerNotFoundError: (404, "E_PLAYER_NOT_FOUND", "player not found"),
    AdjustmentPlayerNotFoundError: (404, "E_PLAYER_NOT_FOUND", "player not found"),
    ProductNotFoundError: (404, "E_PRODUCT_NOT_FOUND", "product not found"),
    TeamNotFoundError: (404, "E_TEAM_NOT_FOUND", "team not found"),
    InvalidAnswerOptionError: (422, "E_INVALID_ANSWER_OPTION", "selected answer is not one of the choices"),
    CampaignValidationError: (422, "E_VALIDATION", "invalid request"),
    ProductValidationError: (422, "E_VALIDATION", "invalid request"),
    AdjustmentInvalidError: (422, "E_VALIDATION", "invalid request"),
}

HANDLED_ERRORS: tuple[type[Exception], ...] = tuple(ERROR_RESPONSES)


def as_http_exception(exc: Exception) -> HTTPException:
    status_code, code, message = ERROR_RESPONSES[type(exc)]
    detail: dict[str, str] = {"code": code, "message": message}
    if status_code == 422 and exc.args:
        detail["message"] = str(exc.args[0])
    return HTTPException(status_code=status_code, detail=detail)
