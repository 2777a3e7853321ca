from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from app.db.constraints import violated_constraint
from app.game.answers import service as answers_service
from app.game.errors import AnswerAlreadySubmittedError

UTC = timezone.utc
NOW_UTC = datetime(2026, 3, 4, 15, 0, 20, tzinfo=UTC)


class _DriverError(Exception):
    def __init__(self, constraint_name: str) -> None:
        super().__init__(f'violates constraint "{constraint_name}"')
        self.constraint_name = constraint_name


def _integrity_error(constraint_name: str, *, wrapped: bool = True) -> IntegrityError:
    driver_error = _DriverError(constraint_name)
    if not wrapped:
        return IntegrityError("INSERT INTO answers", {}, driver_error)
    adapted = Exception(str(driver_error))
    adapted.__cause__ = driver_error
    return IntegrityError("INSERT INTO answers", {}, adapted)


def _async_return(value):
    async def _call(*args, **kwargs):
        return value

    return _call


def _async_raise(exc: Exception):
    async def _call(*args, **kwargs):
        raise exc

    return _call


def _patch_submit_path(monkeypatch, *, insert_error: IntegrityError) -> None:
    question = SimpleNamespace(
        id=21,
        campaign_id=3,
        text="Flash round",
        choices=["A", "B"],
        answer=0,
        points_on_time=1000,
        points_late=500,
        day_index=None,
        schedule_time=time(8, 0),
        deadline_time=time(18, 0),
        is_special=True,
        special_start_at=NOW_UTC - timedelta(seconds=20),
        special_window_minutes=1,
    )
    monkeypatch.setattr(
        answers_service,
        "PlayersRepo",
        SimpleNamespace(get_by_id_for_update=_async_return(SimpleNamespace(score=0, game_coins=0))),
    )
    monkeypatch.setattr(
        answers_service,
        "QuestionsRepo",
        SimpleNamespace(get_by_id=_async_return(question)),
    )
    monkeypatch.setattr(
        answers_service,
        "AnswersRepo",
        SimpleNamespace(
            get_for_player_question=_async_return(None),
            create=_async_raise(insert_error),
        ),
    )


def test_violated_constraint_reads_driver_error_behind_adapter() -> None:
    assert violated_constraint(_integrity_error("uq_answers_player_question")) == (
        "uq_answers_player_question"
    )


def test_violated_constraint_reads_driver_error_directly() -> None:
    exc = _integrity_error("answers_question_id_fkey", wrapped=False)
    assert violated_constraint(exc) == "answers_question_id_fkey"


def test_violated_constraint_is_none_without_driver_details() -> None:
    exc = IntegrityError("INSERT INTO answers", {}, Exception("boom"))
    assert violated_constraint(exc) is None


@pytest.mark.asyncio
async def test_submit_answer_maps_duplicate_pair_to_already_answered(monkeypatch) -> None:
    _patch_submit_path(monkeypatch, insert_error=_integrity_error("uq_answers_player_question"))

    with pytest.raises(AnswerAlreadySubmittedError):
        await answers_service.submit_answer(
            object(),
            player_id=1,
            question_id=21,
            campaign_id=3,
            selected_answer=0,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_submit_answer_propagates_foreign_key_failures(monkeypatch) -> None:
    fk_error = _integrity_error("answers_question_id_fkey")
    _patch_submit_path(monkeypatch, insert_error=fk_error)

    with pytest.raises(IntegrityError) as raised:
        await answers_service.submit_answer(
            object(),
            player_id=1,
            question_id=21,
            campaign_id=3,
            selected_answer=0,
            now_utc=NOW_UTC,
        )

    assert raised.value is fk_error
