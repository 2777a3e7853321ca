from __future__ import annotations

from collections.abc import Collection, Iterable
from datetime import datetime

from app.game.questions.types import CampaignQuestion


def next_regular_question(
    questions: Iterable[CampaignQuestion],
    *,
    answered_question_ids: Collection[int],
    day_index_now: int,
) -> CampaignQuestion | None:
    """Earliest due regular question the player has not answered yet."""
    due = sorted(
        (
            question
            for question in questions
            if not question.is_special
            and question.day_index is not None
            and question.day_index <= day_index_now
        ),
        key=lambda question: (question.day_index, question.question_id),
    )
    for question in due:
        if question.question_id not in answered_question_ids:
            return question
    return None


def open_special_questions(
    questions: Iterable[CampaignQuestion],
    *,
    answered_question_ids: Collection[int],
    now_utc: datetime,
) -> list[CampaignQuestion]:
    # Specials stay visible after their window; lateness is priced at scoring time.
    started = [
        question
        for question in questions
        if question.is_special
        and question.special_start_at is not None
        and question.special_start_at <= now_utc
        and question.question_id not in answered_question_ids
    ]
    return sorted(started, key=lambda question: (question.special_start_at, question.question_id))


def resolve_visible_questions(
    questions: Iterable[CampaignQuestion],
    *,
    answered_question_ids: Collection[int],
    day_index_now: int,
    now_utc: datetime,
) -> list[CampaignQuestion]:
    candidates = list(questions)
    visible: list[CampaignQuestion] = []
    regular = next_regular_question(
        candidates,
        answered_question_ids=answered_question_ids,
        day_index_now=day_index_now,
    )
    if regular is not None:
        visible.append(regular)
    visible.extend(
        open_special_questions(
            candidates,
            answered_question_ids=answered_question_ids,
            now_utc=now_utc,
        )
    )
    return visible
