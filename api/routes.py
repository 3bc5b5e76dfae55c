"""
api/routes.py — FastAPI endpoints
"""

import asyncio

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

import api.session as session

from timed_quiz.errors import (
    ContentUnavailable, EmptyQuestionSet, InvalidOptionIndex, SessionNotActive,
)
from timed_quiz.models.question_model import Question
from timed_quiz.services import session_controller as ctl
from timed_quiz.services.deadline_timer import format_remaining, is_warning
from timed_quiz.services.exam_runner import ExamRunner

router = APIRouter()

# ── Pydantic request bodies ──────────────────────────────────────────────────

class OpenTestBody(BaseModel):
    user_id: str

class SelectAnswerBody(BaseModel):
    question_id: str
    option_index: int

class NavigateBody(BaseModel):
    index: int = 0


# ── helpers ──────────────────────────────────────────────────────────────────

def _question_to_dict(q: Question) -> dict:
    # correct answer and explanation stay server-side until the review screen
    return {
        "id": q.id,
        "question": q.question,
        "options": q.options,
    }


def _runner(request: Request) -> ExamRunner:
    runner: ExamRunner | None = session.get(request.state.session_id, "runner")
    if runner is None:
        raise HTTPException(status_code=404, detail="No exam session.")
    return runner


def _active_runner(request: Request) -> ExamRunner:
    runner = _runner(request)
    if not runner.state.is_active:
        raise HTTPException(status_code=400, detail="The exam is already finished.")
    return runner


def _state_to_dict(runner: ExamRunner) -> dict:
    state = runner.state
    return {
        "status": state.status.value,
        "test_id": state.test.id,
        "title": state.test.title,
        "current_index": state.current_index,
        "total": state.total,
        "remaining_seconds": state.remaining_seconds,
        "remaining_display": format_remaining(state.remaining_seconds),
        "time_warning": is_warning(state.remaining_seconds),
        "progress": ctl.progress_fraction(state),
        "answered": ctl.answered_flags(state),
        "answered_count": ctl.answered_count(state),
        "question_ids": [q.id for q in state.questions],
    }


def _summary_to_dict(runner: ExamRunner) -> dict:
    summary = runner.summary()
    if summary is None:
        raise HTTPException(status_code=409, detail="The exam has not been finished yet.")
    return summary.model_dump(mode="json")


# ── endpoints ────────────────────────────────────────────────────────────────

@router.post("/api/tests/{test_id}/open")
async def open_test(test_id: str, body: OpenTestBody, request: Request):
    sid = request.state.session_id
    previous: ExamRunner | None = session.get(sid, "runner")
    if previous is not None:
        previous.abandon()
        session.put(sid, "runner", None)

    try:
        runner = await asyncio.to_thread(
            ExamRunner.open, request.app.state.store, test_id, body.user_id
        )
    except LookupError:
        raise HTTPException(status_code=404, detail="Test not found.")
    except EmptyQuestionSet:
        return {"status": "empty", "test_id": test_id}
    except ContentUnavailable:
        raise HTTPException(status_code=503, detail="Test content is unavailable. Please try again later.")

    runner.start()
    session.put(sid, "user_id", body.user_id)
    session.put(sid, "runner", runner)
    return _state_to_dict(runner)


@router.get("/api/exam-state")
async def get_exam_state(request: Request):
    return _state_to_dict(_runner(request))


@router.get("/api/question/{index}")
async def get_question(index: int, request: Request):
    state = _runner(request).state
    if not (0 <= index < state.total):
        raise HTTPException(status_code=404, detail="Question not found.")

    q = state.questions[index]
    d = _question_to_dict(q)
    d.update({"saved_answer": state.answers.get(q.id), "index": index, "total": state.total})
    return d


@router.post("/api/select-answer")
async def select_answer(body: SelectAnswerBody, request: Request):
    state = _active_runner(request).state
    try:
        ctl.select_answer(state, body.question_id, body.option_index)
    except InvalidOptionIndex:
        return {"accepted": False, "answered_count": ctl.answered_count(state)}
    return {"accepted": True, "answered_count": ctl.answered_count(state)}


@router.post("/api/next")
async def go_next(request: Request):
    state = _active_runner(request).state
    return {"index": ctl.go_next(state), "progress": ctl.progress_fraction(state)}


@router.post("/api/previous")
async def go_previous(request: Request):
    state = _active_runner(request).state
    return {"index": ctl.go_previous(state), "progress": ctl.progress_fraction(state)}


@router.post("/api/navigate")
async def navigate(body: NavigateBody, request: Request):
    state = _active_runner(request).state
    return {"index": ctl.go_to(state, body.index), "progress": ctl.progress_fraction(state)}


@router.post("/api/finish")
async def finish(request: Request):
    runner = _runner(request)
    try:
        await runner.finish()
    except SessionNotActive:
        raise HTTPException(status_code=409, detail="The exam was abandoned.")
    return _summary_to_dict(runner)


@router.get("/api/results")
async def get_results(request: Request):
    return _summary_to_dict(_runner(request))


@router.post("/api/retry-save")
async def retry_save(request: Request):
    runner = _runner(request)
    await runner.retry_save()
    return _summary_to_dict(runner)


@router.post("/api/abandon")
async def abandon(request: Request):
    sid = request.state.session_id
    runner = _runner(request)
    abandoned = runner.abandon()
    session.put(sid, "runner", None)
    return {"abandoned": abandoned}


@router.post("/api/reset")
async def reset_session(request: Request):
    session.reset(request.state.session_id)
    return {"ok": True}
