from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_sessions, get_vocab_list_api, http_error
from ..models.request_models import AnswerRequest, FlashcardSessionCreate, FlashcardSessionResponse
from ..serializers import serialize_session
from ..services.flashcards.registry import SessionRegistry
from ..services.flashcards.session import FlashcardSession
from ..services.remote.client import RemoteError
from ..services.remote.endpoints import VocabListApi

router = APIRouter(prefix="/flashcards", tags=["flashcards"])


def _get_session(session_id: str, sessions: SessionRegistry) -> FlashcardSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Study session not found")
    return session


@router.post("", response_model=FlashcardSessionResponse)
async def start_session(
    payload: FlashcardSessionCreate,
    sessions: SessionRegistry = Depends(get_sessions),
    vocab_lists: VocabListApi = Depends(get_vocab_list_api),
):
    if payload.cards is not None:
        cards = payload.cards
    else:
        try:
            vocab_list = await vocab_lists.get_list(payload.list_id)
        except RemoteError as exc:
            raise http_error(exc, "Failed to load flashcards") from exc
        if vocab_list is None:
            raise HTTPException(status_code=404, detail="Vocabulary list not found")
        cards = vocab_list.words

    session = sessions.create()
    session.load(cards)
    return serialize_session(session)


@router.get("/{session_id}", response_model=FlashcardSessionResponse)
async def get_session(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    return serialize_session(_get_session(session_id, sessions))


@router.post("/{session_id}/flip", response_model=FlashcardSessionResponse)
async def flip_card(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    session = _get_session(session_id, sessions)
    session.flip()
    return serialize_session(session)


@router.post("/{session_id}/answer", response_model=FlashcardSessionResponse)
async def answer_card(
    session_id: str,
    payload: AnswerRequest,
    sessions: SessionRegistry = Depends(get_sessions),
):
    session = _get_session(session_id, sessions)
    session.answer(payload.remembered)
    return serialize_session(session)


@router.post("/{session_id}/restart", response_model=FlashcardSessionResponse)
async def restart_session(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    session = _get_session(session_id, sessions)
    session.restart()
    return serialize_session(session)


@router.delete("/{session_id}", status_code=204)
async def end_session(session_id: str, sessions: SessionRegistry = Depends(get_sessions)):
    if not sessions.discard(session_id):
        raise HTTPException(status_code=404, detail="Study session not found")
    return None
