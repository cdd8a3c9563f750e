from fastapi import APIRouter, Depends, HTTPException, status

from ..deps import get_save_store
from ..models.saved_word_models import (
    FolderAssignment,
    NotesUpdate,
    SavedStatusResponse,
    SavedWordCreate,
    SavedWordResponse,
    SavedWordsListResponse,
)
from ..serializers import serialize_saved_word
from ..services.saved_words.errors import NotFound, RemoveFailed, SaveFailed
from ..services.saved_words.store import ReconciledSaveStore

router = APIRouter(prefix="/saved-words", tags=["saved-words"])


@router.get("", response_model=SavedWordsListResponse)
async def list_saved_words(store: ReconciledSaveStore = Depends(get_save_store)):
    listing = await store.list()
    return {
        "words": [serialize_saved_word(entry) for entry in listing.entries],
        "degraded": listing.degraded,
        "revision": store.revision,
    }


@router.post("", response_model=SavedWordResponse)
async def save_word(payload: SavedWordCreate, store: ReconciledSaveStore = Depends(get_save_store)):
    try:
        entry = await store.save(payload.word, payload.record, payload.notes)
    except SaveFailed as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    return serialize_saved_word(entry)


@router.get("/status/{word}", response_model=SavedStatusResponse)
async def saved_status(word: str, store: ReconciledSaveStore = Depends(get_save_store)):
    result = await store.check_saved(word)
    return {"word": word, "saved": result.saved, "degraded": result.degraded}


@router.delete("/{word}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_saved_word(word: str, store: ReconciledSaveStore = Depends(get_save_store)):
    try:
        await store.remove(word)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    except RemoveFailed as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    return None


@router.patch("/{word}/notes", response_model=SavedWordResponse)
async def update_notes(
    word: str,
    payload: NotesUpdate,
    store: ReconciledSaveStore = Depends(get_save_store),
):
    try:
        entry = await store.update_notes(word, payload.notes)
    except NotFound as exc:
        raise HTTPException(status_code=404, detail=exc.message) from exc
    except SaveFailed as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    return serialize_saved_word(entry)


@router.put("/{entry_id}/folder", status_code=status.HTTP_204_NO_CONTENT)
async def assign_folder(
    entry_id: str,
    payload: FolderAssignment,
    store: ReconciledSaveStore = Depends(get_save_store),
):
    if not store.assign_folder(entry_id, payload.folder_id):
        raise HTTPException(status_code=404, detail="Saved word not found")
    return None


@router.delete("/{entry_id}/folder", status_code=status.HTTP_204_NO_CONTENT)
async def clear_folder(entry_id: str, store: ReconciledSaveStore = Depends(get_save_store)):
    if not store.clear_folder(entry_id):
        raise HTTPException(status_code=404, detail="Saved word not found")
    return None


@router.get("/folders/{folder_id}", response_model=list[SavedWordResponse])
async def words_in_folder(folder_id: str, store: ReconciledSaveStore = Depends(get_save_store)):
    return [serialize_saved_word(entry) for entry in store.words_in_folder(folder_id)]
