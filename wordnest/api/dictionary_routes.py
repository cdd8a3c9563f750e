from fastapi import APIRouter, Depends, Query

from ..deps import get_dictionary_api, http_error
from ..models.request_models import LookupRequest, PopularWord, SpeechResponse
from ..models.word_models import WordRecord
from ..services.remote.client import RemoteError
from ..services.remote.endpoints import DictionaryApi, speech_url

router = APIRouter(prefix="/dictionary", tags=["dictionary"])


@router.post("/lookup", response_model=WordRecord)
async def lookup_word(payload: LookupRequest, dictionary: DictionaryApi = Depends(get_dictionary_api)):
    try:
        return await dictionary.lookup(payload.word.strip())
    except RemoteError as exc:
        raise http_error(exc, "Lookup failed") from exc


@router.get("/popular", response_model=list[PopularWord])
async def popular_words(
    limit: int = Query(default=10, ge=1, le=100),
    dictionary: DictionaryApi = Depends(get_dictionary_api),
):
    try:
        return await dictionary.popular_words(limit)
    except RemoteError as exc:
        raise http_error(exc, "Could not load popular words") from exc


@router.get("/speak", response_model=SpeechResponse)
async def speak(text: str = Query(..., min_length=1)):
    return {"text": text, "url": speech_url(text)}


@router.get("/check/{word}")
async def check_word(word: str, dictionary: DictionaryApi = Depends(get_dictionary_api)):
    try:
        exists = await dictionary.check_word(word)
    except RemoteError as exc:
        raise http_error(exc, "Lookup failed") from exc
    return {"word": word, "exists": exists}
