from fastapi import Depends, HTTPException, status

from .auth import AuthSession
from .local_store import store
from .models.auth_models import UserProfile
from .services.flashcards.registry import SessionRegistry
from .services.remote.client import ApiClient, RemoteError
from .services.remote.endpoints import AuthApi, DictionaryApi, SavedWordsApi, VocabListApi
from .services.saved_words.local_collection import LocalSavedWords
from .services.saved_words.store import ReconciledSaveStore

auth_session = AuthSession(store)
api_client = ApiClient(token_provider=auth_session.get_token)

auth_api = AuthApi(api_client)
dictionary_api = DictionaryApi(api_client)
vocab_list_api = VocabListApi(api_client)
save_store = ReconciledSaveStore(auth_session, LocalSavedWords(store), SavedWordsApi(api_client))
sessions = SessionRegistry()


def get_auth_session() -> AuthSession:
    return auth_session


def get_auth_api() -> AuthApi:
    return auth_api


def get_dictionary_api() -> DictionaryApi:
    return dictionary_api


def get_vocab_list_api() -> VocabListApi:
    return vocab_list_api


def get_save_store() -> ReconciledSaveStore:
    return save_store


def get_sessions() -> SessionRegistry:
    return sessions


def require_user(auth: AuthSession = Depends(get_auth_session)) -> UserProfile:
    user = auth.current_user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
        )
    return user


def http_error(exc: RemoteError, fallback: str) -> HTTPException:
    # Client errors from the remote service pass through; everything else is a bad gateway.
    if exc.status_code is not None and 400 <= exc.status_code < 500:
        return HTTPException(status_code=exc.status_code, detail=exc.message or fallback)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=fallback)
