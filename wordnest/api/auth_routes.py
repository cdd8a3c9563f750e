from fastapi import APIRouter, Depends, HTTPException, status

from ..auth import AuthSession
from ..deps import get_auth_api, get_auth_session, get_save_store, http_error, require_user
from ..models.auth_models import AuthStatus, LoginRequest, RegisterRequest, UserProfile
from ..services.remote.client import RemoteError
from ..services.remote.endpoints import AuthApi
from ..services.saved_words.store import ReconciledSaveStore

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthStatus)
async def register_user(
    payload: RegisterRequest,
    auth_api: AuthApi = Depends(get_auth_api),
    session: AuthSession = Depends(get_auth_session),
    save_store: ReconciledSaveStore = Depends(get_save_store),
):
    try:
        response = await auth_api.register(payload)
    except RemoteError as exc:
        raise http_error(exc, "Failed to register") from exc

    user = session.sign_in(response)
    save_store.on_auth_state_change(True)
    return {"authenticated": True, "user": user}


@router.post("/login", response_model=AuthStatus)
async def login_user(
    payload: LoginRequest,
    auth_api: AuthApi = Depends(get_auth_api),
    session: AuthSession = Depends(get_auth_session),
    save_store: ReconciledSaveStore = Depends(get_save_store),
):
    try:
        response = await auth_api.login(payload)
    except RemoteError as exc:
        raise http_error(exc, "Failed to login") from exc

    user = session.sign_in(response)
    save_store.on_auth_state_change(True)
    return {"authenticated": True, "user": user}


@router.post("/logout", response_model=AuthStatus)
async def logout_user(
    session: AuthSession = Depends(get_auth_session),
    save_store: ReconciledSaveStore = Depends(get_save_store),
):
    was_authenticated = session.is_authenticated()
    session.sign_out()
    if was_authenticated:
        save_store.on_auth_state_change(False)
    return {"authenticated": False, "user": None}


@router.get("/status", response_model=AuthStatus)
async def auth_status(session: AuthSession = Depends(get_auth_session)):
    user = session.current_user()
    return {"authenticated": session.is_authenticated(), "user": user}


@router.get("/me", response_model=UserProfile)
async def get_me(
    current_user: UserProfile = Depends(require_user),
    auth_api: AuthApi = Depends(get_auth_api),
):
    try:
        return await auth_api.profile()
    except RemoteError as exc:
        if exc.is_auth_error:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session expired, please sign in again",
            ) from exc
        raise http_error(exc, "Could not load profile") from exc
