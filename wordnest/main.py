import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.auth_routes import router as auth_router
from .api.dictionary_routes import router as dictionary_router
from .api.flashcard_routes import router as flashcard_router
from .api.saved_words_routes import router as saved_words_router
from .config import API_BASE_URL, CORS_ORIGINS, LOCAL_STORE_DIR, LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    logger.info("Remote API at %s, device store in %s", API_BASE_URL, LOCAL_STORE_DIR)
    yield


app = FastAPI(title="WordNest API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(dictionary_router)
app.include_router(saved_words_router)
app.include_router(flashcard_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
