import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from flashbox.api.routes import decks, flashcards, review
from flashbox.core.config import settings
from flashbox.db.session import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Flashbox API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(decks.router, prefix="/decks", tags=["decks"])
app.include_router(flashcards.router, prefix="/flashcards", tags=["flashcards"])
app.include_router(review.router, prefix="/review", tags=["review"])


@app.get("/health")
def health_check():
    return {"status": "ok"}
