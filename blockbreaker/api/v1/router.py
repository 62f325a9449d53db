from fastapi import APIRouter

from blockbreaker.api.v1.endpoints import analyze, cipher, sessions

api_router = APIRouter()

api_router.include_router(
    cipher.router,
    prefix="/cipher",
    tags=["Cipher"],
)

api_router.include_router(
    analyze.router,
    prefix="/analyze",
    tags=["Analysis"],
)

api_router.include_router(
    sessions.router,
    prefix="/sessions",
    tags=["Sessions"],
)
