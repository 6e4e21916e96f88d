from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from ..config import settings
from ..resources.loader import ResourceLoader
from ..services.wordmap import WordMapService
from ..sessions.store import SessionStore


@lru_cache
def get_resource_loader() -> ResourceLoader:
    # Nothing is fetched here; resources load on first ensure()
    return ResourceLoader(settings)


@lru_cache
def get_session_store() -> SessionStore:
    return SessionStore(max_sessions=settings.max_sessions)


def get_wordmap_service(
    loader: Annotated[ResourceLoader, Depends(get_resource_loader)],
) -> WordMapService:
    return WordMapService(loader, loader.config)
