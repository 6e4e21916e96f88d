from typing import Annotated

from fastapi import APIRouter, Depends

from ..resources.loader import ResourceLoader
from .dependencies import get_resource_loader

router = APIRouter(tags=["health"])

@router.get("/health")
def health(loader: Annotated[ResourceLoader, Depends(get_resource_loader)]):
    return {"status": "ok", "resources": loader.states()}
