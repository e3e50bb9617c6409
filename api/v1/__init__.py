from fastapi import APIRouter

from . import catalog, keys

router = APIRouter(prefix="/api/v1")
router.include_router(keys.router)
router.include_router(catalog.router)
