from __future__ import annotations
from fastapi import APIRouter
from proscons.routes.analyze import router as analyze_router

router = APIRouter(prefix="/api")
router.include_router(analyze_router)
