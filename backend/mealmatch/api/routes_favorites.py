# mealmatch/api/routes_favorites.py
# 즐겨찾기 저장/조회/삭제 — 익명 쿠키(anon_id) 단위

from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from motor.motor_asyncio import AsyncIOMotorCollection

from mealmatch.core.deps import get_or_set_anon_id
from mealmatch.db.init import get_db
from mealmatch.db.favorites import DuplicateFavorite, add_favorite, delete_favorite, list_favorites
from mealmatch.models.schemas import CanonicalRecipe, FavoriteOut

router = APIRouter(prefix="/favorites", tags=["favorites"])

def favorites_col() -> AsyncIOMotorCollection:
    # DB 미초기화면 503
    try:
        return get_db()["favorites"]
    except RuntimeError as e:
        raise HTTPException(status_code=503, detail=f"DB 연결 없음: {e}")

@router.get("", response_model=List[FavoriteOut])
async def get_favorites(col=Depends(favorites_col), anon_id: str = Depends(get_or_set_anon_id)):
    return await list_favorites(col, anon_id)

@router.post("", response_model=FavoriteOut, status_code=201)
async def save_favorite(
    recipe: CanonicalRecipe,
    col=Depends(favorites_col),
    anon_id: str = Depends(get_or_set_anon_id),
):
    try:
        return await add_favorite(col, anon_id, recipe)
    except DuplicateFavorite:
        raise HTTPException(status_code=400, detail="Recipe already exists in your favorites")

@router.delete("/{fid}")
async def remove_favorite(fid: str, col=Depends(favorites_col), anon_id: str = Depends(get_or_set_anon_id)):
    if not await delete_favorite(col, anon_id, fid):
        raise HTTPException(status_code=404, detail="favorite not found")
    return {"ok": True}
