# mealmatch/db/favorites.py
# 즐겨찾기 저장 (plain CRUD) — anon_id 쿠키 단위로 분리
# 중복 키: 코퍼스 레시피는 sourceId, 생성형은 제목+재료 목록

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional
import hashlib

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError

from mealmatch.models.schemas import CanonicalRecipe


class DuplicateFavorite(Exception):
    pass


def dedup_key(recipe: CanonicalRecipe) -> str:
    if recipe.sourceId:
        return f"corpus:{recipe.sourceId}"
    basis = "\n".join([recipe.title.strip().casefold(), *[i.strip().casefold() for i in recipe.ingredients]])
    return "generated:" + hashlib.sha1(basis.encode("utf-8")).hexdigest()


def _out(doc: Dict[str, Any]) -> Dict[str, Any]:
    # _id(ObjectId) → id 문자열, 내부 필드 제거
    d = {k: v for k, v in doc.items() if k not in ("_id", "anon_id", "dedup_key", "created_at")}
    d["id"] = str(doc.get("_id"))
    return d


async def list_favorites(col: AsyncIOMotorCollection, anon_id: str, limit: int = 100) -> List[Dict[str, Any]]:
    docs = await col.find({"anon_id": anon_id}).sort("created_at", -1).to_list(length=limit)
    return [_out(d) for d in docs]


async def add_favorite(col: AsyncIOMotorCollection, anon_id: str, recipe: CanonicalRecipe) -> Dict[str, Any]:
    key = dedup_key(recipe)
    if await col.find_one({"anon_id": anon_id, "dedup_key": key}):
        raise DuplicateFavorite(key)

    doc = recipe.model_dump()
    doc.update({"anon_id": anon_id, "dedup_key": key, "created_at": datetime.utcnow()})
    try:
        res = await col.insert_one(doc)
    except DuplicateKeyError:
        # find_one 이후 동시 저장된 경우
        raise DuplicateFavorite(key)
    doc["_id"] = res.inserted_id
    return _out(doc)


def _oid(fid: str) -> Optional[ObjectId]:
    try:
        return ObjectId(fid)
    except (InvalidId, TypeError):
        return None


async def delete_favorite(col: AsyncIOMotorCollection, anon_id: str, fid: str) -> bool:
    oid = _oid(fid)
    if oid is None:
        return False
    res = await col.delete_one({"_id": oid, "anon_id": anon_id})
    return bool(res.deleted_count)
