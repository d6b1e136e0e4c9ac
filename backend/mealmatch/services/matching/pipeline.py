# mealmatch/services/matching/pipeline.py
# 재료 리스트 → (재료별 조회/병합/랭킹) → 상위 K 상세 보강 → CanonicalRecipe
# 비면 빈 리스트. 생성형 폴백 여부는 호출측(라우터)이 결정

from __future__ import annotations
from typing import Iterable, List

from mealmatch.models.schemas import CanonicalRecipe
from mealmatch.services.mealdb.client import MealDBClient
from mealmatch.services.matching.aggregator import aggregate
from mealmatch.services.matching.hydrator import hydrate
from mealmatch.services.matching.normalizer import normalize


async def find_recipes(client: MealDBClient, ingredients: Iterable[str], limit: int | None = None) -> List[CanonicalRecipe]:
    ranked = await aggregate(client, ingredients, limit=limit)
    if not ranked:
        return []
    full = await hydrate(client, ranked)
    return [normalize(c) for c in full]
