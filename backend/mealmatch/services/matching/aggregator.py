# mealmatch/services/matching/aggregator.py
# 재료별 조회 결과 병합 → 매칭 개수로 정렬 → 상위 K
# - 재료마다 코퍼스 조회 1회 (동시 실행, 개별 실패는 빈 결과)
# - 동점은 최초 발견 순서 유지 (입력 재료 순 → 각 재료의 hit 순)

from __future__ import annotations
from typing import Dict, Iterable, List
import asyncio
import logging

from mealmatch.core.config import settings
from mealmatch.models.schemas import CandidateRecipe
from mealmatch.services.mealdb.client import MealDBClient

log = logging.getLogger(__name__)


def distinct_ingredients(names: Iterable[str]) -> List[str]:
    """공백 제거 후 대소문자 무시 중복 제거. 처음 입력된 표기/순서를 유지"""
    seen = set()
    out: List[str] = []
    for n in names or []:
        if not isinstance(n, str):
            continue
        t = n.strip()
        key = t.casefold()
        if not t or key in seen:
            continue
        seen.add(key)
        out.append(t)
    return out


async def _lookup_all(client: MealDBClient, ingredients: List[str]) -> List[List[CandidateRecipe]]:
    results = await asyncio.gather(
        *(client.lookup_by_ingredient(n) for n in ingredients),
        return_exceptions=True,
    )
    hits: List[List[CandidateRecipe]] = []
    for name, res in zip(ingredients, results):
        if isinstance(res, BaseException):
            log.warning("ingredient lookup failed (%s): %s", name, res)
            hits.append([])
        else:
            hits.append(res)
    return hits


async def aggregate(
    client: MealDBClient,
    ingredients: Iterable[str],
    limit: int | None = None,
) -> List[CandidateRecipe]:
    names = distinct_ingredients(ingredients)
    if not names:
        return []
    limit = settings.MATCH_TOP_K if limit is None else limit

    hits = await _lookup_all(client, names)

    # sourceId → 후보 (dict 삽입 순서 = 최초 발견 순서)
    pool: Dict[str, CandidateRecipe] = {}
    for per_ing in hits:
        counted = set()  # 한 재료 결과 안의 중복 id는 1회만
        for c in per_ing:
            if c.sourceId in counted:
                continue
            counted.add(c.sourceId)
            if c.sourceId in pool:
                pool[c.sourceId].matchCount += 1
            else:
                pool[c.sourceId] = c.model_copy(update={"matchCount": 1})

    # sorted()는 안정 정렬 → 동점은 발견 순서 그대로
    ranked = sorted(pool.values(), key=lambda c: c.matchCount, reverse=True)
    log.info("aggregate %s -> %d candidates (top %d)", names, len(ranked), limit)
    return ranked[:limit]
