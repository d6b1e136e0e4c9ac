# mealmatch/services/matching/hydrator.py
# 요약 후보 → 상세(조리법 포함) 레코드
# - 조리법 없는 후보만 lookup, 한 배치로 동시 실행
# - 상세가 None이면 드롭 (요약 상태로 내보내지 않음)
# - 출력 순서 = 입력 순서 (도착 순서 X)

from __future__ import annotations
from typing import List, Optional, Sequence
import asyncio
import logging

from mealmatch.models.schemas import CandidateRecipe
from mealmatch.services.mealdb.client import MealDBClient

log = logging.getLogger(__name__)


async def _one(client: MealDBClient, cand: CandidateRecipe) -> Optional[CandidateRecipe]:
    if cand.is_full:
        return cand
    full = await client.fetch_detail(cand.sourceId)
    if full is None or not full.is_full:
        return None
    return full.model_copy(update={"matchCount": cand.matchCount})


async def hydrate(client: MealDBClient, candidates: Sequence[CandidateRecipe]) -> List[CandidateRecipe]:
    if not candidates:
        return []
    results = await asyncio.gather(*(_one(client, c) for c in candidates), return_exceptions=True)

    out: List[CandidateRecipe] = []
    for cand, res in zip(candidates, results):
        if isinstance(res, BaseException):
            log.warning("detail fetch failed (%s): %s", cand.sourceId, res)
            continue
        if res is None:
            log.info("detail missing, dropped: %s", cand.sourceId)
            continue
        out.append(res)
    return out
