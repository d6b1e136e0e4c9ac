# mealmatch/services/mealdb/client.py
# 목적: TheMealDB 조회(재료 필터/상세/랜덤/카테고리/지역/이름 검색)
# 의존: httpx
# 원칙: 네트워크/파싱 실패는 빈 결과로 흡수(fail soft). 호출 사이 상태 없음

from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

import httpx

from mealmatch.core.config import settings
from mealmatch.models.schemas import CandidateRecipe
from mealmatch.services.matching.normalizer import candidate_from_meal

log = logging.getLogger(__name__)

HEADERS = {"Accept": "application/json"}


def _envelope(payload: Any, key: str = "meals") -> List[Dict[str, Any]]:
    # { meals: [...] | null } → null/누락은 빈 리스트
    if not isinstance(payload, dict):
        return []
    items = payload.get(key)
    if not isinstance(items, list):
        return []
    return [x for x in items if isinstance(x, dict)]


def _candidates(items: List[Dict[str, Any]]) -> List[CandidateRecipe]:
    out: List[CandidateRecipe] = []
    for meal in items:
        c = candidate_from_meal(meal)
        if c is not None:
            out.append(c)
    return out


class MealDBClient:
    """
    TheMealDB HTTP 클라이언트.
    - 호출마다 AsyncClient를 열고 닫는다 (요청 간 공유 상태 없음)
    - transport 주입은 테스트(httpx.MockTransport)용
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.MEALDB_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.CORPUS_TIMEOUT
        self._transport = transport

    async def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=HEADERS,
            timeout=self.timeout,
            transport=self._transport,
        ) as cli:
            r = await cli.get(f"/{path}", params=params)
            r.raise_for_status()
            return r.json()

    async def _meals(self, path: str, params: Optional[Dict[str, str]] = None, key: str = "meals") -> List[Dict[str, Any]]:
        try:
            return _envelope(await self._get(path, params), key)
        except (httpx.HTTPError, ValueError) as e:
            log.warning("mealdb %s %s failed: %s", path, params, e)
            return []

    # ------------------------------
    # 매칭 코어에서 쓰는 조회
    # ------------------------------

    async def lookup_by_ingredient(self, name: str) -> List[CandidateRecipe]:
        """재료 하나로 요약 레코드 조회. 실패는 []"""
        name = (name or "").strip()
        if not name:
            return []
        return _candidates(await self._meals("filter.php", {"i": name}))

    async def fetch_detail(self, source_id: str) -> Optional[CandidateRecipe]:
        """id → 상세 레코드. 모르는 id/일시 장애는 None (호출측은 스킵)"""
        items = await self._meals("lookup.php", {"i": str(source_id)})
        found = _candidates(items[:1])
        return found[0] if found else None

    # ------------------------------
    # 탐색(browse) 기능용 보조 조회
    # ------------------------------

    async def random_recipe(self) -> Optional[CandidateRecipe]:
        found = _candidates((await self._meals("random.php"))[:1])
        return found[0] if found else None

    async def search_by_name(self, query: str) -> List[CandidateRecipe]:
        return _candidates(await self._meals("search.php", {"s": query or ""}))

    async def list_by_category(self, category: str) -> List[CandidateRecipe]:
        return _candidates(await self._meals("filter.php", {"c": category}))

    async def list_by_cuisine(self, area: str) -> List[CandidateRecipe]:
        return _candidates(await self._meals("filter.php", {"a": area}))

    async def list_categories(self) -> List[Dict[str, Any]]:
        # categories.php는 envelope 키가 categories
        items = await self._meals("categories.php", key="categories")
        return [
            {
                "id": str(c.get("idCategory") or ""),
                "name": (c.get("strCategory") or "").strip(),
                "thumbnail": c.get("strCategoryThumb") or None,
                "description": (c.get("strCategoryDescription") or "").strip(),
            }
            for c in items
            if (c.get("strCategory") or "").strip()
        ]

    async def list_cuisines(self) -> List[str]:
        items = await self._meals("list.php", {"a": "list"})
        return [a["strArea"].strip() for a in items if isinstance(a.get("strArea"), str) and a["strArea"].strip()]
