# mealmatch/api/routes_recipes.py
# 재료 입력 → 코퍼스 매칭(재료별 조회/병합/상세) → 카드 배열
# 매칭이 비면 생성형 폴백 (fallback=false면 빈 배열 그대로)

from __future__ import annotations
from typing import Any, Dict, List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from mealmatch.core.deps import get_corpus, get_generator
from mealmatch.models.schemas import CanonicalRecipe, IngredientsIn, MatchOut
from mealmatch.services.generate.fallback import RecipeGenerator
from mealmatch.services.matching.aggregator import distinct_ingredients
from mealmatch.services.matching.normalizer import normalize
from mealmatch.services.matching.pipeline import find_recipes
from mealmatch.services.mealdb.client import MealDBClient

log = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])

# ------------------------------
# 엔드포인트: 매칭 / 생성
# ------------------------------

@router.post("/match", response_model=MatchOut)
async def match_recipes(
    body: IngredientsIn,
    fallback: bool = Query(True, description="매칭이 비면 AI 레시피 생성"),
    corpus: MealDBClient = Depends(get_corpus),
    generator: RecipeGenerator = Depends(get_generator),
):
    names = distinct_ingredients(body.ingredients)
    if not names:
        # 빈 입력은 에러가 아니라 빈 결과
        return MatchOut(ingredients=[], recipes=[], generated=False)

    recipes = await find_recipes(corpus, names)
    log.info("match %s -> %d recipes", names, len(recipes))
    if recipes or not fallback:
        return MatchOut(ingredients=names, recipes=recipes, generated=False)

    generated = await generator.generate(names)
    return MatchOut(ingredients=names, recipes=[normalize(generated)], generated=True)

@router.post("/generate", response_model=CanonicalRecipe)
async def generate_recipe(
    body: IngredientsIn,
    generator: RecipeGenerator = Depends(get_generator),
):
    # 코퍼스 결과와 무관하게 AI 레시피 요청. 재료가 없으면 400
    names = distinct_ingredients(body.ingredients)
    if not names:
        raise HTTPException(status_code=400, detail="Ingredients are required")
    return normalize(await generator.generate(names))

# ------------------------------
# 탐색(browse) — 정적 경로를 /{source_id}보다 먼저 선언
# ------------------------------

@router.get("/random", response_model=CanonicalRecipe)
async def random_recipe(corpus: MealDBClient = Depends(get_corpus)):
    rec = await corpus.random_recipe()
    if rec is None:
        raise HTTPException(status_code=503, detail="recipe corpus unavailable")
    return normalize(rec)

@router.get("/search", response_model=List[CanonicalRecipe])
async def search_recipes(q: str = Query(..., min_length=1), corpus: MealDBClient = Depends(get_corpus)):
    return [normalize(c) for c in await corpus.search_by_name(q)]

@router.get("/categories")
async def list_categories(corpus: MealDBClient = Depends(get_corpus)) -> List[Dict[str, Any]]:
    return await corpus.list_categories()

@router.get("/cuisines")
async def list_cuisines(corpus: MealDBClient = Depends(get_corpus)) -> List[str]:
    return await corpus.list_cuisines()

@router.get("/category/{category}", response_model=List[CanonicalRecipe])
async def by_category(category: str, corpus: MealDBClient = Depends(get_corpus)):
    return [normalize(c) for c in await corpus.list_by_category(category)]

@router.get("/cuisine/{area}", response_model=List[CanonicalRecipe])
async def by_cuisine(area: str, corpus: MealDBClient = Depends(get_corpus)):
    return [normalize(c) for c in await corpus.list_by_cuisine(area)]

@router.get("/{source_id}", response_model=CanonicalRecipe)
async def get_recipe(source_id: str, corpus: MealDBClient = Depends(get_corpus)):
    rec = await corpus.fetch_detail(source_id)
    if rec is None:
        raise HTTPException(status_code=404, detail="recipe not found")
    return normalize(rec)
