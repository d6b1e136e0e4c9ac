# mealmatch/services/matching/normalizer.py
# 코퍼스/생성형 레코드 → CanonicalRecipe 단일 스키마
# - 순수 함수 (I/O 없음). 누락 필드는 기본값으로 채울 뿐 실패하지 않는다
# - 20슬롯(strIngredient1..20) 접근은 이 모듈 밖으로 새지 않게 한다

from __future__ import annotations
from typing import Any, Iterable, List, Mapping, Optional, Union

from mealmatch.core.config import settings
from mealmatch.models.schemas import (
    CandidateRecipe,
    CanonicalRecipe,
    GeneratedRecipe,
    IngredientLine,
)

MAX_SLOTS = 20
TO_TASTE = "to taste"

Record = Union[CandidateRecipe, GeneratedRecipe, Mapping[str, Any]]


def _s(v: Any) -> str:
    return v.strip() if isinstance(v, str) else ""


def split_tags(raw: Any) -> List[str]:
    # "Pasta,Curry" / ["Pasta", "Curry"] 둘 다 허용
    if isinstance(raw, str):
        parts = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        parts = [str(x) for x in raw if x]
    else:
        return []
    return [p.strip() for p in parts if p and p.strip()]


def lines_from_slots(meal: Mapping[str, Any]) -> List[IngredientLine]:
    """strIngredientN / strMeasureN (N=1..20) → 순서 보존 리스트. 이름이 비면 슬롯 스킵."""
    out: List[IngredientLine] = []
    for i in range(1, MAX_SLOTS + 1):
        name = _s(meal.get(f"strIngredient{i}"))
        if not name:
            continue
        out.append(IngredientLine(name=name, measure=_s(meal.get(f"strMeasure{i}"))))
    return out


def candidate_from_meal(meal: Mapping[str, Any]) -> Optional[CandidateRecipe]:
    # 코퍼스 원본 dict → CandidateRecipe (idMeal 없으면 버림)
    sid = _s(str(meal.get("idMeal") or ""))
    if not sid:
        return None
    return CandidateRecipe(
        sourceId=sid,
        title=_s(meal.get("strMeal")),
        thumbnail=_s(meal.get("strMealThumb")) or None,
        category=_s(meal.get("strCategory")) or None,
        area=_s(meal.get("strArea")) or None,
        ingredients=lines_from_slots(meal),
        instructions=_s(meal.get("strInstructions")) or None,
        tags=split_tags(meal.get("strTags")),
        youtube=_s(meal.get("strYoutube")) or None,
    )


def _display_lines(lines: Iterable[IngredientLine]) -> List[str]:
    out: List[str] = []
    for ln in lines:
        name = _s(ln.name)
        if not name:
            continue
        measure = _s(ln.measure)
        out.append(f"{measure} {name}".strip() if measure else name)
    return out


def _display_parallel(ingredients: List[Any], measurements: List[Any]) -> List[str]:
    out: List[str] = []
    for i, raw in enumerate(ingredients or []):
        name = _s(raw)
        if not name:
            continue
        measure = _s(measurements[i]) if i < len(measurements or []) else ""
        out.append(f"{measure or TO_TASTE} {name}")
    return out


def _describe(area: Optional[str], category: Optional[str], tags: List[str]) -> str:
    head = " ".join(x for x in (area, category) if x)
    desc = f"{head} dish." if head else ""
    if tags:
        desc = f"{desc} {', '.join(tags)}".strip()
    return desc


def generated_from_mapping(rec: Mapping[str, Any]) -> GeneratedRecipe:
    # strIngredients/strMeasurements 병렬 배열 dict → GeneratedRecipe
    return GeneratedRecipe(
        title=_s(rec.get("strMeal")) or "Recipe",
        category=_s(rec.get("strCategory")) or None,
        area=_s(rec.get("strArea")) or None,
        instructions=_s(rec.get("strInstructions")),
        ingredients=[str(x) for x in rec.get("strIngredients") or [] if x is not None],
        measurements=[str(x) if x is not None else "" for x in rec.get("strMeasurements") or []],
        tags=split_tags(rec.get("strTags")),
        thumbnail=_s(rec.get("strMealThumb")) or None,
        youtube=_s(rec.get("strYoutube")) or None,
        description=_s(rec.get("description")) or None,
    )


def _from_mapping(rec: Mapping[str, Any]) -> CanonicalRecipe:
    # 원시 dict: 병렬 배열이면 생성형, 아니면 코퍼스 슬롯형
    if isinstance(rec.get("strIngredients"), list):
        return normalize(generated_from_mapping(rec))
    cand = candidate_from_meal(rec)
    if cand is not None:
        return normalize(cand)

    # id 없는 슬롯형: 표시 규칙은 슬롯형, provenance는 generated
    area = _s(rec.get("strArea")) or None
    category = _s(rec.get("strCategory")) or None
    tags = split_tags(rec.get("strTags"))
    return CanonicalRecipe(
        title=_s(rec.get("strMeal")) or "Recipe",
        ingredients=_display_lines(lines_from_slots(rec)),
        instructions=_s(rec.get("strInstructions")),
        imageUrl=_s(rec.get("strMealThumb")) or None,
        description=_describe(area, category, tags),
        cookTime=settings.DEFAULT_COOK_TIME,
        difficulty=settings.DEFAULT_DIFFICULTY,
        provenance="generated",
        area=area,
        category=category,
        tags=tags,
        youtubeLink=_s(rec.get("strYoutube")) or None,
    )


def normalize(record: Record) -> CanonicalRecipe:
    if isinstance(record, Mapping):
        return _from_mapping(record)

    if isinstance(record, CandidateRecipe):
        return CanonicalRecipe(
            title=record.title,
            ingredients=_display_lines(record.ingredients),
            instructions=record.instructions or "",
            imageUrl=record.thumbnail,
            description=_describe(record.area, record.category, record.tags),
            cookTime=settings.DEFAULT_COOK_TIME,
            difficulty=settings.DEFAULT_DIFFICULTY,
            # id 없는 후보는 코퍼스 출처로 볼 수 없다
            provenance="corpus" if record.sourceId else "generated",
            sourceId=record.sourceId or None,
            area=record.area,
            category=record.category,
            tags=record.tags,
            youtubeLink=record.youtube,
        )

    return CanonicalRecipe(
        title=record.title,
        ingredients=_display_parallel(record.ingredients, record.measurements),
        instructions=record.instructions,
        imageUrl=record.thumbnail,
        description=_s(record.description) or _describe(record.area, record.category, record.tags),
        cookTime=settings.DEFAULT_COOK_TIME,
        difficulty=settings.DEFAULT_DIFFICULTY,
        provenance="generated",
        sourceId=None,
        area=record.area,
        category=record.category,
        tags=record.tags,
        youtubeLink=record.youtube,
    )
