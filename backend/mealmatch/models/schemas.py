# mealmatch/models/schemas.py
# Pydantic 모델 정의
# IngredientLine/CandidateRecipe: 코퍼스 레코드 (수신 즉시 슬롯 → 리스트로 변환)
# GeneratedRecipe: 생성형 폴백 결과 (재료/분량 병렬 배열)
# CanonicalRecipe: 프론트/즐겨찾기가 소비하는 단일 카드 스키마
from __future__ import annotations
from typing import List, Optional, Literal

from pydantic import BaseModel, Field, model_validator

Provenance = Literal["corpus", "generated"]


class IngredientLine(BaseModel):
    name: str
    measure: str = ""


# # 코퍼스 레시피 (요약 → 상세 하이드레이션)
class CandidateRecipe(BaseModel):
    sourceId: str
    title: str = ""
    thumbnail: Optional[str] = None
    category: Optional[str] = None
    area: Optional[str] = None
    ingredients: List[IngredientLine] = Field(default_factory=list)
    instructions: Optional[str] = None          # 요약 variant는 None
    tags: List[str] = Field(default_factory=list)
    youtube: Optional[str] = None
    matchCount: int = 0                          # aggregator만 채우는 파생 필드

    @property
    def is_full(self) -> bool:
        return bool((self.instructions or "").strip())


# # 생성형 레시피 (식별자 없음, 세션 내 임시)
class GeneratedRecipe(BaseModel):
    title: str
    category: Optional[str] = None
    area: Optional[str] = None
    instructions: str
    ingredients: List[str] = Field(default_factory=list)
    measurements: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    thumbnail: Optional[str] = None
    youtube: Optional[str] = None
    description: Optional[str] = None


# # 프론트 카드 타입 (정규화 결과)
class CanonicalRecipe(BaseModel):
    title: str
    ingredients: List[str] = Field(default_factory=list)
    instructions: str = ""
    imageUrl: Optional[str] = None
    description: str = ""
    cookTime: str = "30"
    difficulty: str = "Medium"
    provenance: Provenance = "corpus"
    sourceId: Optional[str] = None
    area: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    youtubeLink: Optional[str] = None

    @model_validator(mode="after")
    def _check_provenance(self):
        # generated ⇔ sourceId 없음
        if (self.provenance == "generated") != (not self.sourceId):
            raise ValueError("provenance must be 'generated' exactly when sourceId is absent")
        return self


# # 재료 기반 검색 입력
class IngredientsIn(BaseModel):
    ingredients: List[str] = Field(default_factory=list)


class MatchOut(BaseModel):
    ingredients: List[str] = Field(default_factory=list)   # 중복 제거된 입력 (입력 순서 유지)
    recipes: List[CanonicalRecipe] = Field(default_factory=list)
    generated: bool = False


# # 즐겨찾기 저장 문서
class FavoriteOut(CanonicalRecipe):
    id: str
