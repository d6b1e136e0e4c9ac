# mealmatch/services/generate/fallback.py
# 코퍼스 매칭이 비었을 때(또는 사용자가 AI 레시피를 직접 요청할 때) 쓰는 생성형 레시피
# - OpenAI Chat Completions만 사용, 30초 제한
# - 3단계 강등: structured(JSON 그대로) → extracted(본문에서 JSON/제목 추출) → synthesized(템플릿)
# - 호출측에는 절대 예외를 올리지 않는다. 항상 GeneratedRecipe 하나를 돌려줌

from __future__ import annotations
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional
import asyncio
import json
import logging
import os
import re

from pydantic import BaseModel

try:
    from openai import AsyncOpenAI  # v1 SDK
except Exception:
    AsyncOpenAI = None  # type: ignore

from mealmatch.core.config import settings
from mealmatch.models.schemas import GeneratedRecipe
from mealmatch.services.generate.prompt import SYSTEM, build_prompt
from mealmatch.services.matching.normalizer import TO_TASTE, split_tags

log = logging.getLogger(__name__)

Complete = Callable[[str], Awaitable[str]]
OutcomeKind = Literal["structured", "extracted", "synthesized"]


class GenerationNotReady(Exception):
    # 생성 기능 준비 미완(패키지/키 없음)
    pass


class GenerationOutcome(BaseModel):
    kind: OutcomeKind
    recipe: GeneratedRecipe


def _client() -> "AsyncOpenAI":
    if AsyncOpenAI is None:
        raise GenerationNotReady("openai SDK not installed")
    api_key = getattr(settings, "OPENAI_API_KEY", None) or os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise GenerationNotReady("OPENAI_API_KEY not set")
    return AsyncOpenAI(api_key=api_key, timeout=settings.GENERATION_TIMEOUT, max_retries=0)


async def openai_complete(prompt: str) -> str:
    client = _client()
    chat = await client.chat.completions.create(
        model=settings.OPENAI_MODEL,
        temperature=0.7,
        messages=[
            {"role": "system", "content": SYSTEM},
            {"role": "user", "content": prompt},
        ],
        max_tokens=1500,
    )
    return chat.choices[0].message.content if chat and chat.choices else ""


# ------------------------------
# 파싱 헬퍼
# ------------------------------

FENCE_RES = [
    re.compile(r"```json\s*\n([\s\S]*?)\n\s*```", re.I),
    re.compile(r"```\s*\n([\s\S]*?)\n\s*```"),
]
_DECODER = json.JSONDecoder()

TITLE_RES = [
    re.compile(r"recipe for [\"']?(.*?)[\"']?\s*[\n:.]", re.I),
    re.compile(r"^[\s#*]*[\"']?([^\n\"'#*]{2,60}?)[\"']?\**\s+recipe\b", re.I | re.M),
    re.compile(r"dish [\"']?(.*?)[\"']?\s*[\n:.]", re.I),
]

NAME_KEYS = ("strMeal", "name", "title")
INSTRUCTION_KEYS = ("strInstructions", "instructions", "steps")


def _cap(s: str) -> str:
    return s[:1].upper() + s[1:]


def _first(d: Dict[str, Any], keys) -> Any:
    for k in keys:
        v = d.get(k)
        if v:
            return v
    return None


def _text(v: Any) -> str:
    # 단계 배열이면 줄바꿈으로 합침
    if isinstance(v, list):
        return "\n".join(str(x).strip() for x in v if str(x).strip())
    return v.strip() if isinstance(v, str) else ""


def _loads_obj(text: str) -> Optional[Dict[str, Any]]:
    try:
        obj = json.loads(text)
    except (ValueError, TypeError, RecursionError):
        # 깊은 중첩/초장문 정수도 파싱 실패로 본다
        return None
    return obj if isinstance(obj, dict) else None


def _has_core(obj: Dict[str, Any]) -> bool:
    return bool(_text(_first(obj, NAME_KEYS)) or _text(_first(obj, INSTRUCTION_KEYS)))


def _raw_decode(text: str, start: int) -> Optional[Dict[str, Any]]:
    try:
        obj, _ = _DECODER.raw_decode(text, start)
    except (ValueError, TypeError, RecursionError):
        return None
    return obj if isinstance(obj, dict) else None


def extract_json(text: str) -> Optional[Dict[str, Any]]:
    """코드펜스 → 각 '{' 위치에서 디코드. name/instructions 있는 첫 객체만"""
    text = text or ""
    for rx in FENCE_RES:
        for m in rx.finditer(text):
            obj = _loads_obj(m.group(1))
            if obj is not None and _has_core(obj):
                return obj
    start = text.find("{")
    while start != -1:
        obj = _raw_decode(text, start)
        if obj is not None and _has_core(obj):
            return obj
        start = text.find("{", start + 1)
    return None


def guess_title(text: str, ingredients: List[str]) -> str:
    for rx in TITLE_RES:
        m = rx.search(text or "")
        if m and m.group(1).strip():
            return m.group(1).strip()[:80]
    main = ingredients[0] if ingredients else "Chef's"
    return f"{_cap(main)} Recipe"


def _ingredient_arrays(obj: Dict[str, Any]) -> tuple[List[str], List[str]]:
    raw = obj.get("strIngredients") or obj.get("ingredients") or []
    measures = obj.get("strMeasurements") or obj.get("measurements") or []
    names: List[str] = []
    meas: List[str] = []
    if not isinstance(raw, list):
        return names, meas
    for i, it in enumerate(raw):
        if isinstance(it, dict):
            # [{name, measure}] 형태도 허용
            names.append(str(it.get("name") or it.get("ingredient") or "").strip())
            meas.append(str(it.get("measure") or it.get("measurement") or it.get("amount") or "").strip())
        else:
            names.append(str(it or "").strip())
            m = measures[i] if isinstance(measures, list) and i < len(measures) else ""
            meas.append(str(m or "").strip())
    return names, meas


def _ensure_supplied(names: List[str], meas: List[str], supplied: List[str]) -> None:
    # 모델이 빠뜨린 입력 재료는 "to taste"로 뒤에 붙인다
    have = [n.casefold() for n in names if n]
    for s in supplied:
        key = s.casefold()
        word = re.compile(rf"\b{re.escape(key)}\b")
        if not any(word.search(h) for h in have):
            names.append(s)
            meas.append(TO_TASTE)
            have.append(key)


def recipe_from_payload(obj: Dict[str, Any], supplied: List[str]) -> GeneratedRecipe:
    names, meas = _ingredient_arrays(obj)
    _ensure_supplied(names, meas, supplied)
    title = _text(_first(obj, NAME_KEYS)) or guess_title("", supplied)
    instructions = _text(_first(obj, INSTRUCTION_KEYS)) or synthesize(supplied).instructions
    return GeneratedRecipe(
        title=title,
        category=_text(obj.get("strCategory") or obj.get("category")) or None,
        area=_text(obj.get("strArea") or obj.get("area") or obj.get("cuisine")) or None,
        instructions=instructions,
        ingredients=names,
        measurements=meas,
        tags=split_tags(obj.get("strTags") or obj.get("tags")),
        thumbnail=_text(obj.get("strMealThumb")) or None,
        youtube=_text(obj.get("strYoutube")) or None,
        description=_text(obj.get("description")) or None,
    )


def recipe_from_text(text: str, supplied: List[str]) -> GeneratedRecipe:
    # JSON이 없으면 원문 전체를 조리법으로
    return GeneratedRecipe(
        title=guess_title(text, supplied),
        category="Mixed",
        area="Fusion",
        instructions=text.strip(),
        ingredients=list(supplied),
        measurements=[TO_TASTE] * len(supplied),
        tags=["AI Generated"],
    )


def synthesize(supplied: List[str]) -> GeneratedRecipe:
    """서비스 실패 시 결정적 템플릿 레시피"""
    main = supplied[0] if supplied else "food"
    listed = ", ".join(supplied) if supplied else main
    instructions = (
        f"This is a simple recipe using {listed}.\n\n"
        "1. Gather all ingredients.\n"
        f"2. Prepare {main} by washing and cutting as needed.\n"
        "3. Combine with other ingredients.\n"
        "4. Cook until done.\n"
        "5. Serve and enjoy!"
    )
    return GeneratedRecipe(
        title=f"{_cap(main)} Special",
        category="Mixed",
        area="International",
        instructions=instructions,
        ingredients=list(supplied),
        measurements=[TO_TASTE] * len(supplied),
        tags=["Simple", "Quick", "Easy"],
        thumbnail=settings.PLACEHOLDER_IMAGE,
    )


# ------------------------------
# 어댑터
# ------------------------------

class RecipeGenerator:
    """
    generate(ingredients) → GeneratedRecipe (항상 성공)
    - complete: 프롬프트 → 원문 텍스트. 기본은 OpenAI, 테스트에서 주입
    """

    def __init__(self, complete: Optional[Complete] = None, timeout: Optional[float] = None):
        self._complete = complete or openai_complete
        self.timeout = settings.GENERATION_TIMEOUT if timeout is None else timeout

    async def generate_outcome(self, ingredients: List[str]) -> GenerationOutcome:
        supplied = [s.strip() for s in (ingredients or []) if isinstance(s, str) and s.strip()]
        outcome = await self._attempt(supplied)
        if not outcome.recipe.thumbnail:
            outcome.recipe.thumbnail = settings.PLACEHOLDER_IMAGE
        return outcome

    async def generate(self, ingredients: List[str]) -> GeneratedRecipe:
        return (await self.generate_outcome(ingredients)).recipe

    async def _attempt(self, supplied: List[str]) -> GenerationOutcome:
        try:
            text = await asyncio.wait_for(self._complete(build_prompt(supplied)), timeout=self.timeout)
        except GenerationNotReady as e:
            log.warning("generation skipped: %s", e)
            return GenerationOutcome(kind="synthesized", recipe=synthesize(supplied))
        except asyncio.TimeoutError:
            log.warning("generation timed out after %.0fs", self.timeout)
            return GenerationOutcome(kind="synthesized", recipe=synthesize(supplied))
        except Exception as e:
            log.exception("generation failed: %s", e)
            return GenerationOutcome(kind="synthesized", recipe=synthesize(supplied))

        text = (text or "").strip()
        if not text:
            log.warning("generation returned empty text")
            return GenerationOutcome(kind="synthesized", recipe=synthesize(supplied))

        try:
            return self._parse(text, supplied)
        except Exception as e:
            log.exception("generation reply unusable: %s", e)
            return GenerationOutcome(kind="synthesized", recipe=synthesize(supplied))

    def _parse(self, text: str, supplied: List[str]) -> GenerationOutcome:
        # 1) 응답 전체가 JSON
        obj = _loads_obj(text)
        if obj is not None:
            if not _has_core(obj):
                log.warning("generation payload has neither name nor instructions")
                return GenerationOutcome(kind="synthesized", recipe=synthesize(supplied))
            return GenerationOutcome(kind="structured", recipe=recipe_from_payload(obj, supplied))

        # 2) 본문 속 JSON → 3) 원문 그대로
        obj = extract_json(text)
        if obj is not None and _has_core(obj):
            return GenerationOutcome(kind="extracted", recipe=recipe_from_payload(obj, supplied))
        return GenerationOutcome(kind="extracted", recipe=recipe_from_text(text, supplied))


