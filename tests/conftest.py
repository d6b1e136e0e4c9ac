from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import httpx
import pytest
from bson import ObjectId

from mealmatch.services.mealdb.client import MealDBClient

BASE_URL = "https://mealdb.test/api/json/v1/1"


def summary(sid: str, title: str = "") -> Dict[str, Any]:
    # filter.php 응답 형태 (조리법 없음)
    return {"idMeal": sid, "strMeal": title or f"Meal {sid}", "strMealThumb": f"https://img.test/{sid}.jpg"}


def full(sid: str, title: str = "", ingredients=(), **extra) -> Dict[str, Any]:
    # lookup.php 응답 형태 (20슬롯)
    meal = {
        "idMeal": sid,
        "strMeal": title or f"Meal {sid}",
        "strMealThumb": f"https://img.test/{sid}.jpg",
        "strCategory": "Chicken",
        "strArea": "Japanese",
        "strInstructions": f"Cook meal {sid}.",
        "strTags": None,
        "strYoutube": "",
    }
    for i in range(1, 21):
        meal[f"strIngredient{i}"] = ""
        meal[f"strMeasure{i}"] = ""
    for i, (name, measure) in enumerate(ingredients, start=1):
        meal[f"strIngredient{i}"] = name
        meal[f"strMeasure{i}"] = measure
    meal.update(extra)
    return meal


class FakeMealDB:
    """TheMealDB 흉내 (httpx.MockTransport 핸들러)"""

    def __init__(self):
        self.by_ingredient: Dict[str, Optional[List[dict]]] = {}
        self.details: Dict[str, dict] = {}
        self.by_name: Dict[str, List[dict]] = {}
        self.fail_ingredients = set()
        self.fail_details = set()
        self.calls: List[httpx.URL] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request.url)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        params = request.url.params

        if endpoint == "filter.php" and "i" in params:
            name = params["i"]
            if name in self.fail_ingredients:
                raise httpx.ConnectError("corpus down", request=request)
            return httpx.Response(200, json={"meals": self.by_ingredient.get(name)})
        if endpoint == "lookup.php":
            sid = params["i"]
            if sid in self.fail_details:
                return httpx.Response(500, text="oops")
            meal = self.details.get(sid)
            return httpx.Response(200, json={"meals": [meal] if meal else None})
        if endpoint == "search.php":
            return httpx.Response(200, json={"meals": self.by_name.get(params["s"])})
        if endpoint == "random.php":
            first = next(iter(self.details.values()), None)
            return httpx.Response(200, json={"meals": [first] if first else None})
        if endpoint == "categories.php":
            return httpx.Response(200, json={"categories": [
                {"idCategory": "1", "strCategory": "Beef", "strCategoryThumb": "b.png", "strCategoryDescription": "Beef dishes"},
            ]})
        if endpoint == "list.php":
            return httpx.Response(200, json={"meals": [{"strArea": "Italian"}, {"strArea": "Thai"}]})
        if endpoint == "filter.php" and "c" in params:
            return httpx.Response(200, json={"meals": [summary("77", "Beef Stew")]})
        if endpoint == "filter.php" and "a" in params:
            return httpx.Response(200, json={"meals": None})
        return httpx.Response(404)

    def client(self) -> MealDBClient:
        return MealDBClient(base_url=BASE_URL, timeout=1.0, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def mealdb() -> FakeMealDB:
    return FakeMealDB()


# ------------------------------
# 즐겨찾기용 인메모리 컬렉션
# ------------------------------

def _matches(doc: dict, q: dict) -> bool:
    return all(doc.get(k) == v for k, v in q.items())


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction=1):
        self.docs = sorted(self.docs, key=lambda d: d[key], reverse=direction < 0)
        return self

    async def to_list(self, length=None):
        return [dict(d) for d in self.docs[:length]]


class FakeCollection:
    def __init__(self):
        self.docs: List[dict] = []

    def find(self, q):
        return FakeCursor([d for d in self.docs if _matches(d, q)])

    async def find_one(self, q):
        return next((dict(d) for d in self.docs if _matches(d, q)), None)

    async def insert_one(self, doc):
        doc["_id"] = ObjectId()
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    async def delete_one(self, q):
        for i, d in enumerate(self.docs):
            if _matches(d, q):
                del self.docs[i]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)
