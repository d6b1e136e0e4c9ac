# mealmatch/services/generate/prompt.py
# 생성 요청 프롬프트 (코퍼스와 같은 필드명으로 JSON 요청)

from __future__ import annotations
from typing import List

SYSTEM = "You are a helpful chef. Reply with a single JSON object only."

def build_prompt(ingredients: List[str]) -> str:
    listed = ", ".join(ingredients)
    return (
        f"Generate a detailed recipe that can be made with these ingredients: {listed}.\n"
        "\n"
        "Format the response as a structured JSON object with these fields:\n"
        "- strMeal: The name of the dish\n"
        "- strCategory: The category of the dish (e.g., Vegetarian, Seafood, etc.)\n"
        "- strArea: The cuisine of origin\n"
        "- strInstructions: Detailed step-by-step cooking instructions\n"
        "- strMealThumb: Leave blank\n"
        "- strYoutube: Leave blank\n"
        "- strIngredients: An array of all ingredients needed (including the ones provided)\n"
        "- strMeasurements: An array of measurements corresponding to each ingredient\n"
        '- strTags: Comma-separated tags for the recipe (e.g., "Vegetarian,Spicy,Quick")\n'
        "\n"
        "Make sure the recipe is realistic, uses the provided ingredients, "
        "and has clear, numbered steps."
    )
