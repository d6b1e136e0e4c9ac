import pytest

from mealmatch.models.schemas import CandidateRecipe, CanonicalRecipe, GeneratedRecipe, IngredientLine
from mealmatch.services.matching.normalizer import candidate_from_meal, lines_from_slots, normalize, split_tags

from conftest import full


def _blank_slots(**slots):
    meal = {}
    for i in range(1, 21):
        meal[f"strIngredient{i}"] = ""
        meal[f"strMeasure{i}"] = ""
    meal.update(slots)
    return meal


def test_slot_with_blank_measure_yields_name_only():
    meal = _blank_slots(strIngredient3="Tomato", strMeasure3="")
    meal.update({"idMeal": "52771", "strMeal": "Tomato Thing", "strInstructions": "Cook."})
    assert normalize(meal).ingredients == ["Tomato"]


def test_slot_record_without_id_still_uses_slot_rules():
    meal = _blank_slots(strIngredient3="Tomato", strMeasure3="")
    out = normalize(meal)
    assert out.ingredients == ["Tomato"]
    assert out.provenance == "generated"
    assert out.sourceId is None


def test_slots_keep_order_and_trim():
    meal = _blank_slots(
        strIngredient1=" Chicken ", strMeasure1=" 1 lb ",
        strIngredient2="   ", strMeasure2="2 tbsp",
        strIngredient5="Salt", strMeasure5=None,
    )
    meal["strIngredient4"] = None
    lines = lines_from_slots(meal)
    assert [(ln.name, ln.measure) for ln in lines] == [("Chicken", "1 lb"), ("Salt", "")]


def test_parallel_arrays_zip_by_index():
    rec = GeneratedRecipe(title="Pancakes", instructions="Mix.", ingredients=["Egg", "Flour"], measurements=["2", "1 cup"])
    assert normalize(rec).ingredients == ["2 Egg", "1 cup Flour"]


def test_parallel_arrays_short_measurements_default_to_taste():
    rec = GeneratedRecipe(title="Pancakes", instructions="Mix.", ingredients=["Egg", "Flour", " ", "Milk"], measurements=["2"])
    assert normalize(rec).ingredients == ["2 Egg", "to taste Flour", "to taste Milk"]


def test_parallel_mapping_shape():
    out = normalize({"strMeal": "Omelette", "strInstructions": "Whisk.", "strIngredients": ["Egg"], "strMeasurements": [""]})
    assert out.ingredients == ["to taste Egg"]
    assert out.provenance == "generated"


def test_corpus_record_canonical_fields():
    cand = candidate_from_meal(full("52772", "Teriyaki Chicken", [("soy sauce", "3/4 cup"), ("chicken", "")], strTags="Meat,Casserole", strYoutube="https://youtu.be/x"))
    out = normalize(cand)
    assert out.provenance == "corpus"
    assert out.sourceId == "52772"
    assert out.ingredients == ["3/4 cup soy sauce", "chicken"]
    assert out.description == "Japanese Chicken dish. Meat, Casserole"
    assert out.tags == ["Meat", "Casserole"]
    assert out.cookTime == "30"
    assert out.difficulty == "Medium"
    assert out.youtubeLink == "https://youtu.be/x"
    assert out.imageUrl == "https://img.test/52772.jpg"


def test_generated_explicit_description_wins():
    rec = GeneratedRecipe(title="X", instructions="Y", description="A lovely stew", area="Thai")
    assert normalize(rec).description == "A lovely stew"


def test_missing_optional_fields_default_empty():
    out = normalize(CandidateRecipe(sourceId="1"))
    assert out.title == ""
    assert out.instructions == ""
    assert out.description == ""
    assert out.ingredients == []


def test_candidate_without_id_is_ignored():
    assert candidate_from_meal({"strMeal": "No id"}) is None


def test_candidate_with_blank_id_normalizes_as_generated():
    out = normalize(CandidateRecipe(sourceId="", title="Loose", instructions="Stir."))
    assert out.provenance == "generated"
    assert out.sourceId is None


def test_provenance_invariant_is_enforced():
    with pytest.raises(ValueError):
        CanonicalRecipe(title="x", provenance="corpus", sourceId=None)
    with pytest.raises(ValueError):
        CanonicalRecipe(title="x", provenance="generated", sourceId="1")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Pasta,Curry", ["Pasta", "Curry"]),
        (" Soup , ,Spicy ", ["Soup", "Spicy"]),
        (None, []),
        (["Quick", ""], ["Quick"]),
    ],
)
def test_split_tags(raw, expected):
    assert split_tags(raw) == expected


def test_blank_names_never_emitted_from_lines():
    cand = CandidateRecipe(sourceId="9", ingredients=[IngredientLine(name=" ", measure="1 cup"), IngredientLine(name="Rice", measure="1 cup")])
    assert normalize(cand).ingredients == ["1 cup Rice"]
