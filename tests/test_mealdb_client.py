import asyncio

from conftest import full, summary


def test_lookup_by_ingredient_parses_summaries(mealdb):
    mealdb.by_ingredient["chicken"] = [summary("1", "A"), summary("2", "B")]
    got = asyncio.run(mealdb.client().lookup_by_ingredient("chicken"))
    assert [c.sourceId for c in got] == ["1", "2"]
    assert all(not c.is_full for c in got)
    assert mealdb.calls[0].path == "/api/json/v1/1/filter.php"


def test_null_meals_is_empty_not_error(mealdb):
    mealdb.by_ingredient["durian"] = None
    assert asyncio.run(mealdb.client().lookup_by_ingredient("durian")) == []


def test_network_failure_fails_soft(mealdb):
    mealdb.fail_ingredients.add("chicken")
    assert asyncio.run(mealdb.client().lookup_by_ingredient("chicken")) == []


def test_blank_ingredient_issues_no_request(mealdb):
    assert asyncio.run(mealdb.client().lookup_by_ingredient("  ")) == []
    assert mealdb.calls == []


def test_fetch_detail_full_variant(mealdb):
    mealdb.details["52772"] = full("52772", "Teriyaki Chicken", [("chicken", "1 lb")])
    got = asyncio.run(mealdb.client().fetch_detail("52772"))
    assert got.is_full
    assert got.ingredients[0].name == "chicken"


def test_fetch_detail_unknown_or_error_is_none(mealdb):
    mealdb.fail_details.add("500")
    cli = mealdb.client()
    assert asyncio.run(cli.fetch_detail("404")) is None
    assert asyncio.run(cli.fetch_detail("500")) is None


def test_browse_lookups(mealdb):
    mealdb.details["5"] = full("5")
    cli = mealdb.client()
    assert asyncio.run(cli.random_recipe()).sourceId == "5"
    assert asyncio.run(cli.list_cuisines()) == ["Italian", "Thai"]
    cats = asyncio.run(cli.list_categories())
    assert cats[0]["name"] == "Beef"
    assert [c.sourceId for c in asyncio.run(cli.list_by_category("Beef"))] == ["77"]
    assert asyncio.run(cli.list_by_cuisine("Nowhere")) == []
    assert asyncio.run(cli.search_by_name("nothing")) == []
