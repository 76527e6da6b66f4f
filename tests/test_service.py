import pytest

from recipebook.errors import InvalidRequest, RecipeNotFound, SeedError
from recipebook.seed import StaticSeedProvider
from recipebook.service import RecipeService


@pytest.fixture
def service(storage, seed_provider):
    return RecipeService(storage, seed_provider)


def test_get_after_create_matches_every_supplied_field(service):
    payload = {
        "name": "soup",
        "title": "Tomato Soup",
        "date": "2024-03-01T12:00:00Z",
        "description": "Warm and cozy",
        "image": "/img/soup.jpg",
        "ingredients": ["tomatoes", {"quantity": "1 l", "item": "stock"}],
        "preparation": ["Simmer.", "Blend."],
    }

    created = service.add(payload)
    fetched = service.find_by_id(created.id)

    assert fetched == created
    assert fetched.name == "soup"
    assert fetched.title == "Tomato Soup"
    assert fetched.date.isoformat() == "2024-03-01T12:00:00+00:00"
    assert fetched.description == "Warm and cozy"
    assert fetched.image == "/img/soup.jpg"
    assert fetched.ingredients == ["tomatoes", {"quantity": "1 l", "item": "stock"}]
    assert fetched.preparation == ["Simmer.", "Blend."]


def test_update_changes_only_the_given_field(service):
    created = service.add({"name": "bread", "title": "Bread", "ingredients": ["flour"]})

    updated = service.update(created.id, {"description": "Crusty"})

    assert updated.description == "Crusty"
    assert updated.name == created.name
    assert updated.title == created.title
    assert updated.ingredients == created.ingredients
    assert updated.created_at == created.created_at


def test_update_can_clear_a_field_with_null(service):
    created = service.add({"title": "Bread", "image": "/img/bread.jpg"})

    updated = service.update(created.id, {"image": None})

    assert updated.image is None
    assert updated.title == "Bread"


def test_update_with_empty_payload_returns_record_unchanged(service):
    created = service.add({"title": "Bread"})

    assert service.update(created.id, {}) == created


def test_update_unknown_recipe_raises_not_found(service):
    with pytest.raises(RecipeNotFound):
        service.update("5", {"title": "X"})


def test_delete_then_get_raises_not_found(service):
    created = service.add({"title": "Pie"})

    service.delete(created.id)

    with pytest.raises(RecipeNotFound):
        service.find_by_id(created.id)
    with pytest.raises(RecipeNotFound):
        service.delete(created.id)


def test_ids_are_not_reused_after_delete(service):
    first = service.add({"title": "Pie"})
    service.delete(first.id)

    second = service.add({"title": "Pie"})

    assert second.id != first.id


def test_add_rejects_non_object_payload(service, storage):
    with pytest.raises(InvalidRequest):
        service.add(["not", "an", "object"])

    assert storage.list_recipes() == []


def test_import_into_empty_store_lists_exactly_the_seed(service):
    imported = service.import_seed()

    listed = service.find_all()
    assert len(listed) == 3
    assert {recipe.id for recipe in listed} == {recipe.id for recipe in imported}
    assert len({recipe.id for recipe in listed}) == 3
    assert listed[2].ingredients == [{"quantity": "200 g", "item": "feta"}, "olives"]


def test_import_is_all_or_nothing_on_bad_record(storage):
    seed = StaticSeedProvider(
        [
            {"title": "Good"},
            {"title": "Bad date", "date": "someday"},
        ]
    )
    service = RecipeService(storage, seed)

    with pytest.raises(SeedError, match="#1"):
        service.import_seed()

    assert service.find_all() == []


def test_import_without_seed_provider_fails(storage):
    with pytest.raises(SeedError):
        RecipeService(storage).import_seed()


def test_kill_all_empties_store_and_reports_count(service):
    for title in ("A", "B", "C", "D"):
        service.add({"title": title})

    assert service.kill_all() == 4
    assert service.find_all() == []
    assert service.kill_all() == 0
