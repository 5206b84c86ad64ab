import pytest

from recipebox import create_app

OWNER = {"X-User-Id": "u1"}
PANCAKES = {
    "title": "Pancakes",
    "ingredients": [
        {"item": "flour", "amount": "2", "unit": "cups"},
        {"item": "", "amount": "1", "unit": "tsp"},
    ],
    "instructions": ["Mix", "Cook"],
}


def create(client, payload=PANCAKES, headers=OWNER):
    response = client.post("/api/recipes", json=payload, headers=headers)
    assert response.status_code == 201
    return response.get_json()["id"]


def test_requests_without_identity_are_rejected(client):
    response = client.get("/api/recipes")

    assert response.status_code == 401
    assert "sign in" in response.get_json()["error"]


def test_create_and_list_recipe(client):
    recipe_id = create(client)

    response = client.get("/api/recipes", headers=OWNER)

    assert response.status_code == 200
    recipes = response.get_json()
    assert [recipe["id"] for recipe in recipes] == [recipe_id]
    assert recipes[0]["ingredients"] == [{"item": "flour", "amount": "2", "unit": "cups"}]
    assert recipes[0]["owner_id"] == "u1"


def test_create_without_valid_ingredient_is_bad_request(client):
    payload = {"title": "Stir", "ingredients": [{"item": "  ", "amount": "1"}], "instructions": ["Stir"]}

    response = client.post("/api/recipes", json=payload, headers=OWNER)

    assert response.status_code == 400
    assert response.get_json() == {"error": "At least one ingredient is required."}


def test_create_requires_json_body(client):
    response = client.post("/api/recipes", data="title=Soup", headers=OWNER)

    assert response.status_code == 400


def test_owner_cannot_be_chosen_by_the_client(client):
    payload = dict(PANCAKES, owner_id="u2")

    response = client.post("/api/recipes", json=payload, headers=OWNER)

    assert response.status_code == 400


def test_get_recipe_of_another_owner_is_not_found(client):
    recipe_id = create(client)

    assert client.get(f"/api/recipes/{recipe_id}", headers=OWNER).status_code == 200
    response = client.get(f"/api/recipes/{recipe_id}", headers={"X-User-Id": "u2"})
    assert response.status_code == 404
    assert response.get_json() == {"error": "Recipe not found."}


def test_patch_updates_supplied_fields(client, clock):
    recipe_id = create(client)
    clock.advance(1000)

    response = client.patch(
        f"/api/recipes/{recipe_id}", json={"rating": 5, "tags": ["brunch"]}, headers=OWNER
    )

    assert response.status_code == 200
    data = response.get_json()
    assert data["rating"] == 5
    assert data["tags"] == ["brunch"]
    assert data["title"] == "Pancakes"
    assert data["updated_at"] == data["created_at"] + 1000


def test_patch_rejects_out_of_range_rating(client):
    recipe_id = create(client)

    response = client.patch(f"/api/recipes/{recipe_id}", json={"rating": 9}, headers=OWNER)

    assert response.status_code == 400


def test_delete_then_get_is_not_found(client):
    recipe_id = create(client)

    response = client.delete(f"/api/recipes/{recipe_id}", headers=OWNER)
    assert response.status_code == 204

    assert client.get(f"/api/recipes/{recipe_id}", headers=OWNER).status_code == 404
    assert client.delete(f"/api/recipes/{recipe_id}", headers=OWNER).status_code == 404
    patch = client.patch(f"/api/recipes/{recipe_id}", json={"title": "Again"}, headers=OWNER)
    assert patch.status_code == 404


@pytest.mark.parametrize("term, count", [("PANCAKE", 1), ("flour", 1), ("  ", 0), ("", 0)])
def test_search_endpoint(client, term, count):
    create(client)

    response = client.get("/api/recipes/search", query_string={"q": term}, headers=OWNER)

    assert response.status_code == 200
    assert len(response.get_json()) == count


def test_stats_endpoint(client):
    recipe_id = create(client, dict(PANCAKES, difficulty="easy", rating=4, category="Breakfast"))

    response = client.get("/api/recipes/stats", headers=OWNER)

    assert response.status_code == 200
    stats = response.get_json()
    assert stats["total"] == 1
    assert stats["easy"] == 1
    assert stats["top_rated"] == 1
    assert stats["categories"] == 1
    assert stats["this_week"] == 1
    assert stats["recently_updated"] == [{"id": recipe_id, "title": "Pancakes"}]


def test_export_and_import_round_trip_between_owners(client):
    create(client)
    exported = client.get("/api/recipes/export", headers=OWNER).get_json()

    response = client.post("/api/recipes/import", json=exported, headers={"X-User-Email": "friend@example.com"})

    assert response.status_code == 201
    assert len(response.get_json()["created"]) == 1
    listed = client.get("/api/recipes", headers={"X-User-Email": "friend@example.com"}).get_json()
    assert [recipe["title"] for recipe in listed] == ["Pancakes"]


def test_healthz(client):
    assert client.get("/healthz").get_json() == {"status": "ok"}


def test_create_app_without_storage_uses_firestore(monkeypatch):
    import recipebox

    sentinel = object()

    class StubStorage:
        @classmethod
        def from_env(cls):
            return sentinel

    monkeypatch.setattr(recipebox, "FirestoreRecipeStorage", StubStorage)

    app = create_app()

    assert app.config["RECIPE_STORAGE"] is sentinel
