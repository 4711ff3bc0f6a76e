import pytest

from almanac.models import RecipeFork


@pytest.fixture
def pie(client, other_headers):
    response = client.post(
        "/api/recipes",
        json={
            "title": "Apple Pie",
            "tags": ["dessert"],
            "method_steps": ["Bake"],
            "ingredients": [
                {"name": "flour", "amount": 3, "unit": "cups"},
                {"name": "sugar", "amount": 150, "unit": "g"},
            ],
        },
        headers=other_headers,
    )
    assert response.status_code == 201
    return response.json()


def test_favorite_is_idempotent(client, auth_headers, pie):
    first = client.post(f"/api/recipes/{pie['id']}/favorite", headers=auth_headers)
    assert first.status_code == 200
    assert first.json() == {"recipe_id": pie["id"], "favorited": True, "favorite_count": 1}

    again = client.post(f"/api/recipes/{pie['id']}/favorite", headers=auth_headers)
    assert again.json()["favorite_count"] == 1

    recipe = client.get(f"/api/recipes/{pie['id']}", headers=auth_headers).json()
    assert recipe["is_favorited"] is True
    assert recipe["favorite_count"] == 1


def test_unfavorite(client, auth_headers, other_headers, pie):
    client.post(f"/api/recipes/{pie['id']}/favorite", headers=auth_headers)
    client.post(f"/api/recipes/{pie['id']}/favorite", headers=other_headers)

    response = client.delete(f"/api/recipes/{pie['id']}/favorite", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"recipe_id": pie["id"], "favorited": False, "favorite_count": 1}

    listed = client.get("/api/recipes").json()
    assert listed[0]["favorite_count"] == 1


def test_favorite_requires_profile(client, pie):
    assert client.post(f"/api/recipes/{pie['id']}/favorite").status_code == 401


def test_cannot_favorite_private_recipe_of_someone_else(client, auth_headers, other_headers):
    secret = client.post(
        "/api/recipes", json={"title": "Secret Stew", "is_public": False}, headers=other_headers
    ).json()
    response = client.post(f"/api/recipes/{secret['id']}/favorite", headers=auth_headers)
    assert response.status_code == 403


def test_fork_copies_recipe_and_ingredients(client, auth_headers, db_session, pie):
    response = client.post(f"/api/recipes/{pie['id']}/fork", headers=auth_headers)
    assert response.status_code == 201
    fork = response.json()

    assert fork["id"] != pie["id"]
    assert fork["username"] == "Jane Doe"
    assert fork["slug"] == "jane_doe-apple-pie-fork"
    assert fork["forked_from_id"] == pie["id"]
    assert fork["view_count"] == 0
    assert fork["tags"] == ["dessert"]
    assert [(i["name"], i["amount_grams"], i["unit"]) for i in fork["ingredients"]] == [
        ("flour", 375, "cups"),
        ("sugar", 150, "g"),
    ]

    link = db_session.query(RecipeFork).filter_by(forked_recipe_id=fork["id"]).one()
    assert link.original_recipe_id == pie["id"]


def test_fork_twice_gets_unique_slugs(client, auth_headers, pie):
    first = client.post(f"/api/recipes/{pie['id']}/fork", headers=auth_headers).json()
    second = client.post(f"/api/recipes/{pie['id']}/fork", headers=auth_headers).json()
    assert first["slug"] == "jane_doe-apple-pie-fork"
    assert second["slug"] == "jane_doe-apple-pie-fork-2"


def test_fork_is_independent_of_original(client, auth_headers, other_headers, pie):
    fork = client.post(f"/api/recipes/{pie['id']}/fork", headers=auth_headers).json()

    client.put(
        f"/api/recipes/{fork['id']}",
        json={"title": "Pear Pie", "ingredients": [{"name": "pears", "amount": 4, "unit": "other"}]},
        headers=auth_headers,
    )
    original = client.get(f"/api/recipes/{pie['id']}").json()
    assert original["title"] == "Apple Pie"
    assert len(original["ingredients"]) == 2


def test_fork_private_recipe_forbidden(client, auth_headers, other_headers):
    secret = client.post(
        "/api/recipes", json={"title": "Secret Stew", "is_public": False}, headers=other_headers
    ).json()
    assert client.post(f"/api/recipes/{secret['id']}/fork", headers=auth_headers).status_code == 403


def test_editing_own_fork_keeps_its_slug(client, auth_headers):
    pancakes = client.post(
        "/api/recipes", json={"title": "Pancakes"}, headers=auth_headers
    ).json()
    fork = client.post(f"/api/recipes/{pancakes['id']}/fork", headers=auth_headers).json()
    assert fork["slug"] == "jane_doe-pancakes-fork"

    response = client.put(
        f"/api/recipes/{fork['id']}",
        json={"title": "Pancakes", "notes": ["Add blueberries"]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["slug"] == "jane_doe-pancakes-fork"
    assert response.json()["notes"] == ["Add blueberries"]


def test_renaming_fork_recomputes_slug(client, auth_headers, pie):
    fork = client.post(f"/api/recipes/{pie['id']}/fork", headers=auth_headers).json()

    response = client.put(
        f"/api/recipes/{fork['id']}", json={"title": "Pear Pie"}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["slug"] == "jane_doe-pear-pie"
