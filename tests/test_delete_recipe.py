from almanac.models import Ingredient, Recipe, RecipeFork, SavedRecipe


def test_delete_recipe_e2e(client, db_session, profile, other_profile, auth_headers):
    # 1. Setup Data
    recipe = Recipe(
        title="To Be Deleted",
        slug="jane_doe-to-be-deleted",
        user_id=profile.id,
        tags=[],
        method_steps=[],
        notes=[],
        ingredients=[
            Ingredient(name="flour", amount_grams=125, unit="cup", display_amount=1, order_index=0)
        ],
    )
    db_session.add(recipe)
    db_session.commit()
    db_session.refresh(recipe)

    recipe_id = recipe.id
    ingredient_id = recipe.ingredients[0].id
    db_session.add(SavedRecipe(user_id=other_profile.id, recipe_id=recipe_id))
    db_session.commit()

    # 2. Call Delete Endpoint
    response = client.delete(f"/api/recipes/{recipe_id}", headers=auth_headers)

    # 3. Assertions
    assert response.status_code == 204, f"Expected 204, got {response.status_code}: {response.text}"

    db_session.expire_all()
    assert db_session.query(Recipe).filter_by(id=recipe_id).first() is None
    assert db_session.query(Ingredient).filter_by(id=ingredient_id).first() is None
    assert db_session.query(SavedRecipe).filter_by(recipe_id=recipe_id).first() is None


def test_delete_forked_original_removes_lineage(client, db_session, auth_headers, other_headers):
    pie = client.post("/api/recipes", json={"title": "Pie"}, headers=other_headers).json()
    fork = client.post(f"/api/recipes/{pie['id']}/fork", headers=auth_headers).json()

    assert client.delete(f"/api/recipes/{pie['id']}", headers=other_headers).status_code == 204

    db_session.expire_all()
    assert db_session.query(RecipeFork).count() == 0
    remaining = client.get(f"/api/recipes/{fork['id']}").json()
    assert remaining["forked_from_id"] is None


def test_delete_recipe_not_found(client, auth_headers):
    response = client.delete("/api/recipes/nonexistent-id", headers=auth_headers)
    assert response.status_code == 404


def test_delete_recipe_not_owner(client, auth_headers, other_headers):
    pie = client.post("/api/recipes", json={"title": "Pie"}, headers=other_headers).json()
    assert client.delete(f"/api/recipes/{pie['id']}", headers=auth_headers).status_code == 403
