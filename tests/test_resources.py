"""Ingredients, recipes, clients and orders: ownership, costing and item management."""

import pytest

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def ana(headers_for):
    return headers_for("ana@example.com", "Ana")


@pytest.fixture
def bruno(headers_for):
    return headers_for("bruno@example.com", "Bruno")


def _ingredient(client, headers, name="Farinha", price="8.90", unit="kg") -> dict:
    resp = client.post(
        "/api/ingredientes", json={"name": name, "price": price, "unit": unit}, headers=headers
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _recipe(client, headers, name="Bolo", price="30.00", ingredients=()) -> dict:
    resp = client.post(
        "/api/receitas",
        json={"name": name, "price": price, "ingredients": list(ingredients)},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def _client_row(client, headers, name="Maria") -> dict:
    resp = client.post(
        "/api/clientes",
        json={"name": name, "email": "maria@example.com", "phone": "11 98888-7777"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestIngredients:
    def test_crud(self, client, ana):
        created = _ingredient(client, ana)
        assert created["name"] == "Farinha"
        assert created["price"] == 8.9
        assert created["unit"] == "kg"

        ing_id = created["id"]
        assert client.get(f"/api/ingredientes/{ing_id}", headers=ana).json()["name"] == "Farinha"

        put = client.put(
            f"/api/ingredientes/{ing_id}",
            json={"name": "Farinha de trigo", "price": "9.50", "unit": "kg"},
            headers=ana,
        )
        assert put.status_code == 200
        assert put.json()["price"] == 9.5

        patch = client.patch(f"/api/ingredientes/{ing_id}", json={"price": 10}, headers=ana)
        assert patch.status_code == 200
        assert patch.json()["name"] == "Farinha de trigo"
        assert patch.json()["price"] == 10.0

        assert client.delete(f"/api/ingredientes/{ing_id}", headers=ana).status_code == 204
        assert client.get(f"/api/ingredientes/{ing_id}", headers=ana).status_code == 404

    def test_validation(self, client, ana):
        assert client.post(
            "/api/ingredientes", json={"name": "Sal", "price": -1}, headers=ana
        ).status_code == 400
        assert client.post(
            "/api/ingredientes", json={"name": "  ", "price": 1}, headers=ana
        ).status_code == 400
        ing = _ingredient(client, ana)
        empty = client.patch(f"/api/ingredientes/{ing['id']}", json={}, headers=ana)
        assert empty.status_code == 400
        null_price = client.patch(f"/api/ingredientes/{ing['id']}", json={"price": None}, headers=ana)
        assert null_price.status_code == 400

    def test_values_must_fit_their_columns(self, client, ana):
        too_large = client.post(
            "/api/ingredientes", json={"name": "Sal", "price": "12345678901234"}, headers=ana
        )
        assert too_large.status_code == 400
        assert "erro" in too_large.json()
        too_precise = client.post(
            "/api/ingredientes", json={"name": "Sal", "price": "1.234"}, headers=ana
        )
        assert too_precise.status_code == 400
        long_unit = client.post(
            "/api/ingredientes", json={"name": "Sal", "price": "1.00", "unit": "k" * 33}, headers=ana
        )
        assert long_unit.status_code == 400
        ing = _ingredient(client, ana, unit="u" * 32)
        assert ing["unit"] == "u" * 32
        patched = client.patch(
            f"/api/ingredientes/{ing['id']}", json={"price": "99999999999.00"}, headers=ana
        )
        assert patched.status_code == 400

    def test_other_users_rows_are_hidden(self, client, ana, bruno):
        ing = _ingredient(client, ana)
        assert client.get("/api/ingredientes", headers=bruno).json() == []
        assert client.get(f"/api/ingredientes/{ing['id']}", headers=bruno).status_code == 404
        assert client.patch(
            f"/api/ingredientes/{ing['id']}", json={"price": 1}, headers=bruno
        ).status_code == 404
        assert client.delete(f"/api/ingredientes/{ing['id']}", headers=bruno).status_code == 404
        assert client.get(f"/api/ingredientes/{ing['id']}", headers=ana).status_code == 200

    def test_admin_sees_everything(self, client, ana, bruno, admin_headers):
        _ingredient(client, ana, name="Açúcar")
        _ingredient(client, bruno, name="Ovos", unit="un")
        names = [i["name"] for i in client.get("/api/ingredientes", headers=admin_headers).json()]
        assert names == ["Açúcar", "Ovos"]


class TestRecipes:
    def test_create_with_ingredients_reports_cost_and_margin(self, client, ana):
        flour = _ingredient(client, ana, "Farinha", "8.90", "kg")
        eggs = _ingredient(client, ana, "Ovos", "0.75", "un")
        recipe = _recipe(
            client,
            ana,
            price="30.00",
            ingredients=[
                {"ingredient_id": flour["id"], "quantity": "0.250"},
                {"ingredient_id": eggs["id"], "quantity": 4},
            ],
        )
        assert recipe["cost"] == 5.23
        assert recipe["margin"] == 24.77
        lines = {line["name"]: line for line in recipe["ingredients"]}
        assert lines["Farinha"]["line_cost"] == 2.23
        assert lines["Ovos"]["line_cost"] == 3.0

        detail = client.get(f"/api/receitas/{recipe['id']}", headers=ana).json()
        assert detail["cost"] == 5.23

    def test_create_rolls_back_on_unknown_ingredient(self, client, ana, bruno):
        foreign = _ingredient(client, bruno)
        resp = client.post(
            "/api/receitas",
            json={
                "name": "Bolo",
                "price": 10,
                "ingredients": [{"ingredient_id": foreign["id"], "quantity": 1}],
            },
            headers=ana,
        )
        assert resp.status_code == 404
        assert client.get("/api/receitas", headers=ana).json() == []

    def test_create_rejects_duplicate_ingredient(self, client, ana):
        flour = _ingredient(client, ana)
        resp = client.post(
            "/api/receitas",
            json={
                "name": "Bolo",
                "price": 10,
                "ingredients": [
                    {"ingredient_id": flour["id"], "quantity": 1},
                    {"ingredient_id": flour["id"], "quantity": 2},
                ],
            },
            headers=ana,
        )
        assert resp.status_code == 400

    def test_ingredient_associations(self, client, ana):
        flour = _ingredient(client, ana, "Farinha", "8.00", "kg")
        recipe = _recipe(client, ana, price="20.00")
        url = f"/api/receitas/{recipe['id']}/ingredientes"

        added = client.post(url, json={"ingredient_id": flour["id"], "quantity": "0.5"}, headers=ana)
        assert added.status_code == 201
        assert added.json()["quantity"] == 0.5

        again = client.post(url, json={"ingredient_id": flour["id"], "quantity": 1}, headers=ana)
        assert again.status_code == 409

        missing = client.post(url, json={"ingredient_id": 9999, "quantity": 1}, headers=ana)
        assert missing.status_code == 404

        zero = client.post(url, json={"ingredient_id": flour["id"], "quantity": 0}, headers=ana)
        assert zero.status_code == 400

        changed = client.patch(f"{url}/{flour['id']}", json={"quantity": 2}, headers=ana)
        assert changed.status_code == 200
        assert client.get(f"/api/receitas/{recipe['id']}", headers=ana).json()["cost"] == 16.0

        assert client.delete(f"{url}/{flour['id']}", headers=ana).status_code == 204
        assert client.delete(f"{url}/{flour['id']}", headers=ana).status_code == 404
        assert client.get(f"/api/receitas/{recipe['id']}", headers=ana).json()["ingredients"] == []

    def test_deleting_ingredient_removes_it_from_recipes(self, client, ana):
        flour = _ingredient(client, ana)
        recipe = _recipe(client, ana, ingredients=[{"ingredient_id": flour["id"], "quantity": 1}])
        assert client.delete(f"/api/ingredientes/{flour['id']}", headers=ana).status_code == 204
        detail = client.get(f"/api/receitas/{recipe['id']}", headers=ana).json()
        assert detail["ingredients"] == []
        assert detail["cost"] == 0.0

    def test_update_and_delete(self, client, ana, bruno):
        recipe = _recipe(client, ana)
        patched = client.patch(
            f"/api/receitas/{recipe['id']}", json={"description": "Receita da vó"}, headers=ana
        )
        assert patched.status_code == 200
        assert patched.json()["description"] == "Receita da vó"
        assert patched.json()["name"] == "Bolo"

        put = client.put(
            f"/api/receitas/{recipe['id']}", json={"name": "Torta", "price": "45.00"}, headers=ana
        )
        assert put.status_code == 200
        assert put.json()["description"] is None

        assert client.delete(f"/api/receitas/{recipe['id']}", headers=bruno).status_code == 404
        assert client.delete(f"/api/receitas/{recipe['id']}", headers=ana).status_code == 204

    def test_image_upload(self, client, ana):
        recipe = _recipe(client, ana)
        url = f"/api/receitas/{recipe['id']}/imagem"

        resp = client.post(url, files={"file": ("bolo.png", PNG, "image/png")}, headers=ana)
        assert resp.status_code == 200
        image_url = resp.json()["image_url"]
        assert image_url.startswith("/uploads/")
        assert image_url.endswith(".png")
        served = client.get(image_url)
        assert served.status_code == 200
        assert served.content == PNG

        bad = client.post(url, files={"file": ("notes.txt", b"hello", "text/plain")}, headers=ana)
        assert bad.status_code == 400
        assert client.get(f"/api/receitas/{recipe['id']}", headers=ana).json()["image_url"] == image_url

        replaced = client.post(url, files={"file": ("bolo2.png", PNG, "image/png")}, headers=ana)
        assert replaced.json()["image_url"] != image_url
        assert client.get(image_url).status_code == 404

    def test_image_upload_requires_file(self, client, ana):
        recipe = _recipe(client, ana)
        resp = client.post(f"/api/receitas/{recipe['id']}/imagem", headers=ana)
        assert resp.status_code == 400

    def test_price_and_quantity_must_fit_their_columns(self, client, ana):
        flour = _ingredient(client, ana)
        resp = client.post(
            "/api/receitas", json={"name": "Bolo", "price": "12345678901234"}, headers=ana
        )
        assert resp.status_code == 400
        resp = client.post(
            "/api/receitas",
            json={
                "name": "Bolo",
                "price": "30.00",
                "ingredients": [{"ingredient_id": flour["id"], "quantity": "1234567890.5"}],
            },
            headers=ana,
        )
        assert resp.status_code == 400
        assert client.get("/api/receitas", headers=ana).json() == []


class TestClients:
    def test_crud_and_ownership(self, client, ana, bruno):
        row = _client_row(client, ana)
        assert row["email"] == "maria@example.com"
        assert row["address"] is None

        patched = client.patch(
            f"/api/clientes/{row['id']}", json={"address": "Rua A, 10"}, headers=ana
        )
        assert patched.json()["address"] == "Rua A, 10"

        bad_email = client.patch(f"/api/clientes/{row['id']}", json={"email": "x"}, headers=ana)
        assert bad_email.status_code == 400

        assert client.get(f"/api/clientes/{row['id']}", headers=bruno).status_code == 404
        assert client.get("/api/clientes", headers=bruno).json() == []
        assert client.delete(f"/api/clientes/{row['id']}", headers=ana).status_code == 204
        assert client.get("/api/clientes", headers=ana).json() == []

    def test_phone_length_is_bounded(self, client, ana):
        resp = client.post(
            "/api/clientes",
            json={"name": "Maria", "email": "maria@example.com", "phone": "9" * 65},
            headers=ana,
        )
        assert resp.status_code == 400
        row = _client_row(client, ana)
        patched = client.patch(f"/api/clientes/{row['id']}", json={"phone": "9" * 64}, headers=ana)
        assert patched.status_code == 200


class TestOrders:
    def _setup(self, client, headers):
        cake = _recipe(client, headers, "Bolo", "30.00")
        pie = _recipe(client, headers, "Torta", "15.00")
        customer = _client_row(client, headers)
        return cake, pie, customer

    def test_create_with_items_and_margin(self, client, ana):
        cake, pie, customer = self._setup(client, ana)
        resp = client.post(
            "/api/pedidos",
            json={
                "client_id": customer["id"],
                "profit_margin": 20,
                "due_date": "2026-12-24",
                "recipes": [
                    {"recipe_id": cake["id"], "quantity": 2},
                    {"recipe_id": pie["id"], "quantity": 1},
                ],
            },
            headers=ana,
        )
        assert resp.status_code == 201
        order = resp.json()
        assert order["total_price"] == 90.0
        assert order["priority"] == "media"
        assert order["status"] == "aberto"
        assert order["due_date"] == "2026-12-24"
        assert [(i["name"], i["line_total"]) for i in order["recipes"]] == [("Bolo", 60.0), ("Torta", 15.0)]

    def test_items_recalculate_total(self, client, ana):
        cake, pie, customer = self._setup(client, ana)
        order = client.post("/api/pedidos", json={"client_id": customer["id"]}, headers=ana).json()
        assert order["total_price"] == 0.0
        items = f"/api/pedidos/{order['id']}/receitas"

        assert client.post(items, json={"recipe_id": cake["id"], "quantity": 1}, headers=ana).status_code == 201
        assert client.post(items, json={"recipe_id": cake["id"], "quantity": 1}, headers=ana).status_code == 409
        assert client.post(items, json={"recipe_id": pie["id"], "quantity": 2}, headers=ana).status_code == 201
        assert client.get(f"/api/pedidos/{order['id']}", headers=ana).json()["total_price"] == 60.0

        assert client.patch(f"{items}/{pie['id']}", json={"quantity": 4}, headers=ana).status_code == 200
        assert client.get(f"/api/pedidos/{order['id']}", headers=ana).json()["total_price"] == 90.0

        margin = client.patch(f"/api/pedidos/{order['id']}", json={"profit_margin": 10}, headers=ana)
        assert margin.json()["total_price"] == 99.0

        assert client.delete(f"{items}/{cake['id']}", headers=ana).status_code == 204
        assert client.delete(f"{items}/{cake['id']}", headers=ana).status_code == 404
        assert client.get(f"/api/pedidos/{order['id']}", headers=ana).json()["total_price"] == 66.0

    def test_item_keeps_price_at_time_of_order(self, client, ana):
        cake, _pie, customer = self._setup(client, ana)
        order = client.post(
            "/api/pedidos",
            json={"client_id": customer["id"], "recipes": [{"recipe_id": cake["id"], "quantity": 1}]},
            headers=ana,
        ).json()
        client.patch(f"/api/receitas/{cake['id']}", json={"price": "50.00"}, headers=ana)
        assert client.get(f"/api/pedidos/{order['id']}", headers=ana).json()["total_price"] == 30.0

    def test_recipe_in_an_order_cannot_be_deleted(self, client, ana):
        cake, _pie, customer = self._setup(client, ana)
        client.post(
            "/api/pedidos",
            json={"client_id": customer["id"], "recipes": [{"recipe_id": cake["id"], "quantity": 1}]},
            headers=ana,
        )
        resp = client.delete(f"/api/receitas/{cake['id']}", headers=ana)
        assert resp.status_code == 409
        assert client.get(f"/api/receitas/{cake['id']}", headers=ana).status_code == 200

    def test_client_must_be_visible(self, client, ana, bruno):
        customer = _client_row(client, bruno)
        resp = client.post("/api/pedidos", json={"client_id": customer["id"]}, headers=ana)
        assert resp.status_code == 404
        assert resp.json() == {"erro": "Client not found."}

    def test_invalid_fields(self, client, ana):
        _cake, _pie, customer = self._setup(client, ana)
        bad_priority = client.post(
            "/api/pedidos", json={"client_id": customer["id"], "priority": "urgente"}, headers=ana
        )
        assert bad_priority.status_code == 400
        bad_margin = client.post(
            "/api/pedidos", json={"client_id": customer["id"], "profit_margin": -5}, headers=ana
        )
        assert bad_margin.status_code == 400

    def test_deleting_client_deletes_orders(self, client, ana):
        _cake, _pie, customer = self._setup(client, ana)
        order = client.post("/api/pedidos", json={"client_id": customer["id"]}, headers=ana).json()
        assert client.delete(f"/api/clientes/{customer['id']}", headers=ana).status_code == 204
        assert client.get(f"/api/pedidos/{order['id']}", headers=ana).status_code == 404

    def test_orders_are_scoped(self, client, ana, bruno):
        _cake, _pie, customer = self._setup(client, ana)
        order = client.post("/api/pedidos", json={"client_id": customer["id"]}, headers=ana).json()
        assert client.get("/api/pedidos", headers=bruno).json() == []
        assert client.get(f"/api/pedidos/{order['id']}", headers=bruno).status_code == 404
        assert client.delete(f"/api/pedidos/{order['id']}", headers=ana).status_code == 204

    def test_amounts_must_fit_their_columns(self, client, ana):
        cake, _pie, customer = self._setup(client, ana)
        huge_margin = client.post(
            "/api/pedidos", json={"client_id": customer["id"], "profit_margin": "123456789"}, headers=ana
        )
        assert huge_margin.status_code == 400
        assert "erro" in huge_margin.json()
        huge_quantity = client.post(
            "/api/pedidos",
            json={"client_id": customer["id"], "recipes": [{"recipe_id": cake["id"], "quantity": 1_000_001}]},
            headers=ana,
        )
        assert huge_quantity.status_code == 400
        assert client.get("/api/pedidos", headers=ana).json() == []

    def test_total_too_large_to_store(self, client, ana):
        _cake, _pie, customer = self._setup(client, ana)
        luxury = _recipe(client, ana, "Bolo de ouro", "9999999999.99")
        resp = client.post(
            "/api/pedidos",
            json={"client_id": customer["id"], "recipes": [{"recipe_id": luxury["id"], "quantity": 2}]},
            headers=ana,
        )
        assert resp.status_code == 400
        assert resp.json() == {"erro": "Order total exceeds the largest amount that can be stored."}

        order = client.post("/api/pedidos", json={"client_id": customer["id"]}, headers=ana).json()
        items = f"/api/pedidos/{order['id']}/receitas"
        assert client.post(items, json={"recipe_id": luxury["id"], "quantity": 1}, headers=ana).status_code == 201
        assert client.patch(f"{items}/{luxury['id']}", json={"quantity": 2}, headers=ana).status_code == 400
        assert client.get(f"/api/pedidos/{order['id']}", headers=ana).json()["total_price"] == 9999999999.99


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {
        "status": "ok",
        "environment": "dev",
        "version": "0.1.0",
        "database": "connected",
    }


def test_root_lists_resources(client):
    body = client.get("/").json()
    assert body["resources"]["receitas"] == "/api/receitas"
    assert body["resources"]["usuarios"] == "/api/usuarios"


def test_unknown_route_uses_error_shape(client):
    resp = client.get("/api/nao-existe")
    assert resp.status_code == 404
    assert set(resp.json()) == {"erro"}
