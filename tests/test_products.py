"""Tests for the product catalog endpoints."""

from glowmate.models.product import Product
from glowmate.services.product_lookup import ExternalProduct


def _names(response):
    return [p["name"] for p in response.json()["data"]]


class TestListProducts:
    def test_list_paginates_with_meta(self, client, make_product):
        for i in range(5):
            make_product(f"Product {i}", average_rating=float(i))

        response = client.get("/api/v1/products", params={"page": 2, "limit": 2})
        assert response.status_code == 200
        body = response.json()
        assert _names(response) == ["Product 2", "Product 1"]
        assert body["meta"] == {"total": 5, "page": 2, "limit": 2, "totalPages": 3}

    def test_default_sort_is_rating_desc(self, client, make_product):
        make_product("Low", average_rating=2.0)
        make_product("High", average_rating=4.5)

        response = client.get("/api/v1/products")
        assert _names(response) == ["High", "Low"]

    def test_sort_by_price(self, client, make_product):
        make_product("Cheap", price=5.0)
        make_product("Pricey", price=50.0)
        make_product("Unpriced", price=None)

        response = client.get("/api/v1/products", params={"sort": "price_asc"})
        assert _names(response) == ["Cheap", "Pricey", "Unpriced"]
        response = client.get("/api/v1/products", params={"sort": "price_desc"})
        assert _names(response) == ["Pricey", "Cheap", "Unpriced"]

    def test_sort_newest(self, client, make_product):
        make_product("First")
        make_product("Second")

        response = client.get("/api/v1/products", params={"sort": "newest"})
        assert _names(response) == ["Second", "First"]

    def test_search_matches_name_or_brand(self, client, make_product):
        make_product("Hydra Serum", brand="Acme")
        make_product("Cleanser", brand="HydraCo")
        make_product("Sunscreen", brand="Other")

        response = client.get("/api/v1/products", params={"q": "hydra"})
        assert sorted(_names(response)) == ["Cleanser", "Hydra Serum"]

    def test_brand_and_category_are_case_insensitive(self, client, make_product):
        make_product("A", brand="CeraVe", category="Moisturizer")
        make_product("B", brand="CeraVe", category="Cleanser")
        make_product("C", brand="Avene", category="Moisturizer")

        response = client.get(
            "/api/v1/products", params={"brand": "cerave", "category": "MOISTURIZER"}
        )
        assert _names(response) == ["A"]

    def test_price_and_rating_range(self, client, make_product):
        make_product("Too cheap", price=2.0, average_rating=5.0)
        make_product("In range", price=20.0, average_rating=4.0)
        make_product("Low rated", price=20.0, average_rating=1.0)
        make_product("Too dear", price=200.0, average_rating=5.0)

        response = client.get(
            "/api/v1/products", params={"minPrice": 10, "maxPrice": 100, "minRating": 3}
        )
        assert _names(response) == ["In range"]

    def test_tags_any_and_all(self, client, make_product):
        make_product("Both", tags=["vegan", "cruelty-free"])
        make_product("Vegan", tags=["Vegan"])
        make_product("Neither", tags=["spf"])

        response = client.get("/api/v1/products", params={"tags": "vegan,cruelty-free"})
        assert sorted(_names(response)) == ["Both", "Vegan"]
        assert response.json()["meta"]["total"] == 2

        response = client.get(
            "/api/v1/products", params={"tags": "vegan,cruelty-free", "tagsLogic": "all"}
        )
        assert _names(response) == ["Both"]

    def test_include_and_exclude_ingredients(self, client, make_product):
        make_product("Retinol Night", ingredients=["Water", "Retinol", "Fragrance"])
        make_product("Retinol Plain", ingredients=["Water", "retinol"])
        make_product("Plain", ingredients=["Water"])

        response = client.get(
            "/api/v1/products",
            params={"includeIngredients": "Retinol", "excludeIngredients": "fragrance"},
        )
        assert _names(response) == ["Retinol Plain"]

    def test_json_filters_paginate(self, client, make_product):
        for i in range(3):
            make_product(f"Vegan {i}", tags=["vegan"], average_rating=float(i))
        make_product("Other", tags=[], average_rating=5.0)

        response = client.get("/api/v1/products", params={"tags": "vegan", "limit": 2, "page": 2})
        assert _names(response) == ["Vegan 0"]
        assert response.json()["meta"] == {"total": 3, "page": 2, "limit": 2, "totalPages": 2}

    def test_invalid_sort_rejected(self, client):
        response = client.get("/api/v1/products", params={"sort": "cheapest"})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_invalid_page_rejected(self, client):
        response = client.get("/api/v1/products", params={"page": 0})
        assert response.status_code == 400


class TestCreateProduct:
    PAYLOAD = {
        "name": "Barrier Cream",
        "brand": "Glow Labs",
        "category": "Moisturizer",
        "ingredients": ["Water", "Ceramide NP"],
        "tags": ["fragrance-free"],
        "imageUrl": "https://images.test/cream.jpg",
        "price": 24.0,
        "barcode": "1234567890123",
    }

    def test_create_product(self, client, db, auth_headers):
        response = client.post("/api/v1/products", json=self.PAYLOAD, headers=auth_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Barrier Cream"
        assert body["imageUrl"] == "https://images.test/cream.jpg"
        assert body["averageRating"] == 0.0
        assert body["reviewCount"] == 0

        product = db.query(Product).filter(Product.barcode == "1234567890123").first()
        assert product.ingredients == ["Water", "Ceramide NP"]

    def test_duplicate_barcode(self, client, auth_headers, make_product):
        make_product("Existing", barcode="1234567890123")

        response = client.post("/api/v1/products", json=self.PAYLOAD, headers=auth_headers)
        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_ENTRY"

    def test_name_required(self, client, auth_headers):
        response = client.post("/api/v1/products", json={"brand": "X"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["details"].startswith("name:")

    def test_requires_auth(self, client):
        response = client.post("/api/v1/products", json=self.PAYLOAD)
        assert response.status_code == 401


class TestBarcodeLookup:
    def test_local_product(self, client, product_lookup, make_product):
        make_product("Local", barcode="555")

        response = client.get("/api/v1/products/555")
        assert response.status_code == 200
        assert response.json()["name"] == "Local"
        product_lookup.fetch.assert_not_called()

    def test_unknown_barcode_is_imported(self, client, db, product_lookup):
        product_lookup.fetch.return_value = ExternalProduct(
            barcode="777",
            name="Imported Serum",
            brand="Far Away",
            image_url="https://images.test/serum.jpg",
            ingredients=["Aqua", "Niacinamide"],
            tags=["en:serums"],
        )

        response = client.get("/api/v1/products/777")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Imported Serum"
        assert body["category"] == "Uncategorized"
        assert body["description"] == "Imported from OpenBeautyFacts"
        assert body["price"] == 0.0
        product_lookup.fetch.assert_called_once_with("777")

        # Second request is served from the catalog
        assert db.query(Product).filter(Product.barcode == "777").count() == 1
        client.get("/api/v1/products/777")
        product_lookup.fetch.assert_called_once()

    def test_unknown_everywhere_is_404(self, client, product_lookup):
        response = client.get("/api/v1/products/000")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestRecommendations:
    def test_excludes_allergens(self, client, make_product, user_headers):
        headers = user_headers(
            skin_profile={"skinType": "dry", "skinConditions": [], "allergens": ["Fragrance"]}
        )
        make_product("Scented", ingredients=["Water", "fragrance"], average_rating=5.0)
        make_product("Unscented", ingredients=["Water"], average_rating=4.0)

        response = client.get("/api/v1/products/for-me", headers=headers)
        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Unscented"]

    def test_top_ten_by_rating(self, client, make_product, user_headers):
        headers = user_headers()
        for i in range(12):
            make_product(f"Product {i}", average_rating=i / 3)

        response = client.get("/api/v1/products/for-me", headers=headers)
        names = [p["name"] for p in response.json()]
        assert len(names) == 10
        assert names[0] == "Product 11"

    def test_requires_auth(self, client):
        response = client.get("/api/v1/products/for-me")
        assert response.status_code == 401
