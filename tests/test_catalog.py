import math

import pytest


@pytest.fixture
def category(client, admin):
    response = client.post(
        "/api/categories", json={"name": "Programming", "description": "Code books"}, headers=admin["headers"]
    )
    assert response.status_code == 201
    return response.json()["category"]


def test_category_crud(client, admin, category):
    assert client.get("/api/categories").json()["categories"][0]["name"] == "Programming"
    assert client.get(f"/api/categories/{category['id']}").status_code == 200

    response = client.put(
        f"/api/categories/{category['id']}", json={"description": "Software"}, headers=admin["headers"]
    )
    assert response.json()["category"]["description"] == "Software"

    assert client.delete(f"/api/categories/{category['id']}", headers=admin["headers"]).status_code == 200
    assert client.get(f"/api/categories/{category['id']}").status_code == 404


def test_only_admin_manages_categories(client, seller):
    response = client.post("/api/categories", json={"name": "Poetry"}, headers=seller["headers"])
    assert response.status_code == 403


def test_paginated_categories_sorted_by_name(client, admin):
    for name in ("Zoology", "Art", "Music"):
        client.post("/api/categories", json={"name": name}, headers=admin["headers"])
    response = client.get("/api/categories/paginated", params={"limit": 2})
    body = response.json()
    assert [c["name"] for c in body["data"]] == ["Art", "Music"]
    assert body["pagination"]["totalPages"] == 2


def test_seller_creates_ebook(client, seller, category):
    response = client.post(
        "/api/ebooks",
        json={"name": "Fluent Python", "price": 39.9, "category_id": category["id"]},
        headers=seller["headers"],
    )
    assert response.status_code == 201
    ebook = response.json()["ebook"]
    assert ebook["creator_id"] == seller["id"]
    assert ebook["category_name"] == "Programming"
    assert ebook["price"] == 39.9


def test_customer_cannot_create_ebook(client, customer):
    response = client.post("/api/ebooks", json={"name": "Nope", "price": 1}, headers=customer["headers"])
    assert response.status_code == 403


def test_negative_price_rejected(client, seller):
    response = client.post("/api/ebooks", json={"name": "Bad", "price": -1}, headers=seller["headers"])
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "price"


def test_unknown_category_rejected(client, seller):
    response = client.post("/api/ebooks", json={"name": "Lost", "price": 1, "category_id": 999}, headers=seller["headers"])
    assert response.status_code == 404


def test_seller_lists_only_own_ebooks(client, make_user, make_ebook, seller, customer):
    other = make_user(2)
    make_ebook(seller, name="Mine")
    make_ebook(other, name="Theirs")

    own = client.get("/api/ebooks", headers=seller["headers"]).json()["data"]
    assert [e["name"] for e in own] == ["Mine"]

    everything = client.get("/api/ebooks", headers=customer["headers"]).json()["data"]
    assert {e["name"] for e in everything} == {"Mine", "Theirs"}


def test_seller_cannot_touch_other_sellers_ebook(client, make_user, make_ebook, seller):
    other = make_user(2)
    ebook = make_ebook(other)

    delete = client.delete(f"/api/ebooks/{ebook['id']}", headers=seller["headers"])
    assert delete.status_code == 403

    update = client.put(f"/api/ebooks/{ebook['id']}", json={"price": 1}, headers=seller["headers"])
    assert update.status_code == 403

    assert client.get(f"/api/ebooks/{ebook['id']}").status_code == 200


def test_owner_and_admin_manage_ebook(client, make_ebook, seller, admin):
    ebook = make_ebook(seller)
    response = client.put(f"/api/ebooks/{ebook['id']}", json={"price": 12.5}, headers=seller["headers"])
    assert response.json()["ebook"]["price"] == 12.5

    assert client.delete(f"/api/ebooks/{ebook['id']}", headers=admin["headers"]).status_code == 200
    assert client.get(f"/api/ebooks/{ebook['id']}").status_code == 404


def test_delete_missing_ebook(client, seller):
    assert client.delete("/api/ebooks/999", headers=seller["headers"]).status_code == 404


@pytest.mark.parametrize("total,limit", [(7, 3), (6, 3), (1, 10), (10, 4)])
def test_pagination_last_page_and_beyond(client, make_ebook, seller, total, limit):
    for i in range(total):
        make_ebook(seller, name=f"Book {i}")

    last = math.ceil(total / limit)
    body = client.get("/api/ebooks/paginated", params={"page": last, "limit": limit}).json()
    remainder = total - (last - 1) * limit
    assert 1 <= len(body["data"]) <= limit
    assert len(body["data"]) == remainder
    assert body["pagination"]["total"] == total
    assert body["pagination"]["totalPages"] == last
    assert body["pagination"]["hasNextPage"] is False

    beyond = client.get("/api/ebooks/paginated", params={"page": last + 1, "limit": limit}).json()
    assert beyond["data"] == []
    assert beyond["pagination"]["hasNextPage"] is False
    assert beyond["pagination"]["nextPage"] is None


def test_pagination_orders_newest_first(client, make_ebook, seller):
    first = make_ebook(seller, name="First")
    second = make_ebook(seller, name="Second")
    body = client.get("/api/ebooks/paginated").json()
    assert [e["id"] for e in body["data"]] == [second["id"], first["id"]]
    assert body["pagination"]["hasPrevPage"] is False


def test_search_is_case_insensitive(client, make_ebook, seller):
    make_ebook(seller, name="My Ebook Guide")
    make_ebook(seller, name="Other", description="an EBOOK about ebooks")
    make_ebook(seller, name="Unrelated", description="paper")

    upper = client.get("/api/ebooks/paginated", params={"search": "EBOOK"}).json()
    lower = client.get("/api/ebooks/paginated", params={"search": "ebook"}).json()
    assert upper["data"] == lower["data"]
    assert {e["name"] for e in lower["data"]} == {"My Ebook Guide", "Other"}

    plain = client.get("/api/ebooks/search", params={"q": "eBoOk"}).json()
    assert {e["name"] for e in plain["data"]} == {"My Ebook Guide", "Other"}


def test_search_matches_category_name_and_filters_by_category(client, admin, make_ebook, seller, category):
    other = client.post("/api/categories", json={"name": "Cooking"}, headers=admin["headers"]).json()["category"]
    make_ebook(seller, name="Algorithms", category_id=category["id"])
    make_ebook(seller, name="Pasta", category_id=other["id"])
    make_ebook(seller, name="Programming Pasta", category_id=other["id"])

    by_category_name = client.get("/api/ebooks/paginated", params={"search": "programming"}).json()
    assert {e["name"] for e in by_category_name["data"]} == {"Algorithms", "Programming Pasta"}

    narrowed = client.get(
        "/api/ebooks/paginated", params={"search": "programming", "category": other["id"]}
    ).json()
    assert [e["name"] for e in narrowed["data"]] == ["Programming Pasta"]
    assert narrowed["data"][0]["category_name"] == "Cooking"
