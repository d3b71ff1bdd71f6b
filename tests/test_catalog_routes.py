import pytest

from marketplace.models.category import Category


@pytest.fixture
def catalog(session, seller, make_product):
    dresses = Category(name="Dresses", slug="dresses")
    shoes = Category(name="Shoes", slug="shoes")
    session.add(dresses)
    session.add(shoes)
    session.commit()

    make_product(seller, "Wrap Dress", "89.00", category=dresses, is_featured=True)
    make_product(seller, "Slip Dress", "59.00", category=dresses)
    make_product(seller, "Loafers", "120.00", category=shoes)
    make_product(seller, "Retired Dress", "10.00", category=dresses, is_active=False)
    return {"dresses": dresses, "shoes": shoes}


def names(response) -> list:
    return [p["name"] for p in response.json()["results"]]


def test_categories_are_alphabetical(client, catalog) -> None:
    assert [c["slug"] for c in client.get("/categories").json()] == ["dresses", "shoes"]


def test_listing_hides_inactive_products(client, catalog) -> None:
    body = client.get("/products").json()

    assert body["total_items"] == 3
    assert "Retired Dress" not in names(client.get("/products"))


def test_filter_by_category(client, catalog) -> None:
    assert sorted(names(client.get("/products", params={"category": "dresses"}))) == [
        "Slip Dress", "Wrap Dress",
    ]
    assert len(names(client.get("/products", params={"category": "all"}))) == 3


def test_unknown_category_is_not_found(client, catalog) -> None:
    assert client.get("/products", params={"category": "hats"}).status_code == 404


def test_search_is_case_insensitive(client, catalog) -> None:
    assert names(client.get("/products", params={"search": "LOAF"})) == ["Loafers"]


@pytest.mark.parametrize(
    "sort,expected",
    [
        ("price_low", ["Slip Dress", "Wrap Dress", "Loafers"]),
        ("price_high", ["Loafers", "Wrap Dress", "Slip Dress"]),
        ("name", ["Loafers", "Slip Dress", "Wrap Dress"]),
    ],
)
def test_sorting(client, catalog, sort, expected) -> None:
    assert names(client.get("/products", params={"sort": sort})) == expected


def test_featured_only(client, catalog) -> None:
    assert names(client.get("/products", params={"featured": True})) == ["Wrap Dress"]


def test_pagination(client, catalog) -> None:
    body = client.get("/products", params={"sort": "name", "page": 2, "limit": 2}).json()

    assert body["total_pages"] == 2
    assert body["current_page"] == 2
    assert [p["name"] for p in body["results"]] == ["Wrap Dress"]


def test_product_detail_with_reviews(client, customer, seller, make_product, auth_headers) -> None:
    product = make_product(seller, "Cashmere Sweater", "140.00")
    headers = auth_headers(customer)

    client.post(f"/products/{product.id}/reviews", json={"rating": 5, "comment": "Soft"}, headers=headers)
    client.post(f"/products/{product.id}/reviews", json={"rating": 4}, headers=headers)

    body = client.get(f"/products/{product.id}").json()

    assert body["product"]["name"] == "Cashmere Sweater"
    assert body["review_count"] == 2
    assert body["avg_rating"] == 4.5
    assert body["reviews"][0]["customer_name"] == "Customer 1"


def test_product_detail_without_reviews(client, seller, make_product) -> None:
    product = make_product(seller, "Plain Tee", "12.00")

    body = client.get(f"/products/{product.id}").json()

    assert body["review_count"] == 0
    assert body["avg_rating"] is None


def test_inactive_product_detail_is_hidden(client, seller, make_product) -> None:
    product = make_product(seller, "Gone", "1.00", is_active=False)
    assert client.get(f"/products/{product.id}").status_code == 404


def test_review_rating_is_bounded(client, customer, seller, make_product, auth_headers) -> None:
    product = make_product(seller, "Belt", "25.00")

    response = client.post(
        f"/products/{product.id}/reviews", json={"rating": 6}, headers=auth_headers(customer)
    )

    assert response.status_code == 422


def test_sellers_cannot_review(client, seller, make_product, auth_headers) -> None:
    product = make_product(seller, "Belt", "25.00")

    response = client.post(
        f"/products/{product.id}/reviews", json={"rating": 5}, headers=auth_headers(seller)
    )

    assert response.status_code == 403
