def defaults(client, user):
    addresses = client.get("/api/addresses", headers=user["headers"]).json()["addresses"]
    return [a["id"] for a in addresses if a["is_default"]]


def test_create_and_list(client, customer, make_address):
    address = make_address(customer, street="742 Evergreen Terrace")
    listed = client.get("/api/addresses", headers=customer["headers"]).json()["addresses"]
    assert [a["street"] for a in listed] == ["742 Evergreen Terrace"]
    assert address["user_id"] == customer["id"]


def test_only_one_default_address(client, customer, make_address):
    first = make_address(customer, is_default=True)
    second = make_address(customer, is_default=True, street="2 Side St")
    assert defaults(client, customer) == [second["id"]]

    client.put(f"/api/addresses/{first['id']}", json={"is_default": True}, headers=customer["headers"])
    assert defaults(client, customer) == [first["id"]]

    listed = client.get("/api/addresses", headers=customer["headers"]).json()["addresses"]
    assert listed[0]["id"] == first["id"]


def test_default_is_per_user(client, customer, make_user, make_address):
    other = make_user()
    mine = make_address(customer, is_default=True)
    make_address(other, is_default=True)
    assert defaults(client, customer) == [mine["id"]]


def test_missing_fields_rejected(client, customer):
    response = client.post("/api/addresses", json={"street": "Nowhere"}, headers=customer["headers"])
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"city", "country"} <= fields


def test_update_requires_fields(client, customer, make_address):
    address = make_address(customer)
    response = client.put(f"/api/addresses/{address['id']}", json={}, headers=customer["headers"])
    assert response.status_code == 400


def test_other_users_address_is_not_found(client, customer, make_user, make_address):
    address = make_address(make_user())
    assert client.put(
        f"/api/addresses/{address['id']}", json={"city": "X"}, headers=customer["headers"]
    ).status_code == 404
    assert client.delete(f"/api/addresses/{address['id']}", headers=customer["headers"]).status_code == 404


def test_delete_address(client, customer, make_address):
    address = make_address(customer)
    assert client.delete(f"/api/addresses/{address['id']}", headers=customer["headers"]).status_code == 200
    assert client.get("/api/addresses", headers=customer["headers"]).json()["addresses"] == []
