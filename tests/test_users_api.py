def test_register_user(client, auth_headers):
    response = client.post("/users", json={"name": "newcomer", "password": "s3cret-pass"})

    assert response.status_code == 201
    user = response.json()["user"]
    assert user == {"id": 3, "name": "newcomer", "role": "user"}

    # The new account can authenticate straight away
    response = client.get("/actors", headers=auth_headers("newcomer", "s3cret-pass"))
    assert response.status_code == 200


def test_register_never_grants_admin(client):
    response = client.post("/users", json={"name": "sneaky", "password": "password123", "role": "admin"})
    assert response.status_code == 400


def test_register_validation(client):
    response = client.post("/users", json={"name": "", "password": "short"})

    assert response.status_code == 422
    assert response.json() == {
        "error": {
            "name": "must be provided",
            "password": "must be at least 8 bytes long",
        }
    }


def test_register_duplicate_name(client):
    response = client.post("/users", json={"name": "admin", "password": "password123"})

    assert response.status_code == 422
    assert response.json() == {"error": {"name": "a user with this name already exists"}}


def test_register_empty_body(client):
    response = client.post("/users")

    assert response.status_code == 400
    assert response.json() == {"error": "body must not be empty"}


def test_register_over_long_password(client):
    response = client.post("/users", json={"name": "longpw", "password": "x" * 5000})

    assert response.status_code == 422
    assert response.json() == {"error": {"password": "must not be more than 72 bytes long"}}
