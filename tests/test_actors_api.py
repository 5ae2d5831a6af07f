NEW_ACTOR = {"full_name": "Keanu Reeves", "gender": "male", "birth_date": "1964-09-02T00:00:00Z"}


def test_list_actors(client, user_headers):
    response = client.get("/actors", headers=user_headers)

    assert response.status_code == 200
    actors = response.json()["actors"]
    assert [actor["full_name"] for actor in actors] == ["Mock Actor 1", "Mock Actor 2"]
    assert actors[0]["movies"] == [1]


def test_get_actor(client, user_headers):
    response = client.get("/actors/2", headers=user_headers)

    assert response.status_code == 200
    actor = response.json()["actor"]
    assert actor == {
        "id": 2,
        "full_name": "Mock Actor 2",
        "gender": "female",
        "birth_date": "1980-01-01T00:00:00Z",
        "movies": [1],
    }


def test_get_actor_bad_ids(client, user_headers):
    for actor_id in ("999", "0", "-1", "abc"):
        response = client.get(f"/actors/{actor_id}", headers=user_headers)

        assert response.status_code == 404, actor_id
        assert response.json() == {"error": "the requested resource could not be found"}


def test_create_actor(client, admin_headers, user_headers):
    response = client.post("/actors", json=NEW_ACTOR, headers=admin_headers)

    assert response.status_code == 201
    actor = response.json()["actor"]
    assert actor["id"] == 3
    assert actor["movies"] == []

    fetched = client.get("/actors/3", headers=user_headers).json()["actor"]
    assert fetched["full_name"] == "Keanu Reeves"
    assert fetched["movies"] == []


def test_create_actor_requires_admin(client, user_headers):
    response = client.post("/actors", json=NEW_ACTOR, headers=user_headers)
    assert response.status_code == 403


def test_create_actor_validation(client, admin_headers):
    response = client.post(
        "/actors",
        json={"full_name": "", "gender": "robot", "birth_date": "2999-01-01T00:00:00Z"},
        headers=admin_headers,
    )

    assert response.status_code == 422
    assert response.json() == {
        "error": {
            "full_name": "must be provided",
            "gender": "must be either male or female",
            "birth_date": "must be a valid date",
        }
    }


def test_create_duplicate_actor(client, admin_headers):
    response = client.post(
        "/actors",
        json={**NEW_ACTOR, "full_name": "Mock Actor 1"},
        headers=admin_headers,
    )

    assert response.status_code == 422
    assert response.json() == {"error": {"full_name": "an actor with this full name already exists"}}


def test_create_actor_bad_json(client, admin_headers):
    response = client.post(
        "/actors",
        content="{not json",
        headers={**admin_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"].startswith("body contains badly-formed JSON")


def test_create_actor_unknown_field(client, admin_headers):
    response = client.post("/actors", json={**NEW_ACTOR, "age": 60}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": 'body contains unknown key "age"'}


def test_create_actor_wrong_type(client, admin_headers):
    response = client.post("/actors", json={**NEW_ACTOR, "full_name": 42}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": 'body contains incorrect JSON type for field "full_name"'}


def test_patch_actor_keeps_omitted_fields(client, admin_headers):
    response = client.patch("/actors/1", json={"gender": "female"}, headers=admin_headers)

    assert response.status_code == 200
    actor = response.json()["actor"]
    assert actor["gender"] == "female"
    assert actor["full_name"] == "Mock Actor 1"
    assert actor["birth_date"] == "1980-01-01T00:00:00Z"
    assert actor["movies"] == [1]


def test_patch_actor_validation(client, admin_headers):
    response = client.patch("/actors/1", json={"full_name": ""}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json() == {"error": {"full_name": "must be provided"}}


def test_patch_actor_to_taken_name(client, admin_headers):
    response = client.patch("/actors/1", json={"full_name": "Mock Actor 2"}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json() == {"error": {"full_name": "an actor with this full name already exists"}}


def test_patch_missing_actor(client, admin_headers):
    response = client.patch("/actors/50", json={"gender": "male"}, headers=admin_headers)
    assert response.status_code == 404


def test_delete_actor_keeps_movie(client, admin_headers, user_headers):
    response = client.delete("/actors/1", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "actor successfully deleted"}

    assert client.get("/actors/1", headers=user_headers).status_code == 404
    movie = client.get("/movies/1", headers=user_headers).json()["movie"]
    assert movie["actors"] == [2]


def test_delete_missing_actor(client, admin_headers):
    response = client.delete("/actors/123", headers=admin_headers)
    assert response.status_code == 404


def test_get_actor_id_beyond_bigint(client, user_headers):
    response = client.get("/actors/99999999999999999999", headers=user_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "the requested resource could not be found"}


def test_delete_actor_id_beyond_bigint(client, admin_headers):
    assert client.delete("/actors/9223372036854775808", headers=admin_headers).status_code == 404
