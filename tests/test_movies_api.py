import pytest


def movie_payload(**overrides):
    payload = {
        "title": "Mock Movie 2",
        "description": "Another mock movie",
        "release_date": "2021-05-01T00:00:00Z",
        "rating": 8.5,
        "actors": [1],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def more_movies(client, admin_headers):
    for title, rating, actors in (("Alpha", 9.0, [2]), ("Zulu", 3.0, [1])):
        response = client.post(
            "/movies",
            json=movie_payload(title=title, rating=rating, actors=actors),
            headers=admin_headers,
        )
        assert response.status_code == 201
    return client


def test_get_movie(client, user_headers):
    response = client.get("/movies/1", headers=user_headers)

    assert response.status_code == 200
    assert response.json() == {
        "movie": {
            "id": 1,
            "title": "Mock Movie 1",
            "description": "Mock movie description",
            "release_date": "2020-01-01T00:00:00Z",
            "rating": 7.0,
            "actors": [1, 2],
        }
    }


def test_get_missing_movie(client, user_headers):
    assert client.get("/movies/9", headers=user_headers).status_code == 404
    assert client.get("/movies/x", headers=user_headers).status_code == 404


def test_create_movie(client, admin_headers, user_headers):
    response = client.post("/movies", json=movie_payload(actors=[2, 1]), headers=admin_headers)

    assert response.status_code == 201
    movie = response.json()["movie"]
    assert movie["id"] == 2
    assert movie["actors"] == [1, 2]

    actor = client.get("/actors/1", headers=user_headers).json()["actor"]
    assert actor["movies"] == [1, 2]


def test_create_movie_requires_admin(client, user_headers):
    assert client.post("/movies", json=movie_payload(), headers=user_headers).status_code == 403


def test_create_movie_validation(client, admin_headers):
    response = client.post(
        "/movies",
        json=movie_payload(title="", rating=11, actors=[]),
        headers=admin_headers,
    )

    assert response.status_code == 422
    assert response.json() == {
        "error": {
            "title": "must be provided",
            "rating": "must be between 0 and 10",
            "actors": "must contain at least one actor",
        }
    }


def test_create_movie_with_unknown_actor(client, admin_headers, user_headers):
    response = client.post("/movies", json=movie_payload(actors=[1, 99]), headers=admin_headers)

    assert response.status_code == 422
    assert response.json() == {"error": {"actors": "one or more actor IDs do not exist"}}

    movies = client.get("/movies", headers=user_headers).json()["movies"]
    assert [movie["title"] for movie in movies] == ["Mock Movie 1"]


def test_create_duplicate_movie(client, admin_headers):
    response = client.post("/movies", json=movie_payload(title="Mock Movie 1"), headers=admin_headers)

    assert response.status_code == 422
    assert response.json() == {"error": {"title": "a movie with this title already exists"}}


def test_default_listing_is_by_rating_descending(more_movies, user_headers):
    movies = more_movies.get("/movies", headers=user_headers).json()["movies"]
    assert [movie["title"] for movie in movies] == ["Alpha", "Mock Movie 1", "Zulu"]


def test_listing_sorted_by_title(more_movies, user_headers):
    movies = more_movies.get("/movies?sort=title", headers=user_headers).json()["movies"]
    assert [movie["title"] for movie in movies] == ["Alpha", "Mock Movie 1", "Zulu"]

    movies = more_movies.get("/movies?sort=-title", headers=user_headers).json()["movies"]
    assert [movie["title"] for movie in movies] == ["Zulu", "Mock Movie 1", "Alpha"]


def test_listing_with_unsafe_sort(client, user_headers):
    response = client.get("/movies?sort=password_hash", headers=user_headers)

    assert response.status_code == 422
    assert response.json() == {"error": {"sort": "invalid sort value"}}


def test_patch_movie_keeps_omitted_fields(client, admin_headers):
    response = client.patch("/movies/1", json={"rating": 9.1}, headers=admin_headers)

    assert response.status_code == 200
    movie = response.json()["movie"]
    assert movie["rating"] == 9.1
    assert movie["title"] == "Mock Movie 1"
    assert movie["actors"] == [1, 2]


def test_patch_movie_replaces_cast(client, admin_headers, user_headers):
    response = client.patch("/movies/1", json={"actors": [2]}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["movie"]["actors"] == [2]
    assert client.get("/actors/1", headers=user_headers).json()["actor"]["movies"] == []


def test_patch_movie_with_unknown_actor(client, admin_headers):
    response = client.patch("/movies/1", json={"actors": [5]}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json() == {"error": {"actors": "one or more actor IDs do not exist"}}


def test_patch_missing_movie(client, admin_headers):
    assert client.patch("/movies/8", json={"rating": 1}, headers=admin_headers).status_code == 404


def test_delete_movie(client, admin_headers, user_headers):
    response = client.delete("/movies/1", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "movie successfully deleted"}
    assert client.get("/movies/1", headers=user_headers).status_code == 404
    assert client.get("/actors/1", headers=user_headers).json()["actor"]["movies"] == []
    assert client.delete("/movies/1", headers=admin_headers).status_code == 404


def test_search_by_title(more_movies, user_headers):
    response = more_movies.get("/search?title=mock", headers=user_headers)

    assert response.status_code == 200
    assert [movie["title"] for movie in response.json()["movies"]] == ["Mock Movie 1"]


def test_search_by_actor(more_movies, user_headers):
    response = more_movies.get("/search", params={"actor": "actor 2"}, headers=user_headers)

    titles = sorted(movie["title"] for movie in response.json()["movies"])
    assert titles == ["Alpha", "Mock Movie 1"]


def test_search_without_match(client, user_headers):
    response = client.get("/search?title=nothing", headers=user_headers)

    assert response.status_code == 200
    assert response.json() == {"movies": []}


def test_search_requires_authentication(client):
    assert client.get("/search?title=mock").status_code == 401


def test_create_movie_with_cast_id_beyond_bigint(client, admin_headers):
    response = client.post("/movies", json=movie_payload(actors=[99999999999999999999]), headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": 'body contains incorrect JSON type for field "actors"'}


def test_patch_movie_with_cast_id_beyond_bigint(client, admin_headers):
    response = client.patch("/movies/1", json={"actors": [99999999999999999999]}, headers=admin_headers)
    assert response.status_code == 400


def test_get_movie_id_beyond_bigint(client, user_headers):
    assert client.get("/movies/99999999999999999999", headers=user_headers).status_code == 404
