import httpx

REPOS = [
    {"id": 2, "name": "newest", "html_url": "https://github.com/octocat/newest"},
    {"id": 1, "name": "older", "html_url": "https://github.com/octocat/older"},
]


def test_github_repos_relays_upstream_json(test_app_client, stub_github):
    client, _ = test_app_client
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=REPOS)

    stub_github(handler)

    resp = client.get("/api/profile/github/octocat")
    assert resp.status_code == 200
    assert resp.json() == REPOS

    [request] = seen
    assert request.url.path == "/users/octocat/repos"
    assert request.url.params["per_page"] == "5"
    assert request.url.params["sort"] == "created"
    assert request.url.params["direction"] == "desc"
    assert request.headers["Authorization"] == "token test-pat-token"
    assert "user-agent" in request.headers


def test_github_repos_does_not_need_auth(test_app_client, stub_github):
    client, _ = test_app_client
    stub_github(lambda request: httpx.Response(200, json=[]))

    resp = client.get("/api/profile/github/someone")
    assert resp.status_code == 200
    assert resp.json() == []


def test_github_repos_upstream_not_found(test_app_client, stub_github):
    client, _ = test_app_client
    stub_github(lambda request: httpx.Response(404, json={"message": "Not Found"}))

    resp = client.get("/api/profile/github/ghost-user")
    assert resp.status_code == 404
    assert resp.json() == {"msg": "No Github profile found"}


def test_github_repos_any_non_200_is_not_found(test_app_client, stub_github):
    client, _ = test_app_client
    stub_github(lambda request: httpx.Response(403, json={"message": "rate limited"}))

    resp = client.get("/api/profile/github/octocat")
    assert resp.status_code == 404
    assert resp.json() == {"msg": "No Github profile found"}


def test_github_repos_transport_error(test_app_client, stub_github):
    client, _ = test_app_client

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    stub_github(handler)

    resp = client.get("/api/profile/github/octocat")
    assert resp.status_code == 500
    assert resp.json() == {"msg": "Server error"}


def test_github_repos_invalid_json(test_app_client, stub_github):
    client, _ = test_app_client
    stub_github(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

    resp = client.get("/api/profile/github/octocat")
    assert resp.status_code == 500
    assert resp.json() == {"msg": "Server error"}
