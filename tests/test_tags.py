from zelene.extensions import db
from zelene.models import Post, Tag


def _tag(app, name, official=False):
    with app.app_context():
        tag = Tag(name=name, is_official=official)
        db.session.add(tag)
        db.session.commit()
        return tag.id


def test_member_creates_plain_tag_normalized(client, make_user, login):
    login(make_user())

    resp = client.post("/rpc/tag/create", json={"name": "#LoRaWAN"})

    assert resp.status_code == 201
    assert resp.get_json()["name"] == "lorawan"
    assert resp.get_json()["isOfficial"] is False


def test_member_cannot_create_official_tag(app, client, make_user, login):
    login(make_user())

    assert client.post("/rpc/tag/create", json={"name": "news", "isOfficial": True}).status_code == 403
    # The name alone is enough to make a tag official
    assert client.post("/rpc/tag/create", json={"name": "official-news"}).status_code == 403
    with app.app_context():
        assert db.session.query(Tag).count() == 0


def test_admin_creates_official_tag(client, make_user, login):
    login(make_user(role="ADMIN"))
    resp = client.post("/rpc/tag/create", json={"name": "announcements", "isOfficial": True})
    assert resp.get_json()["isOfficial"] is True


def test_duplicate_name_conflicts(client, make_user, login):
    login(make_user())
    client.post("/rpc/tag/create", json={"name": "sensors"})

    resp = client.post("/rpc/tag/create", json={"name": "#SENSORS"})

    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "CONFLICT"


def test_invalid_name_rejected(client, make_user, login):
    login(make_user())
    assert client.post("/rpc/tag/create", json={"name": "bad_name!"}).status_code == 400
    assert client.post("/rpc/tag/create", json={"name": "x" * 51}).status_code == 400


def test_get_all_hides_official_tags_from_non_admins(app, client, make_user, login, rpc_get):
    _tag(app, "official", official=True)
    _tag(app, "alpha")
    _tag(app, "beta")

    names = [t["name"] for t in rpc_get("/rpc/tag/getAll").get_json()["items"]]
    assert names == ["alpha", "beta"]

    login(make_user(role="ADMIN"))
    items = rpc_get("/rpc/tag/getAll").get_json()["items"]
    assert [t["name"] for t in items] == ["official", "alpha", "beta"]
    assert items[0]["postCount"] == 0


def test_get_all_cursor_and_query_filter(app, rpc_get):
    for name in ("apple", "apricot", "banana"):
        _tag(app, name)

    page1 = rpc_get("/rpc/tag/getAll", {"limit": 1}).get_json()
    assert [t["name"] for t in page1["items"]] == ["apple"]
    page2 = rpc_get("/rpc/tag/getAll", {"limit": 1, "cursor": page1["nextCursor"]}).get_json()
    assert [t["name"] for t in page2["items"]] == ["apricot"]

    found = rpc_get("/rpc/tag/getAll", {"query": "#AP"}).get_json()
    assert [t["name"] for t in found["items"]] == ["apple", "apricot"]
    assert found["nextCursor"] is None


def test_search_is_limited_to_five(app, rpc_get):
    for n in range(7):
        _tag(app, f"node-{n}")

    results = rpc_get("/rpc/tag/search", {"query": "#node"}).get_json()

    assert [t["name"] for t in results] == [f"node-{n}" for n in range(5)]


def test_get_by_id(app, rpc_get):
    tag_id = _tag(app, "mesh")
    assert rpc_get("/rpc/tag/getById", {"id": tag_id}).get_json()["name"] == "mesh"
    assert rpc_get("/rpc/tag/getById", {"id": tag_id + 100}).status_code == 404


def test_update_is_admin_only_and_rederives_posts(app, client, make_user, login):
    login(make_user(role="ADMIN"))
    post = client.post("/rpc/post/create", json={
        "title": "t", "excerpt": "e", "content": "c", "tags": ["updates"],
    }).get_json()
    tag_id = post["tags"][0]["id"]
    assert post["isOfficial"] is False

    resp = client.post("/rpc/tag/update", json={"id": tag_id, "name": "updates", "isOfficial": True})
    assert resp.status_code == 200
    with app.app_context():
        assert db.session.get(Post, post["id"]).is_official is True

    login(make_user())
    assert client.post("/rpc/tag/update", json={"id": tag_id, "name": "renamed"}).status_code == 403


def test_update_name_clash_conflicts(app, client, make_user, login):
    login(make_user(role="ADMIN"))
    _tag(app, "taken")
    other = _tag(app, "free")

    assert client.post("/rpc/tag/update", json={"id": other, "name": "taken"}).status_code == 409


def test_delete_tag_in_use_is_forbidden(app, client, make_user, login):
    login(make_user(role="ADMIN"))
    post = client.post("/rpc/post/create", json={
        "title": "t", "excerpt": "e", "content": "c", "tags": ["busy"],
    }).get_json()
    idle = _tag(app, "idle")

    assert client.post("/rpc/tag/delete", json={"id": post["tags"][0]["id"]}).status_code == 403
    resp = client.post("/rpc/tag/delete", json={"id": idle})
    assert resp.status_code == 200
    assert resp.get_json()["name"] == "idle"
    with app.app_context():
        assert db.session.get(Tag, idle) is None


def test_search_rejects_bare_hash(app, rpc_get):
    _tag(app, "alpha")

    assert rpc_get("/rpc/tag/search", {"query": "#"}).status_code == 400
    assert rpc_get("/rpc/tag/search", {"query": "  "}).status_code == 400
