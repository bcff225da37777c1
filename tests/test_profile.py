from zelene.extensions import db
from zelene.models import User


def test_get_profile_of_unknown_user_is_not_found(rpc_get):
    assert rpc_get("/rpc/profile/getProfile", {"userId": 999}).status_code == 404


def test_current_profile_requires_login(rpc_get):
    assert rpc_get("/rpc/profile/getCurrentProfile").status_code == 401


def test_update_profile_upserts_profile_and_social(app, client, make_user, login, rpc_get):
    uid = make_user()
    login(uid)

    resp = client.post("/rpc/profile/updateProfile", json={
        "user": {"name": "Ada L."},
        "profile": {"bio": "Grows tomatoes", "currentLearning": "MQTT"},
        "social": {"github": "https://github.com/ada", "twitter": ""},
    })

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["name"] == "Ada L."
    assert body["profile"]["bio"] == "Grows tomatoes"
    assert body["profile"]["currentLearning"] == "MQTT"
    assert body["social"]["github"] == "https://github.com/ada"
    assert body["social"]["twitter"] is None

    # Second update leaves unspecified fields alone
    client.post("/rpc/profile/updateProfile", json={"profile": {"location": "Lisbon"}})
    current = rpc_get("/rpc/profile/getCurrentProfile").get_json()
    assert current["profile"]["bio"] == "Grows tomatoes"
    assert current["profile"]["location"] == "Lisbon"
    assert current["social"]["github"] == "https://github.com/ada"

    public = rpc_get("/rpc/profile/getProfile", {"userId": uid}).get_json()
    assert public["id"] == uid


def test_update_profile_rejects_taken_username(app, client, make_user, login):
    make_user(username="taken")
    uid = make_user()
    login(uid)

    resp = client.post("/rpc/profile/updateProfile", json={"user": {"username": "taken"}})

    assert resp.status_code == 409
    with app.app_context():
        assert db.session.get(User, uid).username != "taken"


def test_update_profile_validates_urls(client, make_user, login):
    login(make_user())
    resp = client.post("/rpc/profile/updateProfile", json={"social": {"website": "not a url"}})
    assert resp.status_code == 400
