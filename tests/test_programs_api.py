"""Program and exercise endpoints."""

from tests.conftest import API, sign_up


async def create_program(client, title="Leg day", exercises=()):
    r = await client.post(f"{API}/programs", json={"title": title, "description": "Squats *and* lunges"})
    assert r.status_code == 201, r.text
    program = r.json()
    for name, repeat_count in exercises:
        r = await client.post(
            f"{API}/programs/{program['id']}/exercises",
            json={"name": name, "repeat_count": repeat_count},
        )
        assert r.status_code == 201, r.text
    return program


async def test_create_and_show_program(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("Squat", 3), ("Lunge", 2)])

    r = await client.get(f"{API}/programs/{program['id']}")
    assert r.status_code == 200
    body = r.json()
    assert body["is_owner"] is True
    assert [(e["name"], e["position"], e["repeat_count"]) for e in body["exercises"]] == [
        ("Squat", 1, 3),
        ("Lunge", 2, 2),
    ]


async def test_programs_are_publicly_viewable(make_client):
    owner = make_client()
    await sign_up(owner)
    program = await create_program(owner, exercises=[("Squat", 1)])

    visitor = make_client()
    r = await visitor.get(f"{API}/programs/{program['id']}")
    assert r.status_code == 200
    assert r.json()["is_owner"] is False


async def test_only_the_owner_can_change_a_program(make_client):
    owner = make_client()
    await sign_up(owner, "owner@example.com")
    program = await create_program(owner, exercises=[("Squat", 1)])
    exercise_id = (await owner.get(f"{API}/programs/{program['id']}")).json()["exercises"][0]["id"]

    other = make_client()
    await sign_up(other, "other@example.com")
    assert (await other.patch(f"{API}/programs/{program['id']}", json={"title": "Mine"})).status_code == 404
    assert (await other.delete(f"{API}/programs/{program['id']}")).status_code == 404
    assert (
        await other.post(f"{API}/programs/{program['id']}/exercises", json={"name": "X", "repeat_count": 1})
    ).status_code == 404
    assert (await other.patch(f"{API}/exercises/{exercise_id}", json={"name": "Y"})).status_code == 404
    assert (await other.patch(f"{API}/exercises/{exercise_id}/move", json={"position": 1})).status_code == 404


async def test_list_programs_only_shows_own(make_client):
    a = make_client()
    await sign_up(a, "a@example.com")
    await create_program(a, "A1")

    b = make_client()
    await sign_up(b, "b@example.com")
    await create_program(b, "B1")

    r = await a.get(f"{API}/programs")
    assert [p["title"] for p in r.json()] == ["A1"]


async def test_update_program(client):
    await sign_up(client)
    program = await create_program(client)
    r = await client.patch(f"{API}/programs/{program['id']}", json={"title": "Leg day v2"})
    assert r.status_code == 200
    assert r.json()["title"] == "Leg day v2"
    assert r.json()["description"] == "Squats *and* lunges"


async def test_program_title_is_required_and_bounded(client):
    await sign_up(client)
    assert (await client.post(f"{API}/programs", json={"title": ""})).status_code == 422
    assert (await client.post(f"{API}/programs", json={"title": "x" * 201})).status_code == 422


async def test_exercise_validation(client):
    await sign_up(client)
    program = await create_program(client)
    url = f"{API}/programs/{program['id']}/exercises"

    assert (await client.post(url, json={"name": "Squat", "repeat_count": 0})).status_code == 422
    assert (await client.post(url, json={"name": "", "repeat_count": 1})).status_code == 422
    r = await client.post(url, json={"name": "Squat", "repeat_count": 1, "video_url": "not a url"})
    assert r.status_code == 422

    r = await client.post(url, json={"name": "Squat", "repeat_count": 1, "video_url": "https://youtu.be/abc"})
    assert r.status_code == 201
    assert r.json()["video_url"] == "https://youtu.be/abc"

    r = await client.post(url, json={"name": "Lunge", "repeat_count": 1, "video_url": "  "})
    assert r.json()["video_url"] is None


async def test_update_exercise(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("Squat", 3)])
    exercise = (await client.get(f"{API}/programs/{program['id']}")).json()["exercises"][0]

    r = await client.patch(f"{API}/exercises/{exercise['id']}", json={"repeat_count": 5, "description": "Deep"})
    assert r.status_code == 200
    assert (r.json()["name"], r.json()["repeat_count"], r.json()["description"]) == ("Squat", 5, "Deep")


async def test_move_exercise(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("A", 1), ("B", 1), ("C", 1)])
    c = (await client.get(f"{API}/programs/{program['id']}")).json()["exercises"][2]

    r = await client.patch(f"{API}/exercises/{c['id']}/move", json={"position": 1})
    assert r.status_code == 200
    assert [(e["name"], e["position"]) for e in r.json()] == [("C", 1), ("A", 2), ("B", 3)]

    r = await client.patch(f"{API}/exercises/{c['id']}/move", json={"position": 0})
    assert r.status_code == 400

    r = await client.get(f"{API}/programs/{program['id']}")
    assert [e["name"] for e in r.json()["exercises"]] == ["C", "A", "B"]


async def test_delete_exercise_leaves_a_gap(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("A", 1), ("B", 1), ("C", 1)])
    b = (await client.get(f"{API}/programs/{program['id']}")).json()["exercises"][1]

    assert (await client.delete(f"{API}/exercises/{b['id']}")).status_code == 204
    r = await client.post(f"{API}/programs/{program['id']}/exercises", json={"name": "D", "repeat_count": 1})
    assert r.json()["position"] == 4

    r = await client.get(f"{API}/programs/{program['id']}")
    assert [(e["name"], e["position"]) for e in r.json()["exercises"]] == [("A", 1), ("C", 3), ("D", 4)]


async def test_duplicate_program(make_client):
    owner = make_client()
    await sign_up(owner, "owner@example.com")
    program = await create_program(owner, exercises=[("Squat", 3), ("Lunge", 2)])

    fan = make_client()
    await sign_up(fan, "fan@example.com")
    r = await fan.post(f"{API}/programs/{program['id']}/duplicate")
    assert r.status_code == 201
    copy = r.json()
    assert copy["id"] != program["id"]
    assert copy["is_owner"] is True
    assert copy["title"] == "Leg day"
    assert [(e["name"], e["position"], e["repeat_count"]) for e in copy["exercises"]] == [
        ("Squat", 1, 3),
        ("Lunge", 2, 2),
    ]


async def test_delete_program_removes_its_exercises(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("A", 1)])
    exercise = (await client.get(f"{API}/programs/{program['id']}")).json()["exercises"][0]

    assert (await client.delete(f"{API}/programs/{program['id']}")).status_code == 204
    assert (await client.get(f"{API}/programs/{program['id']}")).status_code == 404
    assert (await client.patch(f"{API}/exercises/{exercise['id']}", json={"name": "Z"})).status_code == 404


async def test_update_program_rejects_null_title(client):
    await sign_up(client)
    program = await create_program(client)

    r = await client.patch(f"{API}/programs/{program['id']}", json={"title": None})
    assert r.status_code == 422

    r = await client.patch(f"{API}/programs/{program['id']}", json={"description": None})
    assert r.status_code == 200
    assert (r.json()["title"], r.json()["description"]) == ("Leg day", None)


async def test_video_url_must_be_http(client):
    await sign_up(client)
    program = await create_program(client)
    url = f"{API}/programs/{program['id']}/exercises"

    for bad in ("ftp://files.example.com/squat.mp4", "https://", "youtube.com/watch?v=abc"):
        r = await client.post(url, json={"name": "Squat", "repeat_count": 1, "video_url": bad})
        assert r.status_code == 422, bad

    r = await client.post(
        url, json={"name": "Squat", "repeat_count": 1, "video_url": " https://www.youtube.com/watch?v=abc "}
    )
    assert r.json()["video_url"] == "https://www.youtube.com/watch?v=abc"
