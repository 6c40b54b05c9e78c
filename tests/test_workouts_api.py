"""Workout endpoints: start, follow along, complete / skip, dashboard."""

from tests.conftest import API, sign_up
from tests.test_programs_api import create_program


async def start(client, program_id):
    r = await client.post(f"{API}/workouts", json={"program_id": program_id})
    assert r.status_code == 201, r.text
    return r.json()


async def test_start_workout_snapshots_the_program(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("Squat", 3), ("Lunge", 2)])

    workout = await start(client, program["id"])
    assert workout["status"] == "not_started"
    assert workout["program_id"] == program["id"]
    assert workout["program_title"] == "Leg day"
    assert [(e["name"], e["position"], e["repeat_instance"], e["repeat_total"]) for e in workout["exercises"]] == [
        ("Squat", 1, 1, 3),
        ("Squat", 2, 2, 3),
        ("Squat", 3, 3, 3),
        ("Lunge", 4, 1, 2),
        ("Lunge", 5, 2, 2),
    ]
    assert workout["current_exercise"]["id"] == workout["exercises"][0]["id"]
    assert workout["next_exercise"]["id"] == workout["exercises"][1]["id"]
    assert workout["stats"] == {"completed_count": 0, "skipped_count": 0, "total_count": 5}


async def test_editing_the_program_does_not_touch_existing_workouts(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("Squat", 2)])
    workout = await start(client, program["id"])

    await client.post(f"{API}/programs/{program['id']}/exercises", json={"name": "Lunge", "repeat_count": 1})
    await client.patch(f"{API}/programs/{program['id']}", json={"title": "Renamed"})

    r = await client.get(f"{API}/workouts/{workout['id']}")
    assert r.json()["program_title"] == "Leg day"
    assert [e["name"] for e in r.json()["exercises"]] == ["Squat", "Squat"]


async def test_complete_and_skip_through_a_workout(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("Squat", 2), ("Plank", 1)])
    workout = await start(client, program["id"])
    ids = [e["id"] for e in workout["exercises"]]
    base = f"{API}/workouts/{workout['id']}/instances"

    r = await client.post(f"{base}/{ids[0]}/complete")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "in_progress"
    assert body["started_at"] is not None
    assert body["completed_at"] is None
    assert body["current_exercise"]["id"] == ids[1]
    assert body["next_exercise"]["id"] == ids[2]

    body = (await client.post(f"{base}/{ids[1]}/skip")).json()
    assert body["current_exercise"]["id"] == ids[2]
    assert body["next_exercise"] is None

    body = (await client.post(f"{base}/{ids[2]}/complete")).json()
    assert body["status"] == "complete"
    assert body["completed_at"] is not None
    assert body["current_exercise"] is None
    assert body["stats"] == {"completed_count": 2, "skipped_count": 1, "total_count": 3}

    body = (await client.post(f"{base}/{ids[1]}/complete")).json()
    assert body["exercises"][1]["completed"] is True
    assert body["exercises"][1]["skipped"] is False
    assert body["stats"]["completed_count"] == 3


async def test_unknown_instance_is_404(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("Squat", 1)])
    workout = await start(client, program["id"])

    r = await client.post(f"{API}/workouts/{workout['id']}/instances/nope/complete")
    assert r.status_code == 404
    r = await client.get(f"{API}/workouts/{workout['id']}")
    assert r.json()["status"] == "not_started"


async def test_workouts_are_private(make_client):
    owner = make_client()
    await sign_up(owner, "owner@example.com")
    program = await create_program(owner, exercises=[("Squat", 1)])
    workout = await start(owner, program["id"])

    other = make_client()
    await sign_up(other, "other@example.com")
    assert (await other.get(f"{API}/workouts/{workout['id']}")).status_code == 404
    instance_id = workout["exercises"][0]["id"]
    r = await other.post(f"{API}/workouts/{workout['id']}/instances/{instance_id}/skip")
    assert r.status_code == 404
    assert (await other.delete(f"{API}/workouts/{workout['id']}")).status_code == 404
    assert (await other.get(f"{API}/workouts")).json() == []


async def test_starting_from_someone_elses_program_copies_it(make_client):
    owner = make_client()
    await sign_up(owner, "owner@example.com")
    program = await create_program(owner, exercises=[("Squat", 2)])

    fan = make_client()
    await sign_up(fan, "fan@example.com")
    workout = await start(fan, program["id"])

    assert workout["program_id"] != program["id"]
    copies = (await fan.get(f"{API}/programs")).json()
    assert [p["id"] for p in copies] == [workout["program_id"]]
    assert [p["title"] for p in (await owner.get(f"{API}/programs")).json()] == ["Leg day"]


async def test_start_from_unknown_program_is_404(client):
    await sign_up(client)
    r = await client.post(f"{API}/workouts", json={"program_id": "00000000-0000-0000-0000-000000000000"})
    assert r.status_code == 404


async def test_workout_outlives_its_program(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("Squat", 1)])
    workout = await start(client, program["id"])

    assert (await client.delete(f"{API}/programs/{program['id']}")).status_code == 204
    r = await client.get(f"{API}/workouts/{workout['id']}")
    assert r.status_code == 200
    assert r.json()["program_id"] is None
    assert r.json()["program_title"] == "Leg day"


async def test_delete_workout(client):
    await sign_up(client)
    program = await create_program(client, exercises=[("Squat", 1)])
    workout = await start(client, program["id"])

    assert (await client.delete(f"{API}/workouts/{workout['id']}")).status_code == 204
    assert (await client.get(f"{API}/workouts/{workout['id']}")).status_code == 404


async def test_dashboard_orders_programs_by_last_workout(client):
    await sign_up(client)
    never_used = await create_program(client, "Never used")
    older = await create_program(client, "Older", exercises=[("Squat", 1)])
    newer = await create_program(client, "Newer", exercises=[("Row", 1)])
    await start(client, older["id"])
    await start(client, newer["id"])

    r = await client.get(f"{API}/dashboard")
    assert r.status_code == 200
    body = r.json()
    assert [p["title"] for p in body["programs"]] == ["Newer", "Older", "Never used"]
    assert [w["program_title"] for w in body["workouts"]] == ["Newer", "Older"]
    assert body["has_more_programs"] is False
    assert body["has_more_workouts"] is False


async def test_dashboard_limits_to_five(client):
    await sign_up(client)
    program = await create_program(client, "Only", exercises=[("Squat", 1)])
    for n in range(5):
        await create_program(client, f"Extra {n}")
    for _ in range(6):
        await start(client, program["id"])

    body = (await client.get(f"{API}/dashboard")).json()
    assert len(body["programs"]) == 5
    assert body["programs"][0]["title"] == "Only"
    assert len(body["workouts"]) == 5
    assert body["has_more_programs"] is True
    assert body["has_more_workouts"] is True


async def test_dashboard_requires_sign_in(client):
    assert (await client.get(f"{API}/dashboard")).status_code == 401
