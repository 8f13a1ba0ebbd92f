"""Entity routes: create/fetch round trips and the domain error codes."""

API = "/api/v1"


def _create(client, resource, payload):
    res = client.post(f"{API}/{resource}/", json=payload)
    assert res.status_code == 201, res.text
    return res.json()


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.json()["docs"] == "/docs"


def test_student_crud(client):
    student = _create(client, "students", {"name": "Alice", "age": 20})

    assert client.get(f"{API}/students/{student['id']}").json()["name"] == "Alice"

    res = client.put(f"{API}/students/{student['id']}", json={"name": "Alicia"})
    assert res.status_code == 200
    assert res.json() == {"id": student["id"], "name": "Alicia", "age": 20, "group_id": None}

    assert client.delete(f"{API}/students/{student['id']}").status_code == 204
    assert client.get(f"{API}/students/{student['id']}").status_code == 404


def test_student_listing_query(client):
    _create(client, "students", {"name": "Bob", "age": 20})
    _create(client, "students", {"name": "Alice", "age": 20})

    res = client.get(f"{API}/students/", params={"age": 20, "sort": "asc"})

    assert [s["name"] for s in res.json()] == ["Alice", "Bob"]


def test_group_with_missing_student_persists_nothing(client):
    student = _create(client, "students", {"name": "Alice", "age": 20})

    res = client.post(f"{API}/groups/", json={"name": "CS-101", "studentIds": [student["id"], 77]})

    assert res.status_code == 404
    assert res.json()["error"]["details"] == {"missing_ids": [77]}
    assert client.get(f"{API}/groups/name/CS-101").status_code == 404


def test_group_create_and_delete(client):
    student = _create(client, "students", {"name": "Alice", "age": 20})
    group = _create(client, "groups", {"name": "CS-101", "student_ids": [student["id"]]})

    assert client.get(f"{API}/students/{student['id']}").json()["group_id"] == group["id"]
    assert client.get(f"{API}/students/group/{group['id']}").json()[0]["id"] == student["id"]
    assert client.post(f"{API}/groups/", json={"name": "CS-101"}).status_code == 409

    assert client.delete(f"{API}/groups/name/CS-101").status_code == 204
    assert client.get(f"{API}/students/{student['id']}").json()["group_id"] is None


def test_subject_exists_after_delete(client):
    _create(client, "subjects", {"name": "History"})
    assert client.get(f"{API}/subjects/exists/History").json() is True

    assert client.delete(f"{API}/subjects/name/History").status_code == 204

    assert client.get(f"{API}/subjects/exists/History").json() is False


def test_mark_lifecycle(client):
    student = _create(client, "students", {"name": "Alice", "age": 20})
    subject = _create(client, "subjects", {"name": "Mathematics"})
    payload = {"value": 8, "studentId": student["id"], "subjectId": subject["id"]}

    res = client.post(f"{API}/marks/", json=payload)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "SUBJECT_NOT_ASSIGNED"

    client.post(
        f"{API}/student-subjects", params={"studentId": student["id"], "subjectId": subject["id"]},
    )
    mark = _create(client, "marks", payload)
    assert client.get(f"{API}/marks/{mark['id']}").json()["value"] == 8
    assert client.get(f"{API}/marks/average/student/{student['id']}").json() == 8.0

    _create(client, "marks", {**payload, "value": 6})
    assert client.get(f"{API}/marks/average/subject/{subject['id']}").json() == 7.0

    criteria = {"studentId": student["id"], "subjectName": "Mathematics", "value": 6}
    assert client.delete(f"{API}/marks/", params=criteria).status_code == 204
    assert client.delete(f"{API}/marks/", params=criteria).status_code == 404
    assert client.get(f"{API}/marks/average/student/{student['id']}").json() == 8.0


def test_average_without_marks_is_404(client):
    student = _create(client, "students", {"name": "Alice", "age": 20})
    assert client.get(f"{API}/marks/average/student/{student['id']}").status_code == 404
