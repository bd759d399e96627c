import pytest


def upload(client, path, content, headers, filename="data.csv"):
    return client.post(
        path,
        files={"csvFile": (filename, content.encode("utf-8"), "text/csv")},
        headers=headers,
    )


@pytest.fixture
def seeded(client, editor_headers):
    client.post("/api/teachers/", json={"name": "Dr. Smith"}, headers=editor_headers)
    client.post("/api/teachers/", json={"name": "Prof. Johnson"}, headers=editor_headers)
    client.post("/api/rooms/", json={"name": "A101"}, headers=editor_headers)
    client.post("/api/rooms/", json={"name": "B205"}, headers=editor_headers)


def test_teacher_import_creates_and_updates_by_name(client, editor_headers):
    client.post("/api/teachers/", json={"name": "Dr. Smith", "department": "Old"}, headers=editor_headers)

    content = (
        "name,department,email,phone\n"
        "Dr. Smith,Computer Science,smith@university.edu,555-1234\n"
        "Prof. Doe,Mathematics,,\n"
    )
    response = upload(client, "/api/import/teachers", content, editor_headers)

    assert response.status_code == 200
    body = response.json()
    assert (body["created"], body["updated"], body["processed"], body["total"]) == (1, 1, 2, 2)
    teachers = {row["name"]: row for row in client.get("/api/teachers/", headers=editor_headers).json()}
    assert teachers["Dr. Smith"]["department"] == "Computer Science"
    assert teachers["Prof. Doe"]["email"] is None


def test_teacher_import_with_invalid_row_writes_nothing(client, editor_headers):
    content = "name,department,email,phone\nDr. Valid,CS,,\n,Physics,,\n"

    response = upload(client, "/api/import/teachers", content, editor_headers)

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation errors found"
    assert body["details"]["errors"] == [{"line": 2, "error": "Name is required"}]
    assert body["details"]["processed"] == 0
    assert client.get("/api/teachers/", headers=editor_headers).json() == []


def test_course_import_runs_each_row_through_the_gate(client, editor_headers, seeded):
    content = (
        "name,teacher_name,room_name,day,start_time,end_time,year,trimester\n"
        "Programming,Dr. Smith,A101,Monday,09:00,10:30,2025,1\n"
        "Calculus,Prof. Johnson,A101,Monday,10:00,11:00,2025,1\n"
        "Statistics,Prof. Johnson,A101,Monday,10:30,11:30,2025,1\n"
        "Physics,Dr. Nobody,B205,Tuesday,09:00,10:00,2025,1\n"
        "Chemistry,Dr. Smith,Z999,Tuesday,09:00,10:00,2025,1\n"
    )

    response = upload(client, "/api/import/courses", content, editor_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["created"] == 2
    assert body["updated"] == 0
    assert body["total"] == 5
    assert body["errors"] == [
        {"line": 2, "error": "Time slot conflict detected"},
        {"line": 4, "error": "Teacher not found: Dr. Nobody"},
        {"line": 5, "error": "Room not found: Z999"},
    ]
    names = [row["name"] for row in client.get("/api/courses/", headers=editor_headers).json()]
    assert names == ["Programming", "Statistics"]


def test_course_import_updates_existing_course_without_self_conflict(client, editor_headers, seeded):
    header = "name,teacher_name,room_name,day,start_time,end_time,year,trimester\n"
    upload(client, "/api/import/courses", header + "Programming,Dr. Smith,A101,Monday,09:00,10:30,2025,1\n", editor_headers)

    response = upload(
        client,
        "/api/import/courses",
        header + "Programming,Prof. Johnson,A101,Monday,9:30,11:00,2025,1\n",
        editor_headers,
    )

    body = response.json()
    assert (body["created"], body["updated"], body["errors"]) == (0, 1, [])
    (course,) = client.get("/api/courses/", headers=editor_headers).json()
    assert course["start_time"] == "09:30"
    assert course["teacher_name"] == "Prof. Johnson"


def test_course_import_validation_errors_reject_file(client, editor_headers, seeded):
    content = (
        "name,teacher_name,room_name,day,start_time,end_time,year,trimester\n"
        "Good,Dr. Smith,A101,Monday,09:00,10:00,2025,1\n"
        "Bad Day,Dr. Smith,A101,Someday,09:00,10:00,2025,1\n"
        "Missing,,A101,Monday,09:00,10:00,2025,1\n"
        "Bad Term,Dr. Smith,A101,Monday,09:00,10:00,2025,9\n"
    )

    response = upload(client, "/api/import/courses", content, editor_headers)

    assert response.status_code == 400
    errors = response.json()["details"]["errors"]
    assert [error["line"] for error in errors] == [2, 3, 4]
    assert errors[1]["error"] == "Missing required fields: teacher_name"
    assert client.get("/api/courses/", headers=editor_headers).json() == []


def test_import_rejects_non_csv_upload(client, editor_headers):
    response = client.post(
        "/api/import/teachers",
        files={"csvFile": ("teachers.json", b"[]", "application/json")},
        headers=editor_headers,
    )
    assert response.status_code == 400


def test_import_rejects_file_that_is_not_utf8(client, editor_headers):
    response = client.post(
        "/api/import/teachers",
        files={"csvFile": ("teachers.csv", b"name\n\xff\xfe bad\n", "text/csv")},
        headers=editor_headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "CSV file must be UTF-8 encoded"


def test_import_rejects_rows_wider_than_header(client, editor_headers):
    content = "name,department\nDr. Fine,CS\nDr. X,CS,extra\n"

    response = upload(client, "/api/import/teachers", content, editor_headers)

    assert response.status_code == 400
    details = response.json()["details"]
    assert details["errors"] == [{"line": 2, "error": "Row has more values than the header"}]
    assert details["total"] == 2
    assert client.get("/api/teachers/", headers=editor_headers).json() == []


def test_teacher_import_keeps_contact_fields_as_given(client, editor_headers):
    content = "name,department,email,phone\nDr. Legacy,History,legacy at campus,ext. 12\n"

    response = upload(client, "/api/import/teachers", content, editor_headers)

    assert response.status_code == 200
    (teacher,) = client.get("/api/teachers/", headers=editor_headers).json()
    assert teacher["email"] == "legacy at campus"
    assert teacher["phone"] == "ext. 12"


def test_import_requires_edit_permission(client, viewer_headers):
    response = upload(client, "/api/import/teachers", "name\nX\n", viewer_headers)
    assert response.status_code == 403


def test_templates_are_downloadable(client, viewer_headers):
    teachers = client.get("/api/import/teachers/template", headers=viewer_headers)
    assert teachers.status_code == 200
    assert teachers.headers["content-type"].startswith("text/csv")
    assert 'filename="teachers_template.csv"' in teachers.headers["content-disposition"]
    assert teachers.text.splitlines()[0] == "name,department,email,phone"

    courses = client.get("/api/import/courses/template", headers=viewer_headers)
    assert courses.text.splitlines()[0] == "name,teacher_name,room_name,day,start_time,end_time,year,trimester"
