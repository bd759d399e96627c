def create(client, headers, path, payload):
    response = client.post(path, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_conflict_report_lists_room_and_teacher_clashes(client, editor_headers, viewer_headers):
    teacher_5 = create(client, editor_headers, "/api/teachers/", {"name": "Dr. Five"})
    teacher_6 = create(client, editor_headers, "/api/teachers/", {"name": "Dr. Six"})
    room_10 = create(client, editor_headers, "/api/rooms/", {"name": "R10"})
    room_11 = create(client, editor_headers, "/api/rooms/", {"name": "R11"})

    def course(name, teacher, room, start, end, trimester=1):
        return {
            "name": name,
            "teacher_id": teacher["id"],
            "room_id": room["id"],
            "day": "Monday",
            "start_time": start,
            "end_time": end,
            "year": 2025,
            "trimester": trimester,
        }

    first = create(client, editor_headers, "/api/courses/", course("First", teacher_5, room_10, "09:00", "10:30"))
    second = create(client, editor_headers, "/api/courses/", course("Second", teacher_6, room_11, "10:00", "11:00"))
    third = create(client, editor_headers, "/api/courses/", course("Third", teacher_5, room_11, "09:00", "09:45"))
    create(client, editor_headers, "/api/courses/", course("Other term", teacher_5, room_10, "09:00", "10:30", trimester=2))

    response = client.get("/api/conflicts/", params={"year": 2025, "trimester": 1}, headers=viewer_headers)
    assert response.status_code == 200
    conflicts = response.json()
    assert [(c["kind"], c["course_a"]["id"], c["course_b"]["id"]) for c in conflicts] == [
        ("teacher", first["id"], third["id"]),
    ]
    assert conflicts[0]["course_a"]["teacher_name"] == "Dr. Five"
    assert "Dr. Five" in conflicts[0]["message"]
    assert second["id"] not in {conflicts[0]["course_a"]["id"], conflicts[0]["course_b"]["id"]}


def test_conflicts_require_year_and_trimester(client, viewer_headers):
    assert client.get("/api/conflicts/", params={"year": 2025}, headers=viewer_headers).status_code == 422
    assert client.get("/api/conflicts/", params={"trimester": 1}, headers=viewer_headers).status_code == 422


def test_empty_scope_has_no_conflicts(client, viewer_headers):
    response = client.get("/api/conflicts/", params={"year": 2030, "trimester": 4}, headers=viewer_headers)
    assert response.status_code == 200
    assert response.json() == []


def test_room_double_booking_stored_outside_the_gate_is_reported(client, viewer_headers, session_factory):
    from timetable.models.course import Course, Weekday
    from timetable.models.room import Room
    from timetable.models.teacher import Teacher

    with session_factory() as db:
        room = Room(name="A101")
        teacher_5 = Teacher(name="Dr. Five")
        teacher_6 = Teacher(name="Dr. Six")
        db.add_all([room, teacher_5, teacher_6])
        db.flush()
        db.add_all(
            [
                Course(name="One", teacher_id=teacher_5.id, room_id=room.id, day=Weekday.monday,
                       start_time="09:00", end_time="10:30", year=2025, trimester=1),
                Course(name="Two", teacher_id=teacher_6.id, room_id=room.id, day=Weekday.monday,
                       start_time="10:00", end_time="11:00", year=2025, trimester=1),
            ]
        )
        db.commit()

    conflicts = client.get("/api/conflicts/", params={"year": 2025, "trimester": 1}, headers=viewer_headers).json()

    assert [(c["kind"], c["course_a"]["name"], c["course_b"]["name"]) for c in conflicts] == [("room", "One", "Two")]
    assert conflicts[0]["message"] == "Room conflict: One and Two are both booked in A101 (Monday 10:00-10:30)"
