def test_academic_year_lifecycle(client, editor_headers, viewer_headers):
    assert client.get("/api/academic-years/", headers=viewer_headers).json() == []

    for year in (2027, 2026):
        assert client.post("/api/academic-years/", json={"year": year}, headers=editor_headers).status_code == 201
    assert client.post("/api/academic-years/", json={"year": 2026}, headers=editor_headers).status_code == 409
    assert client.post("/api/academic-years/", json={"year": 1999}, headers=editor_headers).status_code == 422

    years = [row["year"] for row in client.get("/api/academic-years/", headers=viewer_headers).json()]
    assert years == [2026, 2027]

    assert client.delete("/api/academic-years/2027", headers=editor_headers).status_code == 200
    assert client.delete("/api/academic-years/2027", headers=editor_headers).status_code == 404
    assert client.post("/api/academic-years/", json={"year": 2028}, headers=viewer_headers).status_code == 403


def test_stats_counts_scope_and_conflicts(client, editor_headers, viewer_headers, session_factory):
    from timetable.models.course import Course, Weekday

    teacher = client.post("/api/teachers/", json={"name": "Dr. Stats"}, headers=editor_headers).json()
    client.post("/api/rooms/", json={"name": "S1"}, headers=editor_headers)

    with session_factory() as db:
        for name, start, end, trimester in (
            ("One", "09:00", "10:00", 1),
            ("Two", "09:30", "10:30", 1),
            ("Three", "09:00", "10:00", 2),
        ):
            db.add(
                Course(name=name, teacher_id=teacher["id"], room_id=None, day=Weekday.thursday,
                       start_time=start, end_time=end, year=2025, trimester=trimester)
            )
        db.commit()

    scoped = client.get("/api/stats/", params={"year": 2025, "trimester": 1}, headers=viewer_headers).json()
    assert scoped == {
        "total_courses": 2,
        "total_teachers": 1,
        "total_rooms": 1,
        "total_users": 3,
        "total_conflicts": 1,
    }

    overall = client.get("/api/stats/", headers=viewer_headers).json()
    assert overall["total_courses"] == 3
    assert overall["total_conflicts"] is None
