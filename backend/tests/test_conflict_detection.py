from timetable.services.conflicts import ConflictKind, detect_conflicts
from timetable.services.intervals import CourseSlot, parse_time_to_minutes


def slot(course_id, start, end, *, room=None, teacher=None, day="Monday", year=2025, trimester=1):
    return CourseSlot(
        id=course_id,
        name=f"Course {course_id}",
        day=day,
        start=parse_time_to_minutes(start),
        end=parse_time_to_minutes(end),
        year=year,
        trimester=trimester,
        teacher_id=teacher,
        room_id=room,
    )


def keys(conflicts):
    return [conflict.key for conflict in conflicts]


def test_room_and_teacher_conflicts_are_reported_per_pair():
    a = slot(1, "09:00", "10:00", room=101, teacher=1)
    b = slot(2, "09:30", "10:30", room=101, teacher=2)
    c = slot(3, "10:15", "11:00", room=102, teacher=2)

    conflicts = detect_conflicts([a, b, c])

    assert keys(conflicts) == [(1, 2, "room"), (2, 3, "teacher")]


def test_scheduling_scenario_with_room_then_teacher_clash():
    first = slot(1, "09:00", "10:30", room=10, teacher=5)
    second = slot(2, "10:00", "11:00", room=10, teacher=6)

    assert keys(detect_conflicts([first, second])) == [(1, 2, "room")]

    third = slot(3, "09:30", "10:00", room=11, teacher=5)
    assert keys(detect_conflicts([first, second, third])) == [(1, 2, "room"), (1, 3, "teacher")]


def test_pair_sharing_teacher_and_room_yields_both_kinds():
    conflicts = detect_conflicts([slot(1, "09:00", "10:00", room=1, teacher=1), slot(2, "09:00", "10:00", room=1, teacher=1)])

    assert [conflict.kind for conflict in conflicts] == [ConflictKind.teacher, ConflictKind.room]


def test_time_overlap_without_shared_resource_is_not_a_conflict():
    assert detect_conflicts([slot(1, "09:00", "10:00", room=1, teacher=1), slot(2, "09:00", "10:00", room=2, teacher=2)]) == []


def test_missing_teacher_or_room_never_matches():
    assert detect_conflicts([slot(1, "09:00", "10:00"), slot(2, "09:00", "10:00")]) == []


def test_back_to_back_courses_in_same_room_do_not_conflict():
    assert detect_conflicts([slot(1, "09:00", "10:00", room=1), slot(2, "10:00", "11:00", room=1)]) == []


def test_courses_from_different_scopes_are_never_paired():
    courses = [
        slot(1, "09:00", "10:00", room=1, teacher=1, year=2025, trimester=1),
        slot(2, "09:00", "10:00", room=1, teacher=1, year=2025, trimester=2),
        slot(3, "09:00", "10:00", room=1, teacher=1, year=2026, trimester=1),
    ]
    assert detect_conflicts(courses) == []


def test_detection_is_repeatable_on_unchanged_input():
    courses = [
        slot(1, "09:00", "10:00", room=1, teacher=1),
        slot(2, "09:30", "11:00", room=1, teacher=2),
        slot(3, "10:30", "12:00", room=2, teacher=2),
        slot(4, "08:00", "09:15", room=3, teacher=1),
    ]

    first = {conflict.key for conflict in detect_conflicts(courses)}
    second = {conflict.key for conflict in detect_conflicts(courses)}

    assert first == second == {(1, 2, "room"), (2, 3, "teacher"), (1, 4, "teacher")}


def test_conflict_message_names_the_resource():
    a = CourseSlot(id=1, name="Algebra", day="Monday", start=540, end=600, year=2025, trimester=1, room_id=4, room_name="A101")
    b = CourseSlot(id=2, name="Physics", day="Monday", start=570, end=630, year=2025, trimester=1, room_id=4, room_name="A101")

    (conflict,) = detect_conflicts([a, b])

    assert conflict.message == "Room conflict: Algebra and Physics are both booked in A101 (Monday 09:30-10:00)"
