from decimal import Decimal

import pytest

from helpers.errors import CourseNotFoundError, RecordExistsError, StoreError
from models.course import Course
from models.transaction import Transaction
from tests.utils import service_unavailable


def make_transaction(transaction_id="pi_1", user_id="u1", course_id="c1"):
    return Transaction(
        transactionId=transaction_id,
        userId=user_id,
        courseId=course_id,
        dateTime="2025-01-14T09:30:00+00:00",
        paymentProvider="stripe",
        amount=4900,
    )


def test_course_item_stores_enrollments_as_string_set(course_store, course_table):
    course_store.create(
        Course(courseId="c9", teacherName="Sarah Chen", title="Python", price=49, enrollments=[{"userId": "u1"}])
    )

    item = course_table.items[("c9",)]
    assert item["enrollments"] == {"u1"}
    assert item["price"] == Decimal("49")


def test_new_course_without_enrollments_omits_the_set(sample_course, course_table):
    assert "enrollments" not in course_table.items[("c1",)]
    assert sample_course.enrollments == []


def test_create_course_twice_is_rejected(sample_course, course_store):
    with pytest.raises(RecordExistsError):
        course_store.create(sample_course)


def test_add_enrollments_is_a_set_union(sample_course, course_store):
    course_store.add_enrollments("c1", ["u1"])
    course_store.add_enrollments("c1", ["u2", "u1"])

    assert [enrollment.userId for enrollment in course_store.get("c1").enrollments] == ["u1", "u2"]


def test_add_enrollments_to_missing_course_does_not_create_it(course_store, course_table):
    with pytest.raises(CourseNotFoundError):
        course_store.add_enrollments("missing", ["u1"])

    assert course_table.items == {}


def test_update_patches_only_given_fields(sample_course, course_store):
    course = course_store.update("c1", {"title": "Python 101", "description": None, "price": 59})

    assert course.title == "Python 101"
    assert course.price == 59
    assert course.teacherName == "Sarah Chen"
    assert [section.sectionId for section in course.sections] == ["s1", "s2"]


def test_update_missing_course_raises_not_found(course_store):
    with pytest.raises(CourseNotFoundError):
        course_store.update("missing", {"title": "Ghost"})


def test_scan_filters_by_category(sample_course, course_store):
    course_store.create(Course(courseId="c2", teacherName="Sarah Chen", title="Pandas", category="Data Science"))

    assert [course.courseId for course in course_store.scan("Data Science")] == ["c2"]
    assert {course.courseId for course in course_store.scan("all")} == {"c1", "c2"}
    assert {course.courseId for course in course_store.scan()} == {"c1", "c2"}


def test_delete_course(sample_course, course_store):
    course_store.delete("c1")

    assert course_store.get("c1") is None


def test_client_errors_become_store_errors(course_store, course_table):
    course_table.fail("scan", service_unavailable("Scan"))

    with pytest.raises(StoreError):
        course_store.scan()


def test_transactions_are_never_overwritten(transaction_store):
    transaction_store.create(make_transaction())

    with pytest.raises(RecordExistsError):
        transaction_store.create(make_transaction())


def test_transaction_id_is_unique_across_users(transaction_store):
    transaction_store.create(make_transaction("pi_1", "u1"))

    with pytest.raises(RecordExistsError):
        transaction_store.create(make_transaction("pi_1", "u2"))

    assert transaction_store.get("pi_1").userId == "u1"
    assert transaction_store.query_by_user("u2") == []


def test_query_transactions_by_user(transaction_store):
    transaction_store.create(make_transaction("pi_1", "u1"))
    transaction_store.create(make_transaction("pi_2", "u2"))
    transaction_store.save(make_transaction("pi_3", "u1", "c2"))

    assert sorted(t.transactionId for t in transaction_store.query_by_user("u1")) == ["pi_1", "pi_3"]
    assert len(transaction_store.scan_all()) == 3


def test_progress_create_is_once_per_user_and_course(sample_course, progress_store):
    from models.user_course_progress import UserCourseProgress

    progress = UserCourseProgress.initial_for("u1", sample_course, "2025-01-14T09:30:00+00:00")
    progress_store.create(progress)

    with pytest.raises(RecordExistsError):
        progress_store.create(progress)
    assert progress_store.query_by_user("u1") == [progress]
    assert progress_store.scan_all() == [progress]
