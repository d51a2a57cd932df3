"""Pytest configuration and shared fixtures."""

import os
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test")
os.environ.setdefault("AWS_S3_BUCKET", "course-assets-test")
os.environ.setdefault("AWS_REGION", "us-east-1")

# Ensure the server modules are importable when tests run from the repo root.
SERVER_ROOT = Path(__file__).resolve().parents[1]
if str(SERVER_ROOT) not in sys.path:
    sys.path.append(str(SERVER_ROOT))

from helpers.course_store import CourseStore
from helpers.progress_store import ProgressStore
from helpers.transaction_store import TransactionStore
from models.course import Chapter, Course, Section
from tests.utils import FakeTable


@pytest.fixture()
def course_table():
    return FakeTable(["courseId"])


@pytest.fixture()
def transaction_table():
    return FakeTable(["transactionId"])


@pytest.fixture()
def progress_table():
    return FakeTable(["userId", "courseId"])


@pytest.fixture()
def course_store(course_table):
    return CourseStore(course_table)


@pytest.fixture()
def transaction_store(transaction_table):
    return TransactionStore(transaction_table)


@pytest.fixture()
def progress_store(progress_table):
    return ProgressStore(progress_table)


@pytest.fixture()
def sample_course(course_store):
    """Course c1: two sections holding one and two chapters."""
    course = Course(
        courseId="c1",
        teacherId="t1",
        teacherName="Sarah Chen",
        title="Introduction to Python Programming",
        category="Computer Science",
        price=49,
        status="Published",
        sections=[
            Section(sectionId="s1", sectionTitle="Getting Started", chapters=[Chapter(chapterId="s1c1")]),
            Section(
                sectionId="s2",
                sectionTitle="Core Syntax",
                chapters=[Chapter(chapterId="s2c1"), Chapter(chapterId="s2c2")],
            ),
        ],
    )
    return course_store.create(course)


@pytest.fixture()
def fake_stripe(monkeypatch):
    """Record Stripe calls instead of sending them."""
    import stripe

    calls = {"products": [], "prices": [], "payment_intents": []}

    def fake_product_create(**kwargs):
        calls["products"].append(kwargs)
        return SimpleNamespace(id="prod_test", **kwargs)

    def fake_price_create(**kwargs):
        calls["prices"].append(kwargs)
        return SimpleNamespace(id="price_test", **kwargs)

    def fake_payment_intent_create(**kwargs):
        calls["payment_intents"].append(kwargs)
        return SimpleNamespace(id="pi_test", client_secret="pi_test_secret_123", **kwargs)

    monkeypatch.setattr(stripe.Product, "create", fake_product_create)
    monkeypatch.setattr(stripe.Price, "create", fake_price_create)
    monkeypatch.setattr(stripe.PaymentIntent, "create", fake_payment_intent_create)
    return calls


@pytest.fixture()
def fake_s3(monkeypatch):
    """Replace the S3 client with one that records uploads and presign requests."""
    from helpers import s3_helper

    client = SimpleNamespace(uploads=[], presigned=[])

    def put_object(**kwargs):
        client.uploads.append(kwargs)
        return {}

    def generate_presigned_url(operation, Params, ExpiresIn):
        client.presigned.append({"operation": operation, "params": Params, "expires_in": ExpiresIn})
        return f"https://{Params['Bucket']}.s3.amazonaws.com/{Params['Key']}?X-Amz-Signature=test"

    client.put_object = put_object
    client.generate_presigned_url = generate_presigned_url
    monkeypatch.setattr(s3_helper, "get_s3_client", lambda: client)
    return client


@pytest.fixture()
def client(course_store, transaction_store, progress_store):
    """TestClient with stores backed by the fake tables and a signed-in user u1."""
    from fastapi.testclient import TestClient

    from helpers.course_store import get_course_store
    from helpers.progress_store import get_progress_store
    from helpers.transaction_store import get_transaction_store
    from main import app
    from middleware.auth_middleware import get_current_user

    app.dependency_overrides[get_course_store] = lambda: course_store
    app.dependency_overrides[get_transaction_store] = lambda: transaction_store
    app.dependency_overrides[get_progress_store] = lambda: progress_store
    app.dependency_overrides[get_current_user] = lambda: {"userId": "u1"}
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
