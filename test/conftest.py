import pytest
from faker import Faker

from fakes import FakeFirebaseClient

fake = Faker()


@pytest.fixture
def sender_id():
    return fake.uuid4()


@pytest.fixture
def receiver_id():
    return fake.uuid4()


@pytest.fixture
def sender_name():
    return fake.user_name()


@pytest.fixture
def users(sender_id, receiver_id, sender_name):
    return {
        sender_id: {"username": sender_name, "fcmToken": fake.sha256()},
        receiver_id: {"username": fake.user_name(), "fcmToken": "receiver-token"},
    }


@pytest.fixture
def firebase(users):
    return FakeFirebaseClient(users=users)
