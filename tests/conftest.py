"""Pytest configuration and fixtures"""
import re
import time
from dataclasses import dataclass
from typing import Generator, List

import pytest
from flask import Flask

from api import create_app
from models import DBStorage
from services import EXTENSION_KEY, Services
from utils.clock import Clock

API = "/api/v1"
PASSWORD = "pw1"


class FrozenClock(Clock):
    """
    Real time plus a manual offset.
    Tokens are still checked by PyJWT against the wall clock, so only
    advance it where no token is minted afterwards.
    """

    def __init__(self):
        self.offset = 0

    def now_seconds(self) -> int:
        return int(time.time()) + self.offset

    def now_millis(self) -> int:
        return int(time.time() * 1000) + self.offset * 1000

    def advance(self, seconds: int):
        self.offset += seconds


@dataclass
class Mail:
    to: str
    subject: str
    html: str


class RecordingMailer:
    """Keeps sent mail in memory instead of talking SMTP"""

    def __init__(self):
        self.sent: List[Mail] = []

    def send(self, to_address: str, subject: str, html_body: str) -> None:
        self.sent.append(Mail(to_address, subject, html_body))

    def last_code(self, path: str) -> str:
        """Code embedded in the most recent link of the form <frontend>/<path>/<code>"""
        for mail in reversed(self.sent):
            match = re.search(rf"/{re.escape(path)}/([A-Za-z0-9]+)", mail.html)
            if match:
                return match.group(1)
        raise AssertionError(f"no mail with a {path} link")


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def storage() -> Generator[DBStorage, None, None]:
    """Fresh in-memory database for each test"""
    db = DBStorage("sqlite://")
    db.reload()
    try:
        yield db
    finally:
        db.close()
        db.drop_all()


@pytest.fixture
def app(storage, mailer, clock) -> Flask:
    return create_app("testing", storage=storage, mailer=mailer, clock=clock)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app) -> Generator[Services, None, None]:
    with app.app_context():
        yield app.extensions[EXTENSION_KEY]


def register(client, email="u@test.com", password=PASSWORD, first_name="Ada", last_name="Lovelace"):
    return client.post(
        f"{API}/registration",
        json={"email": email, "password": password, "firstName": first_name, "lastName": last_name},
    )


def login(client, email="u@test.com", password=PASSWORD):
    return client.post(f"{API}/login", json={"email": email, "password": password})


def headers(tokens: dict) -> dict:
    return {"X-Access-Token": tokens["access"]}


@pytest.fixture
def tokens(client) -> dict:
    """Token pair of a freshly registered u@test.com"""
    response = register(client)
    assert response.status_code == 200
    return response.get_json()["data"]["tokens"]
