import copy
import json

import azure.functions as func
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ukmla_saq.core.config import load_settings
from ukmla_saq.services import evaluation_service, question_service

SERVICE_ACCOUNT_EMAIL = "saq-generator@ukmla-test.iam.gserviceaccount.com"

SEPSIS_QUESTION = {
    "question": "A 68-year-old man presents with fever, confusion and a respiratory rate of 26. "
                "Outline your initial management in the first hour.",
    "model_answer": "Recognise sepsis using NEWS2, then deliver the Sepsis Six within one hour.",
    "marking_criteria": [
        "1 mark: high-flow oxygen",
        "1 mark: blood cultures before antibiotics",
        "1 mark: IV broad-spectrum antibiotics",
        "1 mark: IV fluid challenge",
        "1 mark: serum lactate and urine output monitoring",
    ],
    "keywords": ["sepsis six", "NEWS2", "lactate"],
    "total_marks": 5,
}


@pytest.fixture(scope="session")
def rsa_key_pair():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


@pytest.fixture
def settings(rsa_key_pair):
    private_pem, _ = rsa_key_pair
    return load_settings(
        _env_file=None,
        SUPABASE_URL="https://ukmla-test.supabase.co",
        SUPABASE_SERVICE_ROLE_KEY="service-role-key",
        GOOGLE_CLOUD_PROJECT_ID="ukmla-test",
        GOOGLE_SERVICE_ACCOUNT_KEY={"client_email": SERVICE_ACCOUNT_EMAIL, "private_key": private_pem},
        RETRY_TOTAL=2,
    )


def make_request(method="POST", body=None, route="generate-question", raw_body=None):
    if raw_body is None:
        raw_body = json.dumps(body).encode("utf-8") if body is not None else b""
    return func.HttpRequest(
        method=method,
        url=f"http://localhost:7071/api/{route}",
        headers={"Content-Type": "application/json"},
        params={},
        body=raw_body,
    )


def response_json(response):
    return json.loads(response.get_body().decode("utf-8"))


def ai_text(payload, fenced=True):
    text = json.dumps(payload, indent=2)
    return f"```json\n{text}\n```" if fenced else text


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Mirrors the part of the supabase query builder the store module uses"""

    def __init__(self, store, table):
        self.store = store
        self.table = table
        self.operation = None
        self.filters = []
        self.row_limit = None
        self.payload = None

    def select(self, columns="*"):
        self.operation = "select"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def execute(self):
        error = self.store.errors.get((self.table, self.operation))
        if error:
            raise error

        rows = self.store.tables.setdefault(self.table, [])
        if self.operation == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in payload:
                row = {"id": self.store.next_id(self.table), **copy.deepcopy(item)}
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return FakeResponse(inserted)

        matched = [row for row in rows if all(row.get(column) == value for column, value in self.filters)]
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        return FakeResponse(copy.deepcopy(matched))


class FakeStore:
    def __init__(self):
        self.tables = {"questions": [], "user_answers": []}
        self.errors = {}
        self._counters = {}

    def next_id(self, table):
        self._counters[table] = self._counters.get(table, 0) + 1
        prefix = "q" if table == "questions" else "a"
        return f"{prefix}-{self._counters[table]}"

    def table(self, name):
        return FakeQuery(self, name)


class FakeVertex:
    """Stands in for the token exchange and the generateContent call"""

    def __init__(self):
        self.responses = []
        self.prompts = []
        self.token_calls = 0

    def get_access_token(self, settings):
        self.token_calls += 1
        return "ya29.test-token"

    def generate_content(self, settings, access_token, prompt):
        assert access_token == "ya29.test-token"
        self.prompts.append(prompt)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def vertex():
    return FakeVertex()


@pytest.fixture
def fake_upstreams(monkeypatch, store, vertex):
    for module in (question_service, evaluation_service):
        monkeypatch.setattr(module, "get_store_client", lambda settings: store)
        monkeypatch.setattr(module, "get_access_token", vertex.get_access_token)
        monkeypatch.setattr(module, "generate_content", vertex.generate_content)
    return store, vertex


class FakeHttpResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self.text = text if text is not None else str(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Records outbound POSTs in place of a requests.Session"""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
