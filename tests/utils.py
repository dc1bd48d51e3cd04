import random
import re
import string

from fastapi.testclient import TestClient

JWT_PATTERN = re.compile(r"^[a-zA-Z0-9\-_]*\.[a-zA-Z0-9\-_]*\.[a-zA-Z0-9\-_]*$")


def random_name(length: int = 10) -> str:
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def assert_valid_jwt(token: str) -> None:
    assert isinstance(token, str)
    assert JWT_PATTERN.match(token), token


def register_diner(client: TestClient, password: str = "a") -> dict:
    """Register a diner with a random email and return it with its token."""
    payload = {"name": "pizza diner", "email": random_name() + "@test.com", "password": password}
    res = client.post("/api/auth", json=payload)
    assert res.status_code == 200, res.text
    body = res.json()
    assert_valid_jwt(body["token"])
    return {
        **body["user"],
        "password": password,
        "token": body["token"],
        "headers": auth_headers(body["token"]),
    }
