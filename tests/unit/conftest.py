"""Shared fixtures for the LuidGPT unit tests."""

import os
import re
from typing import Any, Dict

import pytest

from luidgpt.core.client import APIClient, LuidhubClient
from luidgpt.core.storage import ACCESS_TOKEN_KEY, InMemoryTokenStore

API_BASE_URL = "https://api.luidgpt.test/api"
LUIDHUB_BASE_URL = "https://hub.luidgpt.test"


def url_regex(path: str, base_url: str = API_BASE_URL) -> str:
    """Route regex for `path` that accepts an encoded slash (%2F) in either form."""
    return "^" + re.escape(base_url + path).replace("%2F", "(?:%2F|/)") + r"(?:\?.*)?$"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep developer .env files and LUIDGPT_ variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("LUIDGPT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore({ACCESS_TOKEN_KEY: "test-access-token"})


@pytest.fixture
def api_client(token_store: InMemoryTokenStore) -> APIClient:
    return APIClient(API_BASE_URL, token_store)


@pytest.fixture
def luidhub_client(token_store: InMemoryTokenStore) -> LuidhubClient:
    return LuidhubClient(LUIDHUB_BASE_URL, token_store)


@pytest.fixture
def user_payload() -> Dict[str, Any]:
    return {
        "id": "user-1",
        "email": "ada@example.com",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "credits": 120,
        "emailVerified": True,
        "createdAt": "2024-05-01T12:30:00.123Z",
        "updatedAt": "2024-05-02T08:00:00.000Z",
    }


@pytest.fixture
def organization_payload() -> Dict[str, Any]:
    return {
        "id": "org-1",
        "name": "Acme Studio",
        "description": "Design team",
        "credits": 2500,
        "ownerId": "user-1",
        "memberCount": 4,
        "role": "owner",
        "createdAt": "2024-05-01T12:30:00.000Z",
        "updatedAt": "2024-05-01T12:30:00.000Z",
    }


@pytest.fixture
def model_payload() -> Dict[str, Any]:
    return {
        "id": "model-1",
        "modelId": "openai/sora-2",
        "name": "Sora 2",
        "provider": "openai",
        "creditCost": 10,
        "tier": "premium",
        "tags": ["style:cinematic", "speed:slow", "quality:high"],
        "category": {
            "id": "cat-1",
            "slug": "video-generation",
            "name": "Video Generation",
            "outputType": "video",
            "creditCostDefault": 10,
            "sortOrder": 1,
        },
    }


@pytest.fixture
def generation_payload() -> Dict[str, Any]:
    return {
        "id": "gen-1",
        "userId": "user-1",
        "modelId": "openai/sora-2",
        "replicateModelId": "model-1",
        "categorySlug": "video-generation",
        "input": {"prompt": "a cat surfing"},
        "outputUrl": "https://cdn.test/out.mp4",
        "status": "completed",
        "creditsUsed": 10,
        "executionTimeMs": 4500,
        "isFavorite": False,
        "createdAt": "2024-05-01T12:30:00.000Z",
        "updatedAt": "2024-05-01T12:31:00.000Z",
    }


@pytest.fixture
def balance_payload() -> Dict[str, Any]:
    return {
        "total_credits": 150,
        "subscription_credits": 100,
        "purchased_credits": 40,
        "promotional_credits": 10,
        "plan": "pro",
        "next_reset": "2024-06-01T00:00:00.000Z",
    }
