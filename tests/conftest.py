import json

import httpx
import pytest

from kbagent.chat_generator import DeepSeekClient
from kbagent.config import Settings
from kbagent.knowledge import KnowledgeBase

SAMPLE_KB = {
    "teams": [
        {
            "name": "Платежи",
            "keywords": ["оплата", "карта"],
            "exclusions": ["подписка"],
            "tags": ["billing"],
            "description": "Проблемы с платежами",
            "contacts": {"slack": "#payments"},
            "examples": ["Не проходит оплата"],
        },
        {
            "name": "Доступы",
            "keywords": ["пароль"],
            "description": "Сброс паролей",
        },
    ],
    "response_template": {
        "success": "Команда: {team}",
        "unknown": "Команда не найдена",
    },
}


def reply(content="hello"):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it was asked to send"""

    def __init__(self, handler):
        self.requests = []

        def record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("DEEPSEEK_API_KEY", "DEEPSEEK_BASE_URL", "DEEPSEEK_MODEL", "DEEPSEEK_TIMEOUT",
                 "DEEPSEEK_INSECURE_SKIP_VERIFY", "KB_PATH", "LOG_LEVEL"):
        # set first so monkeypatch restores whatever load_dotenv writes
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def kb_file(tmp_path):
    path = tmp_path / "knowledge_base.json"
    path.write_text(json.dumps(SAMPLE_KB, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def knowledge_base():
    return KnowledgeBase.model_validate(SAMPLE_KB)


@pytest.fixture
def settings():
    return Settings(api_key="test-key")


@pytest.fixture
def make_client(settings):
    """Build a DeepSeekClient whose HTTP traffic goes to the given handler"""
    clients = []

    def factory(handler, api_key="test-key"):
        transport = RecordingTransport(handler)
        client = DeepSeekClient.from_settings(settings.model_copy(update={"api_key": api_key}),
                                              transport=transport)
        client.transport = transport
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
