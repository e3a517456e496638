import pytest

from kbagent import cli
from kbagent.errors import FileAccessError


@pytest.fixture(autouse=True)
def quiet(monkeypatch, tmp_path):
    # keep caplog's handler in place and stay away from real .env files
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)
    monkeypatch.setattr(cli, "load_env_file", lambda path=None: None)
    monkeypatch.chdir(tmp_path)


class FakeInterface:
    runs = []

    def __init__(self, ctx):
        self.ctx = ctx

    def run(self):
        FakeInterface.runs.append(self.ctx)


def test_missing_knowledge_base_is_fatal(tmp_path, caplog):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--kb", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 1
    assert "Failed to start" in caplog.text


def test_malformed_knowledge_base_is_fatal(tmp_path):
    path = tmp_path / "kb.json"
    path.write_text("{not json")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--kb", str(path)])
    assert excinfo.value.code == 1


def test_starts_loop_with_context(kb_file, monkeypatch):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "secret")
    monkeypatch.setattr(cli, "ChatInterface", FakeInterface)
    FakeInterface.runs.clear()

    cli.main(["--kb", str(kb_file), "--model", "deepseek-reasoner"])

    [ctx] = FakeInterface.runs
    assert len(ctx.knowledge_base.teams) == 2
    assert ctx.settings.model == "deepseek-reasoner"
    assert ctx.client.api_key == "secret"
    assert ctx.client.verify_ssl is True


def test_insecure_flag(kb_file, monkeypatch, caplog):
    monkeypatch.setattr(cli, "ChatInterface", FakeInterface)
    FakeInterface.runs.clear()

    cli.main(["--kb", str(kb_file), "--insecure"])

    [ctx] = FakeInterface.runs
    assert ctx.client.verify_ssl is False
    assert "DISABLED" in caplog.text
    assert "DEEPSEEK_API_KEY is not set" in caplog.text


def test_kb_path_from_environment(kb_file, monkeypatch):
    monkeypatch.setenv("KB_PATH", str(kb_file))
    monkeypatch.setattr(cli, "ChatInterface", FakeInterface)
    FakeInterface.runs.clear()

    cli.main([])

    assert len(FakeInterface.runs) == 1


def test_file_access_error_message(tmp_path):
    error = FileAccessError(tmp_path / "kb.json", "No such file or directory")
    assert "kb.json" in str(error)
    assert "No such file or directory" in str(error)
