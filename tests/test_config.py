from snippetforge.config import Settings


def test_defaults():
    settings = Settings()
    assert settings.max_iterations == 15
    assert settings.sandbox_port == 3000
    assert settings.completion_marker == "<task_summary>"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MAX_ITERATIONS", "4")
    monkeypatch.setenv("SANDBOX_TEMPLATE", "custom-template")
    monkeypatch.setenv("PARALLEL_TOOL_CALLS", "false")
    settings = Settings()
    assert settings.max_iterations == 4
    assert settings.sandbox_template == "custom-template"
    assert settings.parallel_tool_calls is False
