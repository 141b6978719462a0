from snippetforge.completion import completion_text, contains_marker
from snippetforge.models.base import ModelResponse, ToolCall


def test_marker_detection_is_substring_containment():
    assert contains_marker("Done! <task_summary>Built it</task_summary>")
    assert contains_marker("<task_summary> no closing tag")
    assert not contains_marker("task_summary without brackets")
    assert not contains_marker(None)


def test_completion_text_returns_full_message():
    text = "All set.\n<task_summary>Built a form.</task_summary>"
    assert completion_text(ModelResponse(final_text=text)) == text


def test_tool_call_without_text_is_not_completion():
    response = ModelResponse(tool_calls=[ToolCall(name="terminal", arguments={"command": "ls"})])
    assert completion_text(response) is None


def test_custom_marker():
    response = ModelResponse(final_text="[[done]] finished")
    assert completion_text(response, marker="[[done]]") == "[[done]] finished"
    assert completion_text(response) is None
