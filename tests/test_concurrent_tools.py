from __future__ import annotations

import threading

from snippetforge.agent import CodeAgent
from snippetforge.factory import build_registry
from snippetforge.models.base import ModelResponse, ToolCall
from snippetforge.models.mock import MockChatModel
from snippetforge.network import Network
from snippetforge.sandbox.memory import InMemorySandbox, InMemorySandboxClient
from snippetforge.state import AgentState
from snippetforge.tools.base import ToolContext


def _batch(call_id: str, files: dict[str, str]) -> ToolCall:
    return ToolCall(
        id=call_id,
        name="createOrUpdateFiles",
        arguments={"files": [{"path": p, "content": c} for p, c in files.items()]},
    )


def _run(calls: list[ToolCall]) -> Network:
    sandbox = InMemorySandbox(write_delay=0.01)
    client = InMemorySandboxClient(factory=lambda sandbox_id: sandbox)
    context = ToolContext(
        run_id="run-1",
        sandbox_id=client.create("template"),
        sandbox_client=client,
        state=AgentState(),
    )
    model = MockChatModel(
        scripted=[
            ModelResponse(tool_calls=calls),
            ModelResponse(final_text="<task_summary>done</task_summary>"),
        ]
    )
    network = Network(
        agents=[CodeAgent(model=model, registry=build_registry())],
        context=context,
        parallel_tool_calls=True,
        max_tool_workers=4,
    )
    network.run("write files")
    return network


def test_parallel_disjoint_batches_lose_no_updates():
    network = _run(
        [
            _batch("c1", {"a.txt": "1", "b.txt": "2"}),
            _batch("c2", {"c.txt": "3", "d.txt": "4"}),
        ]
    )
    assert network.state.files == {"a.txt": "1", "b.txt": "2", "c.txt": "3", "d.txt": "4"}


def test_parallel_overlapping_batches_keep_every_path():
    network = _run(
        [
            _batch("c1", {"a.txt": "1", "shared.txt": "x"}),
            _batch("c2", {"b.txt": "2", "shared.txt": "y"}),
        ]
    )
    assert set(network.state.files) == {"a.txt", "b.txt", "shared.txt"}
    assert network.state.files["shared.txt"] in {"x", "y"}


def test_parallel_results_are_appended_in_request_order():
    network = _run(
        [
            _batch("c1", {"a.txt": "1"}),
            _batch("c2", {"b.txt": "2"}),
            _batch("c3", {"c.txt": "3"}),
        ]
    )
    ids = [m["tool_call_id"] for m in network.conversation if m["role"] == "tool"]
    assert ids == ["c1", "c2", "c3"]


def test_state_merge_is_serialized_across_threads():
    state = AgentState()
    barrier = threading.Barrier(8)

    def writer(index: int) -> None:
        barrier.wait()
        for item in range(50):
            state.merge_files({f"w{index}/f{item}.txt": str(item)})

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(state.files) == 400
