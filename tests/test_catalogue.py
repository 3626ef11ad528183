from pydantic import ValidationError
import pytest

from memvid_mcp.tools import ALL_TOOLS

TOOLS = {spec.name: spec for spec in ALL_TOOLS}


def argv(name: str, **arguments) -> list[str]:
    spec = TOOLS[name]
    return spec.build(spec.params.model_validate(arguments))


def test_catalogue_has_forty_unique_tools():
    assert len(ALL_TOOLS) == 40
    assert len(TOOLS) == 40
    assert all(name.startswith("memvid_") for name in TOOLS)


def test_all_tool_parameters_have_descriptions():
    """
    Every parameter in every tool's inputSchema has a description.
    """
    missing_descriptions = []

    for spec in ALL_TOOLS:
        schema = spec.to_tool().inputSchema
        for param, definition in schema.get("properties", {}).items():
            if not definition.get("description"):
                missing_descriptions.append(f"{spec.name}.{param}")

    assert not missing_descriptions, "Tool parameters without a description:\n" + "\n".join(missing_descriptions)


def test_tools_reject_unknown_keys_in_schema():
    for spec in ALL_TOOLS:
        assert spec.to_tool().inputSchema.get("additionalProperties") is False, spec.name


def test_annotations_carry_title():
    tool = TOOLS["memvid_delete"].to_tool()

    assert tool.annotations.title == "Delete Frame"
    assert tool.annotations.destructiveHint is True
    assert tool.annotations.idempotentHint is True

    assert TOOLS["memvid_find"].to_tool().annotations.readOnlyHint is True
    assert TOOLS["memvid_api_fetch"].to_tool().annotations.openWorldHint is True
    assert TOOLS["memvid_create"].to_tool().annotations.readOnlyHint is None


def test_timeout_classes():
    heavy = {name for name, spec in TOOLS.items() if spec.timeout == "heavy"}
    rag = {name for name, spec in TOOLS.items() if spec.timeout == "rag"}

    assert heavy == {"memvid_put", "memvid_put_many", "memvid_enrich"}
    assert rag == {"memvid_ask", "memvid_audit"}


def test_only_version_skips_json():
    assert [name for name, spec in TOOLS.items() if spec.skip_json] == ["memvid_version"]


def test_prechecks():
    require_input = {name for name, spec in TOOLS.items() if spec.require_input}
    assert require_input == {"memvid_put", "memvid_put_many"}

    assert TOOLS["memvid_find"].require_file is True
    assert TOOLS["memvid_enrich"].require_file is True
    assert TOOLS["memvid_create"].require_file is False
    assert TOOLS["memvid_export"].require_file is False
    assert TOOLS["memvid_lock"].require_file is False


def test_lifecycle_argv():
    assert argv("memvid_create", file="/data/kb.mv2") == ["create", "/data/kb.mv2"]
    assert argv("memvid_verify", file="/data/kb.mv2", deep=True) == ["verify", "/data/kb.mv2", "--deep"]
    assert argv("memvid_doctor", file="/data/kb.mv2", rebuild_lex_index=True, dry_run=True) == [
        "doctor",
        "/data/kb.mv2",
        "--rebuild-lex-index",
        "--dry-run",
    ]


def test_write_argv():
    assert argv("memvid_put", file="/data/kb.mv2", input="/data/docs", recursive=True, embed=True) == [
        "put",
        "--input",
        "/data/docs",
        "/data/kb.mv2",
        "--recursive",
        "--embed",
    ]
    assert argv("memvid_put_many", file="/data/kb.mv2", input="/data/docs", batch_size=50) == [
        "put-many",
        "--input",
        "/data/docs",
        "/data/kb.mv2",
        "--batch-size",
        "50",
    ]
    assert argv("memvid_view", file="/data/kb.mv2", frame_id=0, raw=True) == ["view", "/data/kb.mv2", "0", "--raw"]
    assert argv("memvid_update", file="/data/kb.mv2", frame_id=4, content="new text") == [
        "update",
        "/data/kb.mv2",
        "4",
        "--content",
        "new text",
    ]
    assert argv("memvid_api_fetch", file="/data/kb.mv2", url="https://example.com/a?b=1", title="A") == [
        "api-fetch",
        "/data/kb.mv2",
        "https://example.com/a?b=1",
        "--title",
        "A",
    ]


def test_search_defaults():
    assert argv("memvid_find", file="/data/kb.mv2", query="vectors") == [
        "find",
        "/data/kb.mv2",
        "vectors",
        "--mode",
        "hybrid",
        "--limit",
        "10",
    ]
    assert argv("memvid_ask", file="/data/kb.mv2", question="why?", top_k=3, mode="sem") == [
        "ask",
        "/data/kb.mv2",
        "why?",
        "--top-k",
        "3",
        "--mode",
        "sem",
    ]
    assert argv("memvid_vec_search", file="/data/kb.mv2", query="q")[:2] == ["vec-search", "/data/kb.mv2"]


def test_timeline_timestamps_keep_integer_form():
    assert argv("memvid_timeline", file="/data/kb.mv2", since=1700000000000, reverse=True) == [
        "timeline",
        "/data/kb.mv2",
        "--reverse",
        "--since",
        "1700000000000",
    ]


def test_analysis_argv():
    assert argv("memvid_export", file="/data/kb.mv2", output="/data/out.csv", format="csv", frame_ids=[1, 2]) == [
        "export",
        "--output",
        "/data/out.csv",
        "/data/kb.mv2",
        "--format",
        "csv",
        "--frame-ids",
        "1,2",
    ]
    assert argv("memvid_export", file="/data/kb.mv2", output="/data/out.json")[-2:] == ["--format", "json"]
    assert argv("memvid_debug_segment", file="/data/kb.mv2", segment_type="vec") == [
        "debug-segment",
        "/data/kb.mv2",
        "vec",
    ]
    assert argv("memvid_models") == ["models"]
    assert argv("memvid_models", model_type="clip") == ["models", "--model-type", "clip"]


def test_knowledge_and_session_argv():
    assert argv("memvid_enrich", file="/data/kb.mv2", frame_id=0) == ["enrich", "/data/kb.mv2", "--frame-id", "0"]
    assert argv("memvid_follow", file="/data/kb.mv2", entity="Ada", hops=3) == [
        "follow",
        "/data/kb.mv2",
        "Ada",
        "--hops",
        "3",
    ]
    assert argv("memvid_session", file="/data/kb.mv2", start="research") == [
        "session",
        "/data/kb.mv2",
        "--start",
        "research",
    ]
    assert argv("memvid_status") == ["status"]


def test_crypto_and_utility_argv():
    assert argv("memvid_lock", file="/data/kb.mv2", output="/data/kb.mv2e", password="s3cret") == [
        "lock",
        "--output",
        "/data/kb.mv2e",
        "/data/kb.mv2",
        "--password",
        "s3cret",
    ]
    assert argv("memvid_verify_single_file", file="/data/kb.mv2", frame_id=9) == [
        "verify-single-file",
        "/data/kb.mv2",
        "9",
    ]
    assert argv("memvid_version") == ["version"]


@pytest.mark.parametrize(
    "name, arguments",
    [
        ("memvid_stats", {"file": "/data/kb.mv2", "unexpected": 1}),
        ("memvid_view", {"file": "/data/kb.mv2", "frame_id": -1}),
        ("memvid_find", {"file": "/data/kb.mv2", "query": ""}),
        ("memvid_find", {"file": "/data/kb.mv2", "query": "q", "mode": "fuzzy"}),
        ("memvid_find", {"file": "/data/kb.mv2", "query": "q", "limit": 0}),
        ("memvid_api_fetch", {"file": "/data/kb.mv2", "url": "not a url"}),
        ("memvid_export", {"file": "/data/kb.mv2", "output": "/etc/out.json"}),
        ("memvid_put", {"file": "/data/kb.mv2", "input": "/data/docs", "log": "../put.log"}),
        ("memvid_unlock", {"file": "/data/kb.mv2e", "output": "/root/kb.mv2"}),
        ("memvid_status", {"file": "/data/kb.mv2"}),
    ],
)
def test_invalid_arguments_rejected(name, arguments):
    with pytest.raises(ValidationError):
        TOOLS[name].params.model_validate(arguments)
