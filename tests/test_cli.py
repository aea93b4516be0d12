import json

import pytest

from jsonstream.cli import DEFAULT_SOURCE, build_parser, main

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("restore_logger")]

ENV_VARS = [
    "JSONSTREAM_FRAMING",
    "JSONSTREAM_CHUNK_SIZE",
    "JSONSTREAM_ENCODING",
    "JSONSTREAM_CLOSE_DESTINATION",
    "JSONSTREAM_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestCli:
    def test_default_paths_resolve_to_package(self):
        args = build_parser().parse_args([])
        assert args.source == str(DEFAULT_SOURCE)
        assert DEFAULT_SOURCE.exists()
        assert args.fields == "id,title"

    def test_projects_id_and_title(self, write_json, tmp_path, sample_records):
        source = write_json(sample_records)
        dest = tmp_path / "out.json"
        assert main([str(source), str(dest), "--verify"]) == 0
        assert json.loads(dest.read_text(encoding="utf-8")) == [
            {"id": 1, "title": "A"},
            {"id": 2, "title": "B"},
        ]

    def test_bundled_data(self, tmp_path):
        dest = tmp_path / "out.json"
        assert main([str(DEFAULT_SOURCE), str(dest)]) == 0
        output = json.loads(dest.read_text(encoding="utf-8"))
        assert output
        assert all(set(record) == {"id", "title"} for record in output)

    def test_custom_fields_and_identity(self, write_json, tmp_path, sample_records):
        source = write_json(sample_records)
        dest = tmp_path / "out.json"
        assert main([str(source), str(dest), "--fields", "extra"]) == 0
        assert json.loads(dest.read_text(encoding="utf-8")) == [
            {"extra": "x"},
            {"extra": "y"},
        ]
        assert main([str(source), str(dest), "--identity"]) == 0
        assert json.loads(dest.read_text(encoding="utf-8")) == sample_records

    def test_missing_source_exit_code(self, tmp_path):
        dest = tmp_path / "out.json"
        assert main([str(tmp_path / "missing.json"), str(dest)]) == 1
        assert not dest.exists()

    def test_chunk_framing_from_env_fails_on_split_input(
        self, clean_env, write_json, tmp_path, sample_records
    ):
        clean_env.setenv("JSONSTREAM_FRAMING", "chunk")
        clean_env.setenv("JSONSTREAM_CHUNK_SIZE", "8")
        source = write_json(sample_records)
        assert main([str(source), str(tmp_path / "out.json")]) == 1

    def test_flags_override_env(self, clean_env, write_json, tmp_path, sample_records):
        clean_env.setenv("JSONSTREAM_FRAMING", "chunk")
        clean_env.setenv("JSONSTREAM_CHUNK_SIZE", "8")
        source = write_json(sample_records)
        dest = tmp_path / "out.json"
        assert main([str(source), str(dest), "--framing", "incremental"]) == 0
        assert len(json.loads(dest.read_text(encoding="utf-8"))) == 2

    def test_invalid_chunk_size(self, write_json, tmp_path):
        source = write_json([])
        assert main([str(source), str(tmp_path / "o.json"), "--chunk-size", "0"]) == 1

    def test_unknown_encoding_from_env(self, clean_env, write_json, tmp_path):
        clean_env.setenv("JSONSTREAM_ENCODING", "bogus")
        source = write_json([])
        dest = tmp_path / "out.json"
        assert main([str(source), str(dest)]) == 1
        assert not dest.exists()

    def test_close_destination_env_is_ignored(
        self, clean_env, write_json, tmp_path, sample_records
    ):
        clean_env.setenv("JSONSTREAM_CLOSE_DESTINATION", "false")
        source = write_json(sample_records)
        dest = tmp_path / "out.json"
        assert main([str(source), str(dest)]) == 0
        assert len(json.loads(dest.read_text(encoding="utf-8"))) == 2
