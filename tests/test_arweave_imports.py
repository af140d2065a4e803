"""
Tests for the Arweave import queue.
"""
from press_sync.arweave_imports import list_arweave_queue, queue_arweave_imports
from press_sync.models import ArweaveImport

T = 1_760_000_000


class TestQueueArweaveImports:

    def test_pasted_text_is_trimmed_and_blank_lines_dropped(self, make_config, db_session):
        pasted = "  arTX1  \r\n\narTX2\n   \narTX3\r"

        result = queue_arweave_imports(pasted, make_config(), now=T)

        assert result["ok"] is True
        assert result["queued"] == 3
        assert [e["tx"] for e in result["entries"]] == ["arTX1", "arTX2", "arTX3"]
        assert all(e["status"] == "queued" and e["ts"] == T for e in result["entries"])
        assert db_session.query(ArweaveImport).count() == 3

    def test_records_configured_fee_and_bond(self, make_config):
        config = make_config(arweave_import_fee_wei="7", arweave_import_bond_wei="11")

        entry = queue_arweave_imports(["arTX1"], config, now=T)["entries"][0]

        assert entry["fee_wei"] == "7"
        assert entry["bond_wei"] == "11"

    def test_appends_to_existing_queue(self, make_config):
        queue_arweave_imports(["arTX1"], make_config(), now=T)
        queue_arweave_imports(["arTX1", "arTX2"], make_config(), now=T + 5)

        queue = list_arweave_queue()

        assert queue["count"] == 3
        assert [(e["tx"], e["ts"]) for e in queue["entries"]] == [
            ("arTX1", T), ("arTX1", T + 5), ("arTX2", T + 5),
        ]

    def test_nothing_to_queue(self, make_config, db_session):
        result = queue_arweave_imports(" \n \n", make_config())

        assert result["ok"] is False
        assert result["error_kind"] == "validation_error"
        assert db_session.query(ArweaveImport).count() == 0

    def test_defaults_from_saved_config(self, data_dir):
        (data_dir / "config.json").write_text('{"arweave_import_fee_wei": "42"}')

        entry = queue_arweave_imports(["arTX9"], now=T)["entries"][0]

        assert entry["fee_wei"] == "42"
        assert entry["bond_wei"] == "5000000000000000000"


def test_empty_queue():
    assert list_arweave_queue() == {"ok": True, "count": 0, "entries": []}
