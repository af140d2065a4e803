"""
Tests for the press-sync CLI.

Commands print JSON and exit with 0 (ok), 1 (rejected or no-op) or 2 (error).
"""
import json
from unittest.mock import patch, MagicMock

import pytest

from press_sync.cli import main
from press_sync.models import Article


def _run(capsys, argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code, json.loads(capsys.readouterr().out)


def _write_full_config(data_dir):
    (data_dir / "config.json").write_text(json.dumps({
        "gateway_url": "https://gateway.test",
        "installer_api": "https://installer.test",
        "press_token": "0xPRESSTOKEN",
        "treasury_wallet": "0xTREASURY",
        "ai_endpoint": "https://oracle.test/api/moderate",
    }))


def _mock_response(json_data):
    resp = MagicMock()
    resp.status_code = 200
    resp.text = ""
    resp.json.return_value = json_data
    return resp


class TestSubmit:

    def test_invalid_txid_exits_2(self, capsys):
        code, out = _run(capsys, ["submit", "--title", "T", "--content", "C", "--txid", "nothex"])
        assert code == 2
        assert out["error_kind"] == "validation_error"

    def test_unconfigured_outlet_exits_2(self, capsys):
        code, out = _run(capsys, ["submit", "--title", "T", "--content", "C", "--txid", "0xabc"])
        assert code == 2
        assert out["error_kind"] == "configuration_error"

    @patch("press_sync.gateway_client.requests.post")
    def test_payment_rejection_exits_1(self, mock_post, capsys, data_dir):
        _write_full_config(data_dir)
        mock_post.return_value = _mock_response({"ok": False})

        code, out = _run(capsys, ["submit", "--title", "T", "--content", "C", "--txid", "0xabc"])

        assert code == 1
        assert out["error_kind"] == "payment_verification_error"
        assert out["status"] == "rejected"

    @patch("press_sync.gateway_client.requests.post")
    def test_published_exits_0(self, mock_post, capsys, data_dir, tmp_path):
        _write_full_config(data_dir)
        body = tmp_path / "article.txt"
        body.write_text("A long article body.")
        mock_post.side_effect = [
            _mock_response({"ok": True}),
            _mock_response({"ok": True, "reason": "OK"}),
        ]

        code, out = _run(capsys, [
            "submit", "--title", "T", "--content-file", str(body), "--txid", "0xabc",
        ])

        assert code == 0
        assert out["status"] == "published"

    def test_unreadable_content_file(self, capsys, tmp_path):
        code, out = _run(capsys, [
            "submit", "--title", "T", "--content-file", str(tmp_path / "missing.txt"), "--txid", "0xabc",
        ])
        assert code == 2
        assert "Cannot read content file" in out["error"]


class TestVotesAndCoauthor:

    def test_votes_set_then_read(self, capsys, db_session):
        article = Article(title="T", content="C", visibility="public")
        db_session.add(article)
        db_session.commit()

        code, out = _run(capsys, ["votes-set", str(article.id), "--editor", "4"])
        assert code == 0
        assert out["counts"]["editor"] == 4

        code, out = _run(capsys, ["votes", str(article.id)])
        assert code == 0
        assert out["counts"]["editor"] == 4
        assert out["source"] == "local"

    def test_votes_set_requires_a_role(self, capsys):
        code, out = _run(capsys, ["votes-set", "1"])
        assert code == 2

    def test_coauthor_repeat_exits_1(self, capsys, db_session):
        article = Article(title="T", content="C", visibility="public")
        db_session.add(article)
        db_session.commit()

        code, _ = _run(capsys, ["coauthor", str(article.id), "--wallet", "0xW"])
        assert code == 0
        code, out = _run(capsys, ["coauthor", str(article.id), "--wallet", "0xW"])
        assert code == 1
        assert out["error_kind"] == "no_op"


class TestQueueAndOutlet:

    def test_queue_empty(self, capsys):
        code, out = _run(capsys, ["queue", "--status", "published"])
        assert code == 0
        assert out["count"] == 0

    def test_stats(self, capsys):
        code, out = _run(capsys, ["stats"])
        assert code == 0
        assert set(out["counts"]) == {
            "awaiting_payment_verification", "awaiting_moderation", "published", "rejected",
        }

    def test_outlet_without_action(self, capsys):
        code, out = _run(capsys, ["outlet"])
        assert code == 2
        assert out["ok"] is False

    def test_outlet_ping(self, capsys):
        code, out = _run(capsys, ["outlet", "ping"])
        assert code == 0
        assert out["rpc"] == "https://rpc.pressblockchain.io"

    def test_arweave_queue_and_list(self, capsys, tmp_path):
        ids_file = tmp_path / "ids.txt"
        ids_file.write_text("arTX2\n\n  arTX3 \n")

        code, out = _run(capsys, ["arweave", "queue", "arTX1", "--file", str(ids_file)])
        assert code == 0
        assert out["queued"] == 3

        code, out = _run(capsys, ["arweave", "list"])
        assert code == 0
        assert [e["tx"] for e in out["entries"]] == ["arTX1", "arTX2", "arTX3"]

    def test_arweave_queue_without_ids(self, capsys):
        code, out = _run(capsys, ["arweave", "queue"])
        assert code == 2
        assert out["error_kind"] == "validation_error"

    def test_arweave_without_action(self, capsys):
        code, out = _run(capsys, ["arweave"])
        assert code == 2
        assert out["ok"] is False

    @patch("press_sync.gateway_client.requests.post")
    def test_outlet_create(self, mock_post, capsys, data_dir):
        mock_post.return_value = _mock_response({"ok": True, "outlet_id": 1})

        code, out = _run(capsys, ["outlet", "create", "--name", "Ledger", "--domain", "ledger.news"])

        assert code == 0
        saved = json.loads((data_dir / "config.json").read_text())
        assert saved["outlet_domain"] == "ledger.news"
