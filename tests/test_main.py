import io
import json

import pytest

from drop_rules import main as cli
from drop_rules.engine import RuleEngine


@pytest.fixture(autouse=True)
def _offline(monkeypatch, web, tmp_path):
    original_init = RuleEngine.__init__

    def init(self, config=None, registry=None, client=None):
        original_init(self, config, registry, client or web.client())

    monkeypatch.setattr(RuleEngine, "__init__", init)
    monkeypatch.setattr(cli, "setup_logger", lambda *args, **kwargs: None)
    monkeypatch.chdir(tmp_path)


def _run(capsys, argv):
    code = cli.main(argv)
    return code, capsys.readouterr()


def test_list_rules(capsys):
    code, out = _run(capsys, ["--list-rules"])
    assert code == 0
    assert "pinterest.com" in out.out
    assert "reddit" in out.out


def test_enrich_from_flags(capsys):
    code, out = _run(capsys, [
        "--url", "https://www.pinterest.com/pin/123/",
        "--domain", "pinterest.com",
        "--meta", "graph.image=https://img/example.jpg",
    ])
    assert code == 0
    result = json.loads(out.out)
    assert result["drop"]["document_type"] == "photo"
    assert result["drop"]["extra_meta"]["x.picture_url"] == ["https://img/example.jpg"]
    assert result["outcome"]["status"] == "applied"


def test_enrich_from_record_on_stdin(capsys, monkeypatch):
    record = {"url": "https://unknown.example.com/", "title": "T"}
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(record)))

    code, out = _run(capsys, ["--record", "-"])

    assert code == 0
    result = json.loads(out.out)
    assert result["drop"]["title"] == "T"
    assert result["outcome"]["status"] == "skipped"


def test_failed_rule_still_exits_zero(capsys, tmp_path):
    record = tmp_path / "drop.json"
    record.write_text(json.dumps({"url": "https://unsplash.com/photos/abc"}))

    code, out = _run(capsys, ["--record", str(record)])

    assert code == 0
    result = json.loads(out.out)
    assert result["outcome"]["status"] == "failed"
    assert result["outcome"]["error_kind"] == "FetchError"
    assert result["drop"]["document_type"] == "photo"


@pytest.mark.parametrize("argv", [[], ["--url", "https://a.com/", "--meta", "novalue"], ["--record", "missing.json"]])
def test_bad_input(capsys, argv):
    code, out = _run(capsys, argv)
    assert code == 2
    assert "error:" in out.err


def test_help_names_the_dispatch_domain(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--help"])
    assert exc.value.code == 0
    text = " ".join(capsys.readouterr().out.split())
    assert "www.reddit.com needs --domain reddit.com" in text
    assert "matched exactly" in text
