from __future__ import annotations

import json

from research_harvester import config
from research_harvester.cli import main as cli_main
from research_harvester.models import DomainResult, Finding


def _fake_coordinate(calls: list[dict]):
    def fake(topic, domain_categories=None, **kwargs):
        calls.append({"topic": topic, "domains": list(domain_categories or []), **kwargs})
        results = {}
        for category in domain_categories:
            category = category.strip().upper()
            if category == "PITFALLS":
                results[category] = DomainResult(domain_category=category, error="AcquireError: no usable content")
                continue
            results[category] = DomainResult(
                domain_category=category,
                findings=[
                    Finding(content="Community write-up", source_url="https://medium.com/@dev/react", domain_category=category),
                    Finding(content="Official docs", source_url="https://react.dev/learn", domain_category=category),
                ],
            )
        return results

    return fake


def test_research_harvest_cli_smoke(tmp_path, monkeypatch, capsys) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(cli_main, "coordinate", _fake_coordinate(calls))
    manual_path = tmp_path / "manual.json"
    output_path = tmp_path / "out" / "findings.json"
    manual_path.write_text(
        json.dumps(
            [
                {
                    "source_url": "https://react.dev/learn",
                    "content": "Curated notes on the React tutorial",
                    "domain_category": "STACK",
                    "verified": True,
                },
                {"url": "https://example.com/checklist", "content": "Team checklist"},
            ]
        ),
        encoding="utf-8",
    )

    code = cli_main.main(
        [
            "React",
            "--domains",
            "STACK,PITFALLS",
            "--concurrency",
            "2",
            "--lock",
            "technology_stack=Next.js",
            "--manual",
            str(manual_path),
            "--out",
            str(output_path),
        ]
    )

    assert code == 0
    assert calls[0]["topic"] == "React"
    assert calls[0]["concurrency"] == 2
    assert calls[0]["constraints"] == {"technology_stack": "Next.js"}

    result = json.loads(output_path.read_text(encoding="utf-8"))
    stack = result["domains"]["STACK"]
    assert result["topic"] == "React"
    assert stack["error"] is None
    assert [item["source_url"] for item in stack["findings"]] == [
        "https://react.dev/learn",
        "https://medium.com/@dev/react",
        "https://example.com/checklist",
    ]
    assert stack["findings"][0]["content"] == "Curated notes on the React tutorial"
    assert stack["findings"][0]["confidence_level"] == "HIGH"

    pitfalls = result["domains"]["PITFALLS"]
    assert pitfalls["error"] == "AcquireError: no usable content"
    # Uncategorized manual findings apply to every domain.
    assert [item["source_url"] for item in pitfalls["findings"]] == ["https://example.com/checklist"]
    assert pitfalls["findings"][0]["domain_category"] == "PITFALLS"

    out = capsys.readouterr().out
    assert "stack: findings=3 ok" in out
    assert "pitfalls: findings=1 error=AcquireError: no usable content" in out


def test_cli_rejects_missing_manual_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(cli_main, "coordinate", _fake_coordinate([]))
    code = cli_main.main(["React", "--manual", str(tmp_path / "nope.json"), "--out", str(tmp_path / "o.json")])
    assert code == 2


def test_cli_reports_configuration_errors(tmp_path) -> None:
    code = cli_main.main(["React", "--concurrency", "0", "--out", str(tmp_path / "o.json")])
    assert code == 2
    assert not (tmp_path / "o.json").exists()


def test_cli_reports_malformed_environment(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("RESEARCH_CONCURRENCY", "abc")
    monkeypatch.setattr(cli_main, "get_settings", config.Settings)

    code = cli_main.main(["React", "--out", str(tmp_path / "o.json")])

    assert code == 2
    assert "invalid environment configuration" in capsys.readouterr().err
    assert not (tmp_path / "o.json").exists()
