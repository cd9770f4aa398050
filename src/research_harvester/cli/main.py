from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from ..config import get_settings
from ..core.coordinator import coordinate
from ..core.merge import merge_findings, rank_by_confidence
from ..errors import ConfigurationError
from ..io import dump_result_file, load_manual_findings
from ..models import DOMAIN_CATEGORIES, DomainResult, Finding, ResearchOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="research-harvest",
        description="Collect confidence-ranked reference findings for a topic across research domains.",
    )
    parser.add_argument("topic", help="Research topic, e.g. 'React' or 'FastAPI'")
    parser.add_argument(
        "--domains",
        default=",".join(DOMAIN_CATEGORIES),
        help=f"Comma-separated domain categories (default: {','.join(DOMAIN_CATEGORIES)})",
    )
    parser.add_argument("--concurrency", type=int, default=None, help="Max domains researched at once (1-10)")
    parser.add_argument(
        "--lock",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Locked decision, e.g. technology_stack=Django (repeatable)",
    )
    parser.add_argument("--manual", default="", help="JSON file with manual findings to merge")
    parser.add_argument(
        "--out",
        default="research/output/findings.json",
        help="Output JSON file path (default: research/output/findings.json)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    return parser


def _parse_locks(values: list[str]) -> dict[str, str]:
    locks: dict[str, str] = {}
    for raw in values:
        key, sep, value = raw.partition("=")
        if not sep or not key.strip() or not value.strip():
            raise ConfigurationError(f"invalid --lock value {raw!r}; expected KEY=VALUE")
        locks[key.strip()] = value.strip()
    return locks


def _merge_manual(results: dict[str, DomainResult], manual: list[Finding]) -> None:
    for category, result in results.items():
        # Manual findings without a category apply to every domain; each domain gets its own copy.
        extra = [
            dataclasses.replace(f, domain_category=category, alternate_sources=list(f.alternate_sources))
            for f in manual
            if not f.domain_category or f.domain_category == category
        ]
        if extra:
            result.findings = merge_findings(result.findings, extra)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = get_settings()
    except ValueError as exc:
        print(f"error: invalid environment configuration: {exc}", file=sys.stderr)
        return 2
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    output_path = Path(args.out).resolve()

    manual: list[Finding] = []
    if args.manual:
        manual_path = Path(args.manual).resolve()
        if not manual_path.exists() or not manual_path.is_file():
            print(f"error: manual findings file not found: {manual_path}", file=sys.stderr)
            return 2
        try:
            manual = load_manual_findings(manual_path)
        except Exception as exc:
            print(f"error: invalid manual findings: {exc}", file=sys.stderr)
            return 2

    try:
        domains = [item for item in args.domains.split(",") if item.strip()]
        results = coordinate(
            args.topic,
            domains,
            constraints=_parse_locks(args.lock),
            options=ResearchOptions.from_settings(settings),
            concurrency=args.concurrency,
        )
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if manual:
        _merge_manual(results, manual)

    payload: dict[str, object] = {"topic": args.topic, "domains": {}}
    for category, result in results.items():
        result.findings = rank_by_confidence(result.findings)
        payload["domains"][category] = result.to_payload()  # type: ignore[index]
        status = f"error={result.error}" if result.failed else "ok"
        print(f"{category.lower()}: findings={len(result.findings)} {status}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    dump_result_file(output_path, payload)
    print(f"wrote={output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
