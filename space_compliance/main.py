"""
Space Compliance Engine — Main Entry Point

Assess a profile directly (CLI):
    python -m space_compliance assess uk_space_act profile.json [assessments.json]

Check the shipped catalogs:
    python -m space_compliance lint

Run as an API server:
    python -m space_compliance --serve
    # or: uvicorn space_compliance.api:app --reload --port 8000

Or import and run programmatically:
    from space_compliance.main import run
    result = run("eu_space_act", "path/to/profile.json")
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from space_compliance.catalog.lint import lint_catalog
from space_compliance.catalog.loader import load_all_catalogs
from space_compliance.config import get_settings
from space_compliance.models.enums import Framework
from space_compliance.models.schemas import AssessmentResult
from space_compliance.orchestration.runner import perform_assessment
from space_compliance.utils.logger import setup_logging


def _read_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def run(framework: str, profile_path: str, assessments_path: str = "") -> AssessmentResult:
    """Assess the profile in ``profile_path`` and log a summary."""
    setup_logging(get_settings().log_level)
    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("  SPACE COMPLIANCE ASSESSMENT")
    logger.info(f"  Framework: {framework} | Started: {datetime.now(timezone.utc).isoformat()}")
    logger.info("=" * 60)

    profile = _read_json(profile_path)
    assessments = _read_json(assessments_path) if assessments_path else []
    result = perform_assessment(framework, profile, assessments)

    _print_summary(result)
    return result


def _print_summary(result: AssessmentResult) -> None:
    """Print a human-readable summary of the assessment."""
    logger = logging.getLogger(__name__)

    logger.info("")
    logger.info("-" * 60)
    logger.info("  ASSESSMENT RESULT SUMMARY")
    logger.info("-" * 60)
    logger.info(f"  Framework:      {result.framework.value} v{result.catalog_version}")
    logger.info(f"  Catalog SHA256: {result.catalog_fingerprint[:16]}...")
    logger.info(f"  Applicable:     {len(result.applicable_requirements)} requirements")
    logger.info(f"  Overall Score:  {result.score.overall}")
    logger.info(f"  Mandatory:      {result.score.mandatory}")
    logger.info(f"  Risk Level:     {result.risk_level.value}")
    logger.info(f"  Gaps:           {len(result.gap_analysis)}")
    if result.required_licenses:
        logger.info(f"  Licences:       {', '.join(result.required_licenses)}")
    if result.required_agencies:
        logger.info(f"  Agencies:       {', '.join(result.required_agencies)}")
    logger.info("-" * 60)

    for module in result.module_statuses:
        logger.info(f"    {module.id} {module.name:<28} {module.status.value:<15} {module.summary}")

    for j in result.jurisdiction_results:
        applies = "applies" if j.is_applicable else "n/a"
        logger.info(f"    {j.code:<3} {j.name:<16} {applies:<8} favorability {j.favorability_score:>3}  {j.estimated_cost}")

    logger.info(f"\n  Recommendations: {len(result.recommendations)}")
    for rec in result.recommendations:
        logger.info(f"    - {rec}")
    logger.info("")


def lint() -> int:
    """Lint every shipped catalog; returns the number of warnings."""
    setup_logging(get_settings().log_level)
    logger = logging.getLogger(__name__)

    total = 0
    for fw, catalog in load_all_catalogs().items():
        warnings = lint_catalog(catalog)
        total += len(warnings)
        logger.info(f"{fw.value}: {len(catalog.requirements)} requirements, {len(warnings)} warning(s)")
        for w in warnings:
            logger.warning(f"  [{w.check}] {w.requirement_id or '-'}: {w.message}")
    return total


def serve(host: str = "", port: int = 0) -> None:
    """Start the FastAPI server."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    host = host or settings.api_host
    port = port or settings.api_port
    logger.info(f"Starting API server on {host}:{port}")
    uvicorn.run("space_compliance.api:app", host=host, port=port, reload=settings.debug)


# ── CLI entry point ──────────────────────────────────────

def cli(argv: list[str] | None = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Space regulatory compliance engine")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API instead")
    commands = parser.add_subparsers(dest="command")

    assess = commands.add_parser("assess", help="Assess a profile JSON file against one framework")
    assess.add_argument("framework", help=" | ".join(fw.value for fw in Framework))
    assess.add_argument("profile", help="Path to the operator profile JSON")
    assess.add_argument("assessments", nargs="?", default="", help="Path to a JSON list of assessments")

    commands.add_parser("lint", help="Check the shipped catalogs for data-quality problems")

    args = parser.parse_args(argv)
    if args.serve:
        serve()
        return 0
    if args.command == "assess":
        run(args.framework, args.profile, args.assessments)
        return 0
    if args.command == "lint":
        return 1 if lint() else 0
    parser.print_usage()
    return 2
