"""
Command-line interface for running a sample batch end to end.

Usage:
    labflow run --input <file_path> [options]
    labflow playbook <code>
"""

import argparse
import sys
from pathlib import Path

import yaml

from labflow.config import load_settings
from labflow.core.errors import PLAYBOOKS, ErrorCode
from labflow.core.rules import GateConfig, GateConfigLoader
from labflow.intake import SUPPORTED_FORMATS, detect_format
from labflow.observability.logger import get_logger, setup_logger
from labflow.observability.metrics import generate_metrics
from labflow.pipeline import Pipeline

logger = get_logger(__name__)


def _load_gate_config(rules_path: str | Path | None) -> GateConfig:
    if not rules_path:
        return GateConfig()
    return GateConfigLoader(rules_path).load()


def run_command(args, settings) -> int:
    """
    Execute the run command.

    Args:
        args: Command-line arguments
        settings: PipelineSettings supplying defaults

    Returns:
        Process exit code
    """
    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {args.input}")
        return 1

    file_format = args.format or detect_format(input_path)
    sla_ms = settings.sla_ms if args.sla_ms is None else args.sla_ms
    if sla_ms < 0:
        logger.error(f"SLA threshold must be non-negative, got {sla_ms}")
        return 1

    try:
        config = _load_gate_config(args.rules or settings.rules_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Invalid gate configuration: {e}")
        return 1

    logger.info(f"Input file: {input_path} ({file_format})")
    try:
        raw = input_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read input file {args.input}: {e}")
        return 1

    pipeline = Pipeline(config=config)
    result = pipeline.intake(raw, file_format)
    if not result.ok:
        logger.error(f"Intake failed: {result.message}")
        _write_audit(pipeline, args)
        return 1

    processed = pipeline.process()
    acks = pipeline.reconcile(sla_ms)
    view = pipeline.dashboard()
    metrics = pipeline.metrics()

    logger.info("=" * 60)
    logger.info(f"RUN COMPLETE: {result.run_id}")
    logger.info("=" * 60)
    logger.info(f"Total records: {metrics.total}")
    logger.info(f"Valid records: {metrics.valid_count}")
    logger.info(f"Quarantined records: {metrics.quarantine_count}")
    logger.info(f"Validation errors: {metrics.error_count} ({view.error_rate_percent}%)")
    for code, count in sorted(metrics.error_count_by_code.items()):
        logger.info(f"  {code}: {count}")
    logger.info(f"Processed records: {processed}")
    logger.info(f"Acknowledged: {metrics.acked_count}/{acks}")
    logger.info(f"SLA breaches ({sla_ms}ms): {metrics.sla_breach_count} ({view.sla_breach_rate_percent}%)")
    logger.info("=" * 60)

    _write_audit(pipeline, args)
    if args.metrics_out:
        Path(args.metrics_out).write_bytes(generate_metrics())
        logger.info(f"Metrics written to {args.metrics_out}")
    return 0


def _write_audit(pipeline: Pipeline, args) -> None:
    if args.audit_csv:
        Path(args.audit_csv).write_text(pipeline.export_audit_csv(), encoding="utf-8")
        logger.info(f"Audit CSV written to {args.audit_csv}")
    if args.audit_json:
        Path(args.audit_json).write_text(pipeline.export_audit_json(), encoding="utf-8")
        logger.info(f"Audit JSON written to {args.audit_json}")


def playbook_command(args) -> int:
    """Print the remediation steps for an error code."""
    try:
        code = ErrorCode(args.code.upper())
    except ValueError:
        logger.error(f"Unknown error code: {args.code}")
        return 1

    playbook = PLAYBOOKS[code]
    print(f"{code.value} {playbook['title']}")
    for step, fix in enumerate(playbook["fix"], start=1):
        print(f"  {step}. {fix}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="labflow",
        description="Clinical sample quality pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run a JSON batch
  labflow run --input data/samples.json

  # Run an XML batch with a stricter SLA and keep the audit trail
  labflow run --input data/samples.xml --sla-ms 1000 --audit-csv audit.csv

  # Use custom reference data
  labflow run --input data/samples.json --rules config/quality_gate.yaml

  # Show how to fix an error code
  labflow playbook E004
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Ingest, validate, process and reconcile a batch")
    run_parser.add_argument(
        "--input",
        required=True,
        help="Path to input file"
    )
    run_parser.add_argument(
        "--format",
        choices=list(SUPPORTED_FORMATS),
        help="Input format (default: from the file extension)"
    )
    run_parser.add_argument(
        "--sla-ms",
        type=int,
        help="Acknowledgment SLA threshold in milliseconds (default: LABFLOW_SLA_MS or 1500)"
    )
    run_parser.add_argument(
        "--audit-csv",
        help="Write the audit trail as CSV to this path"
    )
    run_parser.add_argument(
        "--audit-json",
        help="Write the audit trail as JSON to this path"
    )
    run_parser.add_argument(
        "--rules",
        help="Quality gate YAML file (default: LABFLOW_RULES_PATH)"
    )
    run_parser.add_argument(
        "--metrics-out",
        help="Write Prometheus metrics in text format to this path"
    )

    playbook_parser = subparsers.add_parser("playbook", help="Show remediation steps for an error code")
    playbook_parser.add_argument("code", help="Error code, e.g. E001")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = load_settings()
    setup_logger(level=settings.log_level, format_type=settings.log_format)

    if args.command == "run":
        return run_command(args, settings)
    return playbook_command(args)


if __name__ == "__main__":
    sys.exit(main())
