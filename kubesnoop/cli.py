"""
Command-line interface for kubesnoop.

Subcommands:
  rules list [RULE_TYPE]          List rules, optionally for one resource type
  rules show RULE_ID              Show one rule in full
  rules toggle RULE_ID true|false Enable or disable a rule
  rules import FILE               Upsert rules by name from a YAML or JSON file
  rules export [FILE]             Write every rule to FILE, or print JSON
  rules delete RULE_ID            Delete a rule
  evaluate SNAPSHOT               Evaluate a cluster snapshot file
"""

import argparse
import json
import sys

import structlog
import yaml

from kubesnoop import __version__
from kubesnoop.collector.snapshot import ClusterSnapshot
from kubesnoop.core.config import config
from kubesnoop.core.errors import (
    DuplicateRuleError,
    RuleFileError,
    RuleNotFoundError,
    RuleStoreUnavailableError,
)
from kubesnoop.core.utils.logging import configure_logging
from kubesnoop.rules.engine import EvaluationEngine
from kubesnoop.rules.interface import RuleStore
from kubesnoop.rules.loaders.file_loader import export_rules, import_rules
from kubesnoop.rules.stores import create_rule_store

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_FINDINGS = 2


def _parse_enabled(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "on", "yes", "1"):
        return True
    if lowered in ("false", "off", "no", "0"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kubesnoop",
        description="kubesnoop - Kubernetes security configuration analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kubesnoop rules list pod
  kubesnoop rules toggle 3 false
  kubesnoop rules export rules.yaml
  kubesnoop evaluate snapshot.json --fail-on-findings
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    _setup_rules_subcommands(subparsers)
    _setup_evaluate_subcommand(subparsers)
    return parser


def _setup_rules_subcommands(subparsers) -> None:
    rules_parser = subparsers.add_parser("rules", help="Manage security rules")
    rules_subparsers = rules_parser.add_subparsers(dest="rules_command", help="Rule commands")

    list_parser = rules_subparsers.add_parser("list", help="List rules")
    list_parser.add_argument("rule_type", nargs="?", help="Resource type, e.g. pod or service")
    list_parser.add_argument("--enabled-only", action="store_true", help="Hide disabled rules")

    show_parser = rules_subparsers.add_parser("show", help="Show one rule")
    show_parser.add_argument("rule_id", type=int)

    toggle_parser = rules_subparsers.add_parser("toggle", help="Enable or disable a rule")
    toggle_parser.add_argument("rule_id", type=int)
    toggle_parser.add_argument("enabled", type=_parse_enabled, help="true or false")

    import_parser = rules_subparsers.add_parser("import", help="Import rules from a YAML or JSON file")
    import_parser.add_argument("file")

    export_parser = rules_subparsers.add_parser("export", help="Export rules to a file, or print them as JSON")
    export_parser.add_argument("file", nargs="?")

    delete_parser = rules_subparsers.add_parser("delete", help="Delete a rule")
    delete_parser.add_argument("rule_id", type=int)


def _setup_evaluate_subcommand(subparsers) -> None:
    evaluate_parser = subparsers.add_parser("evaluate", help="Evaluate a cluster snapshot file")
    evaluate_parser.add_argument("snapshot", help="YAML or JSON snapshot file")
    evaluate_parser.add_argument("--format", choices=["text", "json"], default="text", dest="output_format")
    evaluate_parser.add_argument(
        "--fail-on-findings",
        action="store_true",
        help=f"Exit with status {EXIT_FINDINGS} when any finding is reported",
    )


# --- Rule commands ---


def _rules_list(store: RuleStore, args: argparse.Namespace) -> int:
    rules = store.get_enabled_rules(args.rule_type) if args.enabled_only else store.get_rules(args.rule_type)
    if not rules:
        print("No rules found.")
        return EXIT_OK

    print(f"{'ID':<5} {'NAME':<28} {'TYPE':<10} {'SEVERITY':<9} {'ENABLED':<8} CATEGORY")
    for rule in rules:
        enabled = "yes" if rule.enabled else "no"
        severity = rule.severity.value
        print(f"{rule.id:<5} {rule.name:<28} {rule.rule_type:<10} {severity:<9} {enabled:<8} {rule.category}")
    return EXIT_OK


def _rules_show(store: RuleStore, args: argparse.Namespace) -> int:
    rule = store.get_rule(args.rule_id)
    print(yaml.safe_dump(rule.model_dump(mode="json"), sort_keys=False, allow_unicode=True), end="")
    return EXIT_OK


def _rules_toggle(store: RuleStore, args: argparse.Namespace) -> int:
    rule = store.set_enabled(args.rule_id, args.enabled)
    print(f"Rule {rule.id} ({rule.name}) {'enabled' if rule.enabled else 'disabled'}.")
    return EXIT_OK


def _rules_import(store: RuleStore, args: argparse.Namespace) -> int:
    summary = import_rules(store, args.file)
    print(f"Imported rules from {args.file}: {summary.added} added, {summary.updated} updated.")
    return EXIT_OK


def _rules_export(store: RuleStore, args: argparse.Namespace) -> int:
    content = export_rules(store, args.file)
    if args.file is None:
        print(content)
    else:
        print(f"Exported {len(store.get_rules())} rules to {args.file}.")
    return EXIT_OK


def _rules_delete(store: RuleStore, args: argparse.Namespace) -> int:
    store.delete(args.rule_id)
    print(f"Rule {args.rule_id} deleted.")
    return EXIT_OK


RULE_COMMANDS = {
    "list": _rules_list,
    "show": _rules_show,
    "toggle": _rules_toggle,
    "import": _rules_import,
    "export": _rules_export,
    "delete": _rules_delete,
}


# --- Evaluation ---


def _evaluate(store: RuleStore, args: argparse.Namespace) -> int:
    try:
        snapshot = ClusterSnapshot.from_file(args.snapshot)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise RuleFileError(f"Cannot read snapshot {args.snapshot}: {e}") from e

    engine = EvaluationEngine(store)
    findings = engine.evaluate_all(snapshot)
    summary = engine.summarize(findings)

    if args.output_format == "json":
        payload = {
            "findings": [finding.model_dump(mode="json") for finding in findings],
            "summary": summary.model_dump(),
        }
        print(json.dumps(payload, indent=4))
    else:
        for finding in findings:
            print(f"[{finding.severity.value}] {finding.resource}: {finding.message}")
        print(f"{summary.total} findings ({summary.high} high, {summary.medium} medium, {summary.low} low)")

    if args.fail_on_findings and findings:
        return EXIT_FINDINGS
    return EXIT_OK


def main(argv: list[str] | None = None, store: RuleStore | None = None) -> int:
    """
    Run the CLI and return the exit status.

    Args:
        argv: Arguments without the program name; defaults to ``sys.argv[1:]``
        store: Rule store to use; defaults to the configured store
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None or (args.command == "rules" and args.rules_command is None):
        parser.print_help()
        return EXIT_ERROR

    if store is None:
        configure_logging(config.logging)
        config.validate()
        store = create_rule_store(config.rule_store)

    try:
        if args.command == "evaluate":
            return _evaluate(store, args)
        return RULE_COMMANDS[args.rules_command](store, args)
    except (RuleNotFoundError, DuplicateRuleError, RuleFileError, RuleStoreUnavailableError) as e:
        logger.error("command_failed", command=args.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
