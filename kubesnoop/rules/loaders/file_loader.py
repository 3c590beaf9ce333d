"""
File-based rule loader.

Loads rule definitions from YAML or JSON files and syncs them into a rule store.
A file holds either a top-level list of rules or a mapping with a ``rules:`` list.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from kubesnoop.core.errors import RuleFileError
from kubesnoop.rules.interface import RuleStore
from kubesnoop.rules.models import SecurityRule

logger = structlog.get_logger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


@dataclass
class ImportSummary:
    added: int = 0
    updated: int = 0


def _parse(content: str, path: Path) -> Any:
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(content)
        return json.loads(content)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise RuleFileError(f"Failed to parse {path}: {e}") from e


def parse_rules(data: Any, source: str = "<data>") -> list[SecurityRule]:
    """
    Build rules from parsed file content.

    Entries that fail validation are logged and skipped.
    """
    if isinstance(data, dict) and "rules" in data:
        data = data["rules"]
    if data is None:
        return []
    if not isinstance(data, list):
        raise RuleFileError(f"Rules must be a list in {source}")

    rules: list[SecurityRule] = []
    for index, rule_data in enumerate(data):
        if not isinstance(rule_data, dict):
            logger.warning("rule_entry_skipped", source=source, index=index, reason="not a mapping")
            continue
        try:
            # Ids belong to the store the rules are imported into
            rule_data = {key: value for key, value in rule_data.items() if key != "id"}
            rules.append(SecurityRule.model_validate(rule_data))
        except ValidationError as e:
            logger.error("rule_entry_invalid", source=source, index=index, name=rule_data.get("name"), error=str(e))
            continue
    return rules


def load_rules(path: str | Path) -> list[SecurityRule]:
    """
    Load rule definitions from a YAML or JSON file.

    Raises:
        RuleFileError: if the file is missing, unreadable or not a rules document.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleFileError(f"Cannot read rules file {path}: {e}") from e

    rules = parse_rules(_parse(content, path), source=str(path))
    logger.info("rules_loaded", path=str(path), count=len(rules))
    return rules


def sync_rules(store: RuleStore, rules: list[SecurityRule]) -> ImportSummary:
    """Upsert rules into a store by name."""
    summary = ImportSummary()
    for rule in rules:
        existing = store.get_rule_by_name(rule.name)
        if existing is not None and existing.id is not None:
            store.update(existing.id, rule)
            summary.updated += 1
        else:
            store.add(rule)
            summary.added += 1
    return summary


def import_rules(store: RuleStore, path: str | Path) -> ImportSummary:
    """
    Import rules from a file; rules whose name already exists are updated.

    Returns:
        ImportSummary with counts of added and updated rules
    """
    summary = sync_rules(store, load_rules(path))
    logger.info("rules_imported", path=str(path), added=summary.added, updated=summary.updated)
    return summary


def dump_rules(rules: list[SecurityRule], fmt: str = "json") -> str:
    data = [rule.model_dump(mode="json") for rule in rules]
    if fmt == "yaml":
        return yaml.safe_dump({"rules": data}, sort_keys=False, allow_unicode=True)
    return json.dumps(data, indent=4)


def export_rules(store: RuleStore, path: str | Path | None = None) -> str:
    """
    Export every rule in the store, disabled ones included.

    The format follows the file suffix (YAML for .yaml/.yml, JSON otherwise).
    Without a path the JSON text is only returned.
    """
    rules = store.get_rules()
    if path is None:
        return dump_rules(rules)

    path = Path(path)
    content = dump_rules(rules, "yaml" if path.suffix.lower() in YAML_SUFFIXES else "json")
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise RuleFileError(f"Cannot write rules file {path}: {e}") from e
    logger.info("rules_exported", path=str(path), count=len(rules))
    return content
