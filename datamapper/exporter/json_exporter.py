"""JSON exporter."""
import json
from datetime import datetime
from pathlib import Path
from typing import List

from datamapper.schema.models import BatchResult, MappingRule
from datamapper.transform.converter import to_iso_string


def _json_default(value):
    if isinstance(value, datetime):
        return to_iso_string(value)
    return str(value)


class JsonExporter:
    """Export mapping outcomes to JSON."""

    def build(self, rules: List[MappingRule], outcomes: List[BatchResult]) -> dict:
        """Document holding metadata, the rules used and one entry per record."""
        failed = sum(1 for outcome in outcomes if not outcome.ok)

        return {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "rules": len(rules),
                "enabled_rules": sum(1 for rule in rules if rule.enabled),
                "records": len(outcomes),
                "records_with_errors": failed,
            },
            "mappings": [rule.to_dict() for rule in rules],
            "results": [outcome.to_dict() for outcome in outcomes],
        }

    def dumps(self, data) -> str:
        """Serialize data the same way export writes it."""
        return json.dumps(data, indent=2, default=_json_default)

    def export(
        self,
        output_file: Path,
        rules: List[MappingRule],
        outcomes: List[BatchResult],
    ) -> None:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(self.build(rules, outcomes), f, indent=2, default=_json_default)
