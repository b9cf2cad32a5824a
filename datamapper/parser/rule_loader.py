"""JSON loader for mapping rules, field lists and source records."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from datamapper.schema.models import DestinationField, MappingRule, SourceField

logger = logging.getLogger(__name__)


class RuleLoader:
    """Load mapping inputs from JSON files."""

    @staticmethod
    def read_json(file_path: Union[str, Path]) -> Any:
        """
        Read a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not valid JSON
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    @staticmethod
    def _items(data: Any, key: str, file_path: Union[str, Path]) -> List[Dict[str, Any]]:
        """Accept either a bare list or an object holding the list under key."""
        if isinstance(data, dict) and key in data:
            data = data[key]
        if not isinstance(data, list):
            raise ValueError(f"Expected a list of {key} in {file_path}")
        return data

    def parse_rules(self, data: Any, origin: str = "<data>") -> List[MappingRule]:
        """Build MappingRule objects from decoded JSON."""
        rules = []
        for index, item in enumerate(self._items(data, "rules", origin)):
            try:
                rules.append(MappingRule.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid rule #{index} in {origin}: {e!r}") from e
        return rules

    def load_rules(self, file_path: Union[str, Path]) -> List[MappingRule]:
        """Load rules from a list or a ``{"rules": [...]}`` document."""
        rules = self.parse_rules(self.read_json(file_path), str(file_path))
        logger.info(f"Loaded {len(rules)} rules from {file_path}")
        return rules

    def load_source_fields(self, file_path: Union[str, Path]) -> List[SourceField]:
        data = self.read_json(file_path)
        return [SourceField.from_dict(item) for item in self._items(data, "fields", file_path)]

    def load_destination_fields(self, file_path: Union[str, Path]) -> List[DestinationField]:
        data = self.read_json(file_path)
        return [DestinationField.from_dict(item) for item in self._items(data, "fields", file_path)]

    def load_records(self, file_path: Union[str, Path]) -> List[Any]:
        """Load one record (an object) or many (a list, or ``{"records": [...]}``)."""
        data = self.read_json(file_path)
        if isinstance(data, dict) and isinstance(data.get("records"), list):
            return data["records"]
        if isinstance(data, list):
            return data
        return [data]
