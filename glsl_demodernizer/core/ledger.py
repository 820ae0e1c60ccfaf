"""RewriteLedger: ordered record of rule applications with query/serialize."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

from glsl_demodernizer.core.ir import RuleApplication, RuleCondition, ShaderKind


class RewriteLedger:
    """List-backed, append-only collection of RuleApplication records.

    ``kind`` is the stage the entries were recorded for; it travels with the
    ledger through clone() and JSON.
    """

    def __init__(self, kind: ShaderKind | None = None) -> None:
        self.kind = kind
        self._entries: list[RuleApplication] = []

    def record(self, entry: RuleApplication) -> RuleApplication:
        """Append an entry. Returns the entry."""
        self._entries.append(entry)
        return entry

    def record_many(self, entries: list[RuleApplication]) -> list[RuleApplication]:
        for e in entries:
            self.record(e)
        return entries

    def get(self, rule_name: str) -> RuleApplication:
        """Latest entry recorded for a rule. Raises KeyError if the rule never ran."""
        for entry in reversed(self._entries):
            if entry.rule == rule_name:
                return entry
        raise KeyError(rule_name)

    def clone(self) -> "RewriteLedger":
        """Shallow-copy the ledger. Entries are immutable so sharing is safe."""
        new = RewriteLedger(kind=self.kind)
        new._entries = list(self._entries)
        return new

    def entries(self) -> list[RuleApplication]:
        """All entries in recording order."""
        return list(self._entries)

    def filter(
        self,
        condition: RuleCondition | None = None,
        fired: bool | None = None,
        predicate: Callable[[RuleApplication], bool] | None = None,
    ) -> list[RuleApplication]:
        """Filter entries by condition, fired flag, and/or arbitrary predicate."""
        result = self.entries()
        if condition is not None:
            result = [e for e in result if e.condition == condition]
        if fired is not None:
            result = [e for e in result if e.fired == fired]
        if predicate is not None:
            result = [e for e in result if predicate(e)]
        return result

    def fired(self) -> list[RuleApplication]:
        """Entries whose rule changed the source."""
        return self.filter(fired=True)

    def fired_names(self) -> list[str]:
        return [e.rule for e in self.fired()]

    def inserted_directives(self) -> list[str]:
        """Directives prepended during the run, top of file first."""
        return [e.inserted for e in reversed(self.fired()) if e.inserted]

    def count(self) -> int:
        return len(self._entries)

    def to_json(self) -> str:
        """Serialize ledger to JSON string."""
        data = {
            "kind": self.kind.value if self.kind is not None else None,
            "entries": [e.model_dump(mode="json") for e in self._entries],
        }
        return json.dumps(data, indent=2, sort_keys=True)

    @classmethod
    def from_json(cls, json_str: str) -> "RewriteLedger":
        """Deserialize ledger from JSON string."""
        data = json.loads(json_str)
        kind = data.get("kind")
        ledger = cls(kind=ShaderKind(kind) if kind is not None else None)
        for ed in data["entries"]:
            ledger.record(RuleApplication(**ed))
        return ledger

    def export(self, path: str | Path) -> None:
        """Write the ledger to a JSON file, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json())

    @classmethod
    def load(cls, path: str | Path) -> "RewriteLedger":
        return cls.from_json(Path(path).read_text())

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, rule_name: str) -> bool:
        return any(e.rule == rule_name for e in self._entries)
