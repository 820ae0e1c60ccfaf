"""Rule protocol and the three rule shapes the rewrite chain is built from.

Every rule is str -> str, never mutates its input, and records exactly one
ledger entry per invocation (a probed group also records one per child).
"""

from __future__ import annotations

import re
from typing import Protocol, Sequence, runtime_checkable

from glsl_demodernizer.core.ir import (
    CONDITION_KINDS,
    RuleApplication,
    RuleCondition,
    ShaderKind,
    SkipReason,
)
from glsl_demodernizer.core.ledger import RewriteLedger

# Prepended directives are followed by a newline and one space
DIRECTIVE_SEPARATOR = "\n "


@runtime_checkable
class Rule(Protocol):
    """Protocol for all rules in the rewrite chain."""

    name: str
    condition: RuleCondition

    def applies_to(self, kind: ShaderKind) -> bool:
        """Whether the rule's stage gate admits this shader kind."""
        ...

    def apply(
        self, source: str, kind: ShaderKind, ledger: RewriteLedger, group: str = "",
    ) -> str:
        """Apply the rule, returning new text and recording the outcome in ledger."""
        ...

    def check_postcondition(self, source: str, kind: ShaderKind) -> list[str]:
        """Violations of what must hold right after the rule ran."""
        ...

    def describe(self) -> str:
        """Human-readable description of this rule."""
        ...


class PatternRule:
    """Global regex substitution, optionally gated on shader kind.

    ``replacement`` is a ``re.sub`` template and may reference capture groups.
    ``forbids`` is the postcondition: a pattern that must not match the output.
    """

    def __init__(
        self,
        name: str,
        pattern: str,
        replacement: str,
        condition: RuleCondition = RuleCondition.ALWAYS,
        literal: bool = False,
        forbids: str | None = None,
        description: str = "",
    ) -> None:
        self.name = name
        self.pattern = re.compile(re.escape(pattern) if literal else pattern)
        self.replacement = replacement
        self.condition = condition
        self.forbids = re.compile(forbids) if forbids else None
        self.description = description

    def applies_to(self, kind: ShaderKind) -> bool:
        return kind in CONDITION_KINDS.get(self.condition, set())

    def apply(
        self, source: str, kind: ShaderKind, ledger: RewriteLedger, group: str = "",
    ) -> str:
        if not self.applies_to(kind):
            ledger.record(self._entry(group, skip_reason=SkipReason.STAGE_MISMATCH))
            return source

        output, n = self.pattern.subn(self.replacement, source)
        ledger.record(
            self._entry(
                group,
                fired=n > 0,
                match_count=n,
                skip_reason=SkipReason.NONE if n else SkipReason.NO_MATCH,
            )
        )
        return output

    def check_postcondition(self, source: str, kind: ShaderKind) -> list[str]:
        violations: list[str] = []
        if self.forbids is None or not self.applies_to(kind):
            return violations
        if self.forbids.search(source):
            violations.append(
                f"{self.name}: pattern {self.forbids.pattern!r} still present"
            )
        return violations

    def describe(self) -> str:
        return self.description or (
            f"Replace /{self.pattern.pattern}/ with {self.replacement!r}"
        )

    def _entry(self, group: str, **kwargs) -> RuleApplication:
        return RuleApplication(
            rule=self.name,
            condition=self.condition,
            group=group,
            description=self.describe(),
            **kwargs,
        )


class PrependDirective:
    """Put a directive line in front of the current text."""

    def __init__(
        self,
        name: str,
        directive: str,
        condition: RuleCondition = RuleCondition.ALWAYS,
        description: str = "",
    ) -> None:
        self.name = name
        self.directive = directive
        self.condition = condition
        self.description = description

    def applies_to(self, kind: ShaderKind) -> bool:
        return kind in CONDITION_KINDS.get(self.condition, set())

    def apply(
        self, source: str, kind: ShaderKind, ledger: RewriteLedger, group: str = "",
    ) -> str:
        fired = self.applies_to(kind)
        ledger.record(
            RuleApplication(
                rule=self.name,
                condition=self.condition,
                group=group,
                fired=fired,
                match_count=1 if fired else 0,
                skip_reason=SkipReason.NONE if fired else SkipReason.STAGE_MISMATCH,
                inserted=self.directive if fired else "",
                description=self.describe(),
            )
        )
        if not fired:
            return source
        return f"{self.directive}{DIRECTIVE_SEPARATOR}{source}"

    def check_postcondition(self, source: str, kind: ShaderKind) -> list[str]:
        # Later prepends push this directive down, so only presence is checked
        violations: list[str] = []
        if self.applies_to(kind) and self.directive not in source:
            violations.append(f"{self.name}: directive {self.directive!r} missing")
        return violations

    def describe(self) -> str:
        return self.description or f"Prepend {self.directive!r}"


class ProbedGroup:
    """Sub-sequence of rules run only when a probe matches the intermediate text.

    The probe is evaluated once, against the text as it stands when the group
    is reached; children then run in order, each seeing the previous output.
    """

    condition = RuleCondition.CONTENT_PROBE

    def __init__(
        self,
        name: str,
        probe: str,
        rules: Sequence[Rule],
        stage: RuleCondition = RuleCondition.ALWAYS,
        description: str = "",
    ) -> None:
        self.name = name
        self.probe = re.compile(probe)
        self.rules = tuple(rules)
        self.stage = stage
        self.description = description

    def applies_to(self, kind: ShaderKind) -> bool:
        return kind in CONDITION_KINDS.get(self.stage, set())

    def probe_matches(self, source: str) -> bool:
        return self.probe.search(source) is not None

    def apply(
        self, source: str, kind: ShaderKind, ledger: RewriteLedger, group: str = "",
    ) -> str:
        if not self.applies_to(kind):
            ledger.record(self._entry(group, skip_reason=SkipReason.STAGE_MISMATCH))
            return source

        hits = len(self.probe.findall(source))
        if not hits:
            ledger.record(self._entry(group, skip_reason=SkipReason.PROBE_FAILED))
            return source

        ledger.record(self._entry(group, fired=True, match_count=hits))
        output = source
        for rule in self.rules:
            output = rule.apply(output, kind, ledger, group=self.name)
        return output

    def check_postcondition(self, source: str, kind: ShaderKind) -> list[str]:
        violations: list[str] = []
        if not self.applies_to(kind):
            return violations
        for rule in self.rules:
            if isinstance(rule, PrependDirective):
                # Present only if the probe matched
                continue
            violations.extend(rule.check_postcondition(source, kind))
        return violations

    def describe(self) -> str:
        return self.description or f"If /{self.probe.pattern}/ matches: " + "; ".join(
            r.describe() for r in self.rules
        )

    def _entry(self, group: str, **kwargs) -> RuleApplication:
        return RuleApplication(
            rule=self.name,
            condition=self.condition,
            group=group,
            description=self.describe(),
            **kwargs,
        )
