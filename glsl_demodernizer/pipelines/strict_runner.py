"""StrictPipelineRunner: validates postconditions after every rule.

Uses transactional semantics (clone-on-write) so a failing rule never leaves
its ledger entries behind.

Opt-in via strict=True on demodernize_pipeline. The default path never raises.
"""

from __future__ import annotations

from typing import Any, Sequence

from glsl_demodernizer.core.invariants import PipelineInvariantViolation, validate_output
from glsl_demodernizer.core.ir import ShaderKind
from glsl_demodernizer.core.ledger import RewriteLedger
from glsl_demodernizer.transforms.base import Rule


class StrictPipelineRunner:
    """Runs a rule chain with per-stage postcondition checks.

    After each rule, checks the rule's own postcondition. After the last
    rule, runs validate_output() on the final text.

    Uses copy-on-write: the rule runs against a cloned ledger.
    If checks fail, the original ledger is untouched (rollback).
    """

    def __init__(self, ledger: RewriteLedger | None = None) -> None:
        self.ledger = ledger if ledger is not None else RewriteLedger()
        self._stage_log: list[dict[str, Any]] = []

    def run_stage(
        self,
        rule: Rule,
        source: str,
        kind: ShaderKind,
        stage_name: str = "",
    ) -> str:
        """Run one rule with postcondition checking.

        Raises PipelineInvariantViolation if the postcondition fails.
        """
        name = stage_name or rule.name

        trial_ledger = self.ledger.clone()
        output = rule.apply(source, kind, trial_ledger)

        violations = rule.check_postcondition(output, kind)

        self._stage_log.append({
            "stage": name,
            "input_length": len(source),
            "output_length": len(output),
            "entries": trial_ledger.count() - self.ledger.count(),
            "violations": violations,
        })

        if violations:
            raise PipelineInvariantViolation(name, violations)

        # Commit: adopt the trial ledger
        self.ledger._entries = trial_ledger._entries
        return output

    def run(self, rules: Sequence[Rule], source: str, kind: ShaderKind) -> str:
        """Run the whole chain, then the whole-output invariants."""
        output = source
        for rule in rules:
            output = self.run_stage(rule, output, kind)

        violations = validate_output(output, kind)
        self._stage_log.append({
            "stage": "validate_output",
            "input_length": len(output),
            "output_length": len(output),
            "entries": 0,
            "violations": violations,
        })
        if violations:
            raise PipelineInvariantViolation("validate_output", violations)
        return output

    @property
    def stage_log(self) -> list[dict[str, Any]]:
        """Log of all stages run and their validation results."""
        return list(self._stage_log)
