"""Table validation: runs the commit rules against a draft.

Usage
-----
::

    from sqlmaker.validator import TableValidator

    diagnostics = TableValidator().validate(draft, store.tables)
    errors = [d for d in diagnostics if d.is_error]
"""
from __future__ import annotations

from collections.abc import Sequence

from sqlmaker.model.drafts import TableDraft
from sqlmaker.model.entities import SchemaState, Table
from sqlmaker.validator.diagnostics import Diagnostic
from sqlmaker.validator.rules import DEFAULT_RULES, Rule, rule_dangling_foreign_keys


class TableValidator:
    """Commit-time validator for table drafts.

    Parameters
    ----------
    rules:
        The rules to run.  Defaults to ``DEFAULT_RULES``.  Pass a custom
        list to extend or restrict which rules apply.
    """

    def __init__(self, rules: list[Rule] | None = None) -> None:
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)

    def validate(
        self,
        draft: TableDraft,
        tables: Sequence[Table],
        editing_id: str | None = None,
    ) -> list[Diagnostic]:
        """Run every rule against ``draft`` and return the findings.

        Parameters
        ----------
        draft:
            The table draft about to be committed.
        tables:
            All committed tables.
        editing_id:
            Id of the table the draft replaces, if any.  That table is
            left out of the name-collision check.

        Returns
        -------
        list[Diagnostic]
            Findings in rule order.  Empty when the draft may be committed.
        """
        others = [t for t in tables if t.id != editing_id]
        diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            diagnostics.extend(rule(draft, others))
        return diagnostics

    def add_rule(self, rule: Rule) -> None:
        """Add a custom rule to this validator instance."""
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        return len(self._rules)


def validate_table(
    draft: TableDraft,
    tables: Sequence[Table],
    editing_id: str | None = None,
) -> list[Diagnostic]:
    """Convenience function: validate a draft with the default rules."""
    return TableValidator().validate(draft, tables, editing_id=editing_id)


def check_schema(state: SchemaState) -> list[Diagnostic]:
    """Return schema-wide warnings for a committed state.

    Committed states already satisfy every table rule, so this only
    reports conditions the store deliberately tolerates, such as
    foreign keys whose target table was deleted.
    """
    return rule_dangling_foreign_keys(state)
