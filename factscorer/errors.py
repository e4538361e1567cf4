"""
Scoring Errors Module
---------------------
Exceptions raised by the scoring engine. Insufficient data is not an error:
it shows up as a missing score next to its valid-item count.
"""
from typing import Iterable, Optional


class ScoringError(ValueError):
    """Base class for every failure that aborts a scoring call."""


class SchemaDefinitionError(ScoringError):
    """A questionnaire schema was constructed with inconsistent parts."""


class SchemaMismatch(ScoringError):
    """One or more expected item columns are absent from the input table."""

    def __init__(self, missing_items: Iterable[str], schema_name: Optional[str] = None):
        self.missing_items = list(missing_items)
        self.schema_name = schema_name
        where = f" for {schema_name}" if schema_name else ""
        super().__init__(
            f"Input table is missing {len(self.missing_items)} expected item column(s){where}: "
            f"{self.missing_items}. Item names are case-sensitive."
        )


class OutOfRangeInput(ScoringError):
    """At least one raw value is neither a valid code nor a missing sentinel."""

    def __init__(self, offending_items: Iterable[str], n_values: int,
                 allowed_description: str, examples: Optional[Iterable] = None):
        self.offending_items = list(offending_items)
        self.n_values = n_values
        self.examples = list(examples) if examples is not None else []
        sample = f" Examples: {self.examples}." if self.examples else ""
        super().__init__(
            f"{n_values} response(s) out of range (i.e., not {allowed_description}) "
            f"in item(s) {self.offending_items}.{sample} No scores were computed."
        )
