"""
Item Normalizer Module
----------------------
Checks raw item codes against a questionnaire schema and maps missing-value
sentinels to NaN. Validation is all-or-nothing over the whole table: a single
bad value anywhere rejects the call before anything is scored.
"""
import logging
from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from ..errors import OutOfRangeInput, SchemaMismatch
from ..schemas.item_schema import QuestionnaireSchema

MAX_REPORTED_EXAMPLES = 5


class ItemNormalizer:
    """
    Turns raw item columns into a float frame where every cell is either a
    valid code or NaN.
    - Never modifies the input DataFrame.
    - Item names are matched exactly (case-sensitive).
    """
    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.logger.info("ItemNormalizer initialized.")

    def check_columns(self, data: pd.DataFrame, items: Iterable[str], schema_name: str = None) -> None:
        """Raises SchemaMismatch if any expected item column is absent."""
        missing = [item for item in items if item not in data.columns]
        if missing:
            self.logger.error(f"ItemNormalizer: {len(missing)} expected item column(s) not found: {missing}")
            raise SchemaMismatch(missing, schema_name)

    def _numeric(self, column: pd.Series) -> pd.Series:
        return pd.to_numeric(column, errors='coerce').astype(float)

    def validate(self, data: pd.DataFrame, items: Sequence[str], schema: QuestionnaireSchema) -> None:
        """
        Verifies that every value in the given item columns is a valid code,
        a missing sentinel, or empty.

        Args:
            data (pd.DataFrame): Raw respondent table.
            items (Sequence[str]): Item columns to check.
            schema (QuestionnaireSchema): Supplies the valid and missing code sets.

        Raises:
            SchemaMismatch: If an item column is absent.
            OutOfRangeInput: If any value falls outside the allowed codes. Nothing
                is scored for any respondent in that case.
        """
        self.check_columns(data, items, schema.name)
        allowed = sorted(schema.valid_codes | schema.missing_codes)
        offending: List[str] = []
        examples: List = []
        n_bad = 0
        for item in items:
            raw = data[item]
            numeric = self._numeric(raw)
            # Anything that was present but could not be read as a number is out of range too.
            unreadable = raw.notna() & numeric.isna()
            bad = unreadable | (numeric.notna() & ~numeric.isin(allowed))
            count = int(bad.sum())
            if count:
                offending.append(item)
                n_bad += count
                for value in raw[bad].unique():
                    if len(examples) < MAX_REPORTED_EXAMPLES:
                        examples.append(value.item() if isinstance(value, np.generic) else value)
                self.logger.debug(f"ItemNormalizer: Item '{item}' has {count} out-of-range value(s).")
        if offending:
            self.logger.error(f"ItemNormalizer: {n_bad} out-of-range value(s) in {offending}. Rejecting the whole table.")
            raise OutOfRangeInput(offending, n_bad, schema.describe_allowed_codes(), examples)
        self.logger.debug(f"ItemNormalizer: {len(items)} item column(s) passed validation for {schema.label}.")

    def normalize(self, data: pd.DataFrame, items: Sequence[str], schema: QuestionnaireSchema,
                  validated: bool = False) -> pd.DataFrame:
        """
        Returns a new float DataFrame (same index as `data`) with one column per
        item. Missing sentinels become NaN. Pass `validated=True` only when the
        same columns already went through `validate`.
        """
        if not validated:
            self.validate(data, items, schema)
        sentinels = sorted(schema.missing_codes)
        normalized = pd.DataFrame(
            {item: self._numeric(data[item]).mask(lambda col: col.isin(sentinels)) for item in items},
            index=data.index,
            columns=list(items),
        )
        n_missing = int(normalized.isna().sum().sum())
        self.logger.info(f"ItemNormalizer: Normalized {len(items)} item(s) for {len(normalized)} respondent(s); {n_missing} missing response(s).")
        return normalized
