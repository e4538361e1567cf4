"""
Reverse Coder Module
--------------------
Flips the scoring direction of reverse-coded items.
"""
import logging
from typing import Sequence

import pandas as pd

from ..schemas.item_schema import QuestionnaireSchema


class ReverseCoder:
    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.logger.info("ReverseCoder initialized.")

    @staticmethod
    def reverse_value(value, min_code: int, max_code: int):
        """(min + max) - value; for a 0-4 scale this is 4 - value."""
        return (min_code + max_code) - value

    def reverse(self, values: pd.DataFrame, items: Sequence[str], schema: QuestionnaireSchema) -> pd.DataFrame:
        """
        Returns a copy of `values` with the listed items reversed. NaN stays NaN.
        Expects normalized input, so it must run once per scoring pass, after the ItemNormalizer.
        """
        reversed_values = values.copy()
        items = [item for item in items if item in reversed_values.columns]
        if not items:
            self.logger.debug("ReverseCoder: No reverse-coded items to process.")
            return reversed_values
        reversed_values[items] = self.reverse_value(reversed_values[items], schema.min_code, schema.max_code)
        self.logger.info(f"ReverseCoder: Reversed {len(items)} item(s) on the {schema.min_code}-{schema.max_code} scale: {items}")
        return reversed_values
