"""
Total Composer Module
---------------------
Combines sub-scale scores into composite indices (grand totals, Trial Outcome
Indices). Valid-item counts always add up; a composite score is missing as
soon as one member score is missing, or when the composite's own completion
threshold is not met.
"""
import logging
from typing import Tuple

import numpy as np
import pandas as pd

from ..schemas.item_schema import Composite
from .subscale_aggregator import DEFAULT_DECIMALS


class TotalComposer:
    def __init__(self, logger: logging.Logger, decimals: int = DEFAULT_DECIMALS):
        self.logger = logger
        self.decimals = decimals
        self.logger.info("TotalComposer initialized.")

    def compose(self, scores: pd.DataFrame, n_valid: pd.DataFrame,
                composite: Composite, item_count: int) -> Tuple[pd.Series, pd.Series]:
        """
        Args:
            scores (pd.DataFrame): Sub-scale scores, one column per sub-scale.
            n_valid (pd.DataFrame): Sub-scale valid-item counts, same columns.
            composite (Composite): Which members to combine and how.
            item_count (int): Nominal number of items behind the composite.

        Returns:
            Tuple[pd.Series, pd.Series]: (score, valid_n) named after the composite.
        """
        members = list(composite.members)
        missing_members = [m for m in members if m not in scores.columns or m not in n_valid.columns]
        if missing_members:
            raise KeyError(f"TotalComposer: Composite '{composite.name}' needs scores for {missing_members}, which were not computed.")

        total_n = n_valid[members].sum(axis=1).astype(int)
        weighted = pd.concat([scores[m] * composite.weight(m) for m in members], axis=1)
        # skipna=False: one missing member makes the composite missing.
        total = weighted.sum(axis=1, skipna=False)
        if composite.has_threshold:
            total = total.mask(composite.is_insufficient(total_n / item_count), np.nan)
        total = total.round(self.decimals)

        self.logger.debug(f"TotalComposer: {composite.name} = {' + '.join(members)}; {int(total.isna().sum())} missing.")
        return total.rename(composite.name), total_n.rename(composite.name)
