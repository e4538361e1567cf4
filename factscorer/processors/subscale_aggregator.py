"""
Subscale Aggregator Module
--------------------------
Scores one sub-scale per respondent using prorated (mean-substituted) sums.

For each respondent:
    valid_n = number of answered items
    score   = mean(answered items) * number of items in the sub-scale
The score is set to missing when valid_n / n_items does not clear the
sub-scale's completion threshold; valid_n is reported either way.
"""
import logging
from typing import Tuple

import numpy as np
import pandas as pd

from ..schemas.item_schema import Subscale

DEFAULT_DECIMALS = 3


class SubscaleAggregator:
    def __init__(self, logger: logging.Logger, decimals: int = DEFAULT_DECIMALS):
        self.logger = logger
        self.decimals = decimals
        self.logger.info("SubscaleAggregator initialized.")

    def aggregate(self, values: pd.DataFrame, subscale: Subscale) -> Tuple[pd.Series, pd.Series]:
        """
        Computes the score and valid-item count of one sub-scale.

        Args:
            values (pd.DataFrame): Normalized and reverse-coded items (NaN = missing).
                Must contain every item of the sub-scale.
            subscale (Subscale): Sub-scale definition.

        Returns:
            Tuple[pd.Series, pd.Series]: (score as float with NaN for missing,
            valid_n as int), both named after the sub-scale and indexed like `values`.
        """
        items = values[list(subscale.items)]
        valid_n = items.notna().sum(axis=1).astype(int)
        # mean() over an all-NaN row is NaN, so unanswered sub-scales fall out as missing.
        raw_mean = items.mean(axis=1, skipna=True)
        score = raw_mean * subscale.n_items
        completion = valid_n / subscale.n_items
        score = score.mask(subscale.is_insufficient(completion), np.nan).round(self.decimals)

        n_missing = int(score.isna().sum())
        self.logger.debug(f"SubscaleAggregator: {subscale.name} scored over {subscale.n_items} item(s); {n_missing} respondent(s) below threshold {subscale.threshold}.")
        return score.rename(subscale.name), valid_n.rename(subscale.name)
