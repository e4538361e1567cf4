"""
Example Data Module
-------------------
Generates fake raw responses for a questionnaire schema, for demos and tests.
"""
from typing import Sequence

import numpy as np
import pandas as pd

from ..schemas.item_schema import QuestionnaireSchema


def make_example_data(schema: QuestionnaireSchema, n_respondents: int = 8,
                      missing_rates: Sequence[float] = (0.1, 0.5),
                      seed: int = 6375309, id_column: str = 'ID') -> pd.DataFrame:
    """
    Draws uniform random answers over the schema's valid codes for every item
    in the schema chain, then codes some of them as missing with the highest
    missing sentinel (9 for FACT), or NaN when the schema has no sentinels.

    Respondents are split into len(missing_rates) equal-sized groups (the last
    group takes any remainder); each group has its own probability of an item
    being coded missing.
    """
    if n_respondents < 1:
        raise ValueError("make_example_data: n_respondents must be at least 1.")
    if not missing_rates or any(not 0.0 <= rate <= 1.0 for rate in missing_rates):
        raise ValueError(f"make_example_data: missing rates must lie in [0, 1], got {list(missing_rates)}.")

    rng = np.random.default_rng(seed)
    items = list(schema.all_item_names)
    codes = np.array(sorted(schema.valid_codes))
    responses = rng.choice(codes, size=(n_respondents, len(items)))

    group_size = n_respondents // len(missing_rates)
    rates = np.empty(n_respondents)
    for i, rate in enumerate(missing_rates):
        start = i * group_size
        stop = n_respondents if i == len(missing_rates) - 1 else start + group_size
        rates[start:stop] = rate
    missing = rng.random((n_respondents, len(items))) < rates[:, None]
    sentinel = max(schema.missing_codes) if schema.missing_codes else np.nan
    responses = np.where(missing, sentinel, responses)

    df = pd.DataFrame(responses, columns=items)
    df.insert(0, id_column, [f"ID{i}" for i in range(1, n_respondents + 1)])
    return df
