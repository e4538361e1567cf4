import logging

import numpy as np
import pandas as pd
import pytest

from factscorer.schemas.fact import FACT_BMT


@pytest.fixture
def logger():
    return logging.getLogger('factscorer.tests')


def bmt_row(value, respondent_id, **overrides):
    """One FACT-BMT respondent with every item set to `value`, then `overrides` applied."""
    row = {'ID': respondent_id}
    row.update({item: value for item in FACT_BMT.all_item_names})
    row.update(overrides)
    return row


@pytest.fixture
def bmt_frame():
    """
    Hand-checked respondents:
      r1: all 2                     -> every scale complete
      r2: all 4                     -> reverse coding drives PWB to 0
      r3: all 4, GP1-GP4 coded 9    -> PWB below threshold, composites missing by propagation
      r4: all 1, GP1=8, GS1 empty   -> prorated PWB/SWB
    """
    rows = [
        bmt_row(2, 'r1'),
        bmt_row(4, 'r2'),
        bmt_row(4, 'r3', GP1=9, GP2=9, GP3=9, GP4=9),
        bmt_row(1, 'r4', GP1=8, GS1=np.nan),
    ]
    return pd.DataFrame(rows)
