"""
FACT Instruments
----------------
Schemas for the Functional Assessment of Cancer Therapy family (version 4).
Item names follow the left margin of the official facit.org forms (GP1, GS1, ...).

Missing responses are coded 8, 9 or left empty; answers are coded 0-4.
"""
from typing import Dict, List

from .item_schema import Composite, QuestionnaireSchema, Subscale

PWB_ITEMS = tuple(f"GP{i}" for i in range(1, 8))
SWB_ITEMS = tuple(f"GS{i}" for i in range(1, 8))
EWB_ITEMS = tuple(f"GE{i}" for i in range(1, 7))
FWB_ITEMS = tuple(f"GF{i}" for i in range(1, 8))
BMT_ITEMS = ('BMT1', 'BMT2', 'BMT3', 'BMT4', 'C6', 'C7', 'BMT5', 'BMT6', 'BL4', 'BMT8')

FACT_G = QuestionnaireSchema(
    name='FACT-G',
    version='4',
    subscales=(
        Subscale('PWB', PWB_ITEMS, reverse_items=PWB_ITEMS),
        Subscale('SWB', SWB_ITEMS),
        Subscale('EWB', EWB_ITEMS, reverse_items=('GE1', 'GE3', 'GE4', 'GE5', 'GE6')),
        Subscale('FWB', FWB_ITEMS),
    ),
    composites=(
        Composite('FACTG', ('PWB', 'SWB', 'EWB', 'FWB'), threshold=0.8),
    ),
)

FACT_BMT = QuestionnaireSchema(
    name='FACT-BMT',
    version='4',
    subscales=(
        Subscale('BMTS', BMT_ITEMS, reverse_items=('BMT1', 'BMT2', 'BMT3', 'BMT4', 'BMT6')),
    ),
    composites=(
        Composite('FACT_BMT_TOTAL', ('PWB', 'SWB', 'EWB', 'FWB', 'BMTS'), threshold=0.8),
        # The published TOI rule has no completion check of its own.
        Composite('FACT_BMT_TOI', ('PWB', 'FWB', 'BMTS'), threshold=None),
    ),
    base=FACT_G,
)

_CATALOGUE: Dict[str, QuestionnaireSchema] = {
    schema.name.upper(): schema for schema in (FACT_G, FACT_BMT)
}


def available_schemas() -> List[str]:
    return [schema.name for schema in _CATALOGUE.values()]


def get_schema(name: str) -> QuestionnaireSchema:
    """Looks up a bundled schema by instrument name, ignoring case and '-'/'_' differences."""
    key = name.strip().upper().replace('_', '-')
    if key not in _CATALOGUE:
        raise KeyError(f"Unknown questionnaire '{name}'. Available: {available_schemas()}")
    return _CATALOGUE[key]
