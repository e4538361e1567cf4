from .item_schema import Composite, QuestionnaireSchema, Subscale
from .fact import FACT_BMT, FACT_G, available_schemas, get_schema
