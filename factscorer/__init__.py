"""Scoring of patient-reported-outcome questionnaires (FACT-G, FACT-BMT)."""
from .errors import OutOfRangeInput, SchemaDefinitionError, SchemaMismatch, ScoringError
from .schemas import FACT_BMT, FACT_G, Composite, QuestionnaireSchema, Subscale, get_schema
from .services.scoring_service import (
    QuestionnaireScorer,
    ScoringResult,
    ScoringService,
    score_fact_bmt,
    score_fact_g,
    score_questionnaire,
)

__version__ = '0.1.0'
