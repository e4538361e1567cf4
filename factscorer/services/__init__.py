from .scoring_service import (
    QuestionnaireScorer,
    ScoringResult,
    ScoringService,
    score_fact_bmt,
    score_fact_g,
    score_questionnaire,
)
