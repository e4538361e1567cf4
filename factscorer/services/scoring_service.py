"""
Scoring Service Module
----------------------
Runs the scoring pipeline for one questionnaire:

    raw table -> ItemNormalizer -> ReverseCoder -> SubscaleAggregator -> TotalComposer -> output table

An extension questionnaire (e.g. FACT-BMT) does not re-score its base
(FACT-G). It takes the base questionnaire's ScoringResult as an input and only
scores its own items on top of it.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import pandas as pd

from ..processors.item_normalizer import ItemNormalizer
from ..processors.reverse_coder import ReverseCoder
from ..processors.subscale_aggregator import SubscaleAggregator
from ..processors.total_composer import TotalComposer
from ..schemas.fact import FACT_BMT, FACT_G
from ..schemas.item_schema import QuestionnaireSchema
from ..utils.logging_utils import get_logger, log_progress_bar

NVALID_SUFFIX = '_N'


@dataclass(frozen=True, eq=False)
class ScoringResult:
    """
    Output of one scoring pass.

    Attributes:
        schema (QuestionnaireSchema): Schema that was scored.
        items (pd.DataFrame): Normalized, reverse-coded items (base items included).
        scores (pd.DataFrame): One column per derived scale, NaN where missing.
        n_valid (pd.DataFrame): Valid-item counts, same columns as `scores`.
    """
    schema: QuestionnaireSchema
    items: pd.DataFrame
    scores: pd.DataFrame
    n_valid: pd.DataFrame

    def to_frame(self, data: pd.DataFrame, update_items: bool = False, keep_nvalid: bool = False) -> pd.DataFrame:
        """
        Assembles the output table from the caller's original frame.

        Args:
            data (pd.DataFrame): The raw table that was scored. It is copied, never modified.
            update_items (bool): If True, item columns are replaced by their normalized,
                reverse-coded versions (sentinels become NaN). Default keeps the originals.
            keep_nvalid (bool): If True, a '<SCALE>_N' column is appended for every scale.
        """
        out = data.copy()
        if update_items:
            for item in self.items.columns:
                out[item] = self.items[item]
        scale_names = list(self.schema.scale_names)
        for name in scale_names:
            out[name] = self.scores[name]
        if keep_nvalid:
            for name in scale_names:
                out[f"{name}{NVALID_SUFFIX}"] = self.n_valid[name]
        return out


class QuestionnaireScorer:
    """
    Scores the items one schema defines. For an extension schema the base
    schema's result must be supplied; its scores are reused as-is.
    """
    def __init__(self, schema: QuestionnaireSchema, logger: logging.Logger):
        self.schema = schema
        self.logger = logger
        self.normalizer = ItemNormalizer(logger)
        self.reverse_coder = ReverseCoder(logger)
        self.aggregator = SubscaleAggregator(logger)
        self.composer = TotalComposer(logger)
        self.logger.info(f"QuestionnaireScorer initialized for {schema.label}.")

    def score(self, data: pd.DataFrame, base_result: Optional[ScoringResult] = None,
              validated: bool = False) -> ScoringResult:
        schema = self.schema
        if schema.base is not None:
            if base_result is None:
                raise ValueError(f"QuestionnaireScorer: {schema.label} extends {schema.base.label}; its scoring result is required.")
            if base_result.schema != schema.base:
                raise ValueError(f"QuestionnaireScorer: {schema.label} expects a {schema.base.label} result, got {base_result.schema.label}.")
            if not base_result.scores.index.equals(data.index):
                raise ValueError(f"QuestionnaireScorer: The {schema.base.label} result was computed on a different table (index does not match).")
        elif base_result is not None:
            raise ValueError(f"QuestionnaireScorer: {schema.label} has no base questionnaire; base_result must be None.")

        self.logger.info(f"QuestionnaireScorer: Scoring {schema.label} for {len(data)} respondent(s).")
        items = list(schema.item_names)
        values = self.normalizer.normalize(data, items, schema, validated=validated)
        values = self.reverse_coder.reverse(values, schema.reverse_items, schema)

        scores: Dict[str, pd.Series] = {}
        n_valid: Dict[str, pd.Series] = {}
        for subscale in schema.subscales:
            scores[subscale.name], n_valid[subscale.name] = self.aggregator.aggregate(values, subscale)

        if base_result is not None:
            all_scores = pd.concat([base_result.scores, pd.DataFrame(scores, index=data.index)], axis=1)
            all_n = pd.concat([base_result.n_valid, pd.DataFrame(n_valid, index=data.index)], axis=1)
            values = pd.concat([base_result.items, values], axis=1)
        else:
            all_scores = pd.DataFrame(scores, index=data.index)
            all_n = pd.DataFrame(n_valid, index=data.index)

        for composite in schema.composites:
            item_count = schema.composite_item_count(composite)
            all_scores[composite.name], all_n[composite.name] = self.composer.compose(all_scores, all_n, composite, item_count)

        scale_names = list(schema.scale_names)
        self.logger.info(f"QuestionnaireScorer: {schema.label} produced scales {scale_names}.")
        return ScoringResult(schema=schema, items=values, scores=all_scores[scale_names], n_valid=all_n[scale_names])


class ScoringService:
    """
    Entry point for scoring a raw table against any questionnaire schema.
    - Validates the full schema chain (base and extension items) before any scoring.
    - Scores base questionnaires first and hands their results to the extensions.
    - Returns a new DataFrame; the input is left untouched.
    """
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger if logger is not None else get_logger()
        self.normalizer = ItemNormalizer(self.logger)
        self.logger.info("ScoringService initialized.")

    def score_result(self, data: pd.DataFrame, schema: QuestionnaireSchema) -> ScoringResult:
        if not isinstance(data, pd.DataFrame):
            self.logger.error("ScoringService: Input is not a pandas DataFrame.")
            raise TypeError(f"ScoringService: Expected a pandas DataFrame, got {type(data).__name__}.")
        chain = schema.chain()
        # Whole-call validation first: nothing is aggregated if any part of the chain is invalid.
        all_items = list(schema.all_item_names)
        self.normalizer.check_columns(data, all_items, schema.name)
        for part in chain:
            self.normalizer.validate(data, list(part.item_names), part)

        result: Optional[ScoringResult] = None
        for part in chain:
            result = QuestionnaireScorer(part, self.logger).score(data, base_result=result, validated=True)
        return result

    def score(self, data: pd.DataFrame, schema: QuestionnaireSchema,
              update_items: bool = False, keep_nvalid: bool = False) -> pd.DataFrame:
        """
        Scores every respondent in `data`.

        Args:
            data (pd.DataFrame): One row per respondent, one column per item
                (exact item names) plus any identifier columns.
            schema (QuestionnaireSchema): Questionnaire to score.
            update_items (bool): Replace items with normalized, reverse-coded values.
            keep_nvalid (bool): Append '<SCALE>_N' valid-item counts.

        Returns:
            pd.DataFrame: Copy of `data` with one appended column per derived scale.

        Raises:
            SchemaMismatch: An item column is missing.
            OutOfRangeInput: A value is outside the valid codes and missing sentinels.
        """
        result = self.score_result(data, schema)
        out = result.to_frame(data, update_items=update_items, keep_nvalid=keep_nvalid)
        self.logger.info(f"ScoringService: Scored {len(out)} respondent(s) on {schema.label}; output shape {out.shape}.")
        return out

    def score_many(self, tables: Dict[str, pd.DataFrame], schema: QuestionnaireSchema,
                   update_items: bool = False, keep_nvalid: bool = False) -> Dict[str, pd.DataFrame]:
        """
        Scores several independent tables (e.g. one per study site) with the same schema.
        Each table is validated on its own; the first failure aborts the batch.
        """
        update, close = log_progress_bar(self.logger, len(tables), desc=f"Scoring {schema.name}")
        scored: Dict[str, pd.DataFrame] = {}
        try:
            for key, table in tables.items():
                self.logger.info(f"ScoringService: Scoring table '{key}'.")
                scored[key] = self.score(table, schema, update_items=update_items, keep_nvalid=keep_nvalid)
                update()
        finally:
            close()
        return scored


def score_questionnaire(data: pd.DataFrame, schema: QuestionnaireSchema, update_items: bool = False,
                        keep_nvalid: bool = False, logger: Optional[logging.Logger] = None) -> pd.DataFrame:
    return ScoringService(logger).score(data, schema, update_items=update_items, keep_nvalid=keep_nvalid)


def score_fact_g(data: pd.DataFrame, update_items: bool = False, keep_nvalid: bool = False,
                 logger: Optional[logging.Logger] = None) -> pd.DataFrame:
    """Scores the FACT-G (v4): PWB, SWB, EWB, FWB and the FACTG total."""
    return score_questionnaire(data, FACT_G, update_items, keep_nvalid, logger)


def score_fact_bmt(data: pd.DataFrame, update_items: bool = False, keep_nvalid: bool = False,
                   logger: Optional[logging.Logger] = None) -> pd.DataFrame:
    """
    Scores the FACT-BMT (v4): the FACT-G scales plus BMTS, FACT_BMT_TOTAL
    (PWB+SWB+EWB+FWB+BMTS) and FACT_BMT_TOI (PWB+FWB+BMTS).
    """
    return score_questionnaire(data, FACT_BMT, update_items, keep_nvalid, logger)
