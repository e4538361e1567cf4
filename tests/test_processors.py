import numpy as np
import pandas as pd
import pytest

from factscorer.errors import OutOfRangeInput, SchemaMismatch
from factscorer.processors.item_normalizer import ItemNormalizer
from factscorer.processors.reverse_coder import ReverseCoder
from factscorer.processors.subscale_aggregator import SubscaleAggregator
from factscorer.processors.total_composer import TotalComposer
from factscorer.schemas.fact import FACT_G
from factscorer.schemas.item_schema import Composite, QuestionnaireSchema, Subscale

ITEMS = ['GP1', 'GP2', 'GP3']


class TestItemNormalizer:
    def test_sentinels_become_missing(self, logger):
        df = pd.DataFrame({'GP1': [0, 8, 4], 'GP2': [9, 1, np.nan], 'GP3': [2, 3, None]})
        out = ItemNormalizer(logger).normalize(df, ITEMS, FACT_G)
        assert out['GP1'].tolist()[0] == 0.0
        assert pd.isna(out.loc[1, 'GP1'])
        assert pd.isna(out.loc[0, 'GP2'])
        assert pd.isna(out.loc[2, 'GP2'])
        assert out['GP3'].tolist()[:2] == [2.0, 3.0]
        assert list(out.columns) == ITEMS

    def test_input_is_not_modified(self, logger):
        df = pd.DataFrame({'GP1': [8, 1], 'GP2': [9, 2], 'GP3': [0, 4]})
        before = df.copy()
        ItemNormalizer(logger).normalize(df, ITEMS, FACT_G)
        pd.testing.assert_frame_equal(df, before)

    def test_numeric_strings_are_accepted(self, logger):
        df = pd.DataFrame({'GP1': ['3', '8'], 'GP2': [1, 2], 'GP3': [0, 4]})
        out = ItemNormalizer(logger).normalize(df, ITEMS, FACT_G)
        assert out.loc[0, 'GP1'] == 3.0
        assert pd.isna(out.loc[1, 'GP1'])

    def test_code_seven_is_rejected(self, logger):
        df = pd.DataFrame({'GP1': [0, 1], 'GP2': [7, 2], 'GP3': [0, 4]})
        with pytest.raises(OutOfRangeInput, match="No scores were computed") as excinfo:
            ItemNormalizer(logger).normalize(df, ITEMS, FACT_G)
        assert excinfo.value.offending_items == ['GP2']
        assert excinfo.value.n_values == 1
        assert excinfo.value.examples == [7]

    def test_fractional_and_text_codes_are_rejected(self, logger):
        df = pd.DataFrame({'GP1': [2.5, 1], 'GP2': ['abc', 2], 'GP3': [0, -1]})
        with pytest.raises(OutOfRangeInput) as excinfo:
            ItemNormalizer(logger).validate(df, ITEMS, FACT_G)
        assert excinfo.value.offending_items == ITEMS
        assert excinfo.value.n_values == 3

    def test_missing_column(self, logger):
        df = pd.DataFrame({'GP1': [0], 'gp2': [1]})
        with pytest.raises(SchemaMismatch) as excinfo:
            ItemNormalizer(logger).validate(df, ITEMS, FACT_G)
        assert excinfo.value.missing_items == ['GP2', 'GP3']

    def test_errors_are_value_errors(self):
        assert issubclass(OutOfRangeInput, ValueError)
        assert issubclass(SchemaMismatch, ValueError)


class TestReverseCoder:
    def test_reverse_on_zero_to_four(self, logger):
        values = pd.DataFrame({'GP1': [0.0, 1.0, 2.0, 3.0, 4.0, np.nan], 'GP2': [1.0] * 6})
        out = ReverseCoder(logger).reverse(values, ['GP1'], FACT_G)
        assert out['GP1'].tolist()[:5] == [4.0, 3.0, 2.0, 1.0, 0.0]
        assert pd.isna(out.loc[5, 'GP1'])
        assert out['GP2'].tolist() == [1.0] * 6
        assert values['GP1'].tolist()[:5] == [0.0, 1.0, 2.0, 3.0, 4.0]

    def test_reversing_twice_returns_original(self, logger):
        coder = ReverseCoder(logger)
        values = pd.DataFrame({'GP1': [float(c) for c in sorted(FACT_G.valid_codes)]})
        twice = coder.reverse(coder.reverse(values, ['GP1'], FACT_G), ['GP1'], FACT_G)
        pd.testing.assert_frame_equal(twice, values)

    def test_one_based_scale(self):
        assert ReverseCoder.reverse_value(1, 1, 5) == 5
        assert ReverseCoder.reverse_value(4, 1, 5) == 2

    def test_no_items(self, logger):
        values = pd.DataFrame({'GS1': [1.0]})
        out = ReverseCoder(logger).reverse(values, [], FACT_G)
        pd.testing.assert_frame_equal(out, values)
        assert out is not values


class TestSubscaleAggregator:
    def test_complete_items_sum_exactly(self, logger):
        subscale = Subscale('S', ['a', 'b', 'c', 'd'])
        values = pd.DataFrame({'a': [1.0], 'b': [2.0], 'c': [3.0], 'd': [4.0]})
        score, valid_n = SubscaleAggregator(logger).aggregate(values, subscale)
        assert score.tolist() == [10.0]
        assert valid_n.tolist() == [4]
        assert score.name == 'S' and valid_n.name == 'S'

    def test_missing_items_are_prorated(self, logger):
        subscale = Subscale('S', ['a', 'b', 'c', 'd'])
        values = pd.DataFrame({'a': [4.0], 'b': [4.0], 'c': [2.0], 'd': [np.nan]})
        score, valid_n = SubscaleAggregator(logger).aggregate(values, subscale)
        assert score.iloc[0] == 13.333
        assert valid_n.iloc[0] == 3

    def test_exactly_half_answered_is_missing(self, logger):
        items = [f"i{n}" for n in range(10)]
        subscale = Subscale('S', items, threshold=0.5)
        row_five = [2.0] * 5 + [np.nan] * 5
        row_six = [2.0] * 6 + [np.nan] * 4
        values = pd.DataFrame([row_five, row_six], columns=items)
        score, valid_n = SubscaleAggregator(logger).aggregate(values, subscale)
        assert pd.isna(score.iloc[0])
        assert score.iloc[1] == 20.0
        assert valid_n.tolist() == [5, 6]

    def test_exclusive_threshold_keeps_exactly_half(self, logger):
        items = [f"i{n}" for n in range(10)]
        subscale = Subscale('S', items, threshold=0.5, threshold_inclusive=False)
        values = pd.DataFrame([[2.0] * 5 + [np.nan] * 5], columns=items)
        score, _ = SubscaleAggregator(logger).aggregate(values, subscale)
        assert score.iloc[0] == 20.0

    def test_nothing_answered(self, logger):
        subscale = Subscale('S', ['a', 'b'])
        values = pd.DataFrame({'a': [np.nan], 'b': [np.nan]})
        score, valid_n = SubscaleAggregator(logger).aggregate(values, subscale)
        assert pd.isna(score.iloc[0])
        assert valid_n.iloc[0] == 0

    def test_rounding(self, logger):
        subscale = Subscale('S', ['a', 'b', 'c'])
        values = pd.DataFrame({'a': [1.0], 'b': [0.0], 'c': [np.nan]})
        score, _ = SubscaleAggregator(logger, decimals=1).aggregate(values, subscale)
        assert score.iloc[0] == 1.5


class TestTotalComposer:
    @pytest.fixture
    def parts(self):
        scores = pd.DataFrame({'A': [10.0, np.nan, 6.0], 'B': [5.0, 4.0, 2.0]})
        n_valid = pd.DataFrame({'A': [4, 1, 2], 'B': [4, 4, 2]})
        return scores, n_valid

    def test_sum_and_counts(self, logger, parts):
        scores, n_valid = parts
        total, total_n = TotalComposer(logger).compose(scores, n_valid, Composite('T', ['A', 'B'], threshold=0.5), 8)
        assert total.iloc[0] == 15.0
        assert total_n.tolist() == [8, 5, 4]
        assert total.name == 'T'

    def test_missing_member_propagates(self, logger, parts):
        scores, n_valid = parts
        total, total_n = TotalComposer(logger).compose(scores, n_valid, Composite('T', ['A', 'B'], threshold=0.0), 8)
        assert pd.isna(total.iloc[1])
        assert total_n.iloc[1] == 5

    def test_own_threshold(self, logger, parts):
        scores, n_valid = parts
        # 4 of 8 items answered -> at the threshold -> missing
        total, _ = TotalComposer(logger).compose(scores, n_valid, Composite('T', ['A', 'B'], threshold=0.5), 8)
        assert pd.isna(total.iloc[2])

    def test_no_threshold(self, logger, parts):
        scores, n_valid = parts
        total, _ = TotalComposer(logger).compose(scores, n_valid, Composite('T', ['A', 'B'], threshold=None), 8)
        assert total.iloc[2] == 8.0
        assert pd.isna(total.iloc[1])

    def test_weights(self, logger, parts):
        scores, n_valid = parts
        composite = Composite('D', ['A', 'B'], threshold=None, weights={'B': -1})
        total, _ = TotalComposer(logger).compose(scores, n_valid, composite, 8)
        assert total.iloc[0] == 5.0

    def test_uncomputed_member(self, logger, parts):
        scores, n_valid = parts
        with pytest.raises(KeyError):
            TotalComposer(logger).compose(scores, n_valid, Composite('T', ['A', 'C']), 8)


def test_custom_schema_round_trip(logger):
    schema = QuestionnaireSchema('Mini', '1', subscales=[Subscale('S', ['a', 'b', 'c', 'd'])])
    values = ItemNormalizer(logger).normalize(pd.DataFrame({'a': [1], 'b': [2], 'c': [3], 'd': [4]}), list(schema.item_names), schema)
    score, valid_n = SubscaleAggregator(logger).aggregate(values, schema.subscales[0])
    assert score.iloc[0] == 10.0
    assert valid_n.iloc[0] == 4


def test_normalize_skips_checks_once_validated(logger):
    df = pd.DataFrame({'GP1': [8, 1], 'GP2': [9, 2], 'GP3': [0, 4]})
    normalizer = ItemNormalizer(logger)
    normalizer.validate(df, ITEMS, FACT_G)
    out = normalizer.normalize(df, ITEMS, FACT_G, validated=True)
    pd.testing.assert_frame_equal(out, normalizer.normalize(df, ITEMS, FACT_G))
