from .item_normalizer import ItemNormalizer
from .reverse_coder import ReverseCoder
from .subscale_aggregator import SubscaleAggregator
from .total_composer import TotalComposer
