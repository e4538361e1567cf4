"""
Item Schema Module
------------------
Immutable description of one questionnaire: its items, how they group into
sub-scales, which ones are reverse-coded, which codes are valid or mean
"missing", and how sub-scales combine into composite scores.

An extension instrument (e.g. a disease-specific module) points at a base
schema and names the base sub-scales inside its own composites instead of
redefining them.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple

from ..errors import SchemaDefinitionError

DEFAULT_VALID_CODES = frozenset(range(5))
DEFAULT_MISSING_CODES = frozenset({8, 9})
DEFAULT_SUBSCALE_THRESHOLD = 0.5
DEFAULT_COMPOSITE_THRESHOLD = 0.8


def _check_threshold(owner: str, threshold: Optional[float]) -> None:
    if threshold is not None and not 0.0 <= threshold <= 1.0:
        raise SchemaDefinitionError(f"{owner}: threshold must lie in [0, 1], got {threshold}.")


def _below(ratio, threshold: float, inclusive: bool):
    # Works for scalars and pandas Series alike.
    return ratio <= threshold if inclusive else ratio < threshold


@dataclass(frozen=True)
class Subscale:
    """
    A named group of items summarized into one score.

    Attributes:
        name (str): Output column name of the score (e.g. 'PWB').
        items (Tuple[str, ...]): Item column names, in questionnaire order.
        reverse_items (FrozenSet[str]): Subset of `items` scored in reverse.
        threshold (float): Completion ratio at or below which the score is missing.
        threshold_inclusive (bool): If False, only ratios strictly below the
            threshold make the score missing.
    """
    name: str
    items: Tuple[str, ...]
    reverse_items: FrozenSet[str] = frozenset()
    threshold: float = DEFAULT_SUBSCALE_THRESHOLD
    threshold_inclusive: bool = True

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))
        object.__setattr__(self, 'reverse_items', frozenset(self.reverse_items))
        if not self.items:
            raise SchemaDefinitionError(f"Subscale '{self.name}': needs at least one item.")
        if len(set(self.items)) != len(self.items):
            raise SchemaDefinitionError(f"Subscale '{self.name}': duplicate item names in {list(self.items)}.")
        stray = sorted(self.reverse_items - set(self.items))
        if stray:
            raise SchemaDefinitionError(f"Subscale '{self.name}': reverse-coded items {stray} are not part of the subscale.")
        _check_threshold(f"Subscale '{self.name}'", self.threshold)

    @property
    def n_items(self) -> int:
        return len(self.items)

    def is_insufficient(self, completion_ratio):
        """True where the completion ratio does not clear the threshold."""
        return _below(completion_ratio, self.threshold, self.threshold_inclusive)


@dataclass(frozen=True)
class Composite:
    """
    A score built from sub-scale scores, e.g. a grand total or a Trial Outcome Index.

    `threshold=None` means the composite has no completion rule of its own and
    is missing only when one of its members is missing.
    """
    name: str
    members: Tuple[str, ...]
    threshold: Optional[float] = DEFAULT_COMPOSITE_THRESHOLD
    weights: Optional[Mapping[str, float]] = None
    threshold_inclusive: bool = True

    def __post_init__(self):
        object.__setattr__(self, 'members', tuple(self.members))
        if self.weights is not None:
            object.__setattr__(self, 'weights', dict(self.weights))
        if not self.members:
            raise SchemaDefinitionError(f"Composite '{self.name}': needs at least one member subscale.")
        if len(set(self.members)) != len(self.members):
            raise SchemaDefinitionError(f"Composite '{self.name}': duplicate members in {list(self.members)}.")
        if self.weights:
            unknown = sorted(set(self.weights) - set(self.members))
            if unknown:
                raise SchemaDefinitionError(f"Composite '{self.name}': weights given for non-members {unknown}.")
        _check_threshold(f"Composite '{self.name}'", self.threshold)

    def __hash__(self):
        return hash((self.name, self.members, self.threshold, self.threshold_inclusive))

    def weight(self, member: str) -> float:
        if not self.weights:
            return 1.0
        return float(self.weights.get(member, 1.0))

    @property
    def has_threshold(self) -> bool:
        return self.threshold is not None

    def is_insufficient(self, completion_ratio):
        if self.threshold is None:
            raise ValueError(f"Composite '{self.name}' has no completion threshold.")
        return _below(completion_ratio, self.threshold, self.threshold_inclusive)


@dataclass(frozen=True)
class QuestionnaireSchema:
    """
    Static, versioned definition of one questionnaire or questionnaire extension.

    Args:
        name (str): Instrument name, e.g. 'FACT-G'.
        version (str): Instrument version, e.g. '4'.
        subscales (Tuple[Subscale, ...]): Sub-scales defined by this schema.
        composites (Tuple[Composite, ...]): Composites; members may name base sub-scales.
        valid_codes (FrozenSet[int]): Codes that count as answers.
        missing_codes (FrozenSet[int]): Sentinels that mean "no answer". Empty
            cells (NaN/None) are always treated as missing as well.
        base (Optional[QuestionnaireSchema]): Core instrument this one extends.
    """
    name: str
    version: str
    subscales: Tuple[Subscale, ...]
    composites: Tuple[Composite, ...] = ()
    valid_codes: FrozenSet[int] = DEFAULT_VALID_CODES
    missing_codes: FrozenSet[int] = DEFAULT_MISSING_CODES
    base: Optional['QuestionnaireSchema'] = field(default=None, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'subscales', tuple(self.subscales))
        object.__setattr__(self, 'composites', tuple(self.composites))
        object.__setattr__(self, 'valid_codes', frozenset(self.valid_codes))
        object.__setattr__(self, 'missing_codes', frozenset(self.missing_codes))
        self._validate()

    def _validate(self) -> None:
        label = f"Schema '{self.name}'"
        if not self.subscales and not self.composites:
            raise SchemaDefinitionError(f"{label}: defines no scales.")
        if not self.valid_codes:
            raise SchemaDefinitionError(f"{label}: valid code set is empty.")
        overlap = sorted(self.valid_codes & self.missing_codes)
        if overlap:
            raise SchemaDefinitionError(f"{label}: codes {overlap} are both valid and missing sentinels.")

        seen_items: Dict[str, str] = {}
        inherited = self.base.all_item_names if self.base is not None else ()
        for subscale in self.subscales:
            for item in subscale.items:
                if item in inherited:
                    raise SchemaDefinitionError(f"{label}: item '{item}' is already defined by base schema '{self.base.name}'.")
                if item in seen_items:
                    raise SchemaDefinitionError(f"{label}: item '{item}' appears in both '{seen_items[item]}' and '{subscale.name}'.")
                seen_items[item] = subscale.name

        names = [s.name for s in self.subscales] + [c.name for c in self.composites]
        if self.base is not None:
            names = list(self.base.scale_names) + names
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise SchemaDefinitionError(f"{label}: duplicate scale names {duplicates}.")

        for composite in self.composites:
            for member in composite.members:
                if self._find_subscale(member) is None:
                    raise SchemaDefinitionError(f"{label}: composite '{composite.name}' refers to unknown subscale '{member}'.")

    def _find_subscale(self, name: str) -> Optional[Subscale]:
        for subscale in self.subscales:
            if subscale.name == name:
                return subscale
        if self.base is not None:
            return self.base._find_subscale(name)
        return None

    def get_subscale(self, name: str) -> Subscale:
        """Resolves a sub-scale by name, looking in this schema first and then down the base chain."""
        subscale = self._find_subscale(name)
        if subscale is None:
            raise KeyError(f"{self.name}: no subscale named '{name}'.")
        return subscale

    def chain(self) -> List['QuestionnaireSchema']:
        """Schemas from the innermost base up to this one."""
        schemas = []
        current: Optional[QuestionnaireSchema] = self
        while current is not None:
            schemas.append(current)
            current = current.base
        return schemas[::-1]

    def iter_own_items(self) -> Iterator[str]:
        for subscale in self.subscales:
            yield from subscale.items

    @property
    def item_names(self) -> Tuple[str, ...]:
        return tuple(self.iter_own_items())

    @property
    def all_item_names(self) -> Tuple[str, ...]:
        return tuple(item for schema in self.chain() for item in schema.item_names)

    @property
    def reverse_items(self) -> Tuple[str, ...]:
        return tuple(item for s in self.subscales for item in s.items if item in s.reverse_items)

    @property
    def scale_names(self) -> Tuple[str, ...]:
        """Every derived scale in output order: base scales first, then sub-scales, then composites."""
        own = tuple(s.name for s in self.subscales) + tuple(c.name for c in self.composites)
        if self.base is None:
            return own
        return self.base.scale_names + own

    @property
    def min_code(self) -> int:
        return min(self.valid_codes)

    @property
    def max_code(self) -> int:
        return max(self.valid_codes)

    @property
    def label(self) -> str:
        return f"{self.name} (v{self.version})"

    def composite_item_count(self, composite: Composite) -> int:
        """Nominal number of items behind a composite."""
        return sum(self.get_subscale(member).n_items for member in composite.members)

    def describe_allowed_codes(self) -> str:
        valid = sorted(self.valid_codes)
        if valid == list(range(valid[0], valid[-1] + 1)) and len(valid) > 2:
            parts = [f"{valid[0]}-{valid[-1]}"]
        else:
            parts = [str(c) for c in valid]
        parts += [str(c) for c in sorted(self.missing_codes)]
        return ", ".join(parts) + ", or NA"
