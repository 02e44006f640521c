"""
Hierarchical NFT metadata matching.

A filter is a partial metadata record. Top-level scalar fields must equal the
record's field of the same (case-insensitive) name exactly; the reserved
``attributes`` field is a list of ``{"trait_type", "value"}`` pairs, each of
which must be present among the record's traits with a loosely equal value.
Fields absent from the filter are unconstrained, so an empty filter matches
every record, including a missing one.
"""

from collections import OrderedDict
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Iterator, Mapping, MutableMapping, Optional, Tuple

from loguru import logger

ATTRIBUTES_KEY = "attributes"

_MISSING = object()


class CaseInsensitiveDict(MutableMapping):
    """Ordered mapping whose lookups ignore key case.

    Keys keep the spelling they were first inserted with; iteration follows
    insertion order.
    """

    def __init__(self, data: Optional[Any] = None, **kwargs: Any):
        self._store: "OrderedDict[str, Tuple[str, Any]]" = OrderedDict()
        if data is not None:
            self.update(data)
        self.update(kwargs)

    @staticmethod
    def _fold(key: Any) -> str:
        return str(key).casefold()

    def __setitem__(self, key: Any, value: Any) -> None:
        folded = self._fold(key)
        original = self._store[folded][0] if folded in self._store else key
        self._store[folded] = (original, value)

    def __getitem__(self, key: Any) -> Any:
        return self._store[self._fold(key)][1]

    def __delitem__(self, key: Any) -> None:
        del self._store[self._fold(key)]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"


def strict_equal(left: Any, right: Any) -> bool:
    """Equality without type coercion (``True`` is not ``1``, ``"1"`` is not ``1``)."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def _as_number(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, (int, float)):
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return Decimal(0)
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None


def loose_equal(left: Any, right: Any) -> bool:
    """Equality with scalar coercion, so ``"5"`` equals ``5`` and ``True`` equals ``1``.

    Two strings are compared verbatim; ``None`` only equals ``None``.
    """
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    if left == right and type(left) is type(right):
        return True
    left_number = _as_number(left)
    right_number = _as_number(right)
    if left_number is not None and right_number is not None:
        return left_number == right_number
    return left == right


def _trait_list(value: Any) -> Optional[list]:
    """Trait lists must be sequences; anything else counts as no traits"""
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def _trait_map(attributes: Iterable[Any]) -> CaseInsensitiveDict:
    traits = CaseInsensitiveDict()
    for attr in attributes:
        if isinstance(attr, Mapping) and "trait_type" in attr:
            traits[attr["trait_type"]] = attr.get("value")
    return traits


class MetadataMatcher:
    """Decides whether a metadata record satisfies a partial filter record"""

    attributes_key = ATTRIBUTES_KEY

    def matches(self, record: Optional[Mapping[str, Any]], filter: Optional[Mapping[str, Any]]) -> bool:
        if not filter:
            return True

        fields = CaseInsensitiveDict(record if isinstance(record, Mapping) else {})
        wanted_traits = None

        for key, expected in filter.items():
            if str(key).casefold() == self.attributes_key:
                wanted_traits = expected
                continue
            actual = fields.get(key, _MISSING)
            if actual is _MISSING or not strict_equal(actual, expected):
                logger.debug(f"Field {key!r} mismatch: wanted {expected!r}, got {actual if actual is not _MISSING else '<missing>'!r}")
                return False

        record_traits = _trait_list(fields.get(self.attributes_key))
        if wanted_traits is not None:
            wanted_traits = _trait_list(wanted_traits)
            if wanted_traits is None or not all(isinstance(w, Mapping) for w in wanted_traits):
                logger.debug("Malformed attributes filter, no record can match it")
                return False

        if wanted_traits:
            if record is None or record_traits is None:
                return False
            # Length is checked before content: a longer filter never matches
            if len(wanted_traits) > len(record_traits):
                return False

        if record_traits is not None and wanted_traits is not None:
            traits = _trait_map(record_traits)
            for wanted in wanted_traits:
                name = wanted.get("trait_type")
                if name not in traits or not loose_equal(traits[name], wanted.get("value")):
                    logger.debug(f"Trait {name!r} mismatch: wanted {wanted.get('value')!r}")
                    return False

        return True

    __call__ = matches


_default_matcher = MetadataMatcher()


def matches(record: Optional[Mapping[str, Any]], filter: Optional[Mapping[str, Any]]) -> bool:
    """Module-level shortcut for :meth:`MetadataMatcher.matches`"""
    return _default_matcher.matches(record, filter)
