"""
Tag normalization: turns raw decoder output into display-ready records.

normalize() maps a raw key -> value(s) mapping through a label registry.
normalize_native() groups the proprietary tag dump by tag family, unchanged.
Both are pure functions.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .core import NativeTag, TransformError
from .labels import LabelSpec


@dataclass
class DisplayValue:
    """One renderable value, optionally linked."""
    text: str
    ref: Optional[str] = None


@dataclass
class TagRecord:
    key: str
    label: DisplayValue
    value: List[DisplayValue] = field(default_factory=list)


@dataclass
class NativeTagGroup:
    type: str
    tags: List[NativeTag] = field(default_factory=list)


def as_list(raw: Any) -> List[Any]:
    """
    Coerce a raw tag value to a list of values.

    Lists and tuples are taken as they are; anything else, strings and
    mappings included, is a single value.

    Examples:
        >>> as_list('Song A')
        ['Song A']
        >>> as_list(['A', 'B'])
        ['A', 'B']
    """
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return [raw]

def _display_value(spec: LabelSpec, raw: Any) -> DisplayValue:
    try:
        text = spec.to_text(raw) if spec.to_text else raw
        ref = spec.value_ref(raw) if spec.value_ref else None
    except Exception as e:
        raise TransformError(spec.key, raw, e) from e
    return DisplayValue(text=text, ref=ref)

def normalize(registry: Iterable[LabelSpec], raw_tags: Mapping[str, Any]) -> List[TagRecord]:
    """
    Normalize raw tags against a label registry.

    Args:
        registry: Ordered label specs; their order is the output order
        raw_tags: Raw tag mapping (key -> single value or list of values)

    Returns:
        One TagRecord per registry key present in raw_tags. Keys missing from
        raw_tags are skipped, as are keys holding an empty list; keys missing
        from the registry are ignored.

    Raises:
        TransformError: If a renderer or link generator fails on a value
    """
    records = []
    for spec in registry:
        if spec.key not in raw_tags:
            continue
        values = as_list(raw_tags[spec.key])
        if not values:
            continue
        records.append(TagRecord(
            key=spec.key,
            label=DisplayValue(text=spec.label, ref=spec.key_ref),
            value=[_display_value(spec, v) for v in values],
        ))
    return records

def _native_tag(tag: Any) -> NativeTag:
    if isinstance(tag, NativeTag):
        return NativeTag(tag.id, tag.value)
    return NativeTag(tag['id'], tag['value'])

def normalize_native(raw_native: Mapping[str, Sequence[Any]]) -> List[NativeTagGroup]:
    """
    Group native tags by tag family, in the mapping's key order.
    Empty families are kept as groups without tags.
    """
    return [
        NativeTagGroup(type=tag_type, tags=[_native_tag(t) for t in tags])
        for tag_type, tags in raw_native.items()
    ]
