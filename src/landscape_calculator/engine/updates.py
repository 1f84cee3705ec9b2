"""
Copy-on-write edits for OrderConfig.

Each helper returns a new config and leaves the one passed in untouched, so a
caller can hand its current snapshot to the engine while building the next one.
"""
from dataclasses import fields, replace
from typing import Optional

from .models import FeatureEntry, OrderConfig


_EDITABLE_FIELDS = {f.name for f in fields(FeatureEntry)} - {'key', 'group', 'description'}


def with_size(config: OrderConfig, width: Optional[float] = None, length: Optional[float] = None) -> OrderConfig:
    """Return a config with a new width and/or length."""
    changes = {}
    if width is not None:
        changes['width'] = width
    if length is not None:
        changes['length'] = length
    return replace(config, **changes)


def with_feature(config: OrderConfig, key: str, **changes) -> OrderConfig:
    """
    Return a config where the feature `key` has the given fields replaced.

    Raises:
        KeyError: no feature with that key
        TypeError: a field that cannot be edited (or does not exist)
    """
    unknown = set(changes) - _EDITABLE_FIELDS
    if unknown:
        raise TypeError(f"Cannot edit feature field(s): {', '.join(sorted(unknown))}")

    features = list(config.features)
    for index, feature in enumerate(features):
        if feature.key == key:
            features[index] = replace(feature, **changes)
            return replace(config, features=tuple(features))

    raise KeyError(f"Unknown feature '{key}'")


def with_delivery_days(config: OrderConfig, days: Optional[int]) -> OrderConfig:
    """Return a config with a chosen delivery time (None resets to the estimate)."""
    return replace(config, delivery_days=days)
