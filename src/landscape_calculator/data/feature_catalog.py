"""
Feature Catalog - static list of orderable map features.

Loaded from feature_catalog.csv (shipped with the package) and used only to
build the initial OrderConfig. The pricing engine never reads it.
"""
import pandas as pd
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from ..config.settings import get_settings, Settings
from ..engine.models import FeatureEntry, OrderConfig


REQUIRED_COLUMNS = ['key', 'group', 'name', 'price_per_unit', 'days_per_unit', 'description']
GROUPS = ('', 'structures', 'custom')


@dataclass(frozen=True)
class FeatureSpec:
    """Catalog defaults for one feature."""
    key: str
    name: str
    price_per_unit: float
    days_per_unit: float
    description: str = ""
    group: Optional[str] = None

    def to_entry(self) -> FeatureEntry:
        """Fresh, disabled entry with quantity 1."""
        return FeatureEntry(
            key=self.key,
            name=self.name,
            enabled=False,
            quantity=1,
            price_per_unit=self.price_per_unit,
            days_per_unit=self.days_per_unit,
            group=self.group,
            description=self.description,
        )


class FeatureCatalog:
    """Ordered collection of FeatureSpec, keyed by feature key."""

    def __init__(self, specs: list[FeatureSpec]):
        self.specs = list(specs)
        self._by_key = {spec.key: spec for spec in self.specs}

    def __len__(self) -> int:
        return len(self.specs)

    def __iter__(self):
        return iter(self.specs)

    def __contains__(self, key: str) -> bool:
        return key in self._by_key

    def get(self, key: str) -> FeatureSpec:
        if key not in self._by_key:
            raise KeyError(f"Unknown feature '{key}'")
        return self._by_key[key]

    def keys(self) -> list[str]:
        return [spec.key for spec in self.specs]

    def grouped(self) -> dict[str, list[FeatureSpec]]:
        """Specs by display group ("" for ungrouped), in catalog order."""
        groups: dict[str, list[FeatureSpec]] = {}
        for spec in self.specs:
            groups.setdefault(spec.group or "", []).append(spec)
        return groups

    def default_config(self, settings: Optional[Settings] = None) -> OrderConfig:
        """Session-start configuration: default size, every feature disabled."""
        settings = settings or get_settings()
        return OrderConfig(
            width=settings.size.default,
            length=settings.size.default,
            features=tuple(spec.to_entry() for spec in self.specs),
        )

    def to_records(self) -> list[dict]:
        return [asdict(spec) for spec in self.specs]


def _load_csv(path: Path) -> pd.DataFrame:
    df = pd.read_csv(path, dtype=str).fillna('')
    # Strip all strings and headers
    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    return df


def load_feature_catalog(path: Optional[Path] = None, verbose: bool = False) -> FeatureCatalog:
    """
    Load and validate the feature catalog.

    Args:
        path: CSV path override (defaults to settings.feature_catalog)
        verbose: Print a one-line summary

    Raises:
        FileNotFoundError: CSV missing
        ValueError: missing columns, bad numbers, duplicate keys, unknown groups
    """
    path = Path(path) if path else get_settings().feature_catalog

    if not path.exists():
        raise FileNotFoundError(f"Feature catalog not found at {path}.")

    df = _load_csv(path)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Feature catalog {path.name} is missing columns: {', '.join(missing)}")

    errors = []

    duplicates = df.loc[df['key'].duplicated(), 'key'].unique().tolist()
    if duplicates:
        errors.append(f"Duplicate feature keys: {', '.join(duplicates)}")

    if (df['key'] == '').any():
        errors.append("Feature rows without a key")

    unknown_groups = sorted(set(df['group']) - set(GROUPS))
    if unknown_groups:
        errors.append(f"Unknown groups: {', '.join(unknown_groups)}")

    if (df['group'] == 'custom').sum() > 1:
        errors.append("Only one custom feature is allowed")

    for col in ('price_per_unit', 'days_per_unit'):
        values = pd.to_numeric(df[col], errors='coerce')
        bad = df.loc[values.isna() | (values < 0), 'key'].tolist()
        if bad:
            errors.append(f"Invalid {col} for: {', '.join(bad)}")
        df[col] = values

    if errors:
        raise ValueError(f"Invalid feature catalog {path.name}: " + "; ".join(errors))

    specs = [
        FeatureSpec(
            key=row['key'],
            name=row['name'] or row['key'],
            price_per_unit=float(row['price_per_unit']),
            days_per_unit=float(row['days_per_unit']),
            description=row['description'],
            group=row['group'] or None,
        )
        for _, row in df.iterrows()
    ]

    if verbose:
        print(f"Loaded {len(specs)} features from {path}")

    return FeatureCatalog(specs)
