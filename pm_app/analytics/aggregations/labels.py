"""Label histogram with display-case folding."""

from __future__ import annotations

import pandas as pd


def normalize_label(label: str) -> str:
    """First character title-cased, the rest lower-cased ("backEnd" -> "Backend").

    Only the first code point of the title-cased head is kept as-is, so heads
    that expand ("ßeta" -> "Sseta") still normalize to a fixed point.
    """
    head = label[:1].title()
    return head[:1] + (head[1:] + label[1:]).lower()


def _exploded_labels(df: pd.DataFrame) -> pd.Series:
    if df.empty or "labels" not in df.columns:
        return pd.Series(dtype="object")
    exploded = df["labels"].explode().dropna()
    return exploded[exploded.map(lambda v: isinstance(v, str) and v != "")]


def count_by_label(df: pd.DataFrame) -> dict[str, int]:
    """Count every label occurrence under its display form.

    Labels differing only in case are merged; see ``label_variants`` for the
    raw spellings behind each display label.
    """
    raw = _exploded_labels(df)
    if raw.empty:
        return {}
    display = raw.map(normalize_label).to_frame("label")
    counts = display.groupby("label", sort=False).size()
    return {str(label): int(n) for label, n in counts.items()}


def label_variants(df: pd.DataFrame) -> dict[str, list[str]]:
    raw = _exploded_labels(df)
    variants: dict[str, list[str]] = {}
    for label in raw:
        seen = variants.setdefault(normalize_label(label), [])
        if label not in seen:
            seen.append(label)
    return {k: sorted(v) for k, v in variants.items()}
