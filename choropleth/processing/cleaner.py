"""Cleaning of the statistics records into a tabular form."""

from __future__ import annotations

import logging

import pandas as pd

from choropleth.schemas import StatisticRecord

logger = logging.getLogger(__name__)

STATISTIC_COLUMNS = ["id", "area_name", "state_name", "percentage"]
NAME_COLUMNS = ["area_name", "state_name"]


def records_to_frame(records: list[StatisticRecord]) -> pd.DataFrame:
    """Tabulate validated records, keeping the input order."""
    if not records:
        return pd.DataFrame(columns=STATISTIC_COLUMNS)
    return pd.DataFrame([r.model_dump() for r in records], columns=STATISTIC_COLUMNS)


def strip_names(df: pd.DataFrame) -> pd.DataFrame:
    """Trim the county and state names; null names stay null."""
    df = df.copy()
    for col in NAME_COLUMNS:
        df[col] = df[col].map(lambda v: v.strip() if isinstance(v, str) else v)
    return df


def normalize_percentages(df: pd.DataFrame) -> pd.DataFrame:
    """Store percentages as float64 with NaN for null values.

    A column made only of nulls comes out of the records with object dtype;
    casting it keeps the joiner and the scale on a single missing marker.
    """
    df = df.copy()
    df["percentage"] = df["percentage"].astype("float64")
    missing = int(df["percentage"].isna().sum())
    if missing:
        logger.info("%d records have no percentage", missing)
    return df


def drop_duplicate_ids(df: pd.DataFrame) -> pd.DataFrame:
    """Keep the first record for each id."""
    before = len(df)
    df = df.drop_duplicates(subset=["id"], keep="first")
    removed = before - len(df)
    if removed:
        logger.info("Removed %d records with duplicate ids", removed)
    return df


def clean_statistics(records: list[StatisticRecord]) -> pd.DataFrame:
    """Run the full cleaning pipeline on the statistics records.

    Percentages are left as NaN when missing; they are never filled, so
    they cannot shift the color scale domain.
    """
    df = records_to_frame(records)
    df = strip_names(df)
    df = normalize_percentages(df)
    df = drop_duplicate_ids(df)
    if df.empty:
        logger.warning("No statistics records to map")
    logger.info("Cleaning complete: %d records", len(df))
    return df.reset_index(drop=True)
