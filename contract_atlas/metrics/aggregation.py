"""
contract_atlas/metrics/aggregation.py — Agency, vendor and edge aggregation.

Collapses one-row-per-contract records into the three tables every later
stage reads:

    agency_summary       — one row per agency
    vendor_summary       — one row per vendor
    agency_vendor_edges  — one row per distinct (agency, vendor) pair

Input is the frame returned by load_contract_records(), which guarantees the
columns agency, vendor and total_contract_amt.
"""

import logging

import pandas as pd

from contract_atlas.ingestion.contract_records import AMOUNT_COLUMN

logger = logging.getLogger(__name__)

AGENCY_SUMMARY_COLUMNS = [
    "agency", "contract_count", "vendor_count", "total_amount",
    "mean_amount", "first_start", "last_end",
]
VENDOR_SUMMARY_COLUMNS = [
    "vendor", "contract_count", "agency_count", "total_amount", "mean_amount",
]
EDGE_COLUMNS = ["agency", "vendor", "contract_count", "total_amount"]


def agency_summary(records: pd.DataFrame) -> pd.DataFrame:
    """
    Summarize contracts per agency.

    Columns:
        agency, contract_count, vendor_count, total_amount, mean_amount,
        first_start (earliest start_date or NaT), last_end (latest end_date or NaT)

    Sorted by total_amount descending, then agency ascending.
    """
    if records.empty:
        return pd.DataFrame(columns=AGENCY_SUMMARY_COLUMNS)

    grouped = records.groupby("agency", sort=True)
    table = pd.DataFrame({
        "contract_count": grouped.size(),
        "vendor_count": grouped["vendor"].nunique(),
        "total_amount": grouped[AMOUNT_COLUMN].sum(),
        "mean_amount": grouped[AMOUNT_COLUMN].mean(),
    })
    table["first_start"] = (
        grouped["start_date"].min() if "start_date" in records.columns else pd.NaT
    )
    table["last_end"] = (
        grouped["end_date"].max() if "end_date" in records.columns else pd.NaT
    )

    table = table.reset_index()[AGENCY_SUMMARY_COLUMNS]
    table = table.sort_values(
        ["total_amount", "agency"], ascending=[False, True]
    ).reset_index(drop=True)

    logger.debug("Agency summary: %d agencies.", len(table))
    return table


def vendor_summary(records: pd.DataFrame) -> pd.DataFrame:
    """
    Summarize contracts per vendor.

    Columns:
        vendor, contract_count, agency_count, total_amount, mean_amount

    Sorted by total_amount descending, then vendor ascending.
    """
    if records.empty:
        return pd.DataFrame(columns=VENDOR_SUMMARY_COLUMNS)

    grouped = records.groupby("vendor", sort=True)
    table = pd.DataFrame({
        "contract_count": grouped.size(),
        "agency_count": grouped["agency"].nunique(),
        "total_amount": grouped[AMOUNT_COLUMN].sum(),
        "mean_amount": grouped[AMOUNT_COLUMN].mean(),
    })

    table = table.reset_index()[VENDOR_SUMMARY_COLUMNS]
    table = table.sort_values(
        ["total_amount", "vendor"], ascending=[False, True]
    ).reset_index(drop=True)

    logger.debug("Vendor summary: %d vendors.", len(table))
    return table


def agency_vendor_edges(records: pd.DataFrame) -> pd.DataFrame:
    """
    Collapse contracts into one weighted edge per (agency, vendor) pair.

    Columns:
        agency, vendor, contract_count, total_amount

    Sorted by (agency, vendor). Several contracts between the same agency
    and vendor become a single row with contract_count > 1.
    """
    if records.empty:
        return pd.DataFrame(columns=EDGE_COLUMNS)

    edges = (
        records.groupby(["agency", "vendor"], sort=True)
        .agg(
            contract_count=(AMOUNT_COLUMN, "size"),
            total_amount=(AMOUNT_COLUMN, "sum"),
        )
        .reset_index()[EDGE_COLUMNS]
    )

    logger.info(
        "Aggregated %d contracts into %d agency→vendor edges.",
        len(records),
        len(edges),
    )
    return edges
