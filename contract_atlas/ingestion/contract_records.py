"""
contract_atlas/ingestion/contract_records.py — Contract record loading.

Reads the municipal contract CSV and returns a cleaned pandas DataFrame with
one row per contract. Header spelling differs between exports ("Vendor ID",
"vendorID", "VENDOR_ID"), so headers are folded to snake_case before any
column is looked up.

Normalized columns:
    agency, vendor_id, vendor_name, description,
    start_date, end_date, total_contract_amt
"""

import logging
import re

import pandas as pd

from contract_atlas.config import DEFAULT_CONFIG, ContractAtlasConfig

logger = logging.getLogger(__name__)

LABEL_COLUMNS = ("agency", "vendor_id", "vendor_name", "description")
DATE_COLUMNS = ("start_date", "end_date")
AMOUNT_COLUMN = "total_contract_amt"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_WORD = re.compile(r"[^0-9a-zA-Z]+")
_CURRENCY_NOISE = re.compile(r"[$,\s]")


def normalize_column_name(name: str) -> str:
    """
    Fold a raw header to snake_case.

    >>> normalize_column_name("totalContractAmt")
    'total_contract_amt'
    >>> normalize_column_name("Vendor ID")
    'vendor_id'
    """
    name = _CAMEL_BOUNDARY.sub("_", str(name).strip())
    name = _NON_WORD.sub("_", name)
    return name.strip("_").lower()


def load_contract_records(
    path: str,
    config: ContractAtlasConfig = DEFAULT_CONFIG,
) -> pd.DataFrame:
    """
    Load the contract CSV at `path` and normalize it.

    Args:
        path:   Path to the contract records CSV.
        config: ContractAtlasConfig. Uses vendor_key and min_contract_amount.

    Returns:
        DataFrame as produced by normalize_contract_records().

    Raises:
        ValueError: If a required column is missing.
    """
    logger.info("Loading contract records from: %s", path)
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    return normalize_contract_records(df, config)


def normalize_contract_records(
    df: pd.DataFrame,
    config: ContractAtlasConfig = DEFAULT_CONFIG,
) -> pd.DataFrame:
    """
    Normalize raw contract rows.

    Steps:
        1. Fold headers to snake_case.
        2. Check that agency, config.vendor_key and total_contract_amt exist.
        3. Strip label whitespace; parse amounts and dates.
        4. Drop rows with an empty agency or vendor label, and rows whose
           amount is below config.min_contract_amount.

    The input frame is not modified.

    Raises:
        ValueError: If a required column is missing after header folding.
    """
    df = df.rename(columns=normalize_column_name)

    required = ["agency", config.vendor_key, AMOUNT_COLUMN]
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(
            f"Contract records are missing required column(s): {', '.join(missing)}. "
            f"Found: {', '.join(df.columns)}"
        )

    df = df.copy()
    for col in LABEL_COLUMNS:
        if col in df.columns:
            df[col] = df[col].fillna("").astype(str).str.strip()

    df[AMOUNT_COLUMN] = pd.to_numeric(
        df[AMOUNT_COLUMN].astype(str).str.replace(_CURRENCY_NOISE, "", regex=True),
        errors="coerce",
    ).fillna(0.0)

    for col in DATE_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], errors="coerce")

    n_raw = len(df)
    has_labels = (df["agency"] != "") & (df[config.vendor_key] != "")
    n_unlabelled = int((~has_labels).sum())
    if n_unlabelled:
        logger.warning(
            "Dropping %d contract rows with an empty agency or %s.",
            n_unlabelled,
            config.vendor_key,
        )

    in_range = df[AMOUNT_COLUMN] >= config.min_contract_amount
    n_below = int((has_labels & ~in_range).sum())
    if n_below:
        logger.debug(
            "Dropping %d contract rows with amount below %.2f.",
            n_below,
            config.min_contract_amount,
        )

    df = df[has_labels & in_range].reset_index(drop=True)

    # Downstream stages read the vendor label from a single "vendor" column.
    df["vendor"] = df[config.vendor_key]

    logger.info(
        "Normalized %d contract records (%d dropped): %d agencies, %d vendors.",
        len(df),
        n_raw - len(df),
        df["agency"].nunique(),
        df["vendor"].nunique(),
    )
    return df
