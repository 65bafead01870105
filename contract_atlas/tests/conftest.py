"""
contract_atlas/tests/conftest.py — Shared pytest fixtures for the Contract Atlas test suite.

Fixtures:
    contract_records_frame  — Small hand-written raw record frame (camelCase headers).
    contract_records_csv    — The same records written to a temporary CSV.
    synthetic_records       — Deterministic synthetic record set (SEED=17), session-scoped.
"""

import random

import numpy as np
import pandas as pd
import pytest

SEED = 17

AGENCIES = [
    "Department of Transportation",
    "Department of Parks and Recreation",
    "Police Department",
    "Fire Department",
    "Public Library",
    "Water Utility",
    "Office of the Mayor",
    "Housing Authority",
]

VENDORS = [f"Vendor {i:03d} LLC" for i in range(1, 41)]


@pytest.fixture
def contract_records_frame() -> pd.DataFrame:
    """Raw records as exported: camelCase headers, formatted amounts."""
    return pd.DataFrame({
        "agency": ["Parks", "Parks", "Parks", "Police", "Police", "Library", "Fire"],
        "vendorID": ["V1", "V1", "V2", "V1", "V3", "V3", "V9"],
        "vendorName": ["Acme Corp", "Acme Corp", "Green Co", "Acme Corp", "Books Inc", "Books Inc", "Hose Ltd"],
        "description": ["mowing", "mowing", "trees", "vehicles", "manuals", "books", "hoses"],
        "startDate": ["2019-01-01", "2019-06-01", "2020-02-01", "2018-03-15", "2021-01-01", "2020-05-05", "2022-01-01"],
        "endDate": ["2019-12-31", "2020-05-31", "2021-01-31", "2019-03-14", "2021-12-31", "2021-05-04", "2022-12-31"],
        "totalContractAmt": ["$1,000.00", "2500", "$300.50", "10,000", "200", "800", "50"],
    })


@pytest.fixture
def contract_records_csv(tmp_path, contract_records_frame) -> str:
    path = tmp_path / "contracts.csv"
    contract_records_frame.to_csv(path, index=False)
    return str(path)


@pytest.fixture(scope="session")
def synthetic_records() -> pd.DataFrame:
    """
    Deterministic synthetic contract records (SEED=17).

    Each agency draws 5–15 contracts from a vendor pool with a few popular
    vendors, so the projection has both dense and sparse regions.
    """
    random.seed(SEED)
    rng = np.random.default_rng(SEED)

    weights = np.array([5.0 if i < 4 else 1.0 for i in range(len(VENDORS))])
    weights /= weights.sum()

    rows = []
    for agency in AGENCIES:
        for _ in range(random.randint(5, 15)):
            vendor = VENDORS[int(rng.choice(len(VENDORS), p=weights))]
            rows.append({
                "Agency": agency,
                "Vendor ID": vendor.split()[1],
                "Vendor Name": vendor,
                "Description": "services",
                "Start Date": "2020-01-01",
                "End Date": "2020-12-31",
                "Total Contract Amt": f"{float(rng.lognormal(9.0, 1.5)):.2f}",
            })
    return pd.DataFrame(rows)
