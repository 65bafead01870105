"""
contract_atlas.ingestion — Reading raw contract records.

Modules:
    contract_records — Load and normalize the contract CSV into a DataFrame.
"""
