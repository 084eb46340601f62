"""
CSV loading for customer records.

Values are read as strings and handed to the core unparsed; the encoder
owns all numeric parsing and defaulting.
"""

from pathlib import Path

import pandas as pd

from churn_risk.errors import InputError, MalformedBatchFileError
from churn_risk.records import CustomerRecord, frame_to_records


def read_customers(path: Path | str) -> list[CustomerRecord]:
    """
    Read a customer CSV into records.

    Raises:
        InputError: If the file does not exist
        MalformedBatchFileError: If the file yields zero rows
    """
    path = Path(path)
    if not path.is_file():
        raise InputError(f"Data loader: customer file {path} does not exist")
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError as e:
        raise MalformedBatchFileError(f"Batch file {path} has no parseable rows") from e

    df.columns = [str(c).strip() for c in df.columns]
    if df.empty:
        raise MalformedBatchFileError(f"Batch file {path} has a header but zero data rows")
    return frame_to_records(df)
