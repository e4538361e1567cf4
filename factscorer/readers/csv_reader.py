"""
CSV Reader Module
-----------------
Loads a raw questionnaire export into a DataFrame for scoring.
"""
import logging
import os
from typing import Optional

import pandas as pd


class CSVReader:
    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.logger.info("CSVReader initialized.")

    def load_dataframe(self, path: str, id_column: Optional[str] = None, **read_kwargs) -> pd.DataFrame:
        """
        Reads a CSV file. Item columns are left as read; validation happens in the scorer.
        If `id_column` is given it must exist and is read as text so identifiers like '005' survive.
        """
        if not os.path.isfile(path):
            self.logger.error(f"CSVReader: File not found: {path}")
            raise FileNotFoundError(f"CSVReader: File not found: {path}")
        if id_column is not None:
            read_kwargs.setdefault('dtype', {id_column: str})
        df = pd.read_csv(path, **read_kwargs)
        if id_column is not None and id_column not in df.columns:
            self.logger.error(f"CSVReader: Identifier column '{id_column}' not found in {path}.")
            raise KeyError(f"CSVReader: Identifier column '{id_column}' not found in {path}.")
        self.logger.info(f"CSVReader: Loaded {path}, shape: {df.shape}")
        return df
