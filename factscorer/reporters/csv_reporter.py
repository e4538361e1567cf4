"""
CSV Reporter Module
------------------
Handles saving scored DataFrames to CSV files.
"""
import logging
import os

import pandas as pd


class CSVReporter:
    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.logger.info("CSVReporter initialized.")

    def save_dataframe(self, data_df: pd.DataFrame, output_dir: str, filename: str) -> str:
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, filename)
        # Missing scores are written as empty cells.
        data_df.to_csv(path, index=False)
        self.logger.info(f"CSVReporter: Saved DataFrame to {path}.")
        return path
