from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split


@dataclass(frozen=True)
class Split:
    train_index: np.ndarray
    test_index: np.ndarray

    def train(self, df: pd.DataFrame) -> pd.DataFrame:
        return df.loc[self.train_index]

    def test(self, df: pd.DataFrame) -> pd.DataFrame:
        return df.loc[self.test_index]


def stratified_split(
    df: pd.DataFrame,
    target: str = "stroke",
    train_size: float = 0.7,
    random_state: int = 42,
) -> Split:
    """Partition row labels of ``df`` into train/test, stratified on ``target``.

    The same ``random_state`` on the same frame always returns the same
    partition.
    """

    if target not in df.columns:
        raise ValueError(f"Column '{target}' not found in dataframe")
    index = np.asarray(df.index)
    train_idx, test_idx = train_test_split(
        index,
        train_size=train_size,
        stratify=df[target].to_numpy(),
        random_state=random_state,
    )
    return Split(train_index=np.asarray(train_idx), test_index=np.asarray(test_idx))
