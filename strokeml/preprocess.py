import re
from dataclasses import dataclass, field

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.impute import SimpleImputer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler
from .config import Config

# digits with at most one decimal point
BMI_PATTERN = re.compile(r'^(\d+(\.\d*)?|\.\d+)$')


@dataclass
class BmiCleaningReport:
    n_invalid: int
    invalid_values: list = field(default_factory=list)
    median: float = float('nan')

    def as_dict(self):
        return {
            'n_invalid': self.n_invalid,
            'invalid_values': list(self.invalid_values),
            'median': self.median,
        }


def is_valid_bmi(value) -> bool:
    if pd.isna(value):
        return False
    return BMI_PATTERN.match(str(value).strip()) is not None


def mark_invalid_bmi(df: pd.DataFrame, column: str = 'bmi') -> pd.Series:
    """Convert ``column`` to float in place, with pattern failures set to NaN.

    Returns the boolean mask of values that passed the check.
    """
    if column not in df.columns:
        raise ValueError(f"Column '{column}' not found in dataframe")

    raw = df[column]
    valid = raw.map(is_valid_bmi).astype(bool)
    numeric = pd.Series(np.nan, index=df.index, dtype=float)
    numeric[valid] = raw[valid].astype(str).str.strip().astype(float)
    df[column] = numeric
    return valid


def clean_bmi(df: pd.DataFrame, column: str = 'bmi') -> BmiCleaningReport:
    """Mark non-numeric BMI entries missing and fill every gap with the median.

    ``df`` is modified in place. The median is taken over the values that
    survive the pattern check.
    """
    if column not in df.columns:
        raise ValueError(f"Column '{column}' not found in dataframe")

    raw = df[column]
    valid = raw.map(is_valid_bmi).astype(bool)
    invalid_values = sorted({str(v) for v in raw[~valid] if not pd.isna(v)})

    if not valid.any():
        raise ValueError(f"No valid '{column}' values to compute a median from")

    mark_invalid_bmi(df, column)
    median = float(df[column].median())
    df[column] = df[column].fillna(median)

    return BmiCleaningReport(
        n_invalid=int((~valid).sum()),
        invalid_values=invalid_values,
        median=median,
    )


def split_features_target(df: pd.DataFrame, cfg: Config):
    features = [f for f in cfg.feature_columns if f in df.columns]
    X = df[features]
    y = df[cfg.target].astype(int)
    return X, y


def build_preprocessor(X: pd.DataFrame, cfg: Config):
    """Return an unfitted ColumnTransformer and the feature lists it covers.

    Numeric gaps are filled with the training median, so scoring never
    depends on the other rows of a batch.
    """
    numeric_features = [f for f in cfg.numeric_features if f in X.columns]
    categorical_features = [f for f in cfg.categorical_features if f in X.columns]

    transformers = []
    if numeric_features:
        num = Pipeline([
            ('imputer', SimpleImputer(strategy='median')),
            ('scaler', StandardScaler()),
        ])
        transformers.append(('num', num, numeric_features))
    if categorical_features:
        ohe = OneHotEncoder(handle_unknown='ignore', sparse_output=False)
        transformers.append(('cat', ohe, categorical_features))

    ct = ColumnTransformer(transformers)
    return ct, numeric_features, categorical_features
