import os
import pandas as pd

REQUIRED_COLUMNS = [
    'gender', 'age', 'hypertension', 'heart_disease', 'ever_married',
    'work_type', 'Residence_type', 'avg_glucose_level', 'bmi',
    'smoking_status', 'stroke',
]

def read_stroke_csv(path):
    # empty cells are missing everywhere except bmi, which stays raw text
    # so that clean_bmi can report them
    header = pd.read_csv(path, nrows=0).columns
    na_values = {c: [''] for c in header if c != 'bmi'}
    df = pd.read_csv(
        path,
        dtype={'bmi': str},
        keep_default_na=False,
        na_values=na_values,
    )
    return df


def check_columns(df: pd.DataFrame, required=REQUIRED_COLUMNS):
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing columns in dataset: {missing}")

def load_data(path='data/raw/healthcare-dataset-stroke-data.csv'):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Dataset not found: {path}")
    df = read_stroke_csv(path)
    check_columns(df)

    # Drop identifiers
    if 'id' in df.columns:
        df = df.drop(columns=['id'])
    return df.reset_index(drop=True)
