# Quick EDA (console prints only, no heavy plots)
from strokeml.config import Config
from strokeml.data import load_data
from strokeml.preprocess import clean_bmi

if __name__ == "__main__":
    cfg = Config()
    df = load_data(cfg.data_path)
    print("Shape:", df.shape)
    print("Columns:", list(df.columns))
    print(df.head(3))

    print("\nMissing values per column:")
    print(df.isna().sum().sort_values(ascending=False))

    report = clean_bmi(df)
    print(f"\nBMI: {report.n_invalid} invalid entries, distinct raw values {report.invalid_values}")
    print(f"BMI median used for imputation: {report.median:.2f}")
    print(df['bmi'].describe())

    print("\nStroke value counts:")
    print(df[cfg.target].value_counts())
