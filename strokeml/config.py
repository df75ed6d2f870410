from dataclasses import dataclass, field

@dataclass
class Config:
    # General
    random_state: int = 42
    data_path: str = 'data/raw/healthcare-dataset-stroke-data.csv'

    # Split
    train_size: float = 0.7

    # Models
    n_estimators: int = 100  # random forest trees
    lr_max_iter: int = 1000
    decision_threshold: float = 0.5

    # Feature lists
    target: str = 'stroke'

    numeric_features: list = field(default_factory=lambda: [
        'age',
        'hypertension',
        'heart_disease',
        'avg_glucose_level',
        'bmi',
    ])

    categorical_features: list = field(default_factory=lambda: [
        'gender',
        'ever_married',
        'work_type',
        'Residence_type',
        'smoking_status',
    ])

    # Output paths
    model_path: str = 'models/stroke_random_forest.joblib'
    out_dir: str = 'outputs'

    @property
    def feature_columns(self) -> list:
        return list(self.numeric_features) + list(self.categorical_features)
