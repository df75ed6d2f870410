from __future__ import annotations
from dataclasses import asdict
from pathlib import Path
import json, hashlib, joblib, numpy as np, pandas as pd

ART_ROOT = Path("artifacts")

def run_id_from_cfg(cfg, tag: str | None = None) -> str:
    """Stable experiment id derived from the config (plus an optional tag)."""
    blob = json.dumps(asdict(cfg), sort_keys=True)
    h = hashlib.md5(blob.encode()).hexdigest()[:8]
    return f"{h}{('-' + tag) if tag else ''}"

def artdir(run_id: str, root: Path | None = None) -> Path:
    p = Path(root or ART_ROOT) / run_id
    p.mkdir(parents=True, exist_ok=True)
    return p

def save_json(path: Path, obj):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, default=_to_builtin))

def load_json(path: Path): return json.loads(path.read_text())

def _to_builtin(o):
    if hasattr(o, "item"):
        return o.item()  # np.float64, np.int64, np.bool_
    if isinstance(o, np.ndarray):
        return o.tolist()
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")

def save_npz(path: Path, **arrays):  # np.savez_compressed wrapper
    path.parent.mkdir(parents=True, exist_ok=True)
    np.savez_compressed(path, **arrays)

def load_npz(path: Path):
    with np.load(path, allow_pickle=False) as z:
        return {k: z[k] for k in z.files}

def save_parquet(path: Path, df: pd.DataFrame):
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_parquet(path, index=True)

def load_parquet(path: Path) -> pd.DataFrame:
    return pd.read_parquet(path)

def dump_joblib(path: Path, obj):
    """Write ``obj`` to ``path``, replacing any existing file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(obj, path)
    return path

def load_joblib(path: Path):
    return joblib.load(path)

def save_model(model, path) -> Path:
    return dump_joblib(Path(path), model)

def load_model(path):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    return load_joblib(path)
