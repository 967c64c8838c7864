# signspeak/utils.py
from __future__ import annotations
import os, copy, yaml
from pathlib import Path
from typing import Dict, Any, Optional, Sequence

# ---------- Paths ----------
ROOT: Path = Path(__file__).resolve().parents[1]  # repo root

def repo_path(*parts: str | os.PathLike) -> Path:
    """Path helper relative to the repo root."""
    return ROOT.joinpath(*parts)

def resolve(p: str | os.PathLike) -> str:
    """Absolute string path from repo root (absolute inputs pass through)."""
    p = Path(p)
    if p.is_absolute():
        return str(p)
    return str(repo_path(p).resolve())

# ---------- Config ----------
DEFAULT_CONFIG: Dict[str, Any] = {
    "camera": {
        "index": 0,
        "width": 640,
        "height": 480,
        "fps": 15,
        "retries": 3,
        "retry_delay_s": 1.0,
        "blank_std": 2.5,
    },
    "tracking": {
        "max_num_hands": 1,
        "model_complexity": 1,
        "min_detection_confidence": 0.7,
        "min_tracking_confidence": 0.5,
    },
    "recognition": {
        "predict_interval_s": 2.0,
        "predict_delay_s": 0.3,
        "gesture_min_score": 8.5,
        "frame_width": 640,
        "frame_height": 480,
    },
    "pixel": {
        "motion": {
            "sample_interval_s": 0.3,
            "predict_interval_s": 3.0,
            "min_confidence": 0.5,
            "hold_s": 4.0,
        },
        "skin": {
            "sample_interval_s": 0.5,
            "predict_interval_s": 1.0,
            "min_confidence": 0.0,
            "hold_s": None,
        },
    },
    "history": {
        "limit": 15,
        "recent": 8,
        "repeat_after_s": 2.0,
        "min_confidence": 0.6,
    },
    "paths": {
        "letters_model": "models/final/asl_landmarks.keras",
        "log_file": "logs/session.log",
    },
}

def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out

def load_config(path: Optional[str | os.PathLike] = None) -> Dict[str, Any]:
    """
    Load config.yaml merged over DEFAULT_CONFIG.
    Lookup order: explicit path, $SIGNSPEAK_CONFIG, config/config.yaml.
    A missing file gives the defaults.
    """
    if path is None:
        path = os.getenv("SIGNSPEAK_CONFIG", "config/config.yaml")
    cfg_path = Path(resolve(path))
    if not cfg_path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)
    with open(cfg_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {cfg_path}")
    return _merge(DEFAULT_CONFIG, data)

# ---------- Logging ----------
class Logger:
    def __init__(self, log_file: str | os.PathLike = "logs/session.log"):
        self.path = Path(resolve(log_file))
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, message: str) -> None:
        from datetime import datetime
        line = f"[{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}] {message}"
        print(line)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

# ---------- Labels (letters) ----------
# Output order of landmark classifiers.
ASL_LETTERS: Sequence[str] = list("ABCDEFGHIJKLMNOPQRSTUVWXYZ")

# Letters the heuristic paths can produce.
COMMON_LETTERS: Sequence[str] = ["A", "B", "C", "D", "F", "I", "L", "O", "V", "Y"]
