# signspeak/model.py
"""
Landmark letter classifier.

Loads an optional trained model over the 73-dim landmark features
(Keras .keras/.h5 or a joblib-pickled scikit-learn estimator). When no model
is available, or a prediction fails, the distance heuristic answers instead.
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import numpy as np

from signspeak.heuristic import HeuristicClassifier
from signspeak.landmarks import Prediction, extract_features
from signspeak.utils import ASL_LETTERS, resolve

KERAS_SUFFIXES = {".keras", ".h5"}
JOBLIB_SUFFIXES = {".joblib", ".pkl"}


def _letter_for_id(class_id) -> str:
    idx = int(class_id)
    return ASL_LETTERS[idx] if 0 <= idx < len(ASL_LETTERS) else "A"


class LetterModel:
    def __init__(self, model: Any, kind: str, labels: Optional[Sequence[str]] = None, path: str = ""):
        self.model = model
        self.kind = kind
        self.path = path
        if labels is None:
            classes = getattr(model, "classes_", None)
            if classes is not None and all(isinstance(c, str) for c in classes):
                labels = [str(c) for c in classes]
            elif classes is not None:
                # integer class ids are letter indices; column i holds classes_[i]
                labels = [_letter_for_id(c) for c in classes]
        self.labels = list(labels) if labels is not None else list(ASL_LETTERS)

    @classmethod
    def load(cls, path: str | os.PathLike) -> "LetterModel":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Letter model not found: {p}")
        suffix = p.suffix.lower()
        if suffix in KERAS_SUFFIXES:
            import tensorflow as tf  # heavy; only when a Keras model is configured
            model = tf.keras.models.load_model(str(p), compile=False)
            kind = "keras"
        elif suffix in JOBLIB_SUFFIXES:
            import joblib
            model = joblib.load(str(p))
            kind = "sklearn"
        else:
            raise ValueError(f"Unsupported model file type: {p.suffix!r}")
        print(f"[MODEL] Loaded {kind} letter model: {p}")
        return cls(model, kind, path=str(p))

    def predict_proba(self, features: np.ndarray) -> np.ndarray:
        x = np.asarray(features, dtype=np.float32).reshape(1, -1)
        if self.kind == "keras":
            probs = self.model(x, training=False)
            probs = probs.numpy() if hasattr(probs, "numpy") else np.asarray(probs)
        else:
            probs = self.model.predict_proba(x)
        return np.asarray(probs, dtype=np.float64)[0]

    def label_for(self, idx: int) -> str:
        return self.labels[idx] if 0 <= idx < len(self.labels) else "A"


class LandmarkPredictor:
    def __init__(self, model: Optional[LetterModel] = None,
                 fallback: Optional[HeuristicClassifier] = None):
        self.model = model
        self.fallback = fallback or HeuristicClassifier(rules="model")

    @property
    def has_model(self) -> bool:
        return self.model is not None

    def predict(self, landmarks) -> Prediction:
        """Input: 21 hand landmarks. Output: Prediction(letter, confidence)."""
        try:
            features = extract_features(landmarks)
            if self.model is None:
                return self.fallback.classify(landmarks)
            probs = self.model.predict_proba(features)
            top = int(np.argmax(probs))
            return Prediction(self.model.label_for(top), float(probs[top]))
        except Exception as e:
            print(f"[DET][MODEL-ERR] {type(e).__name__}: {e}")
            return self.fallback.classify(landmarks)

    __call__ = predict


def load_predictor(cfg: Dict[str, Any]) -> LandmarkPredictor:
    """Predictor from config (or $SIGNSPEAK_LETTERS_MODEL); no model file -> heuristic only."""
    model_path = os.getenv("SIGNSPEAK_LETTERS_MODEL", cfg["paths"].get("letters_model") or "")
    if not model_path:
        return LandmarkPredictor()
    path = resolve(model_path)
    if not os.path.exists(path):
        print(f"[MODEL] {path} not found; using heuristic classification")
        return LandmarkPredictor()
    return LandmarkPredictor(LetterModel.load(path))
