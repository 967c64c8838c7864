# signspeak/heuristic.py
"""
Fallback letter classifier from fingertip extension.

A finger is "extended" when its wrist->tip distance exceeds
`ratio * mean(tip distances)`. The extended-finger pattern is then mapped
to a handful of easy-to-separate letters.
"""
import random
from typing import Optional, Sequence

from signspeak.landmarks import Prediction, tip_distances

THUMB, INDEX, MIDDLE, RING, PINKY = range(5)

DEFAULT_RATIOS = {"gesture": 0.70, "model": 0.75}
SAFE_DEFAULT = Prediction("A", 0.5)


def extended_fingers(landmarks, ratio: float) -> Sequence[bool]:
    d = tip_distances(landmarks)
    threshold = float(d.mean()) * ratio
    return [bool(x > threshold) for x in d]


def _gesture_rules(ext, _rng) -> Prediction:
    # deterministic; _rng keeps the signature shared with _model_rules
    n = sum(ext)
    if n == 0:
        return Prediction("A", 0.7)
    if n == 1:
        if ext[INDEX]: return Prediction("D", 0.8)
        if ext[PINKY]: return Prediction("I", 0.8)
        return Prediction("A", 0.6)
    if n == 2:
        if ext[INDEX] and ext[MIDDLE]: return Prediction("V", 0.8)
        if ext[THUMB] and ext[INDEX]: return Prediction("L", 0.8)
        if ext[THUMB] and ext[PINKY]: return Prediction("Y", 0.8)
        return Prediction("V", 0.6)
    if n == 4:
        return Prediction("B", 0.7)
    return Prediction("B", 0.6)


def _model_rules(ext, rng) -> Prediction:
    n = sum(ext)
    if n == 0:
        # closed fist: A and S are not separable from tip distances alone
        return Prediction("A" if rng.random() > 0.5 else "S", 0.75)
    if n == 1:
        if ext[INDEX]: return Prediction("D", 0.8)
        if ext[PINKY]: return Prediction("I", 0.8)
        return Prediction("A", 0.7)
    if n == 2:
        if ext[INDEX] and ext[MIDDLE]: return Prediction("V", 0.85)
        if ext[THUMB] and ext[INDEX]: return Prediction("L", 0.8)
        return Prediction("U", 0.75)
    if n == 3:
        return Prediction("W", 0.75)
    if n == 4:
        return Prediction("B", 0.8)
    return Prediction("B", 0.7)


RULES = {"gesture": _gesture_rules, "model": _model_rules}


class HeuristicClassifier:
    """Distance-threshold classifier used when no model/gesture matches."""

    def __init__(self, rules: str = "model", ratio: Optional[float] = None,
                 rng: Optional[random.Random] = None):
        if rules not in RULES:
            raise ValueError(f"Unknown rule set: {rules!r} (expected one of {sorted(RULES)})")
        self.rules = rules
        self.ratio = DEFAULT_RATIOS[rules] if ratio is None else float(ratio)
        self.rng = rng or random.Random()

    def classify(self, landmarks) -> Prediction:
        try:
            ext = extended_fingers(landmarks, self.ratio)
            return RULES[self.rules](ext, self.rng)
        except Exception as e:
            print(f"[DET][HEUR-ERR] {type(e).__name__}: {e}")
            return SAFE_DEFAULT

    __call__ = classify
