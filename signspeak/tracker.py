# signspeak/tracker.py
import threading
from typing import List, NamedTuple, Optional

import cv2
import numpy as np

from signspeak.landmarks import landmarks_from_mediapipe

DEFAULT_HAND_CONFIDENCE = 0.8


class HandResult(NamedTuple):
    landmarks: List[np.ndarray]   # one (21, 3) array per hand, normalized coords
    detected: bool
    confidence: float


NO_HANDS = HandResult([], False, 0.0)


class HandTracker:
    """MediaPipe Hands over BGR frames, one call in flight at a time."""

    def __init__(self, max_num_hands=1, model_complexity=1,
                 min_detection_confidence=0.7, min_tracking_confidence=0.5,
                 mirror=False, hands=None):
        if hands is None:
            import mediapipe as mp
            hands = mp.solutions.hands.Hands(
                static_image_mode=False,
                max_num_hands=max_num_hands,
                model_complexity=model_complexity,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
            print(f"[HAND] MediaPipe Hands ready (max_hands={max_num_hands}, "
                  f"det>{min_detection_confidence}, track>{min_tracking_confidence})")
        self._hands = hands
        self.mirror = mirror
        self._busy = threading.Lock()

    @classmethod
    def from_config(cls, cfg, **kw):
        t = cfg["tracking"]
        return cls(max_num_hands=int(t["max_num_hands"]),
                   model_complexity=int(t["model_complexity"]),
                   min_detection_confidence=float(t["min_detection_confidence"]),
                   min_tracking_confidence=float(t["min_tracking_confidence"]),
                   **kw)

    def process(self, frame_bgr: np.ndarray) -> HandResult:
        if not self._busy.acquire(blocking=False):
            return NO_HANDS
        try:
            if self.mirror:
                frame_bgr = cv2.flip(frame_bgr, 1)
            rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
            res = self._hands.process(rgb)
            if not res.multi_hand_landmarks:
                return NO_HANDS
            hands = [landmarks_from_mediapipe(h) for h in res.multi_hand_landmarks]
            return HandResult(hands, True, self._handedness_score(res))
        except Exception as e:
            print(f"[HAND][ERR] {type(e).__name__}: {e}")
            return NO_HANDS
        finally:
            self._busy.release()

    @staticmethod
    def _handedness_score(res) -> float:
        handedness = getattr(res, "multi_handedness", None)
        try:
            score = handedness[0].classification[0].score
        except (TypeError, IndexError, AttributeError):
            return DEFAULT_HAND_CONFIDENCE
        return float(score) if score else DEFAULT_HAND_CONFIDENCE

    def close(self):
        close = getattr(self._hands, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
