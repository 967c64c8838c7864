# signspeak/recognizer.py
"""
Frame-level recognition pipelines

SignRecognizer:
    MediaPipe landmarks -> letter predictor, throttled so that at most one
    letter is produced per `interval` seconds, each one `delay` seconds after
    the hand was seen.
PixelSignDetector:
    Pixel skin/motion gate -> placeholder letter source. No landmarks.
TranslationHistory:
    Newest-first list of detected letters with repeat suppression and an
    optional speak() hook.
"""
import itertools
import random
import time
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence

import numpy as np

from signspeak.hand_detector import NO_HAND, SkinDetector, SkinMotionDetector
from signspeak.landmarks import Prediction
from signspeak.throttle import HeldValue, Throttle
from signspeak.utils import COMMON_LETTERS

__all__ = [
    "Prediction", "SignRecognizer", "PixelSignDetector", "RandomSignSource",
    "TranslationHistory", "HistoryEntry", "confidence_level",
    "pixel_detector_from_config", "recognizer_from_config",
]

DetectionCallback = Callable[[str, float], None]


def _predict_fn(predictor):
    return getattr(predictor, "predict", predictor)


class SignRecognizer:
    def __init__(self, tracker, predictor,
                 interval: float = 2.0,
                 delay: float = 0.3,
                 clock: Callable[[], float] = time.monotonic,
                 on_detection: Optional[DetectionCallback] = None):
        self.tracker = tracker
        self.predictor = predictor
        self.throttle = Throttle(interval, clock)
        self.delay = float(delay)
        self.clock = clock
        self.on_detection = on_detection

        self.current: Optional[Prediction] = None
        self._pending = None  # (due_time, landmarks)

        self.stats = {
            "frames_processed": 0,
            "hands_detected": 0,
            "predictions": 0,
            "errors": 0,
        }

    def process_frame(self, frame_bgr: np.ndarray, now: Optional[float] = None) -> Dict[str, Any]:
        """
        Track the hand in one frame and advance the prediction schedule.

        Returns:
            dict with keys:
                - detected: hand present in this frame
                - hand_confidence: tracker confidence
                - landmarks: (21, 3) array of the first hand or None
                - letter / confidence: current prediction (None / 0.0)
                - emitted: True when a new prediction was made on this frame
        """
        now = self.clock() if now is None else now
        self.stats["frames_processed"] += 1
        return self.process_hand(self.tracker.process(frame_bgr), now)

    def process_hand(self, hand, now: Optional[float] = None) -> Dict[str, Any]:
        now = self.clock() if now is None else now
        emitted = None

        if not hand.detected or not hand.landmarks:
            self.current = None
            self._pending = None
        else:
            self.stats["hands_detected"] += 1
            if self._pending is None and self.throttle.ready(now):
                self._pending = (now + self.delay, hand.landmarks[0])
            if self._pending is not None and now >= self._pending[0]:
                landmarks = self._pending[1]
                self._pending = None
                emitted = self._predict(landmarks)

        return {
            "detected": bool(hand.detected),
            "hand_confidence": float(hand.confidence),
            "landmarks": hand.landmarks[0] if hand.landmarks else None,
            "letter": self.current.letter if self.current else None,
            "confidence": self.current.confidence if self.current else 0.0,
            "emitted": emitted is not None,
        }

    def _predict(self, landmarks) -> Optional[Prediction]:
        try:
            pred = _predict_fn(self.predictor)(landmarks)
        except Exception as e:
            print(f"[DET][ERR] Prediction failed: {type(e).__name__}: {e}")
            self.stats["errors"] += 1
            self.current = None
            return None
        self.current = pred
        self.stats["predictions"] += 1
        if self.on_detection is not None:
            self.on_detection(pred.letter, pred.confidence)
        return pred

    def reset(self):
        self.current = None
        self._pending = None
        self.throttle.reset()

    def get_stats(self) -> Dict:
        return self.stats.copy()


class RandomSignSource:
    """Placeholder letter source for the pixel-only pipeline."""

    def __init__(self, letters: Sequence[str] = COMMON_LETTERS,
                 low: float = 0.7, high: float = 0.95,
                 rng: Optional[random.Random] = None):
        if not letters:
            raise ValueError("letters must not be empty")
        self.letters = list(letters)
        self.low, self.high = float(low), float(high)
        self.rng = rng or random.Random()

    def __call__(self) -> Prediction:
        letter = self.rng.choice(self.letters)
        return Prediction(letter, self.low + self.rng.random() * (self.high - self.low))


class PixelSignDetector:
    def __init__(self, detector, sign_source: Optional[Callable[[], Prediction]] = None,
                 sample_interval: float = 0.3,
                 predict_interval: float = 3.0,
                 min_confidence: float = 0.5,
                 hold: Optional[float] = 4.0,
                 clock: Callable[[], float] = time.monotonic,
                 on_detection: Optional[DetectionCallback] = None):
        self.detector = detector
        self.sign_source = sign_source or RandomSignSource()
        self.sampler = Throttle(sample_interval, clock)
        self.predict_throttle = Throttle(predict_interval, clock)
        self.min_confidence = float(min_confidence)
        self.held = HeldValue(hold, clock) if hold is not None else None
        self.clock = clock
        self.on_detection = on_detection

        self.detection = NO_HAND
        self.current: Optional[Prediction] = None
        self.stats = {"frames_processed": 0, "frames_sampled": 0, "predictions": 0}

    def process_frame(self, frame_bgr: np.ndarray, now: Optional[float] = None) -> Dict[str, Any]:
        now = self.clock() if now is None else now
        self.stats["frames_processed"] += 1
        emitted = False

        if self.sampler.ready(now):
            self.stats["frames_sampled"] += 1
            self.detection = self.detector.detect(frame_bgr)
            if (self.detection.detected
                    and self.detection.confidence > self.min_confidence
                    and self.predict_throttle.ready(now)):
                emitted = self._emit(now)
            elif not self.detection.detected and self.held is None:
                self.current = None

        current = self.held.get(now) if self.held is not None else self.current
        return {
            "detected": self.detection.detected,
            "hand_confidence": self.detection.confidence,
            "letter": current.letter if current else None,
            "confidence": current.confidence if current else 0.0,
            "emitted": emitted,
        }

    def _emit(self, now: float) -> bool:
        try:
            pred = self.sign_source()
        except Exception as e:
            print(f"[DET][ERR] Sign source failed: {type(e).__name__}: {e}")
            return False
        self.current = pred
        if self.held is not None:
            self.held.set(pred, now)
        self.stats["predictions"] += 1
        if self.on_detection is not None:
            self.on_detection(pred.letter, pred.confidence)
        return True

    def reset(self):
        self.detector.reset()
        self.detection = NO_HAND
        self.current = None
        if self.held is not None:
            self.held.clear()
        self.sampler.reset()
        self.predict_throttle.reset()


class HistoryEntry(NamedTuple):
    id: int
    letter: str
    confidence: float
    timestamp: float


class TranslationHistory:
    def __init__(self, limit: int = 15, recent: int = 8, repeat_after: float = 2.0,
                 min_confidence: float = 0.0,
                 speak: Optional[Callable[[str], Any]] = None,
                 clock: Callable[[], float] = time.time):
        self.limit = int(limit)
        self.recent = int(recent)
        self.repeat_after = float(repeat_after)
        self.min_confidence = float(min_confidence)
        self.speak = speak
        self.speech_enabled = True
        self.clock = clock
        self._entries: List[HistoryEntry] = []
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls, cfg, **kw):
        h = cfg["history"]
        return cls(limit=int(h["limit"]), recent=int(h["recent"]),
                   repeat_after=float(h["repeat_after_s"]),
                   min_confidence=float(h.get("min_confidence", 0.0)), **kw)

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def add(self, letter: str, confidence: float, now: Optional[float] = None) -> Optional[HistoryEntry]:
        """
        Record a detection. Letters at or below min_confidence, and repeats of the
        newest letter within repeat_after, are dropped.
        """
        if not letter or confidence <= self.min_confidence:
            return None
        now = self.clock() if now is None else now
        last = self._entries[0] if self._entries else None
        if last is not None and last.letter == letter and now - last.timestamp <= self.repeat_after:
            return None

        entry = HistoryEntry(next(self._ids), letter, float(confidence), now)
        self._entries.insert(0, entry)
        del self._entries[self.limit:]

        if self.speech_enabled and self.speak is not None:
            try:
                self.speak(letter)
            except Exception as e:
                print(f"[TTS] Speak failed: {e}")
        return entry

    def toggle_speech(self) -> bool:
        self.speech_enabled = not self.speech_enabled
        return self.speech_enabled

    def recent_text(self) -> str:
        return "".join(e.letter for e in self._entries[:self.recent])

    def clear(self):
        self._entries.clear()

    def __len__(self):
        return len(self._entries)


def confidence_level(confidence: float) -> str:
    if confidence > 0.8:
        return "high"
    if confidence > 0.6:
        return "medium"
    return "low"


def recognizer_from_config(cfg, tracker, predictor, **kw) -> SignRecognizer:
    r = cfg["recognition"]
    return SignRecognizer(tracker, predictor,
                          interval=float(r["predict_interval_s"]),
                          delay=float(r["predict_delay_s"]), **kw)


def pixel_detector_from_config(cfg, mode: str = "motion", **kw) -> PixelSignDetector:
    """mode: 'motion' (skin + texture + motion, held letters) or 'skin' (skin share only)."""
    if mode not in ("motion", "skin"):
        raise ValueError(f"Unknown pixel mode: {mode!r}")
    p = cfg["pixel"][mode]
    detector = SkinMotionDetector() if mode == "motion" else SkinDetector()
    hold = p.get("hold_s")
    return PixelSignDetector(detector,
                             sample_interval=float(p["sample_interval_s"]),
                             predict_interval=float(p["predict_interval_s"]),
                             min_confidence=float(p["min_confidence"]),
                             hold=float(hold) if hold is not None else None,
                             **kw)
