"""
Pixel-level hand presence detection (no ML)

Two detectors over the centre of the frame:
  SkinDetector        - share of skin-coloured pixels only
  SkinMotionDetector  - skin pixels with local texture + inter-frame motion,
                        which rejects faces and static skin-coloured backgrounds
"""
import math
from typing import NamedTuple, Optional, Tuple

import cv2
import numpy as np


class HandDetection(NamedTuple):
    detected: bool
    confidence: float
    ratio: float = 0.0
    motion_ratio: float = 0.0


NO_HAND = HandDetection(False, 0.0)


def _rgb_int(frame_bgr: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB).astype(np.int32)


def loose_skin_mask(rgb: np.ndarray) -> np.ndarray:
    """RGB skin rule: bright enough, red dominant, some saturation."""
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    spread = rgb.max(axis=2) - rgb.min(axis=2)
    return (r > 95) & (g > 40) & (b > 20) & (r > g) & (r > b) & (spread > 15)


def strict_skin_mask(rgb: np.ndarray) -> np.ndarray:
    """Loose rule plus red/green separation and no over-exposed channel."""
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    return (loose_skin_mask(rgb) & (np.abs(r - g) > 15)
            & (r < 250) & (g < 250) & (b < 250))


def color_variation(rgb: np.ndarray, radius: int = 3) -> np.ndarray:
    """
    Per pixel: sum over the (2r+1)^2 neighbourhood of |dR|+|dG|+|dB| against
    the centre pixel. Neighbours outside the frame are ignored.
    """
    h, w = rgb.shape[:2]
    pad = np.pad(rgb, ((radius, radius), (radius, radius), (0, 0)))
    valid = np.pad(np.ones((h, w), dtype=bool), radius)
    total = np.zeros((h, w), dtype=np.int64)
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            ys = slice(radius + dy, radius + dy + h)
            xs = slice(radius + dx, radius + dx + w)
            diff = np.abs(rgb - pad[ys, xs]).sum(axis=2)
            total += diff * valid[ys, xs]
    return total


def center_window(h: int, w: int, fraction: float) -> Tuple[slice, slice]:
    """Square around the frame centre with half-side fraction*min(w, h)."""
    cy, cx = h / 2.0, w / 2.0
    r = min(w, h) * fraction
    y0, y1 = max(0, int(cy - r)), min(h, int(math.ceil(cy + r)))
    x0, x1 = max(0, int(cx - r)), min(w, int(math.ceil(cx + r)))
    return slice(y0, y1), slice(x0, x1)


class SkinDetector:
    def __init__(self, search_fraction: float = 0.25, min_ratio: float = 0.1, max_ratio: float = 0.6):
        self.search_fraction = search_fraction
        self.min_ratio = min_ratio
        self.max_ratio = max_ratio

    def detect(self, frame_bgr: np.ndarray) -> HandDetection:
        h, w = frame_bgr.shape[:2]
        ys, xs = center_window(h, w, self.search_fraction)
        rgb = _rgb_int(frame_bgr[ys, xs])
        if rgb.size == 0:
            return NO_HAND
        ratio = float(loose_skin_mask(rgb).mean())
        detected = self.min_ratio < ratio < self.max_ratio
        return HandDetection(detected, ratio if detected else 0.0, ratio)

    def reset(self):
        pass


class SkinMotionDetector:
    def __init__(self,
                 max_size: Tuple[int, int] = (320, 240),
                 search_fraction: float = 0.3,
                 motion_pixel_thr: int = 30,
                 motion_ratio_thr: float = 0.05,
                 variation_thr: int = 200,
                 min_ratio: float = 0.08,
                 max_ratio: float = 0.4,    # above this it is most likely a face
                 min_pixels: int = 50):
        self.max_size = max_size
        self.search_fraction = search_fraction
        self.motion_pixel_thr = motion_pixel_thr
        self.motion_ratio_thr = motion_ratio_thr
        self.variation_thr = variation_thr
        self.min_ratio = min_ratio
        self.max_ratio = max_ratio
        self.min_pixels = min_pixels
        self._prev: Optional[np.ndarray] = None

    def _shrink(self, frame_bgr: np.ndarray) -> np.ndarray:
        h, w = frame_bgr.shape[:2]
        tw, th = min(w, self.max_size[0]), min(h, self.max_size[1])
        if (tw, th) == (w, h):
            return frame_bgr
        return cv2.resize(frame_bgr, (tw, th), interpolation=cv2.INTER_AREA)

    def detect(self, frame_bgr: np.ndarray) -> HandDetection:
        rgb = _rgb_int(self._shrink(frame_bgr))
        prev, self._prev = self._prev, rgb
        if prev is None or prev.shape != rgb.shape:
            return NO_HAND

        h, w = rgb.shape[:2]
        ys, xs = center_window(h, w, self.search_fraction)
        cur = rgb[ys, xs]
        total = cur.shape[0] * cur.shape[1]
        if total == 0:
            return NO_HAND

        motion = np.abs(cur - prev[ys, xs]).sum(axis=2) > self.motion_pixel_thr
        motion_ratio = float(motion.sum()) / total

        textured = color_variation(rgb)[ys, xs] > self.variation_thr
        hand_pixels = int((strict_skin_mask(cur) & textured).sum())
        ratio = hand_pixels / total

        detected = (self.min_ratio < ratio < self.max_ratio
                    and motion_ratio > self.motion_ratio_thr
                    and hand_pixels > self.min_pixels)
        confidence = min(ratio * 3.0, 0.9) if detected else 0.0
        return HandDetection(detected, confidence, ratio, motion_ratio)

    def reset(self):
        self._prev = None
