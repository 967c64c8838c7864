"""
Hand landmark helpers (MediaPipe 21-point layout)

    0 wrist
    1-4   thumb  (CMC, MCP, IP, TIP)
    5-8   index  (MCP, PIP, DIP, TIP)
    9-12  middle
    13-16 ring
    17-20 pinky
"""
from typing import NamedTuple

import numpy as np

NUM_LANDMARKS = 21

WRIST = 0
THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP = 4, 8, 12, 16, 20
FINGERTIPS = (THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)

# (base knuckle, middle joint, tip) per finger, thumb first
FINGER_JOINTS = (
    (2, 3, 4),
    (5, 6, 8),
    (9, 10, 12),
    (13, 14, 16),
    (17, 18, 20),
)


class Prediction(NamedTuple):
    letter: str
    confidence: float


def _point_xyz(p):
    if hasattr(p, "x") and hasattr(p, "y"):
        return [p.x, p.y, getattr(p, "z", 0.0) or 0.0]
    if isinstance(p, dict):
        return [p["x"], p["y"], p.get("z", 0.0) or 0.0]
    vals = list(p)
    if len(vals) == 2:
        return [vals[0], vals[1], 0.0]
    if len(vals) == 3:
        return vals
    raise ValueError("Landmark must have 2 or 3 coordinates")


def as_landmark_array(points) -> np.ndarray:
    """
    Coerce 21 landmarks into a float (21, 3) array.

    Accepts an ndarray, (x, y) / (x, y, z) tuples, MediaPipe landmark objects
    or {"x", "y", "z"} dicts. Missing z becomes 0.
    """
    if isinstance(points, np.ndarray):
        arr = points.astype(np.float64)
        if arr.shape == (NUM_LANDMARKS, 2):
            arr = np.hstack([arr, np.zeros((NUM_LANDMARKS, 1))])
        if arr.shape != (NUM_LANDMARKS, 3):
            raise ValueError("Expected 21 hand landmarks")
        return arr
    if points is None or len(points) != NUM_LANDMARKS:
        raise ValueError("Expected 21 hand landmarks")
    try:
        arr = np.array([_point_xyz(p) for p in points], dtype=np.float64)
    except (TypeError, KeyError) as e:
        raise ValueError(f"Invalid landmark: {e}") from e
    return arr


def scale_landmarks(landmarks, width: float, height: float) -> np.ndarray:
    """Normalized [0,1] coords -> pixel coords; z is left as is."""
    xyz = as_landmark_array(landmarks).copy()
    xyz[:, 0] *= width
    xyz[:, 1] *= height
    return xyz


def tip_distances(landmarks) -> np.ndarray:
    """2D wrist->fingertip distance for thumb, index, middle, ring, pinky."""
    xyz = as_landmark_array(landmarks)
    wrist = xyz[WRIST, :2]
    return np.array([np.linalg.norm(xyz[t, :2] - wrist) for t in FINGERTIPS])


def extract_features(landmarks) -> np.ndarray:
    """
    73-dim feature vector for landmark classifiers:
      63 = wrist-relative (x, y, z) of all 21 points
      10 = pairwise 3D distances between the five fingertips
    """
    xyz = as_landmark_array(landmarks)
    rel = xyz - xyz[WRIST]
    dists = []
    for i in range(len(FINGERTIPS)):
        for j in range(i + 1, len(FINGERTIPS)):
            dists.append(np.linalg.norm(rel[FINGERTIPS[i]] - rel[FINGERTIPS[j]]))
    return np.concatenate([rel.flatten(), np.array(dists)]).astype(np.float32)


def landmarks_from_mediapipe(hand_landmarks) -> np.ndarray:
    return as_landmark_array(list(hand_landmarks.landmark))
