# signspeak/gestures.py
"""
Finger-pose gesture matching (fingerpose-style).

Each finger gets a curl (from the bend at its middle joint) and a pointing
direction (from its base segment). A GestureDescription lists the curls and
directions it expects; its match score is the weighted share of satisfied
expectations scaled to 0..10.
"""
import math
from enum import Enum, IntEnum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from signspeak.heuristic import HeuristicClassifier
from signspeak.landmarks import FINGER_JOINTS, Prediction, as_landmark_array, scale_landmarks

NO_CURL_START_LIMIT = 130.0
HALF_CURL_START_LIMIT = 60.0


class Finger(IntEnum):
    THUMB = 0
    INDEX = 1
    MIDDLE = 2
    RING = 3
    PINKY = 4


class FingerCurl(Enum):
    NO_CURL = "No Curl"
    HALF_CURL = "Half Curl"
    FULL_CURL = "Full Curl"


class FingerDirection(Enum):
    HORIZONTAL_RIGHT = "Horizontal Right"
    DIAGONAL_UP_RIGHT = "Diagonal Up Right"
    VERTICAL_UP = "Vertical Up"
    DIAGONAL_UP_LEFT = "Diagonal Up Left"
    HORIZONTAL_LEFT = "Horizontal Left"
    DIAGONAL_DOWN_LEFT = "Diagonal Down Left"
    VERTICAL_DOWN = "Vertical Down"
    DIAGONAL_DOWN_RIGHT = "Diagonal Down Right"


# counter-clockwise from +x, 45 degree sectors
_SECTORS = list(FingerDirection)


def joint_angle(a, b, c) -> float:
    """Angle ABC in degrees (2D). Degenerate segments count as straight."""
    bax, bay = a[0] - b[0], a[1] - b[1]
    bcx, bcy = c[0] - b[0], c[1] - b[1]
    ab = math.hypot(bax, bay)
    cb = math.hypot(bcx, bcy)
    if ab < 1e-9 or cb < 1e-9:
        return 180.0
    cosv = (bax * bcx + bay * bcy) / (ab * cb)
    cosv = max(-1.0, min(1.0, cosv))
    return math.degrees(math.acos(cosv))


def estimate_curl(base, mid, tip) -> FingerCurl:
    angle = joint_angle(base, mid, tip)
    if angle > NO_CURL_START_LIMIT:
        return FingerCurl.NO_CURL
    if angle > HALF_CURL_START_LIMIT:
        return FingerCurl.HALF_CURL
    return FingerCurl.FULL_CURL


def estimate_direction(start, end) -> FingerDirection:
    # image coords: y grows downwards
    angle = math.degrees(math.atan2(-(end[1] - start[1]), end[0] - start[0])) % 360.0
    return _SECTORS[int(((angle + 22.5) % 360.0) // 45.0)]


class FingerPose(NamedTuple):
    curls: Dict[Finger, FingerCurl]
    directions: Dict[Finger, FingerDirection]


def estimate_pose(landmarks) -> FingerPose:
    xyz = as_landmark_array(landmarks)
    curls, directions = {}, {}
    for finger in Finger:
        base, mid, tip = (xyz[i] for i in FINGER_JOINTS[finger])
        curls[finger] = estimate_curl(base, mid, tip)
        directions[finger] = estimate_direction(base, mid)
    return FingerPose(curls, directions)


class GestureDescription:
    def __init__(self, name: str):
        self.name = name
        self.curls: Dict[Finger, List[Tuple[FingerCurl, float]]] = {}
        self.directions: Dict[Finger, List[Tuple[FingerDirection, float]]] = {}

    def add_curl(self, finger: Finger, curl: FingerCurl, weight: float = 1.0):
        self.curls.setdefault(Finger(finger), []).append((curl, float(weight)))
        return self

    def add_direction(self, finger: Finger, direction: FingerDirection, weight: float = 1.0):
        self.directions.setdefault(Finger(finger), []).append((direction, float(weight)))
        return self

    def match(self, curls: Dict[Finger, FingerCurl],
              directions: Dict[Finger, FingerDirection]) -> float:
        """Score in [0, 10]."""
        score, total = 0.0, 0
        for finger, expected in self.curls.items():
            total += 1
            score += max((w for c, w in expected if c == curls.get(finger)), default=0.0)
        for finger, expected in self.directions.items():
            total += 1
            score += max((w for d, w in expected if d == directions.get(finger)), default=0.0)
        if total == 0:
            return 0.0
        return score / total * 10.0

    def __repr__(self):
        return f"GestureDescription({self.name!r})"


class GestureEstimate(NamedTuple):
    pose: FingerPose
    gestures: List[Tuple[str, float]]  # (name, score) best first


class GestureEstimator:
    def __init__(self, descriptions: Sequence[GestureDescription]):
        self.descriptions = list(descriptions)

    def estimate(self, landmarks, min_score: float) -> GestureEstimate:
        pose = estimate_pose(landmarks)
        found = []
        for g in self.descriptions:
            s = g.match(pose.curls, pose.directions)
            if s >= min_score:
                found.append((g.name, s))
        found.sort(key=lambda kv: kv[1], reverse=True)
        return GestureEstimate(pose, found)


# ---------- ASL letters ----------
NC, HC, FC = FingerCurl.NO_CURL, FingerCurl.HALF_CURL, FingerCurl.FULL_CURL
UP = FingerDirection.VERTICAL_UP
UR, UL = FingerDirection.DIAGONAL_UP_RIGHT, FingerDirection.DIAGONAL_UP_LEFT
HR = FingerDirection.HORIZONTAL_RIGHT

# letter: (curls thumb..pinky, {finger: direction})
_ASL_TABLE = {
    "A": ((HC, FC, FC, FC, FC), {0: UP, 1: UP, 2: UP, 3: UP, 4: UP}),
    "B": ((HC, NC, NC, NC, NC), {1: UP, 2: UP, 3: UP, 4: UP}),
    "C": ((HC, HC, HC, HC, HC), {0: UR, 1: UL, 2: UP, 3: UP, 4: UR}),
    "D": ((HC, NC, FC, FC, FC), {1: UP, 2: UP, 3: UP, 4: UP}),
    "F": ((HC, FC, NC, NC, NC), {2: UP, 3: UP, 4: UP}),
    "I": ((HC, FC, FC, FC, NC), {4: UP}),
    "L": ((NC, NC, FC, FC, FC), {0: HR, 1: UP}),
    "O": ((HC, HC, HC, HC, HC), {0: UL, 1: UR, 2: UP, 3: UP, 4: UL}),
    "V": ((HC, NC, NC, FC, FC), {1: UP, 2: UP}),
    "Y": ((NC, FC, FC, FC, NC), {0: UR, 4: UL}),
}


def _build_asl_gestures() -> List[GestureDescription]:
    out = []
    for name, (curls, dirs) in _ASL_TABLE.items():
        g = GestureDescription(name)
        for finger, curl in zip(Finger, curls):
            g.add_curl(finger, curl)
        for finger, direction in dirs.items():
            g.add_direction(Finger(finger), direction)
        out.append(g)
    return out


ASL_GESTURES: List[GestureDescription] = _build_asl_gestures()


class GesturePredictor:
    """Gesture matcher first, distance heuristic when nothing clears min_score."""

    def __init__(self, estimator: Optional[GestureEstimator] = None,
                 min_score: float = 8.5,
                 frame_size: Tuple[int, int] = (640, 480),
                 fallback: Optional[HeuristicClassifier] = None):
        self.estimator = estimator or GestureEstimator(ASL_GESTURES)
        self.min_score = float(min_score)
        self.frame_size = frame_size
        self.fallback = fallback or HeuristicClassifier(rules="gesture")

    def predict(self, landmarks) -> Prediction:
        try:
            xyz = as_landmark_array(landmarks)
            scaled = scale_landmarks(xyz, *self.frame_size)
            est = self.estimator.estimate(scaled, self.min_score)
            if est.gestures:
                name, score = est.gestures[0]
                return Prediction(name, score / 10.0)
            return self.fallback.classify(xyz)
        except Exception as e:
            print(f"[DET][GESTURE-ERR] {type(e).__name__}: {e}")
            return self.fallback.classify(landmarks)

    __call__ = predict
