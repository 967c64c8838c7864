# signspeak/camera.py
"""
Webcam capture with backend fallback and retries.
"""
import sys
import time
from typing import Iterator, Optional, Sequence

import cv2
import numpy as np


class CameraError(RuntimeError):
    pass


def default_backends() -> Sequence[int]:
    if sys.platform.startswith("win"):
        return [cv2.CAP_DSHOW, cv2.CAP_MSMF]
    if sys.platform == "darwin":
        return [cv2.CAP_AVFOUNDATION]
    return [cv2.CAP_V4L2]


def _try_open(index: int, backend: Optional[int]):
    cap = cv2.VideoCapture(index) if backend is None else cv2.VideoCapture(index, backend)
    if cap is not None and cap.isOpened():
        return cap
    if cap is not None:
        cap.release()
    return None


def open_camera(index: int = 0, width: int = 640, height: int = 480, fps: int = 15,
                backends: Optional[Sequence[int]] = None,
                retries: int = 3, retry_delay: float = 1.0):
    """
    Open a camera and confirm it delivers frames.
    Each round tries the given backends, then the default backend.
    """
    backends = list(default_backends() if backends is None else backends)
    attempts = max(1, int(retries))
    for attempt in range(1, attempts + 1):
        for backend in backends + [None]:
            name = "default" if backend is None else str(backend)
            print(f"[CAM] Opening camera {index} (backend {name}, attempt {attempt}/{attempts})")
            cap = _try_open(index, backend)
            if cap is None:
                continue

            cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
            cap.set(cv2.CAP_PROP_FPS, fps)

            ret, frame = cap.read()
            if not ret or frame is None:
                print("[CAM][ERR] Opened but cannot read frames")
                cap.release()
                continue

            actual_w = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
            actual_h = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
            actual_fps = int(cap.get(cv2.CAP_PROP_FPS))
            print(f"[CAM] ✓ Opened: {actual_w}x{actual_h} @ {actual_fps}fps")
            return cap
        if attempt < attempts:
            time.sleep(retry_delay)
    raise CameraError(f"Cannot open camera at index {index}")


def is_blank(frame: np.ndarray, min_std: float = 2.5) -> bool:
    """Covered lens / black frames."""
    gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY) if frame.ndim == 3 else frame
    return float(np.std(gray)) < min_std


class CameraStream:
    def __init__(self, index: int = 0, width: int = 640, height: int = 480, fps: int = 15,
                 retries: int = 3, retry_delay: float = 1.0, blank_std: float = 2.5,
                 backends: Optional[Sequence[int]] = None):
        self.index = index
        self.width, self.height, self.fps = width, height, fps
        self.retries = retries
        self.retry_delay = retry_delay
        self.blank_std = blank_std
        self.backends = backends
        self.cap = None

    @classmethod
    def from_config(cls, cfg, **kw):
        c = cfg["camera"]
        params = dict(index=int(c["index"]), width=int(c["width"]), height=int(c["height"]),
                      fps=int(c["fps"]), retries=int(c["retries"]),
                      retry_delay=float(c["retry_delay_s"]), blank_std=float(c["blank_std"]))
        params.update(kw)
        return cls(**params)

    def open(self):
        self.cap = open_camera(self.index, self.width, self.height, self.fps,
                               backends=self.backends, retries=self.retries,
                               retry_delay=self.retry_delay)
        return self

    def read(self) -> Optional[np.ndarray]:
        """Next frame; re-opens the stream once if a read fails. None at end of stream."""
        if self.cap is None:
            self.open()
        ret, frame = self.cap.read()
        if ret and frame is not None:
            return frame
        print("[CAM][ERR] Read failed, re-opening stream")
        self.release()
        try:
            self.open()
        except CameraError as e:
            print(f"[CAM][ERR] {e}")
            return None
        ret, frame = self.cap.read()
        return frame if ret else None

    def frames(self) -> Iterator[np.ndarray]:
        skipped = 0
        while True:
            frame = self.read()
            if frame is None:
                print("[CAM] End of stream")
                return
            if is_blank(frame, self.blank_std):
                skipped += 1
                if skipped % 30 == 0:
                    print(f"[CAM] {skipped} blank frames skipped")
                continue
            yield frame

    def release(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
