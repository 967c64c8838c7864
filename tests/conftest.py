import numpy as np
import pytest

# Synthetic right hand, palm to camera, fingers up; normalized image coords (y down).
WRIST = (0.50, 0.80)
THUMB_CMC, THUMB_MCP = (0.58, 0.75), (0.64, 0.68)
THUMB_OUT = [(0.70, 0.66), (0.76, 0.64)]      # IP, TIP
THUMB_TUCKED = [(0.62, 0.64), (0.53, 0.72)]

# (mcp, extended tip, curled tip) for index, middle, ring, pinky
FINGERS = [
    ((0.56, 0.60), (0.56, 0.41), (0.56, 0.74)),
    ((0.50, 0.58), (0.50, 0.39), (0.50, 0.74)),
    ((0.44, 0.60), (0.44, 0.41), (0.44, 0.74)),
    ((0.39, 0.63), (0.39, 0.45), (0.42, 0.75)),
]


def make_hand(thumb=False, index=False, middle=False, ring=False, pinky=False):
    pts = [WRIST, THUMB_CMC, THUMB_MCP] + (THUMB_OUT if thumb else THUMB_TUCKED)
    for (mcp, tip_ext, tip_curl), ext in zip(FINGERS, (index, middle, ring, pinky)):
        x, y = mcp
        if ext:
            pts += [mcp, (x, y - 0.08), (x, y - 0.14), tip_ext]
        else:
            pts += [mcp, (x, y - 0.07), (x, y + 0.02), tip_curl]
    return np.array([[px, py, 0.0] for px, py in pts])


@pytest.fixture
def hand():
    return make_hand


SKIN_A = (90, 120, 200)   # BGR of RGB(200,120,90)
SKIN_B = (70, 100, 180)   # BGR of RGB(180,100,70)


def skin_patch_frame(h=240, w=320, top=90, left=130, size=60, block=2, textured=True):
    """Black frame with a (checkerboard) skin-coloured square."""
    frame = np.zeros((h, w, 3), np.uint8)
    ys, xs = np.mgrid[top:top + size, left:left + size]
    if textured:
        checker = ((ys // block + xs // block) % 2).astype(bool)
        patch = np.where(checker[..., None], SKIN_A, SKIN_B)
    else:
        patch = np.broadcast_to(np.array(SKIN_A), (size, size, 3))
    frame[top:top + size, left:left + size] = patch.astype(np.uint8)
    return frame


@pytest.fixture
def patch_frame():
    return skin_patch_frame
