import numpy as np
import pytest

from signspeak.hand_detector import (SkinDetector, SkinMotionDetector, center_window,
                                     color_variation, loose_skin_mask, strict_skin_mask)


def _rgb(*px):
    return np.array([[px]], dtype=np.int32)


def test_skin_rules():
    assert loose_skin_mask(_rgb(200, 120, 90))[0, 0]
    assert not loose_skin_mask(_rgb(90, 120, 200))[0, 0]     # blue dominant
    assert loose_skin_mask(_rgb(252, 180, 150))[0, 0]
    assert not strict_skin_mask(_rgb(252, 180, 150))[0, 0]   # over-exposed
    assert not strict_skin_mask(_rgb(120, 110, 60))[0, 0]    # |r-g| too small


def test_color_variation_ignores_out_of_frame():
    flat = np.full((10, 10, 3), 100, np.int32)
    assert color_variation(flat).max() == 0
    spot = flat.copy()
    spot[0, 0] = (110, 100, 100)
    var = color_variation(spot)
    assert var[0, 0] == 15 * 10      # 15 in-frame neighbours differ by 10
    assert var[5, 5] == 0


def test_center_window():
    ys, xs = center_window(240, 320, 0.3)
    assert (ys.start, ys.stop, xs.start, xs.stop) == (48, 192, 88, 232)


def test_skin_detector(patch_frame):
    det = SkinDetector()
    found = det.detect(patch_frame(textured=False))
    assert found.detected
    assert found.confidence == pytest.approx(0.25)
    assert not det.detect(np.zeros((240, 320, 3), np.uint8)).detected
    full = patch_frame(top=0, left=0, size=240, textured=False)
    assert not det.detect(full).detected


def test_motion_detector_needs_previous_frame(patch_frame):
    det = SkinMotionDetector()
    assert not det.detect(patch_frame()).detected


def test_motion_detector_finds_moving_textured_skin(patch_frame):
    det = SkinMotionDetector()
    det.detect(np.zeros((240, 320, 3), np.uint8))
    res = det.detect(patch_frame())
    assert res.detected
    assert res.ratio == pytest.approx(3600 / (144 * 144))
    assert res.confidence == pytest.approx(min(res.ratio * 3, 0.9))
    assert res.motion_ratio > 0.05


def test_motion_detector_rejects_static_scene(patch_frame):
    det = SkinMotionDetector()
    det.detect(patch_frame())
    assert not det.detect(patch_frame()).detected


def test_motion_detector_rejects_flat_skin(patch_frame):
    det = SkinMotionDetector()
    det.detect(np.zeros((240, 320, 3), np.uint8))
    assert not det.detect(patch_frame(textured=False)).detected


def test_motion_detector_rejects_face_sized_regions(patch_frame):
    det = SkinMotionDetector()
    det.detect(np.zeros((240, 320, 3), np.uint8))
    res = det.detect(patch_frame(top=0, left=0, size=240))
    assert not res.detected
    assert res.ratio > 0.4


def test_motion_detector_downscales_large_frames(patch_frame):
    det = SkinMotionDetector()
    det.detect(np.zeros((480, 640, 3), np.uint8))
    res = det.detect(patch_frame(h=480, w=640, top=180, left=260, size=120, block=4))
    assert res.detected


def test_reset_forgets_previous_frame(patch_frame):
    det = SkinMotionDetector()
    det.detect(np.zeros((240, 320, 3), np.uint8))
    det.reset()
    assert not det.detect(patch_frame()).detected
