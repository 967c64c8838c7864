from types import SimpleNamespace

import numpy as np
import pytest

from signspeak.landmarks import (as_landmark_array, extract_features, scale_landmarks,
                                 tip_distances)


def test_as_landmark_array_accepts_tuples_objects_and_dicts():
    xy = [(i / 21, i / 42) for i in range(21)]
    arr = as_landmark_array(xy)
    assert arr.shape == (21, 3)
    assert np.all(arr[:, 2] == 0.0)

    objs = [SimpleNamespace(x=p[0], y=p[1], z=0.1) for p in xy]
    assert np.allclose(as_landmark_array(objs)[:, 2], 0.1)

    dicts = [{"x": p[0], "y": p[1]} for p in xy]
    assert np.allclose(as_landmark_array(dicts), arr)


@pytest.mark.parametrize("bad", [[], [(0, 0)] * 20, np.zeros((21, 4)), None])
def test_as_landmark_array_rejects_wrong_shapes(bad):
    with pytest.raises(ValueError, match="21 hand landmarks"):
        as_landmark_array(bad)


def test_extract_features_layout(hand):
    h = hand(index=True)
    f = extract_features(h)
    assert f.shape == (73,)
    assert np.allclose(f[:3], 0.0)  # wrist relative to itself
    # first distance is thumb tip <-> index tip
    assert f[63] == pytest.approx(np.linalg.norm(h[4] - h[8]), rel=1e-5)


def test_extract_features_is_translation_invariant(hand):
    h = hand(index=True, middle=True)
    shifted = h + np.array([0.1, -0.05, 0.02])
    assert np.allclose(extract_features(h), extract_features(shifted), atol=1e-6)


def test_scale_and_tip_distances(hand):
    h = hand()
    s = scale_landmarks(h, 640, 480)
    assert s[0, 0] == pytest.approx(0.5 * 640)
    assert s[0, 1] == pytest.approx(0.8 * 480)
    d = tip_distances(h)
    assert d.shape == (5,)
    assert d[2] == pytest.approx(0.06)  # curled middle tip sits just above the wrist
