import random

import numpy as np
import pytest

from signspeak.heuristic import HeuristicClassifier, extended_fingers


def test_extended_fingers_index_only(hand):
    assert extended_fingers(hand(index=True), 0.75) == [False, True, False, False, False]


@pytest.mark.parametrize("kw, letter, conf", [
    (dict(index=True), "D", 0.8),
    (dict(pinky=True), "I", 0.8),
    (dict(index=True, middle=True), "V", 0.85),
    (dict(thumb=True, index=True), "L", 0.8),
    (dict(thumb=True, pinky=True), "U", 0.75),
    (dict(index=True, middle=True, ring=True), "W", 0.75),
    (dict(index=True, middle=True, ring=True, pinky=True), "B", 0.8),
    (dict(thumb=True, index=True, middle=True, ring=True, pinky=True), "B", 0.7),
])
def test_model_rules(hand, kw, letter, conf):
    pred = HeuristicClassifier(rules="model").classify(hand(**kw))
    assert pred.letter == letter
    assert pred.confidence == pytest.approx(conf)


@pytest.mark.parametrize("kw, letter, conf", [
    (dict(index=True), "D", 0.8),
    (dict(pinky=True), "I", 0.8),
    (dict(index=True, middle=True), "V", 0.8),
    (dict(thumb=True, index=True), "L", 0.8),
    (dict(thumb=True, pinky=True), "Y", 0.8),
    (dict(index=True, middle=True, ring=True, pinky=True), "B", 0.7),
    (dict(index=True, middle=True, ring=True), "B", 0.6),
])
def test_gesture_rules(hand, kw, letter, conf):
    pred = HeuristicClassifier(rules="gesture").classify(hand(**kw))
    assert (pred.letter, pred.confidence) == (letter, pytest.approx(conf))


def test_no_extended_fingers():
    collapsed = np.zeros((21, 3))
    assert HeuristicClassifier(rules="gesture").classify(collapsed) == ("A", 0.7)
    letters = {HeuristicClassifier(rules="model", rng=random.Random(s)).classify(collapsed).letter
               for s in range(20)}
    assert letters == {"A", "S"}


def test_bad_input_gives_safe_default():
    pred = HeuristicClassifier().classify([(0.0, 0.0)] * 5)
    assert pred == ("A", 0.5)


def test_unknown_rule_set():
    with pytest.raises(ValueError):
        HeuristicClassifier(rules="fancy")


def test_gesture_rules_do_not_draw_random_numbers():
    class NoRandom:
        def random(self):
            raise AssertionError("gesture rules are deterministic")

    clf = HeuristicClassifier(rules="gesture", rng=NoRandom())
    assert clf.classify(np.zeros((21, 3))) == ("A", 0.7)
