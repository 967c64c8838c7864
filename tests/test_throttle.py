from signspeak.throttle import HeldValue, Throttle


class FakeClock:
    def __init__(self, t=0.0):
        self.t = t

    def __call__(self):
        return self.t


def test_throttle_interval():
    th = Throttle(2.0)
    assert th.ready(0.0)
    assert not th.ready(1.9)
    assert th.ready(2.0)
    assert not th.ready(3.0)


def test_throttle_reset_and_clock():
    clock = FakeClock(10.0)
    th = Throttle(1.0, clock)
    assert th.ready()
    assert not th.ready()
    th.reset()
    assert th.ready()
    clock.t = 11.0
    assert th.ready()


def test_held_value_expires():
    held = HeldValue(4.0)
    assert held.get(0.0) is None
    held.set("D", 1.0)
    assert held.get(4.9) == "D"
    assert held.get(5.0) is None
    # stays cleared
    assert held.get(1.5) is None


def test_held_value_clear_uses_clock():
    clock = FakeClock()
    held = HeldValue(1.0, clock)
    held.set("L")
    assert held.get() == "L"
    held.clear()
    assert held.get() is None
