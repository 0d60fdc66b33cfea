import pytest

from listadversary.flatset import CharFlatSet, logpart, power_of_two_below, quicklog, two_to


@pytest.mark.parametrize("x", [1, 2, 3, 7, 8, 9, 1000, 2**40 + 5])
def test_quicklog_bounds(x):
    k = quicklog(x)
    assert two_to(k) <= x < two_to(k + 1)


@pytest.mark.parametrize("x", [1, 5, 64, 100, 12345])
def test_power_of_two_below(x):
    p = power_of_two_below(x)
    assert p & (p - 1) == 0
    assert p <= x < 2 * p


def test_logpart_extremes():
    assert logpart(2**64 - 1, 64) == 2**64 - 1
    assert logpart(2**64 - 1, 0) == 0
    assert logpart(1 << 63, 1) == 1


def test_logpart_bad_log():
    with pytest.raises(ValueError):
        logpart(5, 65)


def test_size():
    assert len(CharFlatSet(10)) == two_to(10)


def test_insert_and_contains():
    s = CharFlatSet(8)
    h = (3 << 60) | 0x5A
    assert h not in s
    s.insert(h)
    assert h in s
    assert s.insertions == 1
    assert s.collisions == 0


def test_collision_counted():
    s = CharFlatSet(8)
    top = 7 << 56
    s.insert(top | 0x11)
    s.insert(top | 0x22)
    assert s.collisions == 1
    assert (top | 0x22) in s
    assert (top | 0x11) not in s


def test_lastchar_and_trim():
    s = CharFlatSet(4)
    assert s.lastchar(0x1234) == 0x34
    assert s.trim(0xF << 60) == 0xF


def test_too_many_bytes():
    with pytest.raises(ValueError):
        CharFlatSet(65)