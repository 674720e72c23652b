from attendance_reconciler.database.cache import BY_DATE_RANGE, BY_LEADER, JUSTIFICATIONS, ReadThroughCache


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_values_are_served_until_ttl_expires():
    clock = Clock()
    cache = ReadThroughCache({BY_LEADER: 600}, clock=clock)
    loads = []

    def load():
        loads.append(1)
        return len(loads)

    assert cache.get_or_load(BY_LEADER, 1, load) == 1
    clock.now = 599
    assert cache.get_or_load(BY_LEADER, 1, load) == 1
    clock.now = 600
    assert cache.get_or_load(BY_LEADER, 1, load) == 2


def test_invalidate_drops_one_family():
    cache = ReadThroughCache(clock=Clock())
    cache.get_or_load(BY_LEADER, "all", lambda: "leaders")
    cache.get_or_load(JUSTIFICATIONS, "pending", lambda: "justifications")

    cache.invalidate(BY_LEADER)

    assert len(cache) == 1
    assert cache.get_or_load(JUSTIFICATIONS, "pending", lambda: "reloaded") == "justifications"
    assert cache.get_or_load(BY_LEADER, "all", lambda: "reloaded") == "reloaded"


def test_zero_ttl_disables_caching():
    cache = ReadThroughCache({BY_DATE_RANGE: 0}, clock=Clock())

    cache.get_or_load(BY_DATE_RANGE, ("a", "b"), lambda: 1)

    assert len(cache) == 0


def test_default_ttls():
    cache = ReadThroughCache()

    assert cache.ttl_for(BY_LEADER) == 600
    assert cache.ttl_for(BY_DATE_RANGE) == 120
    assert cache.ttl_for(JUSTIFICATIONS) == 120
    assert cache.ttl_for("unknown") == 60
