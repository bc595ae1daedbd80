import pytest

from cache_sim.config import CacheConfig, CacheKind, PolicyName
from cache_sim.entity.model import CacheLine, PolicyError
from cache_sim.memory.addr_converter import to_binary
from cache_sim.memory.memory_manager import Cache, CacheSet
from cache_sim.memory.replacement_policy import LFU, LRU, RoundRobin

LINE_SIZE = 16


def _access(cache: Cache, addr: int):
    """Single-level access: hit updates the policy, miss allocates."""
    index, tag, _ = cache.decode(to_binary(addr))
    hit, line = cache.check_hit_or_miss(tag, index)
    if hit:
        cache.record_hit()
        cache.sets[index].policy.update(line)
    else:
        cache.record_miss()
        cache.insert(tag, index)
    return hit


def _resident(cache: Cache, addr: int) -> bool:
    index, tag, _ = cache.decode(to_binary(addr))
    return cache.check_hit_or_miss(tag, index)[0]


@pytest.mark.ci
def test_direct_mapped_same_set_and_rehit():
    cache = Cache(CacheConfig("L1", 2 * LINE_SIZE, LINE_SIZE, "direct"))
    first = cache.decode(to_binary(0x1230))
    second = cache.decode(to_binary(0x1230))
    assert first == second

    assert _access(cache, 0x1230) is False
    assert _access(cache, 0x1230) is True
    assert _access(cache, 0x1238) is True
    assert (cache.hits, cache.misses) == (2, 1)


def test_direct_mapped_overwrites_resident_line():
    cache = Cache(CacheConfig("L1", 2 * LINE_SIZE, LINE_SIZE, "direct"))
    _access(cache, 0x00)
    _access(cache, 0x20)
    assert not _resident(cache, 0x00)
    assert _resident(cache, 0x20)
    assert cache.sets[0].lines[0].tag == 1


@pytest.mark.ci
def test_full_lru_evicts_least_recently_touched():
    cache = Cache(CacheConfig("L1", 4 * LINE_SIZE, LINE_SIZE, "full", "lru"))
    for addr in (0x00, 0x10, 0x20, 0x30):
        assert _access(cache, addr) is False
    assert _access(cache, 0x00) is True
    assert _access(cache, 0x40) is False

    assert not _resident(cache, 0x10)
    for addr in (0x00, 0x20, 0x30, 0x40):
        assert _resident(cache, addr)


def test_full_lru_never_evicts_most_recent():
    cache = Cache(CacheConfig("L1", 4 * LINE_SIZE, LINE_SIZE, "full", "lru"))
    for addr in (0x00, 0x10, 0x20, 0x30, 0x40):
        _access(cache, addr)
    assert not _resident(cache, 0x00)
    assert _resident(cache, 0x30)
    assert _resident(cache, 0x40)


def test_full_default_round_robin():
    cache = Cache(CacheConfig("L1", 4 * LINE_SIZE, LINE_SIZE, "full"))
    assert cache.policy_name == PolicyName.RR
    assert isinstance(cache.sets[0].policy, RoundRobin)
    for addr in (0x00, 0x10, 0x20, 0x30):
        _access(cache, addr)
    # hits do not protect a line from round robin
    _access(cache, 0x00)
    _access(cache, 0x40)
    assert not _resident(cache, 0x00)
    _access(cache, 0x50)
    assert not _resident(cache, 0x10)
    assert [l.tag for l in cache.sets[0].lines] == [4, 5, 2, 3]


def test_full_lfu_keeps_frequent_lines():
    cache = Cache(CacheConfig("L1", 4 * LINE_SIZE, LINE_SIZE, "full", "lfu"))
    assert isinstance(cache.sets[0].policy, LFU)
    for addr in (0x00, 0x00, 0x00, 0x10, 0x20, 0x20, 0x30):
        _access(cache, addr)
    _access(cache, 0x40)
    assert not _resident(cache, 0x10)
    assert _resident(cache, 0x00)
    assert _resident(cache, 0x20)
    # the newcomer has the lowest count and took slot 1
    _access(cache, 0x50)
    assert not _resident(cache, 0x40)


@pytest.mark.ci
def test_two_way_sets_are_independent():
    cache = Cache(CacheConfig("L1", 4 * LINE_SIZE, LINE_SIZE, "2way", "lru"))
    assert cache.kind == CacheKind.TWO_WAY
    assert len(cache.sets) == 2
    assert isinstance(cache.sets[0].policy, LRU)

    _access(cache, 0x10)
    for addr in (0x00, 0x20, 0x40):
        _access(cache, addr)
    assert not _resident(cache, 0x00)
    assert _resident(cache, 0x20)
    assert _resident(cache, 0x40)
    assert _resident(cache, 0x10)


def test_miss_has_no_side_effect():
    cache = Cache(CacheConfig("L1", 4 * LINE_SIZE, LINE_SIZE, "4way", "lru"))
    hit, line = cache.check_hit_or_miss(7, 0)
    assert (hit, line) == (False, None)
    assert (cache.hits, cache.misses) == (0, 0)
    assert not any(l.valid for l in cache.sets[0].lines)


def test_hit_returns_resident_line():
    cache = Cache(CacheConfig("L1", 4 * LINE_SIZE, LINE_SIZE, "full", "lfu"))
    inserted = cache.insert(9, 0)
    hit, line = cache.check_hit_or_miss(9, 0)
    assert hit
    assert line is inserted
    cache.sets[0].policy.update(line)
    assert inserted.freq == 2


def test_set_insert_uses_free_slot_first():
    cache_set = CacheSet(4, PolicyName.RR)
    for tag in range(3):
        cache_set.insert(CacheLine(tag=tag, valid=True, freq=1))
    assert [l.slot for l in cache_set.lines[:3]] == [0, 1, 2]
    assert not cache_set.lines[3].valid


def test_set_insert_with_empty_policy_is_a_defect():
    cache_set = CacheSet(2, PolicyName.LRU)
    # fill the slots behind the policy's back
    cache_set.lines[0] = CacheLine(tag=1, valid=True, slot=0)
    cache_set.lines[1] = CacheLine(tag=2, valid=True, slot=1)
    with pytest.raises(PolicyError):
        cache_set.insert(CacheLine(tag=3, valid=True, freq=1))


def test_stat():
    cache = Cache(CacheConfig("L2", 4 * LINE_SIZE, LINE_SIZE, "full", "lru"))
    _access(cache, 0x00)
    _access(cache, 0x00)
    _access(cache, 0x00)
    stat = cache.stat()
    assert (stat.name, stat.hits, stat.misses) == ("L2", 2, 1)
    assert stat.hit_rate == pytest.approx(2 / 3)
