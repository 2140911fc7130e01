import asyncio

from portal.utils.locks import KeyedLocks


async def test_lock_is_dropped_after_release():
    locks = KeyedLocks()
    async with locks.hold("session-1"):
        assert len(locks) == 1
    assert len(locks) == 0


async def test_same_key_serializes_and_cleans_up():
    locks = KeyedLocks()
    order = []

    async def worker(name):
        async with locks.hold("session-1"):
            order.append(f"{name}-in")
            await asyncio.sleep(0.01)
            order.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"), worker("c"))
    assert order == ["a-in", "a-out", "b-in", "b-out", "c-in", "c-out"]
    assert len(locks) == 0


async def test_different_keys_do_not_contend():
    locks = KeyedLocks()
    async with locks.hold("session-1"):
        await asyncio.wait_for(_enter(locks, "session-2"), timeout=1)
    assert len(locks) == 0


async def _enter(locks, key):
    async with locks.hold(key):
        return True


async def test_lock_released_on_error():
    locks = KeyedLocks()
    try:
        async with locks.hold("session-1"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert len(locks) == 0
