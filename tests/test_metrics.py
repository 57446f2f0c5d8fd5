from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor

from chirpy.metrics import HitCounter, MetricsMiddleware


def test_counter_survives_concurrent_increments() -> None:
    counter = HitCounter()

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: counter.increment(), range(1000)))

    assert counter.value == 1000


def test_reset_sets_counter_to_zero() -> None:
    counter = HitCounter()
    for _ in range(5):
        counter.increment()

    counter.reset()

    assert counter.value == 0


def test_middleware_counts_each_http_request() -> None:
    counter = HitCounter()
    seen = []

    async def downstream(scope, receive, send):
        await asyncio.sleep(0)
        seen.append(scope["type"])

    middleware = MetricsMiddleware(downstream, counter)

    async def run() -> None:
        await asyncio.gather(*(middleware({"type": "http"}, None, None) for _ in range(50)))
        await middleware({"type": "lifespan"}, None, None)

    asyncio.run(run())

    assert counter.value == 50
    assert len(seen) == 51
