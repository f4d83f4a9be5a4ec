"""
Throughput check for Limiter.consume_one against a real Redis.

    python scripts/bench_consume.py --url redis://127.0.0.1:6379/0 --iterations 20000

Uses a capacity large enough that every call is admitted; buckets are left to expire.
"""
import argparse
import asyncio
import time

from bucket_limiter import Limiter, RedisCounterStore, configure_logging, get_logger, get_settings

logger = get_logger("bench_consume")


async def _bench(url: str, iterations: int, concurrency: int) -> None:
    store = RedisCounterStore.from_url(url)
    await store.load_scripts()
    limiter = Limiter(store)

    key = "bench_simple"
    interval = 600
    capacity = 10_000_000
    per_worker = iterations // concurrency

    async def worker() -> None:
        for _ in range(per_worker):
            await limiter.consume_one(key, interval, capacity)

    started = time.perf_counter()
    await asyncio.gather(*(worker() for _ in range(concurrency)))
    elapsed = time.perf_counter() - started
    total = per_worker * concurrency

    logger.info(
        "Benchmark finished",
        calls=total,
        concurrency=concurrency,
        seconds=round(elapsed, 3),
        calls_per_second=round(total / elapsed, 1) if elapsed else None,
    )
    await store.close()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--url", default=None, help="Redis URL (defaults to LIMITER_REDIS_URL)")
    parser.add_argument("--iterations", type=int, default=10_000)
    parser.add_argument("--concurrency", type=int, default=1)
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)
    asyncio.run(_bench(args.url or settings.redis_url, args.iterations, max(1, args.concurrency)))


if __name__ == "__main__":
    main()
