"""
search_as_you_type.py — Keyed debouncing with last-call-wins results.

Simulates two users typing into a search box. Each user's keystrokes are
debounced separately, and only the result for the latest query a user typed
is delivered; stale responses are dropped.

Usage:
    python examples/search_as_you_type.py
"""

import asyncio
import random

from lastcall import debounce


async def search(user: str, query: str) -> list[str]:
    await asyncio.sleep(random.uniform(0.01, 0.05))
    return [f"{query}-{n}" for n in range(3)]


async def main() -> None:
    debounced_search = debounce(search, 0.1, key=lambda user, _query: user)

    futures = []
    for user, word in (("ana", "python"), ("bo", "asyncio")):
        for end in range(1, len(word) + 1):
            futures.append(debounced_search(user, word[:end]))

    done, pending = await asyncio.wait(futures, timeout=1.0)
    for future in done:
        print(future.result())
    print(f"{len(pending)} superseded queries never resolved")


if __name__ == "__main__":
    asyncio.run(main())
