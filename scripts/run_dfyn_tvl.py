"""Compute Dfyn TVL at a timestamp (or block) and print the balance map.

Usage:
    PYTHONPATH=src python scripts/run_dfyn_tvl.py [timestamp] [block]
"""

import asyncio
import logging
import sys
import time

from dextvl.config import settings

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


async def main(timestamp: int, block: int | None) -> None:
    from dextvl.container import Container
    from dextvl.projects.dfyn import PROJECT

    container = Container()
    api = container.sdk_api()
    http = container.http_client()

    try:
        if block is None:
            block = await api.util.lookup_block(timestamp, PROJECT.chain.value)
            print(f"Block for ts={timestamp}: {block}")

        t0 = time.time()
        balances = await container.dfyn().tvl(timestamp, block)
        print(f"\n{PROJECT.name} TVL at block {block} ({len(balances)} tokens, {time.time() - t0:.1f}s)")
        for token, amount in sorted(balances.items(), key=lambda kv: kv[1], reverse=True):
            print(f"  {token}  {amount}")
        print(f"\neth calls: {api.eth_call_count:,}")
    finally:
        await http.close()


if __name__ == "__main__":
    ts = int(sys.argv[1]) if len(sys.argv) > 1 else int(time.time())
    blk = int(sys.argv[2]) if len(sys.argv) > 2 else None
    asyncio.run(main(ts, blk))
