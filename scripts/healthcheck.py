import asyncio

from skycast.config import get_settings
from skycast.storage import CacheStore, build_storage


async def main():
    ok = True
    settings = get_settings()
    try:
        store = CacheStore(build_storage(settings))
        await store.storage.get(store.record_key("health"))
    except Exception:
        ok = False
    print("OK" if ok else "NOT OK")

if __name__ == "__main__":
    asyncio.run(main())
