"""
write_load.py: simple async load script to create tinylinks

Usage:
  python write_load.py --base http://127.0.0.1:8000 --access-key k3x9q --count 2000 --concurrency 100 --out links_created.jsonl

Use --alias-every N to request a vanity alias on every Nth create.
"""
import argparse
import asyncio
import json
import random
import string
import time
from datetime import datetime, timezone
from urllib.parse import urlparse

import httpx


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _rand_path(n=6):
    alphabet = string.ascii_letters + string.digits
    return "".join(random.choice(alphabet) for _ in range(n))


async def _create_one(client: httpx.AsyncClient, args, out_file, idx: int):
    url = f"https://example.com/{_rand_path(8)}?q={idx}"
    params = {}
    if args.alias_every and idx % args.alias_every == 0:
        params["alias"] = f"load{idx}"
    payload = {"serviceDomain": urlparse(args.base).netloc, "url": url}
    try:
        r = await client.post(f"{args.base}/k{args.access_key}/lnk", params=params, json=payload, timeout=10)
    except httpx.HTTPError:
        return _outcome(None)
    if r.status_code == 201 and out_file:
        out_file.write(json.dumps({"link": r.text, "url": url}) + "\n")
    return _outcome(r.status_code)


def _outcome(code):
    return "ok" if code == 201 else "conflict" if code == 409 else "fail"


async def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--base", default="http://127.0.0.1:8000")
    parser.add_argument("--access-key", required=True, help="key logged at server start, without the leading 'k'")
    parser.add_argument("--count", type=int, default=2000)
    parser.add_argument("--concurrency", type=int, default=100)
    parser.add_argument("--alias-every", type=int, default=0)
    parser.add_argument("--out", default="links_created.jsonl")
    args = parser.parse_args()

    start_iso = _now_iso()
    t0 = time.perf_counter()
    outcomes = {"ok": 0, "conflict": 0, "fail": 0}

    limit = httpx.Limits(max_connections=args.concurrency, max_keepalive_connections=args.concurrency)
    with open(args.out, "w", encoding="utf-8") as out_f:
        async with httpx.AsyncClient(limits=limit) as client:
            sem = asyncio.Semaphore(args.concurrency)

            async def _task(i):
                async with sem:
                    outcomes[await _create_one(client, args, out_f, i)] += 1

            await asyncio.gather(*(_task(i) for i in range(args.count)))

    dt = time.perf_counter() - t0
    print(f"START: {start_iso}")
    print(f"END:   {_now_iso()}")
    print(f"TOTAL: {dt:.3f} s")
    print(f"OPS:   writes={args.count}, ok={outcomes['ok']}, conflict={outcomes['conflict']}, fail={outcomes['fail']}")
    if dt > 0:
        print(f"TPS:   {outcomes['ok']/dt:.1f} req/s")


if __name__ == "__main__":
    asyncio.run(main())
