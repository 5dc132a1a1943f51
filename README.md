# adkit

A small toolkit of pieces that come up when building an ad server.

## What is inside

- `adkit.batcher` – `Batcher` collects items into batches that become ready by
  item count (`max_items`), total size reported by a `sizer` (`max_bytes`) or a
  timeout in `get` (`max_time`). `put`, `flush` and `get` raise
  `BatcherClosedError` once the batcher is closed.
- `adkit.circqueue` – `CircQueue`, a ring-buffer FIFO that doubles when full;
  `dequeue` and `peek` raise `IndexError` when it is empty.
- `adkit.spinlock` – `SpinLock`, a busy-waiting lock with `acquire`, `release`
  and `locked`, usable as a context manager.
- `adkit.randutil` – `int_between`, `random_string`, `string_between`,
  `coin_toss`, `sleep_between`, `shuffle`, `new_uuid`, `new_ulid`, and the
  character sets `ALPHABET`, `NUMERALS`, `ALPHANUMERIC` and `ASCII`.
- `adkit.par` – `Queue` (bounded parallel execution with an `idle` event),
  `Work` (run a function once per item over a set that may grow while running),
  `Cache` and `ErrCache` (compute once per key; `ErrCache.get` raises
  `CacheEntryNotFoundError` when nothing is cached).
- `adkit.sqlite_store` – `SQLiteStore`, an implementation of the `KVStore`
  interface on an SQLite table, with expiring entries and a background thread
  that purges them; configured by `Config`.
- `adkit.events` – `ChangeEvent`, `ChangeEventType` and the `Watcher`,
  `TypedEvent` and `DataSource` protocols.
- `adkit.keys` – `Key`, a typed key where every instance is distinct.
- `adkit.ortb` – OpenRTB request/response dataclasses, `BidRequest` helpers
  (`app_domain`, `site_domain`, `geo`, `geo_point`, `user_id`) and
  `make_bid_response`.
- `adkit.freqcap` – `FrequencyCap`, `TimeUnit`, `Fcap` counters, `to_duration`
  and `new_fcap_of`.
- `adkit.domain.models` – enums, advertiser, campaign, line item, money, size
  and targeting dataclasses, with `new_base`, `to_duration` and
  `new_ip_addr_spec`.

## Installing

```
pip install .
pip install ".[test]"
```

## Examples

Frequency capping:

```python
from datetime import datetime, timedelta
from adkit.freqcap import FrequencyCap, TimeUnit, new_fcap_of

cap = new_fcap_of(FrequencyCap(max_impressions=1, num_time_units=1, time_unit=TimeUnit.MINUTE))
now = datetime.now()
cap.mark(now)                          # True
cap.mark(now + timedelta(seconds=10))  # False
cap.mark(now + timedelta(minutes=1))   # True
```

A key-value store:

```python
from datetime import timedelta
from adkit.sqlite_store import Config, SQLiteStore

with SQLiteStore(Config(database=":memory:")) as store:
    store.set("john", b"doe", timedelta(seconds=30))
    store.get("john")   # b"doe"
```

Running once per key:

```python
from adkit.par import Cache

cache = Cache()
cache.do("answer", lambda: 42)   # computes 42
cache.do("answer", lambda: 0)    # still 42
```

## What it does not do

- The models in `adkit.domain.models` are plain dataclasses. The package does
  not connect to MongoDB or store them anywhere; `bson` is used only for the
  `ObjectId` that `new_base` creates.
- `adkit.ortb` holds request and response objects only. There is no bidding
  server, no JSON encoding of these objects and no frequency-cap service.
- `SQLiteStore` is the only `KVStore` implementation.
- There is no command-line tool.

## Running the tests

```
pytest
```