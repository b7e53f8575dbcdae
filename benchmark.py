import argparse
import heapq
import logging
import random
import statistics
import sys
import time
import tracemalloc
from itertools import count

from networkx.utils.heaps import BinaryHeap, PairingHeap

from fibheap import FibonacciHeap, HeapConfig, Timer


logger = logging.getLogger('benchmark')

NUM_ENTRIES = 0x1000
EXTRACTS = (
    0x10, 0x3f, 0x69, 0x78, 0x100, 0x420, 0x532, 0x548, 0x5a5, 0x62d, 0x7d9, 0x803,
    0x817, 0x860, 0x874, 0x98f, 0x99c, 0xa4d, 0xb90, 0xd1e, 0xd69, 0xe71, 0xed6, 0x1000,
)
SEED = 0x5eed


class FibHeapEngine:
    name = "fibheap"
    supports_decrease = True

    def __init__(self, config=None, instrumentation=None):
        self.heap = FibonacciHeap(config, instrumentation)

    def push(self, x):
        return self.heap.insert(x)

    def pop(self):
        return self.heap.extract_min()

    def decrease(self, ref, x):
        self.heap.decrease_key(ref, x)


class HeapqEngine:
    name = "heapq"
    supports_decrease = False

    def __init__(self):
        self.heap = []

    def push(self, x):
        heapq.heappush(self.heap, x)

    def pop(self):
        return heapq.heappop(self.heap) if self.heap else None

    def decrease(self, ref, x):
        raise NotImplementedError("heapq has no decrease-key")


class NetworkxEngine:
    """Adapter over networkx's key/value heaps; the key is an insertion counter."""
    supports_decrease = True

    def __init__(self, heap_cls):
        self.name = f"networkx-{heap_cls.__name__.replace('Heap', '').lower()}"
        self.heap = heap_cls()
        self._keys = count()

    def push(self, x):
        key = next(self._keys)
        self.heap.insert(key, x)
        return key

    def pop(self):
        if not self.heap:
            return None
        return self.heap.pop()[1]

    def decrease(self, ref, x):
        self.heap.insert(ref, x)


ENGINES = {
    "fibheap": FibHeapEngine,
    "heapq": HeapqEngine,
    "networkx-pairing": lambda: NetworkxEngine(PairingHeap),
    "networkx-binary": lambda: NetworkxEngine(BinaryHeap),
}


def run_schedule(engine, insert_latencies=None, extract_latencies=None):
    """Insert 0..=NUM_ENTRIES in order, extracting at every checkpoint.

    Every extraction must return the next integer starting from 0. Returns the
    number of extractions performed.
    """
    checkpoints = frozenset(EXTRACTS)
    expected_min = 0
    for x in range(NUM_ENTRIES + 1):
        start = time.perf_counter_ns()
        engine.push(x)
        if insert_latencies is not None:
            insert_latencies.append(time.perf_counter_ns() - start)

        if x in checkpoints:
            start = time.perf_counter_ns()
            min_value = engine.pop()
            if extract_latencies is not None:
                extract_latencies.append(time.perf_counter_ns() - start)
            if min_value != expected_min:
                raise RuntimeError(
                    f"{engine.name}: extracted {min_value!r}, expected {expected_min}")
            expected_min += 1
    return expected_min


def run_decrease_mix(engine, rng: random.Random, num_entries: int = NUM_ENTRIES,
                     num_decreases: int = NUM_ENTRIES * 4, decrease_latencies=None):
    """Insert random values, decrease random entries, then drain and verify order."""
    values = [rng.randrange(1_000_000) for _ in range(num_entries)]
    refs = [engine.push(v) for v in values]

    for _ in range(num_decreases):
        i = rng.randrange(num_entries)
        values[i] -= rng.randint(1, 1000)
        start = time.perf_counter_ns()
        engine.decrease(refs[i], values[i])
        if decrease_latencies is not None:
            decrease_latencies.append(time.perf_counter_ns() - start)

    drained = []
    while True:
        v = engine.pop()
        if v is None:
            break
        drained.append(v)

    if drained != sorted(values):
        raise RuntimeError(f"{engine.name}: drained sequence does not match the decreased values")
    return drained


class PerformanceBenchmark:
    def __init__(self, config=None, profile: bool = False):
        self.config = config
        self.timer = Timer("fibheap") if profile else None
        self.insert_latencies = []
        self.extract_latencies = []
        self.decrease_latencies = []

    def make_engine(self, name: str):
        if name == "fibheap":
            return FibHeapEngine(self.config, self.timer)
        return ENGINES[name]()

    def _report_metrics(self, test_name: str, duration: float, num_ops: int):
        throughput = num_ops / duration if duration else float("inf")

        print(f"\n{'=' * 60}")
        print(f"  {test_name}")
        print(f"{'=' * 60}")
        print(f"  Operations:  {num_ops}")
        print(f"  Duration:    {duration:.3f}s")
        print(f"  Throughput:  {throughput:,.0f} ops/s")

        metrics = {"throughput": throughput}
        for label, latencies in (("insert", self.insert_latencies),
                                 ("extract", self.extract_latencies),
                                 ("decrease", self.decrease_latencies)):
            if not latencies:
                continue
            avg = statistics.mean(latencies)
            p50 = statistics.median(latencies)
            p95 = statistics.quantiles(latencies, n=20)[18] if len(latencies) >= 20 else max(latencies)
            p99 = statistics.quantiles(latencies, n=100)[98] if len(latencies) >= 100 else max(latencies)
            print(f"  Avg {label + ':':<9} {avg:>10.1f}ns  p50 {p50:.0f}ns  p95 {p95:.0f}ns  p99 {p99:.0f}ns")
            metrics[label] = {"avg": avg, "p50": p50, "p95": p95, "p99": p99}
        print(f"{'=' * 60}")

        return metrics

    def _reset(self):
        self.insert_latencies.clear()
        self.extract_latencies.clear()
        self.decrease_latencies.clear()

    def run_schedule_test(self, engine_name: str, rounds: int = 0x10):
        self._reset()
        logger.info("Running insert/extract schedule on %s (%d rounds)...", engine_name, rounds)

        start_time = time.perf_counter()
        num_ops = 0
        for _ in range(rounds):
            engine = self.make_engine(engine_name)
            extracted = run_schedule(engine, self.insert_latencies, self.extract_latencies)
            num_ops += NUM_ENTRIES + 1 + extracted
        duration = time.perf_counter() - start_time

        return self._report_metrics(f"Schedule: {engine_name}", duration, num_ops)

    def run_decrease_key_test(self, engine_name: str, rounds: int = 4):
        self._reset()
        engine = self.make_engine(engine_name)
        if not engine.supports_decrease:
            logger.info("Skipping decrease-key mix on %s (no decrease-key)", engine_name)
            return None

        logger.info("Running decrease-key mix on %s (%d rounds)...", engine_name, rounds)
        rng = random.Random(SEED)
        start_time = time.perf_counter()
        num_ops = 0
        for i in range(rounds):
            if i:
                engine = self.make_engine(engine_name)
            drained = run_decrease_mix(engine, rng, decrease_latencies=self.decrease_latencies)
            num_ops += 2 * len(drained)
        num_ops += len(self.decrease_latencies)
        duration = time.perf_counter() - start_time

        return self._report_metrics(f"Decrease-key mix: {engine_name}", duration, num_ops)

    def run_all_benchmarks(self, engine_names, rounds: int = 0x10):
        print("\n" + "#" * 60)
        print("  FIBONACCI HEAP COMPARISON BENCHMARK")
        print("#" * 60)

        tracemalloc.start()

        results = {}
        for name in engine_names:
            results[name] = {
                "schedule": self.run_schedule_test(name, rounds),
                "decrease": self.run_decrease_key_test(name),
            }

        peak_memory = tracemalloc.get_traced_memory()[1]
        tracemalloc.stop()

        print(f"\n{'=' * 60}")
        print(f"  MEMORY")
        print(f"{'=' * 60}")
        print(f"  Peak Memory Usage: {peak_memory / 1024:.1f} KB ({peak_memory / (1024*1024):.2f} MB)")
        print(f"{'=' * 60}")

        print(f"\n{'#' * 60}")
        print(f"  SUMMARY (avg schedule latency)")
        print(f"{'#' * 60}")
        for name, result in results.items():
            schedule = result["schedule"]
            print(f"  {name:<18} insert {schedule['insert']['avg']:>8.1f}ns <=> "
                  f"extract {schedule['extract']['avg']:>10.1f}ns")
        print(f"{'#' * 60}\n")

        if self.timer is not None:
            print(self.timer.report())

        return results


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Compare FibonacciHeap against other heaps.")
    parser.add_argument("engine", nargs="?", default="all", choices=["all", *ENGINES],
                        help="heap implementation to benchmark")
    parser.add_argument("--rounds", type=int, default=0x10,
                        help="repetitions of the insert/extract schedule")
    parser.add_argument("--eager-threshold", type=int, default=None,
                        help="consolidate on insert once the root list exceeds this size")
    parser.add_argument("--profile", action="store_true",
                        help="time the heap's internal phases")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    config = HeapConfig(eager_threshold=args.eager_threshold)
    names = list(ENGINES) if args.engine == "all" else [args.engine]

    benchmark = PerformanceBenchmark(config=config, profile=args.profile)
    benchmark.run_all_benchmarks(names, rounds=args.rounds)
    return 0


if __name__ == "__main__":
    sys.exit(main())
