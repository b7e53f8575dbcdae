"""
The comparison harness runs the same schedule on every engine.
Only correctness is checked here, not timings.
"""
import random
import pytest

import benchmark
from fibheap import HeapConfig


@pytest.mark.parametrize("name", list(benchmark.ENGINES))
def test_schedule_on_every_engine(name):
    engine = benchmark.ENGINES[name]()
    assert benchmark.run_schedule(engine) == len(benchmark.EXTRACTS)


@pytest.mark.parametrize("name", ["fibheap", "networkx-pairing", "networkx-binary"])
def test_decrease_mix_on_engines_with_decrease_key(name):
    engine = benchmark.ENGINES[name]()
    drained = benchmark.run_decrease_mix(engine, random.Random(7), num_entries=300, num_decreases=1200)
    assert len(drained) == 300
    assert drained == sorted(drained)


def test_schedule_records_latencies():
    inserts, extracts = [], []
    benchmark.run_schedule(benchmark.FibHeapEngine(), inserts, extracts)
    assert len(inserts) == benchmark.NUM_ENTRIES + 1
    assert len(extracts) == len(benchmark.EXTRACTS)


def test_heapq_has_no_decrease():
    engine = benchmark.HeapqEngine()
    assert not engine.supports_decrease
    with pytest.raises(NotImplementedError):
        engine.decrease(None, 1)

    bench = benchmark.PerformanceBenchmark()
    assert bench.run_decrease_key_test("heapq") is None


def test_schedule_with_eager_threshold_and_profiling():
    bench = benchmark.PerformanceBenchmark(config=HeapConfig(eager_threshold=32), profile=True)
    metrics = bench.run_schedule_test("fibheap", rounds=1)
    assert metrics["extract"]["avg"] > 0
    assert bench.timer.averages()


def test_parse_args():
    args = benchmark.parse_args(["networkx-binary", "--rounds", "2", "--eager-threshold", "50"])
    assert args.engine == "networkx-binary"
    assert args.rounds == 2
    assert args.eager_threshold == 50
    assert benchmark.parse_args([]).engine == "all"


def test_main_single_engine(capsys):
    assert benchmark.main(["fibheap", "--rounds", "1"]) == 0
    out = capsys.readouterr().out
    assert "Schedule: fibheap" in out
    assert "Peak Memory Usage" in out
