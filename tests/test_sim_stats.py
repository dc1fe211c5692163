import numpy as np
import pytest

from controller.sim_stats import (
    ambulance_travel_stats,
    calc_batch_mean_response_times,
    call_response_stats,
    count_calls_reached_in_time,
    get_avg_call_response_time,
    get_call_response_times,
    get_calls_reached_in_time,
)
from engineering.batch_means import calc_batch_means
from model.entities import MINUTES_PER_DAY, NULL_TIME, Ambulance, Call
from model.simulation import Simulation


def _sim(calls, complete=True, start=0.0, end=4.0, targets=(0.5, 1.0)):
    return Simulation(
        complete=complete,
        start_time=start,
        end_time=end,
        calls=[Call(index=i, arrival_time=a, response_time=r, priority=p) for i, (a, r, p) in enumerate(calls, 1)],
        ambulances=[Ambulance(1, 2.0), Ambulance(2, 4.0)],
        target_response_times=list(targets),
    )


@pytest.fixture
def answered_sim():
    return _sim([(0.5, 0.2, 1), (1.5, 0.6, 1), (2.5, 0.8, 2), (3.5, 1.2, 2)])


def test_response_times_and_average(answered_sim):
    assert get_call_response_times(answered_sim) == [0.2, 0.6, 0.8, 1.2]
    assert get_avg_call_response_time(answered_sim) == pytest.approx(0.7)
    assert get_avg_call_response_time(answered_sim, use_minutes=True) == pytest.approx(0.7 * MINUTES_PER_DAY)


def test_requires_complete_simulation():
    sim = _sim([(0.5, 0.2, 1)], complete=False)
    for fn in (get_call_response_times, get_calls_reached_in_time, ambulance_travel_stats, call_response_stats):
        with pytest.raises(ValueError, match="conclusa"):
            fn(sim)
    with pytest.raises(ValueError, match="conclusa"):
        calc_batch_mean_response_times(sim, batch_time=1.0)


def test_unanswered_call_rejected_by_per_call_list():
    sim = _sim([(0.5, 0.2, 1), (1.5, NULL_TIME, 1)])
    with pytest.raises(ValueError, match="senza risposta"):
        get_call_response_times(sim)
    with pytest.raises(ValueError, match="senza risposta"):
        get_calls_reached_in_time(sim)


def test_calls_reached_in_time_default_targets(answered_sim):
    # priorità 1 -> 0.5, priorità 2 -> 1.0
    assert get_calls_reached_in_time(answered_sim) == [True, False, True, False]
    assert count_calls_reached_in_time(answered_sim) == 2


def test_calls_reached_in_time_explicit_targets(answered_sim):
    assert count_calls_reached_in_time(answered_sim, target_response_times=[1.0, 2.0]) == 4
    assert count_calls_reached_in_time(answered_sim, target_response_times=[0.1, 0.1]) == 0


def test_priority_outside_target_table():
    sim = _sim([(0.5, 0.2, 3)])
    with pytest.raises(ValueError, match="priorità"):
        get_calls_reached_in_time(sim)


def test_call_stats_exclude_unanswered():
    sim = _sim([(0.5, 0.2, 1), (1.5, NULL_TIME, 1), (2.5, 0.4, 2)])
    st, n_unanswered = call_response_stats(sim)
    assert n_unanswered == 1
    assert st["n"] == 2
    assert st["mean"] == pytest.approx(0.3)
    assert st["min"] == 0.2 and st["max"] == 0.4


def test_ambulance_travel_stats(answered_sim):
    st = ambulance_travel_stats(answered_sim)
    assert st["mean"] == pytest.approx(3.0)
    assert st["min"] == 2.0 and st["max"] == 4.0


def test_batcher_applies_warm_up_and_cool_down(answered_sim):
    means, counts = calc_batch_mean_response_times(answered_sim, batch_time=1.0, warm_up_time=1.0, cool_down_time=1.0)
    np.testing.assert_allclose(means, [0.6, 0.8])
    assert counts.tolist() == [1, 1]


def test_batcher_without_trimming(answered_sim):
    means, counts = calc_batch_mean_response_times(answered_sim, batch_time=2.0)
    np.testing.assert_allclose(means, [0.4, 1.0])
    assert counts.tolist() == [2, 2]


def test_batcher_drops_unanswered_calls():
    sim = _sim([(0.2, 0.2, 1), (0.4, NULL_TIME, 1), (0.6, 0.4, 1), (1.5, 0.9, 2), (1.7, NULL_TIME, 2)], end=2.0)
    means, counts = calc_batch_mean_response_times(sim, batch_time=1.0)
    np.testing.assert_allclose(means, [0.3, 0.9])
    assert counts.tolist() == [2, 1]
    assert NULL_TIME not in means


def test_sentinel_fed_directly_to_partitioner_fails():
    sim = _sim([(0.2, 0.2, 1), (0.4, NULL_TIME, 1)], end=1.0)
    times = [c.arrival_time for c in sim.calls]
    values = [c.response_time for c in sim.calls]
    with pytest.raises(ValueError):
        calc_batch_means(values, times, batch_time=1.0, start_time=0.0, end_time=1.0)


def test_batcher_window_shorter_than_trim(answered_sim):
    means, counts = calc_batch_mean_response_times(answered_sim, batch_time=1.0, warm_up_time=3.0, cool_down_time=3.0)
    assert len(means) == 0 and len(counts) == 0


def test_batcher_no_answered_calls():
    sim = _sim([(0.2, NULL_TIME, 1)])
    with pytest.raises(ValueError, match="nessuna chiamata servita"):
        calc_batch_mean_response_times(sim, batch_time=1.0)
