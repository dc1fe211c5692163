import pytest

from model.analysis_config import AnalysisConfig
from model.entities import NULL_TIME, Call, is_null_time
from model.simulation import Simulation, resolve_target_response_times


TRACE = """
complete: true
start_time: 0.0
end_time: 3.0
target_response_times: [0.1, 0.2]
ambulances:
  - {total_travel_time: 1.5}
calls:
  - {arrival_time: 0.5, response_time: 0.05, priority: 1}
  - {arrival_time: 1.5, response_time: null, priority: 2}
"""


def test_call_answered():
    assert Call(1, 0.0, 0.1).answered
    assert not Call(2, 0.0).answered
    assert is_null_time(Call(2, 0.0).response_time)
    assert not is_null_time(0.0)


def test_simulation_from_yaml(tmp_path):
    p = tmp_path / "run.yaml"
    p.write_text(TRACE)
    sim = Simulation.from_yaml(str(p))
    assert sim.complete
    assert sim.num_calls == 2
    assert sim.calls[0].index == 1 and sim.calls[1].index == 2
    assert sim.calls[1].response_time == NULL_TIME
    assert sim.calls[1].priority == 2
    assert sim.ambulances[0].total_travel_time == 1.5
    assert sim.target_response_times == [0.1, 0.2]
    assert sim.answered_only().num_calls == 1


def test_simulation_from_yaml_rejects_garbage(tmp_path):
    p = tmp_path / "run.yaml"
    p.write_text("- just\n- a list\n")
    with pytest.raises(ValueError):
        Simulation.from_yaml(str(p))


def test_target_resolution():
    sim = Simulation(complete=True, start_time=0.0, end_time=1.0, target_response_times=[0.3])
    assert resolve_target_response_times(sim) == [0.3]
    assert resolve_target_response_times(sim, [0.1, 0.2]) == [0.1, 0.2]
    with pytest.raises(ValueError):
        resolve_target_response_times(Simulation(complete=True, start_time=0.0, end_time=1.0))


def test_analysis_config_from_yaml(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("batch_time: 0.5\nwarm_up_time: 0.1\nconf_level: 0.9\n")
    cfg = AnalysisConfig.from_yaml(str(p))
    assert cfg.batch_time == 0.5
    assert cfg.warm_up_time == 0.1
    assert cfg.cool_down_time == 0.0
    assert cfg.conf_level == 0.9
    assert cfg.target_response_times is None


@pytest.mark.parametrize("kwargs", [
    dict(batch_time=0.0),
    dict(batch_time=1.0, warm_up_time=-1.0),
    dict(batch_time=1.0, cool_down_time=-0.1),
    dict(batch_time=1.0, conf_level=1.0),
])
def test_analysis_config_validation(kwargs):
    with pytest.raises(ValueError):
        AnalysisConfig(**kwargs)


@pytest.mark.parametrize("text", ["", "- 0.5\n- 0.1\n"])
def test_analysis_config_from_yaml_rejects_non_mapping(tmp_path, text):
    p = tmp_path / "cfg.yaml"
    p.write_text(text)
    with pytest.raises(ValueError, match="mapping"):
        AnalysisConfig.from_yaml(str(p))
