import sys

import pytest

from hmclient.config.client_config import ClientConfig, ParameterConfig
from hmclient.core.objective import ChakongHaimesEvaluator
from hmclient.core.parameter import InputParameter, ParameterSet, ParamType
from tests.hypermapper_mocks import install_fake_hypermapper

DEFAULT_BATCHES = [
    {"header": "x0,x1", "rows": ["1,2", "-3,4"]},
    {"header": "x1,x0", "rows": ["5,6"]},
]


@pytest.fixture
def reference_parameters():
    """x0, x1: integers in [-20, 20], as in the Chakong-Haimes example."""
    return ParameterSet(
        [
            InputParameter("x0", ParamType.INTEGER, [-20, 20]),
            InputParameter("x1", ParamType.INTEGER, [-20, 20]),
        ]
    )


@pytest.fixture
def reference_evaluator():
    return ChakongHaimesEvaluator(seed=0)


@pytest.fixture
def reference_config():
    return ClientConfig(
        application_name="test_app",
        parameters=[
            ParameterConfig(key="x0", type="integer", values=[-20, 20]),
            ParameterConfig(key="x1", type="integer", values=[-20, 20]),
        ],
        objectives=["f1_value", "f2_value"],
        interpreter=sys.executable,
    )


@pytest.fixture
def fake_hypermapper(tmp_path, monkeypatch):
    """
    Installs a fake HyperMapper under tmp_path/hm_home and points the
    required environment variables at it. Returns a function that replaces
    the scripted batches.
    """
    home = tmp_path / "hm_home"
    install_fake_hypermapper(home, DEFAULT_BATCHES)
    monkeypatch.setenv("HYPERMAPPER_HOME", str(home))
    monkeypatch.setenv("PYTHONPATH", str(home))

    def _script(batches):
        install_fake_hypermapper(home, batches)
        return home

    _script.home = home
    return _script
