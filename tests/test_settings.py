import pytest

from ddtransport.settings._agent import AgentConfig
from ddtransport.settings._core import ValueSource
from tests.utils import override_env


def test_defaults():
    with override_env({}, replace_os_env=True):
        config = AgentConfig()

    assert config.trace_agent_hostname == "localhost"
    assert config.trace_agent_port == 8126
    assert config.trace_agent_timeout_seconds == 2.0
    assert config.trace_api_version == "v0.3"
    assert config.trace_agent_url == "http://localhost:8126"
    assert config.value_source("DD_TRACE_AGENT_TIMEOUT_SECONDS") == ValueSource.DEFAULT


def test_from_environment():
    env = dict(
        DD_TRACE_AGENT_HOSTNAME="agent.local",
        DD_TRACE_AGENT_PORT="9126",
        DD_TRACE_AGENT_TIMEOUT_SECONDS="0.25",
        DD_TRACE_API_VERSION="v0.2",
    )
    with override_env(env, replace_os_env=True):
        config = AgentConfig()

    assert config.trace_agent_hostname == "agent.local"
    assert config.trace_agent_port == 9126
    assert config.trace_agent_timeout_seconds == 0.25
    assert config.trace_api_version == "v0.2"
    assert config.trace_agent_url == "http://agent.local:9126"
    assert config.value_source("DD_TRACE_AGENT_PORT") == ValueSource.ENV_VAR


@pytest.mark.parametrize(
    "env,url",
    [
        (dict(DD_AGENT_HOST="dd-agent", DD_AGENT_PORT="1234"), "http://dd-agent:1234"),
        (dict(DD_AGENT_HOST="dd-agent", DD_TRACE_AGENT_HOSTNAME="trace-agent"), "http://trace-agent:8126"),
        (dict(DD_AGENT_HOST="::1"), "http://[::1]:8126"),
    ],
)
def test_agent_url(env, url):
    with override_env(env, replace_os_env=True):
        config = AgentConfig()

    assert config.trace_agent_url == url


def test_value_from_code():
    with override_env({}, replace_os_env=True):
        config = AgentConfig(source={"DD_TRACE_AGENT_HOSTNAME": "from-code"})

    assert config.trace_agent_hostname == "from-code"
    assert config.value_source("DD_TRACE_AGENT_HOSTNAME") == ValueSource.CODE
