import socket
from typing import Optional
from typing import TypeVar
from typing import Union

from ddtransport.constants import DEFAULT_API_VERSION
from ddtransport.constants import DEFAULT_HOSTNAME
from ddtransport.constants import DEFAULT_TIMEOUT
from ddtransport.constants import DEFAULT_TRACE_PORT
from ddtransport.settings._core import DDConfig


T = TypeVar("T")


# This method returns if a hostname is an IPv6 address
def is_ipv6_hostname(hostname: Union[T, str]) -> bool:
    if not isinstance(hostname, str):
        return False
    try:
        socket.inet_pton(socket.AF_INET6, hostname)
        return True
    except socket.error:  # not a valid address
        return False


def _derive_hostname(config: "AgentConfig") -> str:
    return config._trace_agent_hostname or config._agent_host or DEFAULT_HOSTNAME


def _derive_port(config: "AgentConfig") -> int:
    return config._trace_agent_port or config._agent_port or DEFAULT_TRACE_PORT


def _derive_trace_url(config: "AgentConfig") -> str:
    host = _derive_hostname(config)
    if is_ipv6_hostname(host):
        host = "[{}]".format(host)
    return "http://{}:{}".format(host, _derive_port(config))


class AgentConfig(DDConfig):
    __prefix__ = "dd"

    _trace_agent_hostname = DDConfig.v(
        Optional[str],
        "trace_agent_hostname",
        default=None,
        help_type="String",
        help="Stores the hostname of the trace agent",
    )

    _trace_agent_port = DDConfig.v(
        Optional[int],
        "trace_agent_port",
        default=None,
        help_type="Int",
        help="Stores the port of the trace agent",
    )

    _agent_host = DDConfig.v(
        Optional[str],
        "agent_host",
        default=None,
        help_type="String",
        help="Stores the hostname of the agent",
    )

    _agent_port = DDConfig.v(
        Optional[int],
        "agent_port",
        default=None,
        help_type="Int",
        help="Stores the port of the agent",
    )

    trace_agent_timeout_seconds = DDConfig.v(
        float,
        "trace_agent_timeout_seconds",
        default=DEFAULT_TIMEOUT,
        help_type="Float",
        help="Stores the timeout in seconds for the trace agent",
    )

    trace_api_version = DDConfig.v(
        str,
        "trace_api_version",
        default=DEFAULT_API_VERSION,
        help_type="String",
        help="Trace API version the transport starts with (v0.3 or v0.2)",
    )

    # Effective values (these are the ones that will be used)
    trace_agent_hostname = DDConfig.d(str, _derive_hostname)
    trace_agent_port = DDConfig.d(int, _derive_port)
    trace_agent_url = DDConfig.d(str, _derive_trace_url)


config = AgentConfig()
