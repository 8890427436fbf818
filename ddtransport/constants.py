DEFAULT_HOSTNAME = "localhost"
DEFAULT_TRACE_PORT = 8126
DEFAULT_TIMEOUT = 2.0

# Submission kinds accepted by ``HTTPTransport.send``
TRACES = "traces"
SERVICES = "services"

# Trace API versions, newest first
V3 = "v0.3"
V2 = "v0.2"
DEFAULT_API_VERSION = V3

MSGPACK_CONTENT_TYPE = "application/msgpack"
JSON_CONTENT_TYPE = "application/json"

CONTENT_TYPE_HEADER = "Content-Type"
TRACE_COUNT_HEADER = "X-Datadog-Trace-Count"
META_LANG_HEADER = "Datadog-Meta-Lang"
META_LANG_VERSION_HEADER = "Datadog-Meta-Lang-Version"
META_LANG_INTERPRETER_HEADER = "Datadog-Meta-Lang-Interpreter"
META_TRACER_VERSION_HEADER = "Datadog-Meta-Tracer-Version"
