"""Settings for the browser-facing attempt API."""

API_HOST: str = "0.0.0.0"
API_PORT: int = 8000
API_THREAD_NAME: str = "QuizApiServer"
UVICORN_LOG_LEVEL: str = "info"

# Any routable address works; no packet is sent when probing the LAN IP.
LAN_PROBE_ADDRESS: tuple[str, int] = ("8.8.8.8", 80)
LOOPBACK_ADDRESS: str = "127.0.0.1"
