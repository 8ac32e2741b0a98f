from dataclasses import dataclass
from typing import Optional


DEFAULT_USER_AGENT = "dogpics/1.0 (+https://dog.ceo)"
DEFAULT_API_BASE = "https://dog.ceo/api"


@dataclass(frozen=True)
class PipelineConfig:
    input_path: str = "dog.txt"
    output_path: str = "dog-img.txt"
    api_base: str = DEFAULT_API_BASE
    # None leaves the transport's own default in place.
    request_timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT
    max_connections: int = 4
    metrics_path: Optional[str] = None
