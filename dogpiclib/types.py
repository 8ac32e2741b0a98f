from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote


@dataclass(frozen=True)
class FetchRequest:
    value: str
    url: str

    @classmethod
    def for_breed(cls, value: str, api_base: str) -> "FetchRequest":
        # The value is used verbatim as one path segment; only percent-encoding is applied.
        segment = quote(value, safe="")
        return cls(value=value, url=f"{api_base.rstrip('/')}/breed/{segment}/images/random")


@dataclass(frozen=True)
class FetchResult:
    status: int
    payload: str
    size_bytes: int


class FetcherProtocol(Protocol):
    async def fetch(self, request: FetchRequest) -> FetchResult: ...
