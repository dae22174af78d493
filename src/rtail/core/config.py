from __future__ import annotations
from dataclasses import dataclass

from .. import __version__

DEFAULT_USER_AGENT = f"rtail/{__version__}"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Settings shared by every request of one tail run.

    Transports read this once when they are created; the core never
    consults global state.
    """

    user: str | None = None
    password: str | None = None
    user_agent: str | None = DEFAULT_USER_AGENT
    verify: bool = True                 # TLS certificate verification
    connect_timeout: float = 30.0
    read_timeout: float | None = 60.0
    dump_headers: bool = False          # write request/response headers to stderr

    @property
    def auth(self) -> tuple[str, str] | None:
        if not self.user:
            return None
        return (self.user, self.password or "")

    @property
    def timeout(self) -> tuple[float, float | None]:
        return (self.connect_timeout, self.read_timeout)
