import os
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .options import OptionSet

VERSION = "0.1.0"

DEFAULT_CONTENT_TYPE = "text/plain"
DEFAULT_USER_AGENT = f"abench/{VERSION}"

# Request count used when a time limit drives the run instead of -n
MAX_REQUESTS = 50_000_000

RawInt = Union[int, str, None]


@dataclass
class RawOptions:
    """Raw flag values as collected from the command line.

    Numeric fields may still be strings; the resolver parses them.
    ``requests`` is None when -n was not given.
    """
    url: str
    requests: RawInt = None
    concurrency: RawInt = 1
    timelimit: RawInt = 0
    post_file: str = ""
    put_file: str = ""
    content_type: str = DEFAULT_CONTENT_TYPE
    headers: OptionSet = field(default_factory=OptionSet)
    cookies: OptionSet = field(default_factory=OptionSet)
    basic_auth: str = ""
    keep_alive: bool = False
    gzip: bool = False
    user_agent: str = DEFAULT_USER_AGENT
    verbosity: RawInt = 0
    parallelism: RawInt = field(default_factory=lambda: os.cpu_count() or 1)
    continue_on_error: bool = False


@dataclass(frozen=True)
class BenchmarkPlan:
    """Fully resolved description of one benchmark run."""
    request_count: int
    concurrency: int
    time_limit: int
    method: str
    body_file: Optional[str]
    content_type: str
    extra_headers: Tuple[str, ...]
    cookies: Tuple[str, ...]
    use_gzip: bool
    use_keep_alive: bool
    basic_auth: Optional[str]
    user_agent: str
    url: str
    host: str
    port: int
    verbosity: int = 0
    parallelism: int = 1
    continue_on_error: bool = False

    @property
    def has_body(self) -> bool:
        return self.body_file is not None
