"""
Turns raw command-line values into a validated BenchmarkPlan.
"""
from typing import Optional, Tuple
from urllib.parse import SplitResult, urlsplit

from .config import MAX_REQUESTS, BenchmarkPlan, RawInt, RawOptions
from .errors import Invariant, ParseError, ValidationError
from .hostport import authority_of, resolve_host_port


def parse_url(url: str) -> SplitResult:
    if not url:
        raise ParseError("Target URL is required")
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise ParseError(f"Malformed URL {url!r}: {e}", url) from e
    if not parts.scheme or not authority_of(parts):
        raise ParseError(f"Malformed URL {url!r}: expected [http[s]://]hostname[:port]/path", url)
    return parts


def parse_int(flag: str, value: RawInt, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ParseError(f"Invalid value for {flag}: {value!r}", str(value))
    if isinstance(value, int):
        return value
    try:
        return int(value.strip(), 10)
    except (AttributeError, ValueError) as e:
        raise ParseError(f"Invalid value for {flag}: {value!r}", str(value)) from e


def infer_method(post_file: str, put_file: str) -> Tuple[str, Optional[str]]:
    """Pick the HTTP method from the body file flags.

    -p wins when both -p and -u are given; the PUT file is then ignored.
    """
    if post_file:
        return "POST", post_file
    if put_file:
        return "PUT", put_file
    return "GET", None


def validate(plan: BenchmarkPlan) -> None:
    if plan.request_count < 1:
        raise ValidationError(Invariant.REQUESTS_POSITIVE,
                              f"Request count must be at least 1, got {plan.request_count}")
    if plan.concurrency < 1:
        raise ValidationError(Invariant.CONCURRENCY_POSITIVE,
                              f"Concurrency must be at least 1, got {plan.concurrency}")
    if plan.time_limit < 0:
        raise ValidationError(Invariant.TIME_LIMIT_NON_NEGATIVE,
                              f"Time limit cannot be negative, got {plan.time_limit}")
    if plan.verbosity < 0:
        raise ValidationError(Invariant.VERBOSITY_NON_NEGATIVE,
                              f"Verbosity cannot be negative, got {plan.verbosity}")
    if plan.parallelism < 1:
        raise ValidationError(Invariant.PARALLELISM_POSITIVE,
                              f"Parallelism must be at least 1, got {plan.parallelism}")
    if plan.concurrency > plan.request_count:
        raise ValidationError(Invariant.CONCURRENCY_WITHIN_REQUESTS,
                              "Cannot use concurrency level greater than total number of requests "
                              f"({plan.concurrency} > {plan.request_count})")


def resolve_plan(options: RawOptions) -> BenchmarkPlan:
    """Resolve raw options into a BenchmarkPlan.

    Raises:
        ParseError: the URL or a numeric flag does not parse.
        FatalResolutionError: the URL carries an unparseable port.
        ValidationError: a resolved value breaks a plan invariant.
    """
    parts = parse_url(options.url)
    host, port = resolve_host_port(parts)

    method, body_file = infer_method(options.post_file, options.put_file)

    request_count = parse_int("-n", options.requests, 1)
    concurrency = parse_int("-c", options.concurrency, 1)
    time_limit = parse_int("-t", options.timelimit, 0)
    verbosity = parse_int("-v", options.verbosity, 0)
    parallelism = parse_int("-G", options.parallelism, 1)

    # A time budget drives the run when -n was left alone
    if time_limit > 0 and options.requests is None:
        request_count = MAX_REQUESTS

    plan = BenchmarkPlan(
        request_count=request_count,
        concurrency=concurrency,
        time_limit=time_limit,
        method=method,
        body_file=body_file,
        content_type=options.content_type,
        extra_headers=tuple(options.headers),
        cookies=tuple(options.cookies),
        use_gzip=options.gzip,
        use_keep_alive=options.keep_alive,
        basic_auth=options.basic_auth or None,
        user_agent=options.user_agent,
        url=options.url,
        host=host,
        port=port,
        verbosity=verbosity,
        parallelism=parallelism,
        continue_on_error=options.continue_on_error,
    )
    validate(plan)
    return plan
