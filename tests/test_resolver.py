"""Tests for resolving raw options into a BenchmarkPlan."""

import dataclasses
import random

import pytest

from abench.config import DEFAULT_CONTENT_TYPE, DEFAULT_USER_AGENT, MAX_REQUESTS, RawOptions
from abench.errors import FatalResolutionError, Invariant, ParseError, ValidationError
from abench.options import OptionSet
from abench.resolver import infer_method, parse_int, resolve_plan

URL = "http://example.com/index.html"


def make_options(**overrides):
    overrides.setdefault("url", URL)
    overrides.setdefault("parallelism", 2)
    return RawOptions(**overrides)


def random_valid_combinations(seed=1234, count=50):
    rng = random.Random(seed)
    combos = []
    for _ in range(count):
        requests = rng.randint(1, 500)
        concurrency = rng.randint(1, requests)
        timelimit = rng.choice([0, 0, rng.randint(1, 120)])
        combos.append((requests, concurrency, timelimit))
    return combos


class TestMethodInference:
    """Test suite for method inference from body files"""

    def test_no_body_files_is_get(self):
        plan = resolve_plan(make_options())

        assert plan.method == "GET"
        assert plan.body_file is None
        assert not plan.has_body

    def test_post_file_is_post(self):
        plan = resolve_plan(make_options(post_file="body.json"))

        assert plan.method == "POST"
        assert plan.body_file == "body.json"

    def test_put_file_is_put(self):
        plan = resolve_plan(make_options(put_file="body.xml"))

        assert plan.method == "PUT"
        assert plan.body_file == "body.xml"

    def test_post_wins_over_put(self):
        """Both -p and -u given: POST is used and the PUT file ignored"""
        plan = resolve_plan(make_options(post_file="post.txt", put_file="put.txt"))

        assert plan.method == "POST"
        assert plan.body_file == "post.txt"

    def test_infer_method_directly(self):
        assert infer_method("", "") == ("GET", None)
        assert infer_method("a", "") == ("POST", "a")
        assert infer_method("", "b") == ("PUT", "b")
        assert infer_method("a", "b") == ("POST", "a")


class TestTimeLimitOverride:
    """Test suite for the time limit overriding the request count"""

    def test_time_limit_with_default_requests_uses_sentinel(self):
        plan = resolve_plan(make_options(timelimit=30))

        assert plan.request_count == MAX_REQUESTS
        assert plan.time_limit == 30

    def test_time_limit_keeps_explicit_request_count(self):
        plan = resolve_plan(make_options(timelimit=30, requests=200))

        assert plan.request_count == 200

    def test_explicit_single_request_is_kept(self):
        """Only an untouched -n is overridden"""
        plan = resolve_plan(make_options(timelimit=5, requests=1))

        assert plan.request_count == 1

    def test_no_time_limit_defaults_to_one_request(self):
        plan = resolve_plan(make_options())

        assert plan.request_count == 1
        assert plan.time_limit == 0

    def test_time_limit_allows_high_concurrency(self):
        plan = resolve_plan(make_options(timelimit=10, concurrency=50))

        assert plan.concurrency == 50


class TestValidation:
    """Test suite for invariant validation"""

    def test_concurrency_above_requests_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            resolve_plan(make_options(concurrency=10, requests=5))

        assert exc_info.value.invariant is Invariant.CONCURRENCY_WITHIN_REQUESTS
        assert "concurrency level greater than total number of requests" in str(exc_info.value)

    @pytest.mark.parametrize(
        "overrides,invariant",
        [
            ({"requests": 0}, Invariant.REQUESTS_POSITIVE),
            ({"requests": -3}, Invariant.REQUESTS_POSITIVE),
            ({"requests": 5, "concurrency": 0}, Invariant.CONCURRENCY_POSITIVE),
            ({"timelimit": -1}, Invariant.TIME_LIMIT_NON_NEGATIVE),
            ({"verbosity": -1}, Invariant.VERBOSITY_NON_NEGATIVE),
            ({"parallelism": 0}, Invariant.PARALLELISM_POSITIVE),
        ],
    )
    def test_each_invariant_is_named(self, overrides, invariant):
        with pytest.raises(ValidationError) as exc_info:
            resolve_plan(make_options(**overrides))

        assert exc_info.value.invariant is invariant

    @pytest.mark.parametrize("requests,concurrency,timelimit", random_valid_combinations())
    def test_valid_combinations_keep_concurrency_within_requests(self, requests, concurrency, timelimit):
        plan = resolve_plan(make_options(requests=requests, concurrency=concurrency, timelimit=timelimit))

        assert 1 <= plan.concurrency <= plan.request_count
        assert plan.time_limit >= 0


class TestParsing:
    """Test suite for URL and numeric flag parsing"""

    @pytest.mark.parametrize("url", ["", "http://[::1/", "example.com", "/just/a/path", "http:///nohost"])
    def test_malformed_url_is_parse_error(self, url):
        with pytest.raises(ParseError):
            resolve_plan(make_options(url=url))

    def test_bad_port_is_fatal(self):
        with pytest.raises(FatalResolutionError):
            resolve_plan(make_options(url="http://example.com:http/"))

    def test_numeric_strings_are_parsed(self):
        plan = resolve_plan(make_options(requests="100", concurrency=" 10 ", timelimit="0", verbosity="2"))

        assert plan.request_count == 100
        assert plan.concurrency == 10
        assert plan.verbosity == 2

    def test_bad_numeric_flag_names_the_flag(self):
        with pytest.raises(ParseError) as exc_info:
            resolve_plan(make_options(concurrency="ten"))

        assert "-c" in str(exc_info.value)
        assert exc_info.value.value == "ten"

    def test_parse_int_default(self):
        assert parse_int("-n", None, 1) == 1
        assert parse_int("-n", 7, 1) == 7

    def test_parse_int_rejects_bool(self):
        with pytest.raises(ParseError):
            parse_int("-n", True, 1)

    def test_url_error_reported_before_flag_errors(self):
        with pytest.raises(ParseError) as exc_info:
            resolve_plan(make_options(url="", requests="x"))

        assert "URL" in str(exc_info.value)


class TestPlanContents:
    """Test suite for the fields copied into the plan"""

    def test_defaults(self):
        plan = resolve_plan(make_options())

        assert plan.content_type == DEFAULT_CONTENT_TYPE
        assert plan.user_agent == DEFAULT_USER_AGENT
        assert plan.extra_headers == ()
        assert plan.cookies == ()
        assert plan.basic_auth is None
        assert plan.use_gzip is False
        assert plan.use_keep_alive is False
        assert plan.continue_on_error is False
        assert plan.host == "example.com"
        assert plan.port == 80
        assert plan.url == URL

    def test_pass_through_fields(self):
        headers = OptionSet()
        headers.set("X-One: 1")
        headers.set("X-One: 1")
        cookies = OptionSet()
        cookies.set("session=abc")

        plan = resolve_plan(make_options(
            url="https://api.example.com:8443/v1",
            content_type="application/json",
            headers=headers,
            cookies=cookies,
            basic_auth="alice:secret",
            gzip=True,
            keep_alive=True,
            continue_on_error=True,
        ))

        assert plan.content_type == "application/json"
        assert plan.extra_headers == ("X-One: 1", "X-One: 1")
        assert plan.cookies == ("session=abc",)
        assert plan.basic_auth == "alice:secret"
        assert plan.use_gzip is True
        assert plan.use_keep_alive is True
        assert plan.continue_on_error is True
        assert (plan.host, plan.port) == ("api.example.com", 8443)

    def test_plan_is_detached_from_option_sets(self):
        headers = OptionSet()
        headers.set("X-A: 1")
        plan = resolve_plan(make_options(headers=headers))

        headers.set("X-B: 2")

        assert plan.extra_headers == ("X-A: 1",)

    def test_plan_is_immutable(self):
        plan = resolve_plan(make_options())

        with pytest.raises(dataclasses.FrozenInstanceError):
            plan.concurrency = 5

    def test_unsupported_scheme_passes_through(self):
        plan = resolve_plan(make_options(url="ftp://files.example.com/a"))

        assert plan.port == 0
