#!/usr/bin/env python3
"""
abench - an ab-style HTTP benchmarking tool.
"""
import argparse
import os
import sys

from .config import DEFAULT_CONTENT_TYPE, RawOptions
from .errors import FatalResolutionError, ParseError, ValidationError
from .logger import BenchLogger
from .options import OptionSet, OptionSetAction
from .resolver import resolve_plan
from .runner import BenchmarkRunner
from .tracer import FailureTracer

USAGE = "abench [options] [http[s]://]hostname[:port]/path"


def build_parser():
    parser = argparse.ArgumentParser(prog="abench", usage=USAGE,
                                     description="HTTP benchmarking tool")
    parser.add_argument("-n", dest="requests", metavar="requests",
                        help="Number of requests to perform (default: 1)")
    parser.add_argument("-c", dest="concurrency", metavar="concurrency", default="1",
                        help="Number of multiple requests to make at a time (default: 1)")
    parser.add_argument("-t", dest="timelimit", metavar="timelimit", default="0",
                        help="Seconds to max. spend on benchmarking; implies a large -n")
    parser.add_argument("-p", dest="post_file", metavar="postfile", default="",
                        help="File containing data to POST. Remember also to set -T")
    parser.add_argument("-u", dest="put_file", metavar="putfile", default="",
                        help="File containing data to PUT. Remember also to set -T (ignored with -p)")
    parser.add_argument("-T", dest="content_type", metavar="content-type", default=DEFAULT_CONTENT_TYPE,
                        help="Content-type header for POSTing, eg. 'application/x-www-form-urlencoded' "
                             "(default: text/plain)")
    parser.add_argument("-H", dest="headers", metavar="header", action=OptionSetAction,
                        help="Add arbitrary header line, eg. 'Accept-Encoding: gzip'. "
                             "Inserted after all normal header lines (repeatable)")
    parser.add_argument("-C", dest="cookies", metavar="cookie", action=OptionSetAction,
                        help="Add cookie, eg. 'Apache=1234' (repeatable)")
    parser.add_argument("-A", dest="basic_auth", metavar="attribute", default="",
                        help="Add Basic WWW Authentication, a colon separated username and password")
    parser.add_argument("-k", dest="keep_alive", action="store_true", help="Use HTTP KeepAlive feature")
    parser.add_argument("-z", dest="gzip", action="store_true", help="Use HTTP gzip feature")
    parser.add_argument("-v", dest="verbosity", metavar="verbosity", default="0",
                        help="How much troubleshooting info to print")
    parser.add_argument("-G", dest="parallelism", metavar="procs", default=str(os.cpu_count() or 1),
                        help="Number of worker threads for blocking work (default: CPU count)")
    parser.add_argument("-r", dest="continue_on_error", action="store_true",
                        help="Don't exit on socket receive errors")
    parser.add_argument("url", help="Target URL")
    return parser


def parse_arguments(argv=None) -> RawOptions:
    args = build_parser().parse_args(argv)
    return RawOptions(
        url=args.url,
        requests=args.requests,
        concurrency=args.concurrency,
        timelimit=args.timelimit,
        post_file=args.post_file,
        put_file=args.put_file,
        content_type=args.content_type,
        headers=args.headers or OptionSet(),
        cookies=args.cookies or OptionSet(),
        basic_auth=args.basic_auth,
        keep_alive=args.keep_alive,
        gzip=args.gzip,
        verbosity=args.verbosity,
        parallelism=args.parallelism,
        continue_on_error=args.continue_on_error,
    )


def main(argv=None):
    options = parse_arguments(argv)
    logger = BenchLogger()

    try:
        plan = resolve_plan(options)
    except FatalResolutionError as e:
        logger.log_fatal(str(e))
        sys.exit(1)
    except (ParseError, ValidationError) as e:
        logger.log_error(str(e))
        build_parser().print_usage(sys.stderr)
        sys.exit(1)

    logger.set_verbosity(plan.verbosity)
    logger.debug(f"Resolved plan: {plan}")

    try:
        runner = BenchmarkRunner(plan, logger, FailureTracer(plan.verbosity))
    except ValueError as e:
        logger.log_error(str(e))
        sys.exit(1)

    try:
        stats = runner.run()
    except KeyboardInterrupt:
        logger.log("Benchmark interrupted by user")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.log_error(f"Error during benchmark: {e}")
        sys.exit(1)
    finally:
        runner.cleanup()

    sys.exit(0 if stats['error_count'] == 0 or plan.continue_on_error else 1)


if __name__ == "__main__":
    main()
