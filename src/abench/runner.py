import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Tuple

import aiohttp

from .config import BenchmarkPlan
from .logger import BenchLogger
from .stopwatch import StopWatch
from .tracer import FailureTracer

REQUEST_TIMEOUT = 30

REQUEST_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


def build_headers(plan: BenchmarkPlan) -> List[Tuple[str, str]]:
    """Standard header lines first, then the user's extra lines in order."""
    headers = [('User-Agent', plan.user_agent)]
    if plan.has_body:
        headers.append(('Content-Type', plan.content_type))
    headers.append(('Accept-Encoding', 'gzip' if plan.use_gzip else 'identity'))
    if plan.cookies:
        headers.append(('Cookie', '; '.join(plan.cookies)))
    for line in plan.extra_headers:
        name, _, value = line.partition(':')
        if not name.strip():
            raise ValueError(f"Invalid header line: {line!r}")
        headers.append((name.strip(), value.strip()))
    return headers


def build_auth(plan: BenchmarkPlan) -> Optional[aiohttp.BasicAuth]:
    if not plan.basic_auth:
        return None
    login, _, password = plan.basic_auth.partition(':')
    return aiohttp.BasicAuth(login, password)


class BenchmarkRunner:
    """Issues the requests described by a BenchmarkPlan."""

    def __init__(self, plan: BenchmarkPlan, logger: BenchLogger,
                 tracer: Optional[FailureTracer] = None):
        self.plan = plan
        self.logger = logger
        self.tracer = tracer or FailureTracer(plan.verbosity)
        self.headers = build_headers(plan)
        self.auth = build_auth(plan)
        self.body: Optional[bytes] = None
        self.running = False
        self.issued = 0
        self.stats = {
            'requests_sent': 0,
            'success_count': 0,
            'error_count': 0,
            'elapsed': 0.0,
        }

    def stop(self):
        """Stop issuing new requests"""
        self.running = False

    def _claim_request(self) -> bool:
        if not self.running or self.issued >= self.plan.request_count:
            return False
        self.issued += 1
        return True

    async def _send_request(self, session: aiohttp.ClientSession) -> Optional[int]:
        watch = StopWatch()
        watch.start()
        try:
            async with session.request(self.plan.method, self.plan.url, data=self.body,
                                       headers=self.headers, auth=self.auth) as response:
                await response.read()
                watch.stop()
        except REQUEST_ERRORS as e:
            watch.stop()
            self.stats['requests_sent'] += 1
            self.stats['error_count'] += 1
            self.tracer.trace(e)
            self.logger.log_error(f"Request error after {watch.elapsed:.3f}s: {e!r}")
            if not self.plan.continue_on_error:
                self.stop()
            return None

        self.stats['requests_sent'] += 1
        if response.status < 400:
            self.stats['success_count'] += 1
        self.logger.log_request(response.status, watch.elapsed)
        self.logger.debug(f"{self.plan.method} {self.plan.url} -> {response.status} in {watch.elapsed:.3f}s")
        return response.status

    async def _worker(self, session: aiohttp.ClientSession) -> None:
        while self._claim_request():
            await self._send_request(session)

    async def run_async(self) -> dict:
        loop = asyncio.get_running_loop()
        loop.set_default_executor(ThreadPoolExecutor(max_workers=self.plan.parallelism))

        if self.plan.body_file is not None:
            self.body = await loop.run_in_executor(None, Path(self.plan.body_file).read_bytes)

        connector = aiohttp.TCPConnector(limit=self.plan.concurrency,
                                         force_close=not self.plan.use_keep_alive,
                                         ssl=False)
        timeout = aiohttp.ClientTimeout(total=REQUEST_TIMEOUT)

        run_watch = StopWatch()
        async with aiohttp.ClientSession(connector=connector, timeout=timeout) as session:
            self.running = True
            run_watch.start()
            workers = [asyncio.ensure_future(self._worker(session))
                       for _ in range(self.plan.concurrency)]
            if self.plan.time_limit > 0:
                _, pending = await asyncio.wait(workers, timeout=self.plan.time_limit)
                self.stop()
                for task in pending:
                    task.cancel()
                results = await asyncio.gather(*workers, return_exceptions=True)
                for result in results:
                    if isinstance(result, Exception):
                        raise result
            else:
                await asyncio.gather(*workers)
            run_watch.stop()
            self.running = False

        self.stats['elapsed'] = run_watch.elapsed
        self.logger.log_summary(run_watch.elapsed)
        return self.stats

    def run(self) -> dict:
        """Run the benchmark to completion."""
        plan = self.plan
        target = f"{plan.method} {plan.url} ({plan.host}:{plan.port})"
        if plan.time_limit > 0:
            self.logger.log(f"Benchmarking {target} for up to {plan.time_limit}s, concurrency {plan.concurrency}")
        else:
            self.logger.log(f"Benchmarking {target} with {plan.request_count} requests, "
                            f"concurrency {plan.concurrency}")
        return asyncio.run(self.run_async())

    def cleanup(self):
        """Stop the run and release resources."""
        self.running = False
        self.logger.log("Benchmark finished. Cleaning up resources...")
