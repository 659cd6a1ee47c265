import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class BenchLogger:
    def __init__(self, log_dir: Optional[str] = None, verbosity: int = 0):
        self.start_time = datetime.now()
        self.requests_count = 0
        self.errors_count = 0
        self.response_times: List[float] = []
        self.status_codes: Dict[int, int] = {}
        self.log_file: Optional[Path] = None

        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if log_dir is not None:
            log_path = Path(log_dir)
            log_path.mkdir(parents=True, exist_ok=True)
            self.log_file = log_path / f"loadtest_{self.start_time.strftime('%Y%m%d_%H%M%S')}.log"
            handlers.append(logging.FileHandler(self.log_file))

        self.logger = logging.getLogger("abench")
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in handlers:
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
        self.set_verbosity(verbosity)

    def set_verbosity(self, verbosity: int) -> None:
        self.logger.setLevel(logging.DEBUG if verbosity > 1 else logging.INFO)

    def log(self, message: str) -> None:
        """Log a general message."""
        self.logger.info(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)

    def log_request(self, status_code: int, response_time: float) -> None:
        """Record one completed request with memory management"""
        self.requests_count += 1
        # Limit stored response times to prevent memory issues
        max_stored_responses = 10000
        if len(self.response_times) >= max_stored_responses:
            self.response_times = self.response_times[-(max_stored_responses//2):]
        self.response_times.append(response_time)
        self.status_codes[status_code] = self.status_codes.get(status_code, 0) + 1

    def log_error(self, error_message: str) -> None:
        """Log an error message."""
        self.errors_count += 1
        self.logger.error(error_message)

    def log_fatal(self, error_message: str) -> None:
        self.logger.critical(error_message)

    def log_summary(self, elapsed: float) -> None:
        rate = self.requests_count / elapsed if elapsed > 0 else 0.0
        self.log(f"Completed {self.requests_count} requests ({self.errors_count} failed) "
                 f"in {elapsed:.3f}s, {rate:.2f} requests/second")

    def close(self) -> None:
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
