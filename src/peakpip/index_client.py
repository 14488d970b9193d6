from __future__ import annotations

import atexit
from typing import List, Optional
from urllib.parse import quote

import requests
import urllib3
from requests.adapters import HTTPAdapter, Retry

from .config import Config
from .errors import DecodeError, NetworkError, NotFoundError
from .logger import setup_logger
from .models import PackageRecord

_logger = setup_logger()


class IndexClient:
    """
    Client for the package index JSON API.

    The index has no full-text search: ``search`` probes the simple index for
    an exact project name and, when it exists, returns its single record.
    """

    def __init__(self, config: Config) -> None:
        self.config = config
        self.index_url = config.index_url.rstrip("/")
        self.simple_url = config.simple_url.rstrip("/")
        self.timeout = config.timeout
        self.session: Optional[requests.Session] = None

        self._init_session()
        atexit.register(self.close)

    def _init_session(self) -> None:
        if self.session:
            self.session.close()

        self.session = requests.Session()
        # Ignore *_PROXY env vars; the config file is the only source
        self.session.trust_env = False
        self.session.headers.update({"Accept": "application/json"})

        if self.config.proxy_url:
            self.session.proxies.update({
                "http": self.config.proxy_url,
                "https": self.config.proxy_url,
            })

        retry_strategy = Retry(
            total=self.config.retries,
            backoff_factor=0.3,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(pool_connections=10, pool_maxsize=10, max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        if not self.config.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            self.session.verify = False
            _logger.warning("SSL verification disabled (Insecure).")
        else:
            self.session.verify = self.config.ca_bundle if self.config.ca_bundle else True

    def close(self) -> None:
        if self.session:
            self.session.close()

    def _get(self, url: str) -> requests.Response:
        _logger.debug("GET %s", url)
        try:
            return self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"request to {url} failed: {e}") from e

    # --------------------------------------------------------
    # Lookups
    # --------------------------------------------------------

    def fetch_record(self, name: str) -> PackageRecord:
        url = f"{self.index_url}/{quote(name, safe='')}/json"
        resp = self._get(url)
        try:
            if not resp.ok:
                raise NotFoundError(f"package not found: {name} (HTTP {resp.status_code})")
            try:
                payload = resp.json()
            except ValueError as e:
                raise DecodeError(f"failed to decode package info for {name}: {e}") from e
        finally:
            resp.close()

        record = PackageRecord.from_json(payload)
        _logger.debug("Fetched %s %s (%d dependencies)", record.name, record.version, len(record.dependencies))
        return record

    def search(self, query: str) -> List[PackageRecord]:
        url = f"{self.simple_url}/{quote(query, safe='')}/"
        resp = self._get(url)
        resp.close()
        if not resp.ok:
            _logger.debug("Simple index has no project %r (HTTP %s)", query, resp.status_code)
            return []
        return [self.fetch_record(query)]
