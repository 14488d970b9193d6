import threading

import pytest

from peakpip.config import OperationConfig
from peakpip.errors import NotFoundError
from peakpip.executor import Executor
from peakpip.models import PackageRecord
from peakpip.operations import Dispatcher


class FakeExecutor(Executor):
    """Records every argument list; exit codes are scripted per package name."""

    def __init__(self, failures=None, missing=None):
        self.calls = []
        self.probes = []
        self.failures = failures or {}
        self.missing = set(missing or ())
        self._lock = threading.Lock()

    def run(self, args):
        with self._lock:
            self.calls.append(list(args))
        return self.failures.get(args[-1], 0)

    def probe(self, args):
        with self._lock:
            self.probes.append(list(args))
        return 1 if args[-1] in self.missing else 0


class FakeIndex:
    def __init__(self, records=None):
        self.records = records or {}
        self.fetched = []
        self._lock = threading.Lock()

    def fetch_record(self, name):
        with self._lock:
            self.fetched.append(name)
        if name not in self.records:
            raise NotFoundError(f"package not found: {name}")
        return self.records[name]

    def search(self, query):
        return [self.records[query]] if query in self.records else []


def make_record(name, version="1.0", **kwargs):
    return PackageRecord(name=name, version=version, summary=kwargs.pop("summary", f"{name} summary"), **kwargs)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("PEAKPIP_CONFIG", str(tmp_path / "missing.conf"))


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def index():
    return FakeIndex({
        "requests": make_record("requests", "2.32.3", dependencies=("charset_normalizer<4,>=2", "idna<4,>=2.5")),
        "urllib3": make_record("urllib3", "2.2.2"),
        "tqdm": make_record("tqdm", "4.66.4"),
    })


@pytest.fixture
def dispatcher_factory(executor, index):
    def make(**option_kwargs):
        return Dispatcher(executor, index, OperationConfig(**option_kwargs))

    return make
