"""
- Give every test a fresh in-memory SessionStore
- Override FastAPI's get_store so routes use that store.
- Provide a client fixture (TestClient(app)) that already has the override applied.
- Solvers built for tests are seeded and use smaller search bounds so games stay quick.
"""
import os
import pytest

from fastapi.testclient import TestClient

# Ensure the app does NOT run dev-only startup hooks
os.environ.setdefault("APP_ENV", "test")

from codebreaker.main import app, get_store
from codebreaker.solver import Solver
from codebreaker.store import SessionStore


def make_fast_solver() -> Solver:
    # Same algorithm, smaller bounds: full search up to 300 candidates, else score 60 sampled guesses
    return Solver(full_search_threshold=300, sample_size=60, seed=1234)


@pytest.fixture
def fast_solver() -> Solver:
    return make_fast_solver()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(solver_factory=make_fast_solver)


@pytest.fixture(autouse=True)
def override_dep(store):
    """Force the app to use our fresh store for every request."""
    app.dependency_overrides[get_store] = lambda: store
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    # This client talks to the FastAPI app in-process. Because we've overridden get_store,
    # every request uses the per-test store instead of the process-wide one.
    return TestClient(app)
