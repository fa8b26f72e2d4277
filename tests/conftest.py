"""Shared test fixtures for qshelper."""
import pytest

from qshelper import QueryString
from qshelper.escaping import QueryParamEscaper


SEARCH_QUERY = (
    "suburb=Melbourne&postcode=3000&page=0&sort=stars,desc&country=AU&sort=name"
)


@pytest.fixture
def make_qs():
    """Factory building a validated QueryString."""
    def _make(query_string, escaper=None):
        return QueryString.of(query_string, escaper)
    return _make


@pytest.fixture
def escaper():
    return QueryParamEscaper()


@pytest.fixture
def search_query():
    return SEARCH_QUERY


@pytest.fixture
def search_qs(make_qs):
    return make_qs(SEARCH_QUERY)
