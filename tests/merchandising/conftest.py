from datetime import UTC, datetime, timedelta

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def merchandising_bed():
    from merchandising.domain import merchandising

    bed = DomainFixture(merchandising)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(merchandising_bed):
    with merchandising_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture()
def now():
    return datetime(2026, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture()
def window(now):
    """An open discount window around ``now``."""
    return now - timedelta(days=1), now + timedelta(days=1)
