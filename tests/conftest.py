import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the domain.toml overlay before any test module imports the medistock domain.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def medistock_bed():
    from medistock.domain import medistock

    bed = DomainFixture(medistock)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(medistock_bed):
    with medistock_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product():
    """Persist a product and return it freshly loaded."""
    from medistock.catalogue.product import Product
    from protean.utils.globals import current_domain

    def _make(**overrides):
        values = {
            "name": "Paracetamol 500mg",
            "description": "Pain reliever, strip of 10 tablets",
            "category": "Analgesics",
            "price": 2.5,
            "stock": 50,
            "manufacturer": "Cipla",
            "rack_no": "A1",
        }
        values.update(overrides)
        repo = current_domain.repository_for(Product)
        product = Product.add(**values)
        repo.add(product)
        return repo.get(product.id)

    return _make


@pytest.fixture()
def make_user():
    """Persist an account and return it freshly loaded.

    Pass ``address=None`` for an account without an address on file.
    """
    from medistock.identity.address import Address
    from medistock.identity.passwords import hash_password
    from medistock.identity.user import User
    from protean.utils.globals import current_domain

    counter = {"n": 0}

    def _make(username=None, email=None, password="s3cure-pass", role="user", **overrides):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        email = email or f"{username}@example.com"

        user = User.register(
            username=username,
            email=email,
            password_hash=hash_password(password),
        )
        user.role = role
        address = overrides.pop("address", {"street": "12 Harbour Rd", "city": "Springfield"})
        if address is not None:
            user.address = Address(**address)
        for key, value in overrides.items():
            setattr(user, key, value)

        repo = current_domain.repository_for(User)
        repo.add(user)
        return repo.get(user.id)

    return _make


@pytest.fixture()
def auth_headers():
    """Bearer headers for an account, as the API expects them."""
    from medistock.identity.tokens import issue_token

    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user.id, user.role)}"}

    return _headers
