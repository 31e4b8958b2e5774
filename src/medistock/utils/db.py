"""Schema management for SQLAlchemy-backed providers.

The memory provider needs no schema; sqlite and postgresql providers get their
tables created from the registered aggregates and entities.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _load_models(domain: Domain, provider_name: str) -> None:
    # Touching ``_dao`` registers the element's model with the provider metadata
    for registry in (domain.registry.aggregates, domain.registry.entities):
        for _, record in registry.items():
            if record.cls.meta_.provider == provider_name:
                domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create tables for every SQL provider. Returns the provider names touched."""
    touched = []
    with domain.domain_context():
        for name, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _SQL_PROVIDERS:
                continue

            engine = create_engine(provider.conn_info["database_uri"])
            _load_models(domain, provider.name)
            provider._metadata.create_all(engine)
            touched.append(name)
    return touched


def drop_db(domain: Domain) -> list[str]:
    """Drop tables for every SQL provider. Returns the provider names touched."""
    touched = []
    with domain.domain_context():
        for name, provider in domain.providers.items():
            if provider.conn_info["provider"] not in _SQL_PROVIDERS:
                continue

            engine = create_engine(provider.conn_info["database_uri"])
            _load_models(domain, provider.name)
            provider._metadata.drop_all(engine)
            touched.append(name)
    return touched
