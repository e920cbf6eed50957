from __future__ import annotations

import logging
from typing import Protocol

from bounty_pricer.api.indexer import DeploymentClient
from bounty_pricer.config import JobConfig
from bounty_pricer.db import store

logger = logging.getLogger(__name__)


class SchemaResolver(Protocol):
    def resolve(self) -> str:
        ...

    def ensure_tables(self, conn, schema: str) -> None:
        ...


class FixedSchemaResolver:
    def __init__(self, schema: str = "public") -> None:
        self.schema = schema

    def resolve(self) -> str:
        return self.schema

    def ensure_tables(self, conn, schema: str) -> None:
        return None


class DeploymentSchemaResolver:
    """Uses the indexer's current deployment id as the schema holding the bounty tables."""

    def __init__(self, client: DeploymentClient, ensure_live_query_tables: bool = True) -> None:
        self.client = client
        self.ensure_live_query_tables = ensure_live_query_tables

    def resolve(self) -> str:
        deployment_id = self.client.fetch_deployment_id()
        logger.info("Resolved deployment schema %s", deployment_id)
        return deployment_id

    def ensure_tables(self, conn, schema: str) -> None:
        if self.ensure_live_query_tables:
            store.ensure_live_query_tables(conn, schema)


def build_resolver(config: JobConfig) -> SchemaResolver:
    target = config.target_schema
    if target.mode == "deployment":
        client = DeploymentClient(url=target.deployment_id_url, timeout_s=config.http_timeout_s)
        return DeploymentSchemaResolver(client, ensure_live_query_tables=target.ensure_live_query_tables)
    return FixedSchemaResolver(target.name)
