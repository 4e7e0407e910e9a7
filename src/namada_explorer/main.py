from __future__ import annotations

"""
Namada Explorer - FastAPI Backend
Read-only block queries over the indexed chain
"""

from contextlib import asynccontextmanager
import logging
from datetime import datetime, timezone
from typing import Mapping

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import httpx

from namada_explorer import __version__
from namada_explorer.api import blocks
from namada_explorer.config import ExplorerConfig
from namada_explorer.database.connection import Database
from namada_explorer.errors import APIError, ExplorerError, StoreError
from namada_explorer.services.assembler import BlockAssembler
from namada_explorer.services.block_query import LatestBlocksQuery
from namada_explorer.services.checksums import load_checksums
from namada_explorer.services.classifier import TxClassifier
from namada_explorer.services.epoch import EpochOracle
from namada_explorer.services.interfaces import BlockStore, EpochOracle as EpochSource

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def build_block_query(
    store: BlockStore,
    oracle: EpochSource,
    checksums: Mapping[str, str],
    fanout: int,
) -> LatestBlocksQuery:
    """Wire the pipeline from its collaborators"""
    classifier = TxClassifier(store, checksums)
    assembler = BlockAssembler(store, classifier, fanout=fanout)
    return LatestBlocksQuery(store, oracle, assembler)


def create_app(
    config: ExplorerConfig | None = None,
    *,
    store: BlockStore | None = None,
    oracle: EpochSource | None = None,
    checksums: Mapping[str, str] | None = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators passed in are used as-is; anything missing is created from
    ``config`` when the application starts and closed when it stops.
    """
    config = config or ExplorerConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Namada Explorer...")

        db: Database | None = None
        http_client: httpx.AsyncClient | None = None
        block_store = store
        epoch_oracle = oracle
        checksum_table = checksums

        if checksum_table is None:
            checksum_table = load_checksums(config.checksums_path)

        if block_store is None:
            db = Database(
                config.database_url,
                min_size=config.db_pool_min_size,
                max_size=config.db_pool_max_size,
                command_timeout=config.db_command_timeout,
            )
            await db.connect()
            logger.info("Database connected")
            block_store = db

        if epoch_oracle is None:
            http_client = httpx.AsyncClient()
            epoch_oracle = EpochOracle(http_client, config.tendermint_addr, timeout=config.rpc_timeout)
            logger.info("Epoch oracle using node %s", config.tendermint_addr)

        app.state.store = block_store
        app.state.oracle = epoch_oracle
        app.state.block_query = build_block_query(block_store, epoch_oracle, checksum_table, config.tx_fanout)

        logger.info("Namada Explorer started successfully!")

        yield

        logger.info("Shutting down Namada Explorer...")

        if http_client:
            await http_client.aclose()

        if db:
            await db.disconnect()

        logger.info("Namada Explorer stopped")

    app = FastAPI(
        title="Namada Explorer API",
        description="Blocks and classified transactions from the indexed Namada chain",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(ExplorerError)
    async def explorer_error_handler(request: Request, exc: ExplorerError):
        if isinstance(exc, StoreError):
            logger.error("Store failure on %s: %s", request.url.path, exc)
        else:
            logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        error = APIError.from_exception(exc)
        return JSONResponse(status_code=error.http_status, content=error.to_dict())

    app.include_router(blocks.router, tags=["Blocks"])

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint"""
        block_store = getattr(request.app.state, "store", None)
        epoch_oracle = getattr(request.app.state, "oracle", None)

        db_healthy = True
        if hasattr(block_store, "is_connected"):
            db_healthy = await block_store.is_connected()

        node_healthy = True
        if hasattr(epoch_oracle, "is_reachable"):
            node_healthy = await epoch_oracle.is_reachable()

        overall_healthy = block_store is not None and db_healthy and node_healthy
        return JSONResponse(
            status_code=200 if overall_healthy else 503,
            content={
                "status": "healthy" if overall_healthy else "degraded",
                "components": {
                    "database": "connected" if db_healthy else "disconnected",
                    "node": "reachable" if node_healthy else "unreachable",
                },
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    return app


def run() -> None:
    import uvicorn

    config = ExplorerConfig.from_env()
    configure_logging(config.log_level)

    logger.info(f"Starting Namada Explorer on {config.host}:{config.port}")

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    run()
