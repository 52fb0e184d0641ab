import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from eth_trading_agent import __version__
from eth_trading_agent.api.models import HealthResponse
from eth_trading_agent.api.routes import router
from eth_trading_agent.config import get_settings
from eth_trading_agent.core.node import EthNode
from eth_trading_agent.tools.toolkit import TradingToolkit

logger = logging.getLogger("eth_trading_agent.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    node = EthNode(settings.rpc_url, timeout=settings.rpc_timeout_seconds)
    app.state.settings = settings
    app.state.toolkit = TradingToolkit(node, settings=settings)
    logger.info(f"Trading tools ready on chain {settings.chain_id} via {settings.rpc_url}")

    yield

    await node.close()


app = FastAPI(
    title="Ethereum Trading Agent",
    description="Balance, price and swap-simulation tools for AI agents over JSON-RPC",
    version=__version__,
    lifespan=lifespan,
)

# Allow CORS for easy frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Simple health check endpoint."""
    toolkit: TradingToolkit = request.app.state.toolkit
    return HealthResponse(
        status="ok",
        chain_id=toolkit.settings.chain_id,
        tools=[tool["name"] for tool in toolkit.list_tools()],
    )


def main() -> None:
    """Console entry point: serve the API with uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Starting Ethereum Trading Agent on http://{settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
