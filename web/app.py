"""Blockchain Dashboard Web Interface.

FastAPI application with Jinja2 templates showing Blockchair statistics,
with address and transaction lookups for one chain.
"""

import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated
from uuid import uuid4

from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from explorer import formatting as fmt
from explorer.errors import BlockchairError
from web.client import close_client, get_client
from web.state import DashboardRegistry, DashboardStore, Operation
from web.telemetry import get_log_handler, setup_telemetry

# Configuration
DASHBOARD_CHAIN = os.getenv("DASHBOARD_CHAIN", "bitcoin")
RECENT_TRANSACTIONS_LIMIT = int(os.getenv("RECENT_TRANSACTIONS_LIMIT", "5"))
MAX_DASHBOARD_SESSIONS = int(os.getenv("MAX_DASHBOARD_SESSIONS", "1000"))
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    if setup_telemetry():
        logger.info("Telemetry enabled")
        handler = get_log_handler()
        if handler:
            logging.getLogger().addHandler(handler)
    logger.info(f"Dashboard started for chain {DASHBOARD_CHAIN}")

    yield

    # Shutdown
    await close_client()
    logger.info("Dashboard shutting down")


# FastAPI app
app = FastAPI(title="Blockchain Dashboard", docs_url=None, redoc_url=None, lifespan=lifespan)
app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY)
app.state.dashboards = DashboardRegistry(MAX_DASHBOARD_SESSIONS)

# Templates
templates_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))
templates.env.filters["number"] = fmt.format_number
templates.env.filters["price"] = fmt.format_price
templates.env.filters["percentage"] = fmt.format_percentage
templates.env.filters["time_ago"] = fmt.time_ago
templates.env.filters["pretty_json"] = lambda value: json.dumps(value, indent=2, default=str)
templates.env.globals["chain_meta"] = fmt.chain_meta


# --- Template context helpers ---


def get_store(request: Request) -> DashboardStore:
    """Get the dashboard store of the current browser session."""
    session_id = request.session.get("dashboard_id")
    if session_id is None:
        session_id = request.session["dashboard_id"] = uuid4().hex
    return request.app.state.dashboards.get(session_id)


def dashboard_context(request: Request, **extra) -> dict:
    """Build context for the dashboard template."""
    state = get_store(request).state
    return {
        "chain": DASHBOARD_CHAIN,
        "state": state,
        "general": state.general,
        "address_slot": state.address,
        "transaction_slot": state.transaction,
        **extra,
    }


def render_dashboard(request: Request, **extra) -> HTMLResponse:
    return templates.TemplateResponse(request, "dashboard.html", dashboard_context(request, **extra))


# --- Routes ---


@app.get("/", response_class=HTMLResponse)
async def dashboard(request: Request):
    """Show statistics for every chain with the lookup forms."""
    client = get_client()
    await get_store(request).run(Operation.GENERAL, client.get_general_stats)
    return render_dashboard(request)


@app.post("/address", response_class=HTMLResponse)
async def address_lookup(
    request: Request,
    address: Annotated[str, Form()] = "",
):
    """Look up an address on the dashboard chain."""
    address = address.strip()
    if address:
        client = get_client()
        await get_store(request).run(
            Operation.ADDRESS,
            lambda: client.get_address(DASHBOARD_CHAIN, address),
        )
    return render_dashboard(request, address=address)


@app.post("/transaction", response_class=HTMLResponse)
async def transaction_lookup(
    request: Request,
    txid: Annotated[str, Form()] = "",
):
    """Look up a transaction on the dashboard chain."""
    txid = txid.strip()
    if txid:
        client = get_client()
        await get_store(request).run(
            Operation.TRANSACTION,
            lambda: client.get_transaction(DASHBOARD_CHAIN, txid),
        )
    return render_dashboard(request, txid=txid)


@app.get("/chain/{chain}", response_class=HTMLResponse)
async def chain_detail(request: Request, chain: str):
    """Show one chain's statistics and latest transactions."""
    ctx = {"chain": chain, "meta": fmt.chain_meta(chain)}
    client = get_client()

    try:
        ctx["stats"] = await client.get_chain_stats(chain)
        ctx["transactions"] = await client.get_recent_transactions(
            chain, limit=RECENT_TRANSACTIONS_LIMIT
        )
    except BlockchairError as e:
        ctx["error"] = e.message

    return templates.TemplateResponse(request, "chain.html", ctx)


@app.get("/api/state")
async def view_state(request: Request):
    """Current dashboard view state."""
    return get_store(request).state.to_dict()


# --- Health Check ---


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
