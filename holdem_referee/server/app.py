"""
FastAPI Application Entry Point for Holdem Referee.

This module creates and configures the FastAPI application with:
- HTTP routes for move verification
- CORS middleware for development
- One stateless PokerLogic shared by all requests
"""

import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from holdem_referee import __version__
from holdem_referee.core.logic import PokerLogic
from holdem_referee.core.rules import BlindStructure, DEFAULT_BLINDS
from holdem_referee.server.routes import router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(blinds: Optional[BlindStructure] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        blinds: Blind structure of the tables this server referees

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Holdem Referee",
        description="Authoritative Texas Hold'em move verification",
        version=__version__,
    )

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.logic = PokerLogic(blinds or DEFAULT_BLINDS)
    app.include_router(router)

    logger.info(
        f"Holdem Referee ready (blinds {app.state.logic.blinds.small_blind}/"
        f"{app.state.logic.big_blind})"
    )
    return app


# Create the application instance
app = create_app()
