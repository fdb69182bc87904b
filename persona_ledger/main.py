from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Optional
import json
import logging
import sys

import uvicorn

from .config import Settings, block_time, settings as default_settings, unix_now
from .handlers import TransactionProcessor
from .models import NodeInfo, RequirementsResponse, TxResponse
from .queries import LedgerQueries
from .state import LedgerState
from .templates import (
    TemplateLookupError,
    build_presentation,
    find_template_credential,
    requirements_for,
)


logger = logging.getLogger(__name__)


def get_state(request: Request) -> LedgerState:
    return request.app.state.ledger


def get_queries(request: Request) -> LedgerQueries:
    return request.app.state.queries


def get_processor(request: Request) -> TransactionProcessor:
    return request.app.state.processor


def create_app(
    settings: Optional[Settings] = None, state: Optional[LedgerState] = None
) -> FastAPI:
    settings = settings or default_settings
    state = state or LedgerState(settings)

    app = FastAPI(title=settings.app_name)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.ledger = state
    app.state.queries = LedgerQueries(state, settings)
    app.state.processor = TransactionProcessor(state)

    @app.post("/cosmos/tx/v1beta1/txs", response_model=TxResponse)
    async def broadcast_tx(
        request: Request, processor: TransactionProcessor = Depends(get_processor)
    ) -> TxResponse:
        raw = await request.body()
        receipt, outcome = processor.broadcast(raw)
        if outcome is not None:
            logger.debug("Broadcast %s -> %s", outcome.type_url, outcome.status)
        return receipt

    @app.get("/cosmos/bank/v1beta1/balances/{address}")
    async def account_balance(
        address: str, queries: LedgerQueries = Depends(get_queries)
    ):
        return queries.balance(address)

    @app.get("/persona/did/v1beta1/did_documents")
    async def list_dids(queries: LedgerQueries = Depends(get_queries)):
        return queries.list_identities()

    @app.get("/persona/did/v1beta1/did_documents/{did_id:path}")
    async def get_did(did_id: str, queries: LedgerQueries = Depends(get_queries)):
        return queries.get_identity(did_id)

    @app.get("/persona/did/v1beta1/did_by_controller/{controller}")
    async def get_did_by_controller(
        controller: str, queries: LedgerQueries = Depends(get_queries)
    ):
        return queries.get_identity_by_controller(controller)

    @app.get("/persona/vc/v1beta1/credentials")
    async def list_credentials(queries: LedgerQueries = Depends(get_queries)):
        return queries.list_credentials()

    @app.get("/persona/vc/v1beta1/credentials_by_controller/{controller}")
    async def credentials_by_controller(
        controller: str, queries: LedgerQueries = Depends(get_queries)
    ):
        return queries.credentials_by_controller(controller)

    @app.get("/persona/zk/v1beta1/proofs")
    async def list_proofs(queries: LedgerQueries = Depends(get_queries)):
        return queries.list_proofs()

    @app.get("/persona/zk/v1beta1/proofs_by_controller/{controller}")
    async def proofs_by_controller(
        controller: str, queries: LedgerQueries = Depends(get_queries)
    ):
        return queries.proofs_by_controller(controller)

    @app.get("/persona/zk/v1beta1/circuits")
    async def list_circuits(queries: LedgerQueries = Depends(get_queries)):
        return queries.list_circuits()

    @app.post("/api/getRequirements", response_model=RequirementsResponse)
    async def get_requirements(request: Request) -> RequirementsResponse:
        try:
            payload = json.loads(await request.body())
        except (ValueError, RecursionError) as exc:
            raise HTTPException(status_code=400, detail="Invalid JSON format") from exc
        did = payload.get("did") if isinstance(payload, dict) else None
        use_case = payload.get("useCase") if isinstance(payload, dict) else None
        if not isinstance(did, str) or not isinstance(use_case, str):
            raise HTTPException(
                status_code=400, detail="Missing required fields: did, useCase"
            )
        logger.info("Getting requirements for DID: %s, UseCase: %s", did, use_case)
        return RequirementsResponse(
            requirements=requirements_for(use_case),
            did=did,
            useCase=use_case,
            timestamp=unix_now(),
        )

    @app.get("/api/getVc")
    async def get_vc(
        did: Optional[str] = None,
        templateId: Optional[str] = None,
        state: LedgerState = Depends(get_state),
    ):
        if not did or not templateId:
            raise HTTPException(
                status_code=400,
                detail="Missing required query parameters: did, templateId",
            )
        logger.info("Getting VC for DID: %s, TemplateID: %s", did, templateId)
        try:
            credential = find_template_credential(state, did, templateId)
        except TemplateLookupError as exc:
            return JSONResponse(status_code=404, content=exc.to_dict())
        return build_presentation(credential, did, templateId)

    @app.get("/health")
    async def health(state: LedgerState = Depends(get_state)):
        return {
            "status": "healthy",
            "chain_id": state.chain_id,
            "height": state.current_height(),
            "timestamp": unix_now(),
        }

    @app.get("/status")
    async def status(state: LedgerState = Depends(get_state)):
        # Each status poll mints a simulated block.
        height, latest = state.advance()
        return {
            "jsonrpc": "2.0",
            "id": 1,
            "result": {
                "node_info": state.node_info.model_dump(),
                "sync_info": {
                    "latest_block_hash": f"0x{height:064d}",
                    "latest_block_height": str(height),
                    "latest_block_time": block_time(latest),
                    "catching_up": False,
                },
            },
        }

    @app.get("/node_info", response_model=NodeInfo)
    async def node_info(state: LedgerState = Depends(get_state)) -> NodeInfo:
        return state.node_info

    return app


app = create_app()


def run() -> None:
    logging.basicConfig(
        level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logger.info(
        "Mock ledger %s starting on %s:%s",
        default_settings.chain_id,
        default_settings.host,
        default_settings.port,
    )
    uvicorn.run(
        app,
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
