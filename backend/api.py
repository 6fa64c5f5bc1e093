"""
FastAPI web backend for the wager settlement engine.
"""
import logging
from typing import List, Optional, Tuple

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

import config
from database import (
    Database,
    GameKind,
    Coin,
    Response,
    HistoryRecord,
    PlaceBet,
    Withdraw,
    UpdateOwner,
    UpdateEnabled,
)
from errors import ContractError
from host import SettlementHost

# Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ===== MODELS =====

class InstantiateRequest(BaseModel):
    sender: str
    denom: str
    amount: int = Field(0, ge=0)


class BetRequest(BaseModel):
    sender: str
    selection: int
    denom: str
    amount: int = Field(..., ge=0)
    block_time: Optional[int] = Field(None, ge=0)


class WithdrawRequest(BaseModel):
    sender: str
    amount: int = Field(..., ge=0)


class UpdateOwnerRequest(BaseModel):
    sender: str
    owner: str


class UpdateEnabledRequest(BaseModel):
    sender: str
    enabled: bool


class FundRequest(BaseModel):
    sender: str
    address: str
    denom: str
    amount: int = Field(..., ge=0)


class TransferResponse(BaseModel):
    recipient: str
    denom: str
    amount: int


class HistoryResponse(BaseModel):
    id: int
    address: str
    level: int
    win: Optional[int] = None
    bet_amount: int
    timestamp: int


class ExecuteResponse(BaseModel):
    transfers: List[TransferResponse]
    attributes: List[Tuple[str, str]]
    record: Optional[HistoryResponse] = None


class ConfigResponse(BaseModel):
    owner: str
    enabled: bool
    denom: str
    treasury_amount: int
    flip_count: int
    rps_count: int
    dice_count: int
    roulette_count: int


def _record_to_response(record: HistoryRecord) -> HistoryResponse:
    return HistoryResponse(
        id=record.id,
        address=record.address,
        level=record.level,
        win=int(record.win) if record.win is not None else None,
        bet_amount=record.bet_amount,
        timestamp=record.timestamp,
    )


def _to_response(response: Response) -> ExecuteResponse:
    return ExecuteResponse(
        transfers=[
            TransferResponse(recipient=t.recipient, denom=t.denom, amount=t.amount)
            for t in response.transfers
        ],
        attributes=list(response.attributes),
        record=_record_to_response(response.record) if response.record else None,
    )


def _http_error(error: ContractError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=f"{error.code}: {error}")


def _parse_game(game: str) -> GameKind:
    try:
        return GameKind(game)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown game: {game}")


def create_app(host: Optional[SettlementHost] = None) -> FastAPI:
    """Build the API around a host. A host over DATABASE_PATH is created on first use if none is given."""
    app = FastAPI(title="Wager Settlement API", version=config.CONTRACT_VERSION)
    app.state.host = host

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    def get_host() -> SettlementHost:
        if app.state.host is None:
            app.state.host = SettlementHost(Database(config.DATABASE_PATH))
        return app.state.host

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": config.CONTRACT_VERSION}

    @app.post("/api/instantiate")
    async def instantiate(request: InstantiateRequest) -> ExecuteResponse:
        try:
            response = get_host().instantiate(request.sender, [Coin(request.denom, request.amount)])
        except ContractError as e:
            raise _http_error(e)
        return _to_response(response)

    def add_bet_route(game: GameKind):
        async def place_bet(request: BetRequest) -> ExecuteResponse:
            try:
                response = get_host().execute(
                    request.sender,
                    PlaceBet(game=game, selection=request.selection),
                    funds=[Coin(request.denom, request.amount)],
                    block_time=request.block_time,
                )
            except ContractError as e:
                raise _http_error(e)
            return _to_response(response)

        app.add_api_route(f"/api/{game.value}", place_bet, methods=["POST"], name=f"bet_{game.value}")

    for game in GameKind:
        add_bet_route(game)

    @app.post("/api/withdraw")
    async def withdraw(request: WithdrawRequest) -> ExecuteResponse:
        try:
            response = get_host().execute(request.sender, Withdraw(amount=request.amount))
        except ContractError as e:
            raise _http_error(e)
        return _to_response(response)

    @app.post("/api/admin/owner")
    async def update_owner(request: UpdateOwnerRequest) -> ExecuteResponse:
        try:
            response = get_host().execute(request.sender, UpdateOwner(owner=request.owner))
        except ContractError as e:
            raise _http_error(e)
        return _to_response(response)

    @app.post("/api/admin/enabled")
    async def update_enabled(request: UpdateEnabledRequest) -> ExecuteResponse:
        try:
            response = get_host().execute(request.sender, UpdateEnabled(enabled=request.enabled))
        except ContractError as e:
            raise _http_error(e)
        return _to_response(response)

    @app.post("/api/pool/fund")
    async def fund(request: FundRequest):
        try:
            balance = get_host().fund(request.address, request.denom, request.amount, sender=request.sender)
        except ContractError as e:
            raise _http_error(e)
        return {"address": request.address, "denom": request.denom, "balance": balance}

    @app.get("/api/config")
    async def get_config() -> ConfigResponse:
        try:
            view = get_host().query_config()
        except ContractError as e:
            raise _http_error(e)
        return ConfigResponse(
            owner=view.owner,
            enabled=view.enabled,
            denom=view.denom,
            treasury_amount=view.treasury_amount,
            flip_count=view.flip_count,
            rps_count=view.rps_count,
            dice_count=view.dice_count,
            roulette_count=view.roulette_count,
        )

    @app.get("/api/history/{game}")
    async def get_history(game: str, count: int = Query(10, ge=0)) -> List[HistoryResponse]:
        kind = _parse_game(game)
        try:
            records = get_host().query_history(kind, count)
        except ContractError as e:
            raise _http_error(e)
        return [_record_to_response(r) for r in records]

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    import os

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
