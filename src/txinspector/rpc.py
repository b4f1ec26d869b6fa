"""RPC server exposing the decoder over HTTP, using FastAPI."""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from txinspector import __version__
from txinspector.errors import ParseError
from txinspector.parser import decode_hex

logger = logging.getLogger(__name__)


class RPCRequest(BaseModel):
    """RPC request model."""
    method: str
    params: Optional[Dict[str, Any]] = None
    id: Optional[int] = None


class RPCResponse(BaseModel):
    """RPC response model."""
    result: Optional[Any] = None
    error: Optional[Dict[str, Any]] = None
    id: Optional[int] = None


class TransactionSummary(BaseModel):
    """Condensed view of a decoded transaction."""
    txid: str
    version: int
    is_segwit: bool
    input_count: int
    output_count: int
    total_output_btc: float
    size_bytes: int
    vsize_bytes: int
    weight: int


class RPCServer:
    """RPC server for the transaction decoder."""

    def __init__(self, strict: bool = False) -> None:
        """Initialize the RPC server.

        Args:
            strict: Decode transactions in strict mode
        """
        self.app = FastAPI(title="Bitcoin Transaction Inspector RPC", version=__version__)
        self.strict = strict
        self.methods = {
            "parse_transaction": self.rpc_parse_transaction,
            "parse_transaction_json": self.rpc_parse_transaction_json,
            "get_transaction_summary": self.rpc_get_transaction_summary,
            "validate_transaction": self.rpc_validate_transaction,
            "get_txid": self.rpc_get_txid,
        }
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Set up RPC routes."""

        @self.app.get("/")
        async def root() -> Dict[str, str]:
            """Root endpoint."""
            return {"message": "Bitcoin Transaction Inspector RPC"}

        @self.app.post("/rpc")
        async def rpc_endpoint(request: RPCRequest) -> RPCResponse:
            """Handle RPC requests."""
            try:
                result = await self._handle_rpc_method(request.method, request.params or {})
                return RPCResponse(result=result, id=request.id)
            except HTTPException:
                raise
            except Exception as e:
                logger.info(f"RPC {request.method} failed: {e}")
                return RPCResponse(
                    error={"code": -1, "message": str(e)},
                    id=request.id
                )

        @self.app.get("/health")
        async def health() -> Dict[str, str]:
            """Health check endpoint."""
            return {"status": "healthy"}

    async def _handle_rpc_method(self, method: str, params: Dict[str, Any]) -> Any:
        """Handle RPC method calls.

        Args:
            method: RPC method name
            params: Method parameters

        Returns:
            Method result

        Raises:
            HTTPException: If method is not found or "hex" is missing
        """
        handler = self.methods.get(method)
        if handler is None:
            raise HTTPException(status_code=400, detail=f"Unknown method: {method}")
        hex_str = params.get("hex")
        if not isinstance(hex_str, str):
            raise HTTPException(status_code=400, detail="Missing string parameter: hex")
        return await handler(hex_str)

    async def rpc_parse_transaction(self, hex_str: str) -> Dict[str, Any]:
        """Decoded transaction as a JSON-compatible dict."""
        return decode_hex(hex_str, strict=self.strict).to_dict()

    async def rpc_parse_transaction_json(self, hex_str: str) -> str:
        """Decoded transaction as pretty-printed JSON."""
        return decode_hex(hex_str, strict=self.strict).to_json()

    async def rpc_get_transaction_summary(self, hex_str: str) -> Dict[str, Any]:
        tx = decode_hex(hex_str, strict=self.strict)
        summary = TransactionSummary(
            txid=tx.txid,
            version=tx.version,
            is_segwit=tx.is_segwit,
            input_count=len(tx.inputs),
            output_count=len(tx.outputs),
            total_output_btc=tx.total_output_btc,
            size_bytes=tx.raw_size,
            vsize_bytes=tx.get_vsize(),
            weight=tx.weight,
        )
        return summary.model_dump()

    async def rpc_validate_transaction(self, hex_str: str) -> bool:
        try:
            decode_hex(hex_str, strict=self.strict)
        except ParseError:
            return False
        return True

    async def rpc_get_txid(self, hex_str: str) -> str:
        return decode_hex(hex_str, strict=self.strict).txid

    def get_app(self) -> FastAPI:
        """Get the FastAPI application."""
        return self.app
