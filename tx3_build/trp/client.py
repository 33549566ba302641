from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, Optional, Union
import httpx
from pydantic import ValidationError
from tx3_build.core.errors import TrpProtocolError, TrpTransportError
from tx3_build.core.logging import log_context
from tx3_build.core.workflow import BuildPhase
from tx3_build.trp.types import (
    ClientOptions,
    JsonRpcRequest,
    ProtoTx,
    RpcFailure,
    RpcResponse,
    RpcSuccess,
    TxEnvelope,
    encode_args,
)

log = logging.getLogger(__name__)

_EXTRA = log_context(BuildPhase.RESOLVE)


def parse_response(body: Any) -> RpcResponse:
    """Classify a decoded JSON-RPC body as success or failure."""
    if not isinstance(body, dict):
        raise TrpProtocolError("Malformed JSON-RPC response: expected an object", data=body)
    try:
        if body.get("error") is not None:
            return RpcFailure.model_validate(body)
        if "result" in body:
            return RpcSuccess.model_validate(body)
    except ValidationError as e:
        raise TrpProtocolError("Malformed JSON-RPC response", data=e.errors(include_url=False)) from e
    raise TrpProtocolError("Malformed JSON-RPC response: neither result nor error present", data=body)


class TRPClient:
    """
    Client for a TRP resolver endpoint.

    Each resolve() is a single independent POST: no pooling, retries or
    caching. Only the static options are held between calls.
    """

    def __init__(
        self,
        options: Union[ClientOptions, Dict[str, Any]],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not isinstance(options, ClientOptions):
            options = ClientOptions.model_validate(options)
        self.options = options
        self.transport = transport

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            **self.options.headers,
        }

    def build_request(self, proto_tx: ProtoTx) -> JsonRpcRequest:
        return JsonRpcRequest(
            params={
                "tir": proto_tx.tir.model_dump(),
                "args": encode_args(proto_tx.args),
                "env": encode_args(self.options.env_args),
            }
        )

    async def resolve(self, proto_tx: Union[ProtoTx, Dict[str, Any]]) -> TxEnvelope:
        if not isinstance(proto_tx, ProtoTx):
            proto_tx = ProtoTx.model_validate(proto_tx)
        request = self.build_request(proto_tx)

        async with httpx.AsyncClient(timeout=self.options.timeout, transport=self.transport) as client:
            r = await client.post(
                self.options.endpoint,
                headers=self._headers(),
                json=request.model_dump(),
            )

        if not r.is_success:
            log.warning("Resolver returned HTTP %d for request %s", r.status_code, request.id, extra=_EXTRA)
            raise TrpTransportError(r.status_code, r.reason_phrase)

        try:
            body = r.json()
        except ValueError as e:
            raise TrpProtocolError("Malformed JSON-RPC response: body is not valid JSON", data=r.text) from e

        response = parse_response(body)
        if isinstance(response, RpcFailure):
            log.warning("Resolver returned JSON-RPC error: %s", response.error.message, extra=_EXTRA)
            raise TrpProtocolError(
                response.error.message,
                data=response.error.data,
                code=response.error.code,
            )
        # Result is handed back as the resolver sent it, without schema checks
        return TxEnvelope.model_construct(**response.result)

    def resolve_sync(self, proto_tx: Union[ProtoTx, Dict[str, Any]]) -> TxEnvelope:
        return asyncio.run(self.resolve(proto_tx))
