"""Payload models for the Transaction Resolve Protocol (TRP)."""
import uuid
from typing import Any, Dict, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

ArgValue = Union[str, int, float, bool, None, bytes]


class TirEnvelope(BaseModel):
    """Compiled transaction IR. bytecode is passed through as-is."""
    model_config = ConfigDict(frozen=True)

    version: str
    bytecode: str
    encoding: str = Field(..., examples=["hex", "base64"])


class ProtoTx(BaseModel):
    tir: TirEnvelope
    args: Dict[str, ArgValue] = Field(default_factory=dict)


class TxEnvelope(BaseModel):
    """
    Resolved transaction as returned by the resolver.

    Built from the response without validation, so fields and extra keys
    are exactly what the resolver sent.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    tx: str
    bytes: str
    encoding: str


class ClientOptions(BaseModel):
    endpoint: str
    headers: Dict[str, str] = Field(default_factory=dict)
    env_args: Dict[str, ArgValue] = Field(default_factory=dict)
    timeout: Optional[float] = None  # None waits forever


class JsonRpcRequest(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    method: str = "trp.resolve"
    params: Dict[str, Any]
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))


class RpcErrorObject(BaseModel):
    code: Optional[int] = None
    message: str = "JSON-RPC error"
    data: Any = None


class RpcSuccess(BaseModel):
    result: Dict[str, Any]
    id: Union[str, int, None] = None


class RpcFailure(BaseModel):
    error: RpcErrorObject
    id: Union[str, int, None] = None


RpcResponse = Union[RpcSuccess, RpcFailure]


def encode_arg(value: ArgValue) -> Any:
    """JSON form of an argument value. Raw bytes are sent as lowercase hex."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return value


def encode_args(args: Dict[str, ArgValue]) -> Dict[str, Any]:
    return {key: encode_arg(value) for key, value in args.items()}
