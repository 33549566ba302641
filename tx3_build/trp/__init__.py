from tx3_build.trp.client import TRPClient
from tx3_build.trp.types import ClientOptions, ProtoTx, TirEnvelope, TxEnvelope

__all__ = ["TRPClient", "ClientOptions", "ProtoTx", "TirEnvelope", "TxEnvelope"]
