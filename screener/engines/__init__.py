from screener.engines.delegated import APOLOGY_MESSAGE, DelegatedEngine
from screener.engines.interfaces import TurnEngine, TurnReply
from screener.engines.scripted import ScriptedEngine

__all__ = [
    "APOLOGY_MESSAGE",
    "DelegatedEngine",
    "ScriptedEngine",
    "TurnEngine",
    "TurnReply",
]
