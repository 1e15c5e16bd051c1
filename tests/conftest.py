import pytest

from screener.engines import ScriptedEngine
from screener.flow import QualificationFlow
from screener.session import ChatSession, TypingDelay


@pytest.fixture
def flow():
    return QualificationFlow()


@pytest.fixture
def no_delay():
    return TypingDelay(base_s=0.0)


@pytest.fixture
def scripted_session(no_delay):
    """A scripted conversation that replies without the typing pause."""
    return ChatSession(ScriptedEngine(), typing=no_delay)
