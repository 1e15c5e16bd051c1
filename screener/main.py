import argparse
import asyncio
import logging
import signal
import sys
from typing import Callable, Optional

from tenacity import RetryError

from screener.config import ConfigurationError, ScreenerConfig
from screener.console import run_console
from screener.contact import contact_link
from screener.engines import DelegatedEngine, ScriptedEngine, TurnEngine
from screener.livekit_host import LiveKitChatHost, build_token
from screener.llm import OpenAIConfig, StructuredOpenAI
from screener.session import ChatSession, TypingDelay

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_engine_factory(config: ScreenerConfig) -> Callable[[], TurnEngine]:
    """Return a factory for fresh engines; LLM credentials are checked up front."""
    if config.engine == "llm":
        llm = StructuredOpenAI(OpenAIConfig(api_key=config.openai_api_key, model=config.openai_model))
        logger.info("OpenAI LLM engine enabled with model %s.", config.openai_model)
        return lambda: DelegatedEngine(llm)
    logger.info("Scripted engine enabled.")
    return ScriptedEngine


def build_session_factory(config: ScreenerConfig) -> Callable[[], ChatSession]:
    engine_factory = build_engine_factory(config)
    typing = TypingDelay(
        base_s=config.typing_delay_s,
        chars_per_s=config.typing_chars_per_s,
        max_s=config.max_typing_delay_s,
    )
    return lambda: ChatSession(engine_factory(), typing=typing)


async def run_livekit(config: ScreenerConfig) -> None:
    config.require_livekit()
    host = LiveKitChatHost(
        session_factory=build_session_factory(config),
        contact_url=contact_link(config.contact_phone, config.contact_text),
    )
    token = build_token(config.livekit_api_key, config.livekit_api_secret, config.room_name, config.identity)

    print(f"Connecting to room '{config.room_name}' as '{config.identity}'...")
    await host.connect(config.livekit_url, token)
    print("Connected. Press Ctrl+C to disconnect.")

    stop_event = asyncio.Event()

    def request_shutdown() -> None:
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, request_shutdown)
        except NotImplementedError:
            signal.signal(sig, lambda *_: request_shutdown())

    await stop_event.wait()

    print("Disconnecting...")
    await host.disconnect()
    print("Disconnected.")


async def run_terminal(config: ScreenerConfig) -> None:
    session = build_session_factory(config)()
    await run_console(session, contact_link(config.contact_phone, config.contact_text))


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    env = ScreenerConfig.from_env()
    parser = argparse.ArgumentParser(description="Lead screening chat")
    parser.add_argument(
        "mode",
        choices=("console", "livekit"),
        help="Chat in the terminal or serve participants of a LiveKit room",
    )
    parser.add_argument(
        "--engine",
        choices=("scripted", "llm"),
        default=env.engine,
        help="Turn engine (or SCREENER_ENGINE env var)",
    )
    parser.add_argument(
        "--typing-delay",
        type=float,
        default=env.typing_delay_s,
        help="Seconds to wait before each reply (or SCREENER_TYPING_DELAY_S env var)",
    )
    parser.add_argument(
        "--url",
        default=env.livekit_url,
        help="LiveKit server URL (or LIVEKIT_URL env var)",
    )
    parser.add_argument(
        "--room",
        default=env.room_name,
        help="Room name to join (or LIVEKIT_ROOM env var)",
    )
    parser.add_argument(
        "--identity",
        default=env.identity,
        help="Participant identity (or LIVEKIT_IDENTITY env var)",
    )
    args = parser.parse_args(argv)
    args.env = env
    return args


def load_config(args: argparse.Namespace) -> ScreenerConfig:
    env: ScreenerConfig = args.env
    return ScreenerConfig(
        engine=args.engine,
        typing_delay_s=args.typing_delay,
        typing_chars_per_s=env.typing_chars_per_s,
        max_typing_delay_s=env.max_typing_delay_s,
        contact_phone=env.contact_phone,
        contact_text=env.contact_text,
        openai_api_key=env.openai_api_key,
        openai_model=env.openai_model,
        livekit_url=args.url,
        livekit_api_key=env.livekit_api_key,
        livekit_api_secret=env.livekit_api_secret,
        room_name=args.room,
        identity=args.identity,
    )


def main(argv: Optional[list[str]] = None) -> int:
    try:
        args = parse_args(argv)
        config = load_config(args)
        runner = run_livekit if args.mode == "livekit" else run_terminal
        asyncio.run(runner(config))
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return 2
    except RetryError as e:
        logger.error("Could not connect to LiveKit: %s", e)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
