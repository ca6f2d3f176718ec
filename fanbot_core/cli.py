"""Fanbot CLI - Main entry point."""

import asyncio
import sys
from typing import Optional

import click
import structlog
from rich.console import Console

from . import __version__
from .config import Settings, get_settings
from .conversation import ConversationOrchestrator, WatsonAssistantEngine, WatsonToneAnalyzer
from .logging import configure_logging
from .notifications import DiscoveryHeadlineSource, NotificationDispatcher, TwilioSMSGateway
from .session import SessionState
from .sports import (
    DataAggregator,
    FatalLoadError,
    FixtureSportsData,
    SportsDataClient,
    SportsDataProvider,
    current_standing,
    upcoming_schedule,
)
from .voice import CommandAudioPlayer, ConsoleTranscriber, MicrophoneGate, Speaker, UtteranceStream, WatsonTextToSpeech

console = Console()
logger = structlog.get_logger(__name__)


def build_provider(settings: Settings) -> SportsDataProvider:
    """Live provider, or the frozen fixture when running off season."""
    if settings.in_off_season:
        return FixtureSportsData(settings.fixture_dir)
    return SportsDataClient(
        subscription_key=settings.mlb_fantasy_sports_key,
        season=settings.season(),
        base_url=settings.mlb_api_base,
        timeout=settings.request_timeout_seconds,
    )


async def load_session(settings: Settings) -> SessionState:
    """Create a session and load every feed into it."""
    session = SessionState.create(
        settings.reference_date(),
        override_phone_number=settings.twilio_text_phone_number,
    )
    provider = build_provider(settings)
    try:
        await DataAggregator(provider, session).load_all()
    finally:
        await provider.close()
    return session


async def converse(settings: Settings) -> None:
    """Load data, then talk until standard input ends."""
    session = await load_session(settings)

    gate = MicrophoneGate()
    stream = UtteranceStream()
    dialog_engine = WatsonAssistantEngine(
        workspace_id=settings.conversation_workspace_id,
        api_key=settings.assistant_api_key,
        url=settings.assistant_url,
        version=settings.assistant_version,
    )
    synthesizer = WatsonTextToSpeech(
        api_key=settings.text_to_speech_api_key,
        voice=settings.tjbot_voice,
        url=settings.text_to_speech_url,
    )
    tone_analyzer = WatsonToneAnalyzer(
        api_key=settings.tone_analyzer_api_key,
        url=settings.tone_analyzer_url,
        version=settings.tone_analyzer_version,
    )
    headline_source = DiscoveryHeadlineSource(
        api_key=settings.discovery_api_key,
        environment_id=settings.discovery_environment_id,
        collection_id=settings.discovery_collection_id,
        url=settings.discovery_url,
        version=settings.discovery_version,
    )
    speaker = Speaker(
        synthesizer,
        CommandAudioPlayer(settings.audio_player_command),
        gate=gate,
        guard_seconds=settings.playback_guard_seconds,
    )
    dispatcher = NotificationDispatcher(
        session,
        TwilioSMSGateway(settings.twilio_sid, settings.twilio_auth_token, settings.twilio_phone_number),
        headline_source,
        headline_count=settings.headline_count,
        headline_query_count=settings.headline_query_count,
    )
    orchestrator = ConversationOrchestrator(
        session,
        dialog_engine,
        speaker,
        tone_analyzer,
        dispatcher,
        tone_threshold=settings.tone_threshold,
        debug=settings.debug,
    )

    try:
        await asyncio.gather(
            orchestrator.run(stream),
            ConsoleTranscriber(stream, gate).run(),
        )
        await speaker.drain()
    finally:
        for client in (dialog_engine, synthesizer, tone_analyzer, headline_source):
            await client.close()


def _settings(off_season: bool, debug: bool) -> Settings:
    settings = get_settings()
    update = {}
    if off_season:
        update["in_off_season"] = True
    if debug:
        update["debug"] = True
        update["log_level"] = "debug"
    if update:
        settings = settings.model_copy(update=update)
    configure_logging(settings.log_level, settings.log_format)
    return settings


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except FatalLoadError as e:
        logger.error("startup_aborted", **e.to_dict())
        console.print(f"[red]Unable to load MLB data:[/red] {e.message}")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="fanbot")
def cli():
    """Fanbot - talk baseball with a voice assistant.

    \b
    Examples:
      fanbot run --off-season
      fanbot standings "Red Sox"
      fanbot schedule "Boston Red Sox"
    """


@cli.command()
@click.option("--off-season", is_flag=True, help="Use the saved 2017 snapshot instead of live data")
@click.option("--debug", is_flag=True, help="Log dialog context around every round trip")
def run(off_season: bool, debug: bool):
    """Load data and start the conversation (one utterance per input line)."""
    settings = _settings(off_season, debug)
    console.print("[bold]Fanbot is loading MLB data...[/bold]")
    _run(converse(settings))


@cli.command()
@click.argument("team")
@click.option("--off-season", is_flag=True, help="Use the saved 2017 snapshot instead of live data")
def standings(team: str, off_season: bool):
    """Print the division place of TEAM."""
    settings = _settings(off_season, False)
    session: Optional[SessionState] = None

    async def _load() -> None:
        nonlocal session
        session = await load_session(settings)

    _run(_load())
    console.print(f"{team}: [bold]{current_standing(team, session.standings)}[/bold]")


@cli.command()
@click.argument("team")
@click.option("--off-season", is_flag=True, help="Use the saved 2017 snapshot instead of live data")
def schedule(team: str, off_season: bool):
    """Print the next games of TEAM."""
    settings = _settings(off_season, False)
    session: Optional[SessionState] = None

    async def _load() -> None:
        nonlocal session
        session = await load_session(settings)

    _run(_load())
    console.print(
        upcoming_schedule(team, session.teams, session.schedule, session.reference_date),
        end="",
    )


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
