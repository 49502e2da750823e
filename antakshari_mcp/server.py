"""Shloka Antakshari MCP Server — tools for playing verse antakshari."""

import logging

from mcp.server.fastmcp import FastMCP

from antakshari_mcp.config import RULES, points_per_turn
from antakshari_mcp.corpus import Verse, default_corpus
from antakshari_mcp.engine import (
    Accepted,
    Pending,
    Rejected,
    Session,
    SessionBusyError,
    SessionTerminatedError,
    TurnEngine,
)
from antakshari_mcp.oracle import oracle_from_env
from antakshari_mcp.transliterate import preview

logger = logging.getLogger(__name__)

mcp = FastMCP("antakshari")

# One game per server process
_engine: TurnEngine | None = None
_session: Session | None = None

_NO_GAME = "Error: No game in progress. Run `start_game` first."


def _get_engine() -> TurnEngine:
    global _engine
    if _engine is None:
        _engine = TurnEngine(
            default_corpus(),
            oracle=oracle_from_env(),
            points_per_turn=points_per_turn(),
        )
    return _engine


def _format_verse(v: Verse, heading: str) -> str:
    """Format a verse as markdown."""
    parts = [f"## {heading}\n", f"{v.text}\n"]

    if v.translation:
        parts.append(f"**Translation:**\n{v.translation}\n")

    audio = v.audio_url or _get_engine().corpus.audio_url_for(v.text)
    if audio:
        parts.append(f"[Listen to recitation]({audio})\n")

    parts.append(f"_Next letter: **{v.next_char}**_")
    return "\n".join(parts)


def _format_status(session: Session) -> str:
    lines = [
        f"**Required letter:** {session.current_required_char}",
        f"**Score:** {session.score}",
        f"**Verses played:** {len(session.used_verses)}",
    ]
    if session.terminated:
        lines.append(f"**Game over:** {session.termination_reason}")
    return "\n".join(lines)


def _format_outcome(outcome, session: Session) -> str:
    if isinstance(outcome, Rejected):
        return f"**Not accepted** ({outcome.reason.value}): {outcome.message}\n\n" + _format_status(session)

    if isinstance(outcome, Pending):
        return (
            "**Not found** in the local verse collection, and no remote oracle is "
            "configured (set ANTAKSHARI_ORACLE_URL).\n\n" + _format_status(session)
        )

    parts = [_format_verse(outcome.user_verse, "Your shloka ✓")]
    if outcome.ai_verse is not None:
        parts.append(_format_verse(outcome.ai_verse, "Reply"))
    if outcome.warning:
        parts.append(f"_Warning: {outcome.warning}_")
    parts.append(_format_status(session))
    return "\n\n".join(parts)


@mcp.tool()
async def start_game(opening: int | None = None) -> str:
    """Start a new shloka antakshari game.

    opening: index of the opening verse (0 = Bhagavad Gita 1.1), or omit for a random one.
    The reply tells you the letter your first shloka must start with.
    """
    global _session
    engine = _get_engine()
    try:
        _session = engine.start_session(opening)
    except ValueError as e:
        return f"Error: {e}"
    return _format_verse(_session.opening, "Opening shloka") + "\n\n" + _format_status(_session)


@mcp.tool()
async def submit_verse(text: str) -> str:
    """Recite a shloka for the current turn.

    Accepts Devanagari or phonetic Roman input ("yada yada hi dharmasya ...").
    The shloka must start with the required letter and must not repeat an earlier one.
    """
    session = _session
    if session is None:
        return _NO_GAME
    try:
        outcome = await _get_engine().submit_turn(text, session)
    except (SessionBusyError, SessionTerminatedError) as e:
        return f"Error: {e}"

    if isinstance(outcome, Accepted):
        logger.info("Accepted turn, score %d", session.score)
    return _format_outcome(outcome, session)


@mcp.tool()
async def restart_game() -> str:
    """Abandon the current game and start again with a random opening shloka."""
    global _session
    try:
        _session = _get_engine().restart_session(_session)
    except SessionBusyError as e:
        return f"Error: {e}"
    return _format_verse(_session.opening, "Opening shloka") + "\n\n" + _format_status(_session)


@mcp.tool()
async def end_game(reason: str = "Ended by player") -> str:
    """End the current game. No further shlokas are accepted afterwards."""
    session = _session
    if session is None:
        return _NO_GAME
    _get_engine().terminate_session(session, reason)
    return f"Game over: {reason}\n\n" + _format_status(session)


@mcp.tool()
async def game_status() -> str:
    """Show the required letter, score, and the transcript of the current game."""
    session = _session
    if session is None:
        return _NO_GAME

    parts = [_format_status(session), "\n**Transcript:**"]
    for i, turn in enumerate(session.turn_log):
        mark = {True: " ✓", False: " ✗"}.get(turn.valid, "")
        content = turn.content.replace("\n", " ")
        parts.append(f"{i + 1}. _{turn.speaker}_{mark}: {content}")
    return "\n".join(parts)


@mcp.tool()
async def corpus_stats() -> str:
    """Count the known shlokas for each starting letter."""
    stats = _get_engine().corpus.stats()
    if not stats:
        return "The verse collection is empty."

    parts = [f"**{len(_get_engine().corpus)} shlokas** across {len(stats)} starting letters:\n"]
    for char, count in sorted(stats.items(), key=lambda kv: (-kv[1], kv[0])):
        parts.append(f"- {char}: {count}")
    return "\n".join(parts)


@mcp.tool()
async def transliteration_preview(text: str) -> str:
    """Show how phonetic Roman input will be read in Devanagari."""
    result = preview(text)
    if not result["is_transliterated"]:
        return result["devanagari"] or "(empty input)"
    return f"{result['original']} → {result['devanagari']}"


@mcp.tool()
async def game_rules() -> str:
    """List the rules of shloka antakshari and the available opening shlokas."""
    parts = ["**Rules:**"]
    parts.extend(f"{i + 1}. {rule}" for i, rule in enumerate(RULES))
    parts.append("\n**Openings:**")
    for i, verse in enumerate(_get_engine().openings):
        first_line = verse.text.split("\n")[0]
        parts.append(f"{i}. {first_line}")
    return "\n".join(parts)
