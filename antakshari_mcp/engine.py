"""Turn resolution: validates a recited verse and picks the reply verse.

One Session per game, owned by the caller and passed into every engine
call. A turn goes through:

    transliterate → normalize → start-letter gate → repeat check
        → local match → continuation pick → commit
                     ↘ remote oracle (when the corpus cannot resolve it)

Session state (used verses, required letter, score) changes only when a
turn is accepted, and all of it changes together.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum

from antakshari_mcp.config import DEFAULT_POINTS_PER_TURN, HISTORY_WINDOW, MatcherConfig
from antakshari_mcp.corpus import OPENING_VERSES, CorpusIndex, Verse
from antakshari_mcp.fuzzy import normalize_verse
from antakshari_mcp.matcher import match_verse
from antakshari_mcp.oracle import Oracle, OracleError, OracleRequest, OracleResult
from antakshari_mcp.transliterate import process_input

logger = logging.getLogger(__name__)


class SessionBusyError(RuntimeError):
    """A turn is already being resolved for this session."""


class SessionTerminatedError(RuntimeError):
    """The session has ended and accepts no more turns."""


class RejectionReason(str, Enum):
    EMPTY_INPUT = "empty-input"
    WRONG_START_CHAR = "wrong-start-char"
    ALREADY_USED = "already-used"
    NOT_FOUND = "not-found"
    ADAPTER_ERROR = "adapter-error"
    SESSION_OVER = "session-over"
    STALE_TURN = "stale-turn"


@dataclass
class Turn:
    """One transcript entry. speaker is "user", "ai" or "system"."""

    speaker: str
    content: str
    verse: Verse | None = None
    valid: bool | None = None


@dataclass(frozen=True)
class Accepted:
    user_verse: Verse
    ai_verse: Verse | None
    # Non-empty when no continuation verse could be found (dead end)
    warning: str = ""


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason
    message: str
    detected: str = ""
    expected: str = ""


@dataclass(frozen=True)
class Pending:
    """The turn needs the remote oracle before it can be committed.

    matched is set when the user verse was found locally but the corpus
    has no continuation for it. at_turn is the transcript length when the
    turn was submitted; the turn can only be committed while it is unchanged.
    """

    request: OracleRequest
    at_turn: int
    matched: Verse | None = None


TurnOutcome = Accepted | Rejected | Pending


@dataclass
class Session:
    opening: Verse
    current_required_char: str
    used_verses: set[str] = field(default_factory=set)
    score: int = 0
    turn_log: list[Turn] = field(default_factory=list)
    terminated: bool = False
    termination_reason: str = ""
    in_flight: bool = False

    def recent_history(self, limit: int = HISTORY_WINDOW) -> list[dict]:
        """Last transcript entries as {"speaker", "content"} dicts."""
        return [
            {"speaker": t.speaker, "content": t.verse.text if t.verse else t.content}
            for t in self.turn_log[-limit:]
        ]


class TurnEngine:
    """Plays the game against a corpus, with an optional remote oracle.

    Args:
        corpus:          Verses available for matching and replies.
        oracle:          Remote fallback; None disables it.
        config:          Matcher thresholds.
        points_per_turn: Score added per accepted turn.
        openings:        Verses a game may open with.
        rng:             Random source for opening and reply choice.
    """

    def __init__(
        self,
        corpus: CorpusIndex,
        oracle: Oracle | None = None,
        config: MatcherConfig = MatcherConfig(),
        points_per_turn: int = DEFAULT_POINTS_PER_TURN,
        openings: list[Verse] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.corpus = corpus
        self.oracle = oracle
        self.config = config
        self.points_per_turn = points_per_turn
        self.openings = list(openings or OPENING_VERSES)
        self.rng = rng or random.Random()

    # -- session lifecycle ---------------------------------------------------

    def start_session(self, opening: int | None = None) -> Session:
        """Start a game with openings[opening], or a random opening when None."""
        if opening is None:
            verse = self.rng.choice(self.openings)
        elif 0 <= opening < len(self.openings):
            verse = self.openings[opening]
        else:
            raise ValueError(f"Opening must be 0-{len(self.openings) - 1}, got {opening}")

        session = Session(
            opening=verse,
            current_required_char=verse.next_char,
            used_verses={verse.key},
            turn_log=[Turn("ai", verse.text, verse=verse)],
        )
        logger.info("Started game, required letter %s", session.current_required_char)
        return session

    def restart_session(self, session: Session | None = None) -> Session:
        """Discard the given session and start a fresh one with a random opening."""
        if session is not None and session.in_flight:
            raise SessionBusyError("Cannot restart while a turn is being resolved")
        return self.start_session()

    def terminate_session(self, session: Session, reason: str) -> None:
        session.terminated = True
        session.termination_reason = reason
        logger.info("Game terminated: %s", reason)

    # -- turns ---------------------------------------------------------------

    async def submit_turn(self, raw_input: str, session: Session) -> TurnOutcome:
        """Resolve one user submission.

        Raises SessionTerminatedError after termination and SessionBusyError
        while another turn is in flight. Returns Pending only when the turn
        needs the oracle and none is configured.
        """
        if session.terminated:
            raise SessionTerminatedError(session.termination_reason or "Game is over")
        if session.in_flight:
            raise SessionBusyError("A turn is already being resolved")

        session.in_flight = True
        try:
            outcome = self._resolve_locally(raw_input, session)
            if isinstance(outcome, Pending):
                if self.oracle is not None:
                    outcome = await self._resolve_remote(session, outcome)
                elif outcome.matched is not None:
                    no_oracle = OracleResult(valid=False, reason="Remote fallback is not configured.")
                    outcome = self.apply_oracle_result(session, outcome, no_oracle)
            return outcome
        finally:
            session.in_flight = False

    def _resolve_locally(self, raw_input: str, session: Session) -> TurnOutcome:
        required = session.current_required_char
        text = normalize_verse(process_input(raw_input))

        if not text:
            return self._reject(session, raw_input, Rejected(
                RejectionReason.EMPTY_INPUT,
                f"Please enter a shloka starting with '{required}'.",
                expected=required,
            ))

        detected = text[0]
        if detected != required:
            return self._reject(session, raw_input, Rejected(
                RejectionReason.WRONG_START_CHAR,
                f"Your shloka starts with '{detected}' but should start with '{required}'.",
                detected=detected,
                expected=required,
            ))

        if text in session.used_verses:
            return self._reject(session, raw_input, _already_used())

        matched = match_verse(text, required, self.corpus, self.config)
        if matched is None:
            logger.info("No local match, deferring to remote oracle")
            return Pending(
                OracleRequest(raw_input.strip(), required, session.recent_history()),
                at_turn=len(session.turn_log),
            )

        if matched.key in session.used_verses:
            return self._reject(session, raw_input, _already_used())

        continuation = self.corpus.random_starting_with(
            matched.next_char, session.used_verses | {matched.key}, self.rng
        )
        if continuation is not None:
            return self._commit(session, matched, continuation)

        logger.info("No local continuation for '%s'", matched.next_char)
        return Pending(
            OracleRequest(matched.text, required, session.recent_history()),
            at_turn=len(session.turn_log),
            matched=matched,
        )

    async def _resolve_remote(self, session: Session, pending: Pending) -> Accepted | Rejected:
        try:
            result = await self.oracle(pending.request)
        except OracleError as e:
            logger.warning("Remote oracle failed: %s", e)
            if pending.matched is not None:
                return self.apply_oracle_result(session, pending, OracleResult(valid=False, reason=str(e)))
            return self._reject(session, pending.request.text, Rejected(
                RejectionReason.ADAPTER_ERROR,
                "Acharya is currently meditating. Please try again in a moment.",
            ))
        return self.apply_oracle_result(session, pending, result)

    def apply_oracle_result(
        self, session: Session, pending: Pending, result: OracleResult
    ) -> Accepted | Rejected:
        """Commit a Pending turn using an oracle result.

        The oracle's verses are held to the same rules as local ones: a verse
        with the wrong start letter or one already used is rejected, and a
        continuation that is used or starts with the wrong letter is replaced
        from the corpus when possible. A Pending issued before the session
        moved on is rejected as stale.
        """
        if session.terminated:
            return Rejected(RejectionReason.SESSION_OVER, session.termination_reason or "Game is over")

        required = pending.request.required_start_char
        if pending.at_turn != len(session.turn_log) or required != session.current_required_char:
            logger.info("Discarding stale turn for '%s'", required)
            return Rejected(
                RejectionReason.STALE_TURN,
                "The game has moved on since this shloka was submitted. Please recite it again.",
                detected=required,
                expected=session.current_required_char,
            )

        if pending.matched is not None:
            user_verse = pending.matched
            continuation = result.continuation_verse if result.valid else None
        else:
            if not result.valid:
                return self._reject(session, pending.request.text, Rejected(
                    RejectionReason.NOT_FOUND, result.reason,
                ))
            user_verse = result.resolved_verse
            if user_verse.start_char != required:
                return self._reject(session, pending.request.text, Rejected(
                    RejectionReason.WRONG_START_CHAR,
                    f"Your shloka starts with '{user_verse.start_char}' but should start with '{required}'.",
                    detected=user_verse.start_char,
                    expected=required,
                ))
            if user_verse.key in session.used_verses:
                return self._reject(session, pending.request.text, _already_used())
            continuation = result.continuation_verse

        exclude = session.used_verses | {user_verse.key}
        if continuation is not None and (
            continuation.key in exclude or continuation.start_char != user_verse.next_char
        ):
            logger.debug("Discarding oracle continuation %r", continuation.text[:30])
            continuation = None
        if continuation is None:
            continuation = self.corpus.random_starting_with(user_verse.next_char, exclude, self.rng)

        if continuation is None:
            logger.warning("Dead end: no verse starts with '%s'", user_verse.next_char)
            warning = (
                f"No continuation verse starts with '{user_verse.next_char}'; "
                f"continue from your own verse."
            )
            return self._commit(session, user_verse, None, warning)
        return self._commit(session, user_verse, continuation)

    # -- state updates -------------------------------------------------------

    def _commit(
        self, session: Session, user_verse: Verse, ai_verse: Verse | None, warning: str = ""
    ) -> Accepted:
        session.used_verses.add(user_verse.key)
        session.turn_log.append(Turn("user", user_verse.text, verse=user_verse, valid=True))
        if ai_verse is not None:
            session.used_verses.add(ai_verse.key)
            session.turn_log.append(Turn("ai", ai_verse.text, verse=ai_verse))
            session.current_required_char = ai_verse.next_char
        else:
            session.current_required_char = user_verse.next_char
        session.score += self.points_per_turn
        return Accepted(user_verse, ai_verse, warning)

    def _reject(self, session: Session, raw_input: str, rejected: Rejected) -> Rejected:
        logger.info("Rejected turn (%s): %s", rejected.reason.value, rejected.message)
        session.turn_log.append(Turn("user", raw_input.strip(), valid=False))
        session.turn_log.append(Turn("system", rejected.message))
        return rejected


def _already_used() -> Rejected:
    return Rejected(
        RejectionReason.ALREADY_USED,
        "This shloka has already been recited in this game. Try another one.",
    )
