"""
Yahtzee - Dice Engine

Owns the 5 dice, the per-turn roll budget, and the tumble animation.

Tumble physics:
- Opposite faces of a standard die sum to 7: (1-6), (2-5), (3-4)
- A die can only tumble onto one of the 4 faces adjacent to the top face,
  never onto itself or its opposite
- A roll walks 22-28 random steps over that adjacency graph

Tumble timing:
- Frame durations grow with a quadratic easing weight ``1 + p^2 * 3``
  (fast tumbling that settles), normalized to a fixed total duration
- Frame k of a die is applied at ``start + sum(timings[:k])``

Sequence generation and scheduling are pure functions; the DiceEngine only
stores the merged schedule and applies due frames when ``tick(now)`` is called.
"""

import logging
import random
import time
from typing import Callable, Sequence

from src.engine.base import DIE_FACES, NUM_DICE, ROLLS_PER_TURN, Die, TumbleFrame
from src.engine.validators import is_valid_die_index, validate_dice_values, validate_frame_count

logger = logging.getLogger(__name__)

TUMBLE_DURATION = 2.5
MIN_TUMBLE_STEPS = 22
MAX_TUMBLE_STEPS = 28

_FACES = tuple(range(1, DIE_FACES + 1))


def opposite_face(value: int) -> int:
    """Face on the bottom when ``value`` is on top."""
    return DIE_FACES + 1 - value


def adjacent_faces(value: int) -> tuple[int, ...]:
    """
    The 4 faces a die can tumble onto from ``value``.

    Example: with 1 on top (6 on the bottom) the adjacent faces are 2, 3, 4, 5.
    """
    opposite = opposite_face(value)
    return tuple(f for f in _FACES if f != value and f != opposite)


def tumble_sequence(
    start: int,
    rng: random.Random | None = None,
    min_steps: int = MIN_TUMBLE_STEPS,
    max_steps: int = MAX_TUMBLE_STEPS,
) -> tuple[int, ...]:
    """
    Generate the faces a die shows while tumbling.

    Args:
        start: Face showing before the roll
        rng: Random source (defaults to the ``random`` module)
        min_steps: Fewest tumbles per roll
        max_steps: Most tumbles per roll

    Returns:
        Sequence of faces; the last one is the rolled value. The start face
        itself is not included.
    """
    source = rng if rng is not None else random
    steps = source.randint(min_steps, max_steps)

    sequence = []
    current = start
    for _ in range(steps):
        current = source.choice(adjacent_faces(current))
        sequence.append(current)
    return tuple(sequence)


def tumble_timings(frame_count: int, total_duration: float = TUMBLE_DURATION) -> tuple[float, ...]:
    """
    Duration of each animation frame.

    Early frames are short and later ones longer, like a die coming to rest.
    The durations always add up to ``total_duration``.

    Raises:
        ValueError: If frame_count is not positive
    """
    validate_frame_count(frame_count)
    span = max(frame_count - 1, 1)
    weights = [1.0 + (i / span) ** 2 * 3.0 for i in range(frame_count)]
    total_weight = sum(weights)
    return tuple(w / total_weight * total_duration for w in weights)


def build_tumble_schedule(
    die_index: int,
    sequence: Sequence[int],
    timings: Sequence[float],
    start: float = 0.0,
) -> tuple[TumbleFrame, ...]:
    """
    Pair each face of a tumble sequence with the time it is shown.

    Args:
        die_index: Die the frames belong to
        sequence: Faces from :func:`tumble_sequence`
        timings: Frame durations from :func:`tumble_timings`
        start: Time the roll began

    Returns:
        Frames with strictly increasing offsets, first frame at ``start``
    """
    if len(sequence) != len(timings):
        raise ValueError(
            f"Sequence has {len(sequence)} frames but {len(timings)} timings were given."
        )

    frames = []
    offset = start
    for value, duration in zip(sequence, timings):
        frames.append(TumbleFrame(die_index=die_index, value=value, offset=offset))
        offset += duration
    return tuple(frames)


class DiceEngine:
    """
    The shared set of 5 dice for a game.

    Rolling, holding and resetting are silently rejected when not allowed;
    the command methods return False in that case so the UI can ignore them.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
        total_duration: float = TUMBLE_DURATION,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock
        self._total_duration = total_duration
        self.dice: list[Die] = [Die(value=self._rng.randint(1, DIE_FACES)) for _ in range(NUM_DICE)]
        self.rolls_remaining = ROLLS_PER_TURN
        self.has_rolled = False
        self._schedule: list[TumbleFrame] = []
        self._frames_left = [0] * NUM_DICE

    # -- Queries -----------------------------------------------------------

    @property
    def values(self) -> tuple[int, ...]:
        """Current face of every die, for scoring."""
        return tuple(d.value for d in self.dice)

    @property
    def animating(self) -> bool:
        """True while any die is mid-tumble."""
        return any(d.animating for d in self.dice)

    @property
    def all_held(self) -> bool:
        return all(d.held for d in self.dice)

    @property
    def pending_frames(self) -> tuple[TumbleFrame, ...]:
        return tuple(self._schedule)

    def can_roll(self) -> bool:
        """Rolls left, at least one die free, and no animation running."""
        return self.rolls_remaining > 0 and not self.all_held and not self.animating

    # -- Commands ----------------------------------------------------------

    def roll(self, now: float | None = None) -> bool:
        """
        Start tumbling every die that is not held.

        Args:
            now: Start time of the animation (defaults to the engine clock)

        Returns:
            True if the roll started, False if it was rejected
        """
        if not self.can_roll():
            return False

        start = self._clock() if now is None else now
        self.rolls_remaining -= 1
        self.has_rolled = True

        timings_cache: dict[int, tuple[float, ...]] = {}
        for index, die in enumerate(self.dice):
            if die.held:
                continue
            sequence = tumble_sequence(die.value, self._rng)
            if len(sequence) not in timings_cache:
                timings_cache[len(sequence)] = tumble_timings(len(sequence), self._total_duration)
            frames = build_tumble_schedule(index, sequence, timings_cache[len(sequence)], start)
            die.animating = True
            self._frames_left[index] = len(frames)
            self._schedule.extend(frames)

        self._schedule.sort(key=lambda frame: frame.offset)
        logger.debug(
            "Roll started at %.3f, %d rolls remaining, %d frames scheduled",
            start, self.rolls_remaining, len(self._schedule),
        )
        return True

    def tick(self, now: float | None = None) -> bool:
        """
        Apply every scheduled frame that is due.

        Args:
            now: Current time (defaults to the engine clock)

        Returns:
            True if any die value changed
        """
        if not self._schedule:
            return False

        current = self._clock() if now is None else now
        due = 0
        while due < len(self._schedule) and self._schedule[due].offset <= current:
            due += 1
        if due == 0:
            return False

        frames, self._schedule = self._schedule[:due], self._schedule[due:]
        for frame in frames:
            self._apply(frame)
        return True

    def settle(self) -> bool:
        """Apply all remaining frames immediately."""
        if not self._schedule:
            return False
        frames, self._schedule = self._schedule, []
        for frame in frames:
            self._apply(frame)
        return True

    def _apply(self, frame: TumbleFrame) -> None:
        die = self.dice[frame.die_index]
        die.value = frame.value
        self._frames_left[frame.die_index] -= 1
        if self._frames_left[frame.die_index] == 0:
            die.animating = False
            logger.debug("Die %d settled on %d", frame.die_index, frame.value)

    def toggle_hold(self, index: int) -> bool:
        """
        Flip the held flag of one die.

        Holding is only possible after the first roll of a turn.

        Returns:
            True if the die was toggled
        """
        if not self.has_rolled:
            return False
        if not is_valid_die_index(index, len(self.dice)):
            logger.warning("Ignoring hold toggle for invalid die index %r", index)
            return False
        self.dice[index].held = not self.dice[index].held
        return True

    def hold_all(self) -> bool:
        """Hold every die. Like :meth:`toggle_hold`, only after the first roll."""
        if not self.has_rolled:
            return False
        for die in self.dice:
            die.held = True
        return True

    def release_all(self) -> None:
        for die in self.dice:
            die.held = False

    def reset(self) -> None:
        """
        Prepare the dice for a new turn.

        Holds are released and the roll budget restored. Face values are kept
        so the next player sees the previous turn's dice.
        """
        self.release_all()
        self.rolls_remaining = ROLLS_PER_TURN
        self.has_rolled = False

    def force_must_score(self) -> None:
        """Leave the current faces in place and spend the remaining rolls."""
        self.rolls_remaining = 0
        self.has_rolled = True

    def set_values(self, values: Sequence[int]) -> None:
        """
        Place the dice on specific faces without animating.

        Intended for tests and debugging. Any pending frames are dropped.

        Raises:
            ValueError: If values is not a valid 5-die hand
        """
        validated = validate_dice_values(values)
        self._schedule = []
        self._frames_left = [0] * NUM_DICE
        for die, value in zip(self.dice, validated):
            die.value = value
            die.animating = False
