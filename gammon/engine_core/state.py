"""
Game State - Board, dice and turn bookkeeping for Backgammon.

Design principles:
- Cheap to clone: the board is a flat list of 26 signed ints
- Snapshot-plus-apply: callers clone, then mutate the clone
- Deterministic: dice come from an explicitly passed random.Random
- Perspective-relative utility: always from the player to move

Board layout:
    point 0      Black's bar, White's bear-off edge
    points 1-24  playing points
    point 25     White's bar, Black's bear-off edge

A positive count belongs to Black, a negative count to White.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
import random

from .action import NO_MOVE, decode_action


NUM_POINTS = 26
DISKS_PER_PLAYER = 15
LOW_EDGE = 0
HIGH_EDGE = 25

# Utility credit per pip of progress
PIP_CREDIT = 1 / 500.0
BEAR_OFF_BONUS = 0.00001
# Non-terminal utility never reaches the absorbing values
PROGRESS_CEILING = 1.0 - 1e-6

_DEFAULT_RNG = random.Random()


class Player(IntEnum):
    """Owner of a point. BLACK and WHITE are the two fixed identities."""
    NONE = 0
    BLACK = 1  # Clockwise: 0 -> 25
    WHITE = 2  # Counterclockwise: 25 -> 0

    @property
    def opponent(self) -> Player:
        if self is Player.BLACK:
            return Player.WHITE
        if self is Player.WHITE:
            return Player.BLACK
        return Player.NONE

    @property
    def direction(self) -> int:
        """Sign of travel along the point indices."""
        return 1 if self is Player.BLACK else -1

    @property
    def bar_point(self) -> int:
        """Point holding this player's captured disks."""
        return LOW_EDGE if self is Player.BLACK else HIGH_EDGE

    @property
    def home_points(self) -> range:
        return range(19, 25) if self is Player.BLACK else range(1, 7)

    @property
    def display_name(self) -> str:
        return PLAYER_NAMES[self]

    def pip_distance(self, point: int) -> int:
        """Pips left before a disk on `point` is borne off."""
        return HIGH_EDGE - point if self is Player.BLACK else point


PLAYER_NAMES = {
    Player.NONE: "Nobody",
    Player.BLACK: "Black (Clockwise)",
    Player.WHITE: "White (Counterclockwise)",
}


class MoveKind(IntEnum):
    """Legality classification used for move ordering."""
    ILLEGAL = 0
    SIMPLE = 1
    CAPTURE_OR_BEAR_OFF = 2


# Standard opening layout: point -> (owner, count)
INITIAL_LAYOUT: dict[int, tuple[Player, int]] = {
    1: (Player.BLACK, 2),
    6: (Player.WHITE, 5),
    8: (Player.WHITE, 3),
    12: (Player.BLACK, 5),
    13: (Player.WHITE, 5),
    17: (Player.BLACK, 3),
    19: (Player.BLACK, 5),
    24: (Player.WHITE, 2),
}


@dataclass
class BackgammonState:
    """
    Complete Backgammon position at a point in time.

    Holds the board, both dice with their usage counters, the selected
    die, the turn counter, the utility for the player to move and the
    number of disks each player has borne off.

    Usage:
        state = BackgammonState.initial(rng=random.Random(7))
        child = state.clone()
        child.move_disk(12, is_computer=True)
    """
    points: list[int] = field(default_factory=lambda: [0] * NUM_POINTS)
    dice: list[int] = field(default_factory=lambda: [1, 1])
    used_dice: list[int] = field(default_factory=lambda: [0, 0])
    selected_die: int = 0
    move_count: int = 0
    utility: float = 0.5
    # Indexed by Player value; slot 0 is unused
    off: list[int] = field(default_factory=lambda: [0, 0, 0])

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def initial(cls, rng: random.Random | None = None) -> BackgammonState:
        """Canonical start of game: standard layout, dice rolled, utility 0.5."""
        state = cls.from_layout(INITIAL_LAYOUT)
        state.roll_dice(rng)
        return state

    @classmethod
    def from_layout(
        cls,
        layout: dict[int, tuple[Player, int]],
        dice: tuple[int, int] = (1, 1),
        player_to_move: Player = Player.BLACK,
        utility: float = 0.5,
    ) -> BackgammonState:
        """
        Build a position from a point -> (owner, count) mapping.

        Disks a player does not place on the board are counted as borne
        off, so 15 disks per player are always accounted for.
        """
        state = cls(move_count=0 if player_to_move is Player.BLACK else 1, utility=utility)
        for point, (owner, count) in layout.items():
            if not 0 <= point < NUM_POINTS:
                raise ValueError(f"Point {point} is off the board")
            if owner is Player.NONE or count < 0:
                raise ValueError(f"Invalid occupant {owner!r} x{count} at point {point}")
            state.points[point] = count if owner is Player.BLACK else -count

        for player in (Player.BLACK, Player.WHITE):
            on_board = state.disks_on_points(player)
            if on_board > DISKS_PER_PLAYER:
                raise ValueError(f"{player.display_name} has {on_board} disks on the board")
            state.off[player] = DISKS_PER_PLAYER - on_board

        state.set_dice(*dice)
        return state

    def clone(self) -> BackgammonState:
        """Independent copy; no list is shared with the original."""
        return BackgammonState(
            points=self.points.copy(),
            dice=self.dice.copy(),
            used_dice=self.used_dice.copy(),
            selected_die=self.selected_die,
            move_count=self.move_count,
            utility=self.utility,
            off=self.off.copy(),
        )

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def player_to_move(self) -> Player:
        return Player.BLACK if self.move_count % 2 == 0 else Player.WHITE

    @property
    def is_doubles(self) -> bool:
        return self.dice[0] == self.dice[1]

    def owner(self, point: int) -> Player:
        value = self.points[point]
        if value > 0:
            return Player.BLACK
        if value < 0:
            return Player.WHITE
        return Player.NONE

    def count(self, point: int) -> int:
        return abs(self.points[point])

    def die_value(self, die: int) -> int:
        return self.dice[die]

    def borne_off(self, player: Player) -> int:
        return self.off[player]

    def pieces_on_board(self, player: Player) -> int:
        return DISKS_PER_PLAYER - self.off[player]

    def disks_on_points(self, player: Player) -> int:
        """Count by scanning the board instead of trusting the off counters."""
        return sum(self.count(p) for p in range(NUM_POINTS) if self.owner(p) is player)

    def is_terminal(self) -> bool:
        """True once either player has borne off every disk."""
        return self.off[Player.BLACK] == DISKS_PER_PLAYER or self.off[Player.WHITE] == DISKS_PER_PLAYER

    def winner(self) -> Player:
        """The player who has borne off all disks, or NONE."""
        for player in (Player.BLACK, Player.WHITE):
            if self.off[player] == DISKS_PER_PLAYER:
                return player
        return Player.NONE

    # ------------------------------------------------------------------
    # Dice
    # ------------------------------------------------------------------

    def roll_dice(self, rng: random.Random | None = None) -> None:
        """
        Start a new turn's dice.

        Rolls both dice, clears usage, selects die 0 and inverts the
        utility for the new player to move.
        """
        rng = rng or _DEFAULT_RNG
        self.dice[0] = rng.randint(1, 6)
        self.dice[1] = rng.randint(1, 6)
        self.used_dice[0] = 0
        self.used_dice[1] = 0
        self.selected_die = 0
        self.utility = 1.0 - self.utility

    def set_dice(self, first: int, second: int) -> None:
        """Force specific die values (chance nodes, tests)."""
        if not (1 <= first <= 6 and 1 <= second <= 6):
            raise ValueError(f"Invalid dice ({first}, {second}); values must be 1-6")
        self.dice[0] = first
        self.dice[1] = second

    def other_die_available(self) -> bool:
        """Whether the unselected die still has a use this turn."""
        other_uses = self.used_dice[1 - self.selected_die]
        return other_uses == 0 or (self.is_doubles and other_uses == 1)

    def change_selected_die(self) -> bool:
        """Select the other die if it has a use left. Returns whether it changed."""
        if self.other_die_available():
            self.selected_die = 1 - self.selected_die
            return True
        return False

    # ------------------------------------------------------------------
    # Legality
    # ------------------------------------------------------------------

    def classify_move(self, point: int, die: int | None = None) -> MoveKind:
        """
        Classify moving the disk on `point` with a die (selected by default).

        CAPTURE_OR_BEAR_OFF moves hit a lone opposing disk or leave the
        board; SIMPLE moves land on an empty or friendly point.
        """
        mover = self.player_to_move
        if not 0 <= point < NUM_POINTS or self.owner(point) is not mover:
            return MoveKind.ILLEGAL
        bar = mover.bar_point
        if point != bar and self.points[bar] != 0:
            return MoveKind.ILLEGAL

        roll = self.dice[self.selected_die if die is None else die]
        target = point + mover.direction * roll
        if target <= LOW_EDGE or target >= HIGH_EDGE:
            if self.can_bear_off(point, roll):
                return MoveKind.CAPTURE_OR_BEAR_OFF
            return MoveKind.ILLEGAL

        occupant = self.owner(target)
        if occupant is Player.NONE or occupant is mover:
            return MoveKind.SIMPLE
        if self.count(target) == 1:
            return MoveKind.CAPTURE_OR_BEAR_OFF
        return MoveKind.ILLEGAL

    def can_bear_off(self, point: int, roll: int) -> bool:
        """
        Bear-off precondition for the player to move.

        Every disk must be home. An exact roll always bears off; a larger
        roll only does so from the farthest occupied home point.
        """
        mover = self.player_to_move
        home = mover.home_points
        for p in range(NUM_POINTS):
            if p not in home and self.owner(p) is mover:
                return False

        distance = mover.pip_distance(point)
        if distance == roll:
            return True
        if distance > roll:
            return False
        for p in home:
            if mover.pip_distance(p) > distance and self.owner(p) is mover:
                return False
        return True

    def has_legal_move(self) -> bool:
        """True if any disk can move with the selected die or the other usable die."""
        dice = [self.selected_die]
        if self.other_die_available():
            dice.append(1 - self.selected_die)
        return any(
            self.classify_move(point, die) is not MoveKind.ILLEGAL
            for die in dice
            for point in range(NUM_POINTS)
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def move_disk(
        self,
        action: int,
        is_computer: bool = False,
        rng: random.Random | None = None,
    ) -> bool:
        """
        Apply one action code in place. Returns True if a disk moved.

        Trusted (computer) callers skip validation. Human actions that are
        illegal leave the position untouched, except that the turn passes
        when no legal move exists at all. -1 always passes the turn.
        """
        point, swap = decode_action(action)
        if point == NO_MOVE:
            self.pass_turn(rng)
            return False

        previous_die = self.selected_die
        legal = True
        if swap:
            if is_computer:
                self.selected_die = 1 - self.selected_die
            else:
                legal = self.change_selected_die()

        if not is_computer and (not legal or self.classify_move(point) is MoveKind.ILLEGAL):
            self.selected_die = previous_die
            if not self.has_legal_move():
                self.pass_turn(rng)
            return False

        self._play(point, rng)
        return True

    def pass_turn(self, rng: random.Random | None = None) -> None:
        """Hand the turn to the opponent and roll their dice."""
        self.move_count += 1
        self.roll_dice(rng)

    def _play(self, point: int, rng: random.Random | None) -> None:
        """Move the disk on `point` with the selected die; no validation."""
        mover = self.player_to_move
        die = self.selected_die
        roll = self.dice[die]
        self.used_dice[die] += 1
        if self.is_doubles:
            end_turn = self.used_dice[0] == 2 and self.used_dice[1] == 2
        else:
            end_turn = self.used_dice[1 - die] == 1

        self._remove_disk(point)
        target = point + mover.direction * roll

        if target <= LOW_EDGE or target >= HIGH_EDGE:
            self.off[mover] += 1
            self._credit(BEAR_OFF_BONUS + mover.pip_distance(point) * PIP_CREDIT)
            if self.off[mover] == DISKS_PER_PLAYER:
                self.utility = 1.0
                end_turn = True
        elif self.owner(target) is mover.opponent:
            victim = mover.opponent
            self.points[target] = 0
            self._add_disk(victim.bar_point, victim)
            self._add_disk(target, mover)
            lost_progress = HIGH_EDGE - victim.pip_distance(target)
            self._credit((lost_progress + roll) * PIP_CREDIT)
        else:
            self._add_disk(target, mover)
            self._credit(roll * PIP_CREDIT)

        if end_turn:
            self.pass_turn(rng)
        else:
            self.selected_die = 1 - die

    def _remove_disk(self, point: int) -> None:
        self.points[point] -= 1 if self.points[point] > 0 else -1

    def _add_disk(self, point: int, player: Player) -> None:
        self.points[point] += 1 if player is Player.BLACK else -1

    def _credit(self, amount: float) -> None:
        if self.utility < 1.0:
            self.utility = min(self.utility + amount, PROGRESS_CEILING)
