from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, Optional

from miner_bot.sim.entities import Action, ActionKind, EntityKind, ItemKind
from miner_bot.sim.utils import Position


class ProtocolError(ValueError):
    """The match driver sent something we cannot interpret."""


class EndOfInput(EOFError):
    """The driver closed the stream."""


class TokenReader:
    """
    Whitespace token stream over the driver's line-oriented input.
    Lines are pulled lazily so a turn is processed as soon as its last token arrives.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines: Iterator[str] = iter(lines)
        self._buf: Deque[str] = deque()

    @classmethod
    def from_text(cls, text: str) -> "TokenReader":
        return cls(text.splitlines())

    def _fill(self) -> bool:
        while not self._buf:
            line = next(self._lines, None)
            if line is None:
                return False
            self._buf.extend(line.split())
        return True

    def at_eof(self) -> bool:
        return not self._fill()

    def next_token(self) -> str:
        if not self._fill():
            raise EndOfInput("input exhausted")
        return self._buf.popleft()

    def next_int(self) -> int:
        tok = self.next_token()
        try:
            return int(tok)
        except ValueError:
            raise ProtocolError(f"expected an integer, got {tok!r}") from None


def parse_entity_kind(code: int) -> EntityKind:
    try:
        return EntityKind(code)
    except ValueError:
        raise ProtocolError(f"not a valid unit type: {code}") from None


def parse_item_kind(code: int) -> ItemKind:
    try:
        return ItemKind(code)
    except ValueError:
        raise ProtocolError(f"not a valid item type: {code}") from None


def parse_ore_token(tok: str) -> Optional[int]:
    if tok == "?":
        return None
    try:
        value = int(tok)
    except ValueError:
        raise ProtocolError(f"bad ore token {tok!r}") from None
    if value < 0:
        raise ProtocolError(f"negative ore count {value}")
    return value


def parse_hole_token(tok: str) -> bool:
    if tok == "0":
        return False
    if tok == "1":
        return True
    raise ProtocolError(f"bad hole token {tok!r}")


def format_action(action: Action, message: str = "") -> str:
    parts = [action.kind.value]
    if action.target is not None:
        parts += [str(action.target.x), str(action.target.y)]
    if action.item is not None:
        parts.append(action.item.name)
    if message:
        parts.append(message)
    return " ".join(parts)


def parse_action(line: str) -> Action:
    """Inverse of format_action; anything after the command's arguments is a comment."""
    toks = line.split()
    if not toks:
        raise ProtocolError("empty command line")
    try:
        kind = ActionKind(toks[0])
    except ValueError:
        raise ProtocolError(f"unknown command {toks[0]!r}") from None

    if kind == ActionKind.WAIT:
        return Action.wait()
    if kind == ActionKind.REQUEST:
        if len(toks) < 2 or toks[1] not in ("RADAR", "TRAP"):
            raise ProtocolError(f"bad request: {line!r}")
        return Action.request(ItemKind[toks[1]])

    if len(toks) < 3:
        raise ProtocolError(f"missing coordinates: {line!r}")
    try:
        target = Position(int(toks[1]), int(toks[2]))
    except ValueError:
        raise ProtocolError(f"bad coordinates: {line!r}") from None
    return Action(kind, target=target)
