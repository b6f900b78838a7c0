"""Conversation turns and history."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple

from skinwise.domain.shared.errors import ValidationError


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ConversationTurn:
    """One message in a follow-up conversation."""

    role: Role
    content: str

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role(self.role))
        if not (self.content or "").strip():
            raise ValidationError("Conversation turn content cannot be empty")

    @staticmethod
    def user(content: str) -> "ConversationTurn":
        return ConversationTurn(Role.USER, content)

    @staticmethod
    def assistant(content: str) -> "ConversationTurn":
        return ConversationTurn(Role.ASSISTANT, content)


class ConversationHistory:
    """
    Ordered, append-only sequence of turns for one analysis result.

    The history belongs to the caller. Consumers read it through
    ``turns`` or ``window`` which return tuples, so they cannot reorder
    or drop turns.

    Example:
        >>> history = ConversationHistory()
        >>> history.append(ConversationTurn.user("Is it contagious?"))
        >>> len(history)
        1
    """

    def __init__(self, turns: Tuple[ConversationTurn, ...] = ()) -> None:
        self._turns: List[ConversationTurn] = list(turns)

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)

    @property
    def turns(self) -> Tuple[ConversationTurn, ...]:
        return tuple(self._turns)

    def window(self, max_turns: int) -> Tuple[ConversationTurn, ...]:
        """
        Most recent turns, at most ``max_turns`` of them.

        Args:
            max_turns: Window size (must be positive)

        Returns:
            Tuple of the newest turns in original order
        """
        if max_turns <= 0:
            raise ValueError(f"max_turns must be positive, got {max_turns}")
        return tuple(self._turns[-max_turns:])

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[ConversationTurn]:
        return iter(tuple(self._turns))
