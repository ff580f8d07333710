"""Flashcard deck navigation."""

from collections.abc import Sequence

from study_royale.models.quiz import FlashcardQuestion


class FlashcardDeck:
    """
    Step through flashcards one at a time.

    Moving past either end is ignored. Moving to another card shows its
    front again.
    """

    def __init__(self, cards: Sequence[FlashcardQuestion]):
        self.cards = list(cards)
        self.index = 0
        self.flipped = False

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def current(self) -> FlashcardQuestion | None:
        if not self.cards:
            return None
        return self.cards[self.index]

    @property
    def visible_text(self) -> str:
        """The side of the current card facing up."""
        card = self.current
        if card is None:
            return ""
        return card.back if self.flipped else card.front

    @property
    def has_next(self) -> bool:
        return self.index < len(self.cards) - 1

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def position(self) -> str:
        if not self.cards:
            return "No flashcards"
        return f"Card {self.index + 1} of {len(self.cards)}"

    def flip(self) -> str:
        self.flipped = not self.flipped
        return self.visible_text

    def next(self) -> bool:
        if not self.has_next:
            return False
        self.index += 1
        self.flipped = False
        return True

    def previous(self) -> bool:
        if not self.has_previous:
            return False
        self.index -= 1
        self.flipped = False
        return True
