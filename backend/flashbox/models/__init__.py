from flashbox.models.deck import Deck
from flashbox.models.flashcard import Flashcard

__all__ = ["Deck", "Flashcard"]
