"""Play validation for submitted sets."""

from dataclasses import dataclass

from gouji_server.errors import ErrorCode, GoujiError, NotGreaterError
from gouji_server.models.card import Card, CardSet
from gouji_server.models.hand import Hand


@dataclass
class ValidationResult:
    """Result of play validation."""

    is_valid: bool
    error_message: str = ""
    error: ErrorCode = ErrorCode.NONE
    card_set: CardSet | None = None
    is_bomb: bool = False


class PlayValidator:
    """Validates submitted plays and commits them to a hand."""

    def validate(
        self,
        cards: list[Card],
        field: CardSet | None = None,
    ) -> ValidationResult:
        """Validate a submitted play without touching any hand.

        Args:
            cards: Raw cards being submitted
            field: Set currently on the field, or None if the field is empty

        Returns:
            ValidationResult carrying the normalized set when valid
        """
        try:
            card_set = CardSet.new(cards)
            if field is not None and not card_set.is_greater_than(field):
                raise NotGreaterError(f"{card_set} does not beat {field}")
        except GoujiError as e:
            return ValidationResult(is_valid=False, error_message=str(e), error=e.code)

        return ValidationResult(
            is_valid=True,
            card_set=card_set,
            is_bomb=card_set.is_gouji(),
        )

    def commit(self, hand: Hand, result: ValidationResult) -> ValidationResult:
        """Remove a validated set from the player's hand.

        Args:
            hand: Player's hand (left unchanged on failure)
            result: Successful result returned by ``validate``

        Returns:
            ``result`` on success, otherwise a failed ValidationResult
        """
        if not result.is_valid or result.card_set is None:
            return result

        try:
            hand.subtract(result.card_set)
        except GoujiError as e:
            return ValidationResult(is_valid=False, error_message=str(e), error=e.code)

        return result

    def validate_play(
        self,
        hand: Hand,
        cards: list[Card],
        field: CardSet | None = None,
    ) -> ValidationResult:
        """Validate a play against the field and commit it to the hand."""
        return self.commit(hand, self.validate(cards, field))
