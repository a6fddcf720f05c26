"""Invoice domain exceptions and warnings."""

from decimal import Decimal

from quickinvoice.services.exceptions import ServiceError


class IntegrityWarning(UserWarning):
    """Persisted totals disagree with the recomputation from items.

    Non-fatal: the invoice still shows the persisted (authoritative) amount.
    """

    def __init__(self, field: str, persisted: Decimal, recomputed: Decimal):
        self.field = field
        self.persisted = persisted
        self.recomputed = recomputed
        super().__init__(f"{field} mismatch: persisted {persisted}, recomputed {recomputed}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntegrityWarning):
            return NotImplemented
        return (self.field, self.persisted, self.recomputed) == (other.field, other.persisted, other.recomputed)

    def __hash__(self) -> int:
        return hash((self.field, self.persisted, self.recomputed))


class RenderError(ServiceError):
    """Invoice could not be rendered without losing content."""

    pass


class UnrenderableText(RenderError):
    """Text contains characters the invoice font cannot draw."""

    def __init__(self, text: str, characters: str, font_name: str):
        self.text = text
        self.characters = characters
        self.font_name = font_name
        super().__init__(f"Font {font_name} cannot render {characters!r} in {text!r}")
