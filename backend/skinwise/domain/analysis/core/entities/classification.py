"""Classification result entity."""

from dataclasses import dataclass

from skinwise.domain.shared.errors import ValidationError


@dataclass(frozen=True)
class ClassificationResult:
    """
    Condition label predicted from a skin photo.

    The label is free text chosen by the model (e.g. "Acne", "Eczema",
    "Benign Nevus"); it is stripped and must not be blank.

    Example:
        >>> ClassificationResult("  Acne ").label
        'Acne'
    """

    label: str

    def __post_init__(self) -> None:
        label = (self.label or "").strip()
        if not label:
            raise ValidationError("Classification label cannot be empty")
        object.__setattr__(self, "label", label)
