from dataclasses import dataclass


@dataclass(frozen=True)
class PendingURLModel:
    """A single URL waiting to be shortened as part of a batch.

    Attributes:
        target (str):
            The original long URL entered by the user.
        validity_minutes (int | None):
            Validity period in minutes. None means the configured default (30).
        custom_shortcode (str | None):
            Optional user-chosen shortcode. None or blank means auto-generate.
    """

    target: str
    validity_minutes: int | None = None
    custom_shortcode: str | None = None

    @property
    def wants_custom_shortcode(self) -> bool:
        return bool(self.custom_shortcode and self.custom_shortcode.strip())
