from enum import Enum


class FormatOption(Enum):
    """Rules accepted by `Money.format`."""

    NO_CENTS = "no_cents"
    WITH_CURRENCY = "with_currency"
    HTML = "html"

    @classmethod
    def coerce(cls, value: "FormatOption | str") -> "FormatOption":
        """Return $value as a FormatOption, accepting the enum values as strings.

        Raises:
            ValueError: If $value names no known option.
        """
        if isinstance(value, FormatOption):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown format option: {value!r}; expected one of {[o.value for o in cls]}") from None
