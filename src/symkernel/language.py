"""Language metadata reported to the notebook front end."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LanguageInfo(BaseModel):
    """Static descriptor used for syntax highlighting and file associations."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    version: str = Field(pattern=r"^\d+\.\d+\.\d+$")
    mimetype: str
    file_extension: str = Field(pattern=r"^\.")
    pygments_lexer: str
    codemirror_mode: str

    def to_dict(self) -> dict[str, Any]:
        """The ``language_info`` field of a Jupyter ``kernel_info_reply``."""
        return self.model_dump()


def build_language_info() -> LanguageInfo:
    return LanguageInfo(
        name="symjamma",
        version="1.0.0",
        mimetype="text/x-mathematica",
        file_extension=".m",
        pygments_lexer="mathematica",
        codemirror_mode="Mathematica",
    )


__all__ = ["LanguageInfo", "build_language_info"]
