from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    message: str


class FileReport(BaseModel):
    path: str
    diagnostics: list[Diagnostic] = []


class Header(BaseModel):
    kind: Literal["header"] = "header"
    level: int = Field(ge=1, le=6)
    text: str
    source: str


class ListItem(BaseModel):
    text: str
    is_multiline: bool = False


class ListBlock(BaseModel):
    kind: Literal["list"] = "list"
    items: list[ListItem]
    source: str


class CodeBlock(BaseModel):
    kind: Literal["code"] = "code"
    fence: str
    info: str = ""
    body_lines: list[str] = []
    closed: bool = True
    source: str


class Paragraph(BaseModel):
    kind: Literal["paragraph"] = "paragraph"
    text: str
    source: str


BlockNode = Annotated[Header | ListBlock | CodeBlock | Paragraph, Field(discriminator="kind")]


class CheckFailure(BaseModel):
    """A directory whose check could not run, e.g. because its manifest is missing."""

    path: str
    error: str


class TreeReport(BaseModel):
    reports: list[FileReport] = []
    failures: list[CheckFailure] = []
