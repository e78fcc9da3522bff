from typing import Protocol


class DiagnosticSink(Protocol):
    def log(self, line: int, message: str) -> None: ...
