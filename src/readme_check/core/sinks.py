from readme_check.models import Diagnostic


class ListSink:
    """Collect diagnostics for a single file.

    Implements the ``DiagnosticSink`` protocol.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def log(self, line: int, message: str) -> None:
        self._diagnostics.append(Diagnostic(line=line, message=message))

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)
