from typing import Final
from pydantic import BaseModel

ERROR_SEVERITIES: Final[set[str]] = {"fatal", "error"}


class BundleError(BaseModel):
    entry: int
    status: int
    code: str
    severity: str
    diagnostics: str
