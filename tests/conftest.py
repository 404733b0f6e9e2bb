from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

import pytest

SRC = str(Path(__file__).resolve().parents[1] / "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from core.domain.models import RawResponse, TransportRequest  # noqa: E402


def json_response(status_code: int = 200, data: Any = None, *, raw: bytes | None = None) -> RawResponse:
    body = raw if raw is not None else (b"" if data is None else json.dumps(data).encode("utf-8"))
    return RawResponse(status_code=status_code, headers={"content-type": "application/json"}, body=body)


class RecordingTransport:
    """Transport double.

    Replays scripted outcomes in order (the last one repeats) or delegates to an
    async handler, and records every request it receives.
    """

    def __init__(
        self,
        *outcomes: RawResponse | BaseException,
        handler: Callable[[TransportRequest], Awaitable[RawResponse]] | None = None,
    ) -> None:
        self.requests: list[TransportRequest] = []
        self._outcomes = list(outcomes)
        self._handler = handler

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def send(self, request: TransportRequest) -> RawResponse:
        self.requests.append(request)
        if self._handler is not None:
            return await self._handler(request)
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Points the user config dir at tmp_path and clears JSONWIRE_* vars."""

    for key in list(os.environ):
        if key.upper().startswith("JSONWIRE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)
    return tmp_path
