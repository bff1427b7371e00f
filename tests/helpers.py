from __future__ import annotations

from typing import Any

from ai_providers.base import AIProvider

CATS = "Cats are mammals. Cats have fur. Cats are popular pets."

QUIZ_JSON = '[{"question":"Q?","options":["A","B","C","D"],"correctIndex":1,"explanation":"E"}]'
CARDS_JSON = '[{"front":"Term","back":"Meaning"},{"front":"Other","back":"Thing"}]'


class ScriptedProvider(AIProvider):
    """Provider that replays outcomes in order: strings are returned, exceptions raised.

    The last outcome repeats once the script runs out.
    """

    def __init__(self, name: str, outcomes: list[Any], configured: bool = True) -> None:
        super().__init__(api_key="test-key" if configured else None)
        self.name = name
        self.outcomes = list(outcomes)
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class FakeResponse:
    def __init__(self, status_code: int, json_data: Any = None, reason: str = "") -> None:
        self.status_code = status_code
        self._json = json_data
        self.reason = reason

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("no json body")
        return self._json
