"""Scripted backends and sample documents shared by the tests."""

import asyncio
import json
from typing import Callable, List, Optional

from subtitle_bridge.core.exceptions import BackendError
from subtitle_bridge.translators.base import BaseTranslator

BATCH_MARKER = "Answer with JSON only"

SAMPLE_SRT = (
    "1\n00:00:01,000 --> 00:00:02,000\nHello\n\n"
    "2\n00:00:02,500 --> 00:00:03,000\nWorld\n"
)


def make_srt(count: int) -> str:
    """SRT content with ``count`` one-second entries named ``line N``."""
    blocks = []
    for n in range(1, count + 1):
        start = f"00:00:{n:02d},000"
        end = f"00:00:{n:02d},900"
        blocks.append(f"{n}\n{start} --> {end}\nline {n}\n")
    return "\n".join(blocks)


def batch_lines(prompt: str) -> List[str]:
    """Recover the numbered subtitle texts from a batch prompt."""
    body = prompt.rsplit("subtitles:\n", 1)[1].split(f"\n\n{BATCH_MARKER}", 1)[0]
    return [line.split(". ", 1)[1] for line in body.split("\n") if line.strip()]


async def no_sleep(seconds: float) -> None:
    return None


class RecordingSleep:
    """Sleep stand-in that records requested delays without waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class EchoBackend(BaseTranslator):
    """Answers batch prompts with ``[T] <text>`` and context prompts with a synopsis."""

    def __init__(
        self,
        config=None,
        fail_when: Optional[Callable[[List[str]], bool]] = None,
        delay_for: Optional[Callable[[List[str]], float]] = None,
        context_error: bool = False,
    ):
        super().__init__(config)
        self.fail_when = fail_when
        self.delay_for = delay_for
        self.context_error = context_error
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    @property
    def batch_calls(self) -> List[str]:
        return [prompt for prompt in self.calls if BATCH_MARKER in prompt]

    async def chat(self, messages, model, temperature=0.3, max_tokens=None):
        prompt = messages[-1]['content']
        self.calls.append(prompt)
        if BATCH_MARKER not in prompt:
            if self.context_error:
                raise BackendError("context service unavailable", status=503)
            return "A short test synopsis."

        lines = batch_lines(prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay_for is not None:
                await asyncio.sleep(self.delay_for(lines))
            if self.fail_when is not None and self.fail_when(lines):
                raise BackendError("backend exploded", status=500)
            return json.dumps({"translations": [f"[T] {line}" for line in lines]})
        finally:
            self.in_flight -= 1

    async def close(self):
        self.closed = True


class ScriptedBackend(BaseTranslator):
    """Returns the queued replies in order; exceptions in the queue are raised."""

    def __init__(self, replies):
        super().__init__({})
        self.replies = list(replies)
        self.calls = 0

    async def chat(self, messages, model, temperature=0.3, max_tokens=None):
        self.calls += 1
        reply = self.replies.pop(0) if self.replies else BackendError("no more replies")
        if isinstance(reply, Exception):
            raise reply
        return reply
