"""AI Fill: turn a free-text request into prompt blocks.

The AIFillOrchestrator runs a two-pass flow against an LLM:

1. Clarification pass - the model either confirms the request is clear or
   asks up to three short questions.
2. Generation pass - the model writes labelled sections (Task, Tone, Format,
   Persona, Constraint) which are parsed into blocks and committed to the
   PromptStore, replacing whatever was there.

Stages move Input -> (Clarification ->) Processing -> Complete. A failure
never ends the flow: the orchestrator returns to the stage the call was made
from and exposes the message in ``error``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from promptstitch.blocks.models import Block
from promptstitch.builder.prompts import (
    GENERATED_BLOCK_LABELS,
    NO_CLARIFICATION_SENTINEL,
    build_clarification_prompt,
    build_generation_prompt,
)
from promptstitch.builder.store import PromptStore
from promptstitch.errors import PromptStitchError
from promptstitch.llm.client import LLMClient

logger = logging.getLogger(__name__)

MAX_CLARIFICATION_QUESTIONS = 3

EMPTY_INPUT_MESSAGE = "Please enter a description of what you want to create."
NO_CLIENT_MESSAGE = "AI features require an API key. Please check your settings."
BUSY_MESSAGE = "A request is already in progress. Please wait for it to finish."
NO_BLOCKS_MESSAGE = "No prompt blocks could be generated. Please try rephrasing your request."
CLARIFICATION_FAILED_MESSAGE = "Failed to process your request. Please try again."
GENERATION_FAILED_MESSAGE = "Failed to generate blocks. Please try again."

_LIST_QUESTION_RE = re.compile(r"(?:^|\n)(?:\d+\.|-|\*)\s*(.+?)(?=\n|\Z)")
_LABEL_ALTERNATION = "|".join(GENERATED_BLOCK_LABELS)


class AIFillStage(Enum):
    """Stage of the AI Fill flow."""

    INPUT = "input"
    CLARIFICATION = "clarification"
    PROCESSING = "processing"
    COMPLETE = "complete"


@dataclass
class AIFillResult:
    """Snapshot of the flow after an action, for the shell to render."""

    stage: AIFillStage
    message: str = ""
    questions: list[str] = field(default_factory=list)
    blocks: list[Block] = field(default_factory=list)
    error: str | None = None

    @property
    def needs_clarification(self) -> bool:
        """Check if the user has questions to answer."""
        return self.stage == AIFillStage.CLARIFICATION

    @property
    def is_complete(self) -> bool:
        """Check if blocks were generated."""
        return self.stage == AIFillStage.COMPLETE


def extract_clarification_questions(response: str) -> list[str]:
    """Pull clarification questions out of a model response.

    Numbered or bulleted lines ending in "?" are preferred. If there are
    none, any line ending in "?" that is not a bold label is used. At most
    three questions are returned.
    """
    questions: list[str] = []

    for match in _LIST_QUESTION_RE.finditer(response):
        candidate = match.group(1).strip()
        if candidate.endswith("?"):
            questions.append(candidate)

    if not questions:
        for line in response.split("\n"):
            trimmed = line.strip()
            if trimmed.endswith("?") and not trimmed.startswith("**"):
                questions.append(trimmed)

    return questions[:MAX_CLARIFICATION_QUESTIONS]


def parse_generated_blocks(response: str) -> list[tuple[str, str]]:
    """Parse labelled sections from a generation response.

    Each label is searched independently, so the order of sections in the
    text does not matter. A section runs until the next known label or the
    end of the text.

    Returns:
        (block type, content) pairs in Task, Tone, Format, Persona,
        Constraint order, for sections with non-empty content.
    """
    parsed: list[tuple[str, str]] = []

    for label in GENERATED_BLOCK_LABELS:
        pattern = re.compile(
            rf"\*\*{label}:\*\*\s*(.*?)(?=\*\*(?:{_LABEL_ALTERNATION}):|\Z)",
            re.IGNORECASE | re.DOTALL,
        )
        match = pattern.search(response)
        if not match:
            continue
        content = match.group(1).strip()
        if content:
            parsed.append((label, content))

    return parsed


def build_combined_input(user_input: str, answers: Iterable[tuple[str, str]]) -> str:
    """Append answered clarification questions to the original request.

    Blank answers are left out.
    """
    answered = [
        f"{question} {answer.strip()}"
        for question, answer in answers
        if answer and answer.strip()
    ]
    if not answered:
        return user_input
    return f"{user_input}. {'. '.join(answered)}"


def _user_message(error: Exception, fallback: str) -> str:
    if isinstance(error, PromptStitchError):
        return error.message
    return str(error) or fallback


class AIFillOrchestrator:
    """Runs the AI Fill flow for one builder session."""

    def __init__(self, store: PromptStore, llm_client: LLMClient | None = None):
        """Initialize the orchestrator.

        Args:
            store: Store whose blocks are replaced on success.
            llm_client: Client used for both passes. Without one, every
                submission is rejected with a configuration message.
        """
        self.store = store
        self.llm_client = llm_client

        self.stage = AIFillStage.INPUT
        self.user_input = ""
        self.clarification_questions: list[str] = []
        self.clarification_answers: dict[str, str] = {}
        self.error: str | None = None
        self.is_processing = False

        # Bumped whenever the flow is reset so late responses can be dropped
        self._session_token = 0

    def _snapshot(self, message: str = "", blocks: list[Block] | None = None) -> AIFillResult:
        return AIFillResult(
            stage=self.stage,
            message=message,
            questions=list(self.clarification_questions),
            blocks=list(blocks or []),
            error=self.error,
        )

    def _busy(self) -> AIFillResult:
        """Reject a call made while another request is in flight.

        Shared state is left to the running flow.
        """
        return AIFillResult(
            stage=self.stage,
            questions=list(self.clarification_questions),
            error=BUSY_MESSAGE,
        )

    def _is_stale(self, token: int) -> bool:
        if token != self._session_token:
            logger.debug("Discarding AI Fill response from an earlier session")
            return True
        return False

    def _precheck(self) -> str | None:
        if self.llm_client is None:
            return NO_CLIENT_MESSAGE
        return None

    async def submit(self, user_input: str) -> AIFillResult:
        """Submit the initial request.

        Runs the clarification pass and, when no questions come back, the
        generation pass as well.
        """
        if self.is_processing:
            return self._busy()

        if self.stage != AIFillStage.INPUT:
            self.error = "Start a new AI Fill before submitting another request."
            return self._snapshot()

        self.user_input = user_input or ""
        if not self.user_input.strip():
            self.error = EMPTY_INPUT_MESSAGE
            return self._snapshot()

        problem = self._precheck()
        if problem:
            self.error = problem
            return self._snapshot()

        self.is_processing = True
        self.error = None
        token = self._session_token
        try:
            try:
                response = await self.llm_client.make_request(
                    build_clarification_prompt(self.user_input),
                    temperature=0.7,
                    max_output_tokens=800,
                )
            except Exception as e:
                if self._is_stale(token):
                    return self._snapshot()
                logger.error("AI Fill clarification pass failed: %s", e)
                self.error = _user_message(e, CLARIFICATION_FAILED_MESSAGE)
                return self._snapshot()

            if self._is_stale(token):
                return self._snapshot()

            if NO_CLARIFICATION_SENTINEL in response:
                return await self._generate(self.user_input, AIFillStage.INPUT, token)

            questions = extract_clarification_questions(response)
            if not questions:
                logger.info("No clarification questions found, generating directly")
                return await self._generate(self.user_input, AIFillStage.INPUT, token)

            self.clarification_questions = questions
            self.clarification_answers = {}
            self.stage = AIFillStage.CLARIFICATION
            return self._snapshot(message="A few quick questions before generating.")
        finally:
            self.is_processing = False

    def set_answer(self, question: str, answer: str) -> None:
        """Record the answer to a clarification question."""
        self.clarification_answers[question] = answer

    async def submit_clarifications(self, answers: dict[str, str] | None = None) -> AIFillResult:
        """Submit clarification answers and run the generation pass.

        Args:
            answers: Optional answers keyed by question, merged into any
                already recorded with ``set_answer``.
        """
        if self.is_processing:
            return self._busy()

        if self.stage != AIFillStage.CLARIFICATION:
            self.error = "There are no clarification questions to answer."
            return self._snapshot()

        problem = self._precheck()
        if problem:
            self.error = problem
            return self._snapshot()

        if answers:
            self.clarification_answers.update(answers)

        combined = build_combined_input(
            self.user_input,
            ((q, self.clarification_answers.get(q, "")) for q in self.clarification_questions),
        )

        self.is_processing = True
        self.error = None
        try:
            return await self._generate(combined, AIFillStage.CLARIFICATION, self._session_token)
        finally:
            self.is_processing = False

    async def _generate(self, text: str, origin: AIFillStage, token: int) -> AIFillResult:
        """Run the generation pass and commit the parsed blocks."""
        self.stage = AIFillStage.PROCESSING

        try:
            response = await self.llm_client.make_request(
                build_generation_prompt(text),
                temperature=0.7,
                max_output_tokens=1200,
            )
        except Exception as e:
            if self._is_stale(token):
                return self._snapshot()
            logger.error("AI Fill generation pass failed: %s", e)
            self.stage = origin
            self.error = _user_message(e, GENERATION_FAILED_MESSAGE)
            return self._snapshot()

        if self._is_stale(token):
            return self._snapshot()

        parsed = parse_generated_blocks(response)
        if not parsed:
            logger.warning("Generation response contained no labelled blocks")
            self.stage = origin
            self.error = NO_BLOCKS_MESSAGE
            return self._snapshot()

        # Commit only after a successful parse
        self.store.clear_builder()
        blocks = [self.store.add_block(block_type, content) for block_type, content in parsed]

        self.stage = AIFillStage.COMPLETE
        return self._snapshot(
            message=f"Generated {len(blocks)} prompt block{'s' if len(blocks) != 1 else ''}.",
            blocks=blocks,
        )

    def back(self) -> bool:
        """Leave the clarification stage, discarding questions and answers.

        Returns:
            True if the flow went back to the input stage.
        """
        if self.stage != AIFillStage.CLARIFICATION:
            return False

        self._session_token += 1
        self.stage = AIFillStage.INPUT
        self.clarification_questions = []
        self.clarification_answers = {}
        self.error = None
        return True

    def reset(self) -> None:
        """Start over from an empty input stage.

        Responses still in flight are ignored when they arrive.
        """
        self._session_token += 1
        self.stage = AIFillStage.INPUT
        self.user_input = ""
        self.clarification_questions = []
        self.clarification_answers = {}
        self.error = None

    close = reset
