"""Runtime (message) models.

A message exchange carries the user's input and the dialog context in, and
intents, entities, output text and the updated context out. The context must
be sent back verbatim on the next turn, which is why `Context` and
`SystemResponse` keep the raw object instead of a fixed set of fields.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from core.codec import JSONModel, PassThroughObject
from core.json_value import JSONValue


class InputData(JSONModel):
    text: str


class RuntimeIntent(JSONModel):
    intent: str
    confidence: float = Field(..., description="Confidence in the range 0..1.")


class RuntimeEntity(JSONModel):
    entity: str
    location: list[int] = Field(..., description="Zero-based [start, end) character offsets in the input.")
    value: str
    confidence: float | None = None
    metadata: JSONValue | None = None


class LogMessageResponse(JSONModel):
    level: str
    msg: str


class OutputData(JSONModel):
    log_messages: list[LogMessageResponse]
    text: list[str]
    nodes_visited: list[str] | None = None


class RuntimeDialogStack(JSONModel):
    dialog_node: str
    invoked_subdialog: str | None = None


class SystemResponse(PassThroughObject):
    """System section of the context, echoed back unchanged.

    The dialog stack and the counters are read on decode so that a
    malformed system block fails early.
    """

    def _load(self, value: JSONValue) -> None:
        self.dialog_stack: list[RuntimeDialogStack] = value.decoded_array(
            "dialog_stack", type_=RuntimeDialogStack
        )
        self.dialog_turn_counter: int = value.get_int("dialog_turn_counter")
        self.dialog_request_counter: int = value.get_int("dialog_request_counter")


class Context(PassThroughObject):
    """Conversation state, owned by the service; send it back on every turn."""

    def _load(self, value: JSONValue) -> None:
        self.conversation_id: str | None = value.try_get_string("conversation_id")
        self.system: SystemResponse | None = value.try_decode("system", type_=SystemResponse)

    def get(self, key: str) -> JSONValue | None:
        return self._json.try_get_json(key)

    def with_values(self, **values: Any) -> "Context":
        """A copy of this context with extra top-level variables set."""

        data = self.to_json_object()
        data.update(values)
        return Context(data)


class MessageRequest(JSONModel):
    input: InputData | None = None
    alternate_intents: bool | None = Field(
        default=None,
        description="Return every intent whose confidence passes the threshold, not just the top one.",
    )
    context: Context | None = None
    entities: list[RuntimeEntity] | None = None
    intents: list[RuntimeIntent] | None = None
    output: OutputData | None = None

    @classmethod
    def from_text(cls, text: str, *, context: Context | None = None) -> "MessageRequest":
        return cls(input=InputData(text=text), context=context)


class MessageResponse(JSONModel):
    input: InputData | None = None
    alternate_intents: bool | None = None
    context: Context
    entities: list[RuntimeEntity]
    intents: list[RuntimeIntent]
    output: OutputData

    @property
    def top_intent(self) -> RuntimeIntent | None:
        if not self.intents:
            return None
        return max(self.intents, key=lambda intent: intent.confidence)
