"""Rule-based chat companion.

Replies come from an ordered rule table (``data/chat_rules.yaml``): the
first rule whose keyword predicates all hold wins.  Matching is plain
substring search over the lower-cased message, so "this" matches "hi".

Usage::

    responder = ChatResponder().load()
    convo = ChatConversation(responder)
    convo.send("I feel anxious about work")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from mindcheck_assessment.errors import ChatRulesError
from mindcheck_assessment.models.chat import ChatReply, ChatRule, KeywordPredicate
from mindcheck_assessment.question_bank import DATA_DIR, load_yaml

logger = logging.getLogger(__name__)

# First message shown in an empty conversation.
GREETING = (
    "Hi there! I'm your friendly mental health companion. How are you feeling "
    "today? Remember, you can talk to me about anything - I'm here to listen "
    "and support you."
)


def keyword_match(op: str, text: str, value: list[str]) -> bool:
    """Apply a keyword operator to ``text``."""
    if op == "contains_any":
        return any(v in text for v in value)
    if op == "contains_all":
        return all(v in text for v in value)
    if op == "not_contains":
        return not any(v in text for v in value)
    logger.warning("Unknown keyword operator: %s", op)
    return False


class ChatResponder:
    """Evaluates the rule table against incoming messages.

    Args:
        path: YAML rule file; defaults to the packaged ``chat_rules.yaml``.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else DATA_DIR / "chat_rules.yaml"
        self._rules: list[ChatRule] = []

    def load(self) -> ChatResponder:
        raw = load_yaml(self._path)
        return self.load_from(raw)

    def load_from(self, raw: Any) -> ChatResponder:
        if not isinstance(raw, dict) or not isinstance(raw.get("rules"), list):
            raise ChatRulesError("chat rules must be a mapping with a 'rules' list")
        try:
            rules = [ChatRule(**r) for r in raw["rules"]]
        except (TypeError, ValidationError) as exc:
            raise ChatRulesError(f"Invalid chat rule: {exc}") from exc
        if not rules or rules[-1].when:
            raise ChatRulesError("the last chat rule must be an unconditional fallback")
        self._rules = rules
        logger.info("ChatResponder loaded %d rules", len(rules))
        return self

    @property
    def rules(self) -> list[ChatRule]:
        return list(self._rules)

    def respond(self, message: str, last_context: str = "") -> ChatReply:
        """Reply to ``message`` given the previously remembered context.

        Raises:
            ValueError: if the message is empty or whitespace-only.
        """
        if not message or not message.strip():
            raise ValueError("message must not be empty")
        if not self._rules:
            raise RuntimeError("ChatResponder.load() has not been called")

        text = message.lower()
        context = (last_context or "").lower()
        for rule in self._rules:
            if all(self._holds(pred, text, context) for pred in rule.when):
                new_context = text if rule.remember else last_context
                return ChatReply(reply=rule.reply, rule=rule.name, last_context=new_context)
        # load_from guarantees an unconditional last rule
        raise RuntimeError("no chat rule matched")

    @staticmethod
    def _holds(pred: KeywordPredicate, text: str, context: str) -> bool:
        target = context if pred.target == "context" else text
        return keyword_match(pred.op, target, pred.value)


class ChatConversation:
    """One user's conversation: history plus the remembered context."""

    def __init__(self, responder: ChatResponder) -> None:
        self._responder = responder
        self.last_context = ""
        self.messages: list[dict[str, Any]] = [{"text": GREETING, "is_bot": True}]

    def send(self, message: str) -> str:
        reply = self._responder.respond(message, self.last_context)
        self.last_context = reply.last_context
        self.messages.append({"text": message, "is_bot": False})
        self.messages.append({"text": reply.reply, "is_bot": True})
        return reply.reply
