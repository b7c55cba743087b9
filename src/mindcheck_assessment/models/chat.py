"""Chat rule models for the canned-response companion.

A rule fires when ALL of its ``when`` predicates hold for the incoming
message.  Rules are evaluated in file order and the first match wins; the
last rule in the table is expected to have an empty ``when`` (fallback).

Predicate targets:
  - message: the lower-cased incoming message
  - context: the lower-cased last message that fell through to the fallback

Operators:
  - contains_any: any of ``value`` is a substring of the target
  - contains_all: every item of ``value`` is a substring of the target
  - not_contains: none of ``value`` is a substring of the target
"""

from typing import List, Literal

from pydantic import BaseModel


class KeywordPredicate(BaseModel):
    """A keyword test against the message or the remembered context."""

    target: Literal["message", "context"] = "message"
    op: Literal["contains_any", "contains_all", "not_contains"]
    value: List[str]


class ChatRule(BaseModel):
    """If every predicate in ``when`` holds, answer with ``reply``.

    ``remember`` marks the rule whose match stores the message as context.
    """

    name: str
    when: List[KeywordPredicate] = []
    reply: str
    remember: bool = False


class ChatReply(BaseModel):
    """Responder output: the reply text and the context to carry forward."""

    reply: str
    rule: str
    last_context: str = ""
