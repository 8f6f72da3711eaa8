from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable, Tuple
from .types import Intent, SendMessage, CreatePost, SendConnection, Navigate

DEFAULT_CONTACT = "John Doe"
DEFAULT_MESSAGE = "Hello!"
# Placeholder: le profil n'est pas (encore) extrait du texte
DEFAULT_PROFILE = "Jane Smith"
DEFAULT_DESTINATION = "home"

QUOTE_RE = re.compile(r"[\"“”](.+?)[\"“”]")
CONTACT_RE = re.compile(r"\bto\s+([a-z][a-z\s]*)", re.IGNORECASE)
# mots qui terminent un nom de contact ("to John Smith saying ...")
CONTACT_STOPWORDS = {"saying", "that", "with", "about", "and", "asking", "telling", "regarding", "re"}

def extract_message(text: str) -> str:
    m = QUOTE_RE.search(text)
    return m.group(1) if m else DEFAULT_MESSAGE

def extract_contact(text: str) -> str:
    # le texte cité ne doit pas fournir de destinataire ("... want to chat")
    m = CONTACT_RE.search(QUOTE_RE.sub(" | ", text))
    if not m:
        return DEFAULT_CONTACT
    words = []
    for word in m.group(1).split():
        if word.lower() in CONTACT_STOPWORDS:
            break
        words.append(word)
    return " ".join(words) or DEFAULT_CONTACT

def _send_message(text: str, platform: str) -> Intent:
    return SendMessage(platform=platform, contact=extract_contact(text), message=extract_message(text))

def _create_post(text: str, platform: str) -> Intent:
    return CreatePost(platform=platform, content=text)

def _send_connection(text: str, platform: str) -> Intent:
    return SendConnection(platform=platform, profile=DEFAULT_PROFILE)

@dataclass(frozen=True)
class IntentRule:
    name: str
    keywords: Tuple[str, ...]
    build: Callable[[str, str], Intent]

    def matches(self, lowered: str) -> bool:
        return any(k in lowered for k in self.keywords)

# Ordre = priorité: la première règle qui correspond gagne
INTENT_RULES: Tuple[IntentRule, ...] = (
    IntentRule("send_message", ("send message", "message"), _send_message),
    IntentRule("create_post", ("post", "share"), _create_post),
    IntentRule("send_connection", ("connect", "add"), _send_connection),
)

def parse_intent(text: str, platform: str) -> Intent:
    lowered = text.lower()
    for rule in INTENT_RULES:
        if rule.matches(lowered):
            return rule.build(text, platform)
    return Navigate(platform=platform, destination=DEFAULT_DESTINATION)
