from __future__ import annotations
from typing import Callable, Dict, List
from .types import (
    Intent, Plan, Step, SendMessage, CreatePost, SendConnection,
    NavigateStep, ClickStep, TypeStep, WaitStep,
)

PLATFORMS: Dict[str, str] = {
    "linkedin": "LinkedIn",
    "twitter": "Twitter",
    "gmail": "Gmail",
    "facebook": "Facebook",
}

# Sélecteurs logiques -> CSS réels (LinkedIn). Les autres plateformes
# réutilisent les identifiants logiques tels quels.
SELECTORS: Dict[str, Dict[str, str]] = {
    "linkedin": {
        "nav:messaging": '[data-nav="messaging"]',
        "search-messages": 'input[placeholder="Search messages"]',
        "conversation-card": ".msg-conversation-card",
        "message-input": ".msg-form__contenteditable",
        "send-button": 'button[type="submit"]',
        "start-post": ".share-box-feed-entry__trigger",
        "post-button": "button.share-actions__primary-action",
        "open-profile": ".entity-result",
        "connect-button": 'button[aria-label*="Connect"]',
        "confirm-connect": 'button[aria-label="Send now"]',
    },
}

def platform_label(platform: str) -> str:
    return PLATFORMS.get(platform.lower(), platform.title())

def resolve_selector(platform: str, selector: str) -> str:
    return SELECTORS.get(platform.lower(), {}).get(selector, selector)

def _send_message_steps(intent: SendMessage) -> List[Step]:
    app = platform_label(intent.platform)
    return [
        NavigateStep("/", f"Navigate to {app} home page"),
        ClickStep("nav:messaging", "Click on Messaging icon"),
        WaitStep(500, "Wait for messaging panel to load"),
        ClickStep("search-messages", f"Search for contact: {intent.contact}"),
        TypeStep(intent.contact, f"Type contact name: {intent.contact}"),
        WaitStep(800, "Wait for search results"),
        ClickStep("conversation-card", "Select contact from results"),
        ClickStep("message-input", "Click message input field"),
        TypeStep(intent.message, f'Type message: "{intent.message}"'),
        ClickStep("send-button", "Click Send button"),
    ]

def _create_post_steps(intent: CreatePost) -> List[Step]:
    app = platform_label(intent.platform)
    return [
        NavigateStep("/feed", f"Navigate to {app} feed"),
        ClickStep("start-post", 'Click "Start a post" button'),
        WaitStep(500, "Wait for post modal"),
        TypeStep(intent.content, "Type post content"),
        ClickStep("post-button", "Click Post button"),
    ]

def _send_connection_steps(intent: SendConnection) -> List[Step]:
    app = platform_label(intent.platform)
    return [
        NavigateStep("/search/people", f"Navigate to {app} search"),
        TypeStep(intent.profile, f"Search for: {intent.profile}"),
        WaitStep(1000, "Wait for search results"),
        ClickStep("open-profile", f"Open profile: {intent.profile}"),
        WaitStep(800, "Wait for profile to load"),
        ClickStep("connect-button", "Click Connect button"),
        WaitStep(500, "Wait for connection modal"),
        ClickStep("confirm-connect", "Confirm connection request"),
    ]

# Navigate n'a pas de gabarit: plan vide, terminé immédiatement
TEMPLATES: Dict[type, Callable[..., List[Step]]] = {
    SendMessage: _send_message_steps,
    CreatePost: _create_post_steps,
    SendConnection: _send_connection_steps,
}

def plan_steps(intent: Intent) -> Plan:
    template = TEMPLATES.get(type(intent))
    if template is None:
        return ()
    return tuple(template(intent))
