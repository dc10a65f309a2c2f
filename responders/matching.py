"""
Keyword matching for the casual-chat responder.

Maps free text to a response category by trigger phrases, falling back to a
channel topic hint and then to generic replies.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Optional, Sequence


@dataclass(frozen=True)
class ResponseCategory:
    name: str
    triggers: tuple[str, ...]
    responses: tuple[str, ...]


def _category(name: str, triggers: Sequence[str], responses: Sequence[str]) -> ResponseCategory:
    return ResponseCategory(name, tuple(triggers), tuple(responses))


# Declaration order is match priority.
DEFAULT_CATEGORIES: tuple[ResponseCategory, ...] = (
    _category(
        "greetings",
        ["hi", "hello", "hey", "sup", "yo", "whats up", "what's up", "wassup", "hii", "heyy", "heyo"],
        ["heyyy", "yooo whats good", "hey hey", "sup!", "ayy whats up", "hii", "heya", "yo yo"],
    ),
    _category(
        "goodbye",
        ["bye", "gn", "goodnight", "good night", "cya", "gtg", "gotta go", "im out", "leaving"],
        ["laterr", "byee", "cya!", "peace out", "gn!", "take care", "see ya", "bye bye"],
    ),
    _category(
        "howAreYou",
        ["how are you", "how r u", "hru", "how you doing", "how are u", "wbu", "and you"],
        ["im good! wbu?", "chillin hbu", "pretty good ngl, u?", "im vibing, how about u", "doing alright wby"],
    ),
    _category(
        "thanks",
        ["thanks", "thank you", "thx", "ty", "tysm", "appreciate"],
        ["np!", "no problem!", "ofc!", "anytime", "gotchu", "no worries"],
    ),
    _category(
        "sorry",
        ["sorry", "my bad", "mb", "apologize", "sry"],
        ["ur good dw", "its fine lol", "no worries", "all good", "dw about it"],
    ),
    _category(
        "laughter",
        ["lol", "lmao", "lmfao", "haha", "hahaha", "rofl", "dead", "💀", "crying"],
        ["lmaoo", "im dead 💀", "LMAO", "stoppp 😭", "bruhhh", "hahaha fr", "lolol"],
    ),
    _category(
        "agreement",
        ["ikr", "fr", "facts", "true", "same", "real", "exactly", "right", "yes", "yeah", "yea", "yep"],
        ["frfr", "literally", "on god", "100%", "big facts", "so true", "realest thing ever"],
    ),
    _category(
        "disagreement",
        ["no", "nah", "nope", "cap", "false", "wrong", "disagree", "dont think so"],
        ["wait really?", "hmm idk about that", "u sure?", "lowkey disagree ngl", "interesting take"],
    ),
    _category(
        "confusion",
        ["what", "huh", "wdym", "confused", "idk", "i dont get it", "explain", "?"],
        ["wdym?", "wait what happened", "im confused too ngl", "huh??", "explain pls"],
    ),
    _category(
        "excitement",
        ["omg", "yay", "lets go", "pog", "hype", "excited", "cant wait", "finally", "yess"],
        ["LETS GOOO", "yooo thats hype", "W", "im so hyped", "ayyyy", "poggers"],
    ),
    _category(
        "sadness",
        ["sad", "upset", "depressed", "crying", "bad day", "not ok", "stressed", "tired", "exhausted"],
        ["aw man that sucks", "u ok?", "that's rough :(", "im here if u wanna talk", "sending good vibes"],
    ),
    _category(
        "bored",
        ["bored", "boring", "nothing to do", "so bored"],
        ["same tbh", "mood", "lets do something", "boredom hits different", "felt that"],
    ),
    _category(
        "gaming",
        ["game", "gaming", "play", "playing", "fortnite", "minecraft", "valorant", "roblox", "cod", "apex"],
        ["ooh what game", "gaming time lets go", "what u playing?", "nice what game tho", "im down to play"],
    ),
    _category(
        "music",
        ["music", "song", "listening", "spotify", "album", "artist", "playlist", "beat"],
        ["ooh what song", "drop the playlist", "music hits different", "whats ur fav artist", "banger?"],
    ),
    _category(
        "food",
        ["food", "eat", "eating", "hungry", "lunch", "dinner", "breakfast", "snack", "cooking"],
        ["im hungry now thanks", "what u eating", "food pics or it didnt happen", "that sounds good ngl"],
    ),
    _category(
        "school",
        ["school", "homework", "class", "teacher", "test", "exam", "studying", "assignment"],
        ["school is pain", "rip", "good luck with that", "homework can wait", "felt that"],
    ),
    _category(
        "work",
        ["work", "job", "boss", "coworker", "shift", "working"],
        ["work grind", "get that bread", "adulting moment", "sounds rough", "at least u getting paid"],
    ),
    _category(
        "love",
        ["crush", "boyfriend", "girlfriend", "dating", "relationship", "love", "like someone"],
        ["ooh spill the tea", "love that for u", "thats cute ngl", "relationship goals", "tell me more"],
    ),
    _category(
        "questions",
        ["do you", "are you", "can you", "will you", "would you", "have you", "what do you think"],
        ["hmm good question", "honestly idk lol", "maybe?", "depends tbh", "what do u think"],
    ),
)

# topic keyword -> category name, checked in order
DEFAULT_TOPIC_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("game", "gaming"),
    ("music", "music"),
    ("food", "food"),
)

FALLBACK_RESPONSES: tuple[str, ...] = (
    "lol", "nice", "oh word", "thats cool", "fr", "interesting",
    "tell me more", "wait really", "no way", "hmm", "true true",
)


def normalize(text: Any) -> str:
    if not isinstance(text, str):
        return ""
    return text.lower().strip()


def match_trigger(content: str, trigger: str) -> bool:
    """Exact or substring match; ``content`` is already normalised."""
    return content == trigger or trigger in content


class KeywordMatcher:
    def __init__(
        self,
        categories: Sequence[ResponseCategory] = DEFAULT_CATEGORIES,
        topic_keywords: Sequence[tuple[str, str]] = DEFAULT_TOPIC_KEYWORDS,
        fallback: Sequence[str] = FALLBACK_RESPONSES,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not fallback:
            raise ValueError("fallback responses must not be empty")
        self.categories = tuple(categories)
        self.topic_keywords = tuple(topic_keywords)
        self.fallback = tuple(fallback)
        self.rng = rng or random.Random()
        self._by_name = {category.name: category for category in self.categories}

    def category(self, name: str) -> Optional[ResponseCategory]:
        return self._by_name.get(name)

    def match_category(self, text: Any) -> Optional[ResponseCategory]:
        """First category (declaration order) with a trigger in ``text``."""
        content = normalize(text)
        if not content:
            return None
        for category in self.categories:
            for trigger in category.triggers:
                if match_trigger(content, trigger):
                    return category
        return None

    def topic_category(self, topic: Any) -> Optional[ResponseCategory]:
        hint = normalize(topic)
        if not hint:
            return None
        for keyword, name in self.topic_keywords:
            if keyword in hint:
                return self._by_name.get(name)
        return None

    def respond(self, text: Any, topic: Any = None) -> str:
        category = self.match_category(text) or self.topic_category(topic)
        if category is not None and category.responses:
            return self.rng.choice(category.responses)
        return self.rng.choice(self.fallback)
