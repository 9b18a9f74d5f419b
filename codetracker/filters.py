# -*- coding: utf-8 -*-
"""
Plausibility check for promo-code candidates.
"""

import re

MIN_LENGTH = 3
MAX_LENGTH = 20

ALNUM_RE = re.compile(r"[A-Za-z0-9]+")
DOTTED_RE = re.compile(r"[A-Za-z0-9.]+")
DIGITS_RE = re.compile(r"[0-9]+")

# Words that show up in bold/list markup on code pages but are never codes
STOPLIST = frozenset([
    "LEGEND", "MUSHROOM", "GAME", "PLAY", "CODE", "GIFT", "REWARD",
    "CLICK", "HERE", "LINK", "FOLLOW", "SUBSCRIBE", "LIKE", "SHARE",
    "DOWNLOAD", "INSTALL", "UPDATE", "VERSION", "LEVEL", "QUEST",
    "ITEM", "WEAPON", "ARMOR", "SKILL", "SPELL", "MAGIC", "ATTACK",
    "DEFENSE", "HEALTH", "MANA", "EXPERIENCE", "GOLD", "SILVER",
    "BRONZE", "DIAMOND", "RUBY", "EMERALD", "SAPPHIRE", "CRYSTAL",
    "STONE", "WOOD", "METAL", "FIRE", "WATER", "EARTH", "AIR",
    "WIND", "THUNDER", "LIGHT", "DARK", "HOLY", "EVIL", "GOOD",
    "BAD", "STRONG", "WEAK", "FAST", "SLOW", "BIG", "SMALL",
    "THE", "AND", "FOR", "WITH", "FROM", "THIS", "THAT", "HAVE",
    "WILL", "YOUR", "MORE", "WHEN", "WHICH", "THEIR", "ABOUT",
    "ALSO", "BEEN", "BOTH", "EACH", "EVEN", "FIND", "FIRST", "FOUND",
    "GIVE", "GOES", "HAND", "HIGH", "HOME", "JUST", "KNOW", "LAST",
    "LIFE", "LONG", "LOOK", "MADE", "MAKE", "MANY", "MOST", "MUCH",
    "MUST", "NAME", "NEED", "NEXT", "ONLY", "OPEN", "OVER", "PART",
    "SAME", "SUCH", "TAKE", "THAN", "THEM", "THEN", "THEY", "TIME",
    "VERY", "WANT", "WHAT", "WORK", "YEAR", "TWITTER", "FACEBOOK",
    "DISCORD", "INSTAGRAM", "YOUTUBE", "TIKTOK", "BLUESKY", "REDDIT",
    "TWITCH", "STEAM", "APPLE", "ANDROID", "BLOG", "FAQ", "NEWS",
    "CONTACT", "CAREERS", "SUPPORT", "ACCOUNT", "LOGIN",
    "SIGNUP", "MENU", "SEARCH", "OVERVIEW", "GUIDE", "TUTORIAL",
    "HELP", "SETTINGS", "YES", "NO", "OK", "NULL", "FALSE", "TRUE",
    "UNDEFINED", "NEWSLETTER", "PRIVACY", "TERMS", "SUSTAINABILITY",
    "LEAKS", "COMMON", "ACHIEVEMENTS", "COMPANION", "MOUNT", "PRAYER",
    "RELIC", "TECH", "ARCHER", "MAGE", "WARRIOR", "AVIAN", "AWAKENING",
    "BREEDING", "FAMILY", "PALS", "RUNESTONES", "SHOP", "SHOWDOWN",
    "SKILLS", "SPORES", "DUNGEON", "CALENDARS", "EVENT", "CALCULATORS",
    "ARTIFACT", "FEATHER", "GEAR", "TOOLS", "GAMEKNOT",
])


def is_stopword(candidate: str) -> bool:
    return candidate.upper() in STOPLIST


def is_valid_code(candidate: str, allow_dots: bool = False,
                  reject_all_digits: bool = False) -> bool:
    """
    True if `candidate` looks like a redeemable code.

    Length 3-20, letters and digits only (plus "." when `allow_dots`),
    not a bare number when `reject_all_digits`, and not a stoplisted word.
    """
    if not candidate or not MIN_LENGTH <= len(candidate) <= MAX_LENGTH:
        return False

    charset = DOTTED_RE if allow_dots else ALNUM_RE
    if not charset.fullmatch(candidate):
        return False

    if reject_all_digits and DIGITS_RE.fullmatch(candidate):
        return False

    return not is_stopword(candidate)
