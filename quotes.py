"""Motivational quotes shown under the entry form."""
from __future__ import annotations

import random
from typing import Optional

MOTIVATIONAL_QUOTES = [
    "The choices you make today decide your tomorrow.",
    "Weight loss is about consistency, not speed.",
    "The moment you want to quit is often right before you succeed.",
    "One step at a time, a little further every day.",
    "Change your eating habits and your body will follow.",
    "Results that come easy tend to leave just as easily.",
    "A healthy body is the result of healthy choices.",
    "Today's sweat is tomorrow's confidence.",
    "Every day you move toward your goal is a good day.",
    "You only fail when you stop trying. Keep going.",
]


def random_quote(rng=random, exclude: Optional[str] = None) -> str:
    choices = [q for q in MOTIVATIONAL_QUOTES if q != exclude] or MOTIVATIONAL_QUOTES
    return rng.choice(choices)
