"""Reveal animation timeline.

Four properties animate on independent tracks. The timeline only describes
values over time; it never decides when the reveal is committed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List

Easing = Callable[[float], float]

REVEAL_DURATION_MS = 2000.0


def linear(t: float) -> float:
    return t


def ease(t: float) -> float:
    return t * t


def cubic(t: float) -> float:
    return t * t * t


def back(overshoot: float = 1.70158) -> Easing:
    def _back(t: float) -> float:
        return t * t * ((overshoot + 1) * t - overshoot)

    return _back


def ease_out(easing: Easing) -> Easing:
    def _out(t: float) -> float:
        return 1 - easing(1 - t)

    return _out


@dataclass(frozen=True)
class AnimatedProps:
    container_opacity: float
    card_translate_y: float
    card_scale: float
    text_opacity: float


INITIAL_PROPS = AnimatedProps(container_opacity=0.0, card_translate_y=50.0, card_scale=0.9, text_opacity=0.0)
FINAL_PROPS = AnimatedProps(container_opacity=1.0, card_translate_y=0.0, card_scale=1.0, text_opacity=1.0)


@dataclass(frozen=True)
class Tween:
    to_value: float
    duration_ms: float
    easing: Easing = linear


@dataclass
class Track:
    start_value: float
    tweens: List[Tween] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        return sum(t.duration_ms for t in self.tweens)

    def sample(self, elapsed_ms: float) -> float:
        value = self.start_value
        remaining = max(elapsed_ms, 0.0)
        for tween in self.tweens:
            if remaining >= tween.duration_ms:
                value = tween.to_value
                remaining -= tween.duration_ms
                continue
            progress = tween.easing(remaining / tween.duration_ms)
            return value + (tween.to_value - value) * progress
        return value


def default_tracks() -> Dict[str, Track]:
    return {
        "container_opacity": Track(
            INITIAL_PROPS.container_opacity,
            [Tween(FINAL_PROPS.container_opacity, 500, ease_out(ease))],
        ),
        "card_translate_y": Track(
            INITIAL_PROPS.card_translate_y,
            [Tween(FINAL_PROPS.card_translate_y, 1000, ease_out(cubic))],
        ),
        "card_scale": Track(
            INITIAL_PROPS.card_scale,
            [Tween(FINAL_PROPS.card_scale, 1000, ease_out(back(1.2)))],
        ),
        "text_opacity": Track(
            INITIAL_PROPS.text_opacity,
            [
                Tween(0.0, 800),
                Tween(FINAL_PROPS.text_opacity, 500, ease_out(ease)),
            ],
        ),
    }


class RevealTimeline:
    def __init__(self, tracks: Dict[str, Track] | None = None, duration_ms: float = REVEAL_DURATION_MS) -> None:
        self.tracks = tracks or default_tracks()
        self.duration_ms = duration_ms

    def sample(self, elapsed_ms: float) -> AnimatedProps:
        return AnimatedProps(**{name: track.sample(elapsed_ms) for name, track in self.tracks.items()})
