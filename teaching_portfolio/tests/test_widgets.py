from __future__ import annotations

from teaching_portfolio.content import Activity
from teaching_portfolio.widgets import (
    DESCRIPTION_CLIP_THRESHOLD,
    ActivityCardStates,
    Carousel,
    ExpandablePanel,
)


def _activity(activity_id: str, images=("a.jpg", "b.jpg")) -> Activity:
    return Activity(
        id=activity_id,
        title="Title",
        date="1 Jan",
        location="Room",
        description="Short",
        images=tuple(images),
    )


def test_carousel_without_images_shows_placeholder_and_no_controls():
    carousel = Carousel([None, "", None])
    assert carousel.shows_placeholder
    assert not carousel.can_navigate
    assert carousel.current is None
    assert carousel.next() == 0


def test_carousel_with_one_image_has_no_controls():
    carousel = Carousel(["only.jpg"])
    assert not carousel.shows_placeholder
    assert not carousel.can_navigate
    assert carousel.current == "only.jpg"
    carousel.next()
    carousel.prev()
    assert carousel.index == 0


def test_carousel_wraps_in_both_directions():
    carousel = Carousel(["a.jpg", None, "b.jpg", "c.jpg"])
    assert carousel.images == ("a.jpg", "b.jpg", "c.jpg")
    assert carousel.can_navigate

    assert carousel.prev() == 2
    assert carousel.current == "c.jpg"
    assert carousel.next() == 0
    assert carousel.next() == 1
    assert carousel.next() == 2
    assert carousel.next() == 0


def test_carousel_clamps_index_when_images_shrink():
    carousel = Carousel(["a.jpg", "b.jpg", "c.jpg"])
    carousel.prev()
    assert carousel.index == 2

    carousel.replace_images(["a.jpg", "b.jpg"])
    assert carousel.index == 1
    assert carousel.current == "b.jpg"

    carousel.replace_images([])
    assert carousel.index == 0
    assert carousel.current is None


def test_panel_short_description_without_highlights_offers_no_toggle():
    panel = ExpandablePanel("x" * DESCRIPTION_CLIP_THRESHOLD)
    assert not panel.can_expand
    assert panel.toggle() is False
    assert panel.shows_fade


def test_panel_long_description_can_expand():
    panel = ExpandablePanel("x" * (DESCRIPTION_CLIP_THRESHOLD + 1))
    assert panel.can_expand
    assert panel.toggle() is True
    assert not panel.shows_fade
    assert panel.toggle() is False


def test_panel_highlights_are_shown_only_when_expanded():
    panel = ExpandablePanel("Short", ["first", "second"])
    assert panel.can_expand
    assert panel.visible_highlights == ()

    panel.toggle()
    assert panel.visible_highlights == ("first", "second")


def test_panel_treats_non_string_description_as_empty():
    panel = ExpandablePanel(None)
    assert panel.description == ""
    assert not panel.can_expand


def test_card_states_are_independent_per_activity():
    states = ActivityCardStates()
    first = states.state_for(_activity("one"))
    second = states.state_for(_activity("two"))

    first.carousel.next()
    first.panel.expanded = True

    assert second.carousel.index == 0
    assert second.panel.expanded is False
    assert states.state_for(_activity("one")) is first
    assert len(states) == 2
    assert "two" in states
