from __future__ import annotations

from typing import Any, Iterator

from conftest import make_node
from frontend.components.db_card import db_card
from frontend.components.lb_item import lb_item
from frontend.i18n import Translator
from frontend.status import aggregate_node

T = Translator("en", {"delayLabel": "Delay", "targetProd": "Production"})


def _walk(component: Any) -> Iterator[Any]:
    yield component
    children = getattr(component, "children", None)
    if isinstance(children, (list, tuple)):
        for child in children:
            if child is not None:
                yield from _walk(child)
    elif children is not None and not isinstance(children, str):
        yield from _walk(children)


def _by_class(component: Any, class_name: str) -> Any:
    return next(c for c in _walk(component) if getattr(c, "className", None) == class_name)


def _text(component: Any) -> str:
    return "".join(c for c in _walk(component) if isinstance(c, str)) + "".join(
        c.children for c in _walk(component) if isinstance(getattr(c, "children", None), str)
    )


def test_unknown_delay_renders_placeholder() -> None:
    view = aggregate_node(make_node(disaster_dgdelay=None))

    delay = _by_class(db_card(view, "disaster", T), "delay-item")

    assert "--" in _text(delay)
    assert "None" not in _text(delay)


def test_known_delay_renders_seconds() -> None:
    view = aggregate_node(make_node(disaster_dgdelay=42))

    delay = _by_class(db_card(view, "disaster", T), "delay-item")

    assert "42s" in _text(delay)


def test_delay_hidden_when_standby_down() -> None:
    view = aggregate_node(make_node(disaster_alive=False, disaster_dgdelay=42))

    delay = _by_class(db_card(view, "disaster", T), "delay-item")

    assert "42s" not in _text(delay)


def test_lb_item_shows_translated_target() -> None:
    item = lb_item(aggregate_node(make_node()), T)
    assert _text(_by_class(item, "lb-target-env")) == "Production"
