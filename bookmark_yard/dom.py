"""Small helpers for treating a BeautifulSoup tree as a live page document."""
from typing import List, Optional

from bs4 import BeautifulSoup, Tag


def parse_document(html: str) -> BeautifulSoup:
    """Parse page markup into a mutable document."""
    return BeautifulSoup(html, "html.parser")


def class_list(el: Tag) -> List[str]:
    classes = el.get("class") or []
    # Tags created with new_tag keep class as a plain string
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def has_class(el: Tag, name: str) -> bool:
    return name in class_list(el)


def toggle_class(el: Tag, name: str, force: Optional[bool] = None) -> bool:
    """Add or remove a class, like ``classList.toggle``.

    Args:
        el: Element to update
        name: Class name
        force: True to add, False to remove, None to flip

    Returns:
        Whether the class is present afterwards
    """
    classes = class_list(el)
    present = name in classes
    wanted = (not present) if force is None else force

    if wanted and not present:
        classes.append(name)
    elif not wanted and present:
        classes.remove(name)

    if classes:
        el["class"] = classes
    elif el.has_attr("class"):
        del el["class"]

    return wanted


def set_display(el: Tag, value: str) -> None:
    """Set the inline ``display`` style; an empty value clears it."""
    if value:
        el["style"] = f"display: {value}"
    elif el.has_attr("style"):
        del el["style"]


def is_displayed(el: Tag) -> bool:
    return "display: none" not in (el.get("style") or "")


def closest(el: Optional[Tag], class_name: str) -> Optional[Tag]:
    """Return the element or its nearest ancestor carrying a class."""
    while isinstance(el, Tag) and not isinstance(el, BeautifulSoup):
        if has_class(el, class_name):
            return el
        el = el.parent
    return None


def create_element(document: BeautifulSoup, name: str, text: Optional[str] = None, **attrs: str) -> Tag:
    """Create a detached element; ``class_`` sets the class attribute."""
    if "class_" in attrs:
        attrs["class"] = attrs.pop("class_")
    el = document.new_tag(name, attrs=attrs)
    if text is not None:
        el.string = text
    return el


def input_value(el: Optional[Tag]) -> str:
    if el is None:
        return ""
    return el.get("value") or ""


def set_input_value(el: Tag, value: str) -> None:
    el["value"] = value


def set_open(group: Tag, is_open: bool) -> None:
    """Open or close a ``<details>`` element."""
    if is_open:
        group["open"] = ""
    elif group.has_attr("open"):
        del group["open"]


def is_open(group: Tag) -> bool:
    return group.has_attr("open")
