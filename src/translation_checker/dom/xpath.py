# src/translation_checker/dom/xpath.py
from bs4 import BeautifulSoup, Tag


def _is_element(node) -> bool:
    # The BeautifulSoup object is a Tag too, but it stands for the document node.
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def get_xpath(element: Tag) -> str:
    """
    Returns a path that addresses `element` within its document.

    Elements with an id get the shortcut `//*[@id="..."]`. Everything else gets
    an absolute positional path such as `/html/body/div[2]/span`, where the
    index counts preceding element siblings with the same tag name and is left
    out for the first one. Detached elements yield whatever chain is available.
    """
    element_id = element.get("id") if _is_element(element) else None
    if element_id:
        return f'//*[@id="{element_id}"]'

    parts = []
    current = element
    while _is_element(current):
        index = 0
        for sibling in current.previous_siblings:
            if isinstance(sibling, Tag) and sibling.name == current.name:
                index += 1

        tag_name = current.name.lower()
        parts.insert(0, f"{tag_name}[{index + 1}]" if index > 0 else tag_name)
        current = current.parent

    return "/" + "/".join(parts)
