"""Unique CSS Selector — 하이라이트 side-channel 에 쓰일 요소 고유 selector 를 생성한다."""
from bs4 import BeautifulSoup, Tag


def unique_css_selector(node: Tag) -> str:
    """루트까지 올라가며 `tag#id`, `tag:nth-of-type(k)`, `tag` 를 " > " 로 잇는다.

    bs4 Tag 의 == 는 구조 비교이므로 형제 위치는 `is` 로 판별한다.
    """
    stack = []
    el = node
    while (
        isinstance(el, Tag)
        and not isinstance(el, BeautifulSoup)
        and el.parent is not None
        and el.name.lower() != 'html'
    ):
        name = el.name.lower()
        same_name = el.parent.find_all(el.name, recursive=False)
        sib_index = 0
        for i, sib in enumerate(same_name):
            if sib is el:
                sib_index = i
                break

        el_id = el.get('id')
        if el_id:
            stack.append(f"{name}#{el_id}")
        elif len(same_name) > 1:
            stack.append(f"{name}:nth-of-type({sib_index + 1})")
        else:
            stack.append(name)
        el = el.parent

    return ' > '.join(reversed(stack))
