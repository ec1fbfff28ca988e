"""selector 유닛 테스트."""
from bs4 import BeautifulSoup
from preview_sync.selector import unique_css_selector


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, 'html.parser')


class TestUniqueCssSelector:
    def test_full_document_path(self):
        soup = _soup('<html><body><div id="main"><p>a</p><p>b</p></div></body></html>')
        node = soup.find_all('p')[1]
        selector = unique_css_selector(node)
        assert selector == 'body > div#main > p:nth-of-type(2)'
        assert soup.select_one(selector) is node

    def test_fragment_root(self):
        soup = _soup('<p>only</p>')
        assert unique_css_selector(soup.p) == 'p'

    def test_identical_siblings_are_distinguished(self):
        # 내용이 같아 == 로는 구분되지 않는 형제
        soup = _soup('<section><p>same</p><p>same</p><p>same</p></section>')
        paragraphs = soup.find_all('p')
        assert paragraphs[0] == paragraphs[2]
        selectors = [unique_css_selector(p) for p in paragraphs]
        assert selectors == [
            'section > p:nth-of-type(1)',
            'section > p:nth-of-type(2)',
            'section > p:nth-of-type(3)',
        ]
        for p, selector in zip(paragraphs, selectors):
            assert soup.select_one(selector) is p

    def test_other_tag_names_do_not_count(self):
        soup = _soup('<div><h2>t</h2><p>a</p><ul><li>x</li></ul></div>')
        assert unique_css_selector(soup.li) == 'div > ul > li'

    def test_id_is_used_where_present(self):
        soup = _soup('<div><p id="intro">a</p><p>b</p></div>')
        assert unique_css_selector(soup.find(id='intro')) == 'div > p#intro'
