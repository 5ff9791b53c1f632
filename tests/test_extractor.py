from wikiterm.extractor import extract, image_url
from wikiterm.models import HEADER_MARKER, ImageBlock, TextBlock
from wikiterm.sanitizer import sanitize

UPLOAD = "//upload.wikimedia.org/wikipedia/commons/thumb/a/ab/Cat.jpg/220px-Cat.jpg"


def _img(src: str, width: str = "220") -> str:
    return f'<img alt="" src="{src}" decoding="async" width="{width}" height="150">'


def test_infobox_scenario() -> None:
    html = '<table class="infobox">X</table><p>Hello</p><img src="//upload.wikimedia.org/a.png" width="200">'
    infobox, cleaned = sanitize(html)
    blocks, urls, chapters = extract(cleaned)

    assert "X" in infobox
    assert blocks == [TextBlock("Hello"), ImageBlock("https://upload.wikimedia.org/a.png")]
    assert urls == ["https://upload.wikimedia.org/a.png"]
    assert chapters == []


def test_blocks_keep_document_order() -> None:
    html = (
        "<p>one</p>"
        + _img(UPLOAD)
        + "<p>two</p>"
        + _img(UPLOAD.replace("Cat", "Dog"))
        + _img(UPLOAD.replace("Cat", "Cow"))
        + "<p>three</p>"
    )
    blocks, urls, _ = extract(html)

    kinds = [type(b).__name__ for b in blocks]
    assert kinds == ["TextBlock", "ImageBlock", "TextBlock", "ImageBlock", "ImageBlock", "TextBlock"]
    assert [b.text for b in blocks if isinstance(b, TextBlock)] == ["one", "two", "three"]
    assert urls == [b.url for b in blocks if isinstance(b, ImageBlock)]
    assert urls[0] == "https:" + UPLOAD


def test_small_foreign_and_vector_images_are_dropped() -> None:
    html = (
        "<p>a</p>"
        + _img(UPLOAD, width="20")
        + _img("//example.org/big.jpg", width="400")
        + _img("//upload.wikimedia.org/wikipedia/commons/x/Map.svg", width="400")
        + _img(UPLOAD, width="100")
        + '<img src="' + UPLOAD + '">'
        + "<p>b</p>"
    )
    blocks, urls, _ = extract(html)
    assert urls == []
    assert blocks == [TextBlock("a"), TextBlock("b")]


def test_image_url_parsing() -> None:
    assert image_url(' src="//upload.wikimedia.org/x.jpg" width="300px"') == "https://upload.wikimedia.org/x.jpg"
    assert image_url(' src="https://upload.wikimedia.org/x.jpg" width="101"') == "https://upload.wikimedia.org/x.jpg"
    assert image_url(' data-src="//upload.wikimedia.org/x.jpg" width="300"') is None
    assert image_url(' src="//upload.wikimedia.org/x.jpg" width="300"', min_width=400) is None


def test_headers_become_chapters() -> None:
    html = (
        "<p>Intro text.</p>"
        "<h2>Contents</h2>"
        "<h2>History</h2><p>Old times.[1]</p>"
        + _img(UPLOAD)
        + "<h2>Biology</h2><p>Cells.</p><h3>Anatomy</h3><p>Bones.</p>"
    )
    blocks, _, chapters = extract(html)

    assert [(c.index, c.title) for c in chapters] == [(1, "History"), (2, "Biology"), (3, "Anatomy")]
    assert [c.block_position for c in chapters] == [0, 2, 2]
    assert blocks[0] == TextBlock(f"Intro text.\n{HEADER_MARKER}History\nOld times.")
    assert blocks[2] == TextBlock(f"{HEADER_MARKER}Biology\nCells.\n{HEADER_MARKER}Anatomy\nBones.")


def test_chapter_positions_are_bounded_and_ordered() -> None:
    html = "".join(f"<h2>S{i}</h2><p>t{i}</p>" + _img(UPLOAD) for i in range(5))
    blocks, _, chapters = extract(html)

    positions = [c.block_position for c in chapters]
    assert positions == sorted(positions)
    assert all(0 <= p <= len(blocks) for p in positions)
    assert [c.index for c in chapters] == [1, 2, 3, 4, 5]


def test_boilerplate_lines_and_empty_segments_produce_no_blocks() -> None:
    html = (
        "<p>This article is part of a series on cats</p>"
        "<hr>"
        + _img(UPLOAD)
        + "<p>[5]</p>"
    )
    blocks, urls, _ = extract(html)
    assert blocks == [ImageBlock("https:" + UPLOAD)]
    assert urls == ["https:" + UPLOAD]


def test_image_fragment_without_tag_end_is_skipped() -> None:
    blocks, urls, _ = extract("<p>start</p><img src=")
    assert blocks == [TextBlock("start")]
    assert urls == []
