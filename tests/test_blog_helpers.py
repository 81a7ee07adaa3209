from careerclarified.models import BlogPost
from careerclarified.services.blog import (
    extract_excerpt,
    extract_title,
    generate_slug,
    strip_tags,
    unique_slug,
)


class TestGenerateSlug:
    def test_example_title(self):
        assert generate_slug("Senior  Engineer! (Remote)") == "senior-engineer-remote"

    def test_underscores_and_dashes_collapse(self):
        assert generate_slug("resume__tips -- 2026") == "resume-tips-2026"

    def test_leading_and_trailing_separators_removed(self):
        assert generate_slug("  -Hello World-  ") == "hello-world"

    def test_non_ascii_letters_dropped(self):
        assert generate_slug("Café Résumé Tips") == "caf-rsum-tips"


def test_extract_title_from_h1():
    content = "<h1 class='title'>How to <em>Ace</em> Interviews</h1><p>Body</p>"
    assert extract_title(content, "interviews") == "How to Ace Interviews"


def test_extract_title_falls_back_to_topic():
    assert extract_title("<h2>Section</h2>", "salary negotiation") == "Salary negotiation"


def test_extract_excerpt_truncates_text():
    content = "<h1>Title</h1><p>" + "a" * 200 + "</p>"
    excerpt = extract_excerpt(content)
    assert excerpt.startswith("Titleaaa")
    assert excerpt.endswith("...")
    assert len(excerpt) == 153


def test_extract_excerpt_short_text_untouched():
    assert extract_excerpt("<p>Short post</p>") == "Short post"


def test_strip_tags():
    assert strip_tags("<h2>Tips</h2><a href='/x'>link</a>") == "Tipslink"


class TestUniqueSlug:
    def test_free_slug_unchanged(self, db_session):
        assert unique_slug(db_session, "resume-tips") == "resume-tips"

    def test_taken_slug_gets_timestamp(self, db_session):
        db_session.add(BlogPost(title="Resume Tips", slug="resume-tips", content="<p>x</p>"))
        db_session.commit()
        assert unique_slug(db_session, "resume-tips", now_ms=1700000000000) == "resume-tips-1700000000000"
