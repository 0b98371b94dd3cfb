# File: tests/test_platforms.py
import pytest

from blog_scout.crawler.platforms import NAVER, TISTORY, detect_platform


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://blog.naver.com/foodie/223123456789", NAVER),
        ("https://m.blog.naver.com/foodie/223123456789", NAVER),
        ("https://travel.tistory.com/12", TISTORY),
        ("https://example.com/post/1", None),
        ("", None),
        ("   ", None),
        (None, None),
    ],
)
def test_detect_platform(url, expected):
    assert detect_platform(url) is expected


def test_naver_post_view_is_tried_first():
    url = "https://blog.naver.com/foodie/223123456789"
    assert NAVER.candidate_urls(url) == [
        "https://blog.naver.com/PostView.naver?blogId=foodie&logNo=223123456789",
        url,
    ]


def test_naver_mobile_post_gets_post_view_too():
    url = "https://m.blog.naver.com/foodie/223123456789"
    candidates = NAVER.candidate_urls(url)
    assert candidates[0] == "https://blog.naver.com/PostView.naver?blogId=foodie&logNo=223123456789"
    assert candidates[1] == url


def test_naver_post_view_emitted_once():
    url = "https://blog.naver.com/PostView.naver?blogId=foodie&logNo=223123456789"
    assert NAVER.candidate_urls(url) == [url]


def test_naver_other_url_kept_as_is():
    url = "https://blog.naver.com/foodie"
    assert NAVER.candidate_urls(url) == [url]


def test_tistory_adds_mobile_variant():
    assert TISTORY.candidate_urls("https://travel.tistory.com/12") == [
        "https://travel.tistory.com/12",
        "https://travel.tistory.com/m/12",
    ]


def test_tistory_mobile_url_not_duplicated():
    url = "https://travel.tistory.com/m/12"
    assert TISTORY.candidate_urls(url) == [url]


@pytest.mark.parametrize("url", ["", "https://example.com/a/1", "https://blog.naver.com/a/1"])
def test_tistory_rejects_foreign_urls(url):
    assert TISTORY.candidate_urls(url) == []


def test_naver_rejects_foreign_urls():
    assert NAVER.candidate_urls("https://travel.tistory.com/12") == []
    assert NAVER.candidate_urls("") == []
